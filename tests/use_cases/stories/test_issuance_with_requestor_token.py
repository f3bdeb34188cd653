"""Story: an issuer issues an email credential on a server that requires a requestor token."""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from irma import (
    CredentialBuilder,
    ExtendedRequestBuilder,
    IrmaClientBuilder,
    IssuanceRequestBuilder,
    NetworkError,
    SessionStatus,
    SessionType,
)
from tests.fixtures import IRMA_URL, REQUESTOR_TOKEN, FakeIrmaServer


def issuance_request():
    return (
        IssuanceRequestBuilder()
        .add_credential(
            CredentialBuilder("irma-demo.sidn-pbdf.email")
            .attribute("email", "test@example.com")
            .validity_period(timedelta(days=30))
            .build()
        )
        .build()
    )


@pytest.mark.asyncio
async def test_issuance_with_requestor_token(
    authenticated_irma_server: FakeIrmaServer,
) -> None:
    """
    Story: authenticated issuance.

    Phase1: Issuer starts the session with its requestor token
    Phase2: Wallet accepts the credential; the result is returned
    """
    transport = httpx.ASGITransport(app=authenticated_irma_server.app)
    builder = IrmaClientBuilder(IRMA_URL).token_authentication(REQUESTOR_TOKEN)

    async with builder.build_async(transport=transport) as client:
        # Phase1
        session = await client.request(issuance_request())
        assert session.session_ptr.session_type is SessionType.ISSUING

        sent = authenticated_irma_server.received[str(session.token)]
        (credential,) = sent["credentials"]
        assert credential["credential"] == "irma-demo.sidn-pbdf.email"
        assert credential["attributes"] == {"email": "test@example.com"}
        assert isinstance(credential["validity"], int)

        # Phase2
        authenticated_irma_server.advance(str(session.token), "DONE")
        result = await client.result(session.token)

    assert result.status is SessionStatus.DONE
    assert result.sessiontype is SessionType.ISSUING
    assert result.disclosed == ()


@pytest.mark.asyncio
async def test_extended_issuance_request(
    authenticated_irma_server: FakeIrmaServer,
) -> None:
    """Story: the issuer asks for a short connect timeout and a status callback."""
    transport = httpx.ASGITransport(app=authenticated_irma_server.app)
    builder = IrmaClientBuilder(IRMA_URL).token_authentication(REQUESTOR_TOKEN)
    extended = (
        ExtendedRequestBuilder(issuance_request())
        .timeout(60)
        .callback_url("https://issuer.example.com/irma-callback")
        .build()
    )

    async with builder.build_async(transport=transport) as client:
        session = await client.request_extended(extended)

    sent = authenticated_irma_server.received[str(session.token)]
    assert sent["timeout"] == 60
    assert sent["callbackUrl"] == "https://issuer.example.com/irma-callback"
    assert sent["request"]["@context"] == "https://irma.app/ld/request/issuance/v2"
    assert "validity" not in sent


@pytest.mark.asyncio
async def test_missing_requestor_token_is_rejected(
    authenticated_irma_server: FakeIrmaServer,
) -> None:
    """Story: a misconfigured issuer without a token cannot start sessions."""
    transport = httpx.ASGITransport(app=authenticated_irma_server.app)

    async with IrmaClientBuilder(IRMA_URL).build_async(transport=transport) as client:
        with pytest.raises(NetworkError) as exc_info:
            await client.request(issuance_request())

    assert exc_info.value.status_code == 403
    assert authenticated_irma_server.received == {}
