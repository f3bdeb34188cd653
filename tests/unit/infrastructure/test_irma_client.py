"""Unit tests for the blocking IRMA client against a mocked transport."""

from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest

from irma import (
    AttributeRequest,
    DisclosureRequestBuilder,
    ExtendedRequestBuilder,
    InvalidUrlError,
    IrmaClient,
    IrmaClientBuilder,
    NetworkError,
    SessionCancelledError,
    SessionNotFinishedError,
    SessionStatus,
    SessionTimedOutError,
    SessionToken,
    SessionType,
)

BASE_URL = "http://irma.test/"

SESSION_DATA = {
    "sessionPtr": {"u": "https://irma.test/irma/session/abc", "irmaqr": "disclosing"},
    "token": "T1",
}

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler, token: str | None = None) -> IrmaClient:
    builder = IrmaClientBuilder(BASE_URL)
    if token is not None:
        builder = builder.token_authentication(token)
    return builder.build(transport=httpx.MockTransport(handler))


def result_body(status: str) -> dict:
    return {"token": "T1", "type": "disclosing", "status": status}


@pytest.fixture
def recorded() -> List[httpx.Request]:
    return []


@pytest.fixture
def disclosure_request():
    return (
        DisclosureRequestBuilder()
        .add_discon([[AttributeRequest.simple("pbdf.sidn-pbdf.email.email")]])
        .build()
    )


class TestConstruction:
    """Test eager URL validation and secret handling."""

    @pytest.mark.parametrize(
        "url", ["not a url", "ftp://irma.test/", "http://", "irma.test:8088"]
    )
    def test_invalid_url_fails_before_any_io(self, url: str) -> None:
        with pytest.raises(InvalidUrlError):
            IrmaClient(url)

    def test_builder_validates_url_eagerly(self) -> None:
        with pytest.raises(InvalidUrlError):
            IrmaClientBuilder("::bad")

    def test_invalid_url_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            IrmaClient("")

    def test_repr_redacts_token(self) -> None:
        client = IrmaClientBuilder(BASE_URL).token_authentication("s3cr3t-token").build()

        assert "s3cr3t-token" not in repr(client)
        assert "s3cr3t-token" not in str(client)
        assert "TokenAuth" in repr(client)
        client.close()


class TestRequest:
    """Test starting sessions."""

    def test_request_posts_wire_body(
        self, recorded: List[httpx.Request], disclosure_request
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(200, json=SESSION_DATA)

        with make_client(handler) as client:
            session = client.request(disclosure_request)

        assert session.token == SessionToken("T1")
        assert session.session_ptr.session_type is SessionType.DISCLOSING
        assert session.session_ptr.u == "https://irma.test/irma/session/abc"

        (sent,) = recorded
        assert sent.method == "POST"
        assert str(sent.url) == "http://irma.test/session"
        assert "authorization" not in sent.headers
        assert json.loads(sent.content) == {
            "@context": "https://irma.app/ld/request/disclosure/v2",
            "disclose": [[["pbdf.sidn-pbdf.email.email"]]],
        }

    def test_token_authentication_sends_raw_token(
        self, recorded: List[httpx.Request], disclosure_request
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(200, json=SESSION_DATA)

        with make_client(handler, token="requestor-secret") as client:
            client.request(disclosure_request)

        assert recorded[0].headers["authorization"] == "requestor-secret"

    def test_request_extended_posts_nested_request(
        self, recorded: List[httpx.Request], disclosure_request
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(200, json=SESSION_DATA)

        extended = ExtendedRequestBuilder(disclosure_request).timeout(60).build()
        with make_client(handler, token="requestor-secret") as client:
            session = client.request_extended(extended)

        assert session.token == SessionToken("T1")
        assert recorded[0].headers["authorization"] == "requestor-secret"
        body = json.loads(recorded[0].content)
        assert body["timeout"] == 60
        assert body["request"]["@context"] == "https://irma.app/ld/request/disclosure/v2"

    def test_server_error_is_network_error(self, disclosure_request) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "UNAUTHORIZED"})

        with make_client(handler) as client:
            with pytest.raises(NetworkError) as exc_info:
                client.request(disclosure_request)

        assert exc_info.value.status_code == 401
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    def test_transport_failure_is_network_error(self, disclosure_request) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(NetworkError) as exc_info:
                client.request(disclosure_request)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_malformed_body_is_network_error(self, disclosure_request) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"token": "T1"})

        with make_client(handler) as client:
            with pytest.raises(NetworkError, match="session data"):
                client.request(disclosure_request)


class TestStatusAndCancel:
    def test_status_parses_bare_string(self, recorded: List[httpx.Request]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(200, json="CONNECTED")

        with make_client(handler) as client:
            status = client.status(SessionToken("T1"))

        assert status is SessionStatus.CONNECTED
        assert recorded[0].method == "GET"
        assert str(recorded[0].url) == "http://irma.test/session/T1/status"

    def test_status_does_not_send_requestor_token(
        self, recorded: List[httpx.Request]
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(200, json="INITIALIZED")

        with make_client(handler, token="requestor-secret") as client:
            client.status("T1")

        assert "authorization" not in recorded[0].headers

    def test_unknown_status_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json="FINISHED")

        with make_client(handler) as client:
            with pytest.raises(NetworkError):
                client.status("T1")

    def test_cancel_sends_delete(self, recorded: List[httpx.Request]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(204)

        with make_client(handler) as client:
            assert client.cancel(SessionToken("T1")) is None

        assert recorded[0].method == "DELETE"
        assert str(recorded[0].url) == "http://irma.test/session/T1"

    def test_cancel_of_unknown_session_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "SESSION_UNKNOWN"})

        with make_client(handler) as client:
            with pytest.raises(NetworkError):
                client.cancel("nope")


class TestResultGate:
    """Test that only finished sessions yield a result."""

    def test_done_returns_result(self, recorded: List[httpx.Request]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(200, json=dict(result_body("DONE"), proofStatus="VALID"))

        with make_client(handler) as client:
            result = client.result(SessionToken("T1"))

        assert result.status is SessionStatus.DONE
        assert str(recorded[0].url) == "http://irma.test/session/T1/result"

    def test_cancelled_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=result_body("CANCELLED"))

        with make_client(handler) as client:
            with pytest.raises(SessionCancelledError):
                client.result("T1")

    def test_timeout_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=result_body("TIMEOUT"))

        with make_client(handler) as client:
            with pytest.raises(SessionTimedOutError):
                client.result("T1")

    @pytest.mark.parametrize("status", ["INITIALIZED", "PAIRING", "CONNECTED"])
    def test_running_session_raises_not_finished(self, status: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=result_body(status))

        with make_client(handler) as client:
            with pytest.raises(SessionNotFinishedError) as exc_info:
                client.result("T1")

        assert exc_info.value.status is SessionStatus(status)
        assert exc_info.value.token == "T1"
