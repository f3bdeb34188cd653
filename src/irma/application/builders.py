"""Chaining builders for session requests and credentials."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, TypeVar

from ..domain.errors import InvalidRequestError
from .request_dtos import (
    AttributeRequest,
    Credential,
    DisCon,
    DisclosureRequest,
    ExtendedIrmaRequest,
    IrmaRequest,
    IssuanceRequest,
    NextSessionData,
    SignatureRequest,
)
from .shared.translated_string import TranslatedString

logger = logging.getLogger(__name__)

_B = TypeVar("_B", bound="_BaseRequestBuilder")


def _copy_discon(discon: Iterable[Iterable[AttributeRequest]]) -> DisCon:
    return tuple(tuple(conjunction) for conjunction in discon)


class _BaseRequestBuilder:
    """Accumulates the fields every request variant shares."""

    def __init__(self) -> None:
        self._disclose: List[DisCon] = []
        self._labels: Dict[int, TranslatedString] = {}
        self._return_url: Optional[str] = None
        self._augment_return = False

    def add_discon(self: _B, discon: Iterable[Iterable[AttributeRequest]]) -> _B:
        """Add one disjunction group to the request."""
        self._disclose.append(_copy_discon(discon))
        return self

    def add_discons(
        self: _B, discons: Iterable[Iterable[Iterable[AttributeRequest]]]
    ) -> _B:
        """Add several disjunction groups, in order."""
        for discon in discons:
            self._disclose.append(_copy_discon(discon))
        return self

    def add_discon_with_label(
        self: _B,
        discon: Iterable[Iterable[AttributeRequest]],
        label: TranslatedString,
    ) -> _B:
        """Add one disjunction group, labelled for display in the wallet."""
        self._labels[len(self._disclose)] = label
        self._disclose.append(_copy_discon(discon))
        return self

    def return_url(self: _B, return_url: str) -> _B:
        """Set where the wallet sends the user after a mobile session."""
        self._set_return_url(return_url, augment=False)
        return self

    def augmented_return_url(self: _B, return_url: str) -> _B:
        """Like :meth:`return_url`, and have the server append the session token."""
        self._set_return_url(return_url, augment=True)
        return self

    def _set_return_url(self, return_url: str, augment: bool) -> None:
        if self._return_url is not None:
            logger.warning(
                "Return URL already set to %s, replacing it with %s",
                self._return_url,
                return_url,
            )
        self._return_url = return_url
        self._augment_return = augment

    def _base_fields(self) -> dict:
        return {
            "disclose": self._disclose,
            "return_url": self._return_url,
            "augment_return": self._augment_return,
            "labels": self._labels,
        }

    def _require_disclosure(self, kind: str) -> None:
        if not self._disclose:
            raise InvalidRequestError(
                f"A {kind} request needs at least one disjunction to disclose"
            )


class DisclosureRequestBuilder(_BaseRequestBuilder):
    def build(self) -> DisclosureRequest:
        self._require_disclosure("disclosure")
        return DisclosureRequest(**self._base_fields())


class SignatureRequestBuilder(_BaseRequestBuilder):
    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def build(self) -> SignatureRequest:
        self._require_disclosure("signature")
        return SignatureRequest(message=self._message, **self._base_fields())


class IssuanceRequestBuilder(_BaseRequestBuilder):
    """Builds an issuance request.

    Disclosure conditions are optional here; the user then discloses them
    in the same session before receiving the credentials.
    """

    def __init__(self) -> None:
        super().__init__()
        self._credentials: List[Credential] = []

    def add_credential(self, credential: Credential) -> "IssuanceRequestBuilder":
        self._credentials.append(credential)
        return self

    def build(self) -> IssuanceRequest:
        if not self._credentials:
            raise InvalidRequestError(
                "An issuance request needs at least one credential"
            )
        return IssuanceRequest(credentials=self._credentials, **self._base_fields())


class CredentialBuilder:
    def __init__(self, credential_identifier: str) -> None:
        self._credential_identifier = credential_identifier
        self._validity: Optional[int] = None
        self._attributes: Dict[str, str] = {}

    def validity_period(self, period: timedelta) -> "CredentialBuilder":
        """Make the credential expire ``period`` from now.

        The server rounds the expiry down to a week, so no rounding happens here.
        """
        self._validity = int(time.time() + period.total_seconds())
        return self

    def attribute(self, key: str, value: str) -> "CredentialBuilder":
        self._attributes[key] = value
        return self

    def build(self) -> Credential:
        if not self._attributes:
            raise InvalidRequestError(
                f"Credential {self._credential_identifier} has no attributes"
            )
        return Credential(
            credential_identifier=self._credential_identifier,
            validity=self._validity,
            attributes=dict(self._attributes),
        )


class ExtendedRequestBuilder:
    """Wraps a request with session options for the server.

    This interface is unstable and may change significantly.
    """

    def __init__(self, request: IrmaRequest) -> None:
        self._request = request
        self._validity: Optional[int] = None
        self._timeout: Optional[int] = None
        self._callback_url: Optional[str] = None
        self._next_session: Optional[NextSessionData] = None

    def validity(self, seconds: int) -> "ExtendedRequestBuilder":
        """Lifetime of the result JWT."""
        self._validity = seconds
        return self

    def timeout(self, seconds: int) -> "ExtendedRequestBuilder":
        """How long the session stays available for a wallet to connect."""
        self._timeout = seconds
        return self

    def callback_url(self, url: str) -> "ExtendedRequestBuilder":
        self._callback_url = url
        return self

    def next_session(self, url: str) -> "ExtendedRequestBuilder":
        self._next_session = NextSessionData(url=url)
        return self

    def build(self) -> ExtendedIrmaRequest:
        return ExtendedIrmaRequest(
            validity=self._validity,
            timeout=self._timeout,
            callback_url=self._callback_url,
            next_session=self._next_session,
            request=self._request,
        )
