"""Clients for the session API of an IRMA server.

Every call is a single request/response exchange; polling for a session to
finish is left to the caller::

    while True:
        try:
            result = client.result(session.token)
            break
        except SessionNotFinishedError:
            time.sleep(2)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TypeVar, Union
from types import TracebackType

import httpx
from pydantic import BaseModel, ConfigDict, SecretStr, TypeAdapter, ValidationError

from ...application.request_dtos import ExtendedIrmaRequest, IrmaRequest
from ...application.result_dtos import (
    SessionData,
    SessionResult,
    SessionStatus,
    SessionToken,
)
from ...domain.errors import (
    NetworkError,
    SessionCancelledError,
    SessionNotFinishedError,
    SessionTimedOutError,
)
from ...env import Settings
from ..http.http_client import AsyncHttpClient, HttpClient, parse_base_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

_session_data_adapter: TypeAdapter[SessionData] = TypeAdapter(SessionData)
_session_status_adapter: TypeAdapter[SessionStatus] = TypeAdapter(SessionStatus)
_session_result_adapter: TypeAdapter[SessionResult] = TypeAdapter(SessionResult)


class NoAuth(BaseModel):
    """Requests are sent without credentials."""

    model_config = ConfigDict(frozen=True)

    def headers(self) -> Dict[str, str]:
        return {}


class TokenAuth(BaseModel):
    """Requestor token authentication.

    The token goes verbatim into the ``Authorization`` header, without a
    ``Bearer`` prefix. It is a ``SecretStr`` so it never shows up in reprs.
    """

    model_config = ConfigDict(frozen=True)

    token: SecretStr

    def headers(self) -> Dict[str, str]:
        return {"Authorization": self.token.get_secret_value()}


AuthMethod = Union[NoAuth, TokenAuth]
Token = Union[SessionToken, str]


def _decode(adapter: TypeAdapter[T], resp: httpx.Response, what: str) -> T:
    try:
        return adapter.validate_json(resp.content)
    except ValidationError as e:
        raise NetworkError(
            f"Could not decode {what} from {resp.request.url}: {e}"
        ) from e


def _request_body(request: Union[IrmaRequest, ExtendedIrmaRequest]) -> Dict[str, Any]:
    return request.model_dump(mode="json", by_alias=True)


def _gate_result(result: SessionResult) -> SessionResult:
    """Only a finished session yields its result."""
    token = str(result.token)
    if result.status is SessionStatus.DONE:
        return result
    if result.status is SessionStatus.CANCELLED:
        raise SessionCancelledError(token)
    if result.status is SessionStatus.TIMEOUT:
        raise SessionTimedOutError(token)
    raise SessionNotFinishedError(token, result.status)


class IrmaClient:
    """Blocking client for an IRMA server.

    The instance only holds configuration and a connection pool, so it can be
    shared between threads working on different sessions.
    """

    def __init__(
        self,
        url: str,
        *,
        auth: Optional[AuthMethod] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._url = parse_base_url(url)
        self._auth: AuthMethod = auth or NoAuth()
        self._http = HttpClient(self._url, timeout=timeout, transport=transport)

    @property
    def url(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"IrmaClient(url={self._url!r}, auth={self._auth!r})"

    def request(self, request: IrmaRequest) -> SessionData:
        """Start a session for a disclosure, signature or issuance request."""
        resp = self._http.post(
            "/session", json=_request_body(request), headers=self._auth.headers()
        )
        session = _decode(_session_data_adapter, resp, "session data")
        logger.debug(
            "Started %s session %s", session.session_ptr.session_type.value, session.token
        )
        return session

    def request_extended(self, request: ExtendedIrmaRequest) -> SessionData:
        """Start a session with extra server options.

        This interface is unstable and may change significantly.
        """
        resp = self._http.post(
            "/session", json=_request_body(request), headers=self._auth.headers()
        )
        session = _decode(_session_data_adapter, resp, "session data")
        logger.debug("Started extended session %s", session.token)
        return session

    def status(self, token: Token) -> SessionStatus:
        resp = self._http.get(f"/session/{token}/status")
        return _decode(_session_status_adapter, resp, "session status")

    def cancel(self, token: Token) -> None:
        self._http.delete(f"/session/{token}")
        logger.debug("Cancelled session %s", token)

    def result(self, token: Token) -> SessionResult:
        """Fetch the result of a session.

        Raises ``SessionNotFinishedError`` while the session is still running;
        callers polling for completion should retry on that error only.
        """
        resp = self._http.get(f"/session/{token}/result")
        result = _decode(_session_result_adapter, resp, "session result")
        logger.debug("Session %s has status %s", token, result.status.value)
        return _gate_result(result)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "IrmaClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()


class AsyncIrmaClient:
    """Asynchronous client for an IRMA server.

    Mirrors `IrmaClient` but uses `AsyncHttpClient` and async methods.
    """

    def __init__(
        self,
        url: str,
        *,
        auth: Optional[AuthMethod] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = parse_base_url(url)
        self._auth: AuthMethod = auth or NoAuth()
        self._http = AsyncHttpClient(self._url, timeout=timeout, transport=transport)

    @property
    def url(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"AsyncIrmaClient(url={self._url!r}, auth={self._auth!r})"

    async def request(self, request: IrmaRequest) -> SessionData:
        resp = await self._http.post(
            "/session", json=_request_body(request), headers=self._auth.headers()
        )
        session = _decode(_session_data_adapter, resp, "session data")
        logger.debug(
            "Started %s session %s", session.session_ptr.session_type.value, session.token
        )
        return session

    async def request_extended(self, request: ExtendedIrmaRequest) -> SessionData:
        """Unstable, see `IrmaClient.request_extended`."""
        resp = await self._http.post(
            "/session", json=_request_body(request), headers=self._auth.headers()
        )
        session = _decode(_session_data_adapter, resp, "session data")
        logger.debug("Started extended session %s", session.token)
        return session

    async def status(self, token: Token) -> SessionStatus:
        resp = await self._http.get(f"/session/{token}/status")
        return _decode(_session_status_adapter, resp, "session status")

    async def cancel(self, token: Token) -> None:
        await self._http.delete(f"/session/{token}")
        logger.debug("Cancelled session %s", token)

    async def result(self, token: Token) -> SessionResult:
        resp = await self._http.get(f"/session/{token}/result")
        result = _decode(_session_result_adapter, resp, "session result")
        logger.debug("Session %s has status %s", token, result.status.value)
        return _gate_result(result)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncIrmaClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


class IrmaClientBuilder:
    """Configures an `IrmaClient` or `AsyncIrmaClient`.

    The URL is validated immediately, so a bad URL fails before anything else.
    """

    def __init__(self, url: str) -> None:
        self._url = parse_base_url(url)
        self._auth: AuthMethod = NoAuth()
        self._timeout = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "IrmaClientBuilder":
        builder = cls(settings.irma_server_url).timeout(settings.http_timeout)
        if settings.irma_token is not None:
            builder = builder.token_authentication(settings.irma_token)
        return builder

    def token_authentication(self, token: Union[str, SecretStr]) -> "IrmaClientBuilder":
        self._auth = TokenAuth(token=token)
        return self

    def timeout(self, seconds: float) -> "IrmaClientBuilder":
        self._timeout = seconds
        return self

    def build(self, transport: Optional[httpx.BaseTransport] = None) -> IrmaClient:
        return IrmaClient(
            self._url, auth=self._auth, timeout=self._timeout, transport=transport
        )

    def build_async(
        self, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> AsyncIrmaClient:
        return AsyncIrmaClient(
            self._url, auth=self._auth, timeout=self._timeout, transport=transport
        )
