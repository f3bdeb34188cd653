"""Domain-specific exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..application.result_dtos import SessionStatus


class IrmaError(Exception):
    """Base class for every error raised by this library."""


class InvalidUrlError(IrmaError, ValueError):
    """Raised when a server base URL cannot be used, before any I/O happens."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class InvalidRequestError(IrmaError, ValueError):
    """Raised when a request builder is asked to build an incomplete request."""


class NetworkError(IrmaError):
    """Raised on transport failures, non-2xx responses and undecodable bodies.

    The underlying ``httpx`` or pydantic exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SessionCancelledError(IrmaError):
    """Raised when the result of a cancelled session is requested."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__("Irma session cancelled")


class SessionTimedOutError(IrmaError):
    """Raised when the result of a timed out session is requested."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__("Irma session timed out")


class SessionNotFinishedError(IrmaError):
    """Raised when the result of a session is requested before it concluded.

    This is the only error a polling caller is expected to catch and retry on.
    """

    def __init__(self, token: str, status: "SessionStatus") -> None:
        self.token = token
        self.status = status
        super().__init__(f"Irma session not finished (status {status.value})")
