"""Session pointer, status and result models returned by an IRMA server."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, FrozenSet, Optional, Tuple

from pydantic import ConfigDict, Field, RootModel, field_validator

from .shared.serializers import WireModel
from .shared.translated_string import TranslatedString


class SessionStatus(str, Enum):
    """Lifecycle state of a session, as reported by the server."""

    INITIALIZED = "INITIALIZED"
    PAIRING = "PAIRING"
    CONNECTED = "CONNECTED"
    CANCELLED = "CANCELLED"
    DONE = "DONE"
    TIMEOUT = "TIMEOUT"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {SessionStatus.CANCELLED, SessionStatus.DONE, SessionStatus.TIMEOUT}
)


class AttributeStatus(str, Enum):
    """Role of a disclosed attribute in the session result."""

    PRESENT = "PRESENT"
    EXTRA = "EXTRA"
    NULL = "NULL"


class ProofStatus(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    UNMATCHED_REQUEST = "UNMATCHED_REQUEST"
    MISSING_ATTRIBUTES = "MISSING_ATTRIBUTES"
    EXPIRED = "EXPIRED"


class SessionType(str, Enum):
    DISCLOSING = "disclosing"
    SIGNING = "signing"
    ISSUING = "issuing"


class SessionToken(RootModel[str]):
    """Server-assigned identifier of a session.

    Equal to another token or to a plain string with the same value.
    """

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.root

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.root == other
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(self.root)


class Qr(WireModel):
    """Session pointer the user's wallet scans to join the session."""

    u: str
    session_type: SessionType = Field(..., alias="irmaqr")


class SessionData(WireModel):
    """Server response to starting a session."""

    session_ptr: Qr = Field(..., alias="sessionPtr")
    # Key for every further call about this session.
    token: SessionToken


class DisclosedAttribute(WireModel):
    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset({"raw_value", "value"})

    # Value as encoded in the credential.
    raw_value: Optional[str] = Field(None, alias="rawvalue")
    # Value for display in user interfaces.
    value: Optional[TranslatedString] = None
    identifier: str = Field(..., alias="id")
    status: AttributeStatus


class SessionResult(WireModel):
    """Outcome of a session.

    ``disclosed`` mirrors the shape of the request's ``disclose``: one list of
    attributes per satisfied disjunction group. ``signature`` is passed on
    unparsed.
    """

    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset(
        {"proof_status", "next_session", "signature"}
    )
    wire_omit_empty: ClassVar[FrozenSet[str]] = frozenset({"disclosed"})

    token: SessionToken
    sessiontype: SessionType = Field(..., alias="type")
    status: SessionStatus
    proof_status: Optional[ProofStatus] = Field(None, alias="proofStatus")
    disclosed: Tuple[Tuple[DisclosedAttribute, ...], ...] = ()
    next_session: Optional[SessionToken] = Field(None, alias="nextSession")
    signature: Optional[Any] = None

    @field_validator("disclosed", mode="before")
    @classmethod
    def null_disclosed_is_empty(cls, value: Any) -> Any:
        return () if value is None else value
