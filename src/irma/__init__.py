"""Client library for IRMA attribute-based credential sessions."""

from .application.builders import (
    CredentialBuilder,
    DisclosureRequestBuilder,
    ExtendedRequestBuilder,
    IssuanceRequestBuilder,
    SignatureRequestBuilder,
)
from .application.request_dtos import (
    AttributeRequest,
    BaseRequest,
    CompoundAttributeRequest,
    ConDisCon,
    Credential,
    DisCon,
    DisclosureRequest,
    ExtendedIrmaRequest,
    IrmaRequest,
    IssuanceRequest,
    NextSessionData,
    SignatureRequest,
    parse_irma_request,
)
from .application.result_dtos import (
    AttributeStatus,
    DisclosedAttribute,
    ProofStatus,
    Qr,
    SessionData,
    SessionResult,
    SessionStatus,
    SessionToken,
    SessionType,
)
from .application.shared.translated_string import TranslatedString
from .domain.errors import (
    InvalidRequestError,
    InvalidUrlError,
    IrmaError,
    NetworkError,
    SessionCancelledError,
    SessionNotFinishedError,
    SessionTimedOutError,
)
from .env import Settings, get_settings
from .infrastructure.server.irma_client import (
    AsyncIrmaClient,
    IrmaClient,
    IrmaClientBuilder,
    NoAuth,
    TokenAuth,
)

__all__ = [
    "AsyncIrmaClient",
    "AttributeRequest",
    "AttributeStatus",
    "BaseRequest",
    "CompoundAttributeRequest",
    "ConDisCon",
    "Credential",
    "CredentialBuilder",
    "DisCon",
    "DisclosedAttribute",
    "DisclosureRequest",
    "DisclosureRequestBuilder",
    "ExtendedIrmaRequest",
    "ExtendedRequestBuilder",
    "InvalidRequestError",
    "InvalidUrlError",
    "IrmaClient",
    "IrmaClientBuilder",
    "IrmaError",
    "IrmaRequest",
    "IssuanceRequest",
    "IssuanceRequestBuilder",
    "NetworkError",
    "NextSessionData",
    "NoAuth",
    "ProofStatus",
    "Qr",
    "SessionCancelledError",
    "SessionData",
    "SessionNotFinishedError",
    "SessionResult",
    "SessionStatus",
    "SessionTimedOutError",
    "SessionToken",
    "SessionType",
    "Settings",
    "SignatureRequest",
    "SignatureRequestBuilder",
    "TokenAuth",
    "TranslatedString",
    "get_settings",
]
