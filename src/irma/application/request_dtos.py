"""Session request models and their wire format.

A disclosure request is a conjunction of disjunctions of conjunctions of
attribute requests (a "condiscon"). See https://irma.app/docs/session-requests/
for the semantics the server applies.
"""

from __future__ import annotations

from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Literal,
    Optional,
    Tuple,
    Union,
)

from pydantic import (
    AfterValidator,
    ConfigDict,
    Field,
    NonNegativeInt,
    PlainSerializer,
    RootModel,
    TypeAdapter,
    model_validator,
)

from .shared.serializers import WireModel, freeze_mapping, thaw_mapping
from .shared.translated_string import TranslatedString

DISCLOSURE_CONTEXT = "https://irma.app/ld/request/disclosure/v2"
SIGNATURE_CONTEXT = "https://irma.app/ld/request/signature/v2"
ISSUANCE_CONTEXT = "https://irma.app/ld/request/issuance/v2"


class CompoundAttributeRequest(WireModel):
    """Request for an attribute with a required value or a required presence."""

    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset({"value"})
    wire_omit_empty: ClassVar[FrozenSet[str]] = frozenset({"not_null"})

    attr_type: str = Field(..., alias="type")
    value: Optional[str] = None
    not_null: bool = Field(False, alias="notNull")


class AttributeRequest(RootModel[Union[str, CompoundAttributeRequest]]):
    """Request for a single attribute.

    The simple form is just the attribute identifier and accepts any value,
    including none. The compound form can demand a specific value or demand
    that some value is present.
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def simple(cls, attr_type: str) -> "AttributeRequest":
        return cls(attr_type)

    @classmethod
    def non_null(cls, attr_type: str) -> "AttributeRequest":
        """Require that the attribute has some value, whatever it is."""
        return cls(CompoundAttributeRequest(attr_type=attr_type, not_null=True))

    @classmethod
    def with_value(cls, attr_type: str, value: str) -> "AttributeRequest":
        """Require that the attribute has exactly ``value``.

        Useful for access control (e.g. ``over18 == "yes"``) rather than
        learning something about the user.
        """
        return cls(CompoundAttributeRequest(attr_type=attr_type, value=value))

    @property
    def is_simple(self) -> bool:
        return isinstance(self.root, str)

    @property
    def attr_type(self) -> str:
        if isinstance(self.root, str):
            return self.root
        return self.root.attr_type

    @property
    def value(self) -> Optional[str]:
        return None if isinstance(self.root, str) else self.root.value

    @property
    def not_null(self) -> bool:
        return False if isinstance(self.root, str) else self.root.not_null

    def to_wire(self) -> Any:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# Inner conjunction, disjunction group, outer conjunction.
DisCon = Tuple[Tuple[AttributeRequest, ...], ...]
ConDisCon = Tuple[DisCon, ...]

AttributeValues = Annotated[
    Dict[str, str],
    AfterValidator(freeze_mapping),
    PlainSerializer(thaw_mapping, return_type=Dict[str, str]),
]
Labels = Annotated[
    Dict[int, TranslatedString],
    AfterValidator(freeze_mapping),
    PlainSerializer(thaw_mapping, return_type=Dict[int, TranslatedString]),
]


class Credential(WireModel):
    """A credential to be issued.

    The issuing server needs the issuer's private key for this credential type.
    """

    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset({"validity"})

    credential_identifier: str = Field(..., alias="credential")
    # Unix timestamp; the server rounds it down to a week. Absent means the
    # server default of six months.
    validity: Optional[NonNegativeInt] = None
    attributes: AttributeValues


class BaseRequest(WireModel):
    """Fields shared by all session requests; flattened into each variant."""

    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset({"return_url"})
    wire_omit_empty: ClassVar[FrozenSet[str]] = frozenset(
        {"disclose", "augment_return", "labels"}
    )

    disclose: ConDisCon = ()
    # For mobile sessions, where the wallet sends the user after the session.
    return_url: Optional[str] = Field(None, alias="clientReturnUrl")
    # Ask the server to append the session token to the return URL.
    augment_return: bool = Field(False, alias="augmentReturnUrl")
    # Keyed by the index of the disjunction group in ``disclose``.
    labels: Labels = Field(default_factory=dict, validate_default=True)

    @model_validator(mode="after")
    def check_consistency(self) -> "BaseRequest":
        for index in self.labels:
            if not 0 <= index < len(self.disclose):
                raise ValueError(
                    f"label index {index} does not refer to a disjunction "
                    f"(request has {len(self.disclose)})"
                )
        if self.augment_return and self.return_url is None:
            raise ValueError("augmentReturnUrl requires clientReturnUrl to be set")
        return self


class DisclosureRequest(BaseRequest):
    """Ask the user to disclose attributes."""

    wire_leading: ClassVar[Tuple[str, ...]] = ("context",)

    context: Literal["https://irma.app/ld/request/disclosure/v2"] = Field(
        DISCLOSURE_CONTEXT, alias="@context"
    )


class SignatureRequest(BaseRequest):
    """Ask the user to sign ``message`` with the disclosed attributes."""

    wire_leading: ClassVar[Tuple[str, ...]] = ("context", "message")

    context: Literal["https://irma.app/ld/request/signature/v2"] = Field(
        SIGNATURE_CONTEXT, alias="@context"
    )
    message: str


class IssuanceRequest(BaseRequest):
    """Issue credentials, optionally after disclosure of other attributes."""

    wire_leading: ClassVar[Tuple[str, ...]] = ("context", "credentials")

    context: Literal["https://irma.app/ld/request/issuance/v2"] = Field(
        ISSUANCE_CONTEXT, alias="@context"
    )
    credentials: Tuple[Credential, ...]


IrmaRequest = Annotated[
    Union[DisclosureRequest, SignatureRequest, IssuanceRequest],
    Field(discriminator="context"),
]

_irma_request_adapter: TypeAdapter[Any] = TypeAdapter(IrmaRequest)


def parse_irma_request(data: Union[str, bytes, Dict[str, Any]]) -> IrmaRequest:
    """Decode any session request variant, dispatching on ``@context``."""
    if isinstance(data, (str, bytes)):
        return _irma_request_adapter.validate_json(data)
    return _irma_request_adapter.validate_python(data)


class NextSessionData(WireModel):
    """Where the server fetches the request for a chained follow-up session."""

    url: str


class ExtendedIrmaRequest(WireModel):
    """A session request plus instructions for the server on how to run it.

    This interface is unstable and may change significantly.
    """

    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset(
        {"validity", "timeout", "callback_url", "next_session"}
    )

    # Lifetime of the result JWT in seconds, once requested.
    validity: Optional[NonNegativeInt] = None
    # Seconds the session stays available for a wallet to connect.
    timeout: Optional[NonNegativeInt] = None
    # Receives status updates as the session progresses.
    callback_url: Optional[str] = Field(None, alias="callbackUrl")
    next_session: Optional[NextSessionData] = Field(None, alias="nextSession")
    request: IrmaRequest
