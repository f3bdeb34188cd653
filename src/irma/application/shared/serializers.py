"""Shared Pydantic base for the IRMA wire format."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    return isinstance(value, (list, tuple, dict)) and not value


def freeze_mapping(value: Dict[Any, Any]) -> Mapping[Any, Any]:
    """Validator turning a validated dict into a read-only view of a copy."""
    return MappingProxyType(dict(value))


def thaw_mapping(value: Mapping[Any, Any]) -> Dict[Any, Any]:
    return dict(value)


class WireModel(BaseModel):
    """Immutable model whose dumps match what an IRMA server sends and expects.

    Fields are aliased to their wire names. Fields listed in
    ``wire_omit_none`` are left out of the dump when they are None, fields
    listed in ``wire_omit_empty`` also when they are False or an empty
    container, and fields listed in ``wire_leading`` come first. Both the
    field name and its alias are checked so that a dump with or without
    ``by_alias`` behaves the same.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    wire_omit_none: ClassVar[FrozenSet[str]] = frozenset()
    wire_omit_empty: ClassVar[FrozenSet[str]] = frozenset()
    wire_leading: ClassVar[Tuple[str, ...]] = ()

    @model_serializer(mode="wrap")
    def serialize_wire(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        fields = type(self).model_fields
        for names, is_absent in (
            (self.wire_omit_none, lambda v: v is None),
            (self.wire_omit_empty, _is_empty),
        ):
            for name in names:
                for key in (name, fields[name].alias):
                    if key is not None and key in data and is_absent(data[key]):
                        del data[key]
        if not self.wire_leading:
            return data
        ordered: Dict[str, Any] = {}
        for name in self.wire_leading:
            for key in (fields[name].alias, name):
                if key is not None and key in data:
                    ordered[key] = data.pop(key)
        ordered.update(data)
        return ordered

    def to_wire(self) -> Dict[str, Any]:
        """JSON-compatible dict using wire names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
