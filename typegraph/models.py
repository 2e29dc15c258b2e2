"""
Data models for the extracted ABI type graph.
"""

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional, Tuple

from typegraph.config import (
    KIND_FUNCTION_SIGNATURE,
    KIND_PRIMITIVE,
    KIND_STRUCT,
)


class FieldRef(NamedTuple):
    """One struct field: the registry name of its type and the field name."""

    field_type: str
    field_name: str


@dataclass(frozen=True)
class TypeDescriptor:
    """Represents a single registered type.

    Attributes:
        name: Unique registry name (typedef name, primitive spelling, or
            ``Struct.field`` composite key for function-pointer signatures)
        kind: One of: Primitive, Struct, FunctionSignature
        compatible: Whether a binding may treat the type as plain binary data
        fields: Ordered struct fields (Struct only)
        return_type: Registered return type name, or None for "no return
            value" (FunctionSignature only)
        arg_types: Ordered registered argument type names (FunctionSignature only)
    """

    name: str
    kind: str
    compatible: bool
    fields: Tuple[FieldRef, ...] = ()
    return_type: Optional[str] = None
    arg_types: Tuple[str, ...] = ()

    @property
    def is_struct(self) -> bool:
        return self.kind == KIND_STRUCT

    @property
    def is_signature(self) -> bool:
        return self.kind == KIND_FUNCTION_SIGNATURE

    @classmethod
    def primitive(cls, name: str, compatible: bool) -> "TypeDescriptor":
        return cls(name=name, kind=KIND_PRIMITIVE, compatible=compatible)

    @classmethod
    def struct(
        cls,
        name: str,
        fields: Tuple[FieldRef, ...],
        compatible: bool,
    ) -> "TypeDescriptor":
        return cls(
            name=name,
            kind=KIND_STRUCT,
            compatible=compatible,
            fields=tuple(FieldRef(*f) for f in fields),
        )

    @classmethod
    def signature(
        cls,
        name: str,
        return_type: Optional[str],
        arg_types: Tuple[str, ...],
    ) -> "TypeDescriptor":
        """Build a function-pointer signature; ABI call slots are never plain data."""
        return cls(
            name=name,
            kind=KIND_FUNCTION_SIGNATURE,
            compatible=False,
            return_type=return_type,
            arg_types=tuple(arg_types),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the descriptor to a dictionary suitable for JSON serialization.

        Only the attributes meaningful for the descriptor's kind are included.
        """
        payload: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind,
            "compatible": self.compatible,
        }
        if self.kind == KIND_STRUCT:
            payload["fields"] = [
                {"type": f.field_type, "name": f.field_name} for f in self.fields
            ]
        elif self.kind == KIND_FUNCTION_SIGNATURE:
            payload["return_type"] = self.return_type
            payload["arg_types"] = list(self.arg_types)
        return payload
