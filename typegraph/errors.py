"""Exception hierarchy for type-graph extraction.

Every failure during a scan is fatal: the first error aborts the scan and
surfaces to the caller as one of these exceptions.
"""

from __future__ import annotations

from typing import Optional


class TypeGraphError(ValueError):
    """Base class for all scan failures."""


class UnknownTypeError(TypeGraphError):
    """A field, argument or return type is not registered at its point of use."""

    def __init__(
        self,
        struct_name: str,
        type_name: str,
        field_name: Optional[str] = None,
        role: str = "field",
    ) -> None:
        self.struct_name = struct_name
        self.type_name = type_name
        self.field_name = field_name
        self.role = role
        if field_name is None:
            message = f"Unknown type in struct {struct_name}: {type_name}"
        else:
            message = (
                f"Unknown {role} type in struct {struct_name} "
                f"(field {field_name}): {type_name}"
            )
        super().__init__(message)


class MalformedFieldError(TypeGraphError):
    """A field statement matches neither the direct nor the function-pointer shape."""

    def __init__(self, struct_name: str, statement: str) -> None:
        self.struct_name = struct_name
        self.statement = statement
        super().__init__(
            f"Couldn't parse struct field in {struct_name}: {statement!r}"
        )


class MalformedStructBlockError(TypeGraphError):
    """A ``typedef struct`` block has no usable name or closing marker."""

    def __init__(self, struct_name: Optional[str], line: int, reason: str) -> None:
        self.struct_name = struct_name
        self.line = line
        self.reason = reason
        label = struct_name or "<anonymous>"
        super().__init__(f"Malformed struct block {label} at line {line}: {reason}")


class DuplicateTypeError(TypeGraphError):
    """A descriptor was added under a name that is already registered."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Type already registered: {type_name}")


class RegistryFrozenError(TypeGraphError):
    """The registry was mutated after the model was exported."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"Cannot register {type_name}: registry is frozen after export"
        )
