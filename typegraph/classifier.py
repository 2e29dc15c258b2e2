"""Struct compatibility classification."""

import logging
from typing import Sequence

from typegraph.models import FieldRef, TypeDescriptor
from typegraph.registry import TypeRegistry

logger = logging.getLogger(__name__)


def is_struct_compatible(registry: TypeRegistry, fields: Sequence[FieldRef]) -> bool:
    """A struct is plain data iff every one of its field types is.

    Function-pointer fields resolve to signatures, which are never compatible,
    so any struct holding one is incompatible.
    """
    return all(registry[f.field_type].compatible for f in fields)


def classify_struct(
    registry: TypeRegistry,
    struct_name: str,
    fields: Sequence[FieldRef],
) -> TypeDescriptor:
    """Register ``struct_name`` with its computed compatibility flag.

    Must run after all of the struct's fields, including function-pointer
    signatures, have been registered.

    Returns:
        The registered struct descriptor.
    """
    compatible = is_struct_compatible(registry, fields)
    descriptor = registry.add(
        TypeDescriptor.struct(struct_name, tuple(fields), compatible)
    )
    logger.debug(
        "Classified struct %s: %d fields, compatible=%s",
        struct_name,
        len(descriptor.fields),
        compatible,
    )
    return descriptor
