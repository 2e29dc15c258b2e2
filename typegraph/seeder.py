"""Primitive seeding: base types registered before any header is scanned."""

import logging
from typing import Iterable, Tuple

from typegraph.config import DEFAULT_PRIMITIVES
from typegraph.models import TypeDescriptor
from typegraph.registry import TypeRegistry

logger = logging.getLogger(__name__)


def seed_primitive(registry: TypeRegistry, name: str, compatible: bool) -> bool:
    """Register a base ``Primitive`` type.

    A name that is already registered keeps its existing descriptor.

    Args:
        registry: Registry to seed.
        name: Type spelling as it appears in headers (e.g. ``const char *``).
        compatible: Whether bindings may treat the type as plain data.

    Returns:
        True if the primitive was added.
    """
    added = registry.add_if_absent(TypeDescriptor.primitive(name, bool(compatible)))
    if not added:
        logger.debug("Primitive %s already registered; keeping existing entry", name)
    return added


def seed_primitives(
    registry: TypeRegistry,
    primitives: Iterable[Tuple[str, bool]] = DEFAULT_PRIMITIVES,
) -> int:
    """Seed several primitives in order and return how many were added."""
    added = 0
    for name, compatible in primitives:
        if seed_primitive(registry, name, compatible):
            added += 1
    logger.info("Seeded %d primitive types", added)
    return added
