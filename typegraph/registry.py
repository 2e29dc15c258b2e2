"""
Type registry shared by every stage of a scan.

The registry is an insertion-ordered, append-only mapping from type name to
``TypeDescriptor``. Names are normalized on every lookup and insert, and the
first write for a name wins.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Tuple

from core.type_names import normalize_type_name
from typegraph.errors import DuplicateTypeError, RegistryFrozenError, UnknownTypeError
from typegraph.models import TypeDescriptor

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Append-only mapping of type names to descriptors."""

    def __init__(self) -> None:
        self._types: Dict[str, TypeDescriptor] = {}
        self._frozen = False

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return normalize_type_name(name) in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __getitem__(self, name: str) -> TypeDescriptor:
        return self._types[normalize_type_name(name)]

    def get(self, name: str) -> Optional[TypeDescriptor]:
        return self._types.get(normalize_type_name(name))

    def items(self) -> List[Tuple[str, TypeDescriptor]]:
        return list(self._types.items())

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject every further insert."""
        self._frozen = True

    def add(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Register a new descriptor.

        Raises:
            DuplicateTypeError: If the name is already registered.
            RegistryFrozenError: If the registry was frozen by an export.
        """
        if not self.add_if_absent(descriptor):
            raise DuplicateTypeError(descriptor.name)
        return descriptor

    def add_if_absent(self, descriptor: TypeDescriptor) -> bool:
        """Register ``descriptor`` unless its name already exists.

        Returns:
            True if the descriptor was inserted, False if an existing entry
            was kept.
        """
        name = normalize_type_name(descriptor.name)
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._types:
            return False
        if name != descriptor.name:
            descriptor = replace(descriptor, name=name)
        self._types[name] = descriptor
        logger.debug("Registered %s %s (compatible=%s)", descriptor.kind, name, descriptor.compatible)
        return True

    def require(
        self,
        type_name: str,
        struct_name: str,
        field_name: Optional[str] = None,
        role: str = "field",
    ) -> str:
        """Return the canonical name of a registered type.

        Raises:
            UnknownTypeError: If the type is not registered yet.
        """
        name = normalize_type_name(type_name)
        if name not in self._types:
            raise UnknownTypeError(struct_name, name, field_name=field_name, role=role)
        return name

    def structs(self) -> List[Tuple[str, TypeDescriptor]]:
        """Struct entries in registration order."""
        return [(name, d) for name, d in self._types.items() if d.is_struct]
