"""
Field declaration parsing for one struct body.

A struct body is split into statements on ``;``. Each statement is either a
direct field::

    <type-expression> <identifier>

or an ABI-tagged function-pointer field::

    <return-type> (<ABI-tag> *<identifier>)(<argument-list>)

Function-pointer fields register a ``FunctionSignature`` descriptor under the
composite key ``Struct.field`` once the whole body has parsed, so that the
struct can reference it as a field type. Every referenced type must already be
registered.
"""

import logging
import re
from typing import Collection, List, Optional, Tuple

from core.type_names import make_signature_key, normalize_type_name
from typegraph.config import FIELD_TERMINATOR, VOID_KEYWORD
from typegraph.errors import DuplicateTypeError, MalformedFieldError
from typegraph.models import FieldRef, TypeDescriptor
from typegraph.registry import TypeRegistry

logger = logging.getLogger(__name__)

_FUNCTION_POINTER_RE = re.compile(
    r"^(?P<ret>.*?)\s*"
    r"\(\s*(?P<abi>[A-Za-z_]\w*)\s*\*\s*(?P<name>[A-Za-z_]\w*)\s*\)"
    r"\s*\((?P<args>.*)\)$",
    re.DOTALL,
)
# Greedy type part: the name is the last identifier, preceded by space or '*'
_TRAILING_NAME_RE = re.compile(r"^(?P<type>.*[\s*])(?P<name>[A-Za-z_]\w*)$", re.DOTALL)


def split_statements(body: str) -> List[str]:
    """Split a struct body into trimmed, non-empty field statements."""
    statements = (part.strip() for part in body.split(FIELD_TERMINATOR))
    return [s for s in statements if s]


def split_trailing_name(declaration: str) -> Optional[Tuple[str, str]]:
    """Split ``<type> <name>`` into its normalized type and the trailing name.

    Returns:
        ``(type_name, identifier)``, or None if the declaration does not end
        with an identifier preceded by a type expression.
    """
    match = _TRAILING_NAME_RE.match(declaration.strip())
    if match is None:
        return None
    type_name = normalize_type_name(match.group("type"))
    if not type_name:
        return None
    return type_name, match.group("name")


def reduce_argument(argument: str) -> str:
    """Reduce one parameter declaration to its bare type.

    The trailing parameter name is stripped; a parameter spelled as a bare
    type (``const clap_host_t *``, ``uint32_t``) is kept whole.
    """
    split = split_trailing_name(argument)
    if split is None:
        return normalize_type_name(argument)
    return split[0]


def reduce_argument_list(arguments: str) -> Tuple[str, ...]:
    """Reduce a comma-separated parameter list to its argument types.

    An empty list or the single keyword ``void`` yields no arguments.
    """
    parts = [part.strip() for part in arguments.split(",")]
    parts = [part for part in parts if part]
    if parts == [VOID_KEYWORD]:
        return ()
    return tuple(reduce_argument(part) for part in parts)


def _parse_function_pointer(
    registry: TypeRegistry,
    struct_name: str,
    statement: str,
    match: "re.Match[str]",
    abi_tags: Optional[Collection[str]],
) -> Tuple[FieldRef, TypeDescriptor]:
    field_name = match.group("name")
    abi_tag = match.group("abi")
    if abi_tags is not None and abi_tag not in abi_tags:
        raise MalformedFieldError(struct_name, statement)

    raw_return = normalize_type_name(match.group("ret"))
    if not raw_return:
        raise MalformedFieldError(struct_name, statement)

    arg_types = tuple(
        registry.require(arg, struct_name, field_name=field_name, role="argument")
        for arg in reduce_argument_list(match.group("args"))
    )

    return_type: Optional[str] = None
    if raw_return != VOID_KEYWORD:
        return_type = registry.require(
            raw_return, struct_name, field_name=field_name, role="return"
        )

    logger.debug(
        "%s.%s: (%s) -> %s",
        struct_name,
        field_name,
        ", ".join(arg_types),
        return_type,
    )
    key = make_signature_key(struct_name, field_name)
    return FieldRef(key, field_name), TypeDescriptor.signature(key, return_type, arg_types)


def _parse_statement(
    registry: TypeRegistry,
    struct_name: str,
    statement: str,
    abi_tags: Optional[Collection[str]],
) -> Tuple[FieldRef, Optional[TypeDescriptor]]:
    fp_match = _FUNCTION_POINTER_RE.match(statement)
    if fp_match is not None:
        return _parse_function_pointer(registry, struct_name, statement, fp_match, abi_tags)

    split = split_trailing_name(statement)
    if split is None:
        raise MalformedFieldError(struct_name, statement)

    type_name, field_name = split
    field_type = registry.require(type_name, struct_name)
    logger.debug("%s.%s: %s", struct_name, field_name, field_type)
    return FieldRef(field_type, field_name), None


def parse_field_statement(
    registry: TypeRegistry,
    struct_name: str,
    statement: str,
    abi_tags: Optional[Collection[str]] = None,
) -> FieldRef:
    """Parse one field statement of ``struct_name``.

    Args:
        registry: Registry holding every type the field may reference.
        struct_name: Owning struct, used for signature keys and errors.
        statement: One statement without its terminator.
        abi_tags: Accepted calling-convention markers; None accepts any
            identifier in the marker position.

    Returns:
        The parsed field. Function-pointer fields reference their signature
        by composite key.

    Raises:
        UnknownTypeError: If a referenced type is not registered.
        MalformedFieldError: If the statement has neither field shape.
    """
    field, signature = _parse_statement(registry, struct_name, statement, abi_tags)
    if signature is not None:
        registry.add(signature)
    return field


def parse_struct_fields(
    registry: TypeRegistry,
    struct_name: str,
    body: str,
    abi_tags: Optional[Collection[str]] = None,
) -> List[FieldRef]:
    """Parse every field statement of a comment-stripped struct body in order.

    Signatures of function-pointer fields are registered only once every
    statement has parsed, so a failing struct leaves the registry untouched.

    Raises:
        UnknownTypeError: If a referenced type is not registered.
        MalformedFieldError: If a statement has neither field shape.
        DuplicateTypeError: If a signature key is repeated or already taken.
    """
    fields: List[FieldRef] = []
    signatures: List[TypeDescriptor] = []
    for statement in split_statements(body):
        field, signature = _parse_statement(registry, struct_name, statement, abi_tags)
        fields.append(field)
        if signature is not None:
            signatures.append(signature)

    seen = set()
    for signature in signatures:
        if signature.name in seen or signature.name in registry:
            raise DuplicateTypeError(signature.name)
        seen.add(signature.name)
    for signature in signatures:
        registry.add(signature)
    return fields
