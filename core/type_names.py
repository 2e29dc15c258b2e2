"""Type-name contract shared by the scanner, the registry and renderers."""

import re

SIGNATURE_KEY_SEPARATOR = "."
TYPEDEF_SUFFIX = "_t"

_WHITESPACE_RE = re.compile(r"\s+")
_STAR_GAP_RE = re.compile(r"\*\s+(?=\*)")
_STAR_LEAD_RE = re.compile(r"\s*(\*+)")
_STAR_TRAIL_RE = re.compile(r"(\*+)\s*(?=\w)")


def normalize_type_name(type_name: str) -> str:
    """Normalize a C type expression into its canonical registry spelling.

    Whitespace runs collapse to a single space and pointer stars are written
    as ``T *`` / ``T **`` so that ``const char*`` and ``const char *`` name
    the same registry entry.

    Args:
        type_name: Raw type expression taken from header text.

    Returns:
        Canonical type name.
    """
    normalized = _WHITESPACE_RE.sub(" ", type_name).strip()
    normalized = _STAR_GAP_RE.sub("*", normalized)
    normalized = _STAR_LEAD_RE.sub(r" \1", normalized)
    normalized = _STAR_TRAIL_RE.sub(r"\1 ", normalized)
    return normalized.strip()



def typedef_name_for_tag(tag: str) -> str:
    """Return the ``<tag>_t`` typedef name used for a tagged struct."""
    return f"{tag}{TYPEDEF_SUFFIX}"


def make_signature_key(struct_name: str, field_name: str) -> str:
    """Build the composite registry key of a function-pointer field.

    Args:
        struct_name: Owning struct typedef name.
        field_name: Function-pointer field name.

    Returns:
        Key in format ``StructName.fieldName``.
    """
    return f"{struct_name}{SIGNATURE_KEY_SEPARATOR}{field_name}"
