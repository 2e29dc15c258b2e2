"""
Configuration constants for ABI header type-graph extraction.

Defines the descriptor kinds, the C keywords the field grammar recognizes,
and the default primitive seeds for CLAP-style plugin headers.
"""

from typing import Tuple

# Descriptor kinds
KIND_PRIMITIVE: str = "Primitive"
KIND_STRUCT: str = "Struct"
KIND_FUNCTION_SIGNATURE: str = "FunctionSignature"

# Keyword spelling "no value" (return type) and "no arguments" (parameter list)
VOID_KEYWORD: str = "void"

# Field statement terminator
FIELD_TERMINATOR: str = ";"

# Opaque host-provided root of the plugin-entry ABI
PLUGIN_ENTRY_TYPE: str = "clap_plugin_entry_t"

# Base types registered before any header is scanned: (name, compatible)
DEFAULT_PRIMITIVES: Tuple[Tuple[str, bool], ...] = (
    ("uint32_t", True),
    ("uint64_t", True),
    ("float32_t", True),
    ("float64_t", True),
    ("bool", True),
    ("const char *", False),
    (PLUGIN_ENTRY_TYPE, False),
)

# Syntax diagnostics policy default
DEFAULT_SYNTAX_DIAGNOSTICS: bool = True
