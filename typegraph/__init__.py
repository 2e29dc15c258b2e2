"""
ABI header type-graph extraction.

Parses ``typedef struct`` blocks of C plugin ABI headers into a registry of
named types and classifies each struct by whether bindings may treat it as
plain binary data.
"""

from typegraph.models import FieldRef, TypeDescriptor
from typegraph.errors import (
    DuplicateTypeError,
    MalformedFieldError,
    MalformedStructBlockError,
    RegistryFrozenError,
    TypeGraphError,
    UnknownTypeError,
)
from typegraph.registry import TypeRegistry
from typegraph.seeder import seed_primitive, seed_primitives
from typegraph.blocks import StructBlock, extract_struct_blocks, iter_struct_blocks
from typegraph.fields import parse_field_statement, parse_struct_fields
from typegraph.classifier import classify_struct
from typegraph.exporter import export_model, model_to_dict
from typegraph.scanner import HeaderScanner, ScanStats, scan_headers

__all__ = [
    # Data models
    "FieldRef",
    "TypeDescriptor",
    "TypeRegistry",
    # Errors
    "TypeGraphError",
    "UnknownTypeError",
    "MalformedFieldError",
    "MalformedStructBlockError",
    "DuplicateTypeError",
    "RegistryFrozenError",
    # Pipeline stages
    "seed_primitive",
    "seed_primitives",
    "StructBlock",
    "iter_struct_blocks",
    "extract_struct_blocks",
    "parse_field_statement",
    "parse_struct_fields",
    "classify_struct",
    "export_model",
    "model_to_dict",
    # High-level orchestration
    "HeaderScanner",
    "ScanStats",
    "scan_headers",
]
