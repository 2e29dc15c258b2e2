"""Core shared contracts and utilities."""

from core.type_names import (
    SIGNATURE_KEY_SEPARATOR,
    TYPEDEF_SUFFIX,
    make_signature_key,
    normalize_type_name,
    typedef_name_for_tag,
)
from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    header_scope,
    phase_scope,
    set_run_id,
)
from core.scan_manifest import (
    PrimitiveSpec,
    ScanManifest,
    load_scan_manifest,
    resolve_header_path,
)
from core.run_artifacts import write_model_json, write_run_report

__all__ = [
    "SIGNATURE_KEY_SEPARATOR",
    "TYPEDEF_SUFFIX",
    "make_signature_key",
    "normalize_type_name",
    "typedef_name_for_tag",
    "configure_structured_logging",
    "get_run_id",
    "header_scope",
    "phase_scope",
    "set_run_id",
    "PrimitiveSpec",
    "ScanManifest",
    "load_scan_manifest",
    "resolve_header_path",
    "write_model_json",
    "write_run_report",
]
