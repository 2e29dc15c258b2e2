"""Manifest contract for header scanning runs."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

SYNTAX_DIAGNOSTICS_ENV = "TYPEGRAPH_SYNTAX_DIAGNOSTICS"


@dataclass(frozen=True)
class PrimitiveSpec:
    """Base type seeded before any header is scanned."""

    name: str
    compatible: bool


@dataclass(frozen=True)
class ScanManifest:
    """Top-level manifest payload."""

    headers: list[str]
    include_root: str = "."
    primitives: list[PrimitiveSpec] | None = None
    abi_tags: list[str] | None = None
    output_file: str = "output/abi_model.json"
    report_dir: str = "output/run_reports"
    syntax_diagnostics: bool = True

    def primitive_pairs(self) -> list[tuple[str, bool]] | None:
        """Primitives as ``(name, compatible)`` pairs, or None for defaults."""
        if self.primitives is None:
            return None
        return [(p.name, p.compatible) for p in self.primitives]


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _expect_dict(payload: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{ctx} must be an object")
    return payload


def _expect_list(payload: Any, ctx: str) -> list[Any]:
    if not isinstance(payload, list):
        raise ValueError(f"{ctx} must be a list")
    return payload


def _load_manifest_payload(path: str) -> dict[str, Any]:
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Manifest file not found: {manifest_path}")

    text = manifest_path.read_text(encoding="utf-8")
    suffix = manifest_path.suffix.lower()
    if suffix == ".json":
        payload = json.loads(text)
    else:
        payload = yaml.safe_load(text)
    return _expect_dict(payload, "manifest")


def _parse_primitive(raw: Any) -> PrimitiveSpec:
    item = _expect_dict(raw, "primitive entry")
    name = str(item.get("name", "")).strip()
    if not name:
        raise ValueError("primitive.name is required")
    compatible = item.get("compatible")
    if not isinstance(compatible, bool):
        raise ValueError(f"primitive '{name}': compatible must be true or false")
    return PrimitiveSpec(name=name, compatible=compatible)


def _parse_headers(raw: Any) -> list[str]:
    headers_raw = _expect_list(raw, "headers")
    if len(headers_raw) == 0:
        raise ValueError("headers must be a non-empty list")

    headers: list[str] = []
    seen: set[str] = set()
    for item in headers_raw:
        header = str(item).strip()
        if not header:
            raise ValueError("headers contains empty path")
        if header in seen:
            raise ValueError(f"Duplicate header in manifest: {header}")
        seen.add(header)
        headers.append(header)
    return headers


def load_scan_manifest(path: str) -> ScanManifest:
    """Load and validate a scan manifest from a YAML/JSON file."""
    payload = _load_manifest_payload(path)
    headers = _parse_headers(payload.get("headers"))

    primitives: list[PrimitiveSpec] | None = None
    if payload.get("primitives") is not None:
        primitives = []
        seen: set[str] = set()
        for raw in _expect_list(payload["primitives"], "primitives"):
            spec = _parse_primitive(raw)
            if spec.name in seen:
                raise ValueError(f"Duplicate primitive in manifest: {spec.name}")
            seen.add(spec.name)
            primitives.append(spec)

    abi_tags: list[str] | None = None
    if payload.get("abi_tags") is not None:
        abi_tags = [str(tag).strip() for tag in _expect_list(payload["abi_tags"], "abi_tags")]
        if not abi_tags or not all(abi_tags):
            raise ValueError("abi_tags must be a non-empty list of names")

    default_diagnostics = _env_flag(SYNTAX_DIAGNOSTICS_ENV, default=True)
    return ScanManifest(
        headers=headers,
        include_root=str(payload.get("include_root", ".")).strip() or ".",
        primitives=primitives,
        abi_tags=abi_tags,
        output_file=str(payload.get("output_file", "output/abi_model.json")),
        report_dir=str(payload.get("report_dir", "output/run_reports")),
        syntax_diagnostics=bool(payload.get("syntax_diagnostics", default_diagnostics)),
    )


def resolve_header_path(manifest_dir: Path, manifest: ScanManifest, header: str) -> Path:
    """Resolve a header path against the include root.

    A relative include root is itself resolved against the manifest directory.
    """
    raw = Path(header)
    if raw.is_absolute():
        return raw
    root = Path(manifest.include_root)
    if not root.is_absolute():
        root = manifest_dir / root
    return root / raw
