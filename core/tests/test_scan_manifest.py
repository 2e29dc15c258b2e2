"""Tests for scan manifest parsing and validation."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.scan_manifest import (
    SYNTAX_DIAGNOSTICS_ENV,
    ScanManifest,
    load_scan_manifest,
    resolve_header_path,
)


class TestScanManifest(unittest.TestCase):
    def _write_manifest(self, text: str, suffix: str = ".yml") -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
        handle.write(text)
        handle.flush()
        handle.close()
        return handle.name

    def test_load_valid_manifest(self) -> None:
        path = self._write_manifest(
            """
include_root: modules/clap/include/clap
abi_tags: [CLAP_ABI]
primitives:
  - {name: uint32_t, compatible: true}
  - {name: "const char *", compatible: false}
headers:
  - version.h
  - entry.h
"""
        )
        try:
            manifest = load_scan_manifest(path)
            self.assertEqual(manifest.headers, ["version.h", "entry.h"])
            self.assertEqual(manifest.include_root, "modules/clap/include/clap")
            self.assertEqual(manifest.abi_tags, ["CLAP_ABI"])
            self.assertEqual(
                manifest.primitive_pairs(),
                [("uint32_t", True), ("const char *", False)],
            )
            self.assertEqual(manifest.output_file, "output/abi_model.json")
        finally:
            Path(path).unlink(missing_ok=True)

    def test_load_json_manifest_defaults(self) -> None:
        path = self._write_manifest('{"headers": ["version.h"]}', suffix=".json")
        try:
            manifest = load_scan_manifest(path)
            self.assertEqual(manifest.include_root, ".")
            self.assertIsNone(manifest.primitives)
            self.assertIsNone(manifest.primitive_pairs())
            self.assertIsNone(manifest.abi_tags)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_missing_headers_raises(self) -> None:
        path = self._write_manifest("include_root: .\n")
        try:
            with self.assertRaises(ValueError):
                load_scan_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_duplicate_headers_raise(self) -> None:
        path = self._write_manifest("headers: [version.h, version.h]\n")
        try:
            with self.assertRaises(ValueError):
                load_scan_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_non_bool_compatible_raises(self) -> None:
        path = self._write_manifest(
            """
headers: [version.h]
primitives:
  - {name: bool, compatible: "yes"}
"""
        )
        try:
            with self.assertRaises(ValueError):
                load_scan_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_duplicate_primitive_raises(self) -> None:
        path = self._write_manifest(
            """
headers: [version.h]
primitives:
  - {name: bool, compatible: true}
  - {name: bool, compatible: false}
"""
        )
        try:
            with self.assertRaises(ValueError):
                load_scan_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_non_object_manifest_raises(self) -> None:
        path = self._write_manifest("- version.h\n")
        try:
            with self.assertRaises(ValueError):
                load_scan_manifest(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_scan_manifest("/definitely/missing.yml")

    def test_syntax_diagnostics_env_default(self) -> None:
        path = self._write_manifest("headers: [version.h]\n")
        try:
            with patch.dict(os.environ, {SYNTAX_DIAGNOSTICS_ENV: "0"}):
                self.assertFalse(load_scan_manifest(path).syntax_diagnostics)
            with patch.dict(os.environ, {SYNTAX_DIAGNOSTICS_ENV: "on"}):
                self.assertTrue(load_scan_manifest(path).syntax_diagnostics)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_resolve_header_path(self) -> None:
        manifest = ScanManifest(headers=["entry.h"], include_root="include/clap")
        resolved = resolve_header_path(Path("/tmp/work"), manifest, "entry.h")
        self.assertEqual(str(resolved), "/tmp/work/include/clap/entry.h")

        absolute = ScanManifest(headers=["entry.h"], include_root="/opt/clap")
        self.assertEqual(
            str(resolve_header_path(Path("/tmp/work"), absolute, "entry.h")),
            "/opt/clap/entry.h",
        )
        self.assertEqual(
            str(resolve_header_path(Path("/tmp/work"), absolute, "/abs/x.h")),
            "/abs/x.h",
        )


if __name__ == "__main__":
    unittest.main()
