"""
Integration tests for scanner.py

Tests the seed -> scan -> export pipeline over in-memory headers and the
fixture headers.
"""

import unittest
from pathlib import Path

from typegraph.errors import (
    MalformedFieldError,
    MalformedStructBlockError,
    RegistryFrozenError,
    TypeGraphError,
    UnknownTypeError,
)
from typegraph.scanner import HeaderScanner, ScanStats, scan_headers

WIDGET_HEADER = "typedef struct { uint32_t id; bool enabled; } widget_t;"
PANEL_HEADER = "typedef struct { widget_t w; const char * label; } panel_t;"


def _scanner(**kwargs):
    scanner = HeaderScanner(**kwargs)
    scanner.seed_primitive("uint32_t", True)
    scanner.seed_primitive("bool", True)
    scanner.seed_primitive("const char *", False)
    return scanner


class TestScanStats(unittest.TestCase):
    """Test ScanStats class."""

    def test_creation(self):
        stats = ScanStats()
        self.assertEqual(stats.headers_scanned, 0)
        self.assertEqual(stats.structs_registered, 0)
        self.assertEqual(stats.structs_skipped, 0)

    def test_to_dict_and_str(self):
        stats = ScanStats()
        stats.structs_registered = 4
        self.assertEqual(stats.to_dict()["structs_registered"], 4)
        self.assertIn("structs=4", str(stats))


class TestScanHeader(unittest.TestCase):
    """Test scanning in-memory header text."""

    def test_widget_panel_scenario(self):
        """Test the widget/panel classification scenario."""
        scanner = _scanner()
        self.assertEqual(scanner.scan_header(WIDGET_HEADER), ["widget_t"])
        widget = scanner.registry["widget_t"]
        self.assertTrue(widget.compatible)
        self.assertEqual(list(widget.fields), [("uint32_t", "id"), ("bool", "enabled")])

        self.assertEqual(scanner.scan_header(PANEL_HEADER), ["panel_t"])
        self.assertFalse(scanner.registry["panel_t"].compatible)

    def test_rescan_is_idempotent(self):
        """Test that an already-registered name is skipped, not overwritten."""
        scanner = _scanner()
        scanner.scan_header(WIDGET_HEADER)
        before = scanner.registry["widget_t"]
        self.assertEqual(scanner.scan_header(WIDGET_HEADER), [])
        self.assertIs(scanner.registry["widget_t"], before)
        self.assertEqual(scanner.stats.structs_skipped, 1)

    def test_pre_seeded_override_is_kept(self):
        """Test that a manually seeded name shadows the header definition."""
        scanner = _scanner()
        scanner.seed_primitive("widget_t", False)
        self.assertEqual(scanner.scan_header(WIDGET_HEADER), [])
        self.assertEqual(scanner.registry["widget_t"].kind, "Primitive")
        self.assertFalse(scanner.registry["widget_t"].compatible)

    def test_forward_reference_rejected(self):
        """Test that referencing a later type fails naming struct and type."""
        scanner = _scanner()
        header = (
            "typedef struct { gadget_t g; } box_t;\n"
            "typedef struct { uint32_t id; } gadget_t;\n"
        )
        with self.assertRaises(UnknownTypeError) as ctx:
            scanner.scan_header(header)
        self.assertEqual(ctx.exception.struct_name, "box_t")
        self.assertEqual(ctx.exception.type_name, "gadget_t")
        self.assertNotIn("gadget_t", scanner.registry)

    def test_reference_to_earlier_struct_in_same_header(self):
        scanner = _scanner()
        header = (
            "typedef struct { uint32_t id; } gadget_t;\n"
            "typedef struct { gadget_t g; } box_t;\n"
        )
        self.assertEqual(scanner.scan_header(header), ["gadget_t", "box_t"])
        self.assertTrue(scanner.registry["box_t"].compatible)

    def test_function_pointer_struct_incompatible(self):
        scanner = _scanner()
        scanner.scan_header(
            "typedef struct {\n"
            "   uint32_t id;\n"
            "   uint32_t (CLAP_ABI *sum)(uint32_t x, uint32_t y);\n"
            "} calc_t;\n"
        )
        calc = scanner.registry["calc_t"]
        self.assertFalse(calc.compatible)
        self.assertEqual(list(calc.fields), [("uint32_t", "id"), ("calc_t.sum", "sum")])
        self.assertEqual(scanner.registry["calc_t.sum"].arg_types, ("uint32_t", "uint32_t"))
        self.assertEqual(scanner.stats.signatures_registered, 1)

    def test_failed_struct_can_be_rescanned(self):
        """Test that a struct failing after a function pointer can be scanned again."""
        scanner = _scanner()
        with self.assertRaises(UnknownTypeError):
            scanner.scan_header("typedef struct { void (CLAP_ABI *f)(void); nope_t x; } s_t;")
        self.assertNotIn("s_t.f", scanner.registry)

        scanner.scan_header("typedef struct { void (CLAP_ABI *f)(void); uint32_t x; } s_t;")
        self.assertEqual(scanner.registry["s_t"].fields[0], ("s_t.f", "f"))
        self.assertEqual(scanner.stats.signatures_registered, 1)

    def test_malformed_field_aborts(self):
        scanner = _scanner()
        with self.assertRaises(MalformedFieldError):
            scanner.scan_header("typedef struct { uint32_t values[4]; } arr_t;")
        self.assertNotIn("arr_t", scanner.registry)

    def test_malformed_block_aborts(self):
        scanner = _scanner()
        with self.assertRaises(MalformedStructBlockError):
            scanner.scan_header("typedef struct clap_x {\n uint32_t a;\n} clap_y_t;\n")

    def test_abi_tags_restrict_function_pointers(self):
        scanner = _scanner(abi_tags=["CLAP_ABI"])
        with self.assertRaises(MalformedFieldError):
            scanner.scan_header("typedef struct { void (WINAPI *f)(void); } w_t;")

    def test_seed_after_scan_rejected(self):
        scanner = _scanner()
        scanner.scan_header(WIDGET_HEADER)
        with self.assertRaises(TypeGraphError):
            scanner.seed_primitive("uint64_t", True)


class TestExportModel(unittest.TestCase):
    """Test the exported model view."""

    def test_export_order_across_headers(self):
        """Test that structs export in discovery order, primitives omitted."""
        scanner = _scanner()
        scanner.scan_header(
            "typedef struct { uint32_t a; } a_t;\n"
            "typedef struct { void (CLAP_ABI *f)(void); } b_t;\n"
        )
        scanner.scan_header("typedef struct { a_t a; } c_t;\n")
        model = scanner.export_model()
        self.assertEqual([name for name, _ in model], ["a_t", "b_t", "c_t"])
        self.assertTrue(all(d.kind == "Struct" for _, d in model))
        self.assertEqual([d.compatible for _, d in model], [True, False, True])

    def test_export_freezes_registry(self):
        scanner = _scanner()
        scanner.scan_header(WIDGET_HEADER)
        scanner.export_model()
        with self.assertRaises(TypeGraphError):
            scanner.scan_header(PANEL_HEADER)
        with self.assertRaises(RegistryFrozenError):
            scanner.registry.add_if_absent(scanner.registry["bool"])

    def test_model_dict_includes_signatures(self):
        scanner = _scanner()
        scanner.scan_header(
            "typedef struct {\n"
            "   const char *name;\n"
            "   bool(CLAP_ABI *resize)(uint32_t width, uint32_t height);\n"
            "} view_t;\n"
        )
        payload = scanner.model_dict()
        self.assertEqual(len(payload["structs"]), 1)
        view = payload["structs"][0]
        self.assertEqual(view["name"], "view_t")
        self.assertFalse(view["compatible"])
        self.assertEqual(view["fields"][0], {"type": "const char *", "name": "name"})
        self.assertEqual(
            view["fields"][1]["signature"],
            {"return_type": "bool", "arg_types": ["uint32_t", "uint32_t"]},
        )
        self.assertEqual(
            [p["name"] for p in payload["primitives"]],
            ["uint32_t", "bool", "const char *"],
        )


class TestScanFixtureHeaders(unittest.TestCase):
    """Test scanning the CLAP-style fixture headers from disk."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_scan_with_default_primitives(self):
        """Test that the entry override is skipped and the rest classified."""
        scanner = scan_headers(
            [
                str(self.fixtures_dir / "version.h"),
                str(self.fixtures_dir / "entry.h"),
            ],
            abi_tags=["CLAP_ABI"],
        )
        model = dict(scanner.export_model())
        self.assertEqual(
            list(model),
            [
                "clap_version_t",
                "clap_plugin_limits_t",
                "clap_plugin_info_t",
                "clap_plugin_query_t",
            ],
        )
        self.assertTrue(model["clap_version_t"].compatible)
        self.assertTrue(model["clap_plugin_limits_t"].compatible)
        self.assertFalse(model["clap_plugin_info_t"].compatible)
        self.assertFalse(model["clap_plugin_query_t"].compatible)
        self.assertEqual(scanner.registry["clap_plugin_query_t.count"].arg_types, ())

        stats = scanner.stats.to_dict()
        self.assertEqual(stats["headers_scanned"], 2)
        self.assertEqual(stats["structs_registered"], 4)
        self.assertEqual(stats["structs_compatible"], 2)
        self.assertEqual(stats["structs_skipped"], 1)
        self.assertEqual(stats["signatures_registered"], 2)

    def test_scan_without_entry_override(self):
        scanner = HeaderScanner(syntax_diagnostics=False)
        scanner.seed_defaults(
            [("uint32_t", True), ("uint64_t", True), ("float64_t", True),
             ("bool", True), ("const char *", False)]
        )
        scanner.scan_file(str(self.fixtures_dir / "version.h"))
        scanner.scan_file(str(self.fixtures_dir / "entry.h"))

        entry = scanner.registry["clap_plugin_entry_t"]
        self.assertEqual(entry.kind, "Struct")
        self.assertFalse(entry.compatible)
        self.assertEqual(
            [f.field_name for f in entry.fields],
            ["clap_version", "init", "deinit"],
        )
        init = scanner.registry["clap_plugin_entry_t.init"]
        self.assertEqual(init.return_type, "bool")
        self.assertEqual(init.arg_types, ("const char *",))
        deinit = scanner.registry["clap_plugin_entry_t.deinit"]
        self.assertIsNone(deinit.return_type)
        self.assertEqual(deinit.arg_types, ())
        self.assertEqual(scanner.stats.syntax_errors, 0)

    def test_unknown_type_in_file(self):
        scanner = HeaderScanner()
        scanner.seed_defaults()
        with self.assertRaises(UnknownTypeError) as ctx:
            scanner.scan_file(str(self.fixtures_dir / "broken.h"))
        self.assertEqual(ctx.exception.struct_name, "clap_host_info_t")
        self.assertEqual(ctx.exception.type_name, "clap_host_window_t")

    def test_missing_file_raises(self):
        scanner = HeaderScanner()
        with self.assertRaises(FileNotFoundError):
            scanner.scan_file(str(self.fixtures_dir / "missing.h"))


if __name__ == "__main__":
    unittest.main()
