"""
High-level orchestrator for header scanning.

``HeaderScanner`` owns one ``TypeRegistry`` and runs the extraction pipeline
(struct blocks, field parsing, compatibility classification) over headers
supplied in dependency order.
"""

import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from typegraph.blocks import iter_struct_blocks
from typegraph.classifier import classify_struct
from typegraph.config import DEFAULT_PRIMITIVES, DEFAULT_SYNTAX_DIAGNOSTICS
from typegraph.errors import TypeGraphError
from typegraph.exporter import ExportedModel, export_model, model_to_dict
from typegraph.fields import parse_struct_fields
from typegraph.parser import count_syntax_errors
from typegraph.registry import TypeRegistry
from typegraph.seeder import seed_primitive, seed_primitives

logger = logging.getLogger(__name__)


class ScanStats:
    """Statistics for a scanning run."""

    def __init__(self):
        self.headers_scanned = 0
        self.structs_registered = 0
        self.structs_compatible = 0
        self.structs_skipped = 0
        self.signatures_registered = 0
        self.syntax_errors = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "headers_scanned": self.headers_scanned,
            "structs_registered": self.structs_registered,
            "structs_compatible": self.structs_compatible,
            "structs_skipped": self.structs_skipped,
            "signatures_registered": self.signatures_registered,
            "syntax_errors": self.syntax_errors,
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ScanStats(headers={self.headers_scanned}, "
            f"structs={self.structs_registered}, "
            f"compatible={self.structs_compatible}, "
            f"skipped={self.structs_skipped}, "
            f"signatures={self.signatures_registered}, "
            f"syntax_errors={self.syntax_errors})"
        )


class HeaderScanner:
    """Single-pass scanner building the type registry of an ABI header set.

    Args:
        registry: Registry to populate. A fresh one is created if omitted;
            passing one lets a caller pre-register overrides.
        abi_tags: Accepted function-pointer calling-convention markers. None
            accepts any identifier.
        syntax_diagnostics: Whether ``scan_file`` reports tree-sitter syntax
            errors.
    """

    def __init__(
        self,
        registry: Optional[TypeRegistry] = None,
        abi_tags: Optional[Iterable[str]] = None,
        syntax_diagnostics: bool = DEFAULT_SYNTAX_DIAGNOSTICS,
    ):
        self.registry = registry if registry is not None else TypeRegistry()
        self.abi_tags = tuple(abi_tags) if abi_tags is not None else None
        self.syntax_diagnostics = syntax_diagnostics
        self.stats = ScanStats()
        self._scan_started = False

    def seed_primitive(self, name: str, compatible: bool) -> bool:
        """Pre-register a base type. Must be called before any scan.

        Raises:
            TypeGraphError: If a header has already been scanned.
        """
        if self._scan_started:
            raise TypeGraphError(
                f"Cannot seed primitive {name}: scanning has already started"
            )
        return seed_primitive(self.registry, name, compatible)

    def seed_defaults(
        self,
        primitives: Iterable[Tuple[str, bool]] = DEFAULT_PRIMITIVES,
    ) -> int:
        """Seed a list of primitives (the CLAP defaults when omitted)."""
        if self._scan_started:
            raise TypeGraphError("Cannot seed primitives: scanning has already started")
        return seed_primitives(self.registry, primitives)

    def scan_header(self, source_text: str, origin: str = "<memory>") -> List[str]:
        """Process one header's text against the current registry.

        Struct blocks whose name is already registered are treated as
        overrides and skipped.

        Args:
            source_text: Full header text.
            origin: Label used in log messages.

        Returns:
            Names of the structs registered by this header, in order.

        Raises:
            TypeGraphError: On the first unknown type, malformed field or
                malformed struct block.
        """
        if self.registry.frozen:
            raise TypeGraphError(f"Cannot scan {origin}: the model was already exported")
        self._scan_started = True

        registered: List[str] = []
        try:
            for block in iter_struct_blocks(source_text):
                if block.name in self.registry:
                    logger.info(
                        "Skipping %s (%s:%d): already defined",
                        block.name,
                        origin,
                        block.line,
                    )
                    self.stats.structs_skipped += 1
                    continue

                fields = parse_struct_fields(
                    self.registry, block.name, block.body, self.abi_tags
                )
                descriptor = classify_struct(self.registry, block.name, fields)

                registered.append(block.name)
                self.stats.structs_registered += 1
                if descriptor.compatible:
                    self.stats.structs_compatible += 1
                self.stats.signatures_registered += sum(
                    1 for f in fields if self.registry[f.field_type].is_signature
                )
        except TypeGraphError as e:
            logger.error("Error scanning %s: %s", origin, e)
            raise

        self.stats.headers_scanned += 1
        logger.info("Scanned %s: %d structs registered", origin, len(registered))
        return registered

    def scan_file(self, file_path: str) -> List[str]:
        """Read a header from disk and scan it.

        Raises:
            FileNotFoundError: If the file does not exist.
            TypeGraphError: On the first scan error.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"Header not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            source_text = f.read()

        if self.syntax_diagnostics:
            error_count = count_syntax_errors(source_text)
            if error_count:
                logger.warning(
                    "Header %s contains syntax errors (%d error nodes)",
                    file_path,
                    error_count,
                )
            self.stats.syntax_errors += error_count

        return self.scan_header(source_text, origin=file_path)

    def export_model(self) -> ExportedModel:
        """Return ``(name, descriptor)`` struct entries in discovery order."""
        return export_model(self.registry)

    def model_dict(self) -> Dict[str, Any]:
        """Export the model and render it as a JSON-ready dictionary."""
        return model_to_dict(self.registry, self.export_model())


def scan_headers(
    file_paths: Sequence[str],
    primitives: Iterable[Tuple[str, bool]] = DEFAULT_PRIMITIVES,
    abi_tags: Optional[Iterable[str]] = None,
    syntax_diagnostics: bool = DEFAULT_SYNTAX_DIAGNOSTICS,
) -> HeaderScanner:
    """Seed primitives and scan ``file_paths`` in the given order.

    Returns:
        The scanner, ready for ``export_model``.

    Example:
        >>> scanner = scan_headers(["clap/version.h", "clap/entry.h"])
        >>> for name, descriptor in scanner.export_model():
        ...     print(name, descriptor.compatible)
    """
    scanner = HeaderScanner(abi_tags=abi_tags, syntax_diagnostics=syntax_diagnostics)
    scanner.seed_defaults(primitives)
    for file_path in file_paths:
        scanner.scan_file(file_path)
    logger.info(f"Scan complete: {scanner.stats}")
    return scanner
