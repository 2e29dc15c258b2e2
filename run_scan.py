#!/usr/bin/env python3
"""
Top-level orchestrator for ABI header type-graph extraction.

Seeds the primitive types, scans the manifest's headers in order, and writes
the exported struct model as JSON together with a run report.

Usage:
    python run_scan.py --manifest manifests/clap.yml
    python run_scan.py --manifest manifests/clap.yml --output-file out/clap_model.json
    python run_scan.py --manifest manifests/clap.yml --verbose
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from core.run_artifacts import write_model_json, write_run_report
from core.scan_manifest import ScanManifest, load_scan_manifest, resolve_header_path
from core.structured_logging import (
    configure_structured_logging,
    header_scope,
    phase_scope,
    set_run_id,
)
from typegraph.config import DEFAULT_PRIMITIVES
from typegraph.errors import TypeGraphError
from typegraph.scanner import HeaderScanner

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="ABI header type-graph extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_scan.py --manifest manifests/clap.yml\n"
            "  python run_scan.py --manifest manifests/clap.yml --output-file out/model.json\n"
        )
    )

    parser.add_argument(
        "--manifest",
        required=True,
        help="Path to the YAML/JSON scan manifest."
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Path for the JSON model. Default: the manifest's output_file."
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Run correlation ID. Default: a generated UUID."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log every discovered field and signature."
    )

    return parser.parse_args(argv)


def run_scan(manifest: ScanManifest, manifest_dir: Path, output_file: str) -> dict:
    """Scan all manifest headers and write the JSON model.

    Returns:
        Run report payload.

    Raises:
        FileNotFoundError: If a header does not exist.
        TypeGraphError: On the first scan error.
    """
    scanner = HeaderScanner(
        abi_tags=manifest.abi_tags,
        syntax_diagnostics=manifest.syntax_diagnostics,
    )

    with phase_scope("seed"):
        primitives = manifest.primitive_pairs()
        scanner.seed_defaults(primitives if primitives is not None else DEFAULT_PRIMITIVES)

    t0 = time.time()
    with phase_scope("scan"):
        for header in manifest.headers:
            header_path = resolve_header_path(manifest_dir, manifest, header)
            with header_scope(header):
                scanner.scan_file(str(header_path))
    scan_time = time.time() - t0

    with phase_scope("export"):
        model = scanner.model_dict()
        write_model_json(model, output_file)

    logger.info("Scan completed in %.2fs: %s", scan_time, scanner.stats)
    logger.info("Wrote model to %s", os.path.abspath(output_file))

    return {
        "status": "success",
        "headers": list(manifest.headers),
        "output_file": output_file,
        "scan_seconds": round(scan_time, 3),
        "stats": scanner.stats.to_dict(),
    }


def main(argv=None) -> int:
    """Main entry point for the scanner CLI."""
    args = parse_args(argv)
    # TYPEGRAPH_* settings may come from a local .env file
    load_dotenv()
    configure_structured_logging(logging.DEBUG if args.verbose else logging.INFO)
    run_id = set_run_id(args.run_id)

    try:
        manifest = load_scan_manifest(args.manifest)
        output_file = args.output_file or manifest.output_file
        report = run_scan(manifest, Path(args.manifest).resolve().parent, output_file)
        report_path = write_run_report(report, run_id, output_dir=manifest.report_dir)
        logger.info("Run report: %s", report_path)

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except TypeGraphError as e:
        logger.error(f"Scan failed: {e}")
        return 1
    except UnicodeDecodeError as e:
        logger.error(f"Cannot read header: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid manifest: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
