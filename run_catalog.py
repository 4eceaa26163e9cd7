#!/usr/bin/env python3
"""
Command-line front end for the TeX command catalog.

Scans a project directory, records the packages it uses, and writes the
merged suggestion list as JSON. Optionally lists the commands usable for
wrapping a selection.

Usage:
    python run_catalog.py --source-dir ./thesis
    python run_catalog.py --source-dir ./thesis --active-file ./thesis/main.tex --wrap
    python run_catalog.py --source-dir ./thesis --settings catalog.yml --output-file out/suggestions.json
"""

import argparse
import json
import logging
import os
import sys
import time
from typing import Tuple

from completion.catalog import CommandCatalog
from completion.host import WorkspaceHost
from completion.surround import list_wrappable_templates
from core.data_files import DataSourceError
from core.run_artifacts import build_catalog_report, write_catalog_report
from core.settings import ConfigValidationError, load_settings
from core.structured_logging import configure_structured_logging, phase_scope, set_session_id
from extraction.extractor import ExtractionStats, extract_directory

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="TeX Command Completion Catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_catalog.py --source-dir ./thesis\n"
            "  python run_catalog.py --source-dir ./thesis --active-file ./thesis/main.tex --wrap\n"
        )
    )

    parser.add_argument(
        "--source-dir",
        required=True,
        help="Project directory whose TeX files are scanned."
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help=(
            "Directory with the default data tables. "
            "Default: data_dir from --settings or TEXCATALOG_DATA_DIR, else ./data"
        )
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Optional YAML settings file with intellisense feature flags."
    )
    parser.add_argument(
        "--active-file",
        default=None,
        help="File treated as the focused document."
    )
    parser.add_argument(
        "--output-file",
        default="output/suggestions.json",
        help="Path for the suggestion list. Default: output/suggestions.json"
    )
    parser.add_argument(
        "--wrap",
        action="store_true",
        default=False,
        help="Print the commands usable to wrap a selection."
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="If set, write a JSON run report into this directory."
    )

    return parser.parse_args()


def build_catalog(args: argparse.Namespace) -> Tuple[CommandCatalog, ExtractionStats]:
    """Load settings and data tables, then scan the project.

    Returns:
        The populated catalog and the statistics of the directory scan.

    Raises:
        FileNotFoundError: If the source directory does not exist.
        DataSourceError: If a default data table is missing or invalid.
        ConfigValidationError: If strict settings validation fails.
    """
    if not os.path.isdir(args.source_dir):
        raise FileNotFoundError(f"Source directory not found: {args.source_dir}")

    settings = load_settings(args.settings)
    host = WorkspaceHost(
        root=args.source_dir,
        settings=settings,
        active_file=args.active_file,
    )
    catalog = CommandCatalog.from_data_dir(
        host, settings, data_dir=args.data_dir or settings.data_dir
    )

    with phase_scope("rescan"):
        results, stats = extract_directory(args.source_dir)
        for result in results:
            catalog.add_extraction(result)

    logger.info(f"Files scanned    : {stats.files_processed} ({stats.files_failed} failed)")
    logger.info(f"Packages used    : {', '.join(catalog.used_packages) or '-'}")
    logger.info(f"Macros defined   : {len(catalog.macro_definitions)}")
    return catalog, stats


def main() -> None:
    """Main entry point for the catalog tool."""
    configure_structured_logging()
    session_id = set_session_id()

    args = parse_args()

    try:
        t0 = time.time()
        catalog, stats = build_catalog(args)
        suggestions = [s.to_dict() for s in catalog.provide()]
        elapsed = time.time() - t0

        os.makedirs(os.path.dirname(os.path.abspath(args.output_file)), exist_ok=True)
        with open(args.output_file, "w", encoding="utf-8") as f:
            json.dump(suggestions, f, indent=2, ensure_ascii=False)
        logger.info(
            "Wrote %d suggestions to %s in %.2fs", len(suggestions), args.output_file, elapsed
        )

        if args.wrap:
            for template in list_wrappable_templates(catalog.suggestions):
                print(template)

        if args.report_dir:
            report = build_catalog_report(
                source_dir=os.path.abspath(args.source_dir),
                suggestions=suggestions,
                used_packages=catalog.used_packages,
                macro_definitions={
                    name: {"file": record.file_path, "line": record.line}
                    for name, record in catalog.macro_definitions.items()
                },
                extraction_stats=stats.to_dict(),
                elapsed_seconds=elapsed,
            )
            path = write_catalog_report(report, session_id, output_dir=args.report_dir)
            logger.info("Run report written to %s", path)

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        sys.exit(1)
    except (DataSourceError, ConfigValidationError) as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
