from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from shadow_ai_hunter import __version__
from shadow_ai_hunter.core.catalog import (
    CatalogError,
    default_services_path,
    load_catalog,
    merge_catalog,
)
from shadow_ai_hunter.core.detection import LogFormat, collect_files
from shadow_ai_hunter.core.reporting import ReportFormat, render_report, write_report
from shadow_ai_hunter.core.scan_service import scan_paths

LOGGER = logging.getLogger(__name__)

BANNER = (
    "\n  Shadow AI Hunter v{version} - Detect unauthorized AI service usage\n"
)

EPILOG = """examples:
  shadow-hunter --file /var/log/squid/access.log
  shadow-hunter --dir /var/log/proxy/ --format squid --output json
  shadow-hunter --file firewall.csv --format csv --out report.json --output json
"""


def _configure_logging() -> None:
    level_name = os.getenv("SHADOW_HUNTER_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shadow-hunter",
        description="Detect unauthorized AI service usage in proxy, DNS and CSV logs.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-f", "--file", default=None, help="Path to log file to scan")
    p.add_argument("-d", "--dir", default=None, help="Path to directory of log files to scan")
    p.add_argument(
        "--format",
        dest="log_format",
        choices=[f.value for f in LogFormat],
        default=LogFormat.AUTO.value,
        help="Log format (default: auto, guessed from the file name)",
    )
    p.add_argument(
        "--output",
        choices=[f.value for f in ReportFormat],
        default=ReportFormat.TABLE.value,
        help="Report format (default: table)",
    )
    p.add_argument("--out", default=None, help="Write report to file instead of stdout")
    p.add_argument(
        "--services",
        default=None,
        help="Path to AI services JSON (default: $SHADOW_HUNTER_SERVICES or the bundled catalog)",
    )
    p.add_argument("--custom", default=None, help="Additional AI services JSON to merge in")
    p.add_argument("--version", action="store_true", help="Show version")
    p.add_argument("-q", "--quiet", action="store_true", help="Suppress banner")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    p = _build_parser()
    args = p.parse_args(argv)

    if args.version:
        print(f"shadow-hunter v{__version__}")
        raise SystemExit(0)

    if not args.file and not args.dir:
        p.print_usage(sys.stderr)
        raise SystemExit(1)

    _configure_logging()
    if not args.quiet:
        print(BANNER.format(version=__version__), file=sys.stderr)

    try:
        catalog = load_catalog(args.services or default_services_path())
        if args.custom:
            catalog = merge_catalog(args.custom, catalog)
    except CatalogError as e:
        print(f"Error loading AI services database: {e}", file=sys.stderr)
        raise SystemExit(1)

    LOGGER.info("Loaded %d AI services (%d domains)", catalog.service_count, catalog.domain_count)

    files: list[Path] = []
    if args.file:
        files.append(Path(args.file))
    if args.dir:
        try:
            files.extend(collect_files(args.dir))
        except OSError as e:
            print(f"Error reading directory: {e}", file=sys.stderr)
            raise SystemExit(1)

    if not files:
        print("No log files found to scan.", file=sys.stderr)
        raise SystemExit(1)

    LOGGER.info("Scanning %d file(s)", len(files))
    try:
        result = asyncio.run(scan_paths(files, catalog=catalog, log_format=args.log_format))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    summary = result.summary
    try:
        if args.out:
            write_report(summary, args.output, args.out)
            LOGGER.info("Report written to %s", args.out)
        else:
            sys.stdout.write(render_report(summary, args.output))
    except OSError as e:
        print(f"Error writing report: {e}", file=sys.stderr)
        raise SystemExit(1)

    if summary.total_findings > 0:
        print(
            f"ALERT: {summary.total_findings} shadow AI connections detected "
            f"from {summary.unique_users} unique users",
            file=sys.stderr,
        )
    else:
        print("No shadow AI activity detected. Clean scan.", file=sys.stderr)


if __name__ == "__main__":
    main()
