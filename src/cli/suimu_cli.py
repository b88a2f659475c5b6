# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line interface for building and checking clip libraries."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from suimu.checker import Finding, check_records
from suimu.config import BuildConfig, ConfigurationError
from suimu.model import RawRecord
from suimu.persistence import CatalogError
from suimu.pipeline import BuildSummary, run_build
from suimu.reader import CsvFormatError, read_records
from suimu.runner import ToolLaunchError
from suimu.tools import DEFAULT_DOWNLOADER, DEFAULT_TRANSCODER

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_CSV_FILE = "suisei-music.csv"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="suimu")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging severity threshold.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser_ = subparsers.add_parser(
        "build", help="Build library from csv files."
    )
    build_parser_.add_argument("-c", "--csv-file", required=True, help="CSV file path.")
    build_parser_.add_argument(
        "-o", "--output-dir", required=True, help="Output directory."
    )
    build_parser_.add_argument(
        "-s", "--source-dir", required=True, help="Source directory."
    )
    build_parser_.add_argument("--output-json", help="Target JSON file.")
    build_parser_.add_argument(
        "--baseurl",
        help="Target JSON URL base, e.g. https://example.org/music/{}.{}",
    )
    build_parser_.add_argument("--output-diff", help="Target diff file.")
    build_parser_.add_argument(
        "-d", "--dry-run", action="store_true", help="Don't process musics."
    )
    build_parser_.add_argument(
        "--ffmpeg", default=DEFAULT_TRANSCODER, help="ffmpeg executable."
    )
    build_parser_.add_argument(
        "--ytdl", default=DEFAULT_DOWNLOADER, help="youtube-dl executable."
    )
    build_parser_.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Optional timeout in seconds for each external process.",
    )

    check_parser = subparsers.add_parser("check", help="Validate csv files.")
    check_parser.add_argument(
        "csv_file",
        nargs="?",
        default=DEFAULT_CSV_FILE,
        help="The CSV file to check.",
    )
    check_parser.add_argument(
        "-f", "--format-only", action="store_true", help="Only check formats."
    )
    check_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.log_level:
        logging.getLogger().setLevel(args.log_level)
    if args.command == "build":
        return _run_build(args=args, stdout=stdout, stderr=stderr)
    if args.command == "check":
        return _run_check(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    """Map parsed build arguments onto a build configuration."""
    return BuildConfig(
        csv_file=Path(args.csv_file),
        output_dir=Path(args.output_dir),
        source_dir=Path(args.source_dir),
        output_json=Path(args.output_json) if args.output_json else None,
        baseurl=args.baseurl,
        output_diff=Path(args.output_diff) if args.output_diff else None,
        dry_run=args.dry_run,
        ffmpeg=args.ffmpeg,
        ytdl=args.ytdl,
        process_timeout=args.timeout,
    )


def _run_build(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run build command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    config = config_from_args(args)
    try:
        summary = run_build(config)
    except (ConfigurationError, CsvFormatError, CatalogError, ToolLaunchError) as exc:
        logger.error(f"Build aborted (error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    _write_summary(summary=summary, stdout=stdout)
    return 0


def _run_check(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run check command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    csv_file = Path(args.csv_file)
    logger.info(f"CSV file: {csv_file}")
    if not csv_file.exists():
        logger.warning(f"Path does not exist (path={csv_file})")
        stderr.write(f"{csv_file} does not exist\n")
        return 2
    try:
        raws = read_records(csv_file)
    except CsvFormatError as exc:
        logger.warning(f"CSV validation failed (path={csv_file} error={exc})")
        stderr.write(f"CSV validation failed: {exc}\n")
        return 2

    findings = [] if args.format_only else check_records(raws)
    if args.format == "json":
        _write_json(raws=raws, findings=findings, stdout=stdout)
    elif args.format_only:
        _write_format_only(entry_count=len(raws), stdout=stdout)
    else:
        _write_findings_table(findings=findings, stdout=stdout)
    return 0


def _write_summary(summary: BuildSummary, stdout: TextIO) -> None:
    """Write a short build summary.

    Args:
        summary: Build outcome.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, expand=False)
    table.add_column("metric")
    table.add_column("value", justify="right")
    table.add_row("entries", str(summary.entry_count))
    table.add_row("valid", str(summary.valid_count))
    table.add_row("rejected", str(len(summary.rejections)))
    table.add_row("to_process", str(summary.process_count))
    if summary.report is not None:
        table.add_row("built", str(summary.report.built))
        table.add_row("failed", str(summary.report.failed))
    if summary.catalog is not None:
        table.add_row("catalog_entries", str(len(summary.catalog)))
    if summary.catalog_diff is not None:
        table.add_row("added", str(len(summary.catalog_diff.added)))
        table.add_row("removed", str(len(summary.catalog_diff.removed)))
    console.print(table)


def _write_json(raws: list[RawRecord], findings: list[Finding], stdout: TextIO) -> None:
    """Write parsed rows and findings in JSON format.

    Args:
        raws: Parsed rows.
        findings: Check findings.
        stdout: Standard output stream.
    """
    payload = {
        "records": [asdict(raw) for raw in raws],
        "findings": [asdict(finding) for finding in findings],
    }
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, ensure_ascii=False),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_format_only(entry_count: int, stdout: TextIO) -> None:
    """Confirm a format-only check without reporting row checks."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        f"Format check passed: {entry_count} entries. "
        "Logic and support checks skipped.",
        markup=False,
        highlight=False,
    )


def _write_findings_table(findings: list[Finding], stdout: TextIO) -> None:
    """Write check findings as a table.

    Args:
        findings: Check findings.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    if not findings:
        console.print("No problems found.", markup=False, highlight=False)
        return
    table = Table(show_header=True, show_lines=True, expand=True)
    table.add_column("line", justify="right")
    table.add_column("category")
    table.add_column("record", ratio=3, overflow="fold")
    table.add_column("message", ratio=3, overflow="fold")
    for finding in findings:
        table.add_row(
            str(finding.line), finding.category, finding.record, finding.message
        )
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
