# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""End-to-end build run from a clip sheet to audio files and catalogs."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from suimu.builder import Builder, BuildReport, ProgressCallback
from suimu.catalog import CatalogDiff, build_entries, diff, filter_stale
from suimu.config import BuildConfig
from suimu.model import CatalogEntry, RawRecord
from suimu.normalizer import Rejection, normalize_all
from suimu.persistence import CatalogFormatError, CatalogStore
from suimu.platforms import PlatformRegistry
from suimu.reader import read_records
from suimu.resolver import ArtifactResolver, is_eligible
from suimu.runner import ToolRunner
from suimu.storage import JsonCatalogStore
from suimu.tools import SubprocessToolRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildSummary:
    """Represent the outcome of one build run.

    Attributes:
        entry_count: Rows read from the sheet.
        valid_count: Rows that normalized successfully.
        rejections: Rows that were rejected.
        process_count: Records that still needed work.
        report: Builder counters; ``None`` for a dry run.
        catalog: Entries written to the catalog, if one was configured.
        catalog_diff: Diff written, if a baseline existed and a diff was configured.
    """

    entry_count: int
    valid_count: int
    rejections: list[Rejection]
    process_count: int
    report: BuildReport | None = None
    catalog: list[CatalogEntry] | None = None
    catalog_diff: CatalogDiff | None = None


def run_build(
    config: BuildConfig,
    runner: ToolRunner | None = None,
    store: CatalogStore | None = None,
    registry: PlatformRegistry | None = None,
    raws: Sequence[RawRecord] | None = None,
    on_progress: ProgressCallback | None = None,
) -> BuildSummary:
    """Build the audio library and catalog described by a configuration.

    Args:
        config: Build configuration.
        runner: Tool runner; defaults to subprocesses of the configured tools.
        store: Catalog store; defaults to JSON files.
        registry: Platform registry; defaults to the built-in table.
        raws: Pre-decoded rows; read from ``config.csv_file`` when omitted.
        on_progress: Optional per-record progress callback.

    Returns:
        Summary of the run.

    Raises:
        ConfigurationError: If the configuration or directories are unusable.
        CsvFormatError: If the clip sheet cannot be decoded.
        CatalogError: If a catalog file cannot be read or written.
        ToolLaunchError: If an external tool cannot be started.
    """
    config.validate()
    logger.debug(f"CSV file: {config.csv_file}")
    logger.debug(f"Output path: {config.output_dir}")
    logger.debug(f"Source path: {config.source_dir}")

    registry = registry or PlatformRegistry()
    store = store or JsonCatalogStore()
    if raws is None:
        raws = read_records(config.csv_file)

    records, rejections = normalize_all(raws)
    logger.info(f"{len(records)} valid entries found.")

    resolver = ArtifactResolver(
        registry=registry, source_dir=config.source_dir, output_dir=config.output_dir
    )
    process = [
        record
        for record in records
        if is_eligible(record) and not resolver.is_built(record)
    ]
    logger.info(f"{len(process)} entries to process.")

    summary = BuildSummary(
        entry_count=len(raws),
        valid_count=len(records),
        rejections=rejections,
        process_count=len(process),
    )
    if config.dry_run:
        logger.info("Dry run: music processing is skipped.")
        return summary

    config.prepare_directories()
    previous = _load_previous(config=config, store=store)

    runner = runner or SubprocessToolRunner(
        downloader=config.ytdl,
        transcoder=config.ffmpeg,
        timeout=config.process_timeout,
    )
    report = Builder(
        runner=runner, resolver=resolver, registry=registry, on_progress=on_progress
    ).build(process)

    if config.output_json is None or config.baseurl is None:
        return replace(summary, report=report)

    entries = build_entries(
        records, registry=registry, baseurl=config.baseurl, output_dir=config.output_dir
    )
    store.save_catalog(config.output_json, entries)

    catalog_diff = diff(previous, entries)
    if catalog_diff is not None and config.output_diff is not None:
        store.save_diff(config.output_diff, catalog_diff)
    return replace(
        summary, report=report, catalog=entries, catalog_diff=catalog_diff
    )


def _load_previous(config: BuildConfig, store: CatalogStore) -> list[CatalogEntry] | None:
    """Load the diff baseline from the existing catalog file.

    Returns:
        Entries whose artifacts still exist, an empty list for an unparseable
        catalog, or ``None`` when no diff is configured or no catalog exists.

    Raises:
        CatalogError: If the catalog exists but cannot be read.
    """
    if config.output_json is None or config.output_diff is None:
        return None
    try:
        previous = store.load_catalog(config.output_json)
    except CatalogFormatError as exc:
        logger.warning(f"Failed to read old JSON, assuming empty: {exc}")
        return []
    if previous is None:
        logger.info("Old output_json not found, assuming no previous catalog.")
        return None
    return filter_stale(previous, config.output_dir)
