# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Build orchestration driving downloads and conversions per record."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from suimu.model import DomainRecord, Platform
from suimu.platforms import PlatformRegistry
from suimu.resolver import ArtifactResolver
from suimu.runner import ToolRunner

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, DomainRecord], None]


class FailureMemo:
    """Remember sources whose download failed during one build run."""

    def __init__(self) -> None:
        self._failed: set[tuple[Platform, str]] = set()

    def add(self, record: DomainRecord) -> None:
        self._failed.add(record.source_key)

    def __contains__(self, key: object) -> bool:
        return key in self._failed

    def __len__(self) -> int:
        return len(self._failed)


@dataclass(frozen=True)
class BuildReport:
    """Represent per-run build counters.

    Attributes:
        total: Records handed to the builder.
        built: Records converted in this run.
        already_built: Records whose output existed already.
        download_failed: Records abandoned because their download failed.
        convert_failed: Records abandoned because their conversion failed.
        skipped_prior_failure: Records skipped because their source failed earlier.
    """

    total: int
    built: int = 0
    already_built: int = 0
    download_failed: int = 0
    convert_failed: int = 0
    skipped_prior_failure: int = 0

    @property
    def failed(self) -> int:
        return self.download_failed + self.convert_failed + self.skipped_prior_failure


class Builder:
    """Build audio artifacts for records, one record at a time."""

    def __init__(
        self,
        runner: ToolRunner,
        resolver: ArtifactResolver,
        registry: PlatformRegistry,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            runner: Downloader and transcoder invoker.
            resolver: Resolver for source and output paths.
            registry: Platform settings passed to downloads.
            on_progress: Optional callback receiving ``(index, total, record)``
                with a 1-based index before each record is processed.
        """
        self._runner = runner
        self._resolver = resolver
        self._registry = registry
        self._on_progress = on_progress

    def build(self, records: Sequence[DomainRecord]) -> BuildReport:
        """Process records sequentially.

        A failing record is logged and abandoned; the run continues with the
        next record. A download failure is remembered so that later records
        sharing the same source are skipped without another attempt.

        Args:
            records: Records to process, in processing order.

        Returns:
            Counters for the run.

        Raises:
            ToolLaunchError: If an external tool cannot be started.
        """
        memo = FailureMemo()
        total = len(records)
        counts = {
            "built": 0,
            "already_built": 0,
            "download_failed": 0,
            "convert_failed": 0,
            "skipped_prior_failure": 0,
        }

        logger.info("=============== Starting build ===============")
        for index, record in enumerate(records, start=1):
            logger.info(f"======== Building {index} / {total} ========")
            if self._on_progress is not None:
                self._on_progress(index, total, record)
            result = self._build_one(record=record, memo=memo)
            counts[result] += 1
        logger.info("=============== Finishing build ===============")

        report = BuildReport(total=total, **counts)
        logger.info(
            f"Build completed (total={report.total} built={report.built} "
            f"already_built={report.already_built} failed={report.failed})"
        )
        return report

    def _build_one(self, record: DomainRecord, memo: FailureMemo) -> str:
        """Run the remaining build steps of one record.

        Returns:
            Name of the counter the record contributes to.
        """
        resolution = self._resolver.resolve(record, failed_sources=memo)
        if resolution.state == "already_built":
            logger.info(f"Found {resolution.output_path}, skipping")
            return "already_built"
        if resolution.previously_failed:
            logger.info(
                f"Skipping {record}: download of {record.platform.code}/"
                f"{record.external_id} already failed in this run"
            )
            return "skipped_prior_failure"

        if resolution.needs_download:
            logger.info(f"Downloading {record}")
            outcome = self._runner.run_download(
                record, self._registry.lookup(record.platform), resolution.source_path
            )
            if not outcome.succeeded:
                memo.add(record)
                logger.warning(
                    f"Download failed for {record} (status={outcome.exit_status})"
                )
                return "download_failed"
        else:
            logger.info(f"Skipping download: found {resolution.source_path}")

        logger.info(f"Converting {record}")
        outcome = self._runner.run_convert(
            record, resolution.source_path, resolution.output_path
        )
        if not outcome.succeeded:
            logger.warning(f"Conversion failed for {record} (status={outcome.exit_status})")
            return "convert_failed"
        return "built"
