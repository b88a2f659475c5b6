# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Artifact resolution for deciding which build steps a record needs."""

import logging
from collections.abc import Container
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from suimu.model import DomainRecord, Platform
from suimu.platforms import PlatformRegistry

logger = logging.getLogger(__name__)

ArtifactState = Literal[
    "already_built", "needs_download_and_convert", "needs_convert_only"
]


@dataclass(frozen=True)
class Resolution:
    """Represent the build state of one record.

    Attributes:
        state: Which steps remain.
        output_path: Expected converted audio path.
        source_path: Expected downloaded source path.
        previously_failed: Whether this run already failed to download the source.
    """

    state: ArtifactState
    output_path: Path
    source_path: Path
    previously_failed: bool = False

    @property
    def needs_download(self) -> bool:
        return self.state == "needs_download_and_convert"


def is_eligible(record: DomainRecord) -> bool:
    """Whether a record may be processed at all."""
    return not record.is_member_only()


class ArtifactResolver:
    """Locate source and output files of records on disk."""

    def __init__(
        self, registry: PlatformRegistry, source_dir: Path, output_dir: Path
    ) -> None:
        self._registry = registry
        self._source_dir = source_dir
        self._output_dir = output_dir

    def output_path(self, record: DomainRecord) -> Path:
        return self._output_dir / record.artifact_name

    def source_path(self, record: DomainRecord) -> Path:
        info = self._registry.lookup(record.platform)
        return self._source_dir / f"{record.external_id}.{info.source_extension}"

    def is_built(self, record: DomainRecord) -> bool:
        return self.output_path(record).exists()

    def resolve(
        self,
        record: DomainRecord,
        failed_sources: Container[tuple[Platform, str]] = (),
    ) -> Resolution:
        """Resolve which build steps a record needs.

        The output is checked before the source so that a built artifact is
        never rebuilt, even when its source has been removed since.

        Args:
            record: Record to resolve.
            failed_sources: Sources whose download already failed in this run.

        Returns:
            Resolution with the expected paths and remaining steps.
        """
        output_path = self.output_path(record)
        source_path = self.source_path(record)
        logger.debug(f"Checking destination (path={output_path})")
        if output_path.exists():
            return Resolution(
                state="already_built", output_path=output_path, source_path=source_path
            )

        logger.debug(f"Checking source (path={source_path})")
        state: ArtifactState = (
            "needs_convert_only" if source_path.exists() else "needs_download_and_convert"
        )
        return Resolution(
            state=state,
            output_path=output_path,
            source_path=source_path,
            previously_failed=record.source_key in failed_sources,
        )
