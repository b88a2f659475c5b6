# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""External tool runner abstractions."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

from suimu.model import DomainRecord
from suimu.platforms import PlatformInfo

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["success", "failed"]


class ToolLaunchError(RuntimeError):
    """Represent an external tool that could not be started at all."""


@dataclass(frozen=True)
class ToolOutcome:
    """Represent the result of one external tool invocation.

    Attributes:
        status: ``success`` on exit status zero, ``failed`` otherwise.
        exit_status: Process exit status; ``None`` if the process timed out.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    status: OutcomeStatus
    exit_status: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class ToolRunner(Protocol):
    """Define the downloader and transcoder invocations used by a build."""

    def run_download(
        self, record: DomainRecord, platform_info: PlatformInfo, source_path: Path
    ) -> ToolOutcome:
        """Download the source video of a record.

        Args:
            record: Record whose source is downloaded.
            platform_info: Settings of the record's platform.
            source_path: Target path of the downloaded file.

        Returns:
            Outcome of the downloader process.

        Raises:
            ToolLaunchError: If the downloader cannot be started.
        """

    def run_convert(
        self, record: DomainRecord, source_path: Path, output_path: Path
    ) -> ToolOutcome:
        """Extract and tag the audio clip of a record.

        Args:
            record: Record to convert.
            source_path: Downloaded source file.
            output_path: Final audio file path.

        Returns:
            Outcome of the transcoder process.

        Raises:
            ToolLaunchError: If the transcoder cannot be started.
        """
