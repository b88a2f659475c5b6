# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Build configuration."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from suimu.tools import DEFAULT_DOWNLOADER, DEFAULT_TRANSCODER

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Represent an unusable build configuration."""


@dataclass(frozen=True)
class BuildConfig:
    """Describe all values needed for one build run.

    Attributes:
        csv_file: Clip sheet to build from.
        output_dir: Directory receiving converted audio files.
        source_dir: Directory holding downloaded source videos.
        output_json: Optional catalog file; its previous content is the diff baseline.
        baseurl: Artifact URL template, required with ``output_json``.
        output_diff: Optional diff file, written only with ``output_json``.
        dry_run: Resolve records without downloading or converting.
        ffmpeg: Transcoder executable.
        ytdl: Downloader executable.
        process_timeout: Optional per-process timeout in seconds.
    """

    csv_file: Path
    output_dir: Path
    source_dir: Path
    output_json: Path | None = None
    baseurl: str | None = None
    output_diff: Path | None = None
    dry_run: bool = False
    ffmpeg: str = DEFAULT_TRANSCODER
    ytdl: str = DEFAULT_DOWNLOADER
    process_timeout: float | None = None

    def validate(self) -> None:
        """Check option combinations and the input file.

        Raises:
            ConfigurationError: If the configuration cannot be used.
        """
        if self.output_json is not None and not self.baseurl:
            raise ConfigurationError("--output-json requires --baseurl")
        if self.output_diff is not None and self.output_json is None:
            raise ConfigurationError("--output-diff requires --output-json")
        if self.process_timeout is not None and self.process_timeout <= 0:
            raise ConfigurationError("--timeout must be > 0")
        if not self.csv_file.exists():
            raise ConfigurationError(f"{self.csv_file} does not exist")

    def prepare_directories(self) -> None:
        """Create the source and output directories when missing.

        Raises:
            ConfigurationError: If a directory cannot be created or is not a directory.
        """
        for directory in (self.source_dir, self.output_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigurationError(
                    f"Directory {directory} is not usable: {exc}"
                ) from exc
        if not os.access(self.output_dir, os.W_OK):
            raise ConfigurationError(f"Directory {self.output_dir} is not writable")
