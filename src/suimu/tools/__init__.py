# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""External tool runner implementations for suimu."""

from suimu.tools.subprocess_runner import (
    DEFAULT_DOWNLOADER,
    DEFAULT_TRANSCODER,
    SubprocessToolRunner,
)

__all__ = ["DEFAULT_DOWNLOADER", "DEFAULT_TRANSCODER", "SubprocessToolRunner"]
