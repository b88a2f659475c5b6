# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Platform registry for download settings and source URLs."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from suimu.model import Platform

URL_PLACEHOLDER = "{}"


@dataclass(frozen=True)
class PlatformInfo:
    """Describe how a platform's videos are located and downloaded.

    Attributes:
        url_template: Page URL with one ``{}`` placeholder for the video id.
        format_selector: Downloader format selection expression.
        source_extension: Extension of the downloaded source file.
    """

    url_template: str
    format_selector: str
    source_extension: str

    def source_url(self, external_id: str) -> str:
        """Return the page URL of a video."""
        return self.url_template.replace(URL_PLACEHOLDER, external_id, 1)


DEFAULT_PLATFORM_INFO: Mapping[Platform, PlatformInfo] = {
    Platform.YOUTUBE: PlatformInfo(
        url_template="https://www.youtube.com/watch?v={}",
        format_selector="bestaudio[ext=m4a]",
        source_extension="mp4",
    ),
    Platform.TWITTER: PlatformInfo(
        url_template="https://www.twitter.com/i/status/{}",
        format_selector="best[ext=mp4]",
        source_extension="mp4",
    ),
    Platform.BILIBILI: PlatformInfo(
        url_template="https://www.bilibili.com/video/{}",
        format_selector="best[ext=flv]",
        source_extension="flv",
    ),
}


class PlatformRegistry:
    """Immutable lookup from platform to its download settings."""

    def __init__(self, entries: Mapping[Platform, PlatformInfo] | None = None) -> None:
        """Initialize the registry.

        Args:
            entries: Settings per platform. Defaults to the built-in table.

        Raises:
            ValueError: If any platform has no entry.
        """
        table = dict(DEFAULT_PLATFORM_INFO if entries is None else entries)
        missing = [platform.code for platform in Platform if platform not in table]
        if missing:
            raise ValueError(f"Platform registry is missing: {', '.join(missing)}")
        self._entries = MappingProxyType(table)

    def lookup(self, platform: Platform) -> PlatformInfo:
        return self._entries[platform]

    def source_url(self, platform: Platform, external_id: str) -> str:
        return self.lookup(platform).source_url(external_id)
