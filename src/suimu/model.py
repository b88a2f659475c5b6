# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for clip records and catalog entries."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

AUDIO_EXTENSION = "m4a"
MEMBER_ONLY_FLAG = 0x1


class Platform(Enum):
    """Supported source platforms, valued by their CSV code."""

    TWITTER = "TWITTER"
    BILIBILI = "BILIBILI"
    YOUTUBE = "YOUTUBE"

    @property
    def code(self) -> str:
        return self.value


class RejectionReason(Enum):
    """Reasons a raw record cannot become a domain record."""

    INVALID_TIMESTAMP = "invalid_timestamp"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    BLANK_PLATFORM = "blank_platform"
    MISSING_STATUS = "missing_status"
    EMPTY_TITLE = "empty_title"
    MALFORMED_CLIP_BOUND = "malformed_clip_bound"
    INVALID_CLIP_RANGE = "invalid_clip_range"


@dataclass(frozen=True)
class RawRecord:
    """Represent one row as produced by the tabular decoder.

    Attributes:
        datetime: Recording timestamp text.
        video_type: Platform code text; blank marks an intentional skip.
        video_id: Platform-scoped video identifier.
        clip_start: Optional clip start seconds, as text or number.
        clip_end: Optional clip end seconds, as text or number.
        status: Status bit field; ``None`` when the cell was empty.
        title: Track title.
        artist: Track artist.
        performer: Performer of this rendition.
        comment: Free-form comment.
    """

    datetime: str
    video_type: str
    video_id: str
    clip_start: str | float | None = None
    clip_end: str | float | None = None
    status: int | None = None
    title: str = ""
    artist: str = ""
    performer: str = ""
    comment: str = ""

    def __str__(self) -> str:
        if self.video_type.strip():
            video_desc = f"{self.video_type}/{self.video_id}"
        else:
            video_desc = f"paid, {self.datetime}"
        return _describe(self.title, self.artist, video_desc)


@dataclass(frozen=True)
class DomainRecord:
    """Represent one validated clip record.

    Attributes:
        recorded_at: Timezone-aware recording timestamp.
        platform: Source platform.
        external_id: Trimmed platform-scoped video identifier.
        clip_start: Optional clip start in seconds.
        clip_end: Optional clip end in seconds.
        status: Status bit field.
        title: Trimmed, non-empty title.
        artist: Trimmed artist; empty when unknown.
        performer: Trimmed performer; empty when unknown.
        comment: Comment, kept verbatim.
        identity: Stable 16 hex char content identifier.
    """

    recorded_at: datetime
    platform: Platform
    external_id: str
    clip_start: float | None
    clip_end: float | None
    status: int
    title: str
    artist: str
    performer: str
    comment: str
    identity: str

    @property
    def source_key(self) -> tuple[Platform, str]:
        """Key identifying the downloaded source shared by clips of one upload."""
        return (self.platform, self.external_id)

    @property
    def artifact_name(self) -> str:
        return f"{self.identity}.{AUDIO_EXTENSION}"

    def is_member_only(self) -> bool:
        return bool(self.status & MEMBER_ONLY_FLAG)

    def __str__(self) -> str:
        return _describe(
            self.title, self.artist, f"{self.platform.code}/{self.external_id}"
        )


@dataclass(frozen=True)
class CatalogEntry:
    """Represent one published artifact in the output catalog.

    Attributes:
        url: Public URL of the converted audio file.
        recorded_at: Recording timestamp, serialized as ``datetime``.
        title: Track title.
        artist: Track artist.
        performer: Performer of this rendition.
        status: Status bit field.
        source_url: Platform page of the source video, serialized as ``source``.
    """

    url: str
    recorded_at: datetime
    title: str
    artist: str
    performer: str
    status: int
    source_url: str


def _describe(title: str, artist: str, video_desc: str) -> str:
    if not title:
        return f"Untitled ({video_desc})"
    if not artist:
        return f"{title} ({video_desc})"
    return f"{artist} - {title} ({video_desc})"
