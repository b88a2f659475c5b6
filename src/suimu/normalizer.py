"""Record normalization from raw rows into validated domain records."""

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from suimu.identity import compute_identity
from suimu.model import DomainRecord, Platform, RawRecord, RejectionReason

logger = logging.getLogger(__name__)

LEGACY_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M%z"
LEGACY_TIMESTAMP_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}[+-]\d{2}:?\d{2}")
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


class RecordRejectedError(RuntimeError):
    """Represent a raw record that cannot be normalized."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


@dataclass(frozen=True)
class Rejection:
    """Represent one rejected raw record.

    Attributes:
        raw: The rejected input row.
        reason: Machine-readable rejection cause.
        message: Human-readable detail.
    """

    raw: RawRecord
    reason: RejectionReason
    message: str

    @property
    def is_intentional_skip(self) -> bool:
        """Whether the row was left incomplete on purpose.

        A missing status, or a blank platform paired with a blank video id,
        marks rows that are kept in the sheet but never built.
        """
        if self.reason is RejectionReason.MISSING_STATUS:
            return True
        return (
            self.reason is RejectionReason.BLANK_PLATFORM
            and not self.raw.video_id.strip()
        )


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 or legacy ``YYYY-MM-DDThh:mmZZZZ`` timestamp.

    Args:
        text: Timestamp text.

    Returns:
        Timezone-aware datetime.

    Raises:
        RecordRejectedError: If the text matches neither format, which both
            require a UTC offset.
    """
    try:
        if RFC3339_PATTERN.fullmatch(text):
            if text[-1:] in {"Z", "z"}:
                return datetime.fromisoformat(text[:-1] + "+00:00")
            return datetime.fromisoformat(text)
        if LEGACY_TIMESTAMP_PATTERN.fullmatch(text):
            return datetime.strptime(text, LEGACY_TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise RecordRejectedError(
            RejectionReason.INVALID_TIMESTAMP, f"Invalid datetime: {text!r}"
        ) from exc
    raise RecordRejectedError(
        RejectionReason.INVALID_TIMESTAMP, f"Invalid datetime: {text!r}"
    )


def parse_platform(text: str) -> Platform:
    """Look up a platform by its trimmed CSV code.

    Raises:
        RecordRejectedError: If the code is blank or not supported.
    """
    code = text.strip()
    if not code:
        raise RecordRejectedError(RejectionReason.BLANK_PLATFORM, "Empty video_type")
    try:
        return Platform(code)
    except ValueError as exc:
        raise RecordRejectedError(
            RejectionReason.UNSUPPORTED_PLATFORM, f"Platform not supported: {code!r}"
        ) from exc


def parse_clip_bound(value: str | float | None, field: str) -> float | None:
    """Parse an optional clip bound in seconds.

    Args:
        value: Cell value; blank text or ``None`` means absent.
        field: Column name used in the rejection message.

    Returns:
        Bound in seconds, or ``None`` when absent.

    Raises:
        RecordRejectedError: If the value is not a finite number.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise RecordRejectedError(
            RejectionReason.MALFORMED_CLIP_BOUND, f"Malformed {field}: {value!r}"
        ) from exc
    if not math.isfinite(seconds):
        raise RecordRejectedError(
            RejectionReason.MALFORMED_CLIP_BOUND, f"Malformed {field}: {value!r}"
        )
    return seconds


def check_logic(record: DomainRecord) -> None:
    """Validate cross-field consistency of a domain record.

    Raises:
        RecordRejectedError: If both clip bounds are set and start is not before end.
    """
    if record.clip_start is None or record.clip_end is None:
        return
    if not record.clip_start < record.clip_end:
        raise RecordRejectedError(
            RejectionReason.INVALID_CLIP_RANGE, "clip_start is later than clip_end"
        )


def build_record(raw: RawRecord) -> DomainRecord:
    """Build a domain record with its identity, without the logic check.

    Args:
        raw: Raw input row.

    Returns:
        Domain record carrying its computed identity.

    Raises:
        RecordRejectedError: If any field fails validation.
    """
    if raw.status is None:
        raise RecordRejectedError(RejectionReason.MISSING_STATUS, "No status present")
    platform = parse_platform(raw.video_type)
    recorded_at = parse_timestamp(raw.datetime)
    title = raw.title.strip()
    if not title:
        raise RecordRejectedError(RejectionReason.EMPTY_TITLE, "Title is empty")
    clip_start = parse_clip_bound(raw.clip_start, "clip_start")
    clip_end = parse_clip_bound(raw.clip_end, "clip_end")
    external_id = raw.video_id.strip()
    artist = raw.artist.strip()
    performer = raw.performer.strip()

    return DomainRecord(
        recorded_at=recorded_at,
        platform=platform,
        external_id=external_id,
        clip_start=clip_start,
        clip_end=clip_end,
        status=raw.status,
        title=title,
        artist=artist,
        performer=performer,
        comment=raw.comment,
        identity=compute_identity(
            platform=platform,
            external_id=external_id,
            clip_start=raw.clip_start,
            clip_end=raw.clip_end,
            title=title,
            artist=artist,
            performer=performer,
        ),
    )


def normalize(raw: RawRecord) -> DomainRecord:
    """Normalize one raw record into a validated domain record.

    Args:
        raw: Raw input row.

    Returns:
        Validated domain record.

    Raises:
        RecordRejectedError: If the row is malformed, intentionally skipped, or
            logically inconsistent.
    """
    record = build_record(raw)
    check_logic(record)
    return record


def normalize_all(
    raws: Iterable[RawRecord],
) -> tuple[list[DomainRecord], list[Rejection]]:
    """Normalize raw records, collecting rejections instead of raising.

    Intentional skips are logged at debug level, other rejections at warning
    level.

    Args:
        raws: Raw input rows in source order.

    Returns:
        A tuple of accepted records and rejections, both in source order.
    """
    records: list[DomainRecord] = []
    rejections: list[Rejection] = []
    for raw in raws:
        try:
            records.append(normalize(raw))
        except RecordRejectedError as exc:
            rejection = Rejection(raw=raw, reason=exc.reason, message=str(exc))
            rejections.append(rejection)
            if rejection.is_intentional_skip:
                logger.debug(f"Skipping record (record={raw} reason={exc.reason.value})")
            else:
                logger.warning(f"Skipping record {raw}: {exc}")
    return records, rejections
