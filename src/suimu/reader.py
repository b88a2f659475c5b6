# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CSV decoding of clip sheets into raw records."""

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path

from suimu.model import RawRecord

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "datetime",
    "video_type",
    "video_id",
    "clip_start",
    "clip_end",
    "status",
    "title",
    "artist",
    "performer",
    "comment",
)
MAX_STATUS = 0xFFFF


class CsvFormatError(RuntimeError):
    """Represent a clip sheet that cannot be decoded."""


def parse_status(value: str, line: int) -> int | None:
    """Parse the status cell.

    Args:
        value: Cell text.
        line: Line number used in error messages.

    Returns:
        Status value, or ``None`` for an empty cell.

    Raises:
        CsvFormatError: If the cell is not an integer in ``0..65535``.
    """
    text = value.strip()
    if not text:
        return None
    try:
        status = int(text)
    except ValueError as exc:
        raise CsvFormatError(f"Line {line}: invalid status {value!r}") from exc
    if not 0 <= status <= MAX_STATUS:
        raise CsvFormatError(f"Line {line}: status out of range {value!r}")
    return status


def parse_rows(lines: Iterable[str]) -> list[RawRecord]:
    """Decode CSV lines with a header row into raw records.

    Args:
        lines: CSV text lines, header first.

    Returns:
        Raw records in sheet order.

    Raises:
        CsvFormatError: If a column is missing, a row has a different field
            count than the header, or a status cell is invalid.
    """
    reader = csv.DictReader(lines)
    header = reader.fieldnames or []
    missing = [column for column in CSV_COLUMNS if column not in header]
    if missing:
        raise CsvFormatError(f"Missing CSV columns: {', '.join(missing)}")

    records: list[RawRecord] = []
    for row in reader:
        if None in row or None in row.values():
            raise CsvFormatError(
                f"Line {reader.line_num}: expected {len(header)} fields"
            )
        cells = {column: row[column] for column in CSV_COLUMNS}
        records.append(
            RawRecord(
                datetime=cells["datetime"],
                video_type=cells["video_type"],
                video_id=cells["video_id"],
                clip_start=cells["clip_start"],
                clip_end=cells["clip_end"],
                status=parse_status(cells["status"], line=reader.line_num),
                title=cells["title"],
                artist=cells["artist"],
                performer=cells["performer"],
                comment=cells["comment"],
            )
        )
    return records


def parse_text(text: str) -> list[RawRecord]:
    """Decode CSV text into raw records."""
    return parse_rows(io.StringIO(text, newline=""))


def read_records(path: Path) -> list[RawRecord]:
    """Read a clip sheet from disk.

    Args:
        path: CSV file path.

    Returns:
        Raw records in sheet order.

    Raises:
        CsvFormatError: If the file cannot be read or decoded.
    """
    try:
        with path.open(encoding="utf-8-sig", newline="") as handle:
            records = parse_rows(handle)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise CsvFormatError(f"Failed to read CSV {path}: {exc}") from exc
    logger.info(f"CSV successfully validated. {len(records)} entries found.")
    return records
