# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""JSON file persistence for catalogs and catalog diffs."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from suimu.catalog import CatalogDiff
from suimu.model import CatalogEntry
from suimu.persistence import CatalogError, CatalogFormatError

logger = logging.getLogger(__name__)

ENTRY_FIELDS = ("url", "datetime", "title", "artist", "performer", "status", "source")


def entry_to_dict(entry: CatalogEntry) -> dict[str, Any]:
    """Serialize a catalog entry to its JSON object shape."""
    return {
        "url": entry.url,
        "datetime": entry.recorded_at.isoformat(),
        "title": entry.title,
        "artist": entry.artist,
        "performer": entry.performer,
        "status": entry.status,
        "source": entry.source_url,
    }


def entry_from_dict(payload: Any) -> CatalogEntry:
    """Deserialize one catalog entry.

    Args:
        payload: Decoded JSON value.

    Returns:
        Catalog entry.

    Raises:
        ValueError: If the value does not have the catalog entry shape.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Catalog entry is not an object: {payload!r}")
    missing = [name for name in ENTRY_FIELDS if name not in payload]
    if missing:
        raise ValueError(f"Catalog entry is missing fields: {', '.join(missing)}")
    status = payload["status"]
    if isinstance(status, bool) or not isinstance(status, int):
        raise ValueError(f"Catalog entry status is not an integer: {status!r}")
    strings = {
        name: payload[name]
        for name in ("url", "datetime", "title", "artist", "performer", "source")
    }
    for name, value in strings.items():
        if not isinstance(value, str):
            raise ValueError(f"Catalog entry field {name} is not a string: {value!r}")
    return CatalogEntry(
        url=strings["url"],
        recorded_at=parse_rfc3339(strings["datetime"]),
        title=strings["title"],
        artist=strings["artist"],
        performer=strings["performer"],
        status=status,
        source_url=strings["source"],
    )


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp with a mandatory UTC offset.

    Raises:
        ValueError: If the text is not a timezone-aware timestamp.
    """
    candidate = text[:-1] + "+00:00" if text[-1:] in {"Z", "z"} else text
    parsed = datetime.fromisoformat(candidate)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {text!r}")
    return parsed


class JsonCatalogStore:
    """Persist catalogs and diffs as UTF-8 JSON files."""

    def load_catalog(self, path: Path) -> list[CatalogEntry] | None:
        """Load a catalog file.

        Args:
            path: Catalog file path.

        Returns:
            Entries in file order, or ``None`` if the file does not exist.

        Raises:
            CatalogFormatError: If the file content is not a valid catalog.
            CatalogError: If the file exists but cannot be read.
        """
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.info(f"Previous catalog not found (path={path})")
            return None
        except OSError as exc:
            logger.warning(f"Failed to read catalog (path={path} error={exc})")
            raise CatalogError(f"Failed to read catalog {path}: {exc}") from exc

        try:
            payload = json.loads(data.decode("utf-8"))
            if not isinstance(payload, list):
                raise ValueError("Catalog root is not an array")
            return [entry_from_dict(item) for item in payload]
        except ValueError as exc:
            raise CatalogFormatError(f"Invalid catalog {path}: {exc}") from exc

    def save_catalog(self, path: Path, entries: list[CatalogEntry]) -> None:
        """Write a catalog file as a JSON array.

        Raises:
            CatalogError: If the file cannot be written.
        """
        self._write(path, [entry_to_dict(entry) for entry in entries])
        logger.info(f"Catalog written (path={path} entries={len(entries)})")

    def save_diff(self, path: Path, catalog_diff: CatalogDiff) -> None:
        """Write a catalog diff file.

        Raises:
            CatalogError: If the file cannot be written.
        """
        self._write(
            path,
            {
                "added": [entry_to_dict(entry) for entry in catalog_diff.added],
                "removed": [entry_to_dict(entry) for entry in catalog_diff.removed],
                "computed_at": catalog_diff.computed_at.isoformat(),
            },
        )
        logger.info(f"Catalog diff written (path={path})")

    def _write(self, path: Path, payload: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps(payload, ensure_ascii=False, separators=(",", ":")),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning(f"Failed to write JSON file (path={path} error={exc})")
            raise CatalogError(f"Failed to write {path}: {exc}") from exc
