# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Catalog projection and differencing between build runs."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from suimu.model import AUDIO_EXTENSION, CatalogEntry, DomainRecord
from suimu.platforms import URL_PLACEHOLDER, PlatformRegistry
from suimu.resolver import is_eligible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogDiff:
    """Represent catalog changes between two runs.

    Attributes:
        added: Current entries without an equal previous entry, in current order.
        removed: Previous entries without an equal current entry, in previous order.
        computed_at: UTC time the diff was computed.
    """

    added: list[CatalogEntry]
    removed: list[CatalogEntry]
    computed_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


def artifact_url(baseurl: str, identity: str) -> str:
    """Fill a base URL template with an identity and the audio extension.

    Args:
        baseurl: Template whose first ``{}`` takes the identity and second the
            extension, e.g. ``https://example.org/music/{}.{}``.
        identity: Record identity.

    Returns:
        Public artifact URL.
    """
    return baseurl.replace(URL_PLACEHOLDER, identity, 1).replace(
        URL_PLACEHOLDER, AUDIO_EXTENSION, 1
    )


def project_entry(
    record: DomainRecord, registry: PlatformRegistry, baseurl: str
) -> CatalogEntry:
    """Project a domain record onto its catalog entry."""
    return CatalogEntry(
        url=artifact_url(baseurl, record.identity),
        recorded_at=record.recorded_at,
        title=record.title,
        artist=record.artist,
        performer=record.performer,
        status=record.status,
        source_url=registry.source_url(record.platform, record.external_id),
    )


def build_entries(
    records: Iterable[DomainRecord],
    registry: PlatformRegistry,
    baseurl: str,
    output_dir: Path,
) -> list[CatalogEntry]:
    """Build catalog entries for records whose artifact exists on disk.

    Records that are not eligible for processing still appear when their
    artifact exists from an earlier run.

    Args:
        records: All normalized records, in source order.
        registry: Platform registry used for source URLs.
        baseurl: Artifact URL template.
        output_dir: Directory holding converted artifacts.

    Returns:
        Catalog entries in source order.
    """
    entries: list[CatalogEntry] = []
    for record in records:
        if not (output_dir / record.artifact_name).exists():
            if is_eligible(record):
                logger.warning(f"{record} is not generated. Skipping.")
            continue
        entries.append(project_entry(record, registry, baseurl))
    return entries


def filter_stale(entries: Iterable[CatalogEntry], output_dir: Path) -> list[CatalogEntry]:
    """Drop previous entries whose artifact file is missing.

    Args:
        entries: Entries loaded from a previous catalog.
        output_dir: Directory holding converted artifacts.

    Returns:
        Entries whose artifact still exists, in input order.
    """
    kept: list[CatalogEntry] = []
    for entry in entries:
        filename = entry.url.rsplit("/", 1)[-1]
        if (output_dir / filename).exists():
            kept.append(entry)
        else:
            logger.warning(f"{filename} is present in the list, but the file is missing.")
    return kept


def diff(
    previous: Sequence[CatalogEntry] | None, current: Sequence[CatalogEntry]
) -> CatalogDiff | None:
    """Compare a previous catalog with the current one.

    Args:
        previous: Effective previous entries, or ``None`` when no previous
            catalog exists.
        current: Newly computed entries.

    Returns:
        Added and removed entries by structural equality, or ``None`` when
        there is no previous catalog to compare against.
    """
    if previous is None:
        return None
    added = [entry for entry in current if entry not in previous]
    removed = [entry for entry in previous if entry not in current]
    logger.info(f"Catalog diff computed (added={len(added)} removed={len(removed)})")
    return CatalogDiff(added=added, removed=removed)
