# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Catalog persistence contracts."""

import logging
from pathlib import Path
from typing import Protocol

from suimu.catalog import CatalogDiff
from suimu.model import CatalogEntry

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """Represent a fatal catalog read or write failure."""


class CatalogFormatError(CatalogError):
    """Represent a catalog file that exists but cannot be parsed."""


class CatalogStore(Protocol):
    """Define the contract for reading and writing catalog files."""

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

    def save_catalog(self, path: Path, entries: list[CatalogEntry]) -> None:
        """Write a catalog file, replacing any previous content."""

    def save_diff(self, path: Path, catalog_diff: CatalogDiff) -> None:
        """Write a catalog diff file, replacing any previous content."""
