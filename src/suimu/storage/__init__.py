# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Catalog storage backends for suimu."""

from suimu.storage.json_catalog import JsonCatalogStore

__all__ = ["JsonCatalogStore"]
