# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for the suimu build pipeline."""

from suimu.catalog import CatalogDiff, diff
from suimu.identity import compute_identity
from suimu.model import CatalogEntry, DomainRecord, Platform, RawRecord, RejectionReason
from suimu.normalizer import RecordRejectedError, normalize, normalize_all
from suimu.pipeline import BuildSummary, run_build

__all__ = [
    "BuildSummary",
    "CatalogDiff",
    "CatalogEntry",
    "DomainRecord",
    "Platform",
    "RawRecord",
    "RecordRejectedError",
    "RejectionReason",
    "compute_identity",
    "diff",
    "normalize",
    "normalize_all",
    "run_build",
]
