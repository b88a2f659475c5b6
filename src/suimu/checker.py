# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Clip sheet checks for logic and platform support."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from suimu.model import RawRecord, RejectionReason
from suimu.normalizer import (
    RecordRejectedError,
    parse_clip_bound,
    parse_platform,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

FindingCategory = Literal["format", "logic", "support"]


@dataclass(frozen=True)
class Finding:
    """Represent one problem found in a clip sheet row.

    Attributes:
        line: 1-based data row number, header excluded.
        record: Human-readable row description.
        category: Check that produced the finding.
        reason: Machine-readable cause.
        message: Human-readable detail.
    """

    line: int
    record: str
    category: FindingCategory
    reason: str
    message: str


def check_records(raws: Sequence[RawRecord]) -> list[Finding]:
    """Run logic and support checks over raw rows.

    Args:
        raws: Rows in sheet order.

    Returns:
        Findings ordered by check, then by row.
    """
    findings: list[Finding] = []

    logger.info("Checking entry logic...")
    for line, raw in enumerate(raws, start=1):
        findings.extend(_check_logic(line, raw))

    logger.info("Checking entry support...")
    for line, raw in enumerate(raws, start=1):
        try:
            parse_platform(raw.video_type)
        except RecordRejectedError as exc:
            findings.append(_finding(line, raw, "support", exc))

    for finding in findings:
        logger.warning(f"{finding.record}: {finding.message}")
    logger.info(f"Check finished (rows={len(raws)} findings={len(findings)})")
    return findings


def _check_logic(line: int, raw: RawRecord) -> list[Finding]:
    findings: list[Finding] = []
    try:
        parse_timestamp(raw.datetime)
    except RecordRejectedError as exc:
        findings.append(_finding(line, raw, "format", exc))
    try:
        start = parse_clip_bound(raw.clip_start, "clip_start")
        end = parse_clip_bound(raw.clip_end, "clip_end")
    except RecordRejectedError as exc:
        findings.append(_finding(line, raw, "logic", exc))
        return findings
    if start is not None and end is not None and not start < end:
        findings.append(
            Finding(
                line=line,
                record=str(raw),
                category="logic",
                reason=RejectionReason.INVALID_CLIP_RANGE.value,
                message="clip_start is later than clip_end",
            )
        )
    return findings


def _finding(
    line: int, raw: RawRecord, category: FindingCategory, exc: RecordRejectedError
) -> Finding:
    return Finding(
        line=line,
        record=str(raw),
        category=category,
        reason=exc.reason.value,
        message=str(exc),
    )
