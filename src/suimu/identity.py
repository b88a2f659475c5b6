# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Stable content identity for clip records."""

import xxhash

from suimu.model import Platform

IDENTITY_SEED = 0x9F88F860


def format_seconds(value: float | None) -> str:
    """Render a clip bound as its default decimal string.

    Args:
        value: Clip bound in seconds, or ``None`` when absent.

    Returns:
        Decimal text such as ``971.0``; empty string for an absent bound.
    """
    if value is None:
        return ""
    return str(float(value))


def bound_text(value: str | float | None) -> str:
    """Render a clip bound the way it takes part in the identity.

    Sheet cells are hashed as written, trimmed, so ``971`` and ``971.0`` are
    different clips. Numeric bounds use their default decimal string.
    """
    if isinstance(value, str):
        return value.strip()
    return format_seconds(value)


def compute_identity(
    platform: Platform,
    external_id: str,
    clip_start: str | float | None,
    clip_end: str | float | None,
    title: str,
    artist: str,
    performer: str,
) -> str:
    """Compute the 16 hex char identity of a clip.

    Only fields that change the produced audio take part; comment and status
    do not. Existing catalogs are keyed by this value, so the field order,
    seed and bound rendering are fixed.

    Args:
        platform: Source platform.
        external_id: Platform-scoped video identifier.
        clip_start: Optional clip start, as sheet text or seconds.
        clip_end: Optional clip end, as sheet text or seconds.
        title: Track title.
        artist: Track artist.
        performer: Performer of this rendition.

    Returns:
        Lowercase, zero-padded hexadecimal xxHash64 digest.
    """
    hasher = xxhash.xxh64(seed=IDENTITY_SEED)
    for part in (
        platform.code,
        external_id,
        bound_text(clip_start),
        bound_text(clip_end),
        title,
        artist,
        performer,
    ):
        hasher.update(part.encode("utf-8"))
    return hasher.hexdigest()
