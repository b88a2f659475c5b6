# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import logging
from datetime import timedelta

import pytest

from suimu.model import Platform, RawRecord, RejectionReason
from suimu.normalizer import (
    RecordRejectedError,
    build_record,
    check_logic,
    normalize,
    normalize_all,
    parse_timestamp,
)


def _raw(
    *,
    datetime: str = "2021-06-25T22:30:00+09:00",
    video_type: str = "YOUTUBE",
    video_id: str = "ZfDYRy17CBY",
    clip_start: str | float | None = None,
    clip_end: str | float | None = None,
    status: int | None = 0,
    title: str = "Bluerose",
    artist: str = "星街すいせい",
    performer: str = "星街すいせい",
    comment: str = "",
) -> RawRecord:
    return RawRecord(
        datetime=datetime,
        video_type=video_type,
        video_id=video_id,
        clip_start=clip_start,
        clip_end=clip_end,
        status=status,
        title=title,
        artist=artist,
        performer=performer,
        comment=comment,
    )


def _reason(raw: RawRecord) -> RejectionReason:
    with pytest.raises(RecordRejectedError) as exc_info:
        normalize(raw)
    return exc_info.value.reason


def test_norm_001_normalize_trims_fields_and_keeps_comment_verbatim() -> None:
    record = normalize(
        _raw(
            video_type=" YOUTUBE ",
            video_id=" ZfDYRy17CBY\t",
            title="  Bluerose ",
            artist=" 星街すいせい",
            performer="星街すいせい ",
            comment="  keep me  ",
        )
    )

    assert record.platform is Platform.YOUTUBE
    assert record.external_id == "ZfDYRy17CBY"
    assert record.title == "Bluerose"
    assert record.artist == "星街すいせい"
    assert record.performer == "星街すいせい"
    assert record.comment == "  keep me  "
    assert record.identity == "0c2b9da9cfe08c9e"


def test_norm_002_parse_timestamp_accepts_rfc3339_and_legacy_formats() -> None:
    rfc = parse_timestamp("2021-06-25T22:30:00+09:00")
    legacy = parse_timestamp("2018-03-27T20:54+0900")
    legacy_colon = parse_timestamp("2020-01-31T19:58+09:00")
    zulu = parse_timestamp("2021-06-25T13:30:00Z")

    assert rfc.utcoffset() == timedelta(hours=9)
    assert legacy.utcoffset() == timedelta(hours=9)
    assert (legacy.hour, legacy.minute) == (20, 54)
    assert legacy_colon.utcoffset() == timedelta(hours=9)
    assert zulu == rfc


@pytest.mark.parametrize(
    "text",
    [
        "",
        "yesterday",
        "2021-06-25T22:30:00",
        "2021-06-25",
        "20210625T2230+0900",
        "2021-06-25T22:30+09",
        "2021-13-25T22:30:00+09:00",
    ],
)
def test_norm_003_invalid_or_naive_timestamp_is_rejected(text: str) -> None:
    assert _reason(_raw(datetime=text)) is RejectionReason.INVALID_TIMESTAMP


def test_norm_004_rejection_reasons_are_distinguishable() -> None:
    assert _reason(_raw(video_type="NICONICO")) is RejectionReason.UNSUPPORTED_PLATFORM
    assert _reason(_raw(video_type="youtube")) is RejectionReason.UNSUPPORTED_PLATFORM
    assert _reason(_raw(video_type="  ")) is RejectionReason.BLANK_PLATFORM
    assert _reason(_raw(status=None)) is RejectionReason.MISSING_STATUS
    assert _reason(_raw(title="   ")) is RejectionReason.EMPTY_TITLE
    assert _reason(_raw(clip_start="1:30")) is RejectionReason.MALFORMED_CLIP_BOUND
    assert _reason(_raw(clip_end="nan")) is RejectionReason.MALFORMED_CLIP_BOUND


def test_norm_005_logic_check_rejects_start_after_end_after_identity_succeeds() -> None:
    ok = normalize(_raw(clip_start=1.1, clip_end=2.2))
    assert (ok.clip_start, ok.clip_end) == (1.1, 2.2)

    inverted = build_record(_raw(clip_start=3.1, clip_end=2.2))
    assert len(inverted.identity) == 16
    with pytest.raises(RecordRejectedError) as exc_info:
        check_logic(inverted)
    assert exc_info.value.reason is RejectionReason.INVALID_CLIP_RANGE
    assert _reason(_raw(clip_start=3.1, clip_end=2.2)) is RejectionReason.INVALID_CLIP_RANGE


def test_norm_006_single_or_blank_clip_bounds_pass_logic_check() -> None:
    assert normalize(_raw(clip_start="1.1")).clip_end is None
    assert normalize(_raw(clip_start=" ", clip_end="")).clip_start is None


def test_norm_007_normalize_all_logs_intentional_skips_quietly(
    caplog: pytest.LogCaptureFixture,
) -> None:
    raws = [
        _raw(),
        _raw(video_type="", video_id="", title="paid stream"),
        _raw(status=None, title="Status omitted"),
        _raw(video_type="", video_id="abc", title="Blank platform with id"),
        _raw(video_type="NICONICO", title="Unknown platform"),
    ]

    with caplog.at_level(logging.DEBUG, logger="suimu.normalizer"):
        records, rejections = normalize_all(raws)

    assert [record.title for record in records] == ["Bluerose"]
    assert [rejection.is_intentional_skip for rejection in rejections] == [
        True,
        True,
        False,
        False,
    ]
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert any("Blank platform with id" in message for message in warnings)
    assert any("Unknown platform" in message for message in warnings)
