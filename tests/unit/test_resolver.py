# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from pathlib import Path

import pytest

from suimu.model import DomainRecord, Platform, RawRecord
from suimu.normalizer import normalize
from suimu.platforms import DEFAULT_PLATFORM_INFO, PlatformInfo, PlatformRegistry
from suimu.resolver import ArtifactResolver, is_eligible


def _record(
    video_type: str = "BILIBILI", video_id: str = "BV1U7411s7X1", status: int = 0
) -> DomainRecord:
    return normalize(
        RawRecord(
            datetime="2020-01-31T19:58+09:00",
            video_type=video_type,
            video_id=video_id,
            clip_start="971.0",
            clip_end="1194.8",
            status=status,
            title="ホワイトハッピー",
            artist="極悪P",
            performer="星街すいせい",
        )
    )


def _resolver(tmp_path: Path) -> ArtifactResolver:
    return ArtifactResolver(
        registry=PlatformRegistry(),
        source_dir=tmp_path / "source",
        output_dir=tmp_path / "output",
    )


def test_plat_001_registry_covers_every_platform() -> None:
    registry = PlatformRegistry()

    for platform in Platform:
        assert registry.lookup(platform).url_template.count("{}") == 1
    assert registry.lookup(Platform.BILIBILI).source_extension == "flv"
    assert (
        registry.source_url(Platform.YOUTUBE, "ZfDYRy17CBY")
        == "https://www.youtube.com/watch?v=ZfDYRy17CBY"
    )


def test_plat_002_registry_rejects_incomplete_table() -> None:
    partial = {
        platform: info
        for platform, info in DEFAULT_PLATFORM_INFO.items()
        if platform is not Platform.TWITTER
    }

    with pytest.raises(ValueError, match="TWITTER"):
        PlatformRegistry(partial)


def test_plat_003_source_url_substitutes_placeholder_once() -> None:
    info = PlatformInfo(
        url_template="https://example.org/{}?ref={}",
        format_selector="best",
        source_extension="mp4",
    )

    assert info.source_url("abc") == "https://example.org/abc?ref={}"


def test_res_001_resolver_needs_download_when_nothing_exists(tmp_path: Path) -> None:
    record = _record()

    resolution = _resolver(tmp_path).resolve(record)

    assert resolution.state == "needs_download_and_convert"
    assert resolution.needs_download
    assert resolution.output_path == tmp_path / "output" / "d52a8a351014118c.m4a"
    assert resolution.source_path == tmp_path / "source" / "BV1U7411s7X1.flv"
    assert not resolution.previously_failed


def test_res_002_resolver_needs_convert_only_when_source_exists(tmp_path: Path) -> None:
    record = _record()
    (tmp_path / "source").mkdir()
    (tmp_path / "source" / "BV1U7411s7X1.flv").write_bytes(b"flv")

    resolution = _resolver(tmp_path).resolve(record)

    assert resolution.state == "needs_convert_only"
    assert not resolution.needs_download


def test_res_003_resolver_prefers_existing_output_even_without_source(
    tmp_path: Path,
) -> None:
    record = _record()
    (tmp_path / "output").mkdir()
    (tmp_path / "output" / "d52a8a351014118c.m4a").write_bytes(b"m4a")

    resolution = _resolver(tmp_path).resolve(
        record, failed_sources={record.source_key}
    )

    assert resolution.state == "already_built"
    assert not resolution.previously_failed


def test_res_004_resolver_reports_known_failed_sources(tmp_path: Path) -> None:
    record = _record()

    resolution = _resolver(tmp_path).resolve(
        record, failed_sources={(Platform.BILIBILI, "BV1U7411s7X1")}
    )

    assert resolution.previously_failed


def test_res_005_member_only_records_are_not_eligible() -> None:
    assert is_eligible(_record(status=0))
    assert not is_eligible(_record(status=1))
    assert is_eligible(_record(status=2))
