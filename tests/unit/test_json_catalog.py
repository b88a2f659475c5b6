# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from suimu.catalog import CatalogDiff
from suimu.model import CatalogEntry
from suimu.persistence import CatalogError, CatalogFormatError
from suimu.storage import JsonCatalogStore
from suimu.storage.json_catalog import entry_from_dict, entry_to_dict

JST = timezone(timedelta(hours=9))


def _entry() -> CatalogEntry:
    return CatalogEntry(
        url="https://music.example.org/d52a8a351014118c.m4a",
        recorded_at=datetime(2020, 1, 31, 19, 58, tzinfo=JST),
        title="ホワイトハッピー",
        artist="極悪P",
        performer="星街すいせい",
        status=0,
        source_url="https://www.bilibili.com/video/BV1U7411s7X1",
    )


def test_json_001_entry_serializes_to_catalog_shape() -> None:
    assert entry_to_dict(_entry()) == {
        "url": "https://music.example.org/d52a8a351014118c.m4a",
        "datetime": "2020-01-31T19:58:00+09:00",
        "title": "ホワイトハッピー",
        "artist": "極悪P",
        "performer": "星街すいせい",
        "status": 0,
        "source": "https://www.bilibili.com/video/BV1U7411s7X1",
    }


def test_json_002_saved_catalog_loads_back_equal(tmp_path: Path) -> None:
    store = JsonCatalogStore()
    path = tmp_path / "nested" / "catalog.json"

    store.save_catalog(path, [_entry()])

    text = path.read_text(encoding="utf-8")
    assert "ホワイトハッピー" in text
    assert ", " not in text
    assert store.load_catalog(path) == [_entry()]


def test_json_003_missing_catalog_loads_as_none(tmp_path: Path) -> None:
    assert JsonCatalogStore().load_catalog(tmp_path / "absent.json") is None


@pytest.mark.parametrize(
    "content",
    [
        b"not json",
        b'{"url": "x"}',
        b'[{"url": "x"}]',
        b'[{"url":"x","datetime":"2020-01-31T19:58:00","title":"t","artist":"a",'
        b'"performer":"p","status":0,"source":"s"}]',
        b"\xff\xfe\x00",
    ],
)
def test_json_004_invalid_catalog_raises_format_error(
    tmp_path: Path, content: bytes
) -> None:
    path = tmp_path / "catalog.json"
    path.write_bytes(content)

    with pytest.raises(CatalogFormatError):
        JsonCatalogStore().load_catalog(path)


def test_json_005_unreadable_catalog_raises_catalog_error(tmp_path: Path) -> None:
    with pytest.raises(CatalogError) as exc_info:
        JsonCatalogStore().load_catalog(tmp_path)

    assert not isinstance(exc_info.value, CatalogFormatError)


def test_json_006_entry_from_dict_rejects_boolean_status() -> None:
    payload = entry_to_dict(_entry())
    payload["status"] = True

    with pytest.raises(ValueError, match="status"):
        entry_from_dict(payload)


def test_json_007_diff_file_has_added_removed_and_timestamp(tmp_path: Path) -> None:
    path = tmp_path / "diff.json"
    computed_at = datetime(2024, 3, 22, 12, 0, tzinfo=timezone.utc)

    JsonCatalogStore().save_diff(
        path, CatalogDiff(added=[_entry()], removed=[], computed_at=computed_at)
    )

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert set(payload) == {"added", "removed", "computed_at"}
    assert payload["added"] == [entry_to_dict(_entry())]
    assert payload["removed"] == []
    assert payload["computed_at"] == "2024-03-22T12:00:00+00:00"
