import sys
from collections.abc import Callable
from pathlib import Path

import pytest

CSV_HEADER = (
    "datetime,video_type,video_id,clip_start,clip_end,status,title,artist,performer,comment\n"
)


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


@pytest.fixture
def clip_sheet(tmp_path: Path) -> Callable[[str], Path]:
    """Write CSV data rows below the clip sheet header and return the file path."""

    def _write(rows: str) -> Path:
        path = tmp_path / "clips.csv"
        path.write_text(CSV_HEADER + rows, encoding="utf-8")
        return path

    return _write
