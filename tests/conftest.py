from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from petrify.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _quiet_reporter():
    set_reporter(SilentReporter())
    set_verbosity(0)
    yield
    set_reporter(SilentReporter())


@pytest.fixture
def sample_assets() -> dict[str, bytes]:
    return {
        "data/foo.txt": b"hi",
        "data/img/a.png": b"\x89PNG\r\n\x1a\nA",
        "data/img/b.png": b"\x89PNG\r\n\x1a\nBB",
    }


@pytest.fixture
def asset_tree(tmp_path: Path) -> Path:
    """Host directory mirroring ``sample_assets`` plus an ignorable file."""
    root = tmp_path / "site"
    (root / "data" / "img").mkdir(parents=True)
    (root / "data" / "foo.txt").write_bytes(b"hi")
    (root / "data" / "img" / "a.png").write_bytes(b"\x89PNG\r\n\x1a\nA")
    (root / "data" / "img" / "b.png").write_bytes(b"\x89PNG\r\n\x1a\nBB")
    (root / "data" / "notes.txt~").write_bytes(b"backup")
    return root


def gz(data: bytes) -> bytes:
    return gzip.compress(data, mtime=0)
