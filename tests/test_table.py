"""AssetTable: the accessor behind generated modules."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import gz
from petrify.errors import (
    AssetNotFoundError,
    AssetReadError,
    DuplicateAssetError,
    AssetNotADirectoryError,
)
from petrify.filesystem import status_for_error
from petrify.table import AssetTable, EmbeddedAsset


@pytest.fixture
def table() -> AssetTable:
    return AssetTable(
        [
            EmbeddedAsset(
                name="data/foo.txt",
                data=gz(b"hi"),
                compressed=True,
                size=2,
                mode=0o600,
                mod_time=1_500_000_000,
            ),
            EmbeddedAsset(name="data/img/a.png", data=b"A"),
            EmbeddedAsset(name="index.html", data=gz(b"<html>"), compressed=True),
        ],
        default_mod_time=0,
    )


def test_asset_returns_decoded_content(table):
    assert table.asset("data/foo.txt") == b"hi"
    assert table.asset("data/img/a.png") == b"A"
    assert table.asset("data\\foo.txt") == b"hi"
    with pytest.raises(AssetNotFoundError):
        table.asset("nope")


def test_must_asset_raises_runtime_error(table):
    assert table.must_asset("index.html") == b"<html>"
    with pytest.raises(RuntimeError, match=r"asset: Asset\(nope\)"):
        table.must_asset("nope")


def test_asset_info(table):
    info = table.asset_info("data/foo.txt")
    assert info.size == 2
    assert info.mode == 0o600
    assert info.mod_time == datetime.fromtimestamp(1_500_000_000, tz=timezone.utc)
    assert table.asset_info("index.html").mod_time is None


def test_names_and_dirs(table):
    assert table.asset_names() == ["data/foo.txt", "data/img/a.png", "index.html"]
    assert list(table) == table.asset_names()
    assert len(table) == 3
    assert "data/img/a.png" in table and "data" not in table
    assert table.asset_dir("") == ["data", "index.html"]
    assert table.asset_dir("data") == ["foo.txt", "img"]
    with pytest.raises(AssetNotADirectoryError):
        table.asset_dir("index.html")
    with pytest.raises(AssetNotFoundError):
        table.asset_dir("missing")


def test_filesystem_uses_table_metadata(table):
    fs = table.filesystem()
    info = fs.stat("data/foo.txt")
    assert (info.size, info.perm) == (2, 0o600)
    assert info.mod_time.year == 2017
    # Missing metadata falls back to the table's default timestamp.
    assert fs.stat("index.html").mod_time == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert table.filesystem("data").read_bytes("img/a.png") == b"A"


def test_duplicate_entries_rejected():
    with pytest.raises(DuplicateAssetError):
        AssetTable(
            [EmbeddedAsset(name="a", data=b"1"), EmbeddedAsset(name="a", data=b"2")]
        )


def test_corrupt_entry_is_a_read_error_not_a_miss():
    table = AssetTable(
        [EmbeddedAsset(name="broken.gz", data=b"not gzip", compressed=True)]
    )
    with pytest.raises(AssetReadError) as info:
        table.asset("broken.gz")
    assert info.value.code == "E_READ"
    with pytest.raises(AssetReadError) as info:
        table.filesystem().open("broken.gz")
    assert status_for_error(info.value) == 500


def test_compressed_content_is_inflated_per_access(table):
    first = table.asset("data/foo.txt")
    second = table.asset("data/foo.txt")
    assert first == second
    assert first is not second
