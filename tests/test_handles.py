"""File and directory handle behaviour."""

from __future__ import annotations

import io

import pytest

from petrify.errors import AssetIsADirectoryError, AssetNotADirectoryError
from petrify.handles import AssetDirectory, AssetFile
from petrify.models import FileInfo


def _dir(n: int) -> AssetDirectory:
    return AssetDirectory(
        "d", [FileInfo(name=f"f{i}") for i in range(n)]
    )


def test_incremental_readdir_returns_each_child_once():
    handle = _dir(4)
    seen = []
    for _ in range(4):
        batch = handle.readdir(1)
        assert len(batch) == 1
        assert batch[0].name not in seen
        seen.append(batch[0].name)
    assert handle.exhausted
    assert handle.readdir(1) == []
    assert seen == ["f0", "f1", "f2", "f3"]


def test_readdir_returns_remainder_when_short():
    handle = _dir(5)
    assert [e.name for e in handle.readdir(3)] == ["f0", "f1", "f2"]
    assert [e.name for e in handle.readdir(3)] == ["f3", "f4"]
    assert handle.readdir(3) == []


def test_full_readdir_ignores_cursor():
    handle = _dir(3)
    handle.readdir(2)
    assert len(handle.readdir(0)) == 3
    assert len(handle.readdir(-1)) == 3
    # cursor unchanged by the full reads
    assert [e.name for e in handle.readdir(5)] == ["f2"]


def test_empty_directory():
    handle = _dir(0)
    assert handle.exhausted
    assert handle.readdir(0) == []
    assert handle.readdir(1) == []


def test_directory_read_and_closed_use():
    handle = _dir(1)
    with pytest.raises(AssetIsADirectoryError):
        handle.read()
    handle.close()
    assert handle.closed
    with pytest.raises(ValueError):
        handle.readdir(0)


def test_file_sequential_and_random_reads():
    handle = AssetFile("dir/f.bin", b"0123456789")
    assert handle.read(4) == b"0123"
    assert handle.tell() == 4
    assert handle.read_at(8, 10) == b"89"
    assert handle.tell() == 4
    assert handle.read() == b"456789"
    assert handle.read(3) == b""


def test_file_seek_modes():
    handle = AssetFile("f", b"abcdef")
    assert handle.seek(2) == 2
    assert handle.seek(1, io.SEEK_CUR) == 3
    assert handle.read(1) == b"d"
    assert handle.seek(-2, io.SEEK_END) == 4
    assert handle.read() == b"ef"
    assert handle.seek(100) == 100
    assert handle.read() == b""
    with pytest.raises(ValueError):
        handle.seek(-1)
    with pytest.raises(ValueError):
        handle.seek(0, 7)
    with pytest.raises(ValueError):
        handle.read_at(-1, 1)


def test_file_stat_and_readdir():
    handle = AssetFile("dir/f.bin", b"xyz", mode=0o600)
    info = handle.stat()
    assert (info.name, info.size, info.is_dir, info.perm) == ("f.bin", 3, False, 0o600)
    with pytest.raises(AssetNotADirectoryError):
        handle.readdir(0)


def test_close_does_not_touch_shared_content():
    content = b"shared"
    first = AssetFile("a", content)
    second = AssetFile("a", content)
    first.close()
    with pytest.raises(ValueError):
        first.read()
    assert second.read() == b"shared"


def test_file_info_mode_bits():
    import stat

    assert stat.S_ISDIR(FileInfo(name="d", is_dir=True).mode)
    assert stat.S_ISREG(FileInfo(name="f").mode)
    assert FileInfo(name="f").to_dict()["mod_time"] is None


def test_read_past_end_keeps_position():
    handle = AssetFile("f", b"abc")
    handle.seek(10)
    assert handle.read() == b""
    assert handle.tell() == 10
    handle.seek(1)
    assert handle.read(1) == b"b"
    assert handle.tell() == 2


def test_handle_base_is_abstract():
    from petrify.handles import _Handle

    with pytest.raises(TypeError):
        _Handle("x")


def test_directory_errors_do_not_shadow_builtins():
    import petrify

    assert not hasattr(petrify, "NotADirectoryError")
    assert not hasattr(petrify, "IsADirectoryError")
    assert not issubclass(AssetNotADirectoryError, OSError)
    with pytest.raises(NotADirectoryError):
        raise NotADirectoryError("builtin still reachable")
