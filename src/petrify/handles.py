"""Open handles returned by :meth:`petrify.filesystem.AssetFS.open`.

Both handle types share ``stat``/``close`` and the context manager
protocol; :class:`AssetFile` adds reads, :class:`AssetDirectory` adds
``readdir``.  A handle owns only its cursor, never the asset bytes, so
closing it has no effect on the filesystem.  Handles are not thread-safe;
open one per request.
"""

from __future__ import annotations

import io
import posixpath
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .errors import E_IS_A_DIRECTORY, AssetIsADirectoryError, not_a_directory
from .models import DEFAULT_MODE, FileInfo

__all__ = ["AssetFile", "AssetDirectory"]


class _Handle(ABC):
    def __init__(self, name: str):
        self.name = name
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed handle")

    @abstractmethod
    def stat(self) -> FileInfo: ...

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class AssetFile(_Handle):
    """Read-only, seekable view over one asset's content."""

    def __init__(
        self,
        name: str,
        content: bytes,
        mod_time: Optional[datetime] = None,
        mode: int = DEFAULT_MODE,
    ):
        super().__init__(name)
        self._content = content
        self._offset = 0
        self._mod_time = mod_time
        self._mode = mode

    @property
    def size(self) -> int:
        return len(self._content)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        start = self._offset
        end = len(self._content) if size is None or size < 0 else start + size
        data = self._content[start:end]
        # Past the end the position stays put, as with io.BytesIO.
        self._offset += len(data)
        return data

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes at ``offset`` without moving the cursor."""
        self._check_open()
        if offset < 0:
            raise ValueError(f"negative offset: {offset}")
        return self._content[offset : offset + max(size, 0)]

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._offset + offset
        elif whence == io.SEEK_END:
            position = len(self._content) + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if position < 0:
            raise ValueError(f"negative seek position: {position}")
        self._offset = position
        return position

    def tell(self) -> int:
        self._check_open()
        return self._offset

    def readdir(self, count: int = 0) -> List[FileInfo]:
        raise not_a_directory(self.name)

    def stat(self) -> FileInfo:
        return FileInfo(
            name=posixpath.basename(self.name),
            is_dir=False,
            size=len(self._content),
            mod_time=self._mod_time,
            perm=self._mode,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"AssetFile({self.name!r}, size={self.size})"


class AssetDirectory(_Handle):
    """Enumeration session over a snapshot of one directory's children."""

    def __init__(
        self,
        name: str,
        children: Sequence[FileInfo],
        mod_time: Optional[datetime] = None,
    ):
        super().__init__(name)
        self._children: Tuple[FileInfo, ...] = tuple(children)
        self._cursor = 0
        self._mod_time = mod_time

    @property
    def children(self) -> Tuple[FileInfo, ...]:
        return self._children

    @property
    def exhausted(self) -> bool:
        """True once incremental reads have returned every entry."""
        return self._cursor >= len(self._children)

    def readdir(self, count: int = 0) -> List[FileInfo]:
        """Return directory entries.

        ``count <= 0`` returns the whole snapshot and leaves the cursor
        alone.  ``count > 0`` returns up to ``count`` unread entries and
        advances the cursor; an empty list means nothing is left.
        """
        self._check_open()
        if count <= 0:
            return list(self._children)
        start = self._cursor
        end = min(start + count, len(self._children))
        self._cursor = end
        return list(self._children[start:end])

    def read(self, size: int = -1) -> bytes:
        raise AssetIsADirectoryError(
            code=E_IS_A_DIRECTORY,
            message=f"{self.name or '/'} is a directory",
            context={"name": self.name},
        )

    def stat(self) -> FileInfo:
        return FileInfo(
            name=posixpath.basename(self.name),
            is_dir=True,
            size=0,
            mod_time=self._mod_time,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"AssetDirectory({self.name!r}, entries={len(self._children)})"
