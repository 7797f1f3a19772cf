"""Virtual filesystem over an :class:`~petrify.trie.AssetTrie`.

:class:`AssetFS` is what a serving layer talks to.  It normalizes request
paths, mounts the namespace under an optional prefix, and turns trie
results into open handles.  Missing paths surface as
:class:`~petrify.errors.NotExistError`; every other failure passes through
unchanged so "missing" (404) stays distinguishable from "broken" (500)::

    fs = AssetFS(trie, prefix="static")
    try:
        with fs.open(request_path) as handle:
            ...
    except AssetFSError as exc:
        status = status_for_error(exc)
"""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING, Tuple, Union

from .errors import E_NOT_EXIST, AssetNotFoundError, NotExistError
from .handles import AssetDirectory, AssetFile
from .logging import get_logger
from .models import FileInfo
from .trie import AssetTrie

if TYPE_CHECKING:  # pragma: no cover
    from .table import AssetTable

__all__ = ["AssetFS", "Handle", "clean_path", "status_for_error"]

Handle = Union[AssetFile, AssetDirectory]

_log = get_logger("fs")


def _rooted(path: str) -> str:
    # Anchoring at "/" makes normpath drop ".." that would climb above it.
    return posixpath.normpath("/" + path.replace("\\", "/")).lstrip("/")


def clean_path(prefix: str, name: str) -> str:
    """Join ``name`` under ``prefix`` and return the canonical lookup path.

    Backslashes become ``/``; ``.``, ``..`` and repeated slashes are
    collapsed and leading slashes stripped.  ``..`` never climbs out of
    the prefix.  The root is ``""``.
    """
    base = _rooted(prefix)
    rel = _rooted(name)
    if base and rel:
        return f"{base}/{rel}"
    return base or rel


def status_for_error(exc: BaseException) -> int:
    """HTTP status a serving layer should answer with for ``exc``."""
    if isinstance(exc, NotExistError):
        return 404
    return 500


class AssetFS:
    """Read-only filesystem view of a trie, optionally mounted at ``prefix``."""

    def __init__(self, trie: AssetTrie, prefix: str = ""):
        self._trie = trie
        self._prefix = prefix

    @classmethod
    def from_table(cls, table: "AssetTable", prefix: str = "") -> "AssetFS":
        return cls(table.trie(), prefix=prefix)

    @property
    def trie(self) -> AssetTrie:
        return self._trie

    @property
    def prefix(self) -> str:
        return self._prefix

    def sub(self, prefix: str) -> "AssetFS":
        """Return a view mounted at ``prefix`` below this one."""
        return AssetFS(self._trie, prefix=clean_path(self._prefix, prefix))

    def open(self, name: str) -> Handle:
        """Open ``name`` as a file or directory handle.

        Raises:
            NotExistError: Nothing lives at ``name``.
            AssetReadError: The asset exists but its content can't be read.
        """
        path = clean_path(self._prefix, name)
        try:
            node = self._trie.lookup(path)
        except AssetNotFoundError as exc:
            _log.debug("open miss: %s", path)
            raise NotExistError(
                code=E_NOT_EXIST,
                message=f"open {name}: file does not exist",
                context={"name": name, "path": path},
            ) from exc
        if node.asset is not None:
            record = node.asset
            return AssetFile(
                path,
                self._trie.content(record),
                mod_time=record.mod_time or self._trie.default_mod_time,
                mode=record.mode,
            )
        return AssetDirectory(
            path,
            self._trie.list_children(path),
            mod_time=self._trie.default_mod_time,
        )

    def list_children(self, name: str) -> Tuple[FileInfo, ...]:
        """Children of directory ``name``; not-found is not translated."""
        return self._trie.list_children(clean_path(self._prefix, name))

    def stat(self, name: str) -> FileInfo:
        with self.open(name) as handle:
            return handle.stat()

    def exists(self, name: str) -> bool:
        return clean_path(self._prefix, name) in self._trie

    def read_bytes(self, name: str) -> bytes:
        with self.open(name) as handle:
            return handle.read()
