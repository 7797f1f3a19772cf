"""petrify: embed files in a Python module and serve them as a filesystem.

The runtime side is :class:`~petrify.trie.AssetTrie` (the namespace),
:class:`~petrify.filesystem.AssetFS` (open/list with filesystem error
semantics) and :class:`~petrify.table.AssetTable` (what generated modules
instantiate).  The build side lives in :mod:`petrify.api` and
:mod:`petrify.cli`.
"""

from ._version import __version__
from .errors import (
    AssetFSError,
    AssetNotFoundError,
    AssetReadError,
    DuplicateAssetError,
    InvalidAssetNameError,
    AssetIsADirectoryError,
    AssetNotADirectoryError,
    NotExistError,
    PathConflictError,
)
from .filesystem import AssetFS, status_for_error
from .handles import AssetDirectory, AssetFile
from .models import AssetInfo, AssetRecord, FileInfo
from .table import AssetTable, EmbeddedAsset
from .trie import AssetTrie, TrieNode

__all__ = [
    "__version__",
    "AssetFS",
    "AssetTrie",
    "TrieNode",
    "AssetTable",
    "EmbeddedAsset",
    "AssetFile",
    "AssetDirectory",
    "AssetInfo",
    "AssetRecord",
    "FileInfo",
    "status_for_error",
    "AssetFSError",
    "AssetNotFoundError",
    "AssetReadError",
    "DuplicateAssetError",
    "InvalidAssetNameError",
    "AssetIsADirectoryError",
    "AssetNotADirectoryError",
    "NotExistError",
    "PathConflictError",
]
