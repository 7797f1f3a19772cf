"""Lookup table of embedded assets.

Generated modules build one :class:`AssetTable` from their
:class:`EmbeddedAsset` entries.  The table is the accessor and metadata
provider behind the module's trie and filesystem: compressed entries are
inflated on every access and never cached, so the table stays immutable.
"""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .errors import (
    E_DUPLICATE_ASSET,
    AssetFSError,
    DuplicateAssetError,
    not_found,
    read_error,
)
from .filesystem import AssetFS
from .models import DEFAULT_MODE, AssetInfo, Timestamp, to_datetime
from .trie import AssetTrie

__all__ = ["EmbeddedAsset", "AssetTable"]


@dataclass(frozen=True, slots=True)
class EmbeddedAsset:
    name: str
    data: bytes
    compressed: bool = False
    # Decoded size, mode and unix mod time; None when built without metadata.
    size: Optional[int] = None
    mode: int = DEFAULT_MODE
    mod_time: Optional[Union[int, float]] = None

    def load(self) -> bytes:
        if not self.compressed:
            return self.data
        return gzip.decompress(self.data)

    def info(self) -> AssetInfo:
        return AssetInfo(
            size=self.size,
            mode=self.mode,
            mod_time=(
                to_datetime(self.mod_time) if self.mod_time is not None else None
            ),
        )


def _canonical(name: str) -> str:
    return name.replace("\\", "/")


class AssetTable:
    def __init__(
        self,
        entries: Iterable[EmbeddedAsset],
        *,
        default_mod_time: Optional[Timestamp] = None,
    ):
        self._entries: Dict[str, EmbeddedAsset] = {}
        for entry in entries:
            name = _canonical(entry.name)
            if name in self._entries:
                raise DuplicateAssetError(
                    code=E_DUPLICATE_ASSET,
                    message=f"Asset {name} embedded twice",
                    context={"name": name},
                )
            self._entries[name] = entry
        resident = {
            name: e.data for name, e in self._entries.items() if not e.compressed
        }
        self._trie = AssetTrie.build(
            self._entries,
            self.asset,
            metadata=self.asset_info,
            contents=resident,
            default_mod_time=default_mod_time,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _canonical(name) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.asset_names())

    def asset(self, name: str) -> bytes:
        """Return the content of ``name``.

        Raises:
            AssetNotFoundError: No such asset.
            AssetReadError: The stored data could not be decompressed.
        """
        entry = self._entries.get(_canonical(name))
        if entry is None:
            raise not_found(name)
        try:
            return entry.load()
        except (OSError, EOFError, zlib.error) as exc:
            raise read_error(name, str(exc)) from exc

    def must_asset(self, name: str) -> bytes:
        """Like :meth:`asset` but raises ``RuntimeError`` on any failure.

        Meant for module-level constants where a missing asset is a bug.
        """
        try:
            return self.asset(name)
        except AssetFSError as exc:
            raise RuntimeError(f"asset: Asset({name}): {exc}") from exc

    def asset_info(self, name: str) -> AssetInfo:
        entry = self._entries.get(_canonical(name))
        if entry is None:
            raise not_found(name)
        return entry.info()

    def asset_names(self) -> List[str]:
        return sorted(self._entries)

    def asset_dir(self, name: str) -> List[str]:
        """Names of the children of directory ``name`` (``""`` is the root)."""
        return [child.name for child in self._trie.list_children(name)]

    def trie(self) -> AssetTrie:
        return self._trie

    def filesystem(self, prefix: str = "") -> AssetFS:
        return AssetFS(self._trie, prefix=prefix)
