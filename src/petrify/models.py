"""Dataclass models shared by the trie, the handles and the asset table."""

from __future__ import annotations

import stat as stat_mod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

DEFAULT_MODE = 0o644

Timestamp = Union[datetime, int, float]


def to_datetime(value: Timestamp) -> datetime:
    """Normalize a unix timestamp or naive datetime to an aware UTC datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.fromtimestamp(value, tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class AssetInfo:
    """Metadata a table keeps for one asset (size of the decoded content)."""

    size: Optional[int] = None
    mode: int = DEFAULT_MODE
    mod_time: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class AssetRecord:
    name: str
    content: Optional[bytes] = None
    mod_time: Optional[datetime] = None
    mode: int = DEFAULT_MODE
    # Size from metadata, used only while content is not resident.
    declared_size: Optional[int] = None

    @property
    def resident(self) -> bool:
        return self.content is not None

    @property
    def size(self) -> Optional[int]:
        if self.content is not None:
            return len(self.content)
        return self.declared_size


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Stat result for a file handle, directory handle or listing entry."""

    name: str
    is_dir: bool = False
    size: int = 0
    mod_time: Optional[datetime] = None
    perm: int = DEFAULT_MODE

    @property
    def mode(self) -> int:
        if self.is_dir:
            return self.perm | stat_mod.S_IFDIR
        return self.perm | stat_mod.S_IFREG

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "is_dir": self.is_dir,
            "size": self.size,
            "mode": oct(self.mode),
            "mod_time": self.mod_time.isoformat() if self.mod_time else None,
        }


__all__ = [
    "DEFAULT_MODE",
    "AssetInfo",
    "AssetRecord",
    "FileInfo",
    "Timestamp",
    "to_datetime",
]
