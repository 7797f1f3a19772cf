"""Error definitions for petrify.

Every failure carries a stable ``code`` so callers (and serving layers)
classify errors by type or code, never by message text.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_NOT_FOUND = "E_NOT_FOUND"
E_NOT_EXIST = "E_NOT_EXIST"
E_NOT_A_DIRECTORY = "E_NOT_A_DIRECTORY"
E_IS_A_DIRECTORY = "E_IS_A_DIRECTORY"
E_DUPLICATE_ASSET = "E_DUPLICATE_ASSET"
E_PATH_CONFLICT = "E_PATH_CONFLICT"
E_INVALID_NAME = "E_INVALID_NAME"
E_READ = "E_READ"
E_CONFIG = "E_CONFIG"


@dataclass(eq=False)
class AssetFSError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class AssetNotFoundError(AssetFSError):
    pass


class NotExistError(AssetFSError):
    """Raised by ``AssetFS.open`` when the requested name does not exist."""


class AssetNotADirectoryError(AssetFSError):
    pass


class AssetIsADirectoryError(AssetFSError):
    pass


class DuplicateAssetError(AssetFSError):
    pass


class PathConflictError(AssetFSError):
    pass


class InvalidAssetNameError(AssetFSError):
    pass


class AssetReadError(AssetFSError):
    pass


class ConfigError(AssetFSError):
    pass


def not_found(name: str) -> AssetNotFoundError:
    return AssetNotFoundError(
        code=E_NOT_FOUND,
        message=f"Asset {name} not found",
        context={"name": name},
    )


def not_a_directory(name: str) -> AssetNotADirectoryError:
    return AssetNotADirectoryError(
        code=E_NOT_A_DIRECTORY,
        message=f"{name or '/'} is not a directory",
        context={"name": name},
    )


def read_error(name: str, reason: str) -> AssetReadError:
    return AssetReadError(
        code=E_READ,
        message=f"Asset {name} can't be read: {reason}",
        context={"name": name},
    )


def config_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> ConfigError:
    return ConfigError(code=E_CONFIG, message=message, context=context)


__all__ = [
    "AssetFSError",
    "AssetNotFoundError",
    "NotExistError",
    "AssetNotADirectoryError",
    "AssetIsADirectoryError",
    "DuplicateAssetError",
    "PathConflictError",
    "InvalidAssetNameError",
    "AssetReadError",
    "ConfigError",
    "not_found",
    "not_a_directory",
    "read_error",
    "config_error",
    "E_NOT_FOUND",
    "E_NOT_EXIST",
    "E_NOT_A_DIRECTORY",
    "E_IS_A_DIRECTORY",
    "E_DUPLICATE_ASSET",
    "E_PATH_CONFLICT",
    "E_INVALID_NAME",
    "E_READ",
    "E_CONFIG",
]
