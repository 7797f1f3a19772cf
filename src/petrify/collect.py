"""Input collection: walk host directories and name the files found.

Names are the file paths as reached from each input (``data/img/a.png``
for input ``data/...``), in POSIX form, with the configured prefix and any
leading ``/`` removed.
"""

from __future__ import annotations

import os
import stat as stat_mod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Pattern, Sequence

from .config import Config, InputConfig
from .errors import E_INVALID_NAME, InvalidAssetNameError
from .logging import get_logger
from .reporting import task
from .trie import AssetTrie

__all__ = ["CollectedFile", "canonical_name", "collect_files", "build_trie"]

_log = get_logger("collect")


@dataclass(frozen=True, slots=True)
class CollectedFile:
    path: Path
    name: str
    size: int
    mode: int
    mod_time: int


def canonical_name(path: Path, prefix: str) -> str:
    name = path.as_posix()
    prefix = prefix.replace("\\", "/")
    if prefix and name.startswith(prefix):
        name = name[len(prefix) :]
    name = name.lstrip("/")
    if name.startswith("./"):
        name = name[2:]
    if not name:
        raise InvalidAssetNameError(
            code=E_INVALID_NAME,
            message=f"Prefix {prefix!r} strips all of {path.as_posix()}",
            context={"path": path.as_posix(), "prefix": prefix},
        )
    return name


def _ignored(path: Path, patterns: Sequence[Pattern[str]]) -> bool:
    text = path.as_posix()
    return any(p.search(text) for p in patterns)


def _walk(inp: InputConfig, patterns: Sequence[Pattern[str]]) -> Iterator[Path]:
    if not inp.recursive:
        for entry in sorted(inp.path.iterdir()):
            if entry.is_file() and not _ignored(entry, patterns):
                yield entry
        return
    visited: set[str] = set()
    for dirpath, dirnames, filenames in os.walk(inp.path, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            # Symlink cycle: do not descend again.
            dirnames[:] = []
            continue
        visited.add(real)
        base = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames if not _ignored(base / d, patterns)
        )
        for filename in sorted(filenames):
            path = base / filename
            if path.is_file() and not _ignored(path, patterns):
                yield path


def collect_files(config: Config) -> List[CollectedFile]:
    """Collect every input file, sorted by canonical name."""
    paths: List[Path] = []
    for inp in config.inputs:
        paths.extend(_walk(inp, config.ignore))
    collected: List[CollectedFile] = []
    with task("collect", "Collect input files", total=len(paths)) as rep:
        for path in paths:
            st = path.stat()
            collected.append(
                CollectedFile(
                    path=path,
                    name=canonical_name(path, config.prefix),
                    size=st.st_size,
                    mode=stat_mod.S_IMODE(st.st_mode),
                    mod_time=int(st.st_mtime),
                )
            )
            rep.advance(
                "collect", current_item=path.as_posix(), files=len(collected)
            )
    collected.sort(key=lambda f: f.name)
    _log.debug("collected %d files from %d inputs", len(collected), len(config.inputs))
    return collected


def build_trie(files: Sequence[CollectedFile]) -> AssetTrie:
    """Check the collected names form a valid namespace.

    Raises the trie's construction errors (duplicates after prefix
    stripping, file/directory conflicts).  Content is read from disk only
    if the returned trie is opened.
    """
    by_name: Dict[str, CollectedFile] = {f.name: f for f in files}
    return AssetTrie.build(
        (f.name for f in files),
        lambda name: by_name[name].path.read_bytes(),
    )
