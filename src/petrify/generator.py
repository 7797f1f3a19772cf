"""Generator: turn collected files into an importable Python module.

The module lists one ``EmbeddedAsset`` per file, sorted by name, and
builds an ``AssetTable`` at import time.  Output is deterministic for a
given set of inputs: gzip headers carry no timestamp and bytes are laid
out by :class:`~petrify.bytewriter.ByteWriter`.
"""

from __future__ import annotations

import gzip
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ._version import __version__ as TOOL_VERSION
from .bytewriter import ByteWriter
from .collect import CollectedFile
from .config import Config
from .models import DEFAULT_MODE
from .templates import (
    DEFAULT_DOC,
    TEMPLATE_ASSET_CLOSE,
    TEMPLATE_ASSET_OPEN,
    TEMPLATE_FOOTER,
    TEMPLATE_HEADER,
    TEMPLATE_SOURCE_LINE,
)

__all__ = [
    "GeneratedAsset",
    "prepare_asset",
    "render_module",
    "write_module",
    "human_size",
]


@dataclass(frozen=True, slots=True)
class GeneratedAsset:
    name: str
    data: bytes
    compressed: bool
    size: Optional[int]
    mode: int
    mod_time: Optional[int]


def human_size(n: int) -> str:
    size = float(n)
    for unit in ("B", "kB", "MB", "GB"):
        if size < 1000 or unit == "GB":
            return f"{n}B" if unit == "B" else f"{size:.2f}{unit}"
        size /= 1000
    return f"{n}B"  # pragma: no cover


def prepare_asset(
    file: CollectedFile, config: Config, content: bytes | None = None
) -> GeneratedAsset:
    """Read (unless ``content`` is given), compress and attach metadata."""
    raw = file.path.read_bytes() if content is None else content
    data = raw if config.no_compress else gzip.compress(raw, mtime=0)
    if config.no_metadata:
        size = None
        mode = config.mode or DEFAULT_MODE
        mod_time = config.mod_time or None
    else:
        size = len(raw)
        mode = config.mode or file.mode
        mod_time = config.mod_time or file.mod_time
    return GeneratedAsset(
        name=file.name,
        data=data,
        compressed=not config.no_compress,
        size=size,
        mode=mode,
        mod_time=mod_time,
    )


def render_module(assets: Sequence[GeneratedAsset], doc: str = "") -> str:
    assets = sorted(assets, key=lambda a: a.name)
    out = io.StringIO()
    sources = "\n".join(
        TEMPLATE_SOURCE_LINE.format(
            name=a.name.encode("unicode_escape").decode("ascii"),
            size=human_size(a.size if a.size is not None else len(a.data)),
        )
        for a in assets
    )
    out.write(
        TEMPLATE_HEADER.format(
            tool_ver=TOOL_VERSION,
            sources=sources or "# (none)",
            doc=repr(doc or DEFAULT_DOC),
        )
    )
    for a in assets:
        out.write(
            TEMPLATE_ASSET_OPEN.format(
                name=a.name,
                compressed=a.compressed,
                size=a.size,
                mode=a.mode,
                mod_time=a.mod_time,
            )
        )
        ByteWriter(out).write(a.data)
        out.write(TEMPLATE_ASSET_CLOSE)
    out.write(TEMPLATE_FOOTER)
    return out.getvalue()


def write_module(
    assets: Iterable[GeneratedAsset], output: Path, doc: str = ""
) -> int:
    """Render and write the module; returns the number of bytes written."""
    text = render_module(list(assets), doc=doc)
    payload = text.encode("utf-8")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload)
    return len(payload)
