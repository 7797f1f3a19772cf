"""High-level API for building asset modules."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .collect import build_trie, collect_files
from .config import Config
from .generator import GeneratedAsset, human_size, prepare_asset, write_module
from .logging import get_logger, step
from .reporting import get_reporter, task
from .trie import AssetTrie

__all__ = [
    "BuildResult",
    "translate",
    "plan_dry_run",
]


@dataclass(slots=True)
class BuildResult:
    output_file: Path
    bytes_written: int
    assets: int
    content_bytes: int
    stored_bytes: int


def plan_dry_run(config: Config) -> tuple[AssetTrie, Dict[str, Any]]:
    """Collect inputs and validate the namespace without writing anything.

    Returns (trie, plan_dict) where plan_dict is JSON-serialisable.
    """
    config.validate()
    files = collect_files(config)
    trie = build_trie(files)
    plan = {
        "output": config.output.as_posix(),
        "prefix": config.prefix,
        "compress": not config.no_compress,
        "assets": [
            {"name": f.name, "source": f.path.as_posix(), "size": f.size}
            for f in files
        ],
        "total_size": sum(f.size for f in files),
    }
    get_reporter().status(
        f"Collect summary: files={len(files)} "
        f"bytes={plan['total_size']} top_level={len(trie.list_children(''))}"
    )
    return trie, plan


def translate(config: Config) -> BuildResult:
    """Collect the configured inputs and write the asset module."""
    logger = get_logger()
    rep = get_reporter()
    config.validate()
    files = collect_files(config)
    # Fails before any file is read if names collide.
    build_trie(files)
    assets: List[GeneratedAsset] = []
    stored_bytes = 0
    with task("embed", "Embed assets", total=len(files)) as progress:
        for f in files:
            generated = prepare_asset(f, config)
            assets.append(generated)
            stored_bytes += len(generated.data)
            progress.advance("embed", current_item=f.name, bytes=stored_bytes)
    content_bytes = sum(f.size for f in files)
    step(f"Write {config.output.as_posix()}")
    written = write_module(assets, config.output, doc=config.module_doc)
    logger.info(
        "Wrote %s (%d bytes, assets=%d)",
        config.output.name,
        written,
        len(assets),
    )
    rep.status(
        "Build summary: "
        f"file={config.output.name} bytes={written} assets={len(assets)} "
        f"content={human_size(content_bytes)} stored={human_size(stored_bytes)}"
    )
    return BuildResult(
        output_file=config.output,
        bytes_written=written,
        assets=len(assets),
        content_bytes=content_bytes,
        stored_bytes=stored_bytes,
    )
