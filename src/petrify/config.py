"""Build configuration: dataclasses plus a YAML/JSON loader.

A config file holds the same keys as the ``build`` command's options::

    inputs: ["assets/...", "templates"]
    output: myapp/bindata.py
    prefix: assets
    ignore: ['\\.DS_Store$', '~$']
    no_compress: false
    mod_time: 1700000000
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Pattern

import yaml

from .errors import config_error

__all__ = [
    "InputConfig",
    "Config",
    "parse_input",
    "load_config",
    "config_from_dict",
    "compile_patterns",
]

_RECURSIVE_SUFFIX = "/..."


@dataclass(slots=True)
class InputConfig:
    path: Path
    recursive: bool = False


@dataclass(slots=True)
class Config:
    inputs: List[InputConfig] = field(default_factory=list)
    output: Path = Path("bindata.py")
    # Stripped from the start of each relative asset path.
    prefix: str = ""
    ignore: List[Pattern[str]] = field(default_factory=list)
    no_compress: bool = False
    no_metadata: bool = False
    # Overrides applied to every asset; 0 keeps the file's own value.
    mode: int = 0
    mod_time: int = 0
    module_doc: str = ""

    def validate(self) -> None:
        if not self.inputs:
            raise config_error("Missing <input dir>")
        if self.mode < 0 or self.mode > 0o7777:
            raise config_error(
                f"Mode {self.mode:o} out of range", {"mode": self.mode}
            )
        if self.mod_time < 0:
            raise config_error(
                "Mod time must not be negative", {"mod_time": self.mod_time}
            )
        for inp in self.inputs:
            if not inp.path.is_dir():
                raise config_error(
                    f"Input {inp.path} is not a directory",
                    {"path": str(inp.path)},
                )


def parse_input(path: str) -> InputConfig:
    """Parse one input argument; a trailing ``/...`` means recursive.

    e.g.:
        /path/to/foo/...    -> (/path/to/foo, True)
        /path/to/bar        -> (/path/to/bar, False)
    """
    if path.endswith(_RECURSIVE_SUFFIX):
        return InputConfig(Path(path[: -len(_RECURSIVE_SUFFIX)] or "/"), True)
    return InputConfig(Path(path), False)


def compile_patterns(patterns: List[str]) -> List[Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise config_error(
                f"Invalid ignore pattern {pattern!r}: {exc}",
                {"pattern": pattern},
            ) from exc
    return compiled


def config_from_dict(data: Dict[str, Any], base_dir: Path | None = None) -> Config:
    """Build a :class:`Config` from a mapping; relative paths use ``base_dir``."""
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise config_error(f"Unknown config keys: {', '.join(unknown)}")
    base = base_dir or Path(".")
    cfg = Config()
    raw_inputs = data.get("inputs", [])
    if not isinstance(raw_inputs, list):
        raise config_error("'inputs' must be a list")
    for raw in raw_inputs:
        inp = parse_input(str(raw))
        if not inp.path.is_absolute():
            inp.path = base / inp.path
        cfg.inputs.append(inp)
    if "output" in data:
        out = Path(str(data["output"]))
        cfg.output = out if out.is_absolute() else base / out
    cfg.prefix = str(data.get("prefix", cfg.prefix) or "")
    ignore = data.get("ignore", [])
    if not isinstance(ignore, list):
        raise config_error("'ignore' must be a list")
    cfg.ignore = compile_patterns([str(p) for p in ignore])
    cfg.no_compress = bool(data.get("no_compress", False))
    cfg.no_metadata = bool(data.get("no_metadata", False))
    try:
        cfg.mode = _as_mode(data.get("mode", 0))
        cfg.mod_time = int(data.get("mod_time", 0))
    except (TypeError, ValueError) as exc:
        raise config_error(f"Invalid numeric value: {exc}") from exc
    cfg.module_doc = str(data.get("module_doc", "") or "")
    return cfg


def _as_mode(value: Any) -> int:
    # YAML users write modes as "0644"; treat strings as octal.
    if isinstance(value, str):
        return int(value, 8)
    return int(value)


def load_config(path: str | Path) -> Config:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise config_error(f"Can't parse {p.name}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise config_error("Root of configuration must be a mapping")
    return config_from_dict(data, base_dir=p.parent)
