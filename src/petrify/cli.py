"""Command line interface for petrify."""

from __future__ import annotations

import argparse
import importlib.util
import json
import posixpath
import sys
from pathlib import Path

from ._version import __version__
from .api import plan_dry_run, translate
from .config import Config, compile_patterns, load_config, parse_input
from .errors import AssetFSError, config_error
from .logging import configure_logging, get_logger, section
from .reporting import (
    REPORTERS,
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)
from .table import AssetTable


def _config_from_args(args: argparse.Namespace) -> Config:
    cfg = load_config(args.config) if args.config else Config()
    if args.inputs:
        cfg.inputs = [parse_input(p) for p in args.inputs]
    if args.output is not None:
        cfg.output = args.output
    if args.prefix is not None:
        cfg.prefix = args.prefix
    if args.ignore:
        cfg.ignore = cfg.ignore + compile_patterns(args.ignore)
    if args.nocompress:
        cfg.no_compress = True
    if args.nometadata:
        cfg.no_metadata = True
    if args.mode is not None:
        cfg.mode = args.mode
    if args.modtime is not None:
        cfg.mod_time = args.modtime
    return cfg


def _build_cmd(args: argparse.Namespace) -> int:
    with section("Build"):
        translate(_config_from_args(args))
    return 0


def _plan_cmd(args: argparse.Namespace) -> int:
    with section("Plan"):
        trie, plan = plan_dry_run(_config_from_args(args))
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(json.dumps(plan, indent=2, sort_keys=True))
        return 0
    for path, node in trie.walk():
        if not path:
            continue
        depth = path.count("/")
        label = posixpath.basename(path) + ("" if node.is_leaf else "/")
        print(f"{'  ' * depth}{label}")
    return 0


def _load_table(module_path: Path) -> AssetTable:
    if not module_path.is_file():
        raise config_error(f"Module {module_path} not found")
    spec = importlib.util.spec_from_file_location(
        f"_petrify_{module_path.stem}", str(module_path)
    )
    if spec is None or spec.loader is None:
        raise config_error(f"Can't load module {module_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    table = getattr(module, "assets", None)
    if not isinstance(table, AssetTable):
        raise config_error(f"{module_path} is not a petrify module")
    return table


def _ls_cmd(args: argparse.Namespace) -> int:
    fs = _load_table(args.module).filesystem(args.prefix or "")
    with fs.open(args.path) as handle:
        info = handle.stat()
        if not info.is_dir:
            print(f"{info.name}\t{info.size}")
            return 0
        entries = handle.readdir(0)
    for entry in entries:
        if entry.is_dir:
            print(f"{entry.name}/")
        elif args.long:
            child = posixpath.join(args.path, entry.name)
            print(f"{entry.name}\t{fs.stat(child).size}")
        else:
            print(entry.name)
    get_reporter().status(f"Listing summary: entries={len(entries)}")
    return 0


def _add_input_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "inputs",
        nargs="*",
        help="Input directories; append /... to recurse",
    )
    p.add_argument(
        "-c", "--config", type=Path, help="YAML or JSON configuration file"
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Name of the module to generate (default: bindata.py)",
    )
    p.add_argument(
        "--prefix", help="Optional path prefix to strip off asset names"
    )
    p.add_argument(
        "--ignore",
        action="append",
        default=[],
        help="Regex pattern to ignore (repeatable)",
    )
    p.add_argument(
        "--nocompress",
        action="store_true",
        help="Assets will *not* be gzip compressed",
    )
    p.add_argument(
        "--nometadata",
        action="store_true",
        help="Assets will not preserve size, mode, and modtime info",
    )
    p.add_argument(
        "--mode",
        type=lambda s: int(s, 8),
        help="Optional file mode override for all files (octal)",
    )
    p.add_argument(
        "--modtime",
        type=int,
        help="Optional modification unix timestamp override for all files",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="petrify", description="Embed files into a Python module"
    )
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=sorted(REPORTERS),
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("build", help="Generate an asset module")
    _add_input_options(b)
    b.set_defaults(func=_build_cmd)

    pl = sub.add_parser("plan", help="Show the asset tree (dry run, no write)")
    _add_input_options(pl)
    pl.add_argument("--json", action="store_true", help="Emit JSON plan")
    pl.set_defaults(func=_plan_cmd)

    ls = sub.add_parser("ls", help="List a directory of a generated module")
    ls.add_argument("module", type=Path, help="Generated module file")
    ls.add_argument("path", nargs="?", default="", help="Directory to list")
    ls.add_argument("--prefix", help="Mount prefix applied before lookup")
    ls.add_argument(
        "-l", "--long", action="store_true", help="Show file sizes"
    )
    ls.set_defaults(func=_ls_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except AssetFSError as exc:
        get_logger().error("%s", exc)
        return 1
    except FileNotFoundError as exc:
        get_logger().error("petrify: %s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
