from __future__ import annotations

import json

import pytest

from petrify import __version__
from petrify.cli import main


@pytest.fixture
def built(asset_tree, tmp_path):
    out = tmp_path / "gen" / "bindata.py"
    rc = main(
        [
            "-r",
            "silent",
            "build",
            f"{asset_tree.as_posix()}/...",
            "--prefix",
            asset_tree.as_posix(),
            "--ignore",
            "~$",
            "-o",
            str(out),
        ]
    )
    assert rc == 0
    return out


def test_build_writes_module(built):
    text = built.read_text(encoding="utf-8")
    assert "name='data/img/b.png'" in text
    assert "notes.txt~" not in text


def test_ls_directory_and_file(built, capsys):
    assert main(["-r", "silent", "ls", str(built), "data", "-l"]) == 0
    assert capsys.readouterr().out.splitlines() == ["foo.txt\t2", "img/"]

    assert main(["-r", "silent", "ls", str(built), "img/a.png", "--prefix", "data"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a.png\t9"]

    assert main(["-r", "silent", "ls", str(built)]) == 0
    assert capsys.readouterr().out.splitlines() == ["data/"]


def test_ls_missing_path_fails(built, capsys):
    assert main(["-r", "json", "ls", str(built), "nope"]) == 1
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    errors = [e for e in events if e.get("level") == "error"]
    assert errors and "file does not exist" in errors[0]["message"]


def test_ls_rejects_foreign_module(tmp_path):
    other = tmp_path / "other.py"
    other.write_text("x = 1\n")
    assert main(["-r", "silent", "ls", str(other)]) == 1


def test_plan_json(asset_tree, capsys):
    rc = main(
        [
            "-r",
            "json",
            "plan",
            "--json",
            f"{asset_tree.as_posix()}/...",
            "--prefix",
            asset_tree.as_posix(),
        ]
    )
    assert rc == 0
    captured = capsys.readouterr()
    plan = json.loads(captured.out)
    assert [a["name"] for a in plan["assets"]] == [
        "data/foo.txt",
        "data/img/a.png",
        "data/img/b.png",
        "data/notes.txt~",
    ]
    assert plan["compress"] is True
    events = [json.loads(line) for line in captured.err.splitlines()]
    summary = next(e for e in events if e["event"] == "summary")
    assert summary["summary_type"] == "collect"
    assert summary["files"] == "4"


def test_plan_tree(asset_tree, capsys):
    rc = main(
        [
            "-r",
            "silent",
            "plan",
            f"{asset_tree.as_posix()}/...",
            "--prefix",
            asset_tree.as_posix(),
            "--ignore",
            "~$",
        ]
    )
    assert rc == 0
    assert capsys.readouterr().out.splitlines() == [
        "data/",
        "  foo.txt",
        "  img/",
        "    a.png",
        "    b.png",
    ]


def test_missing_input_is_an_error(tmp_path, capsys):
    assert main(["-r", "plain", "build", str(tmp_path / "absent")]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_config_file_drives_build(asset_tree, tmp_path):
    cfg = tmp_path / "petrify.yaml"
    cfg.write_text(
        f"inputs: ['{asset_tree.as_posix()}/...']\n"
        f"prefix: '{asset_tree.as_posix()}'\n"
        "output: cfg_out.py\n"
        "no_compress: true\n",
        encoding="utf-8",
    )
    assert main(["-r", "silent", "build", "-c", str(cfg)]) == 0
    assert "compressed=False" in (tmp_path / "cfg_out.py").read_text()


def test_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out
