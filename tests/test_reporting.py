from __future__ import annotations

import io
import json
import logging

import pytest
from rich.console import Console

from petrify.logging import configure_logging, get_logger, section
from petrify.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    TaskStatus,
    set_reporter,
    set_verbosity,
    task,
)


def _events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_jsonl_task_lifecycle():
    out = io.StringIO()
    set_reporter(JsonLinesReporter(stream=out))
    with task("embed", "Embed assets", total=2) as rep:
        rep.advance("embed", current_item="a")
        rep.advance("embed", current_item="b")
    events = _events(out)
    assert [e["event"] for e in events] == [
        "task_start",
        "task_progress",
        "task_progress",
        "task_end",
    ]
    assert events[-1]["status"] == "success"
    assert events[-1]["completed"] == 2


def test_task_marks_failure_and_reraises():
    out = io.StringIO()
    set_reporter(JsonLinesReporter(stream=out))
    with pytest.raises(RuntimeError):
        with task("collect", "Collect", total=1):
            raise RuntimeError("boom")
    assert _events(out)[-1]["status"] == TaskStatus.FAILED.name.lower()


def test_jsonl_summary_events():
    out = io.StringIO()
    rep = JsonLinesReporter(stream=out)
    rep.status("Build summary: file=bindata.py bytes=120 assets=3")
    rep.status("Nothing to see: a=1")
    events = _events(out)
    summary = events[0]
    assert summary["event"] == "summary"
    assert summary["summary_type"] == "build"
    assert (summary["file"], summary["assets"]) == ("bindata.py", "3")
    assert [e["event"] for e in events[1:]] == ["status", "status"]


def test_plain_reporter_verbosity_gates_progress():
    out = io.StringIO()
    rep = PlainReporter(stream=out, use_color=False)
    rep.start_task("t", "Collect", total=1)
    rep.advance("t", current_item="x")
    assert out.getvalue() == ""
    set_verbosity(1)
    rep.start_task("t", "Collect", total=1)
    rep.advance("t", current_item="x")
    rep.end_task("t")
    lines = out.getvalue().splitlines()
    assert "Collect: x (1/1)" in lines[0]
    assert lines[1].startswith(" ✔ Collect 1/1")


def test_logging_routes_to_reporter():
    out = io.StringIO()
    set_reporter(PlainReporter(stream=out, use_color=False))
    configure_logging(0)
    log = get_logger("test")
    log.debug("hidden")
    log.info("shown")
    log.warning("careful")
    log.error("bad")
    assert out.getvalue().splitlines() == [
        "INFO: shown",
        "WARN: careful",
        "ERROR: bad",
    ]
    assert get_logger().propagate is False


def test_verbose_logging_needs_reporter_verbosity():
    out = io.StringIO()
    set_reporter(PlainReporter(stream=out, use_color=False))
    configure_logging(1)
    assert get_logger().level == logging.DEBUG
    get_logger().debug("quiet")
    set_verbosity(1)
    get_logger().debug("loud")
    assert out.getvalue().splitlines() == ["VERB1: loud"]


def test_section_announces_title():
    out = io.StringIO()
    set_reporter(PlainReporter(stream=out, use_color=False))
    with section("Build") as logger:
        assert logger is get_logger()
    assert "[Build]" in out.getvalue()


def test_rich_reporter_renders_tasks():
    buf = io.StringIO()
    rep = RichReporter(console=Console(file=buf, force_terminal=False, width=80))
    set_reporter(rep)
    with task("embed", "Embed assets", total=1) as r:
        r.advance("embed", current_item="a.txt")
    rep.status("Build summary: assets=1")
    rep.flush()
    text = buf.getvalue()
    assert "Embed assets 1/1" in text
    assert "INFO: Build summary" in text
