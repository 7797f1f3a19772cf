"""Line-oriented reporter; the default backend."""

from __future__ import annotations

import sys
from typing import Any, Dict, TextIO

from .base import Reporter, TaskRecord, TaskStatus, format_stats, get_verbosity

_ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
    TaskStatus.SKIPPED: "→",
}

# (label, ANSI color) per line kind
_LABELS = {
    "info": ("INFO", "32"),
    "warning": ("WARN", "33"),
    "error": ("ERROR", "31"),
}


class PlainReporter(Reporter):
    """Writes one line per event, colored only on a terminal.

    Per-item progress lines appear from verbosity 1 up; task completion
    lines are always shown.
    """

    def __init__(self, stream: TextIO | None = None, use_color: bool | None = None):
        self.stream = stream or sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color
        self._tasks: Dict[str, TaskRecord] = {}

    def _write(self, text: str) -> None:
        self.stream.write(f"{text}\n")

    def _labelled(self, kind: str, message: str) -> None:
        label, color = _LABELS[kind]
        if self.use_color:
            label = f"\x1b[{color}m{label}\x1b[0m"
        self._write(f"{label}: {message}")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.step(step, meta)
        if get_verbosity() >= 1:
            item = meta.get("current_item", f"#{rec.completed}")
            total = "?" if rec.total is None else rec.total
            self._write(f"   · {rec.name}: {item} ({rec.completed}/{total})")

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.finish(status, final_meta)
        self._write(
            f" {_ICONS.get(status, '?')} {rec.name}{rec.counts}"
            f" ({rec.duration:.2f}s){format_stats(rec)}"
        )

    def status(self, message: str, **fields: Any) -> None:
        self._labelled("info", message)

    def warning(self, message: str, **fields: Any) -> None:
        self._labelled("warning", message)

    def error(self, message: str, **fields: Any) -> None:
        self._labelled("error", message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            tag = f"VERB{level}"
            if self.use_color:
                tag = f"\x1b[36m{tag}\x1b[0m"
            self._write(f"{tag}: {message}")

    def section(self, title: str) -> None:
        self._write(f"\n[{title}]")
