"""JSON lines reporter for machine consumers (``--reporter json``).

Every event is one JSON object per line with an ``event`` key:
``task_start``, ``task_progress``, ``task_end``, ``status``, ``section``
and ``summary``. Status lines shaped ``"<Kind> summary: k=v ..."`` are
additionally emitted as a ``summary`` event carrying the pairs.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, TextIO

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

_SUMMARY_KINDS = frozenset({"collect", "build", "listing"})


def parse_summary(message: str) -> Dict[str, str] | None:
    """Split ``"Build summary: a=1 b=2"`` into ``{"summary_type": "build", ...}``.

    Returns None for lines that are not a known summary.
    """
    head, sep, tail = message.partition(":")
    words = head.lower().split()
    if not sep or words[1:] != ["summary"] or words[0] not in _SUMMARY_KINDS:
        return None
    pairs = dict(token.split("=", 1) for token in tail.split() if "=" in token)
    return {"summary_type": words[0], **pairs}


class JsonLinesReporter(Reporter):
    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout
        self._tasks: Dict[str, TaskRecord] = {}

    def _emit(self, event: str, **payload: Any) -> None:
        payload["event"] = event
        self.stream.write(json.dumps(payload, sort_keys=True, default=str) + "\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        self._emit("task_start", id=task_id, name=name, total=total, **meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.step(step, meta)
        self._emit("task_progress", id=task_id, completed=rec.completed, **meta)

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
        self._emit(
            "task_end",
            id=task_id,
            status=status.name.lower(),
            completed=rec.completed,
            total=rec.total,
            duration_seconds=rec.duration,
            **rec.meta,
        )

    def _line(self, level: str, message: str, fields: Dict[str, Any]) -> None:
        self._emit("status", message=message, level=level, **fields)

    def status(self, message: str, **fields: Any) -> None:
        summary = parse_summary(message)
        if summary is not None:
            self._emit("summary", raw=message, **summary, **fields)
        self._line("info", message, fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._line(f"verbose{level}", message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._line("warning", message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._line("error", message, fields)

    def section(self, title: str) -> None:
        self._emit("section", title=title)
