"""Reporter protocol shared by the build pipeline and the CLI.

One reporter is active per process. The CLI picks it from ``--reporter``;
library callers that never pick one get a :class:`PlainReporter` on
stderr. Build steps bracket their work with :func:`task`::

    with task("embed", "Embed assets", total=len(files)) as rep:
        for f in files:
            ...
            rep.advance("embed", current_item=f.name, bytes=stored)
"""

from __future__ import annotations

import sys
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
    "format_stats",
]

# Progress meta keys echoed on completion lines, in this order.
STAT_KEYS = ("files", "bytes")


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()
    SKIPPED = auto()


@dataclass(slots=True)
class TaskRecord:
    """Bookkeeping for one running task; reporters keep one per task id."""

    task_id: str
    name: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    started: float = field(default_factory=time.monotonic)
    finished: Optional[float] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def step(self, count: int, meta: Dict[str, Any]) -> None:
        self.completed += count
        self.meta.update(meta)

    def finish(self, status: TaskStatus, meta: Dict[str, Any]) -> None:
        self.status = status
        self.finished = time.monotonic()
        self.meta.update(meta)

    @property
    def duration(self) -> float:
        if self.finished is None:
            return 0.0
        return self.finished - self.started

    @property
    def counts(self) -> str:
        """`` done/total`` for counted tasks, empty otherwise."""
        if self.total is None:
            return ""
        return f" {self.completed}/{self.total}"


def format_stats(rec: TaskRecord) -> str:
    stats = [f"{k}={rec.meta[k]}" for k in STAT_KEYS if k in rec.meta]
    return f" [{' '.join(stats)}]" if stats else ""


_verbosity = 0


def set_verbosity(level: int) -> None:
    global _verbosity
    _verbosity = max(0, level)


def get_verbosity() -> int:
    return _verbosity


class Reporter(ABC):
    """Sink for task progress and status lines."""

    supports_progress: bool = False

    @abstractmethod
    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        """Begin ``task_id``; ``total`` is None for uncounted work."""

    @abstractmethod
    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        """Record ``step`` more units done; unknown ids are ignored."""

    @abstractmethod
    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None: ...

    @abstractmethod
    def status(self, message: str, **fields: Any) -> None: ...

    @abstractmethod
    def error(self, message: str, **fields: Any) -> None: ...

    @abstractmethod
    def section(self, title: str) -> None: ...

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def flush(self) -> None:
        pass


_active: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _active
    _active = rep


def get_reporter() -> Reporter:
    global _active
    if _active is None:
        from .plain import PlainReporter  # circular

        _active = PlainReporter(stream=sys.stderr)
    return _active


@contextmanager
def task(
    task_id: str, name: str, total: int | None = None, **meta: Any
) -> Iterator[Reporter]:
    """Bracket a unit of work with start/end events on the active reporter.

    The reporter is yielded so the body can call ``advance`` on it. When
    the body raises, the task ends as FAILED and the exception propagates.
    """
    rep = get_reporter()
    rep.start_task(task_id, name, total, **meta)
    try:
        yield rep
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED)
        raise
    rep.end_task(task_id, TaskStatus.SUCCESS)
