"""Terminal reporter built on rich: progress bars for counted tasks."""

from __future__ import annotations

import os
from typing import Any, Dict, List

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Reporter, TaskRecord, TaskStatus, format_stats, get_verbosity

_ICONS = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
    TaskStatus.SKIPPED: "→",
}

TRANSIENT_ENV = "PETRIFY_PROGRESS_TRANSIENT"


def _transient_from_env() -> bool:
    return os.getenv(TRANSIENT_ENV, "").strip().lower() in {"1", "true", "yes"}


class RichReporter(Reporter):
    """Draws one live progress bar per counted task.

    With ``PETRIFY_PROGRESS_TRANSIENT=1`` the bars vanish when the last
    task ends and the completion lines are printed afterwards instead.
    """

    supports_progress = True

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True, highlight=False)
        self.transient = _transient_from_env()
        self.progress: Progress | None = None
        self._tasks: Dict[str, TaskRecord] = {}
        self._bars: Dict[str, TaskID] = {}
        self._deferred: List[str] = []

    def _live(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(),
                TextColumn("{task.description}"),
                BarColumn(bar_width=None),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=self.console,
                transient=self.transient,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        if total is None:
            self.console.rule(name)
        else:
            self._bars[task_id] = self._live().add_task(name, total=total)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.step(step, meta)
        bar = self._bars.get(task_id)
        if bar is None or self.progress is None:
            return
        item = meta.get("current_item")
        self.progress.update(
            bar,
            completed=rec.completed,
            description=f"{rec.name} ↳ {item}" if item else rec.name,
        )

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
        bar = self._bars.pop(task_id, None)
        if bar is not None and self.progress is not None:
            self.progress.update(bar, completed=rec.completed, description=rec.name)
        line = (
            f"{_ICONS.get(status, '')} {rec.name}{rec.counts}"
            f" ({rec.duration:.2f}s){format_stats(rec)}"
        )
        if self.transient:
            self._deferred.append(line)
        else:
            self.console.print(line)
        if not self._bars:
            self.flush()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {message}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self.console.print(f"[cyan]VERB{level}[/]: {message}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {message}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        progress, self.progress = self.progress, None
        if progress is not None:
            progress.stop()
        if self._deferred:
            self.console.print("\n".join(self._deferred))
            self._deferred.clear()
