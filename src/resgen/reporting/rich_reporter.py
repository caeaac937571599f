from __future__ import annotations

from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Level, Reporter, TaskRecord, TaskStatus, level_label

_STYLES = {
    Level.VERBOSE: "cyan",
    Level.INFO: "green",
    Level.WARNING: "yellow",
    Level.ERROR: "bold red",
}

_STATUS_ICON = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
}


class RichReporter(Reporter):
    """Console reporter; tasks with a known total get a transient progress bar."""

    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console(stderr=True, highlight=False)
        self._progress: Optional[Progress] = None
        self._bars: Dict[str, TaskID] = {}

    def _ensure_progress(self) -> Progress:
        if self._progress is None:
            self._progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.description}"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            )
            self._progress.start()
        return self._progress

    def _message(self, level: Level, text: str, depth: int) -> None:
        style = _STYLES[level]
        self.console.print(f"[{style}]{level_label(level, depth)}[/]: {escape(text)}")

    def _task_started(self, rec: TaskRecord) -> None:
        if rec.total is None:
            self.verbose(f"{rec.title}...")
            return
        self._bars[rec.task_id] = self._ensure_progress().add_task(
            escape(rec.title), total=rec.total
        )

    def _task_advanced(self, rec: TaskRecord, item: Optional[str]) -> None:
        bar = self._bars.get(rec.task_id)
        if bar is None or self._progress is None:
            return
        description = f"{rec.title}: {item}" if item else rec.title
        self._progress.update(bar, completed=rec.completed, description=escape(description))

    def _task_finished(self, rec: TaskRecord) -> None:
        bar = self._bars.pop(rec.task_id, None)
        if bar is not None and self._progress is not None:
            self._progress.remove_task(bar)
        if not self._bars:
            self.flush()
        icon = _STATUS_ICON.get(rec.status, "")
        self.console.print(
            f"{icon} {escape(rec.title)} ({rec.duration:.2f}s){escape(rec.stats_text())}"
        )

    def flush(self) -> None:
        if self._progress is not None:
            try:
                self._progress.stop()
            finally:
                self._progress = None
