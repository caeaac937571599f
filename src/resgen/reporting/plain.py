from __future__ import annotations

import sys
from typing import Optional, TextIO

from .base import Level, Reporter, TaskRecord, TaskStatus, level_label

_ICONS = {TaskStatus.SUCCESS: "✔", TaskStatus.FAILED: "✖"}

_COLORS = {
    Level.VERBOSE: "36",
    Level.INFO: "32",
    Level.WARNING: "33",
    Level.ERROR: "31",
}


class PlainReporter(Reporter):
    """One line per event, stable across runs; ANSI colors on a terminal."""

    def __init__(self, stream: Optional[TextIO] = None, use_color: bool | None = None):
        super().__init__()
        self.stream = stream if stream is not None else sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def _message(self, level: Level, text: str, depth: int) -> None:
        label = level_label(level, depth)
        if self.use_color:
            label = f"\x1b[{_COLORS[level]}m{label}\x1b[0m"
        self._write(f"{label}: {text}")

    def _task_started(self, rec: TaskRecord) -> None:
        self.verbose(f"{rec.title}...")

    def _task_advanced(self, rec: TaskRecord, item: Optional[str]) -> None:
        if item is None:
            return
        count = f"{rec.completed}/{rec.total}" if rec.total is not None else str(rec.completed)
        self.verbose(f"   · {rec.title}: {item} ({count})", level=2)

    def _task_finished(self, rec: TaskRecord) -> None:
        icon = _ICONS.get(rec.status, "?")
        self._write(f" {icon} {rec.title} ({rec.duration:.2f}s){rec.stats_text()}")
