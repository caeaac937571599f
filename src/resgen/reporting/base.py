"""Reporter interface and the process-wide active reporter.

Generated code owns stdout, so backends write their diagnostics to stderr
unless given another stream. The base class keeps the task bookkeeping and
the verbosity gate; a backend only decides how a message, a task start, a
progress step and a finished task look.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

if TYPE_CHECKING:
    from ..errors import ResgenError

__all__ = [
    "Level",
    "level_label",
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "STAT_KEYS",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
]


class Level(Enum):
    VERBOSE = "verbose"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def level_label(level: Level, depth: int = 0) -> str:
    """Short prefix shown before a message: ``INFO``, ``WARN``, ``VERB2``..."""
    if level is Level.VERBOSE:
        return f"VERB{depth}"
    return {Level.INFO: "INFO", Level.WARNING: "WARN", Level.ERROR: "ERROR"}[level]


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()


# Tree statistics shown when a task ends, in display order.
STAT_KEYS = ("directories", "leaves", "failures", "bytes")


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    title: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    started: float = field(default_factory=time.perf_counter)
    ended: Optional[float] = None
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        return (self.ended - self.started) if self.ended is not None else 0.0

    def stats_text(self) -> str:
        shown = [f"{k}={self.stats[k]}" for k in STAT_KEYS if k in self.stats]
        return f" [{' '.join(shown)}]" if shown else ""


_VERBOSITY: int = 0  # -v count from the CLI


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter(ABC):
    """Sink for progress and diagnostics of a resgen run."""

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskRecord] = {}

    # Backend hooks.

    @abstractmethod
    def _message(self, level: Level, text: str, depth: int) -> None:
        """Emit one diagnostic line."""

    def _task_started(self, rec: TaskRecord) -> None:
        pass

    def _task_advanced(self, rec: TaskRecord, item: Optional[str]) -> None:
        pass

    def _task_finished(self, rec: TaskRecord) -> None:
        pass

    # Public API.

    def start_task(self, task_id: str, title: str, total: int | None = None) -> None:
        rec = TaskRecord(task_id, title, total)
        self._tasks[task_id] = rec
        self._task_started(rec)

    def advance(
        self, task_id: str, step: int = 1, current_item: str | None = None
    ) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        self._task_advanced(rec, current_item)

    def end_task(
        self, task_id: str, status: TaskStatus = TaskStatus.SUCCESS, **stats: Any
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.status = status
        rec.ended = time.perf_counter()
        rec.stats.update(stats)
        self._task_finished(rec)

    def status(self, text: str) -> None:
        self._message(Level.INFO, text, 0)

    def verbose(self, text: str, *, level: int = 1) -> None:
        if get_verbosity() >= level:
            self._message(Level.VERBOSE, text, level)

    def warning(self, text: str) -> None:
        self._message(Level.WARNING, text, 0)

    def error(self, text: str) -> None:
        self._message(Level.ERROR, text, 0)

    def report_error(self, err: ResgenError) -> None:
        """Report a failed run; backends may keep the structured fields."""
        self.error(str(err))

    def flush(self) -> None:
        pass


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter()
    return _ACTIVE_REPORTER


@contextmanager
def task(task_id: str, title: str, total: int | None = None) -> Iterator[Dict[str, Any]]:
    """Run a block as a reported task.

    The yielded dict collects the statistics shown when the task ends; they
    are reported on failure too.
    """
    rep = get_reporter()
    rep.start_task(task_id, title, total)
    stats: Dict[str, Any] = {}
    try:
        yield stats
    except BaseException:
        rep.end_task(task_id, TaskStatus.FAILED, **stats)
        raise
    rep.end_task(task_id, TaskStatus.SUCCESS, **stats)
