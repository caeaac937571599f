"""Reporter backends selected with ``--reporter``."""

from __future__ import annotations

from typing import Optional, TextIO

from .base import (
    Level,
    Reporter,
    TaskStatus,
    get_reporter,
    get_verbosity,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Level",
    "Reporter",
    "TaskStatus",
    "get_reporter",
    "set_reporter",
    "task",
    "set_verbosity",
    "get_verbosity",
    "PlainReporter",
    "JsonLinesReporter",
    "SilentReporter",
    "RichReporter",
    "make_reporter",
    "REPORTER_CHOICES",
]

REPORTER_CHOICES = ("plain", "rich", "json", "silent")


def make_reporter(kind: str, stream: Optional[TextIO] = None) -> Reporter:
    """Build a reporter by CLI name; ``rich`` degrades to plain off a terminal."""
    if kind == "json":
        return JsonLinesReporter(stream)
    if kind == "silent":
        return SilentReporter()
    if kind == "rich":
        from rich.console import Console

        console = Console(file=stream, stderr=stream is None, highlight=False)
        if console.is_terminal:
            return RichReporter(console)
    return PlainReporter(stream)
