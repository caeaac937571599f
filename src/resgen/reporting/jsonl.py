from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, Optional, TextIO

from .base import Level, Reporter, TaskRecord

if TYPE_CHECKING:
    from ..errors import ResgenError


class JsonLinesReporter(Reporter):
    """Machine-readable reporter: one JSON object per line.

    Events are ``message``, ``task_start``, ``task_progress`` and
    ``task_end``; reported errors add ``code`` and ``context`` to their
    ``message`` event. Writes to stderr by default because stdout carries the
    generated code.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream if stream is not None else sys.stderr

    def _event(self, event: str, **payload: Any) -> None:
        self.stream.write(json.dumps({"event": event, **payload}, sort_keys=True, default=str))
        self.stream.write("\n")
        self.stream.flush()

    def _message(self, level: Level, text: str, depth: int) -> None:
        name = f"verbose{depth}" if level is Level.VERBOSE else level.value
        self._event("message", level=name, message=text)

    def report_error(self, err: ResgenError) -> None:
        self._event("message", level=Level.ERROR.value, **err.to_dict())

    def _task_started(self, rec: TaskRecord) -> None:
        self._event("task_start", id=rec.task_id, title=rec.title, total=rec.total)

    def _task_advanced(self, rec: TaskRecord, item: Optional[str]) -> None:
        self._event("task_progress", id=rec.task_id, completed=rec.completed, item=item)

    def _task_finished(self, rec: TaskRecord) -> None:
        self._event(
            "task_end",
            id=rec.task_id,
            status=rec.status.name.lower(),
            completed=rec.completed,
            total=rec.total,
            duration_seconds=round(rec.duration, 6),
            **rec.stats,
        )
