from __future__ import annotations

from .base import Level, Reporter


class SilentReporter(Reporter):
    """Discards every message and task event (``--reporter silent``)."""

    def _message(self, level: Level, text: str, depth: int) -> None:
        pass
