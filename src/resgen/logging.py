"""Logging utilities for ResGen.

Records sent to the ``resgen`` logger hierarchy are forwarded to the active
reporter, so library code can use plain stdlib logging while the CLI
decides how diagnostics look.
"""

from __future__ import annotations

import logging

from .reporting import get_reporter

_LOGGER_NAME = "resgen"
_STEP_PREFIX = "  ->"

__all__ = [
    "get_logger",
    "configure_logging",
    "step",
]


def get_logger(suffix: str | None = None) -> logging.Logger:
    name = f"{_LOGGER_NAME}.{suffix}" if suffix else _LOGGER_NAME
    return logging.getLogger(name)


class _ReporterHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            rep = get_reporter()
            msg = self.format(record)
            if record.levelno >= logging.ERROR:
                rep.error(msg)
            elif record.levelno >= logging.WARNING:
                rep.warning(msg)
            elif record.levelno >= logging.INFO:
                rep.status(msg)
            else:
                rep.verbose(msg, level=2)
        except Exception:  # pragma: no cover
            self.handleError(record)


def configure_logging(verbosity: int = 0) -> None:
    """Route ``resgen`` log records to the reporter.

    ``verbosity`` 0 shows warnings and errors, 1 adds info, 2+ adds debug.
    """
    logger = get_logger()
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logger.setLevel(level)

    for h in list(logger.handlers):
        if isinstance(h, _ReporterHandler):
            logger.removeHandler(h)

    handler = _ReporterHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)


def step(message: str) -> None:
    get_reporter().verbose(f"{_STEP_PREFIX} {message}", level=1)
