"""Logging helpers for the provlint command line.

Diagnostics go to the reporter's sink; everything here is progress and
debug output on stderr, optionally mirrored into a log file.
"""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "provlint"
_CONSOLE_FORMAT = "[provlint] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``provlint.<name>``, or the root provlint logger."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _attach(
    logger: logging.Logger, handler: logging.Handler, level: int, fmt: str
) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route provlint records to stderr and, when given, to ``log_file``.

    ``verbose`` lowers the threshold to DEBUG, which is where skipped
    functions, unresolved keys and unclassified fragments are reported.
    Calling this again replaces the handlers installed by a previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(), level, _CONSOLE_FORMAT)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT)

    return logger


__all__ = ["configure_logging", "get_logger"]
