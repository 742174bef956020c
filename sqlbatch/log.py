"""
Logging setup for the CLI.  Library code only ever calls
``logging.getLogger(__name__)``; where the records land is decided here.
"""
from __future__ import annotations
import logging
import pathlib
import sys

from sqlbatch.constants import LOG_DATE_FORMAT, LOG_FORMAT

_installed: list[logging.Handler] = []


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def reset_logger() -> None:
    """Remove the handlers installed by :func:`init_logger`."""
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()


def init_logger(
    log_file: pathlib.Path | str | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Send log records to stdout and, when *log_file* is given, append them to
    that file as well.  Handlers from a previous call are replaced.
    """
    reset_logger()
    root = logging.getLogger()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter())
    _installed.append(console)

    if log_file:
        path = pathlib.Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(_formatter())
        _installed.append(file_handler)

    for handler in _installed:
        handler.setLevel(level)
        root.addHandler(handler)
    root.setLevel(level)
