# === FILE: sitemap_checker/logger.py ===
"""Logging setup for **SitemapChecker**.

Every module logs through one named logger::

    from sitemap_checker.logger import logger
    logger.info("Rechecked %s: %s", url, outcome)

Console output goes to stderr: the CLI prints progress events as JSON lines
on stdout and the two must not mix. :func:`init_logging` is called once per
CLI invocation; the import-time instance logs at INFO to stderr.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, Optional, TextIO, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SitemapChecker"

# Library loggers that follow the project level instead of the root logger's
LIBRARY_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.access", "aiohttp.server")

_LevelT = Union[int, str]


def _handlers(
    fmt: str, stream: Optional[TextIO], log_file: Union[str, Path, None]
) -> Iterable[logging.Handler]:
    formatter = logging.Formatter(fmt)

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setFormatter(formatter)
    yield console

    if log_file is not None:
        rotating = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        rotating.setFormatter(formatter)
        yield rotating


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Rotating logfile (5 MB x 3) in addition to the console, or *None*.
    log_format
        Format string for :class:`logging.Formatter`.
    stream
        Console stream; stderr when omitted.
    replace_handlers
        *True* drops existing handlers, *False* appends.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    for handler in _handlers(log_format, stream, log_file):
        lg.addHandler(handler)
    lg.propagate = False

    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(level)
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Entry point used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT", "LOGGER_NAME"]
