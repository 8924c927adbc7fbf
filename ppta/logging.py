"""Logging setup for the CLI.

The terminal and the log file are levelled separately:

- terminal (stderr): WARNING, or DEBUG with ``-v`` / ``--verbose``.
- log file: ``PPTA_LOG_LEVEL`` (default INFO), written to
  ``<output_dir>/.ppta/ppta.log`` only when an output directory is given.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIRNAME = ".ppta"
LOG_FILENAME = "ppta.log"

_ROTATE_AT = 1024 * 1024  # 1 MB
_KEEP = 2

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# httpx logs every request at INFO
_QUIET = ("httpx", "httpcore")


def _parse_log_level(name: str) -> int:
    """Level for *name* (any case); INFO when the name is not a level."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _terminal_handler(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    return handler


def _file_handler(output_dir: Path) -> logging.Handler:
    log_path = output_dir / LOG_DIRNAME / LOG_FILENAME
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path, maxBytes=_ROTATE_AT, backupCount=_KEEP, encoding="utf-8",
    )
    handler.setLevel(_parse_log_level(os.environ.get("PPTA_LOG_LEVEL", "INFO")))
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(*, output_dir: Path | None = None, verbose: bool = False) -> None:
    """Replace the root logger's handlers with the terminal and file handlers.

    Calling it again (e.g. once per CLI invocation in tests) does not stack
    handlers.
    """
    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(logging.DEBUG)

    root.addHandler(_terminal_handler(verbose))
    if output_dir is not None:
        root.addHandler(_file_handler(output_dir))

    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)
