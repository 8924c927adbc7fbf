"""Token list export: one token per line."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def format_tokens(tokens: Sequence[str], *, sort: bool = False) -> str:
    """Newline-delimited tokens, alphabetically sorted if *sort*.

    The input sequence is never reordered in place.
    """
    ordered = sorted(tokens) if sort else list(tokens)
    return "".join(f"{token}\n" for token in ordered)


def export_filename(timestamp_ms: int | None = None) -> str:
    """``ppta_tokens_<epoch milliseconds>.csv``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"ppta_tokens_{timestamp_ms}.csv"


def write_tokens(
    tokens: Sequence[str],
    destination: Path,
    *,
    sort: bool = False,
) -> Path:
    """Write the token list and return the file written.

    If *destination* is an existing directory a timestamped file is
    created inside it.
    """
    path = destination / export_filename() if destination.is_dir() else destination
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_tokens(tokens, sort=sort), encoding="utf-8")
    logger.info("Wrote %d tokens to %s", len(tokens), path)
    return path
