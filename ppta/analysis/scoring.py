"""Turn a category's matches into a single lexical value."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from ppta.analysis.models import Match
from ppta.errors import InvalidWordCountError

logger = logging.getLogger(__name__)


class Encoding(str, Enum):
    BINARY = "binary"
    FREQUENCY = "frequency"


def check_word_count(word_count: int) -> int:
    """Return *word_count* or raise InvalidWordCountError if it is not positive."""
    if word_count <= 0:
        raise InvalidWordCountError(f"word count must be positive, got {word_count}")
    return word_count


def score(
    matches: Sequence[Match] | None,
    word_count: int,
    intercept: float = 0.0,
    encoding: Encoding = Encoding.BINARY,
) -> float | None:
    """Weighted sum of *matches* plus *intercept*.

    binary
        each distinct word contributes its weight once, however often it
        occurred.
    frequency
        each word contributes ``occurrences / word_count * weight``.

    Returns None ("no score") when *matches* is missing or *word_count* is
    not positive, rather than dividing by zero.
    """
    if matches is None:
        return None
    try:
        wc = check_word_count(word_count)
    except InvalidWordCountError as exc:
        logger.debug("No score: %s", exc)
        return None

    total = 0.0
    for match in matches:
        if encoding is Encoding.FREQUENCY:
            total += (match.occurrences / wc) * match.weight
        else:
            total += match.weight
    return total + intercept
