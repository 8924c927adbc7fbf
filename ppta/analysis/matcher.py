"""Match a token sequence against a lexicon, category by category.

Two strategies are available:

``exact-token`` (default)
    A lexicon word matches when it equals a token.  Multi-word entries
    match only if n-gram expansion put the phrase into the token list.

``boundary-regex``
    Tokens are joined with single spaces and each entry is searched as an
    escaped regex, with ``\\b`` anchors on the sides that are letters.
    Multi-word and punctuation-adjacent entries can therefore match where
    exact-token matching would not, so the two strategies can disagree.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Mapping, Sequence
from enum import Enum

from ppta.analysis.models import Match, MatchResult

PERMA_PREFIXES = ("POS", "NEG")

_LETTER_START = re.compile(r"^[a-zA-Z]")
_LETTER_END = re.compile(r"[a-zA-Z]$")


class MatchStrategy(str, Enum):
    EXACT_TOKEN = "exact-token"
    BOUNDARY_REGEX = "boundary-regex"


def is_perma_category(category: str) -> bool:
    """Weighted well-being categories: names beginning POS or NEG."""
    return category.startswith(PERMA_PREFIXES)


def boundary_pattern(entry: str) -> re.Pattern[str]:
    """Regex for *entry* with word boundaries where the entry has letters.

    Entries starting or ending with punctuation (or single letters such as
    ``o``) would otherwise match inside other words or not at all.

    The closing ``\\b`` is added only when the entry's last character is a
    letter.  A multi-word entry ending in punctuation, such as
    ``"good day :)"``, therefore gets no closing anchor, even though one of
    its inner words ends in a letter.
    """
    pattern = re.escape(entry)
    if _LETTER_START.search(entry):
        pattern = r"\b" + pattern
        if _LETTER_END.search(entry):
            pattern += r"\b"
    return re.compile(pattern)


def _regex_occurrences(text: str, entry: str) -> int:
    return len(boundary_pattern(entry).findall(text))


def match_lexicon(
    tokens: Sequence[str],
    lexicon: Mapping[str, Mapping[str, float]],
    *,
    min_weight: float | None = None,
    max_weight: float | None = None,
    data_driven: bool = False,
    strategy: MatchStrategy = MatchStrategy.EXACT_TOKEN,
) -> MatchResult:
    """Return the matches for every category of *lexicon*.

    Weight thresholds apply only to POS/NEG categories of a data-driven
    lexicon; every other category ignores them.  A word occurring k times
    produces one ``Match`` with ``occurrences == k``.
    """
    low = min_weight if min_weight is not None else -math.inf
    high = max_weight if max_weight is not None else math.inf

    if strategy is MatchStrategy.BOUNDARY_REGEX:
        joined = " ".join(tokens)

        def occurrences(word: str) -> int:
            return _regex_occurrences(joined, word)
    else:
        counter = Counter(tokens)

        def occurrences(word: str) -> int:
            return counter.get(word, 0)

    result = MatchResult()
    for category, entries in lexicon.items():
        filtered = data_driven and is_perma_category(category)
        matches: list[Match] = []
        for word, weight in entries.items():
            reps = occurrences(word)
            if reps == 0:
                continue
            if filtered and (weight < low or weight > high):
                continue
            matches.append(Match(word=word, weight=weight, occurrences=reps))
        result.categories[category] = matches
    return result
