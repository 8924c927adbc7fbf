"""Summary statistics over match results.

Pure arithmetic and string formatting with no I/O or lexicon access.
The pipeline calls these after matching and scoring.
"""

from __future__ import annotations

from ppta.analysis.models import MatchResult, PermaSummary

NO_MATCHES = "There were no PERMA matches in the input."
ALL_POSITIVE = "Of the matches, 100% were positive PERMA matches."
ALL_NEGATIVE = "Of the matches, 100% were negative PERMA matches."
EQUAL_MATCHES = "There are an equal number of positive and negative PERMA matches."


def matched_words(matches: MatchResult, prefix: str = "") -> list[str]:
    """Matched words from every category whose name starts with *prefix*.

    Each distinct word appears once per occurrence in the text.  A word
    listed in several of the selected categories is only taken from the
    first of them, so it is never counted twice.
    """
    words: list[str] = []
    seen: set[str] = set()
    for category, category_matches in matches.categories.items():
        if not category.startswith(prefix):
            continue
        for match in category_matches:
            if match.word in seen:
                continue
            seen.add(match.word)
            words.extend(match.words)
    return words


def prefix_count(matches: MatchResult, prefix: str = "") -> int:
    """Occurrence count of the distinct words matched under *prefix*."""
    return len(matched_words(matches, prefix))


def category_counts(matches: MatchResult) -> dict[str, int]:
    """Occurrences per category, plus ``TOTAL`` across all of them."""
    counts = {category: matches.count(category) for category in matches.categories}
    counts["TOTAL"] = prefix_count(matches)
    return counts


def printable_words(matches: MatchResult) -> dict[str, list[str]]:
    """Per-category word lists with repeats compacted to ``word[n]``."""
    return {
        category: [m.printable() for m in category_matches]
        for category, category_matches in matches.categories.items()
    }


def percentage(part: int, whole: int) -> float | None:
    """*part* as a percentage of *whole*, to two decimals; None if whole is 0."""
    if whole <= 0:
        return None
    return round(part / whole * 100, 2)


def ratio_statement(positive: int, negative: int) -> str:
    """Describe the balance of positive to negative matches.

    One side zero → 100% statement; both zero → no matches; otherwise the
    larger count over the smaller, to three decimals.
    """
    if positive == 0 and negative == 0:
        return NO_MATCHES
    if positive == 0:
        return ALL_NEGATIVE
    if negative == 0:
        return ALL_POSITIVE
    if positive == negative:
        return EQUAL_MATCHES
    if positive < negative:
        return (
            "For every positive PERMA match there are "
            f"{negative / positive:.3f} times as many negative PERMA matches."
        )
    return (
        "For every negative PERMA match there are "
        f"{positive / negative:.3f} times as many positive PERMA matches."
    )


def perma_summary(matches: MatchResult, word_count: int) -> PermaSummary:
    """Positive/negative/neutral totals and the ratio statement."""
    positive = prefix_count(matches, "POS")
    negative = prefix_count(matches, "NEG")
    total = prefix_count(matches)
    neutral = word_count - total
    return PermaSummary(
        positive=positive,
        negative=negative,
        total=total,
        neutral=neutral,
        match_percent=percentage(total, word_count),
        neutral_percent=percentage(neutral, word_count),
        ratio_statement=ratio_statement(positive, negative),
    )


def gender_label(gender_score: float | None) -> str:
    """Categorical label from the sign of the gender score."""
    if gender_score is None or gender_score == 0:
        return "Unknown"
    return "Male" if gender_score < 0 else "Female"
