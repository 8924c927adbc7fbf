"""Data structures for one analysis run.

These are plain dataclasses (not Pydantic). They are ephemeral, built fresh
for each call to ``analyze()``, and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Match:
    """One lexicon word found in the token sequence."""

    word: str
    weight: float
    occurrences: int = 1

    @property
    def repeated(self) -> bool:
        return self.occurrences > 1

    @property
    def words(self) -> list[str]:
        """The word repeated once per occurrence."""
        return [self.word] * self.occurrences

    def printable(self) -> str:
        """``word`` or ``word[n]`` for a word matched n > 1 times."""
        if self.repeated:
            return f"{self.word}[{self.occurrences}]"
        return self.word


@dataclass
class MatchResult:
    """Per-category matches for one lexicon, in lexicon order."""

    categories: dict[str, list[Match]] = field(default_factory=dict)

    def __getitem__(self, category: str) -> list[Match]:
        return self.categories[category]

    def get(self, category: str) -> list[Match] | None:
        return self.categories.get(category)

    def count(self, category: str) -> int:
        """Total occurrences matched in *category* (0 if absent)."""
        return sum(m.occurrences for m in self.categories.get(category, []))


@dataclass
class FamilyResult:
    """Counts, scores and word lists for one lexicon family."""

    name: str  # "perma", "prospection", ...
    lexicon_id: str
    matches: MatchResult
    counts: dict[str, int] = field(default_factory=dict)  # category -> occurrences, plus "TOTAL"
    scores: dict[str, float | None] = field(default_factory=dict)  # None = no score
    printable: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class PermaSummary:
    """Headline numbers for the well-being family."""

    positive: int
    negative: int
    total: int
    neutral: int
    match_percent: float | None  # None when the word count is zero
    neutral_percent: float | None
    ratio_statement: str


@dataclass
class Demographics:
    """Age and gender predictions."""

    age: float | None
    gender_score: float | None
    gender_label: str  # "Male", "Female" or "Unknown"


@dataclass
class AnalysisResult:
    """Everything derived from one input text."""

    word_count: int  # denominator used for frequency scoring
    true_word_count: int  # whitespace-separated words in the input
    token_count: int  # tokens matched against, n-grams included
    tokens: list[str]  # base tokens, before n-gram expansion
    lexicon_variant: str
    perma: FamilyResult | None = None
    perma_summary: PermaSummary | None = None
    prospection: FamilyResult | None = None
    affect: FamilyResult | None = None
    optimism: FamilyResult | None = None
    big_five: FamilyResult | None = None
    dark_triad: FamilyResult | None = None
    demographics: Demographics | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def families(self) -> list[FamilyResult]:
        """Every family that was computed, in display order."""
        candidates = [
            self.perma,
            self.prospection,
            self.affect,
            self.optimism,
            self.big_five,
            self.dark_triad,
        ]
        return [f for f in candidates if f is not None]
