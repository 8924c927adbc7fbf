"""Analysis configuration: one immutable value per analysis call."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from ppta.analysis.matcher import MatchStrategy
from ppta.analysis.scoring import Encoding


class PermaVariant(str, Enum):
    """Which PERMA lexicon to score against."""

    DATA_DRIVEN = "dd"
    MANUAL = "manual"
    MANUAL_75 = "manual-75"
    SPANISH = "spanish"

    @property
    def lexicon_id(self) -> str:
        return _VARIANT_LEXICA[self]


_VARIANT_LEXICA = {
    PermaVariant.DATA_DRIVEN: "perma_dd",
    PermaVariant.MANUAL: "perma_manual",
    PermaVariant.MANUAL_75: "perma_manual_tsp75",
    PermaVariant.SPANISH: "perma_spanish",
}


class NgramMode(str, Enum):
    NONE = "none"
    BIGRAMS = "bigrams"
    TRIGRAMS = "trigrams"  # bigrams and trigrams

    @property
    def max_n(self) -> int:
        return {NgramMode.NONE: 1, NgramMode.BIGRAMS: 2, NgramMode.TRIGRAMS: 3}[self]


class AnalysisConfig(BaseModel):
    """Every option that shapes one analysis.

    ``min_weight`` / ``max_weight`` default to the variant's published
    weight range and only affect data-driven variants.
    """

    model_config = ConfigDict(frozen=True)

    variant: PermaVariant = PermaVariant.DATA_DRIVEN
    min_weight: float | None = None
    max_weight: float | None = None
    encoding: Encoding = Encoding.BINARY

    prospection: bool = False
    affect: bool = False
    optimism: bool = False
    big_five: bool = False
    dark_triad: bool = False
    age_gender: bool = False

    ngrams: NgramMode = NgramMode.NONE
    ngrams_in_word_count: bool = False
    clean_text: bool = True
    sort_tokens: bool = False
    strategy: MatchStrategy = MatchStrategy.EXACT_TOKEN

    @model_validator(mode="after")
    def _check_combinations(self) -> AnalysisConfig:
        if self.optimism and not (self.prospection and self.affect):
            raise ValueError("optimism requires both prospection and affect")
        if self.variant is PermaVariant.SPANISH:
            unsupported = [
                name
                for name in ("prospection", "affect", "optimism", "big_five", "age_gender")
                if getattr(self, name)
            ]
            if unsupported:
                msg = f"the Spanish lexicon cannot be combined with: {', '.join(unsupported)}"
                raise ValueError(msg)
        if (
            self.min_weight is not None
            and self.max_weight is not None
            and self.min_weight > self.max_weight
        ):
            raise ValueError("min_weight must not exceed max_weight")
        return self

    @property
    def lexicon_ids(self) -> list[str]:
        """Lexica this configuration needs, PERMA first."""
        ids = [self.variant.lexicon_id]
        if self.prospection:
            ids.append("prospection")
        if self.affect:
            ids.append("affect")
        if self.big_five:
            ids.append("bigfive")
        if self.dark_triad:
            ids.append("darktriad")
        if self.age_gender:
            ids.extend(["age", "gender"])
        return ids
