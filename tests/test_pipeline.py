"""Tests for ppta.pipeline: end-to-end analysis over the toy lexica."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ppta.analysis.matcher import MatchStrategy
from ppta.analysis.metrics import ALL_POSITIVE
from ppta.analysis.scoring import Encoding
from ppta.errors import EmptyInputError, LexiconNotLoadedError
from ppta.lexica.store import LexiconStore
from ppta.models import AnalysisConfig, NgramMode, PermaVariant
from ppta.pipeline import analyze, prepare_text, run_analysis

SENTENCE = "i love my job and my friends"

# Wide enough to keep every toy weight
WIDE = {"min_weight": -10.0, "max_weight": 10.0}


# ---------------------------------------------------------------------------
# prepare_text
# ---------------------------------------------------------------------------


class TestPrepareText:
    def test_lowercases_and_trims(self) -> None:
        assert prepare_text("  I Love It \n") == "i love it"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank(self, text: str) -> None:
        with pytest.raises(EmptyInputError):
            prepare_text(text)


# ---------------------------------------------------------------------------
# PERMA
# ---------------------------------------------------------------------------


class TestPerma:
    def test_sentence_counts(self, loaded_store: LexiconStore) -> None:
        result = analyze(SENTENCE, AnalysisConfig(**WIDE), loaded_store)

        assert result.word_count == 7
        assert result.true_word_count == 7
        assert result.tokens == SENTENCE.split()
        perma = result.perma
        assert perma is not None
        assert perma.counts["POS_E"] == 1
        assert perma.counts["POS_R"] == 1
        assert perma.counts["POS_P"] == 1
        assert perma.counts["POS_T"] == 2  # "love" sits in two categories
        assert perma.counts["NEG_T"] == 0

        summary = result.perma_summary
        assert summary is not None
        assert summary.total == 2
        assert summary.neutral == 5
        assert summary.ratio_statement == ALL_POSITIVE

    def test_nbsp_separated_words_still_match(self, loaded_store: LexiconStore) -> None:
        text = "i&nbsp;love my job and my&nbsp;friends"
        result = analyze(text, AnalysisConfig(**WIDE), loaded_store)
        assert result.word_count == 7
        assert result.perma.counts["POS_T"] == 2

    def test_binary_scores_include_empty_categories(self, loaded_store: LexiconStore) -> None:
        result = analyze(SENTENCE, AnalysisConfig(**WIDE), loaded_store)
        scores = result.perma.scores
        assert scores["POS_E"] == pytest.approx(1.5)
        assert scores["POS_R"] == pytest.approx(2.0)
        assert scores["POS_M"] == pytest.approx(0.0)
        assert scores["NEG_A"] == pytest.approx(0.0)

    def test_default_thresholds_filter_outliers(self, loaded_store: LexiconStore) -> None:
        result = analyze(SENTENCE, AnalysisConfig(), loaded_store)
        perma = result.perma
        # love@1.5 and friends@2.0 fall outside the published range
        assert perma.counts["POS_E"] == 0
        assert perma.counts["POS_R"] == 0
        assert perma.counts["POS_P"] == 1
        assert perma.counts["POS_T"] == 1

    def test_frequency_encoding(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(encoding=Encoding.FREQUENCY, **WIDE)
        result = analyze("joy joy and sadness", config, loaded_store)
        assert result.perma.scores["POS_P"] == pytest.approx(2 / 4 * 0.9)

    def test_manual_variant_ignores_thresholds_and_encoding(
        self, loaded_store: LexiconStore,
    ) -> None:
        config = AnalysisConfig(
            variant=PermaVariant.MANUAL,
            encoding=Encoding.FREQUENCY,
            min_weight=5.0,
            max_weight=6.0,
        )
        result = analyze("happy happy friends", config, loaded_store)
        assert result.perma.lexicon_id == "perma_manual"
        assert result.perma.counts["POS_P"] == 2
        assert result.perma.counts["POS_T"] == 3
        assert result.perma.scores["POS_P"] == pytest.approx(1.0)

    def test_spanish_variant_uses_intercepts(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(variant=PermaVariant.SPANISH)
        result = analyze("estoy feliz y alegre", config, loaded_store)
        assert result.lexicon_variant == "spanish"
        assert result.perma.scores["POS_P"] == pytest.approx(1.2 + 3.0 + 2.675173871)
        assert result.perma.scores["NEG_P"] == pytest.approx(2.50468297)

    def test_printable_repeats(self, loaded_store: LexiconStore) -> None:
        result = analyze("joy joy joy", AnalysisConfig(**WIDE), loaded_store)
        assert result.perma.printable["POS_P"] == ["joy[3]"]


# ---------------------------------------------------------------------------
# Other families
# ---------------------------------------------------------------------------


class TestExtraFamilies:
    def test_only_selected_families(self, loaded_store: LexiconStore) -> None:
        result = analyze(SENTENCE, AnalysisConfig(), loaded_store)
        assert [f.name for f in result.families] == ["perma"]
        assert result.demographics is None

    def test_prospection_and_affect(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(prospection=True, affect=True)
        result = analyze("today i am happy", config, loaded_store)
        assert result.prospection.counts["PRESENT"] == 1
        assert result.prospection.scores["PRESENT"] == pytest.approx(0.3 + 0.236749577324)
        assert result.prospection.scores["FUTURE"] == pytest.approx(-0.570547567181)
        assert result.affect.scores["AFFECT"] == pytest.approx(1.1 + 5.037104721)
        assert result.affect.scores["INTENSITY"] == pytest.approx(0.6 + 2.399762631)

    def test_optimism_scores_future_words_only(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(prospection=True, affect=True, optimism=True)
        result = analyze("tomorrow i hope to be happy", config, loaded_store)

        optimism = result.optimism
        assert optimism is not None
        # "happy" is not future-oriented, so only "hope" carries affect
        assert [m.word for m in optimism.matches["AFFECT"]] == ["hope"]
        assert optimism.scores["AFFECT"] == pytest.approx(0.8 + 5.037104721)
        assert [f.name for f in result.families] == ["perma", "prospection", "affect", "optimism"]

    def test_big_five_and_dark_triad(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(big_five=True, dark_triad=True)
        result = analyze("i plan a party", config, loaded_store)
        assert result.big_five.scores["C"] == pytest.approx(0.4)
        assert result.big_five.scores["E"] == pytest.approx(0.5)
        assert result.big_five.scores["N"] == pytest.approx(0.0)
        assert result.dark_triad.scores["darktriad"] == pytest.approx(0.632024388686)

    def test_demographics_use_frequency_encoding(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(age_gender=True, encoding=Encoding.BINARY)
        result = analyze("lol lol dude love", config, loaded_store)

        demo = result.demographics
        assert demo is not None
        assert demo.age == 20.72
        assert demo.gender_score == pytest.approx(-1.6 / 4 + 0.8 / 4 - 0.06724152)
        assert demo.gender_label == "Male"

    def test_demographics_without_matches(self, loaded_store: LexiconStore) -> None:
        result = analyze("nothing relevant", AnalysisConfig(age_gender=True), loaded_store)
        assert result.demographics.age == 23.22
        assert result.demographics.gender_label == "Male"  # negative intercept


# ---------------------------------------------------------------------------
# Tokens, n-grams, strategies
# ---------------------------------------------------------------------------


class TestTokenOptions:
    def test_bigrams_not_in_word_count_by_default(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(ngrams=NgramMode.BIGRAMS)
        result = analyze("i love my job", config, loaded_store)
        assert result.token_count == 7
        assert result.word_count == 4
        assert result.tokens == ["i", "love", "my", "job"]

    def test_ngrams_in_word_count(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(ngrams=NgramMode.TRIGRAMS, ngrams_in_word_count=True)
        result = analyze("i love my job", config, loaded_store)
        assert result.token_count == 4 + 3 + 2
        assert result.word_count == 9

    def test_boundary_regex_skips_ngram_expansion(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(ngrams=NgramMode.BIGRAMS, strategy=MatchStrategy.BOUNDARY_REGEX)
        result = analyze("i love my job", config, loaded_store)
        assert result.token_count == 4

    def test_boundary_regex_matches_like_exact_for_single_words(
        self, loaded_store: LexiconStore,
    ) -> None:
        exact = analyze(SENTENCE, AnalysisConfig(**WIDE), loaded_store)
        regex = analyze(
            SENTENCE,
            AnalysisConfig(strategy=MatchStrategy.BOUNDARY_REGEX, **WIDE),
            loaded_store,
        )
        assert regex.perma.counts == exact.perma.counts

    def test_deterministic(self, loaded_store: LexiconStore) -> None:
        config = AnalysisConfig(prospection=True, affect=True, optimism=True, age_gender=True)
        text = "Tomorrow I hope to be happy with friends, lol!"
        assert analyze(text, config, loaded_store) == analyze(text, config, loaded_store)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.parametrize("text", ["", "    ", "\n"])
    def test_blank_input(self, loaded_store: LexiconStore, text: str) -> None:
        with pytest.raises(EmptyInputError):
            analyze(text, AnalysisConfig(), loaded_store)

    def test_nothing_left_after_cleaning(self, loaded_store: LexiconStore) -> None:
        with pytest.raises(EmptyInputError):
            analyze("☃☃ ☃", AnalysisConfig(), loaded_store)

    def test_lexicon_not_loaded(self, empty_store: LexiconStore) -> None:
        with pytest.raises(LexiconNotLoadedError) as exc_info:
            analyze(SENTENCE, AnalysisConfig(), empty_store)
        assert exc_info.value.identifier == "perma_dd"

    def test_missing_extra_lexicon_computes_nothing(self, loaded_store: LexiconStore) -> None:
        store = LexiconStore("unused")
        store._lexica["perma_dd"] = loaded_store.get("perma_dd")
        with pytest.raises(LexiconNotLoadedError):
            analyze(SENTENCE, AnalysisConfig(affect=True), store)


# ---------------------------------------------------------------------------
# run_analysis
# ---------------------------------------------------------------------------


class TestRunAnalysis:
    @pytest.mark.asyncio
    async def test_loads_what_it_needs(self, empty_store: LexiconStore) -> None:
        config = AnalysisConfig(dark_triad=True, **WIDE)
        result = await run_analysis(SENTENCE, config, empty_store)
        assert sorted(empty_store.loaded) == ["darktriad", "perma_dd"]
        assert result.perma.counts["POS_T"] == 2
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_blank_input_fetches_nothing(self, empty_store: LexiconStore) -> None:
        with pytest.raises(EmptyInputError):
            await run_analysis("   ", AnalysisConfig(), empty_store)
        assert empty_store.loaded == []

    @pytest.mark.asyncio
    async def test_failed_lexicon_skips_its_family(self, lexicon_dir: Path) -> None:
        (lexicon_dir / "affect" / "affect.json").unlink()
        store = LexiconStore(lexicon_dir)
        config = AnalysisConfig(prospection=True, affect=True, optimism=True)

        result = await run_analysis("tomorrow i hope to be happy", config, store)

        assert result.perma is not None
        assert result.prospection is not None
        assert result.affect is None
        assert result.optimism is None
        assert "Could not load lexicon 'affect'" in result.warnings[0]
        assert result.warnings[1].startswith("Optimism skipped")

    @pytest.mark.asyncio
    async def test_two_category_lexicon(self, tmp_path: Path) -> None:
        """love/friends toy lexicon, zero intercepts, binary scores."""
        path = tmp_path / "perma" / "permaV3_manual.json"
        path.parent.mkdir(parents=True)
        path.write_text(
            json.dumps({"POS_E": {"love": 1.5}, "POS_R": {"friends": 2.0}}), encoding="utf-8",
        )
        config = AnalysisConfig(variant=PermaVariant.MANUAL)

        result = await run_analysis(SENTENCE, config, LexiconStore(tmp_path))

        assert result.word_count == 7
        assert result.perma.scores["POS_E"] == pytest.approx(1.5)
        assert result.perma.scores["POS_R"] == pytest.approx(2.0)
        assert result.perma.scores["POS_P"] is None  # category absent from the file
        assert result.perma.counts["POS_T"] == 2
        assert result.perma.counts["NEG_T"] == 0
        assert result.perma_summary.ratio_statement == ALL_POSITIVE
