"""Analysis entry points: text in, counts/scores/word lists out.

``analyze()`` is synchronous and works only on lexica that are already in
the store.  ``run_analysis()`` loads whatever the configuration needs
first, then skips (with a warning) any family whose lexicon failed to load.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence

from ppta.analysis.matcher import MatchStrategy, match_lexicon
from ppta.analysis.metrics import (
    category_counts,
    gender_label,
    matched_words,
    perma_summary,
    prefix_count,
    printable_words,
)
from ppta.analysis.models import AnalysisResult, Demographics, FamilyResult, MatchResult
from ppta.analysis.scoring import Encoding, score
from ppta.errors import EmptyInputError
from ppta.lexica import LexiconSpec, get_lexicon_spec
from ppta.lexica.store import Lexicon, LexiconStore
from ppta.models import AnalysisConfig, NgramMode
from ppta.tokenize import expand_ngrams, normalise_input, tokenize, true_word_count

logger = logging.getLogger(__name__)

Lexica = Mapping[str, Lexicon]


def prepare_text(text: str) -> str:
    """Trim and lower-case *text*, rejecting blank input."""
    normalised = normalise_input(text)
    if not normalised:
        raise EmptyInputError()
    return normalised


def _family_result(
    name: str,
    spec: LexiconSpec,
    matches: MatchResult,
    word_count: int,
    encoding: Encoding,
) -> FamilyResult:
    """Score every category (registry categories first) and build word lists."""
    categories = list(dict.fromkeys([*spec.categories, *matches.categories]))
    scores = {
        category: score(matches.get(category), word_count, spec.intercept(category), encoding)
        for category in categories
    }
    return FamilyResult(
        name=name,
        lexicon_id=spec.id,
        matches=matches,
        counts=category_counts(matches),
        scores=scores,
        printable=printable_words(matches),
    )


def _perma(
    tokens: Sequence[str],
    lexicon: Lexicon,
    spec: LexiconSpec,
    config: AnalysisConfig,
    word_count: int,
) -> FamilyResult:
    min_weight = max_weight = None
    encoding = Encoding.BINARY
    if spec.data_driven:
        low, high = spec.weight_range or (None, None)
        min_weight = config.min_weight if config.min_weight is not None else low
        max_weight = config.max_weight if config.max_weight is not None else high
        encoding = config.encoding

    matches = match_lexicon(
        tokens,
        lexicon,
        min_weight=min_weight,
        max_weight=max_weight,
        data_driven=spec.data_driven,
        strategy=config.strategy,
    )
    family = _family_result("perma", spec, matches, word_count, encoding)
    family.counts["POS_T"] = prefix_count(matches, "POS")
    family.counts["NEG_T"] = prefix_count(matches, "NEG")
    return family


def _optimism(
    prospection: FamilyResult,
    affect_lexicon: Lexicon,
    affect_spec: LexiconSpec,
    word_count: int,
    encoding: Encoding,
) -> FamilyResult:
    """Affect of the future-oriented words only."""
    future_words = matched_words(prospection.matches, "FUTURE")
    matches = match_lexicon(future_words, affect_lexicon)
    return FamilyResult(
        name="optimism",
        lexicon_id=affect_spec.id,
        matches=matches,
        counts=category_counts(matches),
        scores={
            "AFFECT": score(
                matches.get("AFFECT"), word_count, affect_spec.intercept("AFFECT"), encoding,
            ),
        },
        printable=printable_words(matches),
    )


def _demographic_score(
    tokens: Sequence[str],
    lexicon: Lexicon,
    spec: LexiconSpec,
    category: str,
    word_count: int,
    strategy: MatchStrategy,
) -> float | None:
    matches = match_lexicon(tokens, lexicon, strategy=strategy)
    return score(matches.get(category), word_count, spec.intercept(category), Encoding.FREQUENCY)


def analyze(
    text: str,
    config: AnalysisConfig,
    store: LexiconStore,
    *,
    skip: Collection[str] = (),
) -> AnalysisResult:
    """Analyse *text* against the lexica *config* selects.

    Every required lexicon must already be loaded, except identifiers in
    *skip*, whose families are left out of the result.

    Raises:
        EmptyInputError: *text* is blank, or cleaning left nothing to tokenise.
        LexiconNotLoadedError: a required lexicon is not in the store.
    """
    normalised = prepare_text(text)

    # Resolve every lexicon up front so nothing is computed against a
    # missing one.
    lexica: dict[str, Lexicon] = {
        lexicon_id: store.get(lexicon_id)
        for lexicon_id in config.lexicon_ids
        if lexicon_id not in skip
    }

    base_tokens = tokenize(normalised, clean=config.clean_text)
    if not base_tokens:
        raise EmptyInputError("Input text contains nothing to analyse after cleaning.")

    tokens = base_tokens
    if config.ngrams is not NgramMode.NONE:
        if config.strategy is MatchStrategy.BOUNDARY_REGEX:
            logger.debug("Boundary-regex matching ignores n-gram expansion")
        else:
            tokens = expand_ngrams(base_tokens, config.ngrams.max_n)

    word_count = len(tokens) if config.ngrams_in_word_count else len(base_tokens)

    result = AnalysisResult(
        word_count=word_count,
        true_word_count=true_word_count(normalised),
        token_count=len(tokens),
        tokens=list(base_tokens),
        lexicon_variant=config.variant.value,
    )

    perma_id = config.variant.lexicon_id
    if perma_id in lexica:
        result.perma = _perma(tokens, lexica[perma_id], get_lexicon_spec(perma_id), config, word_count)
        result.perma_summary = perma_summary(result.perma.matches, word_count)

    def family(name: str, lexicon_id: str) -> FamilyResult | None:
        if lexicon_id not in lexica:
            return None
        matches = match_lexicon(tokens, lexica[lexicon_id], strategy=config.strategy)
        return _family_result(name, get_lexicon_spec(lexicon_id), matches, word_count, config.encoding)

    if config.prospection:
        result.prospection = family("prospection", "prospection")
    if config.affect:
        result.affect = family("affect", "affect")
    if config.optimism:
        if result.prospection is not None and "affect" in lexica:
            result.optimism = _optimism(
                result.prospection,
                lexica["affect"],
                get_lexicon_spec("affect"),
                word_count,
                config.encoding,
            )
        else:
            result.warnings.append("Optimism skipped: prospection or affect lexicon unavailable.")
    if config.big_five:
        result.big_five = family("big_five", "bigfive")
    if config.dark_triad:
        result.dark_triad = family("dark_triad", "darktriad")

    if config.age_gender and ("age" in lexica or "gender" in lexica):
        age = gender = None
        if "age" in lexica:
            age = _demographic_score(
                tokens, lexica["age"], get_lexicon_spec("age"), "AGE", word_count, config.strategy,
            )
        if "gender" in lexica:
            gender = _demographic_score(
                tokens, lexica["gender"], get_lexicon_spec("gender"), "GENDER", word_count,
                config.strategy,
            )
        result.demographics = Demographics(
            age=round(age, 2) if age is not None else None,
            gender_score=gender,
            gender_label=gender_label(gender),
        )

    logger.info(
        "Analysed %d tokens (%d words) with %s: %s",
        result.token_count,
        result.word_count,
        perma_id,
        ", ".join(f.name for f in result.families) or "no families",
    )
    return result


async def run_analysis(
    text: str,
    config: AnalysisConfig,
    store: LexiconStore,
) -> AnalysisResult:
    """Load the lexica *config* needs, then analyse *text*.

    A lexicon that fails to load skips its family; the failure is reported
    in ``result.warnings`` and the other families still run.
    """
    # Reject blank input before any fetch is issued.
    prepare_text(text)

    failures = await store.load_many(config.lexicon_ids)
    for lexicon_id, error in failures.items():
        logger.warning("Skipping %s analysis: %s", get_lexicon_spec(lexicon_id).family, error)

    result = analyze(text, config, store, skip=set(failures))
    result.warnings[:0] = [str(error) for error in failures.values()]
    return result
