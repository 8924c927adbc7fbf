"""Shared test fixtures: toy lexica written to disk and a store over them."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from ppta.lexica.store import LexiconStore

TOY_LEXICA: dict[str, dict[str, dict[str, float]]] = {
    "perma/permaV3_dd.json": {
        "POS_P": {"happy": 0.5, "joy": 0.9, "love": 0.3},
        "POS_E": {"love": 1.5, "absorbed": 0.2},
        "POS_R": {"friends": 2.0, "family": 0.4},
        "POS_M": {"purpose": 0.6},
        "POS_A": {"achieved": 0.7},
        "NEG_P": {"sad": -0.3, "awful": -0.5},
        "NEG_E": {"bored": -0.2},
        "NEG_R": {"lonely": -0.35},
        "NEG_M": {"pointless": -0.1},
        "NEG_A": {"failed": -0.25},
    },
    "perma/permaV3_manual.json": {
        "POS_P": {"happy": 1, "joy": 1},
        "POS_R": {"friends": 1},
        "NEG_P": {"sad": 1},
    },
    "perma/permaV3_manual_tsp75.json": {
        "POS_P": {"happy": 1},
        "NEG_P": {"sad": 1},
    },
    "perma/dd_spermaV3.json": {
        "POS_P": {"feliz": 1.2, "alegre": 3.0},
        "NEG_P": {"triste": -0.5},
    },
    "prospection/prospection.json": {
        "PAST": {"yesterday": 0.4, "was": 0.1},
        "PRESENT": {"today": 0.3, "now": 0.2},
        "FUTURE": {"tomorrow": 0.5, "will": 0.25, "hope": 0.3},
    },
    "affect/affect.json": {
        "AFFECT": {"happy": 1.1, "hope": 0.8, "sad": -1.2},
        "INTENSITY": {"happy": 0.6, "hope": 0.4, "sad": 0.9},
    },
    "bigfive/bigfive.json": {
        "O": {"art": 0.3},
        "C": {"plan": 0.4},
        "E": {"party": 0.5},
        "A": {"kind": 0.2},
        "N": {"worry": 0.6},
    },
    "dark/darktriad.json": {
        "darktriad": {"hate": 0.2},
        "machiavellianism": {"use": 0.1},
        "narcissism": {"me": 0.05},
        "psychopathy": {"kill": 0.3},
    },
    "age/age.json": {"AGE": {"lol": -5.0, "grandchildren": 40.0}},
    "gender/gender.json": {"GENDER": {"love": 0.8, "dude": -1.6}},
}


def write_lexica(root: Path, lexica: dict[str, object] = TOY_LEXICA) -> Path:
    """Write lexicon files under *root* at their registry paths."""
    for relative, data in lexica.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
    return root


@pytest.fixture
def lexicon_dir(tmp_path: Path) -> Path:
    """A directory holding every toy lexicon."""
    return write_lexica(tmp_path / "json")


@pytest.fixture
def empty_store(lexicon_dir: Path) -> LexiconStore:
    """A store pointed at the toy lexica with nothing loaded yet."""
    return LexiconStore(lexicon_dir)


@pytest.fixture
def loaded_store(lexicon_dir: Path) -> LexiconStore:
    """A store with every toy lexicon already loaded."""
    store = LexiconStore(lexicon_dir)
    failures = asyncio.run(store.load_many(
        ["perma_dd", "perma_manual", "perma_manual_tsp75", "perma_spanish", "prospection",
         "affect", "bigfive", "darktriad", "age", "gender"],
    ))
    assert failures == {}
    return store


@pytest.fixture
def toy_lexica() -> dict[str, dict[str, dict[str, float]]]:
    """The toy lexicon data, keyed by registry path."""
    return TOY_LEXICA
