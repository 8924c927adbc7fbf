"""Lexicon registry: reads ``registry.yaml`` from this directory.

The registry is the closed table of lexica the analyser knows about: where
each file lives (relative to the lexicon source), which result family it
feeds, whether its weights are data-driven, and the intercept published
with its calibration.

Public API::

    from ppta.lexica import LexiconSpec, get_lexicon_spec, load_registry
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache
from pathlib import Path
from typing import Any

import yaml

from ppta.errors import UnknownLexiconError

_REGISTRY_PATH = Path(__file__).resolve().parent / "registry.yaml"

FAMILIES = frozenset(
    {"perma", "prospection", "affect", "big_five", "dark_triad", "age", "gender"}
)


@dataclass(frozen=True)
class LexiconSpec:
    id: str
    title: str
    path: str
    family: str
    data_driven: bool = False
    weight_range: tuple[float, float] | None = None
    intercepts: dict[str, float] = field(default_factory=dict)

    @property
    def categories(self) -> list[str]:
        """Categories with a published intercept, in registry order."""
        return list(self.intercepts)

    def intercept(self, category: str) -> float:
        return self.intercepts.get(category, 0.0)


@dataclass(frozen=True)
class Registry:
    version: int
    lexica: dict[str, LexiconSpec]


def _require(raw: dict[str, Any], key: str) -> Any:
    if key not in raw:
        msg = f"{_REGISTRY_PATH.name}: entry missing required key '{key}'"
        raise ValueError(msg)
    return raw[key]


def _parse_spec(raw: dict[str, Any]) -> LexiconSpec:
    lexicon_id = str(_require(raw, "id"))
    family = str(_require(raw, "family"))
    if family not in FAMILIES:
        msg = (
            f"{_REGISTRY_PATH.name}: lexicon '{lexicon_id}' has invalid family"
            f" '{family}' (expected one of {sorted(FAMILIES)})"
        )
        raise ValueError(msg)

    weight_range = None
    raw_range = raw.get("weight_range")
    if raw_range is not None:
        low, high = (float(v) for v in raw_range)
        weight_range = (low, high)

    intercepts = {str(k): float(v) for k, v in (raw.get("intercepts") or {}).items()}
    return LexiconSpec(
        id=lexicon_id,
        title=str(raw.get("title", lexicon_id)),
        path=str(_require(raw, "path")),
        family=family,
        data_driven=bool(raw.get("data_driven", False)),
        weight_range=weight_range,
        intercepts=intercepts,
    )


@cache
def load_registry() -> Registry:
    """Parse the bundled registry once per process."""
    raw = yaml.safe_load(_REGISTRY_PATH.read_text(encoding="utf-8"))
    specs = [_parse_spec(entry) for entry in _require(raw, "lexica")]
    return Registry(
        version=int(raw.get("version", 0)),
        lexica={spec.id: spec for spec in specs},
    )


def get_lexicon_spec(identifier: str) -> LexiconSpec:
    """Return the registry entry for *identifier*."""
    try:
        return load_registry().lexica[identifier]
    except KeyError:
        raise UnknownLexiconError(identifier) from None
