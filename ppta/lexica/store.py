"""Process-wide lexicon cache with asynchronous, de-duplicated loading.

Lexicon files live under a *source*: either a local directory or an
http(s) base URL.  Each identifier is fetched at most once; a second
``load()`` while the first is still in flight awaits the same task rather
than issuing another fetch.  A lexicon becomes visible to ``get()`` only
after its file has been fully parsed and normalised, so a failed or
abandoned load never leaves partial data behind.

Two file shapes are accepted and normalised to ``{category: {word: weight}}``:

- flat: ``{"POS_P": {"happy": 0.5, ...}, ...}``
- records: ``{"1": {"term": "happy", "weight": 0.5, "category": "POS_P"}, ...}``
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from ppta.errors import LexiconLoadError, LexiconNotLoadedError
from ppta.lexica import LexiconSpec, get_lexicon_spec

if TYPE_CHECKING:
    from ppta.config import PptaSettings

logger = logging.getLogger(__name__)

Lexicon = Mapping[str, Mapping[str, float]]

_RECORD_KEYS = frozenset({"term", "weight", "category"})


def _is_record_shape(raw: dict[str, Any]) -> bool:
    return bool(raw) and all(
        isinstance(value, dict) and _RECORD_KEYS <= value.keys() for value in raw.values()
    )


def normalize_lexicon(raw: Any, identifier: str) -> dict[str, dict[str, float]]:
    """Convert either supported file shape into ``{category: {word: weight}}``.

    Raises LexiconLoadError when the data matches neither shape.
    """
    if not isinstance(raw, dict):
        raise LexiconLoadError(identifier, f"expected a JSON object, got {type(raw).__name__}")

    lexicon: dict[str, dict[str, float]] = {}
    try:
        if _is_record_shape(raw):
            for record in raw.values():
                category = str(record["category"])
                lexicon.setdefault(category, {})[str(record["term"])] = float(record["weight"])
        else:
            for category, words in raw.items():
                if not isinstance(words, dict):
                    raise LexiconLoadError(
                        identifier, f"category '{category}' is not a word → weight object",
                    )
                lexicon[str(category)] = {str(w): float(v) for w, v in words.items()}
    except (TypeError, ValueError) as exc:
        raise LexiconLoadError(identifier, f"non-numeric weight ({exc})") from exc
    return lexicon


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class LexiconStore:
    """Cache of loaded lexica, shared read-only across analyses."""

    def __init__(
        self,
        source: str | Path = "json",
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.source = str(source)
        self.timeout = timeout
        self._client = client
        self._lexica: dict[str, Lexicon] = {}
        self._inflight: dict[str, asyncio.Task[Lexicon]] = {}

    @classmethod
    def from_settings(cls, settings: PptaSettings) -> LexiconStore:
        return cls(settings.lexicon_source, timeout=settings.lexicon_timeout)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def is_loaded(self, identifier: str) -> bool:
        return identifier in self._lexica

    def get(self, identifier: str) -> Lexicon:
        """Return a loaded lexicon or raise LexiconNotLoadedError."""
        try:
            return self._lexica[identifier]
        except KeyError:
            raise LexiconNotLoadedError(identifier) from None

    @property
    def loaded(self) -> list[str]:
        return sorted(self._lexica)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, identifier: str) -> Lexicon:
        """Load *identifier* if needed and return it.

        Concurrent calls for the same identifier share one fetch.
        """
        if identifier in self._lexica:
            return self._lexica[identifier]

        spec = get_lexicon_spec(identifier)
        task = self._inflight.get(identifier)
        if task is None:
            task = asyncio.ensure_future(self._load(spec))
            self._inflight[identifier] = task
            task.add_done_callback(lambda _t: self._inflight.pop(identifier, None))
        # shield: a cancelled caller must not cancel the load other callers await
        return await asyncio.shield(task)

    async def load_many(self, identifiers: Iterable[str]) -> dict[str, LexiconLoadError]:
        """Load several lexica concurrently.

        Returns the failures keyed by identifier; successes are simply cached.
        """
        wanted = list(dict.fromkeys(identifiers))
        results = await asyncio.gather(
            *(self.load(i) for i in wanted), return_exceptions=True,
        )
        failures: dict[str, LexiconLoadError] = {}
        for identifier, result in zip(wanted, results):
            if isinstance(result, LexiconLoadError):
                failures[identifier] = result
            elif isinstance(result, BaseException):
                raise result
        return failures

    async def _load(self, spec: LexiconSpec) -> Lexicon:
        location = self._location(spec)
        logger.debug("Fetching lexicon %s from %s", spec.id, location)
        try:
            raw = await self._fetch(location)
        except (httpx.HTTPError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Lexicon %s failed to load: %s", spec.id, exc)
            raise LexiconLoadError(spec.id, str(exc)) from exc
        except json.JSONDecodeError as exc:
            logger.warning("Lexicon %s is not valid JSON: %s", spec.id, exc)
            raise LexiconLoadError(spec.id, f"invalid JSON ({exc})") from exc

        try:
            lexicon = normalize_lexicon(raw, spec.id)
        except LexiconLoadError as exc:
            logger.warning("Lexicon %s rejected: %s", spec.id, exc.reason)
            raise

        self._lexica[spec.id] = lexicon
        logger.info(
            "Loaded lexicon %s (%d categories, %d entries)",
            spec.id,
            len(lexicon),
            sum(len(words) for words in lexicon.values()),
        )
        return lexicon

    def _location(self, spec: LexiconSpec) -> str:
        if _is_url(self.source):
            return f"{self.source.rstrip('/')}/{spec.path}"
        return str(Path(self.source) / spec.path)

    async def _fetch(self, location: str) -> Any:
        if not _is_url(location):
            text = await asyncio.to_thread(Path(location).read_text, encoding="utf-8")
            return json.loads(text)

        if self._client is not None:
            resp = await self._client.get(location)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(location)
        resp.raise_for_status()
        return json.loads(resp.text)
