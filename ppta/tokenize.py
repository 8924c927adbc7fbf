"""Social-media-aware tokenisation, text cleaning, and n-gram expansion.

The token pattern is adapted from the WWBP "happier fun tokenizer": one
composite regex whose alternatives are tried left to right, so phone
numbers win over plain digits, emoticons over punctuation, and so on.
"""

from __future__ import annotations

import html
import re
from collections.abc import Sequence

# Alternatives in priority order.  Order matters: re tries them left to right.
_PHONE = r"(?:(?:\+?[01][\-\s.]*)?(?:[(]?\d{3}[\-\s.)]*)?\d{3}[\-\s.]*\d{4})"
_EMOTICON = (
    r"(?:[<>]?[:;=8>][\-o*']?[)\](\[dDpPxX/:}{@|\\]"
    r"|[)\](\[dDpPxX/:}{@|\\][\-o*']?[:;=8<][<>]?"
    r"|<3"
    r"|\(?\(?#?\(?\(?#?[>\-^*+o~][_.|oO,][<\-^*+o~][#;]?\)?\)?)"
)
_DOMAIN = (
    r"(?:(?:https?://)?(?:[\w\-]+\.)+"
    r"(?:com|net|gov|edu|info|org|ly|be|gl|co|gs|pr|me|cc|us|gd|nl|ws|am|im|fm|kr|to|jp|sg))"
)
_SCHEME = r"(?:https?://)"
_BRACKET_TAG = r"(?:\[[a-z_]+\])"
_URL_QUERY = r"(?:/\w+\?(?:;?\w+=\w+)+)"
_HTML_TAG = r"<[^>]+>"
_MENTION = r"(?:@\w+)"
_HASHTAG = r"(?:#+\w+[\w'\-]*\w+)"
_COMPOUND_WORD = r"(?:[a-z][a-z'\-_]+[a-z])"
_NUMBER = r"(?:[+\-]?\d+[,/.:-]\d+[+\-]?)"
_WORD = r"(?:\w+)"
_ELLIPSIS = r"(?:\.(?:\s*\.)+)"
_OTHER = r"(?:\S)"

TOKEN_PATTERN = re.compile(
    "|".join(
        (
            _PHONE,
            _EMOTICON,
            _DOMAIN,
            _SCHEME,
            _BRACKET_TAG,
            _URL_QUERY,
            _HTML_TAG,
            _MENTION,
            _HASHTAG,
            _COMPOUND_WORD,
            _NUMBER,
            _WORD,
            _ELLIPSIS,
            _OTHER,
        )
    ),
    re.IGNORECASE,
)

# Typographic punctuation → ASCII.  Applied before non-ASCII stripping so
# that curly apostrophes survive as "'".
_SMART_PUNCTUATION = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
        "–": "-",
        "—": "-",
        "…": "...",
    }
)

_UNICODE_SPACE = re.compile(r"\s")
_NON_ASCII = re.compile(r"[^\x00-\x7F]")
_MULTI_SPACE = re.compile(r"\s\s+")


def normalise_input(text: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return text.strip().lower()


def clean_text(text: str) -> str:
    """Decode HTML entities and fold typographic punctuation to ASCII.

    Unicode spaces (``&nbsp;`` and friends) become plain spaces, remaining
    non-ASCII characters are removed, and runs of whitespace collapse to a
    single space.
    """
    text = html.unescape(text)
    text = text.translate(_SMART_PUNCTUATION)
    text = _UNICODE_SPACE.sub(" ", text)
    text = _NON_ASCII.sub("", text)
    return _MULTI_SPACE.sub(" ", text)


def tokenize(text: str, *, clean: bool = True) -> list[str]:
    """Split *text* into tokens.

    The caller is expected to pass trimmed, lower-cased text (see
    :func:`normalise_input`) and to reject empty input first; an empty
    string simply yields an empty list.
    """
    if clean:
        text = clean_text(text)
    return TOKEN_PATTERN.findall(text)


def true_word_count(text: str) -> int:
    """Number of whitespace-separated words, independent of tokenisation."""
    return len(text.split())


def ngrams(tokens: Sequence[str], n: int) -> list[str]:
    """Space-joined runs of *n* consecutive tokens.

    Yields ``max(0, len(tokens) - n + 1)`` items.
    """
    if n < 1:
        raise ValueError(f"n-gram size must be positive, got {n}")
    return [" ".join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def expand_ngrams(tokens: Sequence[str], max_n: int) -> list[str]:
    """Return *tokens* followed by every n-gram for 2 <= n <= *max_n*."""
    expanded = list(tokens)
    for n in range(2, max_n + 1):
        expanded.extend(ngrams(tokens, n))
    return expanded
