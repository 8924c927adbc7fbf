"""Exception types raised by the analyser.

Every error is local to a single analysis call.  The CLI catches
``PptaError`` and reports it without a traceback; nothing here is fatal to
the process.
"""

from __future__ import annotations


class PptaError(Exception):
    """Base class for all analyser errors."""


class EmptyInputError(PptaError, ValueError):
    """The input text is empty or whitespace-only."""

    def __init__(self, message: str = "Input text is empty.") -> None:
        super().__init__(message)


class LexiconLoadError(PptaError):
    """A lexicon could not be fetched or parsed."""

    def __init__(self, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Could not load lexicon '{identifier}': {reason}")


class LexiconNotLoadedError(PptaError, LookupError):
    """A lexicon was requested before its load completed."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Lexicon '{identifier}' is not loaded")


class UnknownLexiconError(PptaError, LookupError):
    """The identifier is not in the lexicon registry."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Unknown lexicon '{identifier}'")


class InvalidWordCountError(PptaError, ValueError):
    """A frequency denominator was zero or negative."""
