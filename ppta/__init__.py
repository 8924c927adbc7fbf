"""Positive Psychology Text Analyser: lexicon-based scoring of free-form text."""

__version__ = "0.4.0"
