"""Lexicon matching, scoring, and summary statistics."""

from ppta.analysis.matcher import MatchStrategy, match_lexicon
from ppta.analysis.metrics import perma_summary, prefix_count, ratio_statement
from ppta.analysis.models import AnalysisResult, FamilyResult, Match, MatchResult
from ppta.analysis.scoring import Encoding, score

__all__ = [
    "AnalysisResult",
    "Encoding",
    "FamilyResult",
    "Match",
    "MatchResult",
    "MatchStrategy",
    "match_lexicon",
    "perma_summary",
    "prefix_count",
    "ratio_statement",
    "score",
]
