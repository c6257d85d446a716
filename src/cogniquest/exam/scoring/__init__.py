"""Scoring engine, free-text matching and the interpretation band."""

from .engine import ScoringContext, score_exam, score_question
from .interpretation import interpret_score
from .matching import contains_keyword, matches_region_answer

__all__ = [
    "ScoringContext",
    "score_exam",
    "score_question",
    "interpret_score",
    "contains_keyword",
    "matches_region_answer",
]
