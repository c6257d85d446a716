"""
Core Models Package

Immutable, validated data models shared by the exam engine.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. The scoring engine can never mutate the answers it reads
2. Questions stay read-only once the bank is loaded
3. Results can be handed to report renderers without copying

Answers and scoring rules are closed unions: one dataclass per variant,
so a scorer checks the variant it was given instead of probing a bag of
optional fields.
"""

from .regions import RegionInfo
from .rules import (
    DynamicRule,
    ExactMatchRule,
    KeywordRule,
    OrientationRule,
    ScoringRule,
    ThresholdRule,
)
from .questions import Question, QuestionType
from .answers import (
    Answer,
    AnimalCountAnswer,
    CalculationAnswer,
    ClockDrawingAnswer,
    NumberAnswer,
    NumberSeriesAnswer,
    ShapeAnswer,
    StoryAnswer,
    Stroke,
    TextAnswer,
    WordRecallAnswer,
    answer_from_dict,
    answer_to_dict,
    is_answer_accepted,
)
from .results import Interpretation, ScoreResult

__all__ = [
    "RegionInfo",
    "DynamicRule",
    "ExactMatchRule",
    "KeywordRule",
    "OrientationRule",
    "ScoringRule",
    "ThresholdRule",
    "Question",
    "QuestionType",
    "Answer",
    "AnimalCountAnswer",
    "CalculationAnswer",
    "ClockDrawingAnswer",
    "NumberAnswer",
    "NumberSeriesAnswer",
    "ShapeAnswer",
    "StoryAnswer",
    "Stroke",
    "TextAnswer",
    "WordRecallAnswer",
    "answer_from_dict",
    "answer_to_dict",
    "is_answer_accepted",
    "Interpretation",
    "ScoreResult",
]
