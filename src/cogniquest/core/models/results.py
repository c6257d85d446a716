"""
Module: results

Purpose:
    Scoring output models. ScoreResult is produced once when the exam
    finishes and is never mutated afterwards.

Key Classes:
    - Interpretation: Three-band reading of a total score
    - ScoreResult: Total, per-question breakdown and unscored ids

Dependencies:
    - dataclasses (std)
    - types.MappingProxyType (std)

Used By:
    - exam.scoring.engine
    - exam.controller
    - exam.output
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Interpretation(str, Enum):
    """Interpretation band for a total score."""
    NORMAL = "normal"
    MILD_IMPAIRMENT_LIKELY = "mild_impairment_likely"
    LIKELY_IMPAIRED = "likely_impaired"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable label for reports."""
        return _LABELS[self]


_LABELS = {
    Interpretation.NORMAL: "Normal Cognition",
    Interpretation.MILD_IMPAIRMENT_LIKELY: "Mild Neurocognitive Disorder Likely",
    Interpretation.LIKELY_IMPAIRED: "Dementia is Likely",
}


@dataclass(frozen=True)
class ScoreResult:
    """
    Result of one scoring pass (immutable).

    Attributes:
        total: Sum of earned points
        per_question: Question id -> earned points (every question listed)
        unscored_question_ids: Ids that could not be evaluated for lack
            of ground truth; they earn 0 but are not wrong answers
        max_total: Sum of max points over all questions
        interpretation: Band for ``total`` given the education flag

    Example:
        >>> result.total
        27
        >>> result.is_unscored(3)
        True
    """

    total: int
    per_question: Mapping[int, int]
    unscored_question_ids: frozenset[int] = frozenset()
    max_total: int = 0
    interpretation: Interpretation = Interpretation.LIKELY_IMPAIRED

    def __post_init__(self) -> None:
        """Freeze the breakdown and check the total."""
        frozen = dict(self.per_question)
        object.__setattr__(self, "per_question", MappingProxyType(frozen))
        object.__setattr__(self, "unscored_question_ids", frozenset(self.unscored_question_ids))
        if self.total != sum(frozen.values()):
            raise ValueError(
                f"total {self.total} does not match breakdown sum {sum(frozen.values())}"
            )

    def points_for(self, question_id: int) -> int:
        """Points earned on a question (0 if not listed)."""
        return self.per_question.get(question_id, 0)

    def is_unscored(self, question_id: int) -> bool:
        """True if the question could not be evaluated."""
        return question_id in self.unscored_question_ids

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON storage."""
        return {
            "total": self.total,
            "max_total": self.max_total,
            "interpretation": self.interpretation.value,
            "per_question": {str(k): v for k, v in sorted(self.per_question.items())},
            "unscored_question_ids": sorted(self.unscored_question_ids),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScoreResult:
        """Deserialize from dictionary."""
        return cls(
            total=int(data["total"]),
            per_question={int(k): int(v) for k, v in data["per_question"].items()},
            unscored_question_ids=frozenset(int(i) for i in data.get("unscored_question_ids", [])),
            max_total=int(data.get("max_total", 0)),
            interpretation=Interpretation(data.get("interpretation", "likely_impaired")),
        )
