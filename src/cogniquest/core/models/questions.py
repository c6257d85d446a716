"""
Module: questions

Purpose:
    Provides the QuestionType enum and the Question dataclass. A question
    is created once by the loader and is read-only for the rest of the
    exam.

Key Classes:
    - QuestionType: Closed set of question types
    - Question: Immutable question with its scoring rule

Key Functions:
    - Question.to_dict() / Question.from_dict(): Serialization
    - QuestionType.rule_kind: Rule class the scorer for a type reads

Dependencies:
    - dataclasses (std)
    - .rules: Scoring-rule variants

Used By:
    - exam.loading.parser
    - exam.scoring.engine
    - exam.controller
    - exam.output
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .rules import (
    ExactMatchRule,
    KeywordRule,
    OrientationRule,
    ScoringRule,
    ThresholdRule,
    rule_from_criteria,
    rule_to_criteria,
)


class QuestionType(str, Enum):
    """Type of exam question; drives answer variant and scorer."""
    ORIENTATION = "orientation"
    REGISTRATION = "registration"
    CALCULATION = "calculation"
    ANIMAL_LIST = "animal_list"
    FIVE_WORD_RECALL = "five_word_recall"
    NUMBER_SERIES_BACKWARDS = "number_series_backwards"
    CLOCK_DRAWING = "clock_drawing"
    SHAPE_IDENTIFICATION = "shape_identification"
    STORY_RECALL = "story_recall"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> QuestionType:
        """
        Parse a type name, accepting snake_case or camelCase.

        Raises:
            TypeError: If raw is not a string
            ValueError: If the name is not a known question type
        """
        if not isinstance(raw, str):
            raise TypeError(f"type must be a string, got {type(raw).__name__}")
        key = "".join("_" + ch.lower() if ch.isupper() else ch for ch in raw.strip())
        return cls(key)

    @property
    def rule_kind(self) -> Optional[type]:
        """Rule class this type is scored from (None if no rule is read)."""
        return _RULE_KINDS[self]


_RULE_KINDS = {
    QuestionType.ORIENTATION: OrientationRule,
    QuestionType.REGISTRATION: None,
    QuestionType.CALCULATION: ExactMatchRule,
    QuestionType.ANIMAL_LIST: ThresholdRule,
    QuestionType.FIVE_WORD_RECALL: ExactMatchRule,
    QuestionType.NUMBER_SERIES_BACKWARDS: ExactMatchRule,
    QuestionType.CLOCK_DRAWING: None,
    QuestionType.SHAPE_IDENTIFICATION: ExactMatchRule,
    QuestionType.STORY_RECALL: KeywordRule,
}


@dataclass(frozen=True)
class Question:
    """
    Exam question (immutable).

    Attributes:
        id: Unique, stable ordering key
        text: Prompt shown to the subject
        type: Question type
        max_points: Points available (>= 0)
        scoring_rule: Rule descriptor for the type, or None
        narration: Utterances spoken when the question is entered

    Invariants:
        - max_points >= 0
        - scoring_rule, when set, is the kind ``type.rule_kind`` names

    Example:
        >>> q = Question(
        ...     id=6,
        ...     text="Name as many animals as you can in one minute.",
        ...     type=QuestionType.ANIMAL_LIST,
        ...     max_points=3,
        ...     scoring_rule=ThresholdRule((5, 10, 15)),
        ... )
        >>> q.has_narration
        False
    """

    id: int
    text: str
    type: QuestionType
    max_points: int
    scoring_rule: Optional[ScoringRule] = None
    narration: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if self.max_points < 0:
            raise ValueError(f"max_points cannot be negative: {self.max_points}")
        expected = self.type.rule_kind
        if self.scoring_rule is not None and not isinstance(self.scoring_rule, expected or ()):
            raise ValueError(
                f"{self.type} question {self.id} cannot carry "
                f"{type(self.scoring_rule).__name__}"
            )

    @property
    def has_narration(self) -> bool:
        """True if entering this question starts narration."""
        return bool(self.narration)

    @property
    def headline(self) -> str:
        """First line of the prompt, for compact listings."""
        return self.text.split("\n", 1)[0]

    def to_dict(self) -> dict:
        """
        Serialize to the question bank record format.

        Returns:
            Dict representation
        """
        d = {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "max_points": self.max_points,
        }
        criteria = rule_to_criteria(self.scoring_rule)
        if criteria is not None:
            d["scoring_criteria"] = criteria
        if self.narration:
            d["narration"] = list(self.narration)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """
        Deserialize from a question bank record.

        Args:
            data: Dict representation

        Returns:
            Question instance
        """
        question_type = QuestionType.parse(data["type"])
        return cls(
            id=int(data["id"]),
            text=data["text"],
            type=question_type,
            max_points=int(data.get("max_points", data.get("points", 0))),
            scoring_rule=rule_from_criteria(
                question_type.rule_kind,
                data.get("scoring_criteria", data.get("scoringCriteria")),
            ),
            narration=tuple(data.get("narration", [])),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Question({self.id}, type={self.type.value}, points={self.max_points})"
