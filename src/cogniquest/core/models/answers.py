"""
Module: answers

Purpose:
    Typed answers - a closed union with one frozen dataclass per input
    modality. Replaces an untyped payload keyed by question id so the
    scoring engine can check the variant it receives.

Key Classes:
    - TextAnswer, NumberAnswer: Orientation entries
    - CalculationAnswer: Money spent / money left
    - AnimalCountAnswer: Slider count of animals named
    - WordRecallAnswer: Recalled word list
    - NumberSeriesAnswer: Three reversed numbers (first is practice)
    - Stroke, ClockDrawingAnswer: Drawing plus self-assessment flags
    - ShapeAnswer: Tapped shape and chosen largest shape
    - StoryAnswer: Four free-text story fields

Key Functions:
    - answer_to_dict() / answer_from_dict(): Tagged serialization
    - is_answer_accepted(): Check a variant against a question type

Dependencies:
    - dataclasses (std)
    - .questions.QuestionType

Used By:
    - exam.controller: Answer map owned by the controller
    - exam.scoring.engine: Read-only scoring input
    - exam.output: Report formatting
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from .questions import QuestionType


@dataclass(frozen=True, slots=True)
class TextAnswer:
    """Free-text entry."""

    kind: ClassVar[str] = "text"
    text: str

    def to_dict(self) -> dict:
        return {"text": self.text}


@dataclass(frozen=True, slots=True)
class NumberAnswer:
    """Numeric entry (e.g. the year typed on a number pad)."""

    kind: ClassVar[str] = "number"
    value: int

    def to_dict(self) -> dict:
        return {"value": self.value}


@dataclass(frozen=True, slots=True)
class CalculationAnswer:
    """Amount spent and amount left in the shopping calculation."""

    kind: ClassVar[str] = "calculation"
    spent: int
    left: int

    def to_dict(self) -> dict:
        return {"spent": self.spent, "left": self.left}


@dataclass(frozen=True, slots=True)
class AnimalCountAnswer:
    """Number of animals named within the time limit."""

    kind: ClassVar[str] = "animal_count"
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"count cannot be negative: {self.count}")

    def to_dict(self) -> dict:
        return {"count": self.count}


@dataclass(frozen=True, slots=True)
class WordRecallAnswer:
    """Words recalled, in entry order. Blank slots are allowed."""

    kind: ClassVar[str] = "word_recall"
    words: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"words": list(self.words)}


@dataclass(frozen=True, slots=True)
class NumberSeriesAnswer:
    """
    Three numbers entered backwards.

    ``series1`` is the practice item and is never scored.
    """

    kind: ClassVar[str] = "number_series"
    series1: str = ""
    series2: str = ""
    series3: str = ""

    def to_dict(self) -> dict:
        return {"series1": self.series1, "series2": self.series2, "series3": self.series3}


@dataclass(frozen=True, slots=True)
class Stroke:
    """
    One continuous pen stroke of a drawing.

    Attributes:
        points: (x, y) points in canvas coordinates
        line_width: Stroke width in canvas units
    """

    points: tuple[tuple[float, float], ...] = ()
    line_width: float = 3.0

    def to_dict(self) -> dict:
        return {"points": [list(p) for p in self.points], "line_width": self.line_width}

    @classmethod
    def from_dict(cls, data: dict) -> Stroke:
        return cls(
            points=tuple((float(x), float(y)) for x, y in data.get("points", [])),
            line_width=float(data.get("line_width", 3.0)),
        )


@dataclass(frozen=True, slots=True)
class ClockDrawingAnswer:
    """
    Clock drawing with the subject's self-assessment.

    The two flags are entered by the subject after comparing the drawing
    with a reference image; nothing is derived from stroke geometry.
    """

    kind: ClassVar[str] = "clock_drawing"
    strokes: tuple[Stroke, ...] = ()
    has_correct_numbers: bool = False
    has_correct_time: bool = False

    def to_dict(self) -> dict:
        return {
            "strokes": [s.to_dict() for s in self.strokes],
            "has_correct_numbers": self.has_correct_numbers,
            "has_correct_time": self.has_correct_time,
        }


@dataclass(frozen=True, slots=True)
class ShapeAnswer:
    """Shape tapped (to place an X) and shape chosen as largest."""

    kind: ClassVar[str] = "shape"
    tapped: Optional[str] = None
    largest: Optional[str] = None

    def to_dict(self) -> dict:
        return {"tapped": self.tapped, "largest": self.largest}


@dataclass(frozen=True, slots=True)
class StoryAnswer:
    """Story recall fields as typed by the subject."""

    kind: ClassVar[str] = "story"
    name: str = ""
    profession: str = ""
    when_returned: str = ""
    region: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "profession": self.profession,
            "when_returned": self.when_returned,
            "region": self.region,
        }


Answer = Union[
    TextAnswer,
    NumberAnswer,
    CalculationAnswer,
    AnimalCountAnswer,
    WordRecallAnswer,
    NumberSeriesAnswer,
    ClockDrawingAnswer,
    ShapeAnswer,
    StoryAnswer,
]

ANSWER_KINDS: Dict[str, type] = {
    cls.kind: cls
    for cls in (
        TextAnswer,
        NumberAnswer,
        CalculationAnswer,
        AnimalCountAnswer,
        WordRecallAnswer,
        NumberSeriesAnswer,
        ClockDrawingAnswer,
        ShapeAnswer,
        StoryAnswer,
    )
}

# Registration primes memory and takes no input
ACCEPTED_ANSWERS: Dict[QuestionType, tuple[type, ...]] = {
    QuestionType.ORIENTATION: (TextAnswer, NumberAnswer),
    QuestionType.REGISTRATION: (),
    QuestionType.CALCULATION: (CalculationAnswer,),
    QuestionType.ANIMAL_LIST: (AnimalCountAnswer,),
    QuestionType.FIVE_WORD_RECALL: (WordRecallAnswer,),
    QuestionType.NUMBER_SERIES_BACKWARDS: (NumberSeriesAnswer,),
    QuestionType.CLOCK_DRAWING: (ClockDrawingAnswer,),
    QuestionType.SHAPE_IDENTIFICATION: (ShapeAnswer,),
    QuestionType.STORY_RECALL: (StoryAnswer,),
}

if set(ACCEPTED_ANSWERS) != set(QuestionType):
    raise RuntimeError("every question type needs an answer entry")


def is_answer_accepted(question_type: QuestionType, answer: Any) -> bool:
    """
    Check whether an answer variant is legal for a question type.

    Args:
        question_type: Type of the question being answered
        answer: Candidate answer

    Returns:
        True if the variant is one the question type accepts
    """
    return isinstance(answer, ACCEPTED_ANSWERS[question_type])


def answer_to_dict(answer: Answer) -> dict:
    """
    Serialize an answer with its ``kind`` tag.

    Example:
        >>> answer_to_dict(CalculationAnswer(spent=23, left=77))
        {'kind': 'calculation', 'spent': 23, 'left': 77}
    """
    return {"kind": answer.kind, **answer.to_dict()}


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def answer_from_dict(data: dict) -> Answer:
    """
    Deserialize a tagged answer dict.

    Raises:
        TypeError: If the entry is not an object
        ValueError: If the kind tag is missing or unknown
    """
    if not isinstance(data, dict):
        raise TypeError(f"Answer must be an object, got {type(data).__name__}")

    kind = data.get("kind")
    cls = ANSWER_KINDS.get(kind)
    if cls is None:
        raise ValueError(f"Unknown answer kind: {kind!r}")

    if cls is TextAnswer:
        return TextAnswer(text=str(data.get("text", "")))
    if cls is NumberAnswer:
        return NumberAnswer(value=int(data["value"]))
    if cls is CalculationAnswer:
        return CalculationAnswer(spent=int(data["spent"]), left=int(data["left"]))
    if cls is AnimalCountAnswer:
        return AnimalCountAnswer(count=int(data["count"]))
    if cls is WordRecallAnswer:
        return WordRecallAnswer(words=tuple(str(w) for w in data.get("words", [])))
    if cls is NumberSeriesAnswer:
        return NumberSeriesAnswer(
            series1=str(data.get("series1", "")),
            series2=str(data.get("series2", "")),
            series3=str(data.get("series3", "")),
        )
    if cls is ClockDrawingAnswer:
        return ClockDrawingAnswer(
            strokes=tuple(Stroke.from_dict(s) for s in data.get("strokes", [])),
            has_correct_numbers=bool(data.get("has_correct_numbers", False)),
            has_correct_time=bool(data.get("has_correct_time", False)),
        )
    if cls is ShapeAnswer:
        return ShapeAnswer(
            tapped=_optional_str(data.get("tapped")),
            largest=_optional_str(data.get("largest")),
        )
    return StoryAnswer(
        name=str(data.get("name", "")),
        profession=str(data.get("profession", "")),
        when_returned=str(data.get("when_returned", "")),
        region=str(data.get("region", "")),
    )
