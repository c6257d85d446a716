"""
Module: exam.output.summary

Purpose:
    Build the JSON-ready screening report from a scored exam.

Key Functions:
    - format_answer(): Human-readable answer for one question
    - build_report(): Summary dict (score, interpretation, per-question rows)
    - write_report_json(): Write the summary to disk

Key Classes:
    - ReportError: Exception for report failures

Dependencies:
    - json (std)
    - core.models: Questions, answers, ScoreResult

Used By:
    - exam.output.report: PDF rendering
    - cli
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from cogniquest.core.models import (
    AnimalCountAnswer,
    Answer,
    CalculationAnswer,
    ClockDrawingAnswer,
    NumberAnswer,
    NumberSeriesAnswer,
    Question,
    QuestionType,
    ScoreResult,
    ShapeAnswer,
    StoryAnswer,
    TextAnswer,
    WordRecallAnswer,
)

logger = logging.getLogger(__name__)

REPORT_TITLE = "CogniQuest Screening Report"
NO_RESPONSE = "No Response"
NOT_RECORDED = "NR"


class ReportError(Exception):
    """Error building or writing a report."""
    pass


def _or_nr(value: Optional[str]) -> str:
    return value if value else NOT_RECORDED


def _check(flag: bool) -> str:
    return "yes" if flag else "no"


def format_answer(question: Question, answer: Optional[Answer]) -> str:
    """
    Format an answer for the report.

    Blank fields inside a multi-field answer show as "NR"; a missing or
    mismatched answer shows as "No Response".

    Example:
        >>> format_answer(calc_question, CalculationAnswer(spent=23, left=77))
        'Spent: $23, Left: $77'
    """
    if answer is None:
        return NO_RESPONSE

    qtype = question.type
    if qtype is QuestionType.ORIENTATION:
        if isinstance(answer, TextAnswer):
            return answer.text.strip() or NO_RESPONSE
        if isinstance(answer, NumberAnswer):
            return str(answer.value)
    elif qtype is QuestionType.CALCULATION and isinstance(answer, CalculationAnswer):
        return f"Spent: ${answer.spent}, Left: ${answer.left}"
    elif qtype is QuestionType.ANIMAL_LIST and isinstance(answer, AnimalCountAnswer):
        return f"Named {answer.count} animals."
    elif qtype is QuestionType.FIVE_WORD_RECALL and isinstance(answer, WordRecallAnswer):
        words = [w.strip() for w in answer.words if w.strip()]
        return ", ".join(words) if words else NO_RESPONSE
    elif qtype is QuestionType.NUMBER_SERIES_BACKWARDS and isinstance(answer, NumberSeriesAnswer):
        return (
            f"Practice: {_or_nr(answer.series1)}, "
            f"Series 2: {_or_nr(answer.series2)}, "
            f"Series 3: {_or_nr(answer.series3)}"
        )
    elif qtype is QuestionType.CLOCK_DRAWING and isinstance(answer, ClockDrawingAnswer):
        return (
            f"Numbers: {_check(answer.has_correct_numbers)}, "
            f"Time: {_check(answer.has_correct_time)}"
        )
    elif qtype is QuestionType.SHAPE_IDENTIFICATION and isinstance(answer, ShapeAnswer):
        return f"Tapped: {_or_nr(answer.tapped)}, Largest: {_or_nr(answer.largest)}"
    elif qtype is QuestionType.STORY_RECALL and isinstance(answer, StoryAnswer):
        return (
            f"Name: {_or_nr(answer.name)}, Work: {_or_nr(answer.profession)}, "
            f"Returned: {_or_nr(answer.when_returned)}, Region: {_or_nr(answer.region)}"
        )
    return NO_RESPONSE


def build_report(
    questions: Sequence[Question],
    answers: Mapping[int, Answer],
    result: ScoreResult,
    *,
    has_high_school_education: bool,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the screening report.

    Registration is left out of the rows since it takes no answer.

    Args:
        questions: Questions in exam order
        answers: Question id -> answer
        result: Score of the same questions and answers
        has_high_school_education: Education flag the result was scored with
        generated_at: Report timestamp (defaults to now)

    Returns:
        JSON-serializable report dict
    """
    generated_at = generated_at or datetime.now()
    rows = [
        {
            "id": q.id,
            "question": q.headline,
            "type": q.type.value,
            "response": format_answer(q, answers.get(q.id)),
            "points": result.points_for(q.id),
            "max_points": q.max_points,
            "unscored": result.is_unscored(q.id),
        }
        for q in questions
        if q.type is not QuestionType.REGISTRATION
    ]
    return {
        "title": REPORT_TITLE,
        "generated_at": generated_at.isoformat(timespec="seconds"),
        "has_high_school_education": has_high_school_education,
        "score": {
            "total": result.total,
            "max_total": result.max_total,
            "interpretation": result.interpretation.value,
            "interpretation_label": result.interpretation.label,
            "unscored_question_ids": sorted(result.unscored_question_ids),
        },
        "questions": rows,
    }


def write_report_json(report: Dict[str, Any], output_path: Path) -> Path:
    """
    Write a report dict as JSON.

    Raises:
        ReportError: If the file cannot be written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ReportError(f"Failed to write report {output_path}: {e}") from e
    logger.info(f"Wrote report to {output_path}")
    return output_path
