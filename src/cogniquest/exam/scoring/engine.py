"""
Module: exam.scoring.engine

Purpose:
    Pure scoring of a finished exam. Turns the answer map into a total,
    a per-question breakdown and the set of questions that could not be
    evaluated.

    Nothing here reads the clock or resolves a region: today's date and
    the resolved region are arguments, so identical inputs always give
    an identical ScoreResult.

Key Functions:
    - score_exam(): Score every question in order
    - score_question(): Score one question (points, unscored flag)

Dependencies:
    - core.models: Questions, answers, rules, results
    - exam.scoring.matching: Story recall comparisons
    - exam.scoring.interpretation: Interpretation band

Used By:
    - exam.controller: Scores once when the exam finishes
    - cli: Scores a saved answers file

Notes:
    A missing answer, an answer of the wrong variant, a missing rule or
    a rule too short for a sub-check all earn 0 for the affected part.
    None of these raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from cogniquest.common.thresholds import INTERPRETATION_THRESHOLDS, InterpretationThresholds
from cogniquest.core.models import (
    AnimalCountAnswer,
    Answer,
    CalculationAnswer,
    ClockDrawingAnswer,
    DynamicRule,
    ExactMatchRule,
    KeywordRule,
    NumberAnswer,
    NumberSeriesAnswer,
    OrientationRule,
    Question,
    QuestionType,
    RegionInfo,
    ScoreResult,
    ShapeAnswer,
    StoryAnswer,
    TextAnswer,
    ThresholdRule,
    WordRecallAnswer,
)
from cogniquest.core.utils.text import normalize

from .interpretation import interpret_score
from .matching import contains_keyword, matches_region_answer

logger = logging.getLogger(__name__)

# Locale-independent so scoring does not depend on the host settings
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Accepted in the "when did she return to work" field besides the keyword
TEEN_FRAGMENT = "teen"


@dataclass(frozen=True)
class ScoringContext:
    """Inputs evaluated at scoring time."""

    today: date
    region: Optional[RegionInfo] = None


Scorer = Callable[[Question, Answer, ScoringContext], int]


# ─────────────────────────────────────────────────────────────────────────────
# Answer helpers
# ─────────────────────────────────────────────────────────────────────────────

def _answer_text(answer: Answer) -> Optional[str]:
    if isinstance(answer, TextAnswer):
        return normalize(answer.text)
    if isinstance(answer, NumberAnswer):
        return str(answer.value)
    return None


def _answer_number(answer: Answer) -> Optional[int]:
    if isinstance(answer, NumberAnswer):
        return answer.value
    if isinstance(answer, TextAnswer):
        try:
            return int(answer.text.strip())
        except ValueError:
            return None
    return None


def _same_text(actual: Optional[str], expected: Optional[str]) -> bool:
    if actual is None or expected is None:
        return False
    return normalize(actual) == normalize(expected)


# ─────────────────────────────────────────────────────────────────────────────
# Per-type scorers
# ─────────────────────────────────────────────────────────────────────────────

def _score_orientation(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(rule, OrientationRule) or rule.dynamic_rule is None:
        return 0

    if rule.dynamic_rule is DynamicRule.CURRENT_DAY:
        value = _answer_text(answer)
        weekday = WEEKDAY_NAMES[ctx.today.weekday()]
        return 1 if value in (weekday, weekday[:3]) else 0

    if rule.dynamic_rule is DynamicRule.CURRENT_YEAR:
        year = _answer_number(answer)
        return 1 if year in (ctx.today.year, ctx.today.year % 100) else 0

    if rule.dynamic_rule is DynamicRule.NON_EMPTY:
        return 1 if isinstance(answer, TextAnswer) and answer.text.strip() else 0

    if rule.dynamic_rule is DynamicRule.MATCHES_REGION:
        value = _answer_text(answer)
        return 1 if ctx.region is not None and value and ctx.region.matches(value) else 0

    return 0


def _score_registration(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    return 0


def _score_calculation(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(answer, CalculationAnswer) or not isinstance(rule, ExactMatchRule):
        return 0
    points = 0
    if rule.at(0) == str(answer.spent):
        points += 1
    if rule.at(1) == str(answer.left):
        points += 2
    return points


def _score_animal_list(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(answer, AnimalCountAnswer) or not isinstance(rule, ThresholdRule):
        return 0
    if len(rule.thresholds) < 3:
        return 0
    low, mid, high = rule.thresholds[:3]
    if answer.count >= high:
        return 3
    if answer.count >= mid:
        return 2
    if answer.count >= low:
        return 1
    return 0


def _score_five_word_recall(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(answer, WordRecallAnswer) or not isinstance(rule, ExactMatchRule):
        return 0
    targets = {normalize(v) for v in rule.values} - {""}
    # Repeated correct words each count
    return sum(1 for word in answer.words if normalize(word) in targets)


def _score_number_series(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(answer, NumberSeriesAnswer) or not isinstance(rule, ExactMatchRule):
        return 0
    points = 0
    if rule.at(0) is not None and answer.series2 == rule.at(0):
        points += 1
    if rule.at(1) is not None and answer.series3 == rule.at(1):
        points += 1
    return points


def _score_clock_drawing(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    if not isinstance(answer, ClockDrawingAnswer):
        return 0
    points = 0
    if answer.has_correct_numbers:
        points += 2
    if answer.has_correct_time:
        points += 2
    return points


def _score_shape_identification(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(answer, ShapeAnswer) or not isinstance(rule, ExactMatchRule):
        return 0
    points = 0
    if _same_text(answer.tapped, rule.at(0)):
        points += 1
    if _same_text(answer.largest, rule.at(1)):
        points += 1
    return points


def _score_story_recall(question: Question, answer: Answer, ctx: ScoringContext) -> int:
    rule = question.scoring_rule
    if not isinstance(answer, StoryAnswer) or not isinstance(rule, KeywordRule):
        return 0

    name_kw, profession_kw, when_kw, region_kw = (rule.at(i) for i in range(4))
    points = 0
    if name_kw is not None and contains_keyword(answer.name, name_kw):
        points += 2
    if profession_kw is not None and contains_keyword(answer.profession, profession_kw):
        points += 2
    if when_kw is not None and (
        contains_keyword(answer.when_returned, when_kw)
        or contains_keyword(answer.when_returned, TEEN_FRAGMENT)
    ):
        points += 2
    if region_kw is not None and matches_region_answer(answer.region, region_kw):
        points += 2
    return points


_SCORERS: Dict[QuestionType, Scorer] = {
    QuestionType.ORIENTATION: _score_orientation,
    QuestionType.REGISTRATION: _score_registration,
    QuestionType.CALCULATION: _score_calculation,
    QuestionType.ANIMAL_LIST: _score_animal_list,
    QuestionType.FIVE_WORD_RECALL: _score_five_word_recall,
    QuestionType.NUMBER_SERIES_BACKWARDS: _score_number_series,
    QuestionType.CLOCK_DRAWING: _score_clock_drawing,
    QuestionType.SHAPE_IDENTIFICATION: _score_shape_identification,
    QuestionType.STORY_RECALL: _score_story_recall,
}

if set(_SCORERS) != set(QuestionType):
    raise RuntimeError("every question type needs a scorer")


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def _needs_region(question: Question) -> bool:
    rule = question.scoring_rule
    return (
        question.type is QuestionType.ORIENTATION
        and isinstance(rule, OrientationRule)
        and rule.dynamic_rule is DynamicRule.MATCHES_REGION
    )


def score_question(
    question: Question,
    answer: Optional[Answer],
    ctx: ScoringContext,
) -> Tuple[int, bool]:
    """
    Score one question.

    Args:
        question: Question to score
        answer: Answer given, or None
        ctx: Date and region for dynamic rules

    Returns:
        Tuple of (points earned, unscored flag). The flag is only set for
        an answered region question when no region was resolved.
    """
    if answer is None:
        return 0, False
    if _needs_region(question) and ctx.region is None:
        return 0, True
    return _SCORERS[question.type](question, answer, ctx), False


def score_exam(
    answers: Mapping[int, Answer],
    questions: Sequence[Question],
    *,
    has_high_school_education: bool,
    region: Optional[RegionInfo],
    today: date,
    thresholds: InterpretationThresholds = INTERPRETATION_THRESHOLDS,
) -> ScoreResult:
    """
    Score a finished exam.

    Every question appears in the breakdown, answered or not. The
    answers map is only read.

    Args:
        answers: Question id -> answer
        questions: Questions in exam order
        has_high_school_education: Selects the interpretation cut lines
        region: Resolved region, or None if resolution failed
        today: Date the day and year questions are checked against
        thresholds: Interpretation cut lines

    Returns:
        ScoreResult with total, breakdown, unscored ids, max total and
        interpretation

    Example:
        >>> result = score_exam(
        ...     {6: AnimalCountAnswer(count=12)},
        ...     [animal_question],
        ...     has_high_school_education=True,
        ...     region=None,
        ...     today=date(2024, 3, 4),
        ... )
        >>> result.total
        2
    """
    ctx = ScoringContext(today=today, region=region)
    per_question: Dict[int, int] = {}
    unscored = set()

    for question in questions:
        points, is_unscored = score_question(question, answers.get(question.id), ctx)
        per_question[question.id] = points
        if is_unscored:
            unscored.add(question.id)

    total = sum(per_question.values())
    max_total = sum(q.max_points for q in questions)
    logger.debug(f"Scored {len(questions)} questions: {total}/{max_total}, unscored={sorted(unscored)}")

    return ScoreResult(
        total=total,
        per_question=per_question,
        unscored_question_ids=frozenset(unscored),
        max_total=max_total,
        interpretation=interpret_score(total, has_high_school_education, thresholds),
    )
