"""
Module: exam.loading.parser

Purpose:
    Turn raw question bank records into Question objects.

Key Functions:
    - parse_question_record(): One record -> Question
    - parse_question_bank(): Whole document -> ordered questions

Key Classes:
    - ParseError: Exception for parse failures

Dependencies:
    - core.models: Question
    - core.schemas.validator: Record checks

Used By:
    - exam.loading.loader
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from cogniquest.core.models import Question
from cogniquest.core.schemas.validator import (
    ValidationError,
    validate_question_bank,
)

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Error parsing a question bank record."""
    pass


def parse_question_record(record: Dict[str, Any]) -> Question:
    """
    Parse one question record.

    Args:
        record: Raw record from the bank's ``questions`` list

    Returns:
        Question instance

    Raises:
        ParseError: If the record cannot be turned into a Question
    """
    try:
        return Question.from_dict(record)
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Invalid question record {record.get('id', '?')!r}: {e}") from e


def parse_question_bank(data: Any, *, strict: bool = False) -> List[Question]:
    """
    Validate and parse a whole question bank document.

    Questions are returned sorted by id, which is the exam order.

    Raises:
        ParseError: If validation or any record fails
    """
    try:
        validate_question_bank(data, strict=strict)
    except ValidationError as e:
        where = f" at {e.path}" if e.path else ""
        raise ParseError(f"Question bank failed validation{where}: {e}") from e

    questions = [parse_question_record(r) for r in data["questions"]]
    questions.sort(key=lambda q: q.id)
    logger.debug(f"Parsed {len(questions)} question records")
    return questions
