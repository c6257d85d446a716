"""
Module: exam.loading.loader

Purpose:
    Load the ordered question list from a JSON question bank.

Key Functions:
    - load_questions(): Load and parse a bank file
    - default_bank_path(): Path of the packaged bank

Key Classes:
    - LoaderError: Exception for loading failures

Dependencies:
    - json (std)
    - importlib.resources (std)
    - exam.loading.parser

Used By:
    - exam.collaborators.JsonQuestionRepository
    - cli
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import List, Optional

from cogniquest.core.models import Question

from .parser import ParseError, parse_question_bank

logger = logging.getLogger(__name__)

DEFAULT_BANK_NAME = "questions.json"


class LoaderError(Exception):
    """Error loading the question bank."""
    pass


def default_bank_path() -> Path:
    """Return the path of the question bank shipped with the package."""
    return Path(str(resources.files("cogniquest.resources").joinpath(DEFAULT_BANK_NAME)))


def load_questions(path: Optional[Path] = None, *, strict: bool = False) -> List[Question]:
    """
    Load all questions from a bank file.

    Process:
    1. Read and decode the JSON document
    2. Validate (basic checks, plus JSON Schema when strict)
    3. Parse records and sort by id

    Args:
        path: Bank file, or None for the packaged bank
        strict: Run full JSON Schema validation

    Returns:
        Questions sorted by id; empty if the bank has no questions

    Raises:
        LoaderError: If the file is missing, unreadable or invalid

    Example:
        >>> questions = load_questions()
        >>> sum(q.max_points for q in questions)
        30
    """
    bank_path = path or default_bank_path()
    if not bank_path.exists():
        raise LoaderError(f"Question bank does not exist: {bank_path}")

    try:
        with open(bank_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"Could not read question bank {bank_path}: {e}") from e

    try:
        questions = parse_question_bank(data, strict=strict)
    except ParseError as e:
        raise LoaderError(f"Could not parse question bank {bank_path}: {e}") from e

    logger.info(f"Loaded {len(questions)} questions from {bank_path}")
    return questions
