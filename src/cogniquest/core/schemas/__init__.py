"""
Schemas Package

JSON schema definitions and validation utilities for the question bank.
"""

from .validator import (
    QUESTION_BANK_SCHEMA_VERSION,
    ValidationError,
    validate_question_bank,
    validate_question_record,
)

__all__ = [
    "QUESTION_BANK_SCHEMA_VERSION",
    "ValidationError",
    "validate_question_bank",
    "validate_question_record",
]
