"""Question bank loading: JSON parsing and validation."""

from .loader import LoaderError, default_bank_path, load_questions
from .parser import ParseError, parse_question_bank, parse_question_record

__all__ = [
    "LoaderError",
    "default_bank_path",
    "load_questions",
    "ParseError",
    "parse_question_bank",
    "parse_question_record",
]
