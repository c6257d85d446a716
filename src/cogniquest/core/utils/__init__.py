"""Shared utilities: text normalization and answer serialization."""

from .serialization import (
    deserialize_answers,
    load_answers_json,
    save_answers_json,
    serialize_answers,
)
from .text import condense, normalize, tokenize

__all__ = [
    "deserialize_answers",
    "load_answers_json",
    "save_answers_json",
    "serialize_answers",
    "condense",
    "normalize",
    "tokenize",
]
