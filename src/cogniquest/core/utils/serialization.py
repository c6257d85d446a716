"""
Serialization Utilities

JSON helpers for answer maps, so a finished session can be saved and
scored again later (e.g. by the CLI).

Answers file layout::

    {
      "schema_version": 1,
      "answers": {
        "1": {"kind": "text", "text": "Monday"},
        "5": {"kind": "calculation", "spent": 23, "left": 77}
      }
    }

Keys are question ids as strings (JSON object keys); each value is a
tagged answer as produced by ``answer_to_dict``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from ..models.answers import Answer, answer_from_dict, answer_to_dict
from ..schemas.validator import ValidationError

ANSWERS_SCHEMA_VERSION = 1


# ─────────────────────────────────────────────────────────────────────────────
# Answer Map Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_answers(answers: Mapping[int, Answer]) -> dict[str, Any]:
    """
    Serialize an answer map to a JSON-ready dict.

    Args:
        answers: Question id -> answer

    Returns:
        Dictionary in the answers file layout
    """
    return {
        "schema_version": ANSWERS_SCHEMA_VERSION,
        "answers": {str(qid): answer_to_dict(a) for qid, a in sorted(answers.items())},
    }


def deserialize_answers(data: dict[str, Any]) -> Dict[int, Answer]:
    """
    Deserialize an answer map.

    Raises:
        ValidationError: If the layout, a key or an answer is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("answers"), dict):
        raise ValidationError("Answers file must contain an 'answers' object", path="answers")

    version = data.get("schema_version", ANSWERS_SCHEMA_VERSION)
    if version != ANSWERS_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported answers schema version: {version} (expected {ANSWERS_SCHEMA_VERSION})",
            path="schema_version",
        )

    answers: Dict[int, Answer] = {}
    for key, raw in data["answers"].items():
        try:
            answers[int(key)] = answer_from_dict(raw)
        except (TypeError, ValueError, KeyError) as e:
            raise ValidationError(
                f"Invalid answer for question {key!r}: {e}",
                path=f"answers.{key}",
            ) from e
    return answers


def load_answers_json(path: Path) -> Dict[int, Answer]:
    """
    Load an answer map from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the content is not a valid answers file
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e
    return deserialize_answers(data)


def save_answers_json(answers: Mapping[int, Answer], path: Path) -> None:
    """Write an answer map to a JSON file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_answers(answers), f, indent=2, ensure_ascii=False)
