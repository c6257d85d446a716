"""
Schema Validation Utilities

Validates question bank JSON before any Question object is built.

Two levels:
- Basic checks (always): top-level shape, schema version, required
  record fields, unique ids. Cheap and gives precise messages.
- Strict checks (``strict=True``): full JSON Schema validation with
  jsonschema against ``question_bank.schema.json``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
QUESTION_BANK_SCHEMA_VERSION = 1

_REQUIRED_FIELDS = ("id", "text", "type", "max_points")

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_question_bank(data: Any, *, strict: bool = False) -> None:
    """
    Validate a question bank document.

    Args:
        data: Parsed JSON document
        strict: If True, also run full jsonschema validation

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Question bank must be a JSON object, got {type(data).__name__}",
            path="",
        )

    version = data.get("schema_version")
    if version != QUESTION_BANK_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported question bank schema version: {version} "
            f"(expected {QUESTION_BANK_SCHEMA_VERSION})",
            path="schema_version",
        )

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise ValidationError("'questions' must be a list", path="questions")

    seen: set[Any] = set()
    for index, record in enumerate(questions):
        validate_question_record(record, path=f"questions.{index}")
        if record["id"] in seen:
            raise ValidationError(
                f"Duplicate question id: {record['id']}",
                path=f"questions.{index}.id",
            )
        seen.add(record["id"])

    if strict:
        schema = _load_schema("question_bank")
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
        if errors:
            first = errors[0]
            raise ValidationError(
                f"Schema validation failed: {first.message}",
                path=".".join(str(p) for p in first.absolute_path),
                errors=[e.message for e in errors],
            )


def validate_question_record(record: Any, *, path: str = "") -> None:
    """
    Basic checks on one question record.

    Raises:
        ValidationError: If a required field is missing or mistyped
    """
    if not isinstance(record, dict):
        raise ValidationError(f"Question record must be an object: {record!r}", path=path)

    missing = [f for f in _REQUIRED_FIELDS if f not in record]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    if not isinstance(record["id"], int) or isinstance(record["id"], bool):
        raise ValidationError(f"Invalid id: {record['id']!r} (must be integer)", path=f"{path}.id")

    points = record["max_points"]
    if not isinstance(points, int) or isinstance(points, bool) or points < 0:
        raise ValidationError(
            f"Invalid max_points: {points!r} (must be integer >= 0)",
            path=f"{path}.max_points",
        )

    for field in ("text", "type"):
        if not isinstance(record[field], str):
            raise ValidationError(
                f"Invalid {field}: {record[field]!r} (must be string)",
                path=f"{path}.{field}",
            )

    criteria = record.get("scoring_criteria")
    if criteria is None:
        return
    if not isinstance(criteria, dict):
        raise ValidationError(
            f"Invalid scoring_criteria: {criteria!r} (must be object)",
            path=f"{path}.scoring_criteria",
        )
    rule = criteria.get("dynamic_rule", criteria.get("dynamicRule"))
    if rule is not None and not isinstance(rule, str):
        raise ValidationError(
            f"Invalid dynamic_rule: {rule!r} (must be string)",
            path=f"{path}.scoring_criteria.dynamic_rule",
        )
