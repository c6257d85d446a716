"""
Unit Tests for Serialization Utilities

Tests for answers file load/save.
"""

import json
from pathlib import Path

import pytest

from cogniquest.core.models import (
    CalculationAnswer,
    NumberAnswer,
    ShapeAnswer,
    StoryAnswer,
    TextAnswer,
)
from cogniquest.core.schemas.validator import ValidationError
from cogniquest.core.utils.serialization import (
    deserialize_answers,
    load_answers_json,
    save_answers_json,
    serialize_answers,
)


class TestAnswersFile:
    """Tests for answers file helpers."""

    def test_save_then_load_when_mixed_answers_then_equal(self, tmp_path: Path):
        answers = {
            1: TextAnswer("Monday"),
            2: NumberAnswer(2024),
            5: CalculationAnswer(23, 77),
            11: StoryAnswer("Jill", "Stockbroker", "teens", "IL"),
        }
        path = tmp_path / "nested" / "answers.json"
        save_answers_json(answers, path)
        assert load_answers_json(path) == answers

    def test_serialize_when_keys_then_strings_in_id_order(self):
        data = serialize_answers({11: TextAnswer("x"), 2: NumberAnswer(24)})
        assert list(data["answers"]) == ["2", "11"]
        assert data["answers"]["2"] == {"kind": "number", "value": 24}

    def test_deserialize_when_no_answers_object_then_raises(self):
        with pytest.raises(ValidationError, match="'answers' object"):
            deserialize_answers({"schema_version": 1})

    def test_deserialize_when_bad_answer_then_reports_question(self):
        with pytest.raises(ValidationError, match="question '5'") as exc:
            deserialize_answers({"answers": {"5": {"kind": "calculation", "spent": 23}}})
        assert exc.value.path == "answers.5"

    @pytest.mark.parametrize("raw", ["shape", 5, None])
    def test_deserialize_when_entry_not_object_then_raises(self, raw):
        with pytest.raises(ValidationError, match="must be an object") as exc:
            deserialize_answers({"answers": {"10": raw}})
        assert exc.value.path == "answers.10"

    def test_deserialize_when_shape_fields_not_text_then_coerced(self):
        answers = deserialize_answers({"answers": {"10": {"kind": "shape", "tapped": 5}}})
        assert answers[10] == ShapeAnswer(tapped="5", largest=None)

    def test_load_when_invalid_json_then_raises(self, tmp_path: Path):
        path = tmp_path / "answers.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError, match="Invalid JSON"):
            load_answers_json(path)

    def test_load_when_missing_file_then_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_answers_json(tmp_path / "missing.json")

    def test_saved_file_when_read_then_plain_json(self, tmp_path: Path):
        path = tmp_path / "answers.json"
        save_answers_json({3: TextAnswer("Virginia")}, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"schema_version": 1, "answers": {"3": {"kind": "text", "text": "Virginia"}}}
