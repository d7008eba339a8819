"""Tests for input selection, parsing, missing-field detection and confidence."""

from __future__ import annotations

import json

import pytest

from healthprofiler.domains.lifestyle.domain_logic.input_parser import (
    parse_inputs,
    parse_json_input,
    parse_key_value_lines,
)
from healthprofiler.domains.lifestyle.domain_logic.models import INCOMPLETE_REASON

COMPLETE = {"age": 42, "smoker": True, "exercise": "rarely", "diet": "high sugar"}


# ---------------------------------------------------------------------------
# Line-based extraction
# ---------------------------------------------------------------------------

class TestKeyValueLines:
    def test_recognized_keys_are_normalized(self):
        answers = parse_key_value_lines("Age: 42\nSmoker: yes\nExercise: Rarely\nDiet: High Sugar")
        assert answers.age == 42
        assert answers.smoker is True
        assert answers.exercise == "rarely"
        assert answers.diet == "high sugar"

    def test_crlf_blank_and_junk_lines_are_skipped(self):
        answers = parse_key_value_lines("\r\n  Age : 50 \r\nthis line has no colon\n\n:nokey\nSmoker:no")
        assert answers.age == 50
        assert answers.smoker is False
        assert answers.extra == {}

    def test_unknown_keys_pass_through_raw(self):
        answers = parse_key_value_lines("Name: Ada Lovelace\nSLEEP: 7 Hours")
        assert answers.extra == {"name": "Ada Lovelace", "sleep": "7 Hours"}

    def test_bad_values_become_absent(self):
        answers = parse_key_value_lines("Age: forty\nSmoker: sometimes")
        assert answers.age is None
        assert answers.smoker is None

    def test_later_lines_overwrite_earlier(self):
        assert parse_key_value_lines("Age: 30\nAge: 31").age == 31


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------

class TestJsonInput:
    def test_object_is_normalized_and_extras_copied(self):
        answers = parse_json_input(json.dumps({
            "age": "42", "smoker": "Y", "exercise": "Never", "diet": "Processed", "bmi": 27.1,
        }))
        assert answers.age == 42
        assert answers.smoker is True
        assert answers.exercise == "never"
        assert answers.diet == "processed"
        assert answers.extra == {"bmi": 27.1}

    def test_null_free_text_is_an_empty_answer(self):
        answers = parse_json_input('{"exercise": null, "diet": null}')
        assert answers.exercise == ""
        assert answers.diet == ""

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", "42", '"age"'])
    def test_non_objects_are_rejected(self, text):
        assert parse_json_input(text) is None


# ---------------------------------------------------------------------------
# parse_inputs
# ---------------------------------------------------------------------------

class TestSelectionPriority:
    def test_answers_win_over_text_and_ocr(self):
        result = parse_inputs(answers=COMPLETE, text_input="Age: 99", ocr_text="Age: 77")
        assert result.answers.age == 42

    def test_empty_answers_fall_through_to_text(self):
        result = parse_inputs(answers={}, text_input="Age: 99", ocr_text="Age: 77")
        assert result.answers.age == 99

    def test_text_wins_over_ocr(self):
        result = parse_inputs(text_input="Age: 99", ocr_text="Age: 77")
        assert result.answers.age == 99

    def test_ocr_used_when_nothing_else(self):
        result = parse_inputs(ocr_text="Age: 77\nSmoker: no\nExercise: daily\nDiet: balanced")
        assert result.answers.age == 77
        assert result.status == "ok"

    def test_malformed_json_falls_back_to_lines(self):
        result = parse_inputs(text_input='{"age": 42,\nSmoker: yes')
        assert result.answers.smoker is True

    def test_nothing_provided_is_incomplete(self):
        result = parse_inputs()
        assert result.answers.to_dict() == {}
        assert result.missing_fields == ["age", "smoker", "exercise", "diet"]
        assert result.confidence == 0.3
        assert result.status == "incomplete_profile"


class TestRenormalization:
    def test_explicit_answers_are_coerced(self):
        result = parse_inputs(answers={
            "age": " 65 ", "smoker": "no", "exercise": "  Sedentary", "diet": "OK", "notes": "Hi",
        })
        answers = result.answers
        assert answers.age == 65
        assert answers.smoker is False
        assert answers.exercise == "sedentary"
        assert answers.diet == "ok"
        assert answers.extra == {"notes": "Hi"}

    def test_unparsable_explicit_values_are_missing(self):
        result = parse_inputs(answers={"age": "old", "smoker": "maybe", "exercise": "x", "diet": "y"})
        assert result.missing_fields == ["age", "smoker"]
        assert result.status == "ok"

    @pytest.mark.parametrize(
        "raw",
        [
            {"age": 30, "smoker": None, "exercise": None, "diet": None},
            {"age": "41", "smoker": "yes", "exercise": None, "diet": "Balanced"},
            {"age": 70, "exercise": 0, "diet": None, "city": "Leeds"},
            {"smoker": False, "diet": ""},
        ],
    )
    def test_answers_and_json_text_agree(self, raw):
        from_answers = parse_inputs(answers=raw)
        from_json = parse_inputs(text_input=json.dumps(raw))
        assert from_answers.answers == from_json.answers
        assert from_answers.missing_fields == from_json.missing_fields
        assert from_answers.status == from_json.status
        assert from_answers.confidence == from_json.confidence

    def test_null_free_text_in_answers_is_an_empty_answer(self):
        result = parse_inputs(answers={"age": 30, "smoker": None, "exercise": None, "diet": None})
        assert result.answers.exercise == ""
        assert result.answers.diet == ""
        assert result.missing_fields == ["smoker"]
        assert result.status == "ok"


class TestCompletenessAndConfidence:
    def test_all_fields_present_caps_confidence(self):
        result = parse_inputs(answers=COMPLETE)
        assert result.missing_fields == []
        assert result.confidence == 0.98
        assert result.status == "ok"
        assert result.reason is None

    def test_two_missing_is_still_ok(self):
        result = parse_inputs(text_input="Age: 50\nSmoker: no\n")
        assert result.missing_fields == ["exercise", "diet"]
        assert result.confidence == 0.5
        assert result.status == "ok"

    def test_one_missing(self):
        result = parse_inputs(answers={"age": 30, "smoker": False, "diet": "balanced"})
        assert result.missing_fields == ["exercise"]
        assert result.confidence == 0.75

    @pytest.mark.parametrize("present", ["age", "smoker", "exercise", "diet"])
    def test_three_missing_is_incomplete(self, present):
        result = parse_inputs(answers={present: COMPLETE[present]})
        assert len(result.missing_fields) == 3
        assert result.status == "incomplete_profile"
        assert result.reason == INCOMPLETE_REASON
        assert result.confidence == 0.3

    def test_pass_through_fields_do_not_count(self):
        result = parse_inputs(answers={"age": 30, "height": 180, "weight": 80, "sleep": 7})
        assert result.missing_fields == ["smoker", "exercise", "diet"]
        assert result.status == "incomplete_profile"

    def test_missing_fields_follow_required_order(self):
        result = parse_inputs(answers={"exercise": "daily", "smoker": True})
        assert result.missing_fields == ["age", "diet"]
