"""Tests for the heuristic risk classifier."""

from __future__ import annotations

import pytest

from healthprofiler.domains.lifestyle.domain_logic.input_parser import parse_inputs
from healthprofiler.domains.lifestyle.domain_logic.models import Answers
from healthprofiler.domains.lifestyle.domain_logic.risk_classifier import (
    classify_risk,
    risk_level_for_score,
)


class TestScore:
    def test_all_lifestyle_factors(self):
        result = classify_risk(Answers(age=42, smoker=True, exercise="rarely", diet="high sugar"))
        assert result.score == 90
        assert result.risk_level == "high"
        assert result.rationale == ["smoking", "low activity", "high sugar/poor diet"]

    def test_healthy_senior(self):
        result = classify_risk(Answers(age=70, smoker=False, exercise="daily", diet="balanced"))
        assert result.score == 10
        assert result.risk_level == "low"
        assert result.rationale == []

    @pytest.mark.parametrize(
        ("age", "points"),
        [(30, 0), (44.9, 0), (45, 5), (64, 5), (65, 10), (90, 10), (None, 0)],
    )
    def test_age_bands(self, age, points):
        assert classify_risk(Answers(age=age)).score == points

    def test_age_adds_no_rationale(self):
        assert classify_risk(Answers(age=80)).rationale == []

    def test_smoking_alone_is_moderate(self):
        result = classify_risk(Answers(smoker=True))
        assert result.score == 50
        assert result.risk_level == "moderate"

    def test_smoking_and_middle_age_is_moderate(self):
        assert classify_risk(Answers(age=50, smoker=True)).score == 55

    def test_senior_smoker_needs_another_factor_for_high(self):
        result = classify_risk(Answers(age=65, smoker=True))
        assert result.score == 60
        assert result.risk_level == "moderate"
        result = classify_risk(Answers(age=65, smoker=True, diet="poor"))
        assert result.score == 80
        assert result.risk_level == "high"

    @pytest.mark.parametrize(
        "text",
        [
            "Age: inf\nSmoker: no\nExercise: daily\nDiet: balanced",
            "Age: -inf\nSmoker: no\nExercise: daily\nDiet: balanced",
            '{"age": Infinity, "smoker": "no", "exercise": "daily", "diet": "balanced"}',
        ],
    )
    def test_non_finite_parsed_age_counts_as_missing(self, text):
        parse = parse_inputs(text_input=text)
        assert parse.missing_fields == ["age"]
        assert classify_risk(parse.answers).score == 0

    def test_parsed_senior_age_is_scored(self):
        parse = parse_inputs(text_input="Age: 1e3\nSmoker: no\nExercise: daily\nDiet: balanced")
        assert parse.missing_fields == []
        assert classify_risk(parse.answers).score == 10

    def test_factors_argument_does_not_change_score(self):
        answers = Answers(exercise="daily")
        assert classify_risk(answers, ["smoking", "poor diet"]).score == 0


class TestLevels:
    @pytest.mark.parametrize(
        ("score", "level"),
        [(0, "low"), (34, "low"), (35, "moderate"), (64, "moderate"), (65, "high"), (100, "high")],
    )
    def test_thresholds(self, score, level):
        assert risk_level_for_score(score) == level


class TestMonotonicity:
    BASES = [
        Answers(),
        Answers(age=50),
        Answers(age=70, exercise="daily", diet="balanced"),
        Answers(age=30, smoker=False, exercise="never"),
    ]

    @pytest.mark.parametrize("base", BASES)
    def test_adding_a_trigger_never_lowers_score(self, base):
        before = classify_risk(base).score
        for change in ({"smoker": True}, {"exercise": "sedentary"}, {"diet": "unhealthy"}):
            updated = Answers(**{**base.__dict__, **change})
            assert classify_risk(updated).score >= before
