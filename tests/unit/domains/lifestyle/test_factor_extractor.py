"""Tests for factor extraction."""

from __future__ import annotations

import itertools

import pytest

from healthprofiler.domains.lifestyle.domain_logic.factor_extractor import extract_factors
from healthprofiler.domains.lifestyle.domain_logic.models import Answers

ALL_FACTORS = ["smoking", "low exercise", "poor diet"]


class TestFactors:
    def test_all_three_factors_in_check_order(self):
        result = extract_factors(Answers(age=42, smoker=True, exercise="rarely", diet="high sugar"))
        assert result.factors == ALL_FACTORS

    def test_no_factors_for_healthy_answers(self):
        result = extract_factors(Answers(age=70, smoker=False, exercise="daily", diet="balanced"))
        assert result.factors == []

    def test_smoker_must_be_exactly_true(self):
        assert extract_factors(Answers(smoker="yes")).factors == []
        assert extract_factors(Answers(smoker=1)).factors == []

    @pytest.mark.parametrize("exercise", ["never", "Rarely", "seldom", "low intensity", "sedentary job"])
    def test_low_exercise_keywords(self, exercise):
        assert extract_factors(Answers(exercise=exercise)).factors == ["low exercise"]

    @pytest.mark.parametrize("diet", ["high sugar", "HIGH FAT", "processed food", "poor", "unhealthy"])
    def test_poor_diet_keywords(self, diet):
        assert extract_factors(Answers(diet=diet)).factors == ["poor diet"]

    def test_keyword_match_is_substring(self):
        # "below" contains "low"
        assert extract_factors(Answers(exercise="below average")).factors == ["low exercise"]

    def test_missing_fields_produce_no_factors(self):
        assert extract_factors(Answers()).factors == []

    def test_factor_order_is_independent_of_field_order(self):
        fields = [("diet", "processed"), ("exercise", "never"), ("smoker", True)]
        for perm in itertools.permutations(fields):
            result = extract_factors(Answers.from_mapping(dict(perm)))
            assert result.factors == ALL_FACTORS


class TestConfidence:
    def test_base_confidence(self):
        assert extract_factors(Answers()).confidence == 0.8

    def test_smoker_bonus(self):
        assert extract_factors(Answers(smoker=True)).confidence == 0.85

    def test_age_bonus_regardless_of_value(self):
        assert extract_factors(Answers(age=0)).confidence == 0.83
        assert extract_factors(Answers(age=99)).confidence == 0.83

    def test_smoker_and_age(self):
        assert extract_factors(Answers(age=42, smoker=True)).confidence == 0.88

    def test_non_finite_age_gets_no_bonus(self):
        assert extract_factors(Answers(age=float("inf"))).confidence == 0.8

    def test_exercise_and_diet_do_not_move_confidence(self):
        result = extract_factors(Answers(exercise="never", diet="poor"))
        assert result.confidence == 0.8

    def test_confidence_never_exceeds_cap(self):
        result = extract_factors(Answers(age=42, smoker=True, exercise="never", diet="poor"))
        assert result.confidence <= 0.95
