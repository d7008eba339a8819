"""Deterministic factor extraction from canonical answers."""

from __future__ import annotations

import math

from healthprofiler.domains.lifestyle.domain_logic.models import (
    FACTOR_LOW_EXERCISE,
    FACTOR_POOR_DIET,
    FACTOR_SMOKING,
    LOW_EXERCISE_KEYWORDS,
    POOR_DIET_KEYWORDS,
    Answers,
    FactorsResult,
)

BASE_CONFIDENCE = 0.80
SMOKER_CONFIDENCE_BONUS = 0.05
AGE_CONFIDENCE_BONUS = 0.03
MAX_CONFIDENCE = 0.95


def _mentions_any(value: str | None, keywords: tuple[str, ...]) -> bool:
    text = (value or "").lower()
    return any(k in text for k in keywords)


def mentions_low_exercise(answers: Answers) -> bool:
    return _mentions_any(answers.exercise, LOW_EXERCISE_KEYWORDS)


def mentions_poor_diet(answers: Answers) -> bool:
    return _mentions_any(answers.diet, POOR_DIET_KEYWORDS)


def has_numeric_age(answers: Answers) -> bool:
    age = answers.age
    return isinstance(age, (int, float)) and not isinstance(age, bool) and math.isfinite(age)


def extract_factors(answers: Answers) -> FactorsResult:
    """Derive risk factors, always in smoking -> exercise -> diet order.

    Confidence starts at 0.80, gains 0.05 for an explicit smoker answer of
    True and 0.03 for a usable age, and is capped at 0.95.
    """
    factors: list[str] = []
    confidence = BASE_CONFIDENCE

    if answers.smoker is True:
        factors.append(FACTOR_SMOKING)
        confidence += SMOKER_CONFIDENCE_BONUS
    if mentions_low_exercise(answers):
        factors.append(FACTOR_LOW_EXERCISE)
    if mentions_poor_diet(answers):
        factors.append(FACTOR_POOR_DIET)
    # Age refines confidence only; it is not a factor on its own
    if has_numeric_age(answers):
        confidence += AGE_CONFIDENCE_BONUS

    return FactorsResult(
        factors=factors,
        confidence=round(min(MAX_CONFIDENCE, confidence), 2),
    )
