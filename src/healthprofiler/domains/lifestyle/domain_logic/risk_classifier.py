"""Heuristic lifestyle risk scoring.

Illustrative only, not a validated clinical model. Each condition adds
independently to the score:

    smoker            +50   ("smoking")
    low exercise      +20   ("low activity")
    poor diet         +20   ("high sugar/poor diet")
    age >= 65         +10
    45 <= age < 65     +5

Levels: score >= 65 -> high, 35 <= score < 65 -> moderate, else low.
"""

from __future__ import annotations

from collections.abc import Sequence

from healthprofiler.domains.lifestyle.domain_logic.factor_extractor import (
    has_numeric_age,
    mentions_low_exercise,
    mentions_poor_diet,
)
from healthprofiler.domains.lifestyle.domain_logic.models import (
    Answers,
    RiskLevel,
    RiskResult,
)

SMOKING_POINTS = 50
LOW_ACTIVITY_POINTS = 20
POOR_DIET_POINTS = 20
SENIOR_AGE_POINTS = 10
MIDDLE_AGE_POINTS = 5

HIGH_RISK_THRESHOLD = 65
MODERATE_RISK_THRESHOLD = 35


def risk_level_for_score(score: int) -> RiskLevel:
    if score >= HIGH_RISK_THRESHOLD:
        return "high"
    if score >= MODERATE_RISK_THRESHOLD:
        return "moderate"
    return "low"


def _age_points(answers: Answers) -> int:
    if not has_numeric_age(answers):
        return 0
    if answers.age >= 65:
        return SENIOR_AGE_POINTS
    if answers.age >= 45:
        return MIDDLE_AGE_POINTS
    return 0


def classify_risk(answers: Answers, factors: Sequence[str] = ()) -> RiskResult:
    """Score the answers and map the total to a risk level.

    ``factors`` is accepted so callers can pass the extractor output
    through, but the score is derived from the answers directly.
    """
    score = 0
    rationale: list[str] = []

    if answers.smoker is True:
        score += SMOKING_POINTS
        rationale.append("smoking")
    if mentions_low_exercise(answers):
        score += LOW_ACTIVITY_POINTS
        rationale.append("low activity")
    if mentions_poor_diet(answers):
        score += POOR_DIET_POINTS
        rationale.append("high sugar/poor diet")
    score += _age_points(answers)

    return RiskResult(risk_level=risk_level_for_score(score), score=score, rationale=rationale)
