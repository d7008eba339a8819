"""Static recommendation mapping from risk factors to advisory strings."""

from __future__ import annotations

from collections.abc import Sequence

from healthprofiler.domains.lifestyle.domain_logic.models import (
    FACTOR_LOW_EXERCISE,
    FACTOR_POOR_DIET,
    FACTOR_SMOKING,
    RecommendationResult,
    RiskResult,
)

# Emission order is fixed by this table, not by the order of the factors
RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    (FACTOR_SMOKING, "Quit smoking (seek professional support)"),
    (FACTOR_POOR_DIET, "Reduce sugar and ultra-processed foods"),
    (FACTOR_LOW_EXERCISE, "Walk 30 minutes daily and add light strength work"),
)

FALLBACK_RECOMMENDATION = "Maintain balanced diet and regular physical activity"


def generate_recommendations(
    risk: RiskResult, factors: Sequence[str]
) -> RecommendationResult:
    """Map factors to advice. Never returns an empty list."""
    present = set(factors)
    recs = [text for factor, text in RECOMMENDATIONS if factor in present]
    if not recs:
        recs.append(FALLBACK_RECOMMENDATION)

    return RecommendationResult(
        risk_level=risk.risk_level,
        factors=list(factors),
        recommendations=recs,
        status="ok",
    )
