"""Per-session factor weights driven by thumbs-up/down feedback.

    ratio  = helpful / (helpful + not_helpful)      (0.5 when no feedback)
    weight = round(0.9 + ratio * 0.4, 3)            (always within [0.9, 1.3])

Weights only rank factors for display and notes context. They never
change the risk score.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence

from healthprofiler.domains.lifestyle.domain_logic.models import (
    FeedbackCounts,
    PersonalizationWeights,
)

MIN_WEIGHT = 0.9
WEIGHT_SPAN = 0.4
NEUTRAL_RATIO = 0.5


def feedback_ratio(counts: FeedbackCounts) -> float:
    # Unreachable right after an increment; kept for re-derivation from stored counts
    if counts.total == 0:
        return NEUTRAL_RATIO
    return counts.helpful / counts.total


def weight_for_counts(counts: FeedbackCounts) -> float:
    return round(MIN_WEIGHT + feedback_ratio(counts) * WEIGHT_SPAN, 3)


def adjust_weights(
    current: PersonalizationWeights,
    factors: Sequence[str],
    helpful: bool,
) -> PersonalizationWeights:
    """Apply one feedback event to every factor occurrence in ``factors``.

    Duplicated factor labels are counted once per occurrence. ``current``
    is left untouched; the updated copy is returned for the caller to store.
    """
    updated = copy.deepcopy(current)
    for factor in factors:
        counts = updated.feedback_counts.setdefault(factor, FeedbackCounts())
        if helpful:
            counts.helpful += 1
        else:
            counts.not_helpful += 1
        updated.factor_weights[factor] = weight_for_counts(counts)
    return updated
