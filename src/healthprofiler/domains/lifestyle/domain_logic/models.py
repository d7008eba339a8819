"""Lifestyle profile models and domain constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


# ---------------------------------------------------------------------------
# Domain constants (shared by the parser, extractor, classifier and tools)
# ---------------------------------------------------------------------------

REQUIRED_FIELDS = ("age", "smoker", "exercise", "diet")

FACTOR_SMOKING = "smoking"
FACTOR_LOW_EXERCISE = "low exercise"
FACTOR_POOR_DIET = "poor diet"

# Substring matches, checked in order against the lower-cased answer
LOW_EXERCISE_KEYWORDS = ("never", "rarely", "seldom", "low", "sedentary")
POOR_DIET_KEYWORDS = ("high sugar", "high fat", "processed", "poor", "unhealthy")

INCOMPLETE_REASON = ">50% fields missing"

ParseStatus = Literal["ok", "incomplete_profile"]
RiskLevel = Literal["low", "moderate", "high"]


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

@dataclass
class Answers:
    """Canonical answer set: four recognized fields plus pass-through keys.

    ``None`` means the field is absent (never supplied, or failed to
    normalize). Pass-through keys live in ``extra`` and never take part
    in missing-field or confidence computation.
    """

    age: int | float | None = None
    smoker: bool | None = None
    exercise: str | None = None
    diet: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: dict[str, Any]) -> Answers:
        """Split a raw mapping into recognized fields and ``extra`` (no coercion)."""
        extra = {k: v for k, v in mapping.items() if k not in REQUIRED_FIELDS}
        return cls(
            age=mapping.get("age"),
            smoker=mapping.get("smoker"),
            exercise=mapping.get("exercise"),
            diet=mapping.get("diet"),
            extra=extra,
        )

    def get(self, name: str) -> Any:
        if name not in REQUIRED_FIELDS:
            return self.extra.get(name)
        return getattr(self, name)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        out.update(self.extra)
        return out


# ---------------------------------------------------------------------------
# Pipeline results
# ---------------------------------------------------------------------------

@dataclass
class ParseResult:
    """Outcome of input parsing: normalized answers plus completeness info."""

    answers: Answers
    missing_fields: list[str]
    confidence: float
    status: ParseStatus = "ok"
    reason: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "answers": self.answers.to_dict(),
            "missing_fields": list(self.missing_fields),
            "confidence": self.confidence,
            "status": self.status,
        }
        if self.reason is not None:
            out["reason"] = self.reason
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParseResult:
        return cls(
            answers=Answers.from_mapping(data.get("answers") or {}),
            missing_fields=list(data.get("missing_fields") or []),
            confidence=data.get("confidence", 0.0),
            status=data.get("status", "ok"),
            reason=data.get("reason"),
        )


@dataclass
class FactorsResult:
    factors: list[str]
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"factors": list(self.factors), "confidence": self.confidence}


@dataclass
class RiskResult:
    risk_level: RiskLevel
    score: int
    rationale: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk_level": self.risk_level,
            "score": self.score,
            "rationale": list(self.rationale),
        }


@dataclass
class RecommendationResult:
    risk_level: RiskLevel
    factors: list[str]
    recommendations: list[str]
    status: Literal["ok"] = "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk_level": self.risk_level,
            "factors": list(self.factors),
            "recommendations": list(self.recommendations),
            "status": self.status,
        }


# ---------------------------------------------------------------------------
# Personalization state (per session)
# ---------------------------------------------------------------------------

@dataclass
class FeedbackCounts:
    helpful: int = 0
    not_helpful: int = 0

    @property
    def total(self) -> int:
        return self.helpful + self.not_helpful


@dataclass
class PersonalizationWeights:
    """Per-session factor weights and the feedback counts behind them.

    Serialized with the camelCase names clients already send and store
    (``factorWeights``, ``feedbackCounts``, ``notHelpful``).
    """

    factor_weights: dict[str, float] = field(default_factory=dict)
    feedback_counts: dict[str, FeedbackCounts] = field(default_factory=dict)

    def top_factors(self, limit: int = 5) -> list[tuple[str, float]]:
        """Return the highest-weighted factors, heaviest first."""
        ranked = sorted(self.factor_weights.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:limit]

    def to_dict(self) -> dict[str, Any]:
        return {
            "factorWeights": dict(self.factor_weights),
            "feedbackCounts": {
                factor: {"helpful": c.helpful, "notHelpful": c.not_helpful}
                for factor, c in self.feedback_counts.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PersonalizationWeights:
        counts = {
            factor: FeedbackCounts(
                helpful=int(raw.get("helpful", 0)),
                not_helpful=int(raw.get("notHelpful", 0)),
            )
            for factor, raw in (data.get("feedbackCounts") or {}).items()
        }
        weights = {
            factor: float(value)
            for factor, value in (data.get("factorWeights") or {}).items()
        }
        return cls(factor_weights=weights, feedback_counts=counts)


# ---------------------------------------------------------------------------
# Full profile (what gets persisted and returned to clients)
# ---------------------------------------------------------------------------

@dataclass
class FullProfile:
    """One processed submission. Immutable once built by the pipeline."""

    id: str
    created_at: int  # epoch milliseconds
    parse: ParseResult
    factors: FactorsResult | None = None
    risk: RiskResult | None = None
    recommendation: RecommendationResult | None = None
    ai_notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "createdAt": self.created_at,
            "parse": self.parse.to_dict(),
        }
        if self.factors is not None:
            out["factors"] = self.factors.to_dict()
        if self.risk is not None:
            out["risk"] = self.risk.to_dict()
        if self.recommendation is not None:
            out["recommendation"] = self.recommendation.to_dict()
        if self.ai_notes is not None:
            out["aiNotes"] = self.ai_notes
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FullProfile:
        factors = data.get("factors")
        risk = data.get("risk")
        rec = data.get("recommendation")
        return cls(
            id=data["id"],
            created_at=int(data["createdAt"]),
            parse=ParseResult.from_dict(data["parse"]),
            factors=FactorsResult(**factors) if factors else None,
            risk=RiskResult(**risk) if risk else None,
            recommendation=RecommendationResult(**rec) if rec else None,
            ai_notes=data.get("aiNotes"),
        )
