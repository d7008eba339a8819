"""Profile pipeline: parse -> factors -> risk -> recommendations (+ notes).

``ProfileService`` is what the MCP tools call. It owns no state of its
own; profiles and session weights live in the injected ProfileStore.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from healthprofiler.domains.lifestyle.domain_logic.factor_extractor import extract_factors
from healthprofiler.domains.lifestyle.domain_logic.input_parser import parse_inputs
from healthprofiler.domains.lifestyle.domain_logic.models import (
    FactorsResult,
    FullProfile,
    ParseResult,
    RecommendationResult,
    RiskResult,
)
from healthprofiler.domains.lifestyle.domain_logic.recommendations import (
    generate_recommendations,
)
from healthprofiler.domains.lifestyle.domain_logic.risk_classifier import classify_risk
from healthprofiler.domains.lifestyle.domain_logic.weight_adjuster import adjust_weights
from healthprofiler.domains.lifestyle.prompts.lifestyle_prompts import build_notes_prompt

if TYPE_CHECKING:
    from healthprofiler.core.llm.notes import NotesGenerator
    from healthprofiler.core.storage import ProfileStore

logger = logging.getLogger(__name__)

TOP_FACTOR_LIMIT = 5


class FeedbackValidationError(ValueError):
    """Raised when a feedback submission is missing its session or factors."""


def score_answers(
    parse: ParseResult,
) -> tuple[FactorsResult, RiskResult, RecommendationResult] | None:
    """Run the scoring stages, or return None for an incomplete profile."""
    if not parse.is_complete:
        return None
    factors = extract_factors(parse.answers)
    risk = classify_risk(parse.answers, factors.factors)
    recommendation = generate_recommendations(risk, factors.factors)
    return factors, risk, recommendation


def _validate_feedback(session_id: Any, factors: Any) -> tuple[str, list[str]]:
    if not isinstance(session_id, str) or not session_id.strip():
        raise FeedbackValidationError("Missing sessionId or factors")
    if not isinstance(factors, (list, tuple)) or not all(isinstance(f, str) for f in factors):
        raise FeedbackValidationError("Missing sessionId or factors")
    return session_id, list(factors)


class ProfileService:
    """Processes submissions and feedback against a ProfileStore."""

    def __init__(
        self,
        store: ProfileStore,
        notes_generator: NotesGenerator | None = None,
        *,
        default_session_id: str = "anon",
    ) -> None:
        self.store = store
        self.notes_generator = notes_generator
        self.default_session_id = default_session_id

    async def process(
        self,
        answers: dict[str, Any] | None = None,
        text_input: str | None = None,
        ocr_text: str | None = None,
        *,
        persist: bool = False,
        session_id: str | None = None,
    ) -> FullProfile:
        """Parse and score one submission.

        Incomplete submissions come back with only ``parse`` filled in;
        the scoring stages and notes are skipped for them.
        """
        parse = parse_inputs(answers=answers, text_input=text_input, ocr_text=ocr_text)
        profile_id = uuid.uuid4().hex
        created_at = int(time.time() * 1000)

        scored = score_answers(parse)
        if scored is None:
            logger.info(
                "Profile %s incomplete: missing %s", profile_id, ", ".join(parse.missing_fields)
            )
            profile = FullProfile(id=profile_id, created_at=created_at, parse=parse)
        else:
            factors, risk, recommendation = scored
            weights = self.store.get_weights(session_id or self.default_session_id)
            ai_notes = await self._notes(parse, factors, risk, weights.top_factors(TOP_FACTOR_LIMIT))
            profile = FullProfile(
                id=profile_id,
                created_at=created_at,
                parse=parse,
                factors=factors,
                risk=risk,
                recommendation=recommendation,
                ai_notes=ai_notes,
            )
            logger.info(
                "Profile %s scored: risk=%s score=%d factors=%s",
                profile_id,
                risk.risk_level,
                risk.score,
                factors.factors,
            )

        if persist:
            self.store.save_profile(profile)
        return profile

    async def _notes(
        self,
        parse: ParseResult,
        factors: FactorsResult,
        risk: RiskResult,
        top_factors: Sequence[tuple[str, float]],
    ) -> str:
        if self.notes_generator is None:
            return ""
        prompt = build_notes_prompt(parse.answers, risk, factors.factors, top_factors)
        return await self.notes_generator.generate(prompt)

    def record_feedback(
        self,
        session_id: Any,
        factors: Any,
        helpful: bool,
    ) -> dict[str, float]:
        """Apply thumbs-up/down feedback and return the session's factor weights.

        Raises:
            FeedbackValidationError: If ``session_id`` or ``factors`` is missing
                or malformed. The store is not touched in that case.
        """
        session_id, factor_list = _validate_feedback(session_id, factors)
        current = self.store.get_weights(session_id)
        updated = adjust_weights(current, factor_list, bool(helpful))
        self.store.set_weights(session_id, updated)
        logger.info(
            "Feedback recorded for session %s: helpful=%s factors=%s",
            session_id,
            bool(helpful),
            factor_list,
        )
        return dict(updated.factor_weights)

    def list_profiles(self) -> list[FullProfile]:
        return self.store.list_profiles()

    def get_profile(self, profile_id: str) -> FullProfile | None:
        return self.store.get_profile(profile_id)
