"""MCP tools for lifestyle profile submission, history and feedback.

These tools are the request-facing boundary: they validate input, call
the ProfileService, and turn results (and client errors) into JSON.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from healthprofiler.core.audit.logger import AuditLogger

from healthprofiler.domains.lifestyle.domain_logic.profile_pipeline import (
    FeedbackValidationError,
    ProfileService,
)

logger = logging.getLogger(__name__)


def register_profile_tools(
    mcp: FastMCP,
    service: ProfileService,
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register lifestyle profile tools on the MCP server."""

    def _audit(tool_name: str, tool_input: Any, **kwargs: Any) -> None:
        if audit_logger is not None:
            audit_logger.log_tool_call(tool_name, tool_input, **kwargs)

    @mcp.tool
    async def process_profile(
        ctx: Context,
        answers: dict[str, Any] | None = None,
        text_input: str | None = None,
        ocr_text: str | None = None,
        persist: bool = False,
        session_id: str | None = None,
    ) -> str:
        """Score self-reported lifestyle answers and suggest next steps.

        Provide ONE of the inputs; the first non-empty one is used.

        Args:
            answers: Structured answers, e.g. {"age": 42, "smoker": "yes",
                "exercise": "rarely", "diet": "high sugar"}.
            text_input: Free text, either a JSON object or lines like "Age: 42".
            ocr_text: Text extracted from a scanned form, lines like "Smoker: no".
            persist: Store the resulting profile in the profile history.
            session_id: Opaque client session used for personalization weights.
        """
        start_time = time.monotonic()
        tool_input = {
            "answers": answers,
            "text_input": text_input,
            "ocr_text": ocr_text,
            "persist": persist,
        }
        try:
            profile = await service.process(
                answers=answers,
                text_input=text_input,
                ocr_text=ocr_text,
                persist=persist,
                session_id=session_id,
            )
        except Exception as exc:  # noqa: BLE001 - reported to the client as a 400-style error
            logger.exception("process_profile failed")
            _audit(
                "process_profile",
                tool_input,
                duration_ms=(time.monotonic() - start_time) * 1000,
                status="failure",
                error_type=type(exc).__name__,
            )
            return json.dumps({"error": str(exc) or "Unknown error"})

        notes = service.notes_generator
        _audit(
            "process_profile",
            tool_input,
            llm_provider=notes.provider_name if notes else None,
            llm_disclosed=bool(notes and profile.risk is not None and notes.discloses_data),
            profile_id=profile.id,
            duration_ms=(time.monotonic() - start_time) * 1000,
            metadata={"status": profile.parse.status, "persisted": persist},
        )
        return json.dumps(profile.to_dict(), indent=2)

    @mcp.tool
    async def list_profiles(
        ctx: Context,
        limit: int = 50,
    ) -> str:
        """List previously stored profiles, newest first.

        Args:
            limit: Maximum number of profiles to return.
        """
        profiles = service.list_profiles()[: max(limit, 0)]
        return json.dumps({
            "status": "ok",
            "count": len(profiles),
            "items": [p.to_dict() for p in profiles],
        }, indent=2)

    @mcp.tool
    async def get_profile(
        ctx: Context,
        profile_id: str,
    ) -> str:
        """Fetch one stored profile by id.

        Args:
            profile_id: The ``id`` returned by process_profile or list_profiles.
        """
        profile = service.get_profile(profile_id)
        if profile is None:
            return json.dumps({"status": "error", "message": f"Profile not found: {profile_id}"})
        _audit("get_profile", {"profile_id": profile_id}, profile_id=profile_id)
        return json.dumps(profile.to_dict(), indent=2)

    @mcp.tool
    async def submit_feedback(
        ctx: Context,
        session_id: str,
        factors: list[str],
        helpful: bool,
        profile_id: str | None = None,
    ) -> str:
        """Rate whether the suggestions for these factors were helpful.

        Feedback shifts per-session factor weights between 0.9 and 1.3.
        Weights only rank factors in future notes; they never change scores.

        Args:
            session_id: Opaque client session the feedback belongs to.
            factors: Factor labels the feedback refers to (e.g. ["smoking"]).
            helpful: True for thumbs-up, False for thumbs-down.
            profile_id: Profile the feedback was given on (informational).
        """
        try:
            weights = service.record_feedback(session_id, factors, helpful)
        except FeedbackValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        _audit(
            "submit_feedback",
            {"factors": factors, "helpful": helpful},
            profile_id=profile_id,
            metadata={"factor_count": len(factors)},
        )
        return json.dumps({"ok": True, "weights": weights})
