"""Prompt templates: the notes prompt and MCP prompts for client journeys."""

from __future__ import annotations

import json
from collections.abc import Sequence

from fastmcp import FastMCP

from healthprofiler.domains.lifestyle.domain_logic.models import Answers, RiskResult


def _format_top_factors(top_factors: Sequence[tuple[str, float]]) -> str:
    return ", ".join(f"{factor}:{weight:.2f}" for factor, weight in top_factors)


def build_notes_prompt(
    answers: Answers,
    risk: RiskResult,
    factors: Sequence[str],
    top_factors: Sequence[tuple[str, float]] = (),
) -> str:
    """Render the notes request for a scored profile.

    ``top_factors`` are the session's heaviest personalization weights,
    passed as context so the notes lean toward what the user found helpful.
    """
    return "\n".join([
        "Provide concise, non-diagnostic notes.",
        f"Answers: {json.dumps(answers.to_dict(), default=str)}",
        f"Risk: {risk.risk_level} (score {risk.score}); rationale: {', '.join(risk.rationale)}",
        f"Factors: {', '.join(factors) or 'none'}",
        f"PersonalizationWeights(top): {_format_top_factors(top_factors) or 'none'}",
        "In 2-3 sentences, explain why these recommendations are suggested, "
        "referencing lifestyle factors and habits. Avoid medical claims.",
    ])


def register_lifestyle_prompts(mcp: FastMCP) -> None:
    """Register lifestyle domain MCP prompts."""

    @mcp.prompt()
    def lifestyle_check_prompt() -> str:
        """Prompt template for a guided lifestyle risk check."""
        return """I'd like a quick lifestyle check. Please ask me for:

1. My age
2. Whether I smoke
3. How often I exercise
4. How I would describe my diet

Then run process_profile with my answers and explain the recommendations \
in plain language. This is not a medical diagnosis."""
