"""Free-text notes client: best-effort explanation of a scored profile.

Notes are optional decoration on a profile. Any provider failure is
logged and turned into an empty string; callers never see an exception.
"""

from __future__ import annotations

import logging

from healthprofiler.core.llm.provider import ProviderResponse, TextProvider
from healthprofiler.core.llm.system_prompt import NOTES_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class NotesGenerator:
    """Calls a text provider with a fully rendered notes prompt."""

    def __init__(
        self,
        provider: TextProvider,
        *,
        max_tokens: int = 300,
        temperature: float = 0.4,
    ) -> None:
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def provider_name(self) -> str:
        return getattr(self.provider, "name", type(self.provider).__name__)

    @property
    def discloses_data(self) -> bool:
        """True when the prompt leaves the process (any non-mock provider)."""
        return self.provider_name != "mock"

    async def generate(self, prompt: str) -> str:
        try:
            response: ProviderResponse = await self.provider.generate(
                system_message=NOTES_SYSTEM_PROMPT,
                user_message=prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as exc:  # noqa: BLE001 - notes are best-effort
            logger.warning(
                "Notes generation failed (%s: %s); returning empty notes",
                type(exc).__name__,
                exc,
            )
            return ""

        logger.info(
            "Notes call: model=%s, tokens=%d+%d, latency=%.0fms",
            response.model,
            response.input_tokens,
            response.output_tokens,
            response.latency_ms,
        )
        return response.content.strip()
