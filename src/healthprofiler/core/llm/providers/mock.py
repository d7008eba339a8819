"""Offline notes provider for tests and key-less local runs."""

from __future__ import annotations

from healthprofiler.core.llm.provider import ProviderResponse


class MockProvider:
    """Answers every prompt with ``response_content``, or raises ``error``.

    Each call is recorded as a ``(system_message, user_message)`` pair.
    """

    name = "mock"

    def __init__(
        self,
        response_content: str = "Mock lifestyle notes.",
        error: Exception | None = None,
    ) -> None:
        self.response_content = response_content
        self.error = error
        self.calls: list[tuple[str, str]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_system_message(self) -> str:
        return self.calls[-1][0] if self.calls else ""

    @property
    def last_user_message(self) -> str:
        return self.calls[-1][1] if self.calls else ""

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 300,
        temperature: float = 0.4,
    ) -> ProviderResponse:
        self.calls.append((system_message, user_message))
        if self.error is not None:
            raise self.error
        return ProviderResponse(
            content=self.response_content,
            input_tokens=len(f"{system_message} {user_message}".split()),
            output_tokens=len(self.response_content.split()),
            model="mock",
            latency_ms=0.0,
        )
