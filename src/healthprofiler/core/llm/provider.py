"""Notes provider seam: one async call that turns a prompt into text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-5-20250929",
    "openai": "gpt-4o-mini",
}

# per notes request; notes are best-effort
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_MAX_RETRIES = 1


@dataclass
class ProviderResponse:
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    latency_ms: float


@runtime_checkable
class TextProvider(Protocol):
    name: str

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 300,
        temperature: float = 0.4,
    ) -> ProviderResponse: ...


def create_provider(
    provider_name: str,
    api_key: str = "",
    model: str = "",
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> TextProvider:
    """Build the notes provider named by configuration.

    Args:
        provider_name: "anthropic", "openai", or "mock".
        api_key: API key for a hosted provider.
        model: Model override; empty means the provider's default.
        timeout: Per-request timeout in seconds for hosted providers.
        max_retries: SDK retry budget for hosted providers.

    Raises:
        ValueError: For an unknown provider name.
    """
    if provider_name == "mock":
        from healthprofiler.core.llm.providers.mock import MockProvider

        return MockProvider()
    if provider_name not in DEFAULT_MODELS:
        raise ValueError(f"Unknown LLM provider: {provider_name}")

    model = model or DEFAULT_MODELS[provider_name]
    if provider_name == "anthropic":
        from healthprofiler.core.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key, model, timeout=timeout, max_retries=max_retries)

    from healthprofiler.core.llm.providers.openai import OpenAIProvider

    return OpenAIProvider(api_key, model, timeout=timeout, max_retries=max_retries)
