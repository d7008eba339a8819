"""Text generation provider implementations."""

from healthprofiler.core.llm.providers.anthropic import AnthropicProvider
from healthprofiler.core.llm.providers.mock import MockProvider
from healthprofiler.core.llm.providers.openai import OpenAIProvider

__all__ = ["AnthropicProvider", "MockProvider", "OpenAIProvider"]
