"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Health Profiler server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: there is no auth layer in front of the tools.
    profiler_host: str = "127.0.0.1"
    profiler_port: int = 8001
    profiler_log_level: str = "info"
    profiler_allow_insecure_bind: bool = False

    # Free-text notes
    llm_provider: Literal["anthropic", "openai", "mock"] = "openai"
    anthropic_api_key: str = ""
    anthropic_model: str = ""  # empty: provider default
    openai_api_key: str = ""
    openai_model: str = ""
    notes_max_tokens: int = 300
    notes_temperature: float = 0.4
    notes_timeout_seconds: float = 15.0
    notes_max_retries: int = 1

    # Storage
    storage_backend: Literal["memory", "sqlite"] = "memory"
    db_path: str = "~/.healthprofiler/profiles.db"
    encryption_key: str = ""
    profile_retention: int = 50

    # Personalization
    default_session_id: str = "anon"


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
