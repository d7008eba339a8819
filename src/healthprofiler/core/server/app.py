"""Health Profiler MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
import sqlite3

from fastmcp import FastMCP

from healthprofiler import __version__
from healthprofiler.core.audit.logger import AuditLogger
from healthprofiler.core.config.settings import Settings, get_settings
from healthprofiler.core.llm.notes import NotesGenerator
from healthprofiler.core.llm.provider import TextProvider, create_provider
from healthprofiler.core.storage import ProfileStore
from healthprofiler.core.storage.database import DatabaseError, ProfileDatabase
from healthprofiler.core.storage.encryption import EncryptionError, FieldEncryptor
from healthprofiler.core.storage.memory import MemoryProfileStore
from healthprofiler.core.storage.repository import SQLiteProfileStore
from healthprofiler.domains.lifestyle.domain_logic.profile_pipeline import ProfileService
from healthprofiler.domains.lifestyle.prompts.lifestyle_prompts import (
    register_lifestyle_prompts,
)
from healthprofiler.domains.lifestyle.tools.profile_tools import register_profile_tools

logger = logging.getLogger(__name__)


def _build_provider(settings: Settings) -> TextProvider:
    """Notes provider from settings; a hosted provider without a key degrades to mock."""
    name = settings.llm_provider
    if name == "mock":
        return create_provider("mock")
    api_key = getattr(settings, f"{name}_api_key")
    if not api_key:
        logger.warning(
            "No API key configured for provider '%s'; notes come from the mock provider", name
        )
        return create_provider("mock")
    return create_provider(
        name,
        api_key=api_key,
        model=getattr(settings, f"{name}_model"),
        timeout=settings.notes_timeout_seconds,
        max_retries=settings.notes_max_retries,
    )


def _build_store(settings: Settings) -> tuple[ProfileStore, ProfileDatabase | None]:
    """Pick the profile store; SQLite needs an encryption key, else memory."""
    if settings.storage_backend == "sqlite":
        if not settings.encryption_key:
            logger.info(
                "No ENCRYPTION_KEY configured, using in-memory storage. "
                "Set ENCRYPTION_KEY to enable the SQLite profile store."
            )
        else:
            try:
                encryptor = FieldEncryptor(settings.encryption_key)
                database = ProfileDatabase(settings.db_path)
                database.initialize()
            except (EncryptionError, DatabaseError, sqlite3.Error, OSError) as exc:
                logger.error("Failed to initialize storage: %s", exc)
                logger.warning("Continuing with in-memory storage; profiles will not survive restarts")
            else:
                logger.info(
                    "Profile store initialized: %s (schema v%d)",
                    settings.db_path,
                    database.get_schema_version(),
                )
                store = SQLiteProfileStore(
                    database, encryptor, retention=settings.profile_retention
                )
                return store, database

    return MemoryProfileStore(retention=settings.profile_retention), None


def create_app(
    *,
    store_override: ProfileStore | None = None,
    provider_override: TextProvider | None = None,
    audit_logger_override: AuditLogger | None = None,
) -> FastMCP:
    """Create and configure the Health Profiler MCP server.

    1. Creates the FastMCP server instance
    2. Builds the notes provider (mock when no API key is configured)
    3. Builds the profile store (encrypted SQLite or in-memory)
    4. Registers tools and prompts
    """
    settings = get_settings()

    server = FastMCP(
        "Health Profiler",
        instructions=(
            "Lifestyle risk profiler. Scores self-reported answers about age, "
            "smoking, exercise and diet with a simple, non-diagnostic heuristic, "
            "suggests next steps, and learns which suggestions each session "
            "finds helpful."
        ),
    )

    # --- Notes provider ---
    provider = provider_override if provider_override is not None else _build_provider(settings)
    notes_generator = NotesGenerator(
        provider,
        max_tokens=settings.notes_max_tokens,
        temperature=settings.notes_temperature,
    )

    # --- Storage ---
    database: ProfileDatabase | None = None
    if store_override is not None:
        store = store_override
    else:
        store, database = _build_store(settings)
    logger.info("Using %s profile store", store.backend)

    audit_logger = audit_logger_override
    if audit_logger is None and database is not None:
        audit_logger = AuditLogger(database)

    service = ProfileService(
        store,
        notes_generator,
        default_session_id=settings.default_session_id,
    )

    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        status = {
            "status": "ok",
            "server": "Health Profiler",
            "version": __version__,
            "storage_backend": store.backend,
            "profiles_stored": store.count_profiles(),
            "notes_provider": notes_generator.provider_name,
        }
        if audit_logger is not None:
            status["llm_disclosures"] = audit_logger.count_disclosures()
            status["tool_calls"] = audit_logger.tool_summary()
        return status

    register_profile_tools(server, service, audit_logger)
    logger.info("Profile tools registered")

    register_lifestyle_prompts(server)

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
