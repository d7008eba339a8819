"""Shared test fixtures for Health Profiler tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("ENCRYPTION_KEY", "")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from healthprofiler.core.llm.providers.mock import MockProvider  # noqa: E402
from healthprofiler.core.storage.memory import MemoryProfileStore  # noqa: E402


# ---------------------------------------------------------------------------
# Notes provider
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider(response_content="Small daily habits add up.")


@pytest.fixture
def failing_provider() -> MockProvider:
    return MockProvider(error=RuntimeError("upstream timeout"))


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store() -> MemoryProfileStore:
    return MemoryProfileStore()


@pytest.fixture
def profile_db():
    """Create an in-memory ProfileDatabase for testing."""
    from healthprofiler.core.storage.database import ProfileDatabase

    db = ProfileDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def field_encryptor():
    """Create a FieldEncryptor with a fresh key."""
    from cryptography.fernet import Fernet

    from healthprofiler.core.storage.encryption import FieldEncryptor

    return FieldEncryptor(Fernet.generate_key().decode())


@pytest.fixture
def sqlite_store(profile_db, field_encryptor):
    """Create a SQLiteProfileStore backed by in-memory SQLite."""
    from healthprofiler.core.storage.repository import SQLiteProfileStore

    return SQLiteProfileStore(profile_db, field_encryptor)


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, memory_store, sqlite_store):
    """Run a test against both ProfileStore implementations."""
    return memory_store if request.param == "memory" else sqlite_store


@pytest.fixture
def audit_logger(profile_db):
    """Create an AuditLogger backed by in-memory SQLite."""
    from healthprofiler.core.audit.logger import AuditLogger

    return AuditLogger(profile_db)
