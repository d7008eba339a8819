"""SQLite data bank for profiles, session weights and the audit trail.

Owns the connection and applies numbered migrations in order. Each applied
migration leaves one row in ``schema_version``.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

_PROFILE_TABLES = """
-- Full profile lives in payload_enc; status/risk_level stay filterable
CREATE TABLE IF NOT EXISTS profiles (
    id           TEXT PRIMARY KEY,
    created_at   INTEGER NOT NULL,
    status       TEXT NOT NULL,
    risk_level   TEXT,
    payload_enc  TEXT NOT NULL,
    stored_at    TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS session_weights (
    session_id   TEXT PRIMARY KEY,
    weights_json TEXT NOT NULL,
    updated_at   TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_AUDIT_TABLE = """
CREATE TABLE IF NOT EXISTS audit_log (
    id              TEXT PRIMARY KEY,
    timestamp       TEXT NOT NULL DEFAULT (datetime('now')),
    action          TEXT NOT NULL,
    tool_name       TEXT,
    tool_input_hash TEXT,
    llm_provider    TEXT,
    llm_disclosed   INTEGER DEFAULT 0,
    profile_id      TEXT,
    duration_ms     REAL,
    status          TEXT NOT NULL DEFAULT 'success',
    error_type      TEXT,
    metadata_json   TEXT
);

CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_log(timestamp);
CREATE INDEX IF NOT EXISTS idx_audit_tool      ON audit_log(tool_name);
"""

# (version, description, DDL); append only
MIGRATIONS: tuple[tuple[int, str, str], ...] = (
    (1, "profiles and session weights", _PROFILE_TABLES),
    (2, "audit log", _AUDIT_TABLE),
)

SCHEMA_VERSION = MIGRATIONS[-1][0]


class DatabaseError(Exception):
    """Raised when the database is used before it is opened."""


class ProfileDatabase:
    """Connection holder for the profile data bank.

    ``":memory:"`` gives a throwaway database for tests. File paths may use
    ``~`` and missing parent directories are created.

    Usage::

        with ProfileDatabase("~/.healthprofiler/profiles.db") as db:
            db.connection.execute("SELECT COUNT(*) FROM profiles")
    """

    def __init__(self, db_path: str = MEMORY_PATH) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise DatabaseError("Database not initialized. Call initialize() first.")
        return self._conn

    def _connect(self) -> sqlite3.Connection:
        target = self.db_path
        if target != MEMORY_PATH:
            path = Path(target).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)
        # tool handlers may run on a worker thread
        conn = sqlite3.connect(target, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def initialize(self) -> None:
        """Open the connection and apply pending migrations. Idempotent."""
        if self._conn is not None:
            return
        self._conn = self._connect()
        self._conn.execute(
            """CREATE TABLE IF NOT EXISTS schema_version (
                   version    INTEGER NOT NULL,
                   applied_at TEXT NOT NULL DEFAULT (datetime('now'))
               )"""
        )
        applied = self.migrate()
        logger.info(
            "Profile database ready: %s (schema v%d, %d migrations applied)",
            self.db_path,
            self.get_schema_version(),
            applied,
        )

    def migrate(self) -> int:
        """Apply every migration newer than the stored version; return how many ran."""
        conn = self.connection
        current = self.get_schema_version()
        applied = 0
        for version, description, ddl in MIGRATIONS:
            if version <= current:
                continue
            conn.executescript(ddl)
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))
            conn.commit()
            applied += 1
            logger.info("Applied schema migration v%d: %s", version, description)
        return applied

    def get_schema_version(self) -> int:
        row = self.connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
        return row[0] or 0

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Profile database closed: %s", self.db_path)

    def __enter__(self) -> ProfileDatabase:
        self.initialize()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
