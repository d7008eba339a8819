"""Audit trail for MCP tool calls.

Rows in ``audit_log`` never hold answers. Tool input is kept only as a
SHA-256 of its canonical JSON, and ``llm_disclosed`` marks the calls whose
answers left the process for an external notes provider.
"""

from __future__ import annotations

import hashlib
import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from healthprofiler.core.storage.database import DatabaseError, ProfileDatabase

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "timestamp",
    "action",
    "tool_name",
    "tool_input_hash",
    "llm_provider",
    "llm_disclosed",
    "profile_id",
    "duration_ms",
    "status",
    "error_type",
    "metadata_json",
)

_INSERT_SQL = "INSERT INTO audit_log ({}) VALUES ({})".format(
    ", ".join(_COLUMNS), ", ".join("?" for _ in _COLUMNS)
)


def _hash_input(data: Any) -> str:
    """SHA-256 of canonical JSON, or "" when the data is not serializable."""
    try:
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        return ""
    return hashlib.sha256(canonical.encode()).hexdigest()


@dataclass
class AuditEvent:
    action: str                          # 'tool_invocation'
    tool_name: str = ""
    tool_input_hash: str = ""
    llm_provider: str | None = None
    llm_disclosed: bool = False
    profile_id: str | None = None
    duration_ms: float | None = None
    status: str = "success"              # 'success' | 'failure'
    error_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_row(self, event_id: str, timestamp: str) -> tuple[Any, ...]:
        return (
            event_id,
            timestamp,
            self.action,
            self.tool_name or None,
            self.tool_input_hash or None,
            self.llm_provider,
            int(self.llm_disclosed),
            self.profile_id,
            self.duration_ms,
            self.status,
            self.error_type,
            json.dumps(self.metadata, separators=(",", ":")) if self.metadata else None,
        )


class AuditLogger:
    """Writes AuditEvents to the profile database.

    A failed write is logged and dropped; auditing never breaks the tool
    call it describes.
    """

    def __init__(self, database: ProfileDatabase) -> None:
        self._db = database

    def log_event(self, event: AuditEvent) -> str:
        """Insert ``event`` and return its id, or "" when the write failed."""
        event_id = str(uuid.uuid4())
        row = event.to_row(event_id, datetime.now(timezone.utc).isoformat())
        try:
            conn = self._db.connection
            conn.execute(_INSERT_SQL, row)
            conn.commit()
        except (sqlite3.Error, DatabaseError):
            logger.exception("Failed to write audit event for %s", event.tool_name or event.action)
            return ""
        return event_id

    def log_tool_call(
        self,
        tool_name: str,
        tool_input: Any = None,
        *,
        llm_provider: str | None = None,
        llm_disclosed: bool = False,
        profile_id: str | None = None,
        duration_ms: float | None = None,
        status: str = "success",
        error_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Record one tool invocation.

        Args:
            tool_name: Name of the MCP tool.
            tool_input: Tool arguments; hashed, never stored.
            llm_provider: Notes provider used for the call, if any.
            llm_disclosed: Whether answers were sent to an external LLM.
            profile_id: Profile produced by, or referred to by, the call.
            duration_ms: Wall time of the call.
            status: 'success' or 'failure'.
            error_type: Exception class name on failure.
            metadata: Extra counters or flags. Must not contain answers.
        """
        return self.log_event(AuditEvent(
            action="tool_invocation",
            tool_name=tool_name,
            tool_input_hash=_hash_input(tool_input) if tool_input else "",
            llm_provider=llm_provider,
            llm_disclosed=llm_disclosed,
            profile_id=profile_id,
            duration_ms=duration_ms,
            status=status,
            error_type=error_type,
            metadata=metadata or {},
        ))

    def get_events(
        self,
        *,
        tool_name: str | None = None,
        since: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Audit rows, newest first, optionally filtered by tool and ISO timestamp."""
        clauses = []
        params: list[Any] = []
        if tool_name:
            clauses.append("tool_name = ?")
            params.append(tool_name)
        if since:
            clauses.append("timestamp >= ?")
            params.append(since)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)
        rows = self._db.connection.execute(
            f"SELECT * FROM audit_log{where} ORDER BY timestamp DESC LIMIT ?", params
        ).fetchall()
        return [dict(row) for row in rows]

    def tool_summary(self) -> dict[str, dict[str, int]]:
        """Per-tool call and failure counts."""
        rows = self._db.connection.execute(
            """SELECT tool_name,
                      COUNT(*) AS calls,
                      SUM(CASE WHEN status = 'failure' THEN 1 ELSE 0 END) AS failures
               FROM audit_log
               WHERE tool_name IS NOT NULL
               GROUP BY tool_name
               ORDER BY tool_name"""
        ).fetchall()
        return {
            row["tool_name"]: {"calls": row["calls"], "failures": row["failures"]}
            for row in rows
        }

    def count_events(self) -> int:
        return self._db.connection.execute("SELECT COUNT(*) FROM audit_log").fetchone()[0]

    def count_disclosures(self) -> int:
        return self._db.connection.execute(
            "SELECT COUNT(*) FROM audit_log WHERE llm_disclosed = 1"
        ).fetchone()[0]
