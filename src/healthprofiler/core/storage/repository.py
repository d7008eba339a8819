"""Profile repository: the encrypted SQLite implementation of ProfileStore.

Profiles are stored as Fernet-encrypted JSON payloads. Session weights
hold no answers, only factor labels and counts, and are stored as plain
JSON so they can be inspected and reset outside the server.
"""

from __future__ import annotations

import json
import logging

from healthprofiler.core.storage.database import ProfileDatabase
from healthprofiler.core.storage.encryption import EncryptionError, FieldEncryptor
from healthprofiler.core.storage.memory import DEFAULT_RETENTION
from healthprofiler.domains.lifestyle.domain_logic.models import (
    FullProfile,
    PersonalizationWeights,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when stored data cannot be read back."""


class SQLiteProfileStore:
    """ProfileStore backed by the SQLite data bank.

    Usage::

        db = ProfileDatabase(":memory:")
        db.initialize()
        store = SQLiteProfileStore(db, FieldEncryptor(key="..."))

        store.save_profile(profile)
        latest = store.list_profiles()[0]
    """

    def __init__(
        self,
        database: ProfileDatabase,
        encryptor: FieldEncryptor,
        retention: int = DEFAULT_RETENTION,
    ) -> None:
        if retention < 1:
            raise ValueError("retention must be at least 1")
        self._db = database
        self._enc = encryptor
        self._retention = retention

    @property
    def backend(self) -> str:
        return "sqlite"

    # ------------------------------------------------------------------
    # Session weights
    # ------------------------------------------------------------------

    def get_weights(self, session_id: str) -> PersonalizationWeights:
        conn = self._db.connection
        row = conn.execute(
            "SELECT weights_json FROM session_weights WHERE session_id = ?",
            (session_id,),
        ).fetchone()

        if row is None:
            weights = PersonalizationWeights()
            self.set_weights(session_id, weights)
            logger.debug("Created default weights for session %s", session_id)
            return weights

        try:
            return PersonalizationWeights.from_dict(json.loads(row["weights_json"]))
        except (ValueError, TypeError, AttributeError) as exc:
            raise StoreError(f"Corrupt weights for session {session_id!r}: {exc}") from exc

    def set_weights(self, session_id: str, weights: PersonalizationWeights) -> None:
        conn = self._db.connection
        conn.execute(
            """INSERT INTO session_weights (session_id, weights_json, updated_at)
               VALUES (?, ?, datetime('now'))
               ON CONFLICT(session_id) DO UPDATE SET
                   weights_json = excluded.weights_json,
                   updated_at = excluded.updated_at""",
            (session_id, json.dumps(weights.to_dict(), separators=(",", ":"))),
        )
        conn.commit()

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def save_profile(self, profile: FullProfile) -> None:
        """Insert a profile and prune anything beyond the retention limit."""
        conn = self._db.connection
        conn.execute(
            """INSERT INTO profiles (id, created_at, status, risk_level, payload_enc)
               VALUES (?, ?, ?, ?, ?)""",
            (
                profile.id,
                profile.created_at,
                profile.parse.status,
                profile.risk.risk_level if profile.risk else None,
                self._enc.encrypt(profile.to_dict()),
            ),
        )
        # rowid reflects insertion order, which defines "most recent"
        pruned = conn.execute(
            """DELETE FROM profiles WHERE id NOT IN (
                   SELECT id FROM profiles ORDER BY rowid DESC LIMIT ?
               )""",
            (self._retention,),
        ).rowcount
        conn.commit()
        logger.info("Saved profile %s (status=%s)", profile.id, profile.parse.status)
        if pruned:
            logger.info("Pruned %d profiles beyond retention limit %d", pruned, self._retention)

    def list_profiles(self) -> list[FullProfile]:
        rows = self._db.connection.execute(
            "SELECT id, payload_enc FROM profiles ORDER BY rowid DESC LIMIT ?",
            (self._retention,),
        ).fetchall()
        return [self._row_to_profile(row) for row in rows]

    def count_profiles(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM profiles").fetchone()
        return row[0]

    def get_profile(self, profile_id: str) -> FullProfile | None:
        row = self._db.connection.execute(
            "SELECT id, payload_enc FROM profiles WHERE id = ?", (profile_id,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_profile(row)

    def rotate_keys(self) -> int:
        """Re-seal every stored payload under the primary encryption key."""
        conn = self._db.connection
        rows = conn.execute("SELECT id, payload_enc FROM profiles").fetchall()
        for row in rows:
            try:
                token = self._enc.rotate(row["payload_enc"])
            except EncryptionError as exc:
                raise StoreError(f"Cannot rotate profile {row['id']}: {exc}") from exc
            conn.execute("UPDATE profiles SET payload_enc = ? WHERE id = ?", (token, row["id"]))
        conn.commit()
        logger.info("Rotated encryption key for %d profiles", len(rows))
        return len(rows)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _row_to_profile(self, row) -> FullProfile:
        try:
            payload = self._enc.decrypt(row["payload_enc"])
            return FullProfile.from_dict(payload)
        except EncryptionError as exc:
            raise StoreError(f"Cannot decrypt profile {row['id']}: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"Corrupt profile payload {row['id']}: {exc}") from exc
