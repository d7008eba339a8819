"""Fernet encryption of stored profile payloads.

A profile's answers, scores and notes are sealed as one JSON token before
they reach SQLite. Only ``status`` and ``risk_level`` stay in clear text so
history can be filtered without decrypting every row.

``ENCRYPTION_KEY`` may hold several comma-separated keys. The first one
seals new payloads; every key can open old ones, so a key can be rotated
without a migration.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

logger = logging.getLogger(__name__)


class EncryptionError(Exception):
    """Raised when a payload cannot be sealed or opened."""


def _load_keys(key: str) -> list[Fernet]:
    parts = [part.strip() for part in (key or "").split(",")]
    parts = [part for part in parts if part]
    if not parts:
        raise EncryptionError("Encryption key must not be empty")
    fernets = []
    for index, part in enumerate(parts):
        try:
            fernets.append(Fernet(part.encode()))
        except (ValueError, TypeError) as exc:
            raise EncryptionError(f"Invalid encryption key #{index + 1}: {exc}") from exc
    return fernets


class FieldEncryptor:
    """Seals and opens JSON payloads.

    Usage::

        encryptor = FieldEncryptor(key="new-key,old-key")
        token = encryptor.encrypt({"age": 42})
        encryptor.decrypt(token)  # {"age": 42}
    """

    def __init__(self, key: str) -> None:
        keys = _load_keys(key)
        self.key_count = len(keys)
        self._fernet = MultiFernet(keys)

    def encrypt(self, data: Any) -> str:
        if data is None:
            return ""
        try:
            plaintext = json.dumps(data, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncryptionError(f"Encryption failed: {exc}") from exc
        return self._fernet.encrypt(plaintext).decode("utf-8")

    def decrypt(self, token: str) -> Any:
        """Open a token from :meth:`encrypt`; an empty token opens to None."""
        if not token:
            return None
        try:
            plaintext = self._fernet.decrypt(token.encode("utf-8"))
        except InvalidToken as exc:
            raise EncryptionError("Decryption failed: invalid token or wrong key") from exc
        try:
            return json.loads(plaintext)
        except ValueError as exc:
            raise EncryptionError(f"Decryption failed: {exc}") from exc

    def rotate(self, token: str) -> str:
        """Re-seal ``token`` under the primary key."""
        if not token:
            return ""
        try:
            return self._fernet.rotate(token.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise EncryptionError("Rotation failed: invalid token or wrong key") from exc

    @staticmethod
    def generate_key() -> str:
        return Fernet.generate_key().decode("utf-8")
