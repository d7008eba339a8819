"""Tests for FieldEncryptor."""

from __future__ import annotations

import pytest
from cryptography.fernet import Fernet

from healthprofiler.core.storage.encryption import EncryptionError, FieldEncryptor


@pytest.fixture
def encryptor():
    return FieldEncryptor(Fernet.generate_key().decode())


class TestInit:
    @pytest.mark.parametrize("key", ["", "   ", " , "])
    def test_empty_key_rejected(self, key):
        with pytest.raises(EncryptionError, match="must not be empty"):
            FieldEncryptor(key)

    def test_invalid_key_rejected(self):
        with pytest.raises(EncryptionError, match="Invalid encryption key"):
            FieldEncryptor("not-a-fernet-key")

    def test_generate_key_is_usable(self):
        FieldEncryptor(FieldEncryptor.generate_key())

    def test_second_key_invalid(self):
        with pytest.raises(EncryptionError, match="#2"):
            FieldEncryptor(f"{Fernet.generate_key().decode()},bogus")

    def test_key_list_ignores_blanks(self):
        assert FieldEncryptor(f" {Fernet.generate_key().decode()} , ,").key_count == 1


class TestEncryptDecrypt:
    def test_round_trip(self, encryptor):
        data = {"answers": {"age": 42, "smoker": True}, "factors": ["smoking"]}
        token = encryptor.encrypt(data)
        assert "smoking" not in token
        assert encryptor.decrypt(token) == data

    def test_none_and_empty(self, encryptor):
        assert encryptor.encrypt(None) == ""
        assert encryptor.decrypt("") is None

    def test_unserializable_data(self, encryptor):
        with pytest.raises(EncryptionError, match="Encryption failed"):
            encryptor.encrypt({"bad": object()})

    def test_wrong_key(self, encryptor):
        token = encryptor.encrypt({"age": 42})
        other = FieldEncryptor(Fernet.generate_key().decode())
        with pytest.raises(EncryptionError, match="invalid token or wrong key"):
            other.decrypt(token)


class TestKeyRotation:
    def test_old_tokens_open_with_key_list(self):
        old_key = Fernet.generate_key().decode()
        new_key = Fernet.generate_key().decode()
        token = FieldEncryptor(old_key).encrypt({"age": 42})
        assert FieldEncryptor(f"{new_key},{old_key}").decrypt(token) == {"age": 42}

    def test_rotate_moves_token_to_primary_key(self):
        old_key = Fernet.generate_key().decode()
        new_key = Fernet.generate_key().decode()
        token = FieldEncryptor(old_key).encrypt({"age": 42})
        rotated = FieldEncryptor(f"{new_key},{old_key}").rotate(token)
        assert FieldEncryptor(new_key).decrypt(rotated) == {"age": 42}

    def test_rotate_unknown_token(self, encryptor):
        other = FieldEncryptor(Fernet.generate_key().decode())
        with pytest.raises(EncryptionError, match="Rotation failed"):
            encryptor.rotate(other.encrypt({"age": 42}))

    def test_rotate_empty(self, encryptor):
        assert encryptor.rotate("") == ""
