"""Tests for TokenEncryptor."""

import pytest
from cryptography.fernet import Fernet, InvalidToken

from coplaylist.crypto import TokenEncryptor


def test_round_trip_with_key() -> None:
    encryptor = TokenEncryptor(Fernet.generate_key().decode())
    assert encryptor.enabled
    ciphertext = encryptor.encrypt("refresh-token")
    assert ciphertext != "refresh-token"
    assert encryptor.decrypt(ciphertext) == "refresh-token"


def test_pass_through_without_key() -> None:
    encryptor = TokenEncryptor()
    assert not encryptor.enabled
    assert encryptor.encrypt("plain") == "plain"
    assert encryptor.decrypt("plain") == "plain"


def test_wrong_key_raises() -> None:
    ciphertext = TokenEncryptor(Fernet.generate_key().decode()).encrypt("secret")
    with pytest.raises(InvalidToken):
        TokenEncryptor(Fernet.generate_key().decode()).decrypt(ciphertext)
