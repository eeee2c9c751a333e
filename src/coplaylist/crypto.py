"""Optional Fernet encryption for tokens kept in the key-value store."""

from cryptography.fernet import Fernet


class TokenEncryptor:
    """Encrypts and decrypts tokens using Fernet symmetric encryption.

    Constructed with an empty key the encryptor is a pass-through, so a
    development setup can run without ``TOKEN_ENCRYPTION_KEY``.
    ``decrypt`` raises ``cryptography.fernet.InvalidToken`` when the
    ciphertext was produced with a different key or has been altered.
    """

    def __init__(self, key: str = "") -> None:
        self._fernet = Fernet(key.encode()) if key else None

    @property
    def enabled(self) -> bool:
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        if self._fernet is None:
            return plaintext
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        if self._fernet is None:
            return ciphertext
        return self._fernet.decrypt(ciphertext.encode()).decode()
