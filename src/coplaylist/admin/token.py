"""Admin bearer token storage, optionally Fernet-encrypted at rest."""

import logging

from cryptography.fernet import InvalidToken

from coplaylist.constants import StoreKeys
from coplaylist.crypto import TokenEncryptor
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)


class AdminTokenStore:
    """Holds the admin's Spotify access token so every participant can use it.

    With an *encryption_key* the token is written as Fernet ciphertext.
    Without one it is stored as plain text.
    """

    def __init__(self, store: KeyValueStore, encryption_key: str = "") -> None:
        self._store = store
        self._encryptor = TokenEncryptor(encryption_key)

    async def get(self) -> str:
        """Return the stored token, or ``""`` when unset or unreadable."""
        try:
            stored = await self._store.get(StoreKeys.ADMIN_TOKEN)
        except StoreError:
            logger.exception("Failed to read admin token")
            return ""
        if not stored or not isinstance(stored, str):
            return ""
        try:
            return self._encryptor.decrypt(stored)
        except InvalidToken:
            logger.warning("Stored admin token could not be decrypted; treating as unset")
            return ""

    async def set(self, token: str) -> str:
        """Store *token* and return the value read back."""
        await self._store.set(StoreKeys.ADMIN_TOKEN, self._encryptor.encrypt(token))
        logger.info("Admin token updated (%s...)", token[:5])
        return await self.get()

    async def clear(self) -> None:
        await self._store.delete(StoreKeys.ADMIN_TOKEN)
        logger.info("Admin token cleared")
