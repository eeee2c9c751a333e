"""Admin Spotify token lifecycle — storage and on-demand refresh."""

import logging
from datetime import UTC, datetime, timedelta

from cryptography.fernet import InvalidToken

from coplaylist.admin.token import AdminTokenStore
from coplaylist.auth import pkce
from coplaylist.auth.exceptions import SpotifyTokenError, TokenNotFoundError, TokenRefreshError
from coplaylist.constants import StoreKeys
from coplaylist.crypto import TokenEncryptor
from coplaylist.settings import AppSettings
from coplaylist.spotify.client import SpotifyClient
from coplaylist.spotify.models import SpotifyTokenResponse
from coplaylist.store.base import KeyValueStore

logger = logging.getLogger(__name__)

_REFRESH_LOCK = "lock:admin_spotify_tokens"


class AdminTokenManager:
    """Keeps the admin's Spotify access token fresh.

    The access token, the (encrypted) refresh token and the expiry are stored
    together under ``admin_spotify_tokens``. Every refresh also republishes
    the access token through :class:`AdminTokenStore`, which is what
    participants read from ``GET /api/admin-token``.

    Refreshing happens lazily in :meth:`get_valid_token`; nothing polls.
    """

    def __init__(self, store: KeyValueStore, settings: AppSettings) -> None:
        self._store = store
        self._settings = settings
        self._encryptor = TokenEncryptor(settings.TOKEN_ENCRYPTION_KEY)
        self._published = AdminTokenStore(store, encryption_key=settings.TOKEN_ENCRYPTION_KEY)

    async def save(self, token_data: SpotifyTokenResponse) -> str:
        """Persist a token response and publish its access token.

        Keeps the previous refresh token when Spotify did not rotate it.
        """
        refresh = token_data.refresh_token
        encrypted_refresh = self._encryptor.encrypt(refresh) if refresh else None
        if encrypted_refresh is None:
            previous = await self._store.get(StoreKeys.ADMIN_SPOTIFY_TOKENS)
            if isinstance(previous, dict):
                encrypted_refresh = previous.get("refresh_token")

        expires_at = datetime.now(UTC) + timedelta(seconds=token_data.expires_in)
        await self._store.set(
            StoreKeys.ADMIN_SPOTIFY_TOKENS,
            {
                "access_token": token_data.access_token,
                "refresh_token": encrypted_refresh,
                "expires_at": expires_at.isoformat(),
            },
        )
        await self._published.set(token_data.access_token)
        logger.info("Admin Spotify token stored, expires at %s", expires_at.isoformat())
        return token_data.access_token

    async def get_valid_token(self) -> str:
        """Return a valid access token, refreshing when inside the expiry buffer.

        Raises:
            TokenNotFoundError: If the admin has not logged in.
            TokenRefreshError: If the Spotify token endpoint returns an error.
        """
        record = await self._load()
        if self._is_fresh(record):
            return str(record["access_token"])
        return await self._refresh(force=False)

    async def refresh_access_token(self) -> str:
        """Force a refresh against Spotify's token endpoint.

        Raises:
            TokenNotFoundError: If the admin has not logged in.
            TokenRefreshError: If no refresh token is stored or Spotify refuses it.
        """
        return await self._refresh(force=True)

    async def _refresh(self, *, force: bool) -> str:
        # Unforced callers that waited on the lock reuse the token the first one obtained.
        async with self._store.lock(_REFRESH_LOCK):
            record = await self._load()
            if not force and self._is_fresh(record):
                return str(record["access_token"])

            encrypted_refresh = record.get("refresh_token")
            if not encrypted_refresh:
                raise TokenRefreshError("no refresh token stored")
            try:
                refresh = self._encryptor.decrypt(encrypted_refresh)
            except InvalidToken as exc:
                raise TokenRefreshError("stored refresh token could not be decrypted") from exc

            try:
                token_data = await pkce.refresh_token(refresh, client_id=self._settings.SPOTIFY_CLIENT_ID)
            except SpotifyTokenError as exc:
                raise TokenRefreshError(
                    f"Spotify returned HTTP {exc.spotify_status_code} during token refresh"
                ) from exc

            logger.info("Refreshed admin Spotify token")
            return await self.save(token_data)

    def spotify_client(self, access_token: str) -> SpotifyClient:
        """A SpotifyClient that refreshes through this manager on 401."""
        return SpotifyClient(access_token, on_token_expired=self.refresh_access_token)

    async def clear(self) -> None:
        await self._store.delete(StoreKeys.ADMIN_SPOTIFY_TOKENS)
        await self._published.clear()

    async def _load(self) -> dict:
        record = await self._store.get(StoreKeys.ADMIN_SPOTIFY_TOKENS)
        if not isinstance(record, dict):
            raise TokenNotFoundError()
        return record

    def _is_fresh(self, record: dict) -> bool:
        """True while the access token is valid beyond the expiry buffer."""
        expires_at = _parse_expiry(record.get("expires_at"))
        buffer = timedelta(seconds=self._settings.TOKEN_EXPIRY_BUFFER_SECONDS)
        return bool(record.get("access_token")) and expires_at is not None and expires_at > datetime.now(UTC) + buffer


def _parse_expiry(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
