"""Spotify PKCE login HTTP endpoints — class-based router."""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from coplaylist.admin.auth import require_admin
from coplaylist.auth import pkce
from coplaylist.auth.exceptions import InvalidStateError, SpotifyTokenError, TokenNotFoundError, TokenRefreshError
from coplaylist.auth.schemas import AdminAccessTokenResponse, AuthCallbackResponse, PendingLogin
from coplaylist.auth.tokens import AdminTokenManager
from coplaylist.constants import PKCE_VERIFIER_PREFIX
from coplaylist.dependencies import get_store
from coplaylist.settings import AppSettings, get_settings
from coplaylist.store.base import KeyValueStore

logger = logging.getLogger(__name__)


def get_token_manager(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> AdminTokenManager:
    """FastAPI dependency that provides an AdminTokenManager."""
    return AdminTokenManager(store, settings)


class AuthRouter:
    """Class-based router for the Spotify Authorization Code + PKCE flow."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("/login", self.login, methods=["GET"])
        self.router.add_api_route("/callback", self.callback, methods=["GET"], response_model=AuthCallbackResponse)
        self.router.add_api_route(
            "/token",
            self.admin_token,
            methods=["GET"],
            response_model=AdminAccessTokenResponse,
            dependencies=[Depends(require_admin)],
        )

    async def login(
        self,
        store: Annotated[KeyValueStore, Depends(get_store)],
        settings: Annotated[AppSettings, Depends(get_settings)],
        admin: Annotated[bool, Query(description="Store the resulting tokens as the admin's")] = False,
    ) -> RedirectResponse:
        """Redirect to Spotify's authorize page with a fresh PKCE challenge.

        The verifier stays server-side under ``pkce_verifier:<state>`` until
        the callback or ``OAUTH_STATE_TTL_SECONDS`` elapses.
        """
        if not settings.SPOTIFY_CLIENT_ID:
            raise HTTPException(status_code=500, detail="SPOTIFY_CLIENT_ID not configured")

        verifier = pkce.generate_code_verifier()
        state = secrets.token_urlsafe(16)
        pending = PendingLogin(verifier=verifier, admin=admin)
        await store.set(f"{PKCE_VERIFIER_PREFIX}{state}", pending.model_dump(), ex=settings.OAUTH_STATE_TTL_SECONDS)

        url = pkce.build_authorization_url(
            client_id=settings.SPOTIFY_CLIENT_ID,
            redirect_uri=settings.SPOTIFY_REDIRECT_URI,
            code_challenge=pkce.generate_code_challenge(verifier),
            state=state,
        )
        return RedirectResponse(url=url)

    async def callback(
        self,
        code: Annotated[str, Query()],
        state: Annotated[str, Query()],
        store: Annotated[KeyValueStore, Depends(get_store)],
        settings: Annotated[AppSettings, Depends(get_settings)],
        manager: Annotated[AdminTokenManager, Depends(get_token_manager)],
    ) -> AuthCallbackResponse:
        """Exchange the code using the stored verifier."""
        try:
            pending = await self._pop_pending_login(store, state)
        except InvalidStateError as exc:
            raise HTTPException(status_code=400, detail="Invalid or expired state parameter") from exc

        try:
            token_data = await pkce.exchange_code(
                code,
                pending.verifier,
                client_id=settings.SPOTIFY_CLIENT_ID,
                redirect_uri=settings.SPOTIFY_REDIRECT_URI,
            )
        except SpotifyTokenError as exc:
            raise HTTPException(status_code=502, detail=exc.detail) from exc

        if pending.admin:
            await manager.save(token_data)
            logger.info("Admin completed Spotify login")

        return AuthCallbackResponse(
            access_token=token_data.access_token,
            token_type=token_data.token_type,
            expires_in=token_data.expires_in,
            scope=token_data.scope,
            admin=pending.admin,
        )

    async def admin_token(
        self,
        manager: Annotated[AdminTokenManager, Depends(get_token_manager)],
    ) -> AdminAccessTokenResponse:
        """Valid admin access token, refreshed on demand."""
        try:
            return AdminAccessTokenResponse(access_token=await manager.get_valid_token())
        except TokenNotFoundError as exc:
            raise HTTPException(status_code=409, detail="Admin has not logged in to Spotify") from exc
        except TokenRefreshError as exc:
            raise HTTPException(status_code=502, detail=exc.detail) from exc

    @staticmethod
    async def _pop_pending_login(store: KeyValueStore, state: str) -> PendingLogin:
        """Load and delete the pending login for *state*; each state is single-use."""
        key = f"{PKCE_VERIFIER_PREFIX}{state}"
        raw = await store.get(key)
        if raw is None:
            raise InvalidStateError("Unknown or expired state")
        await store.delete(key)
        try:
            return PendingLogin.model_validate(raw)
        except ValidationError as exc:
            raise InvalidStateError("Malformed pending login") from exc


_instance = AuthRouter()
router = _instance.router
