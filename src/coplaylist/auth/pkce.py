"""Authorization Code with PKCE helpers for Spotify (RFC 7636).

The service is a public client: no client secret is ever sent. The
verifier proves to Spotify's token endpoint that the party exchanging the
code is the one that started the login.
"""

import base64
import hashlib
import logging
import secrets
from urllib.parse import urlencode

import httpx

from coplaylist.auth.exceptions import SpotifyTokenError
from coplaylist.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    PKCE_ALPHABET,
    PKCE_VERIFIER_LENGTH,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_SCOPES,
    SPOTIFY_TOKEN_URL,
)
from coplaylist.spotify.models import SpotifyTokenResponse

logger = logging.getLogger(__name__)


def generate_code_verifier(length: int = PKCE_VERIFIER_LENGTH) -> str:
    """Random alphanumeric verifier; RFC 7636 allows 43 to 128 characters."""
    if not 43 <= length <= 128:
        raise ValueError(f"PKCE verifier length must be between 43 and 128, got {length}")
    return "".join(secrets.choice(PKCE_ALPHABET) for _ in range(length))


def generate_code_challenge(verifier: str) -> str:
    """S256 challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    code_challenge: str,
    state: str,
    scopes: str = SPOTIFY_SCOPES,
) -> str:
    """Build the Spotify authorize redirect URL for a PKCE login."""
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": scopes,
        "state": state,
        "code_challenge_method": "S256",
        "code_challenge": code_challenge,
    }
    return f"{SPOTIFY_AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(code: str, verifier: str, *, client_id: str, redirect_uri: str) -> SpotifyTokenResponse:
    """Exchange an authorization code for tokens.

    Raises:
        SpotifyTokenError: If Spotify rejects the exchange.
    """
    return await _post_token(
        "code exchange",
        {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": client_id,
            "code_verifier": verifier,
        },
    )


async def refresh_token(token: str, *, client_id: str) -> SpotifyTokenResponse:
    """Trade a refresh token for a new access token.

    Spotify may or may not rotate the refresh token; when it does not,
    ``refresh_token`` on the result is ``None``.

    Raises:
        SpotifyTokenError: If Spotify rejects the refresh.
    """
    return await _post_token(
        "token refresh",
        {"grant_type": "refresh_token", "refresh_token": token, "client_id": client_id},
    )


async def _post_token(action: str, data: dict[str, str]) -> SpotifyTokenResponse:
    async with httpx.AsyncClient(timeout=DEFAULT_REQUEST_TIMEOUT) as client:
        response = await client.post(
            SPOTIFY_TOKEN_URL,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    if response.status_code != 200:
        logger.warning("Spotify %s failed: HTTP %d", action, response.status_code)
        raise SpotifyTokenError(action, response.status_code, response.text[:200])
    return SpotifyTokenResponse.model_validate(response.json())
