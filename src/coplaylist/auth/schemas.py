"""Pydantic schemas for auth endpoints."""

from pydantic import BaseModel


class PendingLogin(BaseModel):
    """Stored under ``pkce_verifier:<state>`` between /auth/login and /auth/callback."""

    verifier: str
    admin: bool = False


class AuthCallbackResponse(BaseModel):
    """Tokens handed back to the browser after a successful login."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    scope: str | None = None
    admin: bool = False


class AdminAccessTokenResponse(BaseModel):
    access_token: str
