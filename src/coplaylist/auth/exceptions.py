"""Domain exceptions for the auth module."""


class OAuthError(Exception):
    """Base exception for OAuth errors."""


class InvalidStateError(OAuthError):
    """The callback's state parameter does not match a pending login."""


class SpotifyTokenError(OAuthError):
    """Spotify's token endpoint returned an error response."""

    def __init__(self, action: str, status_code: int, detail: str) -> None:
        self.action = action
        self.spotify_status_code = status_code
        self.detail = detail
        super().__init__(f"Spotify token error during {action}: HTTP {status_code} ({detail})")


class TokenNotFoundError(Exception):
    """The admin has not completed a Spotify login yet."""

    def __init__(self) -> None:
        super().__init__("No admin Spotify tokens stored")


class TokenRefreshError(Exception):
    """Failed to refresh the admin's Spotify access token."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Admin token refresh failed: {detail}")
