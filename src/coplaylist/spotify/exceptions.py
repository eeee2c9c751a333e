"""Spotify API client exceptions."""


class SpotifyClientError(Exception):
    """Base exception for Spotify client errors."""


class SpotifyAuthError(SpotifyClientError):
    """Spotify rejected the admin's access token and no refresh resolved it."""


class SpotifyRateLimitError(SpotifyClientError):
    """Spotify kept answering 429 until retries ran out."""

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        suffix = f" (retry-after: {retry_after}s)" if retry_after is not None else ""
        super().__init__(f"Spotify rate limit exceeded{suffix}")


class SpotifyStatusError(SpotifyClientError):
    """Spotify answered with an unexpected HTTP status."""

    kind = "status"

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"Spotify {self.kind} error: HTTP {status_code}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class SpotifyServerError(SpotifyStatusError):
    """Spotify kept answering 5xx until retries ran out."""

    kind = "server"


class SpotifyRequestError(SpotifyStatusError):
    """Spotify refused the request with a non-retryable 4xx."""

    kind = "request"


class SpotifyNoActiveDeviceError(SpotifyRequestError):
    """Playback or queue call failed because the admin account has no active device."""

    def __init__(self, detail: str = "No active device") -> None:
        super().__init__(status_code=404, detail=detail)
