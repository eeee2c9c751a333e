"""Spotify Web API async client for search, queueing and playback control."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from coplaylist.constants import (
    CURRENTLY_PLAYING_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_BASE_DELAY,
    ME_URL,
    NEXT_URL,
    PAUSE_URL,
    PLAY_URL,
    QUEUE_URL,
    SEARCH_URL,
    TOP_TRACKS_URL,
)
from coplaylist.spotify.exceptions import (
    SpotifyAuthError,
    SpotifyNoActiveDeviceError,
    SpotifyRateLimitError,
    SpotifyRequestError,
    SpotifyServerError,
)
from coplaylist.spotify.models import (
    CurrentlyPlaying,
    SpotifyProfile,
    SpotifySearchResponse,
    TopTracksResponse,
    TrackRef,
)

logger = logging.getLogger(__name__)


class SpotifyClient:
    """Async Spotify Web API client.

    Takes an access token per instance. Retries 429 (honouring
    ``Retry-After``) and 5xx with exponential backoff, and calls the optional
    ``on_token_expired`` callback once on a 401 before giving up.
    """

    def __init__(
        self,
        access_token: str,
        *,
        on_token_expired: Callable[[], Awaitable[str]] | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._access_token = access_token
        self._on_token_expired = on_token_expired
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._request_timeout = request_timeout

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str | int] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, retrying 429/5xx and refreshing once on 401."""
        refreshed = False
        attempt = 0
        while True:
            response = await self._send(method, url, params=params, json_body=json_body)
            status = response.status_code
            if status < 300:
                return response

            if status == 401:
                if self._on_token_expired is None or refreshed:
                    raise SpotifyAuthError("Spotify returned 401 Unauthorized")
                refreshed = True
                logger.info("Spotify returned 401, refreshing admin token")
                self._access_token = await self._on_token_expired()
                continue

            if status != 429 and status < 500:
                raise self._request_error(response)

            delay = self._backoff(response, attempt)
            if attempt >= self._max_retries:
                if status == 429:
                    raise SpotifyRateLimitError(retry_after=delay)
                raise SpotifyServerError(status_code=status, detail="Max retries exhausted")

            attempt += 1
            logger.warning(
                "Spotify answered %d to %s %s, retry %d/%d in %.1fs",
                status,
                method,
                url,
                attempt,
                self._max_retries,
                delay,
            )
            await asyncio.sleep(delay)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str | int] | None,
        json_body: dict[str, Any] | None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._request_timeout) as client:
            return await client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Authorization": f"Bearer {self._access_token}"},
            )

    def _backoff(self, response: httpx.Response, attempt: int) -> float:
        """Seconds to wait: Spotify's ``Retry-After`` on 429, else exponential."""
        retry_after = response.headers.get("Retry-After")
        if response.status_code == 429 and retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass
        return self._retry_base_delay * (2**attempt)

    @staticmethod
    def _request_error(response: httpx.Response) -> SpotifyRequestError:
        detail = f"HTTP {response.status_code}"
        reason = None
        try:
            body = response.json()
        except ValueError:
            body = None
            if response.text:
                detail = response.text[:200]
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            detail = error.get("message") or detail
            reason = error.get("reason")
        elif isinstance(error, str):
            # Accounts-service style: {"error": "...", "error_description": "..."}
            detail = body.get("error_description") or error
        if response.status_code == 404 and reason == "NO_ACTIVE_DEVICE":
            return SpotifyNoActiveDeviceError(detail)
        return SpotifyRequestError(status_code=response.status_code, detail=detail)

    # -------------------------------------------------------------------
    # Profile and search
    # -------------------------------------------------------------------

    async def get_me(self) -> SpotifyProfile:
        """GET /me."""
        response = await self._request("GET", ME_URL)
        return SpotifyProfile.model_validate(response.json())

    async def search_tracks(self, query: str, *, limit: int = 5, offset: int = 0) -> list[TrackRef]:
        """GET /search?type=track — return the matching tracks."""
        response = await self._request(
            "GET",
            SEARCH_URL,
            params={"q": query, "type": "track", "limit": limit, "offset": offset},
        )
        result = SpotifySearchResponse.model_validate(response.json())
        return result.tracks.items if result.tracks else []

    async def get_top_tracks(
        self,
        *,
        time_range: str = "short_term",
        limit: int = 20,
        offset: int = 0,
    ) -> TopTracksResponse:
        """GET /me/top/tracks."""
        response = await self._request(
            "GET",
            TOP_TRACKS_URL,
            params={"time_range": time_range, "limit": limit, "offset": offset},
        )
        return TopTracksResponse.model_validate(response.json())

    async def get_favorite_track(self) -> TrackRef | None:
        """Return the user's single most-played track of the short term."""
        top = await self.get_top_tracks(limit=1)
        return top.items[0] if top.items else None

    # -------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------

    async def add_to_queue(self, uri: str) -> None:
        """POST /me/player/queue?uri=..."""
        await self._request("POST", QUEUE_URL, params={"uri": uri})
        logger.info("Queued %s on the admin's player", uri)

    async def get_currently_playing(self) -> CurrentlyPlaying | None:
        """GET /me/player/currently-playing — ``None`` when nothing is playing (204)."""
        response = await self._request("GET", CURRENTLY_PLAYING_URL)
        if response.status_code == 204 or not response.content:
            return None
        return CurrentlyPlaying.model_validate(response.json())

    async def play(self, uris: list[str] | None = None) -> None:
        """PUT /me/player/play — resume, or start the given tracks."""
        body = {"uris": uris} if uris else None
        await self._request("PUT", PLAY_URL, json_body=body)

    async def pause(self) -> None:
        """PUT /me/player/pause."""
        await self._request("PUT", PAUSE_URL)

    async def skip_to_next(self) -> None:
        """POST /me/player/next."""
        await self._request("POST", NEXT_URL)
