"""Last.fm API async client for track tags, similar tracks and search.

Last.fm is best-effort enrichment: every failure (transport error, non-2xx,
or a 200 carrying Last.fm's ``{"error": ..., "message": ...}`` body) is
logged and reported as ``None``. Nothing is retried.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from coplaylist.constants import DEFAULT_REQUEST_TIMEOUT, LASTFM_API_URL
from coplaylist.lastfm.models import SimilarTrack, TrackSearchMatch, TrackTopTags

logger = logging.getLogger(__name__)


class LastFmClient:
    """Thin wrapper over the Last.fm 2.0 REST API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = LASTFM_API_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._request_timeout = request_timeout

    async def _call(self, method: str, **params: str | int) -> dict[str, Any] | None:
        query: dict[str, str | int] = {"method": method, "api_key": self._api_key, "format": "json", **params}
        try:
            async with httpx.AsyncClient(timeout=self._request_timeout) as client:
                response = await client.get(self._base_url, params=query)
        except httpx.HTTPError:
            logger.exception("Last.fm %s request failed", method)
            return None

        if response.status_code != 200:
            logger.warning("Last.fm %s returned HTTP %d", method, response.status_code)
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Last.fm %s returned a non-JSON body", method)
            return None
        if not isinstance(payload, dict):
            logger.warning("Last.fm %s returned an unexpected body", method)
            return None
        if "error" in payload:
            logger.warning("Last.fm %s error %s: %s", method, payload.get("error"), payload.get("message"))
            return None
        return payload

    async def get_track_tags(self, track: str, artist: str) -> TrackTopTags | None:
        """``track.gettoptags`` — the payload POST /api/genreTracker accepts."""
        payload = await self._call("track.gettoptags", track=track, artist=artist)
        if payload is None:
            return None
        try:
            return TrackTopTags.model_validate(payload)
        except ValidationError:
            logger.warning("Unexpected track.gettoptags payload for %s - %s", artist, track)
            return None

    async def get_similar_tracks(self, track: str, artist: str, limit: int = 5) -> list[SimilarTrack] | None:
        payload = await self._call("track.getsimilar", track=track, artist=artist, limit=limit)
        if payload is None:
            return None
        try:
            return [SimilarTrack.model_validate(item) for item in payload["similartracks"]["track"]]
        except (KeyError, TypeError, ValidationError):
            logger.warning("Unexpected track.getsimilar payload for %s - %s", artist, track)
            return None

    async def search_tracks(self, track: str, limit: int = 5) -> list[TrackSearchMatch] | None:
        payload = await self._call("track.search", track=track, limit=limit)
        if payload is None:
            return None
        try:
            matches = payload["results"]["trackmatches"]["track"]
            return [TrackSearchMatch.model_validate(item) for item in matches]
        except (KeyError, TypeError, ValidationError):
            logger.warning("Unexpected track.search payload for %s", track)
            return None

    async def get_track_info(self, track: str, artist: str) -> dict[str, Any] | None:
        """``track.getInfo`` — returned as the raw ``track`` object."""
        payload = await self._call("track.getInfo", track=track, artist=artist)
        if payload is None:
            return None
        info = payload.get("track")
        return info if isinstance(info, dict) else None
