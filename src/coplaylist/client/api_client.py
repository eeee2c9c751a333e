"""Typed async HTTP client for the co-playlist API, used by participant and admin UIs."""

import logging
from typing import Any

import httpx

from coplaylist.client.ledger import VoteLedger
from coplaylist.constants import DEFAULT_REQUEST_TIMEOUT, VoteAction
from coplaylist.spotify.models import TrackRef

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the co-playlist API returns a non-2xx response."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API error {status_code}: {detail}")


def build_auth_headers(admin_password: str = "") -> dict[str, str]:
    """Authorization header for admin-only endpoints."""
    if admin_password:
        return {"Authorization": f"Bearer {admin_password}"}
    return {}


class CoPlaylistClient:
    """Async HTTP client wrapping the co-playlist endpoints.

    Votes go through the local :class:`VoteLedger`: a second vote on the same
    track from this client is not sent.
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_id: str = "anonymous",
        ledger: VoteLedger | None = None,
        admin_password: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_id = user_id
        self.ledger = ledger or VoteLedger()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=build_auth_headers(admin_password),
            timeout=DEFAULT_REQUEST_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "CoPlaylistClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Make an API request and return JSON response."""
        response = await self._client.request(method, path, **kwargs)
        if response.status_code >= 400:
            detail = response.text
            try:
                body = response.json()
                detail = body.get("detail", detail)
            except ValueError:
                pass
            raise ApiError(response.status_code, str(detail))
        return response.json()  # type: ignore[no-any-return]

    # --- Leaderboard ---

    async def get_leaderboard(self) -> dict[str, Any]:
        """GET /api/leaderboard — ``{"list": [...], "initialized": bool}``."""
        return await self._request("GET", "/api/leaderboard")

    async def initialize_leaderboard(self) -> dict[str, Any]:
        return await self._request("POST", "/api/leaderboard")

    async def reset_leaderboard(self) -> dict[str, Any]:
        return await self._request("POST", "/api/leaderboard/reset")

    async def add_track(self, track: TrackRef | dict[str, Any]) -> dict[str, Any]:
        """POST /api/leaderboard/add — adds the track, or counts one more vote if present."""
        payload = track.model_dump(mode="json", exclude_unset=True) if isinstance(track, TrackRef) else track
        return await self._request("POST", "/api/leaderboard/add", json={"track": payload})

    async def remove_track(self, track_id: str) -> dict[str, Any]:
        return await self._request("POST", "/api/leaderboard/remove", json={"id": track_id})

    async def vote(self, track_id: str, action: VoteAction | str) -> dict[str, Any] | None:
        """Vote once per track. Returns ``None`` without calling the API on a repeat vote."""
        action = VoteAction(action)
        if self.ledger.has_voted(track_id):
            logger.info("Already voted on %s, not sending", track_id)
            return None
        status = await self._request("POST", "/api/leaderboard/vote", json={"id": track_id, "action": action})
        self.ledger.record_vote(track_id, action)
        await self.log_action("vote", {"trackId": track_id, "voteType": action.value})
        return status

    async def retract_vote(self, track_id: str) -> dict[str, Any] | None:
        """Undo this client's vote by sending the opposite action."""
        previous = self.ledger.get_vote_for_track(track_id)
        if previous is None:
            return None
        opposite = VoteAction.DECREMENT if previous == VoteAction.INCREMENT else VoteAction.INCREMENT
        status = await self._request("POST", "/api/leaderboard/vote", json={"id": track_id, "action": opposite})
        self.ledger.remove_vote(track_id)
        return status

    async def add_votes(self, track_id: str, votes: int) -> dict[str, Any]:
        return await self._request("POST", "/api/leaderboard/vote/add", json={"trackId": track_id, "votes": votes})

    # --- Current song ---

    async def get_current_song(self) -> dict[str, Any]:
        return await self._request("GET", "/api/currentSong")

    async def set_current_song(
        self,
        song: TrackRef | dict[str, Any],
        progress_ms: int = 0,
        is_playing: bool = True,
    ) -> dict[str, Any]:
        payload = song.model_dump(mode="json", exclude_unset=True) if isinstance(song, TrackRef) else song
        return await self._request(
            "POST",
            "/api/currentSong",
            json={"song": payload, "progress_ms": progress_ms, "is_playing": is_playing},
        )

    async def update_current_song(
        self,
        progress_ms: int | None = None,
        is_playing: bool | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if progress_ms is not None:
            body["progress_ms"] = progress_ms
        if is_playing is not None:
            body["is_playing"] = is_playing
        return await self._request("PATCH", "/api/currentSong", json=body)

    async def clear_current_song(self) -> dict[str, Any]:
        return await self._request("DELETE", "/api/currentSong")

    async def sync_current_song(self) -> dict[str, Any]:
        """POST /api/currentSong/sync — pull now-playing from the admin's Spotify."""
        return await self._request("POST", "/api/currentSong/sync")

    # --- Session ---

    async def get_session(self) -> dict[str, Any]:
        return await self._request("GET", "/api/session")

    async def set_session(self, active: bool) -> dict[str, Any]:
        return await self._request("POST", "/api/session", json={"session": "active" if active else "inactive"})

    async def get_session_type(self) -> dict[str, Any]:
        return await self._request("GET", "/api/session/type")

    async def set_session_type(self, session_type: str) -> dict[str, Any]:
        return await self._request("POST", "/api/session/type", json={"sessionType": session_type})

    async def clear_session_type(self) -> dict[str, Any]:
        return await self._request("DELETE", "/api/session/type")

    # --- Admin ---

    async def get_admin_token(self) -> str:
        """The shared Spotify token, ``""`` when the admin has not provided one."""
        body = await self._request("GET", "/api/admin-token")
        return str(body.get("token", ""))

    async def set_admin_token(self, token: str) -> dict[str, Any]:
        return await self._request("POST", "/api/admin-token", json={"token": token})

    async def clear_admin_token(self) -> dict[str, Any]:
        return await self._request("DELETE", "/api/admin-token")

    async def verify_admin_password(self, password: str) -> bool:
        body = await self._request("POST", "/api/admin/verify", json={"password": password})
        return bool(body.get("success"))

    async def get_logs(
        self,
        log_format: str = "stats",
        user_id: str | None = None,
        limit: int = 100,
    ) -> dict[str, Any]:
        """GET /api/admin/logs — needs the admin password."""
        params: dict[str, Any] = {"format": log_format, "limit": limit}
        if user_id:
            params["userId"] = user_id
        return await self._request("GET", "/api/admin/logs", params=params)

    async def clear_logs(self) -> dict[str, Any]:
        return await self._request("DELETE", "/api/admin/logs")

    # --- Genres ---

    async def get_genres(self) -> list[dict[str, Any]]:
        body = await self._request("GET", "/api/genreTracker")
        return list(body.get("genreTracker", []))

    async def add_genre_tags(self, top_tags: dict[str, Any]) -> dict[str, Any]:
        """POST a Last.fm ``track.gettoptags`` payload."""
        return await self._request("POST", "/api/genreTracker", json=top_tags)

    async def clear_genres(self) -> dict[str, Any]:
        return await self._request("DELETE", "/api/genreTracker")

    # --- Action log ---

    async def log_action(self, action: str, metadata: dict[str, Any] | None = None) -> bool:
        """Best-effort: failures are logged and reported as False."""
        try:
            await self._request(
                "POST",
                "/api/log-action",
                json={"userId": self._user_id, "action": action, "metadata": metadata or {}},
            )
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Failed to log action %s: %s", action, exc)
            return False
        return True
