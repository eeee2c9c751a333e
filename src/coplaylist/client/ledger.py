"""Per-device record of the tracks this user already voted on.

The ledger only keeps a well-behaved client from voting twice; it is not
a security boundary and the server never consults it.
"""

import logging
import time
from collections.abc import MutableMapping

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from coplaylist.constants import VoteAction

logger = logging.getLogger(__name__)

VOTE_STORAGE_KEY = "spotify_coplaylist_votes"


class VoteRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    track_id: str = Field(alias="trackId")
    action: VoteAction
    timestamp: int  # milliseconds since the epoch


_records = TypeAdapter(list[VoteRecord])


class VoteLedger:
    """One vote per track, persisted as JSON in a string-to-string mapping.

    The mapping plays the role of browser local storage; pass a persistent
    one (a ``shelve`` or ``dbm`` object, say) to survive restarts. Corrupt
    contents read as "no votes".
    """

    def __init__(self, storage: MutableMapping[str, str] | None = None, key: str = VOTE_STORAGE_KEY) -> None:
        self._storage: MutableMapping[str, str] = storage if storage is not None else {}
        self._key = key

    def get_votes(self) -> list[VoteRecord]:
        raw = self._storage.get(self._key)
        if not raw:
            return []
        try:
            return _records.validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring unreadable vote ledger under %s", self._key)
            return []

    def has_voted(self, track_id: str) -> bool:
        return any(vote.track_id == track_id for vote in self.get_votes())

    def get_vote_for_track(self, track_id: str) -> VoteAction | None:
        for vote in self.get_votes():
            if vote.track_id == track_id:
                return vote.action
        return None

    def record_vote(self, track_id: str, action: VoteAction | str) -> bool:
        """Remember a vote. Returns False, changing nothing, if one is already recorded."""
        votes = self.get_votes()
        if any(vote.track_id == track_id for vote in votes):
            return False
        votes.append(VoteRecord(track_id=track_id, action=VoteAction(action), timestamp=int(time.time() * 1000)))
        self._save(votes)
        return True

    def remove_vote(self, track_id: str) -> bool:
        """Forget the vote for *track_id*. Returns whether there was one."""
        votes = self.get_votes()
        remaining = [vote for vote in votes if vote.track_id != track_id]
        if len(remaining) == len(votes):
            return False
        self._save(remaining)
        return True

    def clear(self) -> None:
        self._storage.pop(self._key, None)

    def _save(self, votes: list[VoteRecord]) -> None:
        self._storage[self._key] = _records.dump_json(votes, by_alias=True).decode()
