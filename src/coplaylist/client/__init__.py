"""Client-side helpers: the local vote ledger and a typed API client."""

from coplaylist.client.api_client import ApiError, CoPlaylistClient
from coplaylist.client.ledger import VoteLedger

__all__ = ["ApiError", "CoPlaylistClient", "VoteLedger"]
