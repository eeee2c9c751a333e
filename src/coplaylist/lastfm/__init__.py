"""Last.fm API client."""

from coplaylist.lastfm.client import LastFmClient

__all__ = ["LastFmClient"]
