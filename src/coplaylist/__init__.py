"""Spotify co-playlist service."""
