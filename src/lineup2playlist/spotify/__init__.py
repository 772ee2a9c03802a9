"""Spotify module initialization."""

from .client import SpotifyClient, playlist_url

__all__ = ["SpotifyClient", "playlist_url"]
