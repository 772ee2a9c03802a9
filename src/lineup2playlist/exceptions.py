"""Exception classes for lineup2playlist.

Hierarchy:
    Lineup2PlaylistError (base)
        ConfigurationError - missing or invalid settings
        LineupError - lineup page could not be read
        SpotifyError - unexpected Spotify API responses
        PlaylistCacheError - unreadable playlist-id cache file

Network failures from spotipy and httpx are not wrapped while a playlist is
being reconciled; they propagate as-is to the caller of the run.
"""


class Lineup2PlaylistError(Exception):
    """Base exception for all lineup2playlist errors.

    Attributes:
        message: Human-readable error description.
        details: Optional context (playlist name, url, original error, ...).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(Lineup2PlaylistError):
    """Raised when settings are missing or invalid, before any sync starts."""


class LineupError(Lineup2PlaylistError):
    """Raised when a lineup page cannot be fetched or read."""


class SpotifyError(Lineup2PlaylistError):
    """Raised when Spotify answers with something we cannot use."""


class PlaylistCacheError(Lineup2PlaylistError):
    """Raised when the playlist-id cache file is corrupt."""
