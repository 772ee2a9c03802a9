"""Playlist reconciliation.

The engine talks to the outside world only through the protocols below;
``SpotifyClient`` implements all three, tests use in-memory fakes.
"""

from typing import Protocol, runtime_checkable

from ..models import TrackRef


@runtime_checkable
class ArtistResolver(Protocol):
    """Maps an artist name to a catalog artist ID."""

    def resolve_artist(self, name: str) -> str | None:
        """Return the artist ID for an exact, case-insensitive name match, or None."""
        ...


@runtime_checkable
class TopTrackProvider(Protocol):
    """Provides an artist's most popular tracks."""

    def top_tracks(self, artist_id: str, limit: int = 3) -> list[TrackRef]:
        """Return at most ``limit`` tracks, fewer if the artist has fewer."""
        ...


@runtime_checkable
class PlaylistStore(Protocol):
    """Reads and edits a playlist.

    ``add_tracks`` and ``remove_tracks`` each map to one request; callers
    keep batches within the service limit.
    """

    def list_tracks(self, playlist_id: str) -> list[TrackRef]:
        ...

    def add_tracks(self, playlist_id: str, tracks: list[TrackRef]) -> None:
        ...

    def remove_tracks(self, playlist_id: str, tracks: list[TrackRef]) -> None:
        ...

    def update_description(self, playlist_id: str, text: str) -> None:
        ...


from .desired import DesiredSetBuilder  # noqa: E402
from .engine import ReconciliationEngine, build_description  # noqa: E402

__all__ = [
    "ArtistResolver",
    "TopTrackProvider",
    "PlaylistStore",
    "DesiredSetBuilder",
    "ReconciliationEngine",
    "build_description",
]
