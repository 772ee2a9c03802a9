"""Pydantic data models for lineup2playlist.

Track identity is the Spotify URI: two TrackRefs are the same track when
their URIs match exactly, wherever they came from.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TrackRef(BaseModel):
    """A track identified by its Spotify URI."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="Spotify track URI, e.g. spotify:track:<id>")
    position: int | None = Field(
        default=None, description="Index of the owning playlist entry, if the track is in a playlist"
    )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrackRef):
            return NotImplemented
        return self.uri == other.uri

    def __hash__(self) -> int:
        return hash(self.uri)


class DesiredSet(BaseModel):
    """Tracks a playlist should contain, built fresh on every run."""

    tracks: list[TrackRef] = Field(default_factory=list, description="Unique by URI, first-seen order")
    missing_artists: list[str] = Field(
        default_factory=list, description="Roster names that could not be resolved"
    )
    resolved_artists: int = Field(default=0, description="Number of artists found in the catalog")

    @property
    def uris(self) -> set[str]:
        return {t.uri for t in self.tracks}


class Diff(BaseModel):
    """Edit turning a playlist's current tracks into the desired ones."""

    to_add: list[TrackRef] = Field(default_factory=list)
    to_remove: list[TrackRef] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


class SyncState(str, Enum):
    """Steps of a single reconciliation run."""

    IDLE = "idle"
    READING_CURRENT = "reading_current"
    BUILDING_DESIRED = "building_desired"
    DIFFING = "diffing"
    REMOVING = "removing"
    ADDING = "adding"
    UPDATING_METADATA = "updating_metadata"
    DONE = "done"
    FAILED = "failed"


class SyncResult(BaseModel):
    """Outcome of syncing one playlist."""

    playlist_name: str = Field(description="Configured playlist name")
    playlist_id: str | None = Field(default=None, description="Spotify playlist ID")
    playlist_url: str | None = Field(default=None, description="Spotify playlist URL")

    added: int = Field(default=0, description="Tracks added to the playlist")
    removed: int = Field(default=0, description="Tracks removed from the playlist")
    unchanged: int = Field(default=0, description="Tracks already present and still wanted")
    missing_artists: list[str] = Field(default_factory=list)

    state: SyncState = SyncState.IDLE
    error: str | None = Field(default=None, description="Error message for failed runs")

    @property
    def ok(self) -> bool:
        return self.state == SyncState.DONE
