"""Reconciliation engine.

Compares the tracks a playlist should hold with what it holds now and
applies the minimal edit: remove what is no longer wanted, then add what
is missing. Tracks present on both sides are never touched, so a second
run against a synchronized playlist issues no writes at all.

Writes are issued one batch at a time. A failure stops the run where it
is; batches already applied stay applied and the next run recomputes
everything from scratch.
"""

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from ..batching import BATCH_SIZE, iter_batches
from ..logging import get_logger
from ..models import Diff, SyncResult, SyncState, TrackRef

if TYPE_CHECKING:
    from . import PlaylistStore
    from .desired import DesiredSetBuilder

logger = get_logger(__name__)

DESCRIPTION_MAX_LENGTH = 300


def build_description(
    missing_artists: Sequence[str] = (),
    source: str | None = None,
    now: datetime | None = None,
) -> str:
    """Human-readable playlist description with the sync timestamp.

    Spotify rejects descriptions longer than 300 characters, so the list of
    missing artists is cut short with an ellipsis when needed.
    """
    now = now or datetime.now()
    origin = f"the lineup at {source}" if source else "the festival lineup"
    text = (
        f"Generated from {origin} - last updated: {now:%Y-%m-%d %H:%M}. "
        "Artist names are matched exactly on Spotify, so some artists may be "
        "missing or mixed up with someone else."
    )
    if missing_artists:
        text += f" Missing artists: {', '.join(missing_artists)}"

    if len(text) > DESCRIPTION_MAX_LENGTH:
        text = text[: DESCRIPTION_MAX_LENGTH - 3].rstrip(" ,") + "..."
    return text


class ReconciliationEngine:
    """Brings a playlist's track set in line with a desired track set."""

    def __init__(
        self,
        store: "PlaylistStore",
        builder: "DesiredSetBuilder",
        batch_size: int = BATCH_SIZE,
    ):
        """Initialize the engine.

        Args:
            store: Playlist reads and writes
            builder: Roster -> desired tracks
            batch_size: Maximum tracks per add/remove request

        Raises:
            ValueError: If batch_size is smaller than 1
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.store = store
        self.builder = builder
        self.batch_size = batch_size
        self.state = SyncState.IDLE

    def _transition(self, state: SyncState, **context) -> None:
        logger.debug("state_changed", previous=self.state.value, state=state.value, **context)
        self.state = state

    @staticmethod
    def diff(current: Iterable[TrackRef], desired: Iterable[TrackRef]) -> Diff:
        """Compute the edit turning ``current`` into ``desired``.

        Tracks are compared by URI. Both result lists keep input order and
        hold each URI once.
        """
        current = list(current)
        desired = list(desired)
        current_uris = {t.uri for t in current}
        desired_uris = {t.uri for t in desired}

        # Adding a handled URI to the other side's set drops repeats.
        to_remove: list[TrackRef] = []
        for track in current:
            if track.uri not in desired_uris:
                desired_uris.add(track.uri)
                to_remove.append(track)

        to_add: list[TrackRef] = []
        for track in desired:
            if track.uri not in current_uris:
                current_uris.add(track.uri)
                to_add.append(track)

        return Diff(to_add=to_add, to_remove=to_remove)

    def _apply_batches(
        self,
        playlist_id: str,
        tracks: Sequence[TrackRef],
        write: Callable[[str, list[TrackRef]], None],
        action: str,
    ) -> int:
        applied = 0
        for batch_num, batch in enumerate(iter_batches(tracks, self.batch_size), 1):
            write(playlist_id, batch)
            applied += len(batch)
            logger.debug(
                "batch_applied",
                action=action,
                playlist_id=playlist_id,
                batch_num=batch_num,
                count=len(batch),
            )
        return applied

    def apply(
        self,
        playlist_id: str,
        to_remove: Sequence[TrackRef],
        to_add: Sequence[TrackRef],
    ) -> None:
        """Remove, then add, in batches of at most ``batch_size`` tracks.

        Exactly ``ceil(n / batch_size)`` store calls are made per list and
        none for an empty list.
        """
        self._transition(SyncState.REMOVING, count=len(to_remove))
        removed = self._apply_batches(playlist_id, to_remove, self.store.remove_tracks, "remove")
        if removed:
            logger.info("tracks_removed", playlist_id=playlist_id, count=removed)

        self._transition(SyncState.ADDING, count=len(to_add))
        added = self._apply_batches(playlist_id, to_add, self.store.add_tracks, "add")
        if added:
            logger.info("tracks_added", playlist_id=playlist_id, count=added)

    def update_metadata(
        self,
        playlist_id: str,
        missing_artists: Sequence[str] = (),
        source: str | None = None,
        now: datetime | None = None,
    ) -> str:
        """Write the sync summary into the playlist description."""
        self._transition(SyncState.UPDATING_METADATA)
        text = build_description(missing_artists, source=source, now=now)
        self.store.update_description(playlist_id, text)
        return text

    def run(
        self,
        playlist_id: str,
        names: Iterable[str],
        playlist_name: str | None = None,
        source: str | None = None,
    ) -> SyncResult:
        """Synchronize a playlist with the tracks of the given artists.

        Args:
            playlist_id: Playlist to reconcile
            names: Artist roster
            playlist_name: Name reported in the result
            source: Lineup location mentioned in the description

        Returns:
            SyncResult describing the applied edit

        Raises:
            Any error from the store or the builder; the engine is left in
            the FAILED state and applied batches are not rolled back.
        """
        self.state = SyncState.IDLE
        log = logger.bind(playlist_id=playlist_id)
        try:
            self._transition(SyncState.READING_CURRENT)
            current = self.store.list_tracks(playlist_id)
            log.info("current_tracks_read", count=len(current))

            self._transition(SyncState.BUILDING_DESIRED)
            desired = self.builder.build(names)

            self._transition(SyncState.DIFFING)
            diff = self.diff(current, desired.tracks)
            unchanged = len({t.uri for t in current} & desired.uris)
            log.info(
                "diff_computed",
                to_remove=len(diff.to_remove),
                to_add=len(diff.to_add),
                unchanged=unchanged,
            )

            self.apply(playlist_id, diff.to_remove, diff.to_add)
            self.update_metadata(playlist_id, desired.missing_artists, source=source)
        except Exception as e:
            failed_step = self.state
            self._transition(SyncState.FAILED)
            log.error("reconciliation_failed", step=failed_step.value, error=str(e))
            raise

        self._transition(SyncState.DONE)
        log.info("reconciliation_complete")

        return SyncResult(
            playlist_name=playlist_name or playlist_id,
            playlist_id=playlist_id,
            added=len(diff.to_add),
            removed=len(diff.to_remove),
            unchanged=unchanged,
            missing_artists=desired.missing_artists,
            state=SyncState.DONE,
        )
