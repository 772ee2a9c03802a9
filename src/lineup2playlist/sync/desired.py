"""Turns a lineup roster into the set of tracks a playlist should hold."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..logging import get_logger
from ..models import DesiredSet, TrackRef

if TYPE_CHECKING:
    from . import ArtistResolver, TopTrackProvider

logger = get_logger(__name__)

TOP_TRACKS = 3


class DesiredSetBuilder:
    """Builds a DesiredSet from artist names.

    Every resolved artist contributes up to ``top_n`` of its top tracks.
    Tracks shared by several artists appear once. Artists that cannot be
    resolved, or whose lookup fails, are reported as missing and skipped.
    """

    def __init__(
        self,
        resolver: "ArtistResolver",
        tracks: "TopTrackProvider",
        top_n: int = TOP_TRACKS,
    ):
        """Initialize the builder.

        Args:
            resolver: Artist name -> artist ID lookup
            tracks: Artist ID -> top tracks lookup
            top_n: Tracks taken per artist

        Raises:
            ValueError: If top_n is smaller than 1
        """
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.resolver = resolver
        self.tracks = tracks
        self.top_n = top_n

    def build(self, names: Iterable[str]) -> DesiredSet:
        """Resolve every artist and collect their top tracks.

        Args:
            names: Roster names, possibly with duplicates or unknown artists

        Returns:
            DesiredSet with unique tracks and the names that were not found
        """
        seen_artists: set[str] = set()
        seen_uris: set[str] = set()
        tracks: list[TrackRef] = []
        missing: list[str] = []
        resolved = 0

        for raw_name in names:
            name = raw_name.strip()
            if not name or name.lower() in seen_artists:
                continue
            seen_artists.add(name.lower())

            try:
                artist_id = self.resolver.resolve_artist(name)
                if artist_id is None:
                    missing.append(name)
                    continue
                top = self.tracks.top_tracks(artist_id, limit=self.top_n)
            except Exception as e:
                logger.warning("artist_lookup_failed", artist=name, error=str(e))
                missing.append(name)
                continue

            resolved += 1
            for track in top[: self.top_n]:
                if track.uri not in seen_uris:
                    seen_uris.add(track.uri)
                    tracks.append(TrackRef(uri=track.uri))

            logger.debug("artist_tracks_collected", artist=name, count=len(top[: self.top_n]))

        logger.info(
            "desired_set_built",
            artists=len(seen_artists),
            resolved=resolved,
            missing=len(missing),
            tracks=len(tracks),
        )
        if seen_artists and not resolved:
            # An empty desired set empties the playlist on apply.
            logger.warning("no_artists_resolved", artists=len(seen_artists))

        return DesiredSet(tracks=tracks, missing_artists=missing, resolved_artists=resolved)
