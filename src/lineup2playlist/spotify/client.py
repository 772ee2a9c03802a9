"""Spotify API client for playlist reconciliation.

Handles:
- OAuth authentication with token caching
- Exact-name artist lookup and top tracks
- Paginated playlist reads and item add/remove calls
- Playlist creation and description updates

API errors are not caught here; they propagate to whoever drives the sync.
"""

from pathlib import Path
from typing import Any

import spotipy
from spotipy.oauth2 import SpotifyOAuth

from ..batching import PAGE_SIZE, paginate
from ..exceptions import SpotifyError
from ..logging import get_logger
from ..models import TrackRef

logger = get_logger(__name__)

LOCAL_URI_PREFIX = "spotify:local:"


class SpotifyClient:
    """Spotify API client for lineup2playlist.

    Wraps spotipy and implements the artist resolver, top track provider
    and playlist store interfaces used by the sync engine.
    """

    SCOPE = "playlist-read-private playlist-modify-public playlist-modify-private"
    SEARCH_LIMIT = 10

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str = "http://127.0.0.1:8888/callback",
        cache_path: Path | None = None,
        market: str = "DE",
        client: spotipy.Spotify | None = None,
    ):
        """Initialize the Spotify client.

        Args:
            client_id: Spotify application client ID
            client_secret: Spotify application client secret
            redirect_uri: OAuth redirect URI
            cache_path: Path for token cache file
            market: Market used for top tracks
            client: Preconfigured spotipy client (skips OAuth setup)
        """
        self.market = market

        if client is None:
            auth_manager = SpotifyOAuth(
                client_id=client_id,
                client_secret=client_secret,
                redirect_uri=redirect_uri,
                scope=self.SCOPE,
                cache_path=str(cache_path) if cache_path else None,
                open_browser=True,
            )
            client = spotipy.Spotify(auth_manager=auth_manager)

        self._client = client
        self._user_id: str | None = None

        logger.info("spotify_client_initialized", market=market)

    @property
    def user_id(self) -> str:
        """Get the current user's Spotify ID."""
        if not self._user_id:
            user = self._client.current_user()
            self._user_id = user["id"]
            logger.info("spotify_user_authenticated", user_id=self._user_id)
        return self._user_id

    # Artist resolution
    def resolve_artist(self, name: str) -> str | None:
        """Find the Spotify ID of the artist called exactly ``name``.

        Matching ignores case and surrounding whitespace only; a search
        result with a different name is not accepted.

        Returns:
            Spotify artist ID, or None if there is no exact match
        """
        wanted = name.strip()
        results = self._client.search(q=wanted, type="artist", limit=self.SEARCH_LIMIT)
        candidates = results.get("artists", {}).get("items", [])

        for artist in candidates:
            if artist.get("name", "").strip().lower() == wanted.lower():
                return artist["id"]

        logger.warning(
            "artist_not_found",
            artist=wanted,
            candidates=[a.get("name") for a in candidates],
        )
        return None

    def top_tracks(self, artist_id: str, limit: int = 3) -> list[TrackRef]:
        """Get the first ``limit`` of an artist's top tracks."""
        results = self._client.artist_top_tracks(artist_id, country=self.market)
        tracks = [t for t in results.get("tracks", []) if t and t.get("uri")]
        return [TrackRef(uri=t["uri"]) for t in tracks[:limit]]

    # Playlist store
    def list_tracks(self, playlist_id: str) -> list[TrackRef]:
        """Get every track currently in a playlist, following pagination.

        Unavailable entries (no track object) and local files are skipped
        but still count for positions; Spotify rejects local URIs in edits.
        """

        def fetch_page(offset: int, limit: int) -> dict[str, Any]:
            return self._client.playlist_items(
                playlist_id,
                fields="items(is_local,track(uri)),total,next",
                limit=limit,
                offset=offset,
                additional_types=("track",),
            )

        tracks: list[TrackRef] = []
        for position, item in enumerate(paginate(fetch_page, PAGE_SIZE)):
            track = item.get("track") if item else None
            if not track or not track.get("uri"):
                continue
            if item.get("is_local") or track["uri"].startswith(LOCAL_URI_PREFIX):
                continue
            tracks.append(TrackRef(uri=track["uri"], position=position))

        logger.debug("playlist_tracks_listed", playlist_id=playlist_id, count=len(tracks))
        return tracks

    def add_tracks(self, playlist_id: str, tracks: list[TrackRef]) -> None:
        """Append tracks to a playlist in a single request."""
        self._client.playlist_add_items(playlist_id, [t.uri for t in tracks])

    def remove_tracks(self, playlist_id: str, tracks: list[TrackRef]) -> None:
        """Remove every occurrence of the given tracks in a single request."""
        self._client.playlist_remove_all_occurrences_of_items(
            playlist_id, [t.uri for t in tracks]
        )

    def update_description(self, playlist_id: str, text: str) -> None:
        """Replace the playlist description."""
        self._client.playlist_change_details(playlist_id, description=text)

    def create_playlist(
        self,
        name: str,
        description: str = "",
        public: bool = True,
    ) -> dict[str, Any]:
        """Create a new playlist.

        Args:
            name: Playlist name
            description: Playlist description
            public: Whether the playlist is public

        Returns:
            Playlist data dict with id and url

        Raises:
            SpotifyError: If Spotify does not return a playlist ID
        """
        logger.info("creating_playlist", name=name, public=public)

        playlist = self._client.user_playlist_create(
            user=self.user_id,
            name=name,
            public=public,
            description=description,
        )
        if not playlist or not playlist.get("id"):
            raise SpotifyError(
                f"Error while creating the playlist '{name}'",
                details={"name": name, "response": playlist},
            )

        logger.info("playlist_created", name=name, id=playlist["id"])
        return playlist


def playlist_url(playlist_id: str) -> str:
    """Public web URL of a playlist."""
    return f"https://open.spotify.com/playlist/{playlist_id}"
