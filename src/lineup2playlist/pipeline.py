"""Pipeline orchestrator for lineup2playlist.

Coordinates the flow for each configured playlist:
1. Scrape the artist roster from the lineup page
2. Look up (or create) the Spotify playlist
3. Reconcile the playlist against the artists' top tracks
4. Stamp the description with the sync time and missing artists
"""

from collections.abc import Iterable

from .cache import PlaylistCache, PlaylistIdStore
from .config import Settings, get_settings
from .logging import configure_logging, get_logger
from .models import SyncResult, SyncState
from .sources import LineupSource, RosterSource
from .spotify import SpotifyClient, playlist_url
from .sync import DesiredSetBuilder, ReconciliationEngine, build_description

logger = get_logger(__name__)


class Pipeline:
    """Main pipeline orchestrator for lineup2playlist."""

    def __init__(
        self,
        settings: Settings | None = None,
        spotify: SpotifyClient | None = None,
        cache: PlaylistIdStore | None = None,
        lineup: RosterSource | None = None,
    ):
        """Initialize the pipeline.

        Args:
            settings: Optional settings override
            spotify: Optional Spotify client (defaults to an OAuth client)
            cache: Optional playlist ID store (defaults to the JSON file cache)
            lineup: Optional roster source (defaults to the HTML lineup scraper)

        Raises:
            ConfigurationError: If settings are not given and cannot be loaded
        """
        self.settings = settings or get_settings()

        configure_logging(
            level=self.settings.log_level,
            format=self.settings.log_format,
        )

        self.cache = cache or PlaylistCache(self.settings.playlist_cache_path)
        # Only a lineup source built here is closed by close()
        self._owns_lineup = lineup is None
        self.lineup = lineup or LineupSource(
            tag=self.settings.lineup_tag,
            class_name=self.settings.lineup_class,
        )

        # Spotify client (initialized lazily to defer OAuth)
        self._spotify = spotify

        logger.info("pipeline_initialized", playlists=list(self.settings.playlists))

    def close(self) -> None:
        """Close the HTTP client of the default lineup source."""
        if self._owns_lineup:
            self.lineup.close()

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def spotify(self) -> SpotifyClient:
        """Lazy initialization of Spotify client."""
        if not self._spotify:
            self._spotify = SpotifyClient(
                client_id=self.settings.spotify_client_id,
                client_secret=self.settings.spotify_client_secret,
                redirect_uri=self.settings.spotify_redirect_uri,
                cache_path=self.settings.token_cache_path,
                market=self.settings.spotify_market,
            )
        return self._spotify

    def build_engine(self) -> ReconciliationEngine:
        """Create a reconciliation engine backed by the Spotify client."""
        builder = DesiredSetBuilder(
            resolver=self.spotify,
            tracks=self.spotify,
            top_n=self.settings.top_tracks_count,
        )
        return ReconciliationEngine(
            store=self.spotify,
            builder=builder,
            batch_size=self.settings.batch_size,
        )

    def get_playlist_id(self, name: str) -> str:
        """Get the cached playlist ID for ``name``, creating the playlist if needed."""
        playlist_id = self.cache.get(name)
        if playlist_id:
            logger.debug("playlist_cache_hit", name=name, playlist_id=playlist_id)
            return playlist_id

        playlist = self.spotify.create_playlist(
            name=name,
            description=build_description(),
            public=self.settings.playlist_public,
        )
        self.cache.set(name, playlist["id"])
        return playlist["id"]

    def sync_playlist(self, name: str, url: str | None = None) -> SyncResult:
        """Synchronize one playlist with its lineup page.

        Args:
            name: Playlist name
            url: Lineup URL or file; defaults to the configured one

        Returns:
            SyncResult for the playlist

        Raises:
            KeyError: If no URL is given and the playlist is not configured
        """
        source = url or self.settings.playlists[name]
        logger.info("playlist_sync_start", name=name, source=source)

        names = self.lineup.fetch(source)
        playlist_id = self.get_playlist_id(name)

        result = self.build_engine().run(
            playlist_id,
            names,
            playlist_name=name,
            source=source,
        )
        result.playlist_url = playlist_url(playlist_id)

        logger.info(
            "playlist_sync_complete",
            name=name,
            added=result.added,
            removed=result.removed,
            unchanged=result.unchanged,
            missing=len(result.missing_artists),
        )
        return result

    def sync_all(self, names: Iterable[str] | None = None) -> list[SyncResult]:
        """Synchronize playlists one after another.

        A failing playlist is logged and reported, then the next one runs.

        Args:
            names: Playlists to sync, in order (default: all configured)
        """
        results: list[SyncResult] = []
        for name in names if names is not None else list(self.settings.playlists):
            try:
                results.append(self.sync_playlist(name))
            except Exception as e:
                logger.exception("playlist_sync_failed", name=name, error=str(e))
                results.append(
                    SyncResult(
                        playlist_name=name,
                        state=SyncState.FAILED,
                        error=str(e),
                    )
                )

        logger.info(
            "sync_all_complete",
            total=len(results),
            failed=sum(1 for r in results if not r.ok),
        )
        return results
