"""Configuration settings using pydantic-settings for environment variable loading."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

APP_DIR = Path.home() / ".lineup2playlist"

DEFAULT_PLAYLISTS = {
    "FUSION 2023 DJ": "https://www.fusion-festival.de/de/2023/programm/dj",
    "FUSION 2023 BAND": "https://www.fusion-festival.de/de/2023/programm/band",
    "FUSION 2023 LIVE": "https://www.fusion-festival.de/de/2023/programm/live-act",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Automatically reads from .env file and environment variables.
    Environment variables take precedence over .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Spotify OAuth
    spotify_client_id: str
    spotify_client_secret: str
    spotify_redirect_uri: str = "http://127.0.0.1:8888/callback"
    spotify_market: str = "DE"

    # Playlist name -> lineup page (URL or local HTML file)
    playlists: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PLAYLISTS))
    playlist_public: bool = True

    # Lineup scraping
    lineup_tag: str = "h4"
    lineup_class: str | None = None

    # Reconciliation
    top_tracks_count: int = Field(default=3, ge=1)
    batch_size: int = Field(default=50, ge=1, le=100)

    # Paths
    playlist_cache_path: Path = Field(default_factory=lambda: APP_DIR / "existing_playlists.json")
    token_cache_path: Path = Field(default_factory=lambda: APP_DIR / ".spotify_cache")

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If required settings (e.g. Spotify credentials) are missing
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = [".".join(str(loc) for loc in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(missing)}",
            details={"errors": e.errors()},
        ) from e
