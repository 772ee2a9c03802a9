"""Playlist name -> Spotify playlist ID cache.

The file format is a JSON list of ``{"name": ..., "id": ...}`` objects so
that an existing ``existing_playlists.json`` keeps working.
"""

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

from .exceptions import PlaylistCacheError
from .logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class PlaylistIdStore(Protocol):
    """Key-value store mapping playlist names to Spotify playlist IDs."""

    def get(self, name: str) -> str | None:
        ...

    def set(self, name: str, playlist_id: str) -> None:
        ...

    def remove(self, name: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryPlaylistCache:
    """In-process playlist ID store."""

    def __init__(self, entries: dict[str, str] | None = None):
        self._entries: dict[str, str] = dict(entries or {})

    def get(self, name: str) -> str | None:
        return self._entries.get(name)

    def set(self, name: str, playlist_id: str) -> None:
        self._entries[name] = playlist_id

    def remove(self, name: str) -> None:
        self._entries.pop(name, None)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> dict[str, str]:
        return dict(self._entries)


class PlaylistCache:
    """JSON-file backed playlist ID store.

    The file is read on every lookup and rewritten on every change, which
    keeps several processes sharing one file roughly consistent.
    """

    def __init__(self, path: Path):
        """Initialize the cache.

        Args:
            path: Path to the JSON file (created on first write)
        """
        self.path = path

    def _load(self) -> dict[str, str]:
        """Read the file into a name -> id mapping. A missing file is an empty cache."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        try:
            entries = json.loads(content or "[]")
        except json.JSONDecodeError as e:
            raise PlaylistCacheError(
                f"Playlist cache {self.path} is not valid JSON",
                details={"path": str(self.path), "original_error": str(e)},
            ) from e

        if not isinstance(entries, list):
            raise PlaylistCacheError(
                f"Playlist cache {self.path} must contain a JSON list",
                details={"path": str(self.path)},
            )

        mapping: dict[str, str] = {}
        for entry in entries:
            if isinstance(entry, dict) and "name" in entry and "id" in entry:
                mapping[entry["name"]] = entry["id"]
            else:
                logger.warning("playlist_cache_entry_skipped", path=str(self.path), entry=entry)
        return mapping

    def _save(self, mapping: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        entries = [{"id": playlist_id, "name": name} for name, playlist_id in mapping.items()]
        self.path.write_text(json.dumps(entries, indent=2), encoding="utf-8")

    def get(self, name: str) -> str | None:
        """Get the cached playlist ID for ``name``."""
        return self._load().get(name)

    def set(self, name: str, playlist_id: str) -> None:
        """Store the playlist ID for ``name``."""
        mapping = self._load()
        mapping[name] = playlist_id
        self._save(mapping)
        logger.debug("playlist_cached", name=name, playlist_id=playlist_id)

    def remove(self, name: str) -> None:
        mapping = self._load()
        if mapping.pop(name, None) is not None:
            self._save(mapping)

    def clear(self) -> None:
        """Forget every cached playlist."""
        self._save({})

    def items(self) -> dict[str, str]:
        return self._load()
