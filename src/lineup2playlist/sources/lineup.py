"""Festival lineup page scraper.

Artist names are the text of every element matching a tag (and optional
CSS class) on the program page, e.g. ``<h4 class="...">Artist</h4>``.
"""

from pathlib import Path

import httpx
from bs4 import BeautifulSoup

from ..exceptions import LineupError
from ..logging import get_logger

logger = get_logger(__name__)


class LineupSource:
    """Reads artist names from a lineup page on the web or on disk."""

    def __init__(
        self,
        tag: str = "h4",
        class_name: str | None = None,
        client: httpx.Client | None = None,
    ):
        """Initialize the lineup source.

        Args:
            tag: HTML tag holding one artist name
            class_name: Optional CSS class the tag must carry
            client: Optional preconfigured HTTP client
        """
        self.tag = tag
        self.class_name = class_name
        self._client = client or httpx.Client(
            headers={"User-Agent": "lineup2playlist"},
            follow_redirects=True,
            timeout=30.0,
        )

    def fetch(self, source: str) -> list[str]:
        """Get artist names from a lineup URL or local HTML file.

        Raises:
            LineupError: If the page cannot be fetched or read
        """
        logger.info("fetching_lineup", source=source)
        names = self.parse(self._read(source))
        logger.info("lineup_parsed", source=source, artists=len(names))
        return names

    def _read(self, source: str) -> str:
        if source.startswith(("http://", "https://")):
            try:
                response = self._client.get(source)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise LineupError(
                    f"Failed to fetch lineup {source}: {e}",
                    details={"url": source, "original_error": str(e)},
                ) from e
            return response.text

        try:
            return Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise LineupError(
                f"Failed to read lineup file {source}: {e}",
                details={"path": source, "original_error": str(e)},
            ) from e

    def parse(self, html: str) -> list[str]:
        """Extract artist names from lineup HTML."""
        soup = BeautifulSoup(html, "html.parser")
        attrs = {"class": self.class_name} if self.class_name else {}

        names = []
        for element in soup.find_all(self.tag, attrs):
            name = " ".join(element.get_text(" ").split())
            if name:
                names.append(name)
        return names

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "LineupSource":
        return self

    def __exit__(self, *args) -> None:
        self.close()
