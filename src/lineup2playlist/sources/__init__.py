"""Roster source interface.

A roster source turns a lineup location into the ordered list of artist
names shown there.
"""

from typing import Protocol, runtime_checkable

from .lineup import LineupSource


@runtime_checkable
class RosterSource(Protocol):
    """Protocol for artist roster sources."""

    def fetch(self, source: str) -> list[str]:
        """Get artist names from a lineup.

        Args:
            source: URL or local path of the lineup

        Returns:
            Artist names in page order, whitespace stripped
        """
        ...


__all__ = ["LineupSource", "RosterSource"]
