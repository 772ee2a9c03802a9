"""lineup2playlist - Keep Spotify playlists in sync with festival lineups.

Scrapes artist names from a lineup page, picks each artist's top tracks and
reconciles a Spotify playlist against them with the minimal set of
add/remove calls.
"""

from .pipeline import Pipeline

__all__ = ["Pipeline"]
