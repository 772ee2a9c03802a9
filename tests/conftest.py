"""Shared fixtures."""

import pytest

from tests.fakes import FakeCatalog, FakePlaylistStore


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        {
            "daft punk": ("a-daft", ["spotify:track:d1", "spotify:track:d2", "spotify:track:d3", "spotify:track:d4"]),
            "moderat": ("a-mod", ["spotify:track:m1", "spotify:track:m2", "spotify:track:m3"]),
            "apparat": ("a-app", ["spotify:track:p1", "spotify:track:m1"]),
        }
    )


@pytest.fixture
def store() -> FakePlaylistStore:
    return FakePlaylistStore()
