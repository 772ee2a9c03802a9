"""Tests for DesiredSetBuilder."""

from unittest.mock import MagicMock

import pytest

from lineup2playlist.sync import DesiredSetBuilder
from lineup2playlist.sync import desired as desired_module
from tests.fakes import FakeCatalog


def test_takes_top_three_per_artist(catalog):
    desired = DesiredSetBuilder(catalog, catalog).build(["Daft Punk"])

    assert [t.uri for t in desired.tracks] == ["spotify:track:d1", "spotify:track:d2", "spotify:track:d3"]
    assert catalog.top_track_calls == [("a-daft", 3)]


def test_resolver_miss_is_tolerated(catalog):
    desired = DesiredSetBuilder(catalog, catalog).build(["Daft Punk", "Unknown Act", "Moderat"])

    assert desired.tracks
    assert desired.resolved_artists == 2
    assert desired.missing_artists == ["Unknown Act"]
    assert {t.uri for t in desired.tracks} == {
        "spotify:track:d1", "spotify:track:d2", "spotify:track:d3",
        "spotify:track:m1", "spotify:track:m2", "spotify:track:m3",
    }


def test_lookup_error_does_not_abort_build():
    catalog = FakeCatalog(
        {"moderat": ("a-mod", ["spotify:track:m1"])},
        broken={"flaky"},
    )

    desired = DesiredSetBuilder(catalog, catalog).build(["Flaky", "Moderat"])

    assert desired.missing_artists == ["Flaky"]
    assert [t.uri for t in desired.tracks] == ["spotify:track:m1"]


def test_top_tracks_error_does_not_abort_build():
    catalog = FakeCatalog(
        {
            "moderat": ("a-mod", ["spotify:track:m1", "spotify:track:m2"]),
            "apparat": ("a-app", ["spotify:track:p1"]),
        },
        broken_tracks={"a-mod"},
    )

    desired = DesiredSetBuilder(catalog, catalog).build(["Moderat", "Apparat"])

    assert desired.missing_artists == ["Moderat"]
    assert desired.resolved_artists == 1
    assert [t.uri for t in desired.tracks] == ["spotify:track:p1"]
    assert catalog.top_track_calls == [("a-mod", 3), ("a-app", 3)]


def test_warns_when_no_artist_resolves(monkeypatch):
    catalog = FakeCatalog({}, broken={"moderat", "apparat"})
    logger = MagicMock()
    monkeypatch.setattr(desired_module, "logger", logger)

    desired = DesiredSetBuilder(catalog, catalog).build(["Moderat", "Apparat"])

    assert desired.tracks == []
    assert desired.missing_artists == ["Moderat", "Apparat"]
    events = [c.args[0] for c in logger.warning.call_args_list]
    assert "no_artists_resolved" in events


def test_empty_roster_does_not_warn(monkeypatch):
    logger = MagicMock()
    monkeypatch.setattr(desired_module, "logger", logger)

    DesiredSetBuilder(FakeCatalog({}), FakeCatalog({})).build([])

    logger.warning.assert_not_called()


def test_tracks_shared_between_artists_collapse(catalog):
    desired = DesiredSetBuilder(catalog, catalog).build(["Moderat", "Apparat"])

    assert [t.uri for t in desired.tracks] == [
        "spotify:track:m1", "spotify:track:m2", "spotify:track:m3", "spotify:track:p1",
    ]


def test_size_bound(catalog):
    builder = DesiredSetBuilder(catalog, catalog, top_n=2)

    desired = builder.build(["Daft Punk", "Moderat", "Apparat"])

    assert len(desired.tracks) <= 2 * desired.resolved_artists


def test_duplicate_and_blank_names_are_looked_up_once(catalog):
    desired = DesiredSetBuilder(catalog, catalog).build(["  Moderat ", "moderat", "", "   ", "MODERAT"])

    assert catalog.resolve_calls == ["Moderat"]
    assert desired.resolved_artists == 1
    assert desired.missing_artists == []


def test_artist_with_fewer_tracks_than_limit():
    catalog = FakeCatalog({"solo": ("a-solo", ["spotify:track:s1"])})

    desired = DesiredSetBuilder(catalog, catalog, top_n=5).build(["Solo"])

    assert [t.uri for t in desired.tracks] == ["spotify:track:s1"]


def test_empty_roster(catalog):
    desired = DesiredSetBuilder(catalog, catalog).build([])

    assert desired.tracks == []
    assert desired.missing_artists == []


def test_invalid_top_n(catalog):
    with pytest.raises(ValueError):
        DesiredSetBuilder(catalog, catalog, top_n=0)
