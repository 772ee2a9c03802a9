"""Tests for SpotifyClient against a mocked spotipy client."""

from unittest.mock import MagicMock

import pytest

from lineup2playlist.exceptions import SpotifyError
from lineup2playlist.models import TrackRef
from lineup2playlist.spotify import SpotifyClient, playlist_url
from lineup2playlist.sync import (
    ArtistResolver,
    DesiredSetBuilder,
    PlaylistStore,
    ReconciliationEngine,
    TopTrackProvider,
)


@pytest.fixture
def sp():
    return MagicMock()


@pytest.fixture
def client(sp):
    return SpotifyClient(client=sp, market="DE")


def test_implements_sync_protocols(client):
    assert isinstance(client, ArtistResolver)
    assert isinstance(client, TopTrackProvider)
    assert isinstance(client, PlaylistStore)


class TestResolveArtist:
    def test_exact_case_insensitive_match(self, client, sp):
        sp.search.return_value = {
            "artists": {"items": [{"id": "1", "name": "Moderat Tribute"}, {"id": "2", "name": "MODERAT"}]}
        }

        assert client.resolve_artist("  Moderat ") == "2"
        sp.search.assert_called_once_with(q="Moderat", type="artist", limit=SpotifyClient.SEARCH_LIMIT)

    def test_no_exact_match(self, client, sp):
        sp.search.return_value = {"artists": {"items": [{"id": "1", "name": "Moderat Tribute"}]}}

        assert client.resolve_artist("Moderat") is None

    def test_no_results(self, client, sp):
        sp.search.return_value = {}

        assert client.resolve_artist("Moderat") is None


def test_top_tracks_limit_and_market(client, sp):
    sp.artist_top_tracks.return_value = {
        "tracks": [{"uri": f"spotify:track:{i}"} for i in range(10)]
    }

    tracks = client.top_tracks("artist-1", limit=3)

    assert [t.uri for t in tracks] == ["spotify:track:0", "spotify:track:1", "spotify:track:2"]
    sp.artist_top_tracks.assert_called_once_with("artist-1", country="DE")


def test_top_tracks_fewer_than_limit(client, sp):
    sp.artist_top_tracks.return_value = {"tracks": [{"uri": "spotify:track:0"}, {"id": "no-uri"}]}

    assert client.top_tracks("artist-1", limit=3) == [TrackRef(uri="spotify:track:0")]


def test_list_tracks_paginates_and_skips_empty_items(client, sp):
    first = [{"track": {"uri": f"spotify:track:{i}"}} for i in range(50)]
    second = [{"track": None}, {"track": {"uri": "spotify:track:50"}}]
    sp.playlist_items.side_effect = [
        {"items": first, "total": 52, "next": "page-2"},
        {"items": second, "total": 52, "next": None},
    ]

    tracks = client.list_tracks("pl")

    assert len(tracks) == 51
    assert tracks[-1] == TrackRef(uri="spotify:track:50")
    assert tracks[-1].position == 51
    offsets = [call.kwargs["offset"] for call in sp.playlist_items.call_args_list]
    assert offsets == [0, 50]
    assert all(call.kwargs["limit"] == 50 for call in sp.playlist_items.call_args_list)


def test_list_tracks_skips_local_files_but_keeps_positions(client, sp):
    sp.playlist_items.return_value = {
        "items": [
            {"is_local": False, "track": {"uri": "spotify:track:4uLU6hMCjMI75M1A2tKUQC"}},
            {"is_local": True, "track": {"uri": "spotify:local:Artist:Album:Title:215"}},
            {"track": {"uri": "spotify:local:Other:Album:Song:180"}},
            {"is_local": False, "track": {"uri": "spotify:track:abc"}},
        ],
        "total": 4,
        "next": None,
    }

    tracks = client.list_tracks("pl")

    assert [t.uri for t in tracks] == ["spotify:track:4uLU6hMCjMI75M1A2tKUQC", "spotify:track:abc"]
    assert [t.position for t in tracks] == [0, 3]
    assert "is_local" in sp.playlist_items.call_args.kwargs["fields"]


def test_local_files_never_reach_removal(client, sp):
    sp.playlist_items.return_value = {
        "items": [
            {"is_local": False, "track": {"uri": "spotify:track:old"}},
            {"is_local": True, "track": {"uri": "spotify:local:Artist:Album:Title:215"}},
        ],
        "total": 2,
        "next": None,
    }
    engine = ReconciliationEngine(client, DesiredSetBuilder(client, client))

    diff = engine.diff(client.list_tracks("pl"), [])
    engine.apply("pl", diff.to_remove, diff.to_add)

    sp.playlist_remove_all_occurrences_of_items.assert_called_once_with("pl", ["spotify:track:old"])


def test_add_and_remove_tracks_send_uris(client, sp):
    tracks = [TrackRef(uri="spotify:track:a"), TrackRef(uri="spotify:track:b")]

    client.add_tracks("pl", tracks)
    client.remove_tracks("pl", tracks)

    sp.playlist_add_items.assert_called_once_with("pl", ["spotify:track:a", "spotify:track:b"])
    sp.playlist_remove_all_occurrences_of_items.assert_called_once_with(
        "pl", ["spotify:track:a", "spotify:track:b"]
    )


def test_update_description(client, sp):
    client.update_description("pl", "hello")

    sp.playlist_change_details.assert_called_once_with("pl", description="hello")


def test_api_errors_propagate(client, sp):
    sp.playlist_add_items.side_effect = RuntimeError("502 bad gateway")

    with pytest.raises(RuntimeError):
        client.add_tracks("pl", [TrackRef(uri="spotify:track:a")])


def test_create_playlist_uses_current_user(client, sp):
    sp.current_user.return_value = {"id": "user-1"}
    sp.user_playlist_create.return_value = {"id": "pl-new"}

    playlist = client.create_playlist("FUSION 2023 DJ", description="d", public=False)

    assert playlist["id"] == "pl-new"
    sp.user_playlist_create.assert_called_once_with(
        user="user-1", name="FUSION 2023 DJ", public=False, description="d"
    )


def test_create_playlist_without_id(client, sp):
    sp.current_user.return_value = {"id": "user-1"}
    sp.user_playlist_create.return_value = {}

    with pytest.raises(SpotifyError):
        client.create_playlist("FUSION 2023 DJ")


def test_playlist_url():
    assert playlist_url("abc") == "https://open.spotify.com/playlist/abc"
