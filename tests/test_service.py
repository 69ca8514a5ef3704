import pytest

from playlist_dna.compatibility import TIE
from playlist_dna.errors import SeedUnavailableError
from playlist_dna.service import PlaylistService


@pytest.fixture
def service(spotify_client):
    return PlaylistService(spotify_client=spotify_client, verbose=False)


def test_analyze_fetches_then_computes(service):
    result = service.analyze("https://open.spotify.com/playlist/pl1")

    assert result.track_count == 4
    assert result.top_tracks[0]["name"] == "Opener"
    assert result.genre_distribution[0].name == "Indie Pop"


def test_battle_same_playlist_ties(service):
    result = service.battle("pl1", "spotify:playlist:pl1")

    assert result.winner == TIE
    assert result.compatibility_score == 92
    assert result.shared_artists == ["Nova", "Lumen", "Drift"]
    assert len(result.shared_tracks) == 4


def test_compare_prefetched_snapshots(service):
    first = service.fetch("pl1")

    result = service.compare(first, first)

    assert result.winner == TIE
    assert first.metadata()["track_count"] == 4


def test_recommend_from_history(service):
    output = service.recommend("deep_cuts")

    assert output.spec.seed_artists == ["la1"]
    data = output.to_dict()
    assert data["seeds"]["strategy"] == "deep_cuts"
    assert [t["id"] for t in data["tracks"]] == ["r2"]
    assert data["tracks"][0]["artists"] == ["Small"]


def test_recommend_from_playlist(service, fake_catalog):
    output = service.recommend("mood_safe", playlist_input="pl1", include_history=False)

    assert output.spec.target_ranges["target_energy"] == pytest.approx(0.6)
    params = fake_catalog.calls[-1][1]
    assert params["seed_tracks"] == ["t1", "t2", "t3", "t4"]


def test_recommend_reports_missing_signal(service):
    with pytest.raises(SeedUnavailableError):
        service.recommend("continue_session", include_history=False)


def test_verbose_progress(spotify_client, capsys):
    PlaylistService(spotify_client=spotify_client, verbose=True).analyze("pl1")
    out = capsys.readouterr().out
    assert "Fetching playlist data" in out
    assert "Night Drive" in out
