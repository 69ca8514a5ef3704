import json

import pytest

from playlist_dna.battle import battle
from playlist_dna.compatibility import PLAYLIST1, PLAYLIST2, TIE
from playlist_dna.errors import DataInsufficientError


def test_identical_playlists_tie(make_features):
    tracks = [make_features("t1", danceability=0.6), make_features("t2", danceability=0.6)]

    result = battle(tracks, list(tracks), [], [], ["t1", "t2"], ["t1", "t2"], ["Nova"], ["Nova"])

    assert result.compatibility_score == 92
    assert result.winner == TIE
    assert result.playlist1_score == result.playlist2_score == 80
    assert result.winner_reason == "It's a tie at 80 points each"


def test_shared_content(make_features, make_identity):
    identities_a = [make_identity("t1", name="First A"), make_identity("t2"), make_identity("t3", name="Third A")]
    identities_b = [make_identity("t3", name="Third B"), make_identity("t1", name="First B"), make_identity("t9")]

    result = battle(
        [make_features()], [make_features()],
        ["indie rock", "Pop", "pop"], ["INDIE ROCK", "jazz"],
        ["t1", "t2", "t3"], ["t3", "t1", "t9"],
        ["Nova", "Lumen", "Nova"], ["Lumen", "Drift", "Nova"],
        identities_a=identities_a, identities_b=identities_b,
    )

    assert result.shared_artists == ["Nova", "Lumen"]
    assert result.shared_genres == ["Indie Rock"]
    assert [t.spotify_id for t in result.shared_tracks] == ["t1", "t3"]
    assert [t.title for t in result.shared_tracks] == ["First A", "Third A"]
    assert result.shared_tracks[0].uri == "spotify:track:t1"


def test_stronger_playlist_wins(make_features):
    calm = [make_features(energy=0.5, danceability=0.9)] * 3
    jumpy = [make_features(energy=0.1, danceability=0.3), make_features(energy=0.9, danceability=0.3)]

    result = battle(calm, jumpy, [], [], ["a"], ["b"], [], [])

    assert result.winner == PLAYLIST1
    assert result.winner_reason == f"Playlist 1 wins with score {result.playlist1_score} vs {result.playlist2_score}"


def test_side_without_features_degrades(make_features):
    result = battle([None, None], [make_features()], [], [], ["a", "b"], ["c"], [], [])

    assert result.compatibility_score == 0
    assert result.playlist1_score == 0
    assert result.winner == PLAYLIST2


def test_empty_side_is_rejected(make_features):
    with pytest.raises(DataInsufficientError):
        battle([make_features()], [make_features()], [], [], [], ["c"], [], [])


def test_audio_data_per_playlist(make_features):
    result = battle(
        [make_features(energy=0.2), make_features(energy=0.4)], [make_features(tempo=90)],
        [], [], ["a", "b"], ["c"], [], [],
    )

    first, second = result.audio_data
    assert first["playlist"] == PLAYLIST1
    assert first["energy"] == pytest.approx(0.3)
    assert second["playlist"] == PLAYLIST2
    assert second["tempo"] == pytest.approx(90)
    assert "instrumentalness" not in first

    data = json.loads(result.to_json())
    assert data["audio_data"][1]["playlist"] == PLAYLIST2
