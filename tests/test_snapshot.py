import pytest

from playlist_dna.errors import ValidationError
from playlist_dna.seeds import select_seeds
from playlist_dna.snapshot import PlaylistSnapshot, battle_snapshots


def _snapshot_dict(make_features, playlist_id="mix1", energy=0.6):
    return {
        "id": playlist_id,
        "name": "Sunday Mix",
        "owner": "sam",
        "tracks": [
            {"id": "t1", "name": "One", "artist": "Nova", "artist_ids": ["a1"], "artist_names": ["Nova", "Lumen"]},
            {"id": "t2", "name": "Two", "artist": "Drift"},
            {"name": "no id"},
        ],
        "audio_features": [make_features("t1", energy=energy), None],
        "genre_tags": ["indie pop", "dream pop"],
    }


def test_from_dict_skips_tracks_without_ids(make_features):
    snapshot = PlaylistSnapshot.from_dict(_snapshot_dict(make_features))

    assert snapshot.track_ids == ["t1", "t2"]
    assert snapshot.track_count == 2
    assert snapshot.artist_names == ["Nova", "Lumen", "Drift"]
    assert snapshot.tracks[1].artist_names == ("Drift",)


@pytest.mark.parametrize("data", [[], "mix", {"tracks": {"id": "t1"}}, {"genre_tags": "pop"}])
def test_from_dict_rejects_malformed_data(data):
    with pytest.raises(ValidationError):
        PlaylistSnapshot.from_dict(data)


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{\"id\": ", encoding="utf-8")

    with pytest.raises(ValidationError):
        PlaylistSnapshot.load(str(path))


def test_save_and_load(tmp_path, make_features):
    path = tmp_path / "mix.json"
    PlaylistSnapshot.from_dict(_snapshot_dict(make_features)).save(str(path))

    loaded = PlaylistSnapshot.load(str(path))

    assert loaded.name == "Sunday Mix"
    assert loaded.tracks[0].artist_ids == ("a1",)
    assert loaded.genre_tags == ["indie pop", "dream pop"]


def test_snapshot_analysis(make_features):
    result = PlaylistSnapshot.from_dict(_snapshot_dict(make_features)).analyze()

    assert result.track_count == 2
    assert result.audio_dna.energy == 60
    assert [g.percent for g in result.genre_distribution] == [50, 50]
    assert result.top_tracks[0] == {"name": "One", "artist": "Nova", "album_art": None}


def test_battle_snapshots(make_features):
    first = PlaylistSnapshot.from_dict(_snapshot_dict(make_features))
    second = PlaylistSnapshot.from_dict(_snapshot_dict(make_features, playlist_id="mix2", energy=0.6))

    result = battle_snapshots(first, second)

    assert result.compatibility_score == 92
    assert [t.spotify_id for t in result.shared_tracks] == ["t1", "t2"]
    assert result.shared_genres == ["Indie Pop", "Dream Pop"]


def test_snapshot_signal_bundle(make_features):
    snapshot = PlaylistSnapshot.from_dict(_snapshot_dict(make_features))

    spec = select_seeds("return_familiar", snapshot.to_signal_bundle())
    assert spec.seed_artists == ["a1"]

    spec = select_seeds(None, snapshot.to_signal_bundle(seed_genres=["jazz"]))
    assert spec.seed_genres == ["jazz"]
