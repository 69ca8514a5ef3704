import json

import pytest

from playlist_dna import cli
from playlist_dna.snapshot import PlaylistSnapshot


def _write_snapshot(path, make_features, danceability=0.6, tracks=3):
    snapshot = PlaylistSnapshot.from_dict({
        "id": path.stem,
        "name": path.stem.title(),
        "tracks": [{"id": f"t{i}", "name": f"Song {i}", "artist": "Nova", "artist_ids": ["a1"]} for i in range(tracks)],
        "audio_features": [make_features(f"t{i}", danceability=danceability) for i in range(tracks)],
        "genre_tags": ["indie pop"] * tracks,
    })
    snapshot.save(str(path))
    return str(path)


def test_analyze_from_json(tmp_path, make_features, capsys):
    path = _write_snapshot(tmp_path / "mix.json", make_features)

    assert cli.main(["analyze", path, "--from-json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["track_count"] == 3
    assert data["playlist"] == {"id": "mix", "name": "Mix", "owner": "Unknown", "cover_url": None, "track_count": 3}
    assert data["genre_distribution"] == [{"name": "Indie Pop", "percent": 100}]


def test_analyze_simple_format(tmp_path, make_features, capsys):
    path = _write_snapshot(tmp_path / "mix.json", make_features)

    assert cli.main(["analyze", path, "--from-json", "--format", "simple"]) == 0

    out = capsys.readouterr().out
    assert "Indie Pop" in out
    assert "1. Song 0 - Nova" in out
    assert "🎵 Mix by Unknown" in out


def test_battle_from_json_to_file(tmp_path, make_features, capsys):
    first = _write_snapshot(tmp_path / "one.json", make_features, danceability=0.9)
    second = _write_snapshot(tmp_path / "two.json", make_features, danceability=0.3)
    output = tmp_path / "battle.json"

    assert cli.main(["battle", first, second, "--from-json", "-o", str(output)]) == 0

    assert "saved to" in capsys.readouterr().out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["winner"] == "playlist1"
    assert data["playlist1"]["name"] == "One"
    assert data["playlist2"]["track_count"] == 3
    assert data["shared_artists"] == ["Nova"]
    assert len(data["shared_tracks"]) == 3


def test_seeds_from_json(tmp_path, make_features, capsys):
    path = _write_snapshot(tmp_path / "mix.json", make_features)

    assert cli.main(["seeds", "return_familiar", "--playlist", path, "--from-json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["seed_artists"] == ["a1"]


def test_explicit_seeds_offline(capsys):
    assert cli.main(["seeds", "--from-json", "--seed-genres", "jazz", "--format", "simple"]) == 0
    assert "jazz" in capsys.readouterr().out


def test_strategies_listing(capsys):
    assert cli.main(["strategies"]) == 0
    assert len(json.loads(capsys.readouterr().out)) == 11


def test_engine_errors_exit_with_one(tmp_path, make_features, capsys):
    path = _write_snapshot(tmp_path / "empty.json", make_features, tracks=0)

    assert cli.main(["analyze", path, "--from-json"]) == 1
    assert "❌ Error:" in capsys.readouterr().err


def test_missing_snapshot_file(tmp_path, capsys):
    assert cli.main(["analyze", str(tmp_path / "nope.json"), "--from-json"]) == 1
    assert "Error" in capsys.readouterr().err


@pytest.mark.parametrize("content", ["{not json", "[]", "{\"tracks\": 5}"])
def test_malformed_snapshot_file_is_reported(tmp_path, capsys, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    assert cli.main(["analyze", str(path), "--from-json"]) == 1
    assert "❌ Error: Invalid snapshot" in capsys.readouterr().err


def test_online_mode_requires_credentials(monkeypatch, capsys):
    monkeypatch.delenv("SPOTIFY_CLIENT_ID", raising=False)
    monkeypatch.delenv("SPOTIFY_CLIENT_SECRET", raising=False)

    assert cli.main(["analyze", "37i9dQZF1DXcBWIGoYBM5M"]) == 1
    assert "credentials not found" in capsys.readouterr().err


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        cli.main(["dance"])
