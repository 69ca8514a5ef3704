from playlist_dna.genres import GenreShare
from playlist_dna.seeds import select_seeds


def test_get_playlist_follows_pages(spotify_client, fake_catalog):
    playlist = spotify_client.get_playlist("https://open.spotify.com/playlist/pl1")

    assert [t["id"] for t in playlist["all_tracks"]] == ["t1", "t2", "t3", "t4"]
    assert [c[0] for c in fake_catalog.calls] == ["playlist", "next", "next"]


def test_audio_features_are_batched_by_100(spotify_client, fake_catalog):
    features = spotify_client.get_audio_features([f"x{i}" for i in range(150)])

    assert len(features) == 150
    assert [c for c in fake_catalog.calls if c[0] == "audio_features"] == [
        ("audio_features", 100), ("audio_features", 50),
    ]


def test_failed_feature_batch_degrades_to_missing(spotify_client, fake_catalog, capsys):
    fake_catalog.fail_audio_features = True

    assert spotify_client.get_audio_features(["t1", "t2"]) == [None, None]
    assert "Warning" in capsys.readouterr().out


def test_artists_are_batched_by_50(spotify_client, fake_catalog):
    spotify_client.get_artists([f"a{i}" for i in range(120)] + ["a0"])
    assert [c[1] for c in fake_catalog.calls if c[0] == "artists"] == [50, 50, 20]


def test_fetch_snapshot_resolves_everything(spotify_client):
    snapshot = spotify_client.fetch_snapshot("spotify:playlist:pl1")

    assert snapshot.name == "Night Drive"
    assert snapshot.owner == "tester"
    assert snapshot.cover_url == "https://img.example/pl1.jpg"
    assert snapshot.track_ids == ["t1", "t2", "t3", "t4"]
    assert snapshot.audio_features[2] is None
    # one tag per track-artist pairing
    assert snapshot.genre_tags.count("indie pop") == 4
    assert snapshot.genre_tags.count("synthpop") == 2

    result = snapshot.analyze()
    assert result.genre_distribution == [GenreShare("Indie Pop", 100), GenreShare("Synthpop", 50)]
    assert result.audio_dna.energy == 60


def test_build_signal_bundle(spotify_client):
    signal = spotify_client.build_signal_bundle("pl1", include_history=True)

    assert signal.playlist_track_ids() == ["t1", "t2", "t3", "t4"]
    assert len(signal.playlist_features) == 4
    assert signal.top_tracks["short_term"] == ["s1", "s2"]
    assert [a.artist_id for a in signal.top_artists["long_term"]] == ["la1"]
    assert signal.top_artists["medium_term"][0].genres == ("shoegaze", "dream pop", "noise")
    assert signal.saved_tracks == ["v1", "m1"]
    assert signal.recently_played == ["p1", "p2"]


def test_signal_without_history_or_playlist(spotify_client, fake_catalog):
    signal = spotify_client.build_signal_bundle(include_history=False, seed_genres=["jazz"])

    assert signal.playlist_tracks is None
    assert signal.recently_played is None
    assert signal.seed_genres == ["jazz"]
    assert fake_catalog.calls == []


def test_recommendations_apply_post_filter(spotify_client, fake_catalog):
    signal = spotify_client.build_signal_bundle(include_history=False)
    spec = select_seeds("rare_match", signal)

    tracks = spotify_client.get_recommendations(spec)

    assert [t["id"] for t in tracks] == ["r2"]
    name, params = fake_catalog.calls[-1]
    assert name == "recommendations"
    assert params == {"limit": 20, "seed_genres": ["indie", "alternative", "underground"]}
