"""Test configuration ensuring the package is importable and shared fakes."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from playlist_dna.features import TrackIdentity  # noqa: E402


BASE_FEATURES = {
    "energy": 0.5,
    "danceability": 0.5,
    "valence": 0.5,
    "acousticness": 0.2,
    "instrumentalness": 0.0,
    "tempo": 120.0,
}


@pytest.fixture
def make_features():
    def _make(track_id=None, **overrides):
        record = dict(BASE_FEATURES)
        record.update(overrides)
        if track_id is not None:
            record["id"] = track_id
        return record
    return _make


@pytest.fixture
def make_identity():
    def _make(track_id, name=None, artist="Artist", artist_id=None):
        return TrackIdentity(
            track_id=track_id,
            name=name or f"Song {track_id}",
            primary_artist=artist,
            artist_ids=(artist_id,) if artist_id else (),
            artist_names=(artist,),
        )
    return _make


def track_payload(track_id, name, artists, popularity=50, duration_ms=200000):
    """Catalog-style track object."""
    return {
        "id": track_id,
        "name": name,
        "popularity": popularity,
        "duration_ms": duration_ms,
        "artists": [{"id": artist_id, "name": artist_name} for artist_id, artist_name in artists],
        "album": {"images": [{"url": f"https://img.example/{track_id}.jpg"}]},
    }


class FakeSpotipy:
    """In-memory stand-in for spotipy.Spotify covering the calls the client makes."""

    def __init__(self, playlists=None, features=None, artists=None, recommendations=None,
                 top_tracks=None, top_artists=None, saved=None, recent=None, page_size=2):
        self.playlists = playlists or {}
        self.features = features or {}
        self.artists_by_id = artists or {}
        self.recommendation_tracks = recommendations or []
        self.top_tracks = top_tracks or {}
        self.top_artists = top_artists or {}
        self.saved = saved or []
        self.recent = recent or []
        self.page_size = page_size
        self.calls = []
        self.fail_audio_features = False

    def _page(self, playlist_id, offset):
        tracks = self.playlists[playlist_id]["tracks"]
        items = [{"track": t} for t in tracks[offset:offset + self.page_size]]
        next_offset = offset + self.page_size
        return {
            "items": items,
            "next": f"{playlist_id}:{next_offset}" if next_offset < len(tracks) else None,
        }

    def playlist(self, playlist_id):
        self.calls.append(("playlist", playlist_id))
        data = self.playlists[playlist_id]
        return {
            "id": playlist_id,
            "name": data.get("name"),
            "owner": {"display_name": data.get("owner", "tester")},
            "images": [{"url": f"https://img.example/{playlist_id}.jpg"}],
            "tracks": self._page(playlist_id, 0),
        }

    def next(self, results):
        self.calls.append(("next", results["next"]))
        playlist_id, offset = results["next"].split(":")
        return self._page(playlist_id, int(offset))

    def playlist_items(self, playlist_id, limit=100):
        self.calls.append(("playlist_items", playlist_id, limit))
        tracks = self.playlists[playlist_id]["tracks"][:limit]
        return {"items": [{"track": t} for t in tracks]}

    def audio_features(self, track_ids):
        self.calls.append(("audio_features", len(track_ids)))
        if self.fail_audio_features:
            raise RuntimeError("rate limited")
        return [self.features.get(track_id) for track_id in track_ids]

    def artists(self, artist_ids):
        self.calls.append(("artists", len(artist_ids)))
        return {"artists": [self.artists_by_id.get(a) for a in artist_ids]}

    def current_user_top_tracks(self, limit=20, time_range="medium_term"):
        self.calls.append(("top_tracks", time_range))
        return {"items": [{"id": t} for t in self.top_tracks.get(time_range, [])][:limit]}

    def current_user_top_artists(self, limit=20, time_range="medium_term"):
        self.calls.append(("top_artists", time_range))
        return {"items": list(self.top_artists.get(time_range, []))[:limit]}

    def current_user_saved_tracks(self, limit=20):
        self.calls.append(("saved_tracks",))
        return {"items": [{"track": {"id": t}} for t in self.saved][:limit]}

    def current_user_recently_played(self, limit=50):
        self.calls.append(("recently_played",))
        return {"items": [{"track": {"id": t}} for t in self.recent][:limit]}

    def recommendations(self, **params):
        self.calls.append(("recommendations", params))
        return {"tracks": list(self.recommendation_tracks)}


@pytest.fixture
def fake_catalog():
    tracks = [
        track_payload("t1", "Opener", [("a1", "Nova")], popularity=70),
        track_payload("t2", "Second", [("a2", "Lumen"), ("a1", "Nova")]),
        track_payload("t3", "Third", [("a3", "Drift")]),
        {"id": None, "name": "Local file", "artists": []},
        track_payload("t4", "Closer", [("a2", "Lumen")]),
    ]
    features = {
        "t1": dict(BASE_FEATURES, id="t1", energy=0.6),
        "t2": dict(BASE_FEATURES, id="t2", energy=0.7),
        "t3": None,
        "t4": dict(BASE_FEATURES, id="t4", energy=0.5),
    }
    artists = {
        "a1": {"id": "a1", "name": "Nova", "genres": ["synthpop", "indie pop"]},
        "a2": {"id": "a2", "name": "Lumen", "genres": ["indie pop"]},
        "a3": {"id": "a3", "name": "Drift", "genres": []},
    }
    return FakeSpotipy(
        playlists={"pl1": {"name": "Night Drive", "tracks": tracks}},
        features=features,
        artists=artists,
        recommendations=[
            track_payload("r1", "Hit", [("a9", "Big")], popularity=90, duration_ms=180000),
            track_payload("r2", "Gem", [("a8", "Small")], popularity=12, duration_ms=400000),
            dict(track_payload("r3", "Unknown", [("a7", "Who")], duration_ms=350000), popularity=None),
        ],
        top_tracks={"short_term": ["s1", "s2"], "medium_term": ["m1", "s1"], "long_term": ["l1"]},
        top_artists={
            "medium_term": [{"id": "ma1", "name": "Mid", "genres": ["shoegaze", "dream pop", "noise"]}],
            "long_term": [{"id": "la1", "name": "Old", "genres": ["post-rock"]}],
        },
        saved=["v1", "m1"],
        recent=["p1", "p2"],
    )


@pytest.fixture
def spotify_client(fake_catalog):
    from playlist_dna.spotify_client import SpotifyClient

    client = SpotifyClient(sp=fake_catalog)
    client._min_request_interval = 0.0
    return client
