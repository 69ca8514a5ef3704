"""
Playlist Battle
===============

Puts two playlists head to head: compatibility, per-playlist scores,
winner, and what the two have in common.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .compatibility import (
    compatibility_score,
    determine_winner,
    playlist_score,
    shared_items,
    winner_reason,
    PLAYLIST1,
    PLAYLIST2,
)
from .config import BATTLE_AUDIO_FEATURES
from .errors import DataInsufficientError
from .features import TrackFeatureVector, TrackIdentity, mean_features, normalize_feature_vectors
from .genres import normalize_genre_tag


@dataclass(frozen=True)
class SharedTrack:
    title: str
    artist: str
    spotify_id: str

    @property
    def uri(self) -> str:
        return f"spotify:track:{self.spotify_id}"

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "artist": self.artist,
            "spotify_id": self.spotify_id,
            "uri": self.uri,
        }


@dataclass(frozen=True)
class BattleResult:
    """Outcome of a two-playlist battle."""
    compatibility_score: int
    winner: str
    playlist1_score: int
    playlist2_score: int
    shared_artists: List[str] = field(default_factory=list)
    shared_genres: List[str] = field(default_factory=list)
    shared_tracks: List[SharedTrack] = field(default_factory=list)
    audio_data: List[Dict[str, Any]] = field(default_factory=list)
    winner_reason: str = ""

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "compatibility_score": self.compatibility_score,
            "winner": self.winner,
            "winner_reason": self.winner_reason,
            "playlist1_score": self.playlist1_score,
            "playlist2_score": self.playlist2_score,
            "shared_artists": list(self.shared_artists),
            "shared_genres": list(self.shared_genres),
            "shared_tracks": [t.to_dict() for t in self.shared_tracks],
            "audio_data": list(self.audio_data),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def audio_profile(slot: str, vectors: Sequence[TrackFeatureVector]) -> Dict[str, Any]:
    """Raw feature means of one side, for visualization."""
    profile = {"playlist": slot}
    profile.update(mean_features(vectors, BATTLE_AUDIO_FEATURES))
    return profile


def _shared_tracks(
    track_ids_a: Sequence[str],
    track_ids_b: Sequence[str],
    identities_a: Iterable[TrackIdentity],
    identities_b: Iterable[TrackIdentity]
) -> List[SharedTrack]:
    # the first playlist's display data takes precedence
    lookup = {t.track_id: t for t in identities_b}
    lookup.update({t.track_id: t for t in identities_a})
    shared = []
    for track_id in shared_items(track_ids_a, track_ids_b):
        identity = lookup.get(track_id)
        shared.append(SharedTrack(
            title=identity.name if identity else "Unknown",
            artist=identity.primary_artist if identity else "Unknown",
            spotify_id=track_id,
        ))
    return shared


def battle(
    tracks_a: Optional[Sequence[Any]],
    tracks_b: Optional[Sequence[Any]],
    genre_tags_a: Optional[Iterable[str]],
    genre_tags_b: Optional[Iterable[str]],
    track_ids_a: Sequence[str],
    track_ids_b: Sequence[str],
    artists_a: Iterable[str],
    artists_b: Iterable[str],
    identities_a: Sequence[TrackIdentity] = (),
    identities_b: Sequence[TrackIdentity] = ()
) -> BattleResult:
    """
    Battle two playlists.

    Args:
        tracks_a, tracks_b: Raw feature records per playlist (None entries allowed)
        genre_tags_a, genre_tags_b: Artist genre tags per playlist
        track_ids_a, track_ids_b: Catalog track ids per playlist
        artists_a, artists_b: Artist names per playlist
        identities_a, identities_b: Track identities, for shared-track display

    Returns:
        BattleResult

    Raises:
        DataInsufficientError: if either playlist has no tracks
    """
    if not track_ids_a or not track_ids_b:
        raise DataInsufficientError("Both playlists need at least one track to battle.")

    vectors_a = normalize_feature_vectors(tracks_a)
    vectors_b = normalize_feature_vectors(tracks_b)

    score1 = playlist_score(vectors_a)
    score2 = playlist_score(vectors_b)
    winner = determine_winner(score1, score2)

    genres_a = [normalize_genre_tag(g) for g in genre_tags_a or [] if isinstance(g, str)]
    genres_b = [normalize_genre_tag(g) for g in genre_tags_b or [] if isinstance(g, str)]

    return BattleResult(
        compatibility_score=compatibility_score(vectors_a, vectors_b),
        winner=winner,
        playlist1_score=score1,
        playlist2_score=score2,
        shared_artists=shared_items(artists_a, artists_b),
        shared_genres=[g for g in shared_items(genres_a, genres_b) if g],
        shared_tracks=_shared_tracks(track_ids_a, track_ids_b, identities_a, identities_b),
        audio_data=[audio_profile(PLAYLIST1, vectors_a), audio_profile(PLAYLIST2, vectors_b)],
        winner_reason=winner_reason(winner, score1, score2),
    )
