"""
Playlist Analyzer
=================

Builds a complete analysis of one playlist from already-fetched data:
1. Normalize feature vectors
2. Aggregate the Audio DNA
3. Classify the personality
4. Build the genre distribution
5. Score playlist health

Every step is a pure function; nothing here performs I/O.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .audio_dna import AudioDnaVector, compute_audio_dna
from .config import AUDIO_FEATURES, TOP_TRACKS_DISPLAYED
from .errors import DataInsufficientError
from .features import TrackIdentity, mean_features, normalize_feature_vectors, require_vectors
from .genres import GenreShare, build_genre_distribution
from .health import score_health
from .personality import PersonalityLabel, classify_personality


@dataclass(frozen=True)
class AnalysisResult:
    """Complete analysis of one playlist."""
    audio_dna: AudioDnaVector
    personality: PersonalityLabel
    genre_distribution: List[GenreShare]
    subgenres: List[str]
    health_score: int
    health_status: str
    overall_rating: float
    rating_description: str
    top_tracks: List[Dict[str, Any]] = field(default_factory=list)
    track_count: int = 0

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "track_count": self.track_count,
            "audio_dna": self.audio_dna.to_dict(),
            "personality": self.personality.to_dict(),
            "genre_distribution": [g.to_dict() for g in self.genre_distribution],
            "subgenres": list(self.subgenres),
            "health_score": self.health_score,
            "health_status": self.health_status,
            "overall_rating": self.overall_rating,
            "rating_description": self.rating_description,
            "top_tracks": list(self.top_tracks),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def top_tracks_for(identities: Iterable[TrackIdentity], limit: int = TOP_TRACKS_DISPLAYED) -> List[Dict[str, Any]]:
    """First tracks of the playlist, for display."""
    return [
        {"name": t.name, "artist": t.primary_artist, "album_art": t.album_art_url}
        for t in list(identities)[:limit]
    ]


def analyze(
    tracks: Optional[Sequence[Any]],
    genre_tags: Optional[Iterable[str]],
    track_count: int,
    top_tracks: Sequence[TrackIdentity] = ()
) -> AnalysisResult:
    """
    Analyze one playlist.

    Args:
        tracks: Raw feature records or TrackFeatureVector (None entries allowed)
        genre_tags: Flat list of artist genre tags, duplicates included
        track_count: Number of tracks in the playlist
        top_tracks: Track identities in playlist order, for display

    Returns:
        AnalysisResult

    Raises:
        DataInsufficientError: no tracks, or no usable feature vectors
    """
    if track_count is None or track_count <= 0:
        raise DataInsufficientError("Cannot analyze an empty playlist. Add some tracks first.")

    vectors = require_vectors(normalize_feature_vectors(tracks))
    means = mean_features(vectors, AUDIO_FEATURES)

    audio_dna = compute_audio_dna(vectors)
    personality = classify_personality(means)
    genres = build_genre_distribution(genre_tags, track_count, means)
    health = score_health(vectors, genres.genre_count, track_count)

    return AnalysisResult(
        audio_dna=audio_dna,
        personality=personality,
        genre_distribution=genres.distribution,
        subgenres=genres.subgenres,
        health_score=health.health_score,
        health_status=health.health_status,
        overall_rating=health.overall_rating,
        rating_description=health.rating_description,
        top_tracks=top_tracks_for(top_tracks),
        track_count=track_count,
    )
