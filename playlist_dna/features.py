"""
Feature Vector Normalizer
=========================

Validates raw per-track audio feature records coming from the catalog and
turns them into immutable feature vectors.

Raw records may be:
    1. None (the catalog has no features for that track)
    2. Mappings (the catalog's audio-features payload)
    3. Already-built TrackFeatureVector instances

Anything that is missing a required field, or carries a non-numeric value,
is dropped. No defaults are substituted.
"""

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .config import AUDIO_FEATURES, UNIT_FEATURES
from .errors import DataInsufficientError


@dataclass(frozen=True)
class TrackFeatureVector:
    """Audio features of a single track."""
    energy: float
    danceability: float
    valence: float
    acousticness: float
    instrumentalness: float
    tempo: float  # BPM

    track_id: Optional[str] = None

    def get(self, name: str) -> float:
        """Scalar accessor by feature name."""
        if name not in AUDIO_FEATURES:
            raise KeyError(name)
        return getattr(self, name)


@dataclass(frozen=True)
class TrackIdentity:
    """Display/diff data for a track. Never used for scoring."""
    track_id: str
    name: str = "Unknown"
    primary_artist: str = "Unknown"
    album_art_url: Optional[str] = None
    artist_ids: tuple = field(default_factory=tuple)
    artist_names: tuple = field(default_factory=tuple)

    @classmethod
    def from_track(cls, track: Mapping[str, Any]) -> "TrackIdentity":
        """
        Build identity data from a catalog track payload.

        Args:
            track: Track object as returned by the catalog

        Returns:
            TrackIdentity instance
        """
        artists = [a for a in track.get("artists") or [] if a]
        artist_names = tuple(a.get("name", "") for a in artists if a.get("name"))
        artist_ids = tuple(a["id"] for a in artists if a.get("id"))

        images = (track.get("album") or {}).get("images") or []
        album_art = images[0].get("url") if images else None

        return cls(
            track_id=track["id"],
            name=track.get("name") or "Unknown",
            primary_artist=artist_names[0] if artist_names else "Unknown",
            album_art_url=album_art,
            artist_ids=artist_ids,
            artist_names=artist_names,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.track_id,
            "name": self.name,
            "artist": self.primary_artist,
            "album_art": self.album_art_url,
            "artist_ids": list(self.artist_ids),
            "artist_names": list(self.artist_names),
        }


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _from_mapping(record: Mapping[str, Any]) -> Optional[TrackFeatureVector]:
    values = {}
    for name in AUDIO_FEATURES:
        value = record.get(name)
        if not _is_number(value):
            return None
        values[name] = float(value)

    if any(not 0.0 <= values[name] <= 1.0 for name in UNIT_FEATURES):
        return None
    if values["tempo"] < 0:
        return None

    track_id = record.get("id")
    return TrackFeatureVector(track_id=track_id if isinstance(track_id, str) else None, **values)


def normalize_feature_vectors(raw: Optional[Iterable[Any]]) -> List[TrackFeatureVector]:
    """
    Filter a possibly sparse list of raw feature records.

    Args:
        raw: Raw records (None, mappings or TrackFeatureVector)

    Returns:
        Well-formed feature vectors, in input order
    """
    vectors = []
    for record in raw or []:
        if record is None:
            continue
        if isinstance(record, TrackFeatureVector):
            vectors.append(record)
        elif isinstance(record, Mapping):
            vector = _from_mapping(record)
            if vector is not None:
                vectors.append(vector)
    return vectors


def require_vectors(vectors: Sequence[TrackFeatureVector]) -> Sequence[TrackFeatureVector]:
    """Raise DataInsufficientError when no vector is available."""
    if not vectors:
        raise DataInsufficientError(
            "Cannot analyze: no tracks with audio features. Add more tracks and try again."
        )
    return vectors


def feature_matrix(
    vectors: Sequence[TrackFeatureVector],
    names: Sequence[str] = AUDIO_FEATURES
) -> np.ndarray:
    """Stack vectors into an (n_tracks, n_features) matrix."""
    if not vectors:
        return np.zeros((0, len(names)))
    return np.array([[v.get(name) for name in names] for v in vectors], dtype=float)


def mean_features(
    vectors: Sequence[TrackFeatureVector],
    names: Sequence[str] = AUDIO_FEATURES
) -> Dict[str, float]:
    """
    Arithmetic mean per feature. Every track counts equally.

    Returns all zeros for an empty collection.
    """
    if not vectors:
        return {name: 0.0 for name in names}
    means = feature_matrix(vectors, names).mean(axis=0)
    return {name: float(value) for name, value in zip(names, means)}


def energy_std(vectors: Sequence[TrackFeatureVector]) -> float:
    """Population standard deviation of energy (0 for an empty collection)."""
    if not vectors:
        return 0.0
    energies = feature_matrix(vectors, ("energy",))[:, 0]
    return float(np.std(energies))
