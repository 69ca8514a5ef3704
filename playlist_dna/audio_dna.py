"""
Audio DNA Aggregator
====================

Maps the mean feature vector of a track collection onto a 0-100 display
scale:

    dna_f     = round(100 * mean_f)                            for [0, 1] features
    dna_tempo = clamp(round((mean_tempo - 60) / 140 * 100), 0, 100)
"""

from dataclasses import dataclass, asdict
from typing import Dict, Sequence

from .config import TEMPO_RANGE, UNIT_FEATURES, AUDIO_FEATURES
from .features import TrackFeatureVector, mean_features, require_vectors
from .utils import clamp, round_half_up


@dataclass(frozen=True)
class AudioDnaVector:
    """Display-scaled mean audio features, each in [0, 100]."""
    energy: int
    danceability: int
    valence: int
    acousticness: int
    instrumentalness: int
    tempo: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def scale_unit_feature(mean_value: float) -> int:
    return int(clamp(round_half_up(mean_value * 100), 0, 100))


def scale_tempo(mean_tempo: float) -> int:
    span = TEMPO_RANGE["max"] - TEMPO_RANGE["min"]
    scaled = round_half_up((mean_tempo - TEMPO_RANGE["min"]) / span * 100)
    return int(clamp(scaled, 0, 100))


def dna_from_means(means: Dict[str, float]) -> AudioDnaVector:
    values = {name: scale_unit_feature(means[name]) for name in UNIT_FEATURES}
    values["tempo"] = scale_tempo(means["tempo"])
    return AudioDnaVector(**values)


def compute_audio_dna(vectors: Sequence[TrackFeatureVector]) -> AudioDnaVector:
    """
    Compute the Audio DNA of a non-empty collection.

    Raises:
        DataInsufficientError: if vectors is empty
    """
    require_vectors(vectors)
    return dna_from_means(mean_features(vectors, AUDIO_FEATURES))
