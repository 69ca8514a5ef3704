"""
Compatibility Engine
====================

Scores how well two playlists go together, and which one is stronger.

Mathematical Formulation:
-------------------------

    v_p        = mean feature vector of playlist p over
                 {energy, danceability, valence, acousticness, instrumentalness}
    dot        = Σ w_i × v1_i × v2_i
    ‖v‖_w      = sqrt(Σ w_i × v_i²)
    cos        = dot / (‖v1‖_w × ‖v2‖_w)
    compat     = round(100 / (1 + e^(-5 (cos - 0.5))))

The logistic is centred at cos = 0.5 and stretches mid-range similarity
into a more legible spread. Scaling both vectors by sqrt(w) turns the
weighted cosine into a plain cosine, which is what gets computed.

Per-playlist battle scores reuse the health flow/engagement terms and
leave genre variety out:

    score_p    = round(0.5 × flow_p + 0.5 × engagement_p)
"""

from typing import Hashable, Iterable, List, Optional, Sequence

import numpy as np
from scipy.special import expit
from sklearn.metrics.pairwise import cosine_similarity

from .config import (
    BATTLE_ENGAGEMENT_WEIGHT,
    BATTLE_FLOW_WEIGHT,
    DEFAULT_COMPATIBILITY_WEIGHTS,
    SIGMOID_MIDPOINT,
    SIGMOID_STEEPNESS,
    UNIT_FEATURES,
    CompatibilityWeights,
)
from .features import TrackFeatureVector, energy_std, mean_features
from .health import engagement_score, flow_score
from .utils import round_half_up, unique

PLAYLIST1 = "playlist1"
PLAYLIST2 = "playlist2"
TIE = "tie"


def _weight_array(weights: CompatibilityWeights) -> np.ndarray:
    weight_map = weights.to_dict()
    return np.array([weight_map[name] for name in UNIT_FEATURES], dtype=float)


def mean_vector(vectors: Sequence[TrackFeatureVector]) -> np.ndarray:
    """Mean over the five [0, 1] features (zeros when empty)."""
    means = mean_features(vectors, UNIT_FEATURES)
    return np.array([means[name] for name in UNIT_FEATURES], dtype=float)


def weighted_magnitude(vector: np.ndarray, weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS) -> float:
    return float(np.sqrt(np.sum(_weight_array(weights) * vector * vector)))


def weighted_cosine_similarity(
    v1: np.ndarray,
    v2: np.ndarray,
    weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS
) -> Optional[float]:
    """
    Weighted cosine similarity of two mean vectors.

    Returns:
        Similarity, or None when either weighted magnitude is 0
    """
    if weighted_magnitude(v1, weights) == 0 or weighted_magnitude(v2, weights) == 0:
        return None

    scale = np.sqrt(_weight_array(weights))
    sim = cosine_similarity((v1 * scale).reshape(1, -1), (v2 * scale).reshape(1, -1))[0, 0]
    return float(sim)


def squash_similarity(similarity: float) -> int:
    """Logistic squashing of cosine similarity onto 0-100."""
    return round_half_up(100 * float(expit(SIGMOID_STEEPNESS * (similarity - SIGMOID_MIDPOINT))))


def compatibility_score(
    vectors_a: Sequence[TrackFeatureVector],
    vectors_b: Sequence[TrackFeatureVector],
    weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS
) -> int:
    """
    Symmetric 0-100 compatibility of two playlists.

    Degrades to 0 when either side has no features or a zero vector.
    """
    if not vectors_a or not vectors_b:
        return 0

    similarity = weighted_cosine_similarity(mean_vector(vectors_a), mean_vector(vectors_b), weights)
    if similarity is None:
        return 0
    return squash_similarity(similarity)


def playlist_score(vectors: Sequence[TrackFeatureVector]) -> int:
    """Battle score of one playlist: flow and engagement only."""
    if not vectors:
        return 0
    flow = flow_score(energy_std(vectors))
    engagement = engagement_score(mean_features(vectors, ("danceability",))["danceability"])
    return round_half_up(BATTLE_FLOW_WEIGHT * flow + BATTLE_ENGAGEMENT_WEIGHT * engagement)


def determine_winner(score1: int, score2: int) -> str:
    if score1 > score2:
        return PLAYLIST1
    if score2 > score1:
        return PLAYLIST2
    return TIE


def shared_items(first: Iterable[Hashable], second: Iterable[Hashable]) -> List:
    """Exact intersection, in the first collection's order, without duplicates."""
    second_set = set(second)
    return [item for item in unique(first) if item in second_set]


def winner_reason(winner: str, score1: int, score2: int) -> str:
    if winner == PLAYLIST1:
        return f"Playlist 1 wins with score {score1} vs {score2}"
    if winner == PLAYLIST2:
        return f"Playlist 2 wins with score {score2} vs {score1}"
    return f"It's a tie at {score1} points each"
