"""
Health Scorer
=============

Combines three sub-scores into a single 0-100 health score:

    flow        = 100                                   if std(energy) < 0.2
                = max(0, 100 - (std(energy) - 0.2) * 200) otherwise
    variety     = min(100, genre_count / track_count * 500)
    engagement  = mean(danceability) * 100

    health      = round(0.4 * flow + 0.3 * variety + 0.3 * engagement)

The overall 1.0-5.0 rating is health / 20, penalized for very small and
very large playlists.
"""

from dataclasses import dataclass
from typing import Sequence

from .config import (
    DEFAULT_HEALTH_STATUS,
    DEFAULT_HEALTH_WEIGHTS,
    DEFAULT_RATING_DESCRIPTION,
    FLOW_STD_PENALTY,
    FLOW_STD_TOLERANCE,
    HEALTH_STATUS_TIERS,
    LARGE_PLAYLIST_PENALTY,
    LARGE_PLAYLIST_TRACKS,
    RATING_MAX,
    RATING_MIN,
    RATING_TIERS,
    SMALL_PLAYLIST_PENALTY,
    SMALL_PLAYLIST_TRACKS,
    VARIETY_MULTIPLIER,
    HealthWeights,
)
from .features import TrackFeatureVector, energy_std, mean_features
from .utils import clamp, round_half_up, round_to_tenth


@dataclass(frozen=True)
class HealthReport:
    health_score: int
    health_status: str
    overall_rating: float
    rating_description: str

    # Sub-scores, kept for explanation
    flow: float = 0.0
    variety: float = 0.0
    engagement: float = 0.0


def flow_score(energy_stddev: float) -> float:
    if energy_stddev < FLOW_STD_TOLERANCE:
        return 100.0
    return max(0.0, 100 - (energy_stddev - FLOW_STD_TOLERANCE) * FLOW_STD_PENALTY)


def variety_score(genre_count: int, track_count: int) -> float:
    if track_count <= 0:
        return 0.0
    return min(100.0, genre_count / track_count * VARIETY_MULTIPLIER)


def engagement_score(mean_danceability: float) -> float:
    return mean_danceability * 100


def health_status(score: int) -> str:
    for lower_bound, status in HEALTH_STATUS_TIERS:
        if score >= lower_bound:
            return status
    return DEFAULT_HEALTH_STATUS


def raw_rating(score: int, track_count: int) -> float:
    """Rating before rounding: penalties first, then the [1, 5] clamp."""
    rating = score / 20.0
    if track_count < SMALL_PLAYLIST_TRACKS:
        rating *= SMALL_PLAYLIST_PENALTY
    if track_count > LARGE_PLAYLIST_TRACKS:
        rating *= LARGE_PLAYLIST_PENALTY
    return clamp(rating, RATING_MIN, RATING_MAX)


def rating_description(rating: float) -> str:
    for lower_bound, description in RATING_TIERS:
        if rating >= lower_bound:
            return description
    return DEFAULT_RATING_DESCRIPTION


def score_health(
    vectors: Sequence[TrackFeatureVector],
    genre_count: int,
    track_count: int,
    weights: HealthWeights = DEFAULT_HEALTH_WEIGHTS
) -> HealthReport:
    """
    Score a playlist's health.

    Args:
        vectors: Normalized feature vectors
        genre_count: Length of the genre distribution
        track_count: Number of tracks in the playlist

    Returns:
        HealthReport
    """
    flow = flow_score(energy_std(vectors))
    variety = variety_score(genre_count, track_count)
    engagement = engagement_score(mean_features(vectors, ("danceability",))["danceability"])

    score = round_half_up(
        weights.flow * flow + weights.variety * variety + weights.engagement * engagement
    )

    rating = raw_rating(score, track_count)

    return HealthReport(
        health_score=score,
        health_status=health_status(score),
        overall_rating=round_to_tenth(rating),
        rating_description=rating_description(rating),
        flow=flow,
        variety=variety,
        engagement=engagement,
    )
