"""
Recommendation Seed Selector
============================

Maps a named strategy plus the listening signal at hand to a seed
specification for the catalog's recommendation lookup.

Strategies:
    best_next               first playlist tracks (or explicit seed tracks)
    mood_safe               playlist tracks, energy held at the mean ± 0.2
    rare_match              playlist tracks (or indie genres), popularity < 30
    return_familiar         artists already on the playlist
    short_session           playlist tracks (or genres), 5-10 minute tracks
    energy_adjust           playlist tracks, energy shifted 0.3 away from the extremes
    professional_discovery  top, saved and recently played tracks combined
    taste_expansion         top tracks plus two top-artist genres
    deep_cuts               long-term top artists, low popularity
    continue_session        most recent plays
    from_library            saved tracks, low popularity

In SignalBundle, None means a signal was not supplied at all, and an empty
list means it was supplied but turned up nothing. Only the former lets a
strategy fall back to genre seeds.
"""

import json
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .config import (
    DEEP_CUTS_TARGET_POPULARITY,
    ENERGY_ADJUST_BAND,
    ENERGY_ADJUST_HIGH,
    ENERGY_ADJUST_SHIFT,
    FROM_LIBRARY_TARGET_POPULARITY,
    GENERIC_SEED_GENRES,
    HIDDEN_GEM_MAX_POPULARITY,
    MAX_SEEDS_PER_KIND,
    MISSING_POPULARITY,
    MOOD_SAFE_ENERGY_BAND,
    RARE_MATCH_MAX_POPULARITY,
    RARE_MATCH_SEED_GENRES,
    RECOMMENDATION_LIMIT,
    SHORT_SESSION_MAX_MS,
    SHORT_SESSION_MIN_MS,
    SHORT_SESSION_SEED_GENRES,
    TASTE_EXPANSION_MAX_GENRES,
    TIME_RANGES,
)
from .errors import SeedUnavailableError, ValidationError
from .features import TrackIdentity, mean_features, normalize_feature_vectors
from .utils import clamp, unique


@dataclass(frozen=True)
class ArtistSignal:
    """A top artist with its genre tags."""
    artist_id: str
    name: str = ""
    genres: tuple = field(default_factory=tuple)


@dataclass
class SignalBundle:
    """Everything a strategy may draw seeds from."""
    playlist_tracks: Optional[List[TrackIdentity]] = None
    playlist_features: Optional[List[Any]] = None

    # Explicit seeds supplied by the caller
    seed_tracks: Optional[List[str]] = None
    seed_artists: Optional[List[str]] = None
    seed_genres: Optional[List[str]] = None

    # Listening history
    recently_played: Optional[List[str]] = None
    saved_tracks: Optional[List[str]] = None
    top_tracks: Dict[str, List[str]] = field(default_factory=dict)  # time range -> track ids
    top_artists: Dict[str, List[ArtistSignal]] = field(default_factory=dict)  # time range -> artists

    def playlist_track_ids(self) -> List[str]:
        return [t.track_id for t in self.playlist_tracks or [] if t.track_id]


@dataclass(frozen=True)
class PostFilter:
    """Predicate applied to the catalog's results after the lookup."""
    description: str
    predicate: Callable[[Mapping[str, Any]], bool]

    def __call__(self, track: Mapping[str, Any]) -> bool:
        return self.predicate(track)


@dataclass
class SeedSpec:
    """Seeds and constraints for one recommendation lookup."""
    strategy: Optional[str]
    seed_tracks: List[str] = field(default_factory=list)
    seed_artists: List[str] = field(default_factory=list)
    seed_genres: List[str] = field(default_factory=list)
    target_ranges: Dict[str, float] = field(default_factory=dict)
    post_filter: Optional[PostFilter] = None
    limit: int = RECOMMENDATION_LIMIT

    def __post_init__(self):
        self.seed_tracks = list(self.seed_tracks)[:MAX_SEEDS_PER_KIND]
        self.seed_artists = list(self.seed_artists)[:MAX_SEEDS_PER_KIND]
        self.seed_genres = list(self.seed_genres)[:MAX_SEEDS_PER_KIND]

    def has_seeds(self) -> bool:
        return bool(self.seed_tracks or self.seed_artists or self.seed_genres)

    def to_params(self) -> Dict[str, Any]:
        """Keyword arguments for the catalog's recommendations call."""
        params: Dict[str, Any] = {"limit": self.limit}
        if self.seed_tracks:
            params["seed_tracks"] = list(self.seed_tracks)
        if self.seed_artists:
            params["seed_artists"] = list(self.seed_artists)
        if self.seed_genres:
            params["seed_genres"] = list(self.seed_genres)
        params.update(self.target_ranges)
        return params

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "seed_tracks": list(self.seed_tracks),
            "seed_artists": list(self.seed_artists),
            "seed_genres": list(self.seed_genres),
            "target_ranges": dict(self.target_ranges),
            "post_filter": self.post_filter.description if self.post_filter else None,
            "limit": self.limit,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


# =============================================================================
# POST FILTERS
# =============================================================================
def _popularity(track: Mapping[str, Any]) -> float:
    popularity = track.get("popularity")
    return MISSING_POPULARITY if popularity is None else popularity


def popularity_below(ceiling: int) -> PostFilter:
    return PostFilter(
        description=f"popularity < {ceiling}",
        predicate=lambda track: _popularity(track) < ceiling,
    )


def duration_between(min_ms: int, max_ms: int) -> PostFilter:
    return PostFilter(
        description=f"{min_ms} <= duration_ms <= {max_ms}",
        predicate=lambda track: min_ms <= (track.get("duration_ms") or 0) <= max_ms,
    )


def apply_post_filter(spec: SeedSpec, tracks: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Keep the recommended tracks that pass the spec's post filter."""
    if spec.post_filter is None:
        return list(tracks)
    return [track for track in tracks if spec.post_filter(track)]


# =============================================================================
# SIGNAL HELPERS
# =============================================================================
def _playlist_ids_or_fail(strategy: str, signal: SignalBundle) -> List[str]:
    track_ids = signal.playlist_track_ids()
    if not track_ids:
        raise SeedUnavailableError(strategy, "playlist tracks")
    return track_ids


def _playlist_mean_energy(strategy: str, signal: SignalBundle) -> float:
    vectors = normalize_feature_vectors(signal.playlist_features)
    if not vectors:
        raise SeedUnavailableError(strategy, "playlist audio features")
    return mean_features(vectors, ("energy",))["energy"]


def _require_playlist(strategy: str, signal: SignalBundle) -> None:
    if signal.playlist_tracks is None:
        raise SeedUnavailableError(
            strategy, "a playlist",
            f"Strategy '{strategy}' requires a playlist",
        )


# =============================================================================
# STRATEGY RULES
# =============================================================================
def best_next(signal: SignalBundle) -> SeedSpec:
    if signal.playlist_tracks is not None:
        return SeedSpec("best_next", seed_tracks=_playlist_ids_or_fail("best_next", signal))
    if signal.seed_tracks:
        return SeedSpec("best_next", seed_tracks=signal.seed_tracks)
    raise SeedUnavailableError("best_next", "playlist tracks or seed tracks")


def mood_safe(signal: SignalBundle) -> SeedSpec:
    _require_playlist("mood_safe", signal)
    track_ids = _playlist_ids_or_fail("mood_safe", signal)
    energy = _playlist_mean_energy("mood_safe", signal)
    return SeedSpec(
        "mood_safe",
        seed_tracks=track_ids,
        target_ranges={
            "target_energy": energy,
            "min_energy": max(0.0, energy - MOOD_SAFE_ENERGY_BAND),
            "max_energy": min(1.0, energy + MOOD_SAFE_ENERGY_BAND),
        },
    )


def rare_match(signal: SignalBundle) -> SeedSpec:
    post_filter = popularity_below(RARE_MATCH_MAX_POPULARITY)
    if signal.playlist_tracks is None:
        return SeedSpec("rare_match", seed_genres=list(RARE_MATCH_SEED_GENRES), post_filter=post_filter)
    return SeedSpec(
        "rare_match",
        seed_tracks=_playlist_ids_or_fail("rare_match", signal),
        post_filter=post_filter,
    )


def return_familiar(signal: SignalBundle) -> SeedSpec:
    if signal.playlist_tracks is not None:
        artist_ids = unique(a for t in signal.playlist_tracks for a in t.artist_ids if a)
        if not artist_ids:
            raise SeedUnavailableError("return_familiar", "artists on the playlist")
        return SeedSpec("return_familiar", seed_artists=artist_ids)
    if signal.seed_artists:
        return SeedSpec("return_familiar", seed_artists=signal.seed_artists)
    raise SeedUnavailableError("return_familiar", "playlist tracks or seed artists")


def short_session(signal: SignalBundle) -> SeedSpec:
    post_filter = duration_between(SHORT_SESSION_MIN_MS, SHORT_SESSION_MAX_MS)
    if signal.playlist_tracks is None:
        return SeedSpec("short_session", seed_genres=list(SHORT_SESSION_SEED_GENRES), post_filter=post_filter)
    return SeedSpec(
        "short_session",
        seed_tracks=_playlist_ids_or_fail("short_session", signal),
        post_filter=post_filter,
    )


def energy_adjust(signal: SignalBundle) -> SeedSpec:
    _require_playlist("energy_adjust", signal)
    track_ids = _playlist_ids_or_fail("energy_adjust", signal)
    energy = _playlist_mean_energy("energy_adjust", signal)

    # Move away from the extremes: high-energy playlists come down
    if energy >= ENERGY_ADJUST_HIGH:
        target = max(0.0, energy - ENERGY_ADJUST_SHIFT)
    else:
        target = min(1.0, energy + ENERGY_ADJUST_SHIFT)

    return SeedSpec(
        "energy_adjust",
        seed_tracks=track_ids,
        target_ranges={
            "target_energy": target,
            "min_energy": clamp(target - ENERGY_ADJUST_BAND, 0.0, 1.0),
            "max_energy": clamp(target + ENERGY_ADJUST_BAND, 0.0, 1.0),
        },
    )


def professional_discovery(signal: SignalBundle) -> SeedSpec:
    candidates = []
    for time_range in TIME_RANGES:
        candidates.extend(signal.top_tracks.get(time_range) or [])
    candidates.extend(signal.saved_tracks or [])
    candidates.extend(signal.recently_played or [])

    seed_tracks = unique(t for t in candidates if t)
    if not seed_tracks:
        raise SeedUnavailableError("professional_discovery", "top, saved or recently played tracks")
    return SeedSpec("professional_discovery", seed_tracks=seed_tracks)


def taste_expansion(signal: SignalBundle) -> SeedSpec:
    seed_tracks = [t for t in signal.top_tracks.get("medium_term") or [] if t]
    if not seed_tracks:
        raise SeedUnavailableError("taste_expansion", "medium-term top tracks")

    genres = unique(
        genre
        for artist in signal.top_artists.get("medium_term") or []
        for genre in artist.genres
        if genre
    )
    return SeedSpec(
        "taste_expansion",
        seed_tracks=seed_tracks,
        seed_genres=genres[:TASTE_EXPANSION_MAX_GENRES],
    )


def deep_cuts(signal: SignalBundle) -> SeedSpec:
    artist_ids = unique(a.artist_id for a in signal.top_artists.get("long_term") or [] if a.artist_id)
    if not artist_ids:
        raise SeedUnavailableError("deep_cuts", "long-term top artists")
    return SeedSpec(
        "deep_cuts",
        seed_artists=artist_ids,
        target_ranges={"target_popularity": DEEP_CUTS_TARGET_POPULARITY},
        post_filter=popularity_below(HIDDEN_GEM_MAX_POPULARITY),
    )


def continue_session(signal: SignalBundle) -> SeedSpec:
    seed_tracks = [t for t in signal.recently_played or [] if t]
    if not seed_tracks:
        raise SeedUnavailableError("continue_session", "recently played tracks")
    return SeedSpec("continue_session", seed_tracks=seed_tracks)


def from_library(signal: SignalBundle) -> SeedSpec:
    seed_tracks = [t for t in signal.saved_tracks or [] if t]
    if not seed_tracks:
        raise SeedUnavailableError("from_library", "saved tracks")
    return SeedSpec(
        "from_library",
        seed_tracks=seed_tracks,
        target_ranges={"target_popularity": FROM_LIBRARY_TARGET_POPULARITY},
        post_filter=popularity_below(HIDDEN_GEM_MAX_POPULARITY),
    )


def explicit_seeds(signal: SignalBundle) -> SeedSpec:
    """Caller-supplied seeds; generic genres only when none were given."""
    spec = SeedSpec(
        None,
        seed_tracks=signal.seed_tracks or [],
        seed_artists=signal.seed_artists or [],
        seed_genres=signal.seed_genres or [],
    )
    if not spec.has_seeds():
        spec.seed_genres = list(GENERIC_SEED_GENRES)
    return spec


# =============================================================================
# STRATEGY TABLE
# =============================================================================
@dataclass(frozen=True)
class Strategy:
    id: str
    name: str
    description: str
    rule: Callable[[SignalBundle], SeedSpec]

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


STRATEGIES = OrderedDict((s.id, s) for s in (
    Strategy("best_next", "Best Next Track",
             "Picks the next song based on current momentum", best_next),
    Strategy("mood_safe", "Mood-Safe Pick",
             "Maintains your current vibe without jarring changes", mood_safe),
    Strategy("rare_match", "Rare Match For You",
             "Hidden gems that align with your unique taste", rare_match),
    Strategy("return_familiar", "Return To Familiar",
             "Deep cuts from artists you already love", return_familiar),
    Strategy("short_session", "Short Session Mode",
             "Perfect tracks for quick 5-10 minute breaks", short_session),
    Strategy("energy_adjust", "Energy Adjustment",
             "Gradually shift the energy up or down", energy_adjust),
    Strategy("professional_discovery", "Professional Discovery",
             "Multi-source analysis for sophisticated recommendations", professional_discovery),
    Strategy("taste_expansion", "Taste Expansion",
             "Bridge to new genres while respecting your preferences", taste_expansion),
    Strategy("deep_cuts", "Deep Cuts",
             "Hidden gems from your favorite artists", deep_cuts),
    Strategy("continue_session", "Continue Session",
             "Based on your recently played tracks", continue_session),
    Strategy("from_library", "From Your Library",
             "Deep cuts from your saved tracks", from_library),
))


def list_strategies() -> List[Dict[str, str]]:
    return [s.to_dict() for s in STRATEGIES.values()]


def select_seeds(strategy: Optional[str], signal: SignalBundle) -> SeedSpec:
    """
    Build the seed specification for a strategy.

    Args:
        strategy: One of the STRATEGIES ids, or None for explicit seeds
        signal: Available listening signal

    Returns:
        SeedSpec

    Raises:
        ValidationError: unknown strategy id
        SeedUnavailableError: the strategy's required signal is empty
    """
    if strategy is None:
        return explicit_seeds(signal)

    if strategy not in STRATEGIES:
        raise ValidationError(
            f"Unknown strategy '{strategy}'. Choose one of: {', '.join(STRATEGIES)}"
        )

    spec = STRATEGIES[strategy].rule(signal)
    if not spec.has_seeds():
        raise SeedUnavailableError(strategy, "at least one seed")
    return spec
