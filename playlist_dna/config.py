"""
Configuration and constants for the Playlist DNA analytics engine.
"""
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict

# =============================================================================
# SPOTIFY API CONFIGURATION
# =============================================================================
SPOTIFY_CLIENT_ID = os.environ.get("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.environ.get("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_REDIRECT_URI = os.environ.get("SPOTIFY_REDIRECT_URI", "http://localhost:8888/callback")

# Scopes needed for the listening-signal strategies
SPOTIFY_USER_SCOPES = "user-top-read user-library-read user-read-recently-played playlist-read-private"

# Catalog batch limits
AUDIO_FEATURES_BATCH_SIZE = 100
ARTISTS_BATCH_SIZE = 50
PLAYLIST_PAGE_SIZE = 100

# =============================================================================
# AUDIO FEATURE CONFIGURATION
# =============================================================================
# Features that are already normalized [0, 1]
UNIT_FEATURES = (
    "energy",
    "danceability",
    "valence",
    "acousticness",
    "instrumentalness",
)

AUDIO_FEATURES = UNIT_FEATURES + ("tempo",)

# Playable tempo range mapped onto the 0-100 display scale
TEMPO_RANGE = MappingProxyType({"min": 60.0, "max": 200.0})

# Features reported per playlist in battle audio data
BATTLE_AUDIO_FEATURES = ("energy", "danceability", "valence", "acousticness", "tempo")

# =============================================================================
# COMPATIBILITY WEIGHTS
# =============================================================================
@dataclass(frozen=True)
class CompatibilityWeights:
    """Per-feature weights for the weighted cosine similarity."""
    energy: float = 0.25
    danceability: float = 0.20
    valence: float = 0.20
    acousticness: float = 0.15
    instrumentalness: float = 0.20

    def to_dict(self) -> Dict[str, float]:
        return {
            "energy": self.energy,
            "danceability": self.danceability,
            "valence": self.valence,
            "acousticness": self.acousticness,
            "instrumentalness": self.instrumentalness,
        }

DEFAULT_COMPATIBILITY_WEIGHTS = CompatibilityWeights()

# Logistic squashing of cosine similarity
SIGMOID_STEEPNESS = 5.0
SIGMOID_MIDPOINT = 0.5

# =============================================================================
# PERSONALITY THRESHOLDS
# =============================================================================
@dataclass(frozen=True)
class PersonalityThresholds:
    """Cut-offs used by the ordered personality rules."""
    experimental_instrumentalness: float = 0.3
    experimental_energy: float = 0.8
    experimental_danceability: float = 0.4
    mood_acousticness: float = 0.5
    mood_low_valence: float = 0.3
    mood_high_valence: float = 0.8
    eclectic_energy: float = 0.4
    eclectic_acousticness: float = 0.3

DEFAULT_PERSONALITY_THRESHOLDS = PersonalityThresholds()

PERSONALITY_DESCRIPTIONS = MappingProxyType({
    "The Experimentalist": (
        "You explore the outer edges of sound. Conventions don't bind you; "
        "you seek textures and atmospheres over catchy hooks."
    ),
    "Mood-Driven": (
        "Music is an emotional amplifier for you. You curate soundscapes that "
        "perfectly match or alter your internal state."
    ),
    "The Eclectic": (
        "Why choose one lane? You cruise through genres with ease, finding the "
        "common thread between folk, pop, and rock."
    ),
    "Trend-Aware": (
        "You have your finger on the pulse. Your playlist keeps the energy high "
        "and the vibes current."
    ),
})

DEFAULT_PERSONALITY = "Trend-Aware"

# =============================================================================
# GENRE DISTRIBUTION
# =============================================================================
MAX_GENRES = 10
MAX_SUBGENRES = 6
SUBGENRE_RATIO = 0.5  # long tail: count < ratio * max count

# Used when the catalog has no genre tags for any artist
FALLBACK_GENRES = (("Pop", 30), ("Rock", 25), ("Electronic", 20))

# =============================================================================
# HEALTH SCORE
# =============================================================================
@dataclass(frozen=True)
class HealthWeights:
    """Weights of the three health sub-scores."""
    flow: float = 0.4
    variety: float = 0.3
    engagement: float = 0.3

DEFAULT_HEALTH_WEIGHTS = HealthWeights()

# Battle scoring drops the variety term
BATTLE_FLOW_WEIGHT = 0.5
BATTLE_ENGAGEMENT_WEIGHT = 0.5

FLOW_STD_TOLERANCE = 0.2
FLOW_STD_PENALTY = 200
VARIETY_MULTIPLIER = 500

# Inclusive lower bounds, highest first
HEALTH_STATUS_TIERS = (
    (90, "Exceptional"),
    (75, "Great"),
    (60, "Good"),
    (40, "Average"),
)
DEFAULT_HEALTH_STATUS = "Needs Work"

# =============================================================================
# OVERALL RATING
# =============================================================================
RATING_MIN = 1.0
RATING_MAX = 5.0
SMALL_PLAYLIST_TRACKS = 10
SMALL_PLAYLIST_PENALTY = 0.9
LARGE_PLAYLIST_TRACKS = 500
LARGE_PLAYLIST_PENALTY = 0.95

RATING_TIERS = (
    (4.8, "Masterpiece curation."),
    (4.5, "Highly curated selection."),
    (4.0, "Well balanced mix."),
    (3.0, "Good potential."),
)
DEFAULT_RATING_DESCRIPTION = "Solid collection."

# =============================================================================
# RECOMMENDATION SEEDS
# =============================================================================
MAX_SEEDS_PER_KIND = 5
RECOMMENDATION_LIMIT = 20
TOP_TRACKS_DISPLAYED = 5

TIME_RANGES = ("short_term", "medium_term", "long_term")

GENERIC_SEED_GENRES = ("pop", "indie", "rock")
RARE_MATCH_SEED_GENRES = ("indie", "alternative", "underground")
SHORT_SESSION_SEED_GENRES = ("pop", "indie", "acoustic")

MOOD_SAFE_ENERGY_BAND = 0.2
ENERGY_ADJUST_SHIFT = 0.3
ENERGY_ADJUST_BAND = 0.1
ENERGY_ADJUST_HIGH = 0.7

RARE_MATCH_MAX_POPULARITY = 30
HIDDEN_GEM_MAX_POPULARITY = 50
DEEP_CUTS_TARGET_POPULARITY = 30
FROM_LIBRARY_TARGET_POPULARITY = 40
MISSING_POPULARITY = 100

SHORT_SESSION_MIN_MS = 300000
SHORT_SESSION_MAX_MS = 600000

TASTE_EXPANSION_MAX_GENRES = 2
