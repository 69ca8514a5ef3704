"""
Playlist DNA - Playlist Analysis and Battle Engine
==================================================

Turns per-track audio features and artist genre tags into an Audio DNA
profile, a listening personality, a genre breakdown and a health rating,
compares two playlists head to head, and picks recommendation seeds.

Modules:
    - config: Configuration and constants
    - errors: Engine exceptions
    - features: Feature normalization
    - audio_dna: Audio DNA scaling
    - personality: Personality classification
    - genres: Genre distribution and subgenres
    - health: Health score and rating
    - compatibility: Weighted cosine compatibility and battle scores
    - analyzer: Single-playlist analysis
    - battle: Playlist battles
    - seeds: Recommendation seed strategies
    - snapshot: Resolved playlist snapshots
    - spotify_client: Spotify API wrapper
    - service: Fetch-then-compute orchestration
    - explainer: Explanation generation
    - cli: Command-line interface
"""

from .analyzer import AnalysisResult, analyze
from .battle import BattleResult, battle
from .errors import DataInsufficientError, PlaylistDnaError, SeedUnavailableError, ValidationError
from .seeds import SeedSpec, SignalBundle, select_seeds

__version__ = "1.0.0"
__author__ = "Playlist DNA Team"
