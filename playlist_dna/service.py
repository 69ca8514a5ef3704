"""
Playlist Service
================

Orchestrates the complete pipelines:
1. Parse playlist input
2. Resolve all catalog data (tracks, features, genres)
3. Hand the resolved data to the synchronous engine
4. Return plain result records

Analysis:       fetch -> analyze
Battle:         fetch both sides -> battle
Recommendation: gather signal -> select seeds -> lookup -> post filter
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .analyzer import AnalysisResult
from .battle import BattleResult
from .seeds import SeedSpec, select_seeds
from .snapshot import PlaylistSnapshot, battle_snapshots
from .spotify_client import SpotifyClient


@dataclass
class RecommendationOutput:
    """Seeds used and the tracks they produced."""
    spec: SeedSpec
    tracks: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "seeds": self.spec.to_dict(),
            "tracks": [
                {
                    "id": t.get("id"),
                    "name": t.get("name"),
                    "artists": [a.get("name") for a in t.get("artists") or []],
                    "popularity": t.get("popularity"),
                    "duration_ms": t.get("duration_ms"),
                }
                for t in self.tracks
            ],
        }


class PlaylistService:
    """
    Fetch-then-compute front end for the engine.

    Usage:
        service = PlaylistService()
        result = service.analyze("spotify:playlist:xxxxx")
        print(result.to_json())
    """

    def __init__(self, spotify_client: Optional[SpotifyClient] = None, verbose: bool = True):
        """
        Initialize the service.

        Args:
            spotify_client: Pre-configured Spotify client (creates new if None)
            verbose: Print progress output
        """
        self.spotify = spotify_client or SpotifyClient()
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(message)

    def fetch(self, playlist_input: str) -> PlaylistSnapshot:
        self._log("📥 Fetching playlist data...")
        snapshot = self.spotify.fetch_snapshot(playlist_input)
        features_found = sum(1 for f in snapshot.audio_features if f)
        self._log(f"   Playlist: {snapshot.name}")
        self._log(f"   Tracks: {snapshot.track_count} ({features_found} with audio features)")
        return snapshot

    def analyze(self, playlist_input: str) -> AnalysisResult:
        """
        Analyze one playlist.

        Args:
            playlist_input: Playlist URL, URI, or ID

        Returns:
            AnalysisResult
        """
        snapshot = self.fetch(playlist_input)
        self._log("🔬 Analyzing audio DNA...")
        result = snapshot.analyze()
        self._log(f"✅ {result.personality.label}, health {result.health_score} ({result.health_status})")
        return result

    def battle(self, first_input: str, second_input: str) -> BattleResult:
        """
        Battle two playlists.

        Args:
            first_input, second_input: Playlist URLs, URIs, or IDs

        Returns:
            BattleResult
        """
        return self.compare(self.fetch(first_input), self.fetch(second_input))

    def compare(self, first: PlaylistSnapshot, second: PlaylistSnapshot) -> BattleResult:
        """Battle two playlists that are already fetched."""
        self._log("⚔️  Comparing playlists...")
        result = battle_snapshots(first, second)
        self._log(f"✅ Compatibility {result.compatibility_score}%, {result.winner_reason}")
        return result

    def recommend(
        self,
        strategy: Optional[str],
        playlist_input: Optional[str] = None,
        seed_tracks: Optional[List[str]] = None,
        seed_artists: Optional[List[str]] = None,
        seed_genres: Optional[List[str]] = None,
        include_history: bool = True,
    ) -> RecommendationOutput:
        """
        Recommend tracks with one of the seed strategies.

        Args:
            strategy: Strategy id, or None for explicit seeds
            playlist_input: Playlist to draw seeds from
            seed_tracks, seed_artists, seed_genres: Explicit seeds
            include_history: Fetch listening history for the history strategies

        Returns:
            RecommendationOutput
        """
        self._log("🎧 Gathering listening signal...")
        signal = self.spotify.build_signal_bundle(
            playlist_input,
            include_history=include_history,
            seed_tracks=seed_tracks,
            seed_artists=seed_artists,
            seed_genres=seed_genres,
        )

        spec = select_seeds(strategy, signal)
        self._log(f"🌱 Seeds: {len(spec.seed_tracks)} tracks, {len(spec.seed_artists)} artists, "
                  f"{len(spec.seed_genres)} genres")

        self._log("🔍 Fetching recommendations...")
        tracks = self.spotify.get_recommendations(spec)
        self._log(f"✅ {len(tracks)} tracks after filtering")
        return RecommendationOutput(spec=spec, tracks=tracks)
