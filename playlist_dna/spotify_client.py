"""
Spotify API Client Wrapper
==========================

Fetch layer that sits in front of the engine. Handles:
- Authentication
- Playlist pagination
- Audio features retrieval (batches of 100 track ids)
- Artist genre lookups (batches of 50 artist ids)
- Listening history signal for the seed strategies
- Recommendation lookups and post filtering

Every batch is resolved before anything is handed to the engine.
A failed batch degrades to missing entries, which the normalizer drops.
"""

import os
import time
from typing import Any, Dict, List, Optional

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOAuth

from .config import (
    ARTISTS_BATCH_SIZE,
    AUDIO_FEATURES_BATCH_SIZE,
    PLAYLIST_PAGE_SIZE,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_USER_SCOPES,
    TIME_RANGES,
)
from .features import TrackIdentity
from .seeds import ArtistSignal, SeedSpec, SignalBundle, apply_post_filter
from .snapshot import PlaylistSnapshot
from .utils import batch_process, extract_spotify_id, unique


class SpotifyClient:
    """
    Wrapper around Spotipy with throttling and batch operations.

    Attributes:
        sp: Spotipy client instance
    """

    def __init__(self, sp: Optional[spotipy.Spotify] = None, user_auth: bool = False):
        """
        Initialize Spotify client with credentials.

        Args:
            sp: Pre-configured Spotipy client (creates new if None)
            user_auth: Use the authorization-code flow, needed for the
                listening-history strategies
        """
        if sp is None:
            # Get credentials from environment at runtime (not import time)
            client_id = os.environ.get("SPOTIFY_CLIENT_ID") or os.environ.get("SPOTIPY_CLIENT_ID") or SPOTIFY_CLIENT_ID
            client_secret = os.environ.get("SPOTIFY_CLIENT_SECRET") or os.environ.get("SPOTIPY_CLIENT_SECRET") or SPOTIFY_CLIENT_SECRET

            if user_auth:
                auth_manager = SpotifyOAuth(
                    client_id=client_id,
                    client_secret=client_secret,
                    redirect_uri=os.environ.get("SPOTIFY_REDIRECT_URI") or SPOTIFY_REDIRECT_URI,
                    scope=SPOTIFY_USER_SCOPES,
                )
            else:
                auth_manager = SpotifyClientCredentials(
                    client_id=client_id,
                    client_secret=client_secret
                )
            sp = spotipy.Spotify(auth_manager=auth_manager)

        self.sp = sp

        # Request throttling
        self._last_request_time = 0.0
        self._min_request_interval = 0.05  # 50ms between requests

    def _throttle(self):
        """Ensure minimum time between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    # =========================================================================
    # PLAYLIST OPERATIONS
    # =========================================================================

    def get_playlist(self, playlist_input: str) -> Dict:
        """
        Fetch playlist metadata and all of its tracks.

        Args:
            playlist_input: Spotify playlist URL, URI or ID

        Returns:
            Playlist data with an 'all_tracks' list
        """
        playlist_id = extract_spotify_id(playlist_input)

        self._throttle()
        playlist = self.sp.playlist(playlist_id)

        # Fetch all tracks (handle pagination)
        tracks = []
        results = playlist.get('tracks')
        while results:
            for item in results.get('items') or []:
                track = item.get('track') if item else None
                if track and track.get('id'):
                    tracks.append(track)

            if results.get('next'):
                self._throttle()
                results = self.sp.next(results)
            else:
                results = None

        playlist['id'] = playlist.get('id') or playlist_id
        playlist['all_tracks'] = tracks
        return playlist

    def get_playlist_tracks(self, playlist_input: str, limit: int = PLAYLIST_PAGE_SIZE) -> List[Dict]:
        """Fetch the first tracks of a playlist."""
        playlist_id = extract_spotify_id(playlist_input)
        self._throttle()
        result = self.sp.playlist_items(playlist_id, limit=limit)
        return [
            item['track'] for item in result.get('items') or []
            if item and item.get('track') and item['track'].get('id')
        ]

    # =========================================================================
    # TRACK AND ARTIST OPERATIONS
    # =========================================================================

    def _audio_features_batch(self, batch: List[str]) -> List[Optional[Dict]]:
        self._throttle()
        try:
            result = self.sp.audio_features(batch)
            return list(result) if result else [None] * len(batch)
        except Exception as e:
            print(f"Warning: Error fetching audio features: {e}")
            return [None] * len(batch)

    def get_audio_features(self, track_ids: List[str]) -> List[Optional[Dict]]:
        """
        Fetch audio features for tracks in batches.

        Args:
            track_ids: List of Spotify track IDs

        Returns:
            List of audio feature dictionaries (None for unavailable)
        """
        if not track_ids:
            return []
        return batch_process(list(track_ids), AUDIO_FEATURES_BATCH_SIZE, self._audio_features_batch)

    def _artists_batch(self, batch: List[str]) -> List[Dict]:
        self._throttle()
        try:
            result = self.sp.artists(batch)
            return [a for a in result.get('artists') or [] if a]
        except Exception as e:
            print(f"Warning: Error fetching artists: {e}")
            return []

    def get_artists(self, artist_ids: List[str]) -> List[Dict]:
        """
        Fetch artist metadata in batches.

        Args:
            artist_ids: List of Spotify artist IDs

        Returns:
            List of artist metadata dictionaries
        """
        artist_ids = unique(a for a in artist_ids if a)
        if not artist_ids:
            return []
        return batch_process(artist_ids, ARTISTS_BATCH_SIZE, self._artists_batch)

    def get_genre_tags(self, tracks: List[TrackIdentity]) -> List[str]:
        """
        Collect raw genre tags for every artist credited on every track.

        Tags repeat once per track-artist pairing.
        """
        artist_ids = [a for t in tracks for a in t.artist_ids]
        genres_by_artist = {
            artist['id']: artist.get('genres') or []
            for artist in self.get_artists(artist_ids)
            if artist.get('id')
        }
        return [genre for artist_id in artist_ids for genre in genres_by_artist.get(artist_id, [])]

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def fetch_snapshot(self, playlist_input: str) -> PlaylistSnapshot:
        """
        Resolve everything the engine needs for one playlist.

        Args:
            playlist_input: Spotify playlist URL, URI or ID

        Returns:
            PlaylistSnapshot
        """
        playlist = self.get_playlist(playlist_input)
        tracks = [TrackIdentity.from_track(t) for t in playlist['all_tracks']]

        images = playlist.get('images') or []
        return PlaylistSnapshot(
            playlist_id=playlist['id'],
            name=playlist.get('name') or 'Unknown Playlist',
            owner=(playlist.get('owner') or {}).get('display_name') or 'Unknown',
            cover_url=images[0].get('url') if images else None,
            tracks=tracks,
            audio_features=self.get_audio_features([t.track_id for t in tracks]),
            genre_tags=self.get_genre_tags(tracks),
        )

    # =========================================================================
    # LISTENING HISTORY
    # =========================================================================

    def _safe_items(self, call, *args, **kwargs) -> List[Dict]:
        self._throttle()
        try:
            result = call(*args, **kwargs)
            return [item for item in (result or {}).get('items') or [] if item]
        except Exception as e:
            print(f"Warning: Error fetching listening history: {e}")
            return []

    def get_top_tracks(self, time_range: str = 'medium_term', limit: int = 10) -> List[str]:
        items = self._safe_items(self.sp.current_user_top_tracks, limit=limit, time_range=time_range)
        return [t['id'] for t in items if t.get('id')]

    def get_top_artists(self, time_range: str = 'medium_term', limit: int = 20) -> List[ArtistSignal]:
        items = self._safe_items(self.sp.current_user_top_artists, limit=limit, time_range=time_range)
        return [
            ArtistSignal(artist_id=a['id'], name=a.get('name', ''), genres=tuple(a.get('genres') or ()))
            for a in items if a.get('id')
        ]

    def get_saved_tracks(self, limit: int = 20) -> List[str]:
        items = self._safe_items(self.sp.current_user_saved_tracks, limit=limit)
        return [i['track']['id'] for i in items if i.get('track') and i['track'].get('id')]

    def get_recently_played(self, limit: int = 10) -> List[str]:
        items = self._safe_items(self.sp.current_user_recently_played, limit=limit)
        return [i['track']['id'] for i in items if i.get('track') and i['track'].get('id')]

    def build_signal_bundle(
        self,
        playlist_input: Optional[str] = None,
        include_history: bool = True,
        seed_tracks: Optional[List[str]] = None,
        seed_artists: Optional[List[str]] = None,
        seed_genres: Optional[List[str]] = None,
    ) -> SignalBundle:
        """
        Gather the signal for seed selection.

        Args:
            playlist_input: Playlist to draw seeds from (optional)
            include_history: Fetch the user's listening history
            seed_tracks, seed_artists, seed_genres: Explicit seeds

        Returns:
            SignalBundle
        """
        signal = SignalBundle(
            seed_tracks=seed_tracks,
            seed_artists=seed_artists,
            seed_genres=seed_genres,
        )

        if playlist_input:
            tracks = [TrackIdentity.from_track(t) for t in self.get_playlist_tracks(playlist_input)]
            signal.playlist_tracks = tracks
            signal.playlist_features = self.get_audio_features([t.track_id for t in tracks])

        if include_history:
            signal.top_tracks = {r: self.get_top_tracks(r) for r in TIME_RANGES}
            signal.top_artists = {r: self.get_top_artists(r) for r in TIME_RANGES}
            signal.saved_tracks = self.get_saved_tracks()
            signal.recently_played = self.get_recently_played()

        return signal

    # =========================================================================
    # RECOMMENDATIONS
    # =========================================================================

    def get_recommendations(self, spec: SeedSpec) -> List[Dict[str, Any]]:
        """
        Resolve a seed specification into recommended tracks.

        Args:
            spec: Seeds and constraints

        Returns:
            Recommended tracks that pass the spec's post filter
        """
        self._throttle()
        result = self.sp.recommendations(**spec.to_params())
        tracks = [t for t in (result or {}).get('tracks') or [] if t]
        return apply_post_filter(spec, tracks)
