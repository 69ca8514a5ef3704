"""
Playlist Snapshots
==================

A snapshot is one playlist with everything the engine needs already
resolved: track identities, raw audio features and artist genre tags.
Snapshots are built by the Spotify client or loaded from JSON, then
handed to the synchronous engine in one piece.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .analyzer import AnalysisResult, analyze
from .battle import BattleResult, battle
from .errors import ValidationError
from .features import TrackIdentity
from .seeds import SignalBundle
from .utils import unique


@dataclass
class PlaylistSnapshot:
    """Fully resolved playlist data."""
    playlist_id: str
    name: str = "Unknown Playlist"
    owner: str = "Unknown"
    cover_url: Optional[str] = None

    tracks: List[TrackIdentity] = field(default_factory=list)
    audio_features: List[Optional[Dict[str, Any]]] = field(default_factory=list)
    genre_tags: List[str] = field(default_factory=list)

    @property
    def track_ids(self) -> List[str]:
        return [t.track_id for t in self.tracks]

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    @property
    def artist_names(self) -> List[str]:
        return unique(name for t in self.tracks for name in t.artist_names)

    def metadata(self) -> Dict[str, Any]:
        """Identifying details for output next to a result."""
        return {
            "id": self.playlist_id,
            "name": self.name,
            "owner": self.owner,
            "cover_url": self.cover_url,
            "track_count": self.track_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlaylistSnapshot":
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid snapshot: expected a JSON object at the top level")
        for key in ("tracks", "audio_features", "genre_tags"):
            if not isinstance(data.get(key, []), list):
                raise ValidationError(f"Invalid snapshot: '{key}' must be a list")

        tracks = []
        for item in data.get("tracks", []):
            if not isinstance(item, Mapping) or not item.get("id"):
                continue
            artist_names = tuple(item.get("artist_names") or ([item["artist"]] if item.get("artist") else []))
            tracks.append(TrackIdentity(
                track_id=item["id"],
                name=item.get("name") or "Unknown",
                primary_artist=item.get("artist") or (artist_names[0] if artist_names else "Unknown"),
                album_art_url=item.get("album_art"),
                artist_ids=tuple(item.get("artist_ids") or ()),
                artist_names=artist_names,
            ))

        return cls(
            playlist_id=data.get("id", ""),
            name=data.get("name") or "Unknown Playlist",
            owner=data.get("owner") or "Unknown",
            cover_url=data.get("cover_url"),
            tracks=tracks,
            audio_features=list(data.get("audio_features", [])),
            genre_tags=list(data.get("genre_tags", [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.playlist_id,
            "name": self.name,
            "owner": self.owner,
            "cover_url": self.cover_url,
            "tracks": [t.to_dict() for t in self.tracks],
            "audio_features": list(self.audio_features),
            "genre_tags": list(self.genre_tags),
        }

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "PlaylistSnapshot":
        with open(Path(path), "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except ValueError as e:
                raise ValidationError(f"Invalid snapshot file {path}: {e}") from e
        return cls.from_dict(data)

    def analyze(self) -> AnalysisResult:
        return analyze(self.audio_features, self.genre_tags, self.track_count, top_tracks=self.tracks)

    def to_signal_bundle(self, **seeds) -> SignalBundle:
        """Playlist signal only; listening history is left unsupplied."""
        return SignalBundle(
            playlist_tracks=list(self.tracks),
            playlist_features=list(self.audio_features),
            **seeds
        )


def battle_snapshots(first: PlaylistSnapshot, second: PlaylistSnapshot) -> BattleResult:
    """Battle two resolved playlists."""
    return battle(
        first.audio_features,
        second.audio_features,
        first.genre_tags,
        second.genre_tags,
        first.track_ids,
        second.track_ids,
        first.artist_names,
        second.artist_names,
        identities_a=first.tracks,
        identities_b=second.tracks,
    )
