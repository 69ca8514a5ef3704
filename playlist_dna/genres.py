"""
Genre Distribution Builder
==========================

Tallies artist genre tags into a percentage distribution over the track
count:

    percent(tag) = round(100 * count(tag) / track_count)

Each bucket is rounded on its own, so the percentages are not guaranteed
to add up to 100. Tags are counted once per track-artist pairing, so the
same tag usually shows up many times.

When the catalog has no genre data at all, a small distribution is guessed
from the playlist's mean audio features instead.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .config import FALLBACK_GENRES, MAX_GENRES, MAX_SUBGENRES, SUBGENRE_RATIO
from .utils import round_half_up


@dataclass(frozen=True)
class GenreShare:
    name: str
    percent: int

    def to_dict(self) -> Dict:
        return {"name": self.name, "percent": self.percent}


@dataclass
class GenreBreakdown:
    """Top genres plus the long tail of rarer tags."""
    distribution: List[GenreShare] = field(default_factory=list)
    subgenres: List[str] = field(default_factory=list)
    used_fallback: bool = False

    @property
    def genre_count(self) -> int:
        return len(self.distribution)


def normalize_genre_tag(tag: str) -> str:
    """Title-case each word: ' dance   POP ' -> 'Dance Pop'."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in tag.split())


def count_genre_tags(tags: Optional[Iterable[str]]) -> Counter:
    """Count normalized tags, keeping first-seen order for equal counts."""
    counts = Counter()
    for tag in tags or []:
        if not isinstance(tag, str):
            continue
        normalized = normalize_genre_tag(tag)
        if normalized:
            counts[normalized] += 1
    return counts


def fallback_distribution(means: Mapping[str, float]) -> List[GenreShare]:
    """
    Estimate genres from mean [0, 1] audio features.

    These exact outputs are fixtures; the thresholds are not tunable.
    """
    energy = means.get("energy", 0.0)
    danceability = means.get("danceability", 0.0)
    acousticness = means.get("acousticness", 0.0)

    shares = []
    if danceability > 0.6 and energy > 0.6:
        shares.append(GenreShare("Pop", 40))
    if energy > 0.7 and acousticness < 0.3:
        shares.append(GenreShare("Electronic", 30))
    if acousticness > 0.4:
        shares.append(GenreShare("Acoustic", 30))
    if energy > 0.5 and danceability < 0.5:
        shares.append(GenreShare("Rock", 30))

    if not shares:
        shares = [GenreShare(name, percent) for name, percent in FALLBACK_GENRES]
    return shares


def extract_subgenres(counts: Counter) -> List[str]:
    """Tags counted less than half as often as the most common tag."""
    if not counts:
        return []
    threshold = max(counts.values()) * SUBGENRE_RATIO
    tail = [(name, count) for name, count in counts.items() if count < threshold]
    tail.sort(key=lambda item: item[1], reverse=True)
    return [name for name, _ in tail[:MAX_SUBGENRES]]


def build_genre_distribution(
    tags: Optional[Iterable[str]],
    track_count: int,
    means: Mapping[str, float]
) -> GenreBreakdown:
    """
    Build the genre breakdown for a playlist.

    Args:
        tags: Raw genre tags of every artist on every track
        track_count: Number of tracks in the playlist
        means: Mean [0, 1] features, used only for the fallback

    Returns:
        GenreBreakdown with top-10 distribution and subgenres
    """
    counts = count_genre_tags(tags)

    if not counts:
        return GenreBreakdown(distribution=fallback_distribution(means), used_fallback=True)

    if track_count <= 0:
        return GenreBreakdown(subgenres=extract_subgenres(counts))

    shares = [
        GenreShare(name, round_half_up(count / track_count * 100))
        for name, count in counts.items()
    ]
    shares.sort(key=lambda share: share.percent, reverse=True)

    return GenreBreakdown(
        distribution=shares[:MAX_GENRES],
        subgenres=extract_subgenres(counts),
    )
