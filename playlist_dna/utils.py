"""
Utility Functions
=================

Common utilities used across the Playlist DNA system.
"""

import math
import re
from typing import Callable, Iterable, List, TypeVar

from .errors import ValidationError

T = TypeVar("T")

_URL_ID_PATTERN = re.compile(r"(?:playlist|track|album)/([a-zA-Z0-9]+)")
_URI_ID_PATTERN = re.compile(r"spotify:(?:playlist|track|album):([a-zA-Z0-9]+)")
_BARE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves going up.

    Display numbers are tied to this rounding (2.5 -> 3, -2.5 -> -2),
    which differs from Python's banker's rounding.
    """
    return int(math.floor(value + 0.5))


def round_to_tenth(value: float) -> float:
    """Round half-up to one decimal place."""
    return round_half_up(value * 10) / 10


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound value to [lower, upper]."""
    return max(lower, min(upper, value))


def unique(items: Iterable[T]) -> List[T]:
    """De-duplicate while keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def extract_spotify_id(url: str) -> str:
    """
    Normalize playlist/track/album URL formats to a bare catalog ID.

    Args:
        url: Spotify URL, URI or ID

    Returns:
        Clean ID

    Raises:
        ValidationError: when nothing resembling an ID can be extracted
    """
    if not url or not isinstance(url, str):
        raise ValidationError("A playlist or track reference is required")

    url = url.strip()
    match = _URL_ID_PATTERN.search(url) or _URI_ID_PATTERN.search(url)
    if match:
        return match.group(1)

    # Assume it's already an ID
    if _BARE_ID_PATTERN.match(url):
        return url

    raise ValidationError(f"Invalid Spotify reference: {url!r}")


def batch_process(items: list, batch_size: int, processor: Callable) -> list:
    """
    Process items in batches.

    Args:
        items: Items to process
        batch_size: Size of each batch
        processor: Function to call on each batch

    Returns:
        Flattened list of results
    """
    results = []

    for i in range(0, len(items), batch_size):
        batch = items[i:i + batch_size]
        batch_result = processor(batch)
        if isinstance(batch_result, list):
            results.extend(batch_result)
        else:
            results.append(batch_result)

    return results
