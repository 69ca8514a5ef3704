"""
Engine Errors
=============

All errors are local and recoverable at the call site (e.g. ask the user
to add more tracks). None of them is retried by the engine.
"""

from typing import Optional


class PlaylistDnaError(Exception):
    """Base class for every error raised by the engine."""


class ValidationError(PlaylistDnaError):
    """Malformed or absent input identifiers (empty playlist/track reference, unknown strategy)."""


class DataInsufficientError(PlaylistDnaError):
    """No valid feature vectors survived normalization, or the playlist has no tracks."""


class SeedUnavailableError(PlaylistDnaError):
    """A recommendation strategy's required signal is empty."""

    def __init__(self, strategy: Optional[str], missing_signal: str, message: Optional[str] = None):
        self.strategy = strategy
        self.missing_signal = missing_signal
        if message is None:
            message = f"Strategy '{strategy}' needs {missing_signal}, but none was available"
        super().__init__(message)
