from __future__ import annotations


class NoteSynthError(Exception):
    """Base error for the notesynth library."""


class ConfigurationError(NoteSynthError):
    """Raised when a synthesis request cannot be parsed or validated."""


class PlaybackError(NoteSynthError):
    """Raised when no playback backend is available or the device fails."""
