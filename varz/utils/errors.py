"""Custom exceptions used across VARZ.

The NLU pipeline never raises; these errors only travel across the
collaborator boundary (configuration, speech capture and speech output) and
are turned into spoken messages or CLI errors. Editor commands report failure
through their boolean result instead.
"""
from __future__ import annotations


class VarzError(Exception):
    """Base exception for all assistant-specific errors."""


class ConfigurationError(VarzError):
    """Raised when configuration loading or validation fails."""


class SpeechCaptureError(VarzError):
    """Raised by a transcript source when recognition fails.

    ``reason`` is a short code such as ``"no-speech"`` or ``"not-allowed"``
    that is read back to the user.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SpeechOutputError(VarzError):
    """Raised when an utterance cannot be synthesised."""


__all__ = [
    "VarzError",
    "ConfigurationError",
    "SpeechCaptureError",
    "SpeechOutputError",
]
