"""Exceptions raised by the I/O collaborators of the executor."""

from __future__ import annotations


class TanyaBotError(Exception):
    """Base class for bot errors."""


class BackendFailure(TanyaBotError):
    """The Gemini call failed or returned an unusable payload."""


class FetchFailure(TanyaBotError):
    """Downloading an image from the chat platform failed."""
