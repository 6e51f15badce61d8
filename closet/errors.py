"""Typed failures surfaced by the closet core."""

from __future__ import annotations


class ClosetError(RuntimeError):
    """Base class for recoverable closet failures."""


class NoModelResponse(ClosetError):
    """Raised when the vision model returned no text at all."""


class MalformedResponse(ClosetError):
    """Raised when no structured payload survives extraction and one repair pass."""


class WeatherUnavailable(ClosetError):
    """Raised when current conditions cannot be fetched."""


class EmptyWardrobe(ClosetError):
    """Raised when the inventory has no tops, bottoms or shoes."""


__all__ = [
    "ClosetError",
    "NoModelResponse",
    "MalformedResponse",
    "WeatherUnavailable",
    "EmptyWardrobe",
]
