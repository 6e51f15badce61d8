"""Persistence for the closet inventory, outfit log and preferences."""

from .repository import ClosetStorage

__all__ = ["ClosetStorage"]
