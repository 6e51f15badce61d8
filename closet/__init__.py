"""Digital closet: weather-aware outfit recommendations from a personal wardrobe."""

__version__ = "0.1.0"
