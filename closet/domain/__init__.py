"""Enumerations and records for the closet domain."""

from .enums import Category, Color, Material, OutfitType, Regime, TemperatureUnit
from .models import ClothingItem, Outfit, OutfitSlotSnapshot, UserPreferences, WeatherSnapshot

__all__ = [
    "Category",
    "Color",
    "Material",
    "OutfitType",
    "Regime",
    "TemperatureUnit",
    "ClothingItem",
    "Outfit",
    "OutfitSlotSnapshot",
    "UserPreferences",
    "WeatherSnapshot",
]
