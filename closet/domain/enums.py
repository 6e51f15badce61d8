"""Closed attribute sets for wardrobe items and outfits."""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Which outfit slot an item fills."""

    TOP = "Top"
    BOTTOM = "Bottom"
    SHOE = "Shoe"


class Color(str, Enum):
    """Dominant colour labels understood by the closet."""

    BLACK = "Black"
    WHITE = "White"
    GRAY = "Gray"
    BROWN = "Brown"
    BEIGE = "Beige"
    RED = "Red"
    PINK = "Pink"
    ORANGE = "Orange"
    YELLOW = "Yellow"
    GREEN = "Green"
    BLUE = "Blue"
    PURPLE = "Purple"
    PATTERN = "Pattern"
    MULTI = "Multi"


class Material(str, Enum):
    """Fabric weight of an item."""

    HEAVY = "Heavy"
    MEDIUM = "Medium"
    LIGHT = "Light"


class TemperatureUnit(str, Enum):
    FAHRENHEIT = "F"
    CELSIUS = "C"


class OutfitType(str, Enum):
    """How an outfit was produced. ``manual`` is never generated by the engine."""

    WEATHER = "weather"
    RANDOM = "random"
    MANUAL = "manual"


class Regime(str, Enum):
    """Temperature band driving the soft material preference."""

    COLD = "cold"
    MILD = "mild"
    HOT = "hot"


CATEGORY_VALUES = frozenset(member.value for member in Category)
COLOR_VALUES = frozenset(member.value for member in Color)
MATERIAL_VALUES = frozenset(member.value for member in Material)


__all__ = [
    "Category",
    "Color",
    "Material",
    "TemperatureUnit",
    "OutfitType",
    "Regime",
    "CATEGORY_VALUES",
    "COLOR_VALUES",
    "MATERIAL_VALUES",
]
