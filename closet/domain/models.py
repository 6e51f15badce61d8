"""Serializable records shared by the engine, the normalizers and the store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from closet.domain.enums import Category, Color, Material, OutfitType, TemperatureUnit


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""

    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


def _coerce_colors(values: Iterable[Any]) -> list[Color]:
    colors = [Color(value) for value in values]
    if not colors:
        raise ValueError("A clothing item needs at least one colour.")
    return colors


@dataclass(slots=True)
class ClothingItem:
    """Canonical wardrobe entry as held by the store."""

    id: str
    name: str
    image: str
    category: Category
    colors: list[Color]
    material: Material
    created_at: str = field(default_factory=utc_now_iso)
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.category = Category(self.category)
        self.colors = _coerce_colors(self.colors)
        self.material = Material(self.material)
        self.tags = [str(tag) for tag in self.tags or []]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "category": self.category.value,
            "colors": [color.value for color in self.colors],
            "material": self.material.value,
            "createdAt": self.created_at,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ClothingItem":
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            image=str(payload.get("image", "")),
            category=payload["category"],
            colors=list(payload.get("colors") or []),
            material=payload["material"],
            created_at=str(payload.get("createdAt") or utc_now_iso()),
            tags=list(payload.get("tags") or []),
        )


@dataclass(slots=True, frozen=True)
class OutfitSlotSnapshot:
    """Frozen copy of a clothing item taken when an outfit is generated.

    Snapshots never alias the inventory: colour and tag lists are copied into
    tuples, so later edits or deletion of the source item cannot reach them.
    """

    id: str
    name: str
    image: str
    category: Category
    colors: tuple[Color, ...]
    material: Material
    created_at: str
    tags: tuple[str, ...] = ()

    @classmethod
    def from_item(cls, item: ClothingItem) -> "OutfitSlotSnapshot":
        return cls(
            id=item.id,
            name=item.name,
            image=item.image,
            category=item.category,
            colors=tuple(item.colors),
            material=item.material,
            created_at=item.created_at,
            tags=tuple(item.tags),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "category": self.category.value,
            "colors": [color.value for color in self.colors],
            "material": self.material.value,
            "createdAt": self.created_at,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "OutfitSlotSnapshot":
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            image=str(payload.get("image", "")),
            category=Category(payload["category"]),
            colors=tuple(Color(value) for value in payload.get("colors") or []),
            material=Material(payload["material"]),
            created_at=str(payload.get("createdAt", "")),
            tags=tuple(str(tag) for tag in payload.get("tags") or []),
        )


@dataclass(slots=True, frozen=True)
class Outfit:
    """One recommendation event, appended to the outfit log and never mutated."""

    id: str
    generated_at: str
    type: OutfitType
    top: OutfitSlotSnapshot | None = None
    bottom: OutfitSlotSnapshot | None = None
    shoes: OutfitSlotSnapshot | None = None

    def slots(self) -> dict[str, OutfitSlotSnapshot | None]:
        return {"top": self.top, "bottom": self.bottom, "shoes": self.shoes}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "generatedAt": self.generated_at,
            "type": self.type.value,
        }
        for name, snapshot in self.slots().items():
            if snapshot is not None:
                payload[name] = snapshot.to_dict()
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Outfit":
        def _slot(key: str) -> OutfitSlotSnapshot | None:
            raw = payload.get(key)
            return OutfitSlotSnapshot.from_dict(raw) if raw else None

        return cls(
            id=str(payload["id"]),
            generated_at=str(payload["generatedAt"]),
            type=OutfitType(payload["type"]),
            top=_slot("top"),
            bottom=_slot("bottom"),
            shoes=_slot("shoes"),
        )


@dataclass(slots=True, frozen=True)
class WeatherSnapshot:
    """Normalised current conditions; kept in memory only."""

    temperature: float
    condition: str
    location: str
    timestamp: str
    unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT

    def to_dict(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "condition": self.condition,
            "location": self.location,
            "timestamp": self.timestamp,
            "unit": self.unit.value,
        }


@dataclass(slots=True)
class UserPreferences:
    """Persisted user settings."""

    location_enabled: bool = False
    onboarding_complete: bool = False
    temperature_unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT

    def __post_init__(self) -> None:
        self.temperature_unit = TemperatureUnit(self.temperature_unit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "locationEnabled": self.location_enabled,
            "onboardingComplete": self.onboarding_complete,
            "temperatureUnit": self.temperature_unit.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UserPreferences":
        return cls(
            location_enabled=bool(payload.get("locationEnabled", False)),
            onboarding_complete=bool(payload.get("onboardingComplete", False)),
            temperature_unit=payload.get("temperatureUnit", TemperatureUnit.FAHRENHEIT.value),
        )


__all__ = [
    "ClothingItem",
    "OutfitSlotSnapshot",
    "Outfit",
    "WeatherSnapshot",
    "UserPreferences",
    "new_id",
    "utc_now_iso",
]
