"""Weather-aware and random outfit selection over a categorised inventory."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

from closet.domain.enums import Category, Material, OutfitType, Regime, TemperatureUnit
from closet.domain.models import (
    ClothingItem,
    Outfit,
    OutfitSlotSnapshot,
    WeatherSnapshot,
    new_id,
    utc_now_iso,
)
from closet.errors import EmptyWardrobe
from closet.storage.repository import ClosetStorage

logger = logging.getLogger(__name__)

COLD_BELOW_F = 40.0
HOT_ABOVE_F = 70.0

PREFERRED_MATERIALS: dict[Regime, frozenset[Material] | None] = {
    Regime.COLD: frozenset({Material.HEAVY, Material.MEDIUM}),
    Regime.HOT: frozenset({Material.LIGHT, Material.MEDIUM}),
    Regime.MILD: None,
}

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Buckets:
    """Inventory split by category."""

    tops: list[ClothingItem]
    bottoms: list[ClothingItem]
    shoes: list[ClothingItem]

    def is_empty(self) -> bool:
        return not (self.tops or self.bottoms or self.shoes)


def partition(inventory: Iterable[ClothingItem]) -> Buckets:
    """Split the inventory into tops, bottoms and shoes, keeping inventory order."""

    tops: list[ClothingItem] = []
    bottoms: list[ClothingItem] = []
    shoes: list[ClothingItem] = []
    for item in inventory:
        if item.category is Category.TOP:
            tops.append(item)
        elif item.category is Category.BOTTOM:
            bottoms.append(item)
        elif item.category is Category.SHOE:
            shoes.append(item)
    return Buckets(tops=tops, bottoms=bottoms, shoes=shoes)


def canonical_fahrenheit(temperature: float, unit: TemperatureUnit | str) -> float:
    """Return ``temperature`` in Fahrenheit for internal thresholding."""

    if TemperatureUnit(unit) is TemperatureUnit.CELSIUS:
        return temperature * 9 / 5 + 32
    return temperature


def classify_regime(fahrenheit: float) -> Regime:
    """Cold below 40°F, hot above 70°F; 40 and 70 themselves are mild."""

    if fahrenheit < COLD_BELOW_F:
        return Regime.COLD
    if fahrenheit > HOT_ABOVE_F:
        return Regime.HOT
    return Regime.MILD


def filter_by_preference(bucket: Sequence[ClothingItem], regime: Regime) -> list[ClothingItem]:
    """Items whose material the regime prefers; the whole bucket when it has no preference."""

    preferred = PREFERRED_MATERIALS[regime]
    if preferred is None:
        return list(bucket)
    return [item for item in bucket if item.material in preferred]


def pick_uniform(bucket: Sequence[T], rng: random.Random) -> T | None:
    """Uniformly random element of ``bucket`` or ``None`` when it is empty."""

    if not bucket:
        return None
    return bucket[rng.randrange(len(bucket))]


def pick_with_preference(
    bucket: Sequence[ClothingItem],
    regime: Regime,
    rng: random.Random,
) -> ClothingItem | None:
    """Pick from the preferred subset, falling back to the whole bucket."""

    preferred = filter_by_preference(bucket, regime)
    if preferred:
        return pick_uniform(preferred, rng)
    if bucket:
        logger.debug("No %s-weather materials in bucket of %s, ignoring preference", regime.value, len(bucket))
    return pick_uniform(bucket, rng)


def _snapshot(item: ClothingItem | None) -> OutfitSlotSnapshot | None:
    return OutfitSlotSnapshot.from_item(item) if item is not None else None


def generate_outfit(
    inventory: Iterable[ClothingItem],
    mode: OutfitType | str,
    weather: WeatherSnapshot | None = None,
    *,
    rng: random.Random | None = None,
    now: Callable[[], str] = utc_now_iso,
) -> Outfit:
    """Select a top, bottom and shoes and return them as an :class:`Outfit`.

    ``mode`` is ``weather`` or ``random``. In weather mode with a snapshot, tops
    and bottoms prefer materials suited to the temperature but fall back to the
    full bucket; shoes are always picked uniformly. Empty buckets leave their
    slot unset. The snapshot is thresholded in the unit it was fetched in.
    Raises :class:`EmptyWardrobe` when every bucket is empty.
    """

    mode = OutfitType(mode)
    if mode is OutfitType.MANUAL:
        raise ValueError("Manual outfits are not generated by the recommender.")
    rng = rng or random.Random()

    buckets = partition(inventory)
    if buckets.is_empty():
        raise EmptyWardrobe("Add clothing items to your closet first!")

    # Shoes are drawn first so their pick depends only on the seed, not on the mode.
    shoes = pick_uniform(buckets.shoes, rng)

    if mode is OutfitType.WEATHER and weather is not None:
        regime = classify_regime(canonical_fahrenheit(weather.temperature, weather.unit))
        logger.info("Generating weather outfit for %s regime", regime.value)
        top = pick_with_preference(buckets.tops, regime, rng)
        bottom = pick_with_preference(buckets.bottoms, regime, rng)
    else:
        if mode is OutfitType.WEATHER:
            logger.info("No weather available, falling back to random tops and bottoms")
        top = pick_uniform(buckets.tops, rng)
        bottom = pick_uniform(buckets.bottoms, rng)

    return Outfit(
        id=new_id(),
        generated_at=now(),
        type=mode,
        top=_snapshot(top),
        bottom=_snapshot(bottom),
        shoes=_snapshot(shoes),
    )


class OutfitRecommender:
    """Generates outfits from a store's inventory and appends them to its log."""

    def __init__(self, storage: ClosetStorage, rng: random.Random | None = None) -> None:
        self._storage = storage
        self._rng = rng or random.Random()

    async def recommend(
        self,
        mode: OutfitType | str,
        weather: WeatherSnapshot | None = None,
    ) -> Outfit:
        """Read the inventory, generate an outfit and log it as one atomic step."""

        outfit = await self._storage.record_outfit(
            lambda items: generate_outfit(items, mode, weather, rng=self._rng),
        )
        logger.info("Recorded %s outfit %s", outfit.type.value, outfit.id)
        return outfit


__all__ = [
    "Buckets",
    "COLD_BELOW_F",
    "HOT_ABOVE_F",
    "OutfitRecommender",
    "canonical_fahrenheit",
    "classify_regime",
    "filter_by_preference",
    "generate_outfit",
    "partition",
    "pick_uniform",
    "pick_with_preference",
]
