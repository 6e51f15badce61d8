"""High-level closet operations used by the HTTP layer and scripts."""

from __future__ import annotations

import logging
import random
from typing import Any, Iterable

from closet.api.vision_client import VisionClient, VisionServiceError
from closet.api.weather_client import WeatherClient
from closet.config.settings import ClosetSettings
from closet.domain.enums import OutfitType
from closet.domain.models import ClothingItem, Outfit, UserPreferences, WeatherSnapshot, new_id
from closet.recommender import OutfitRecommender
from closet.storage import ClosetStorage
from closet.vision import ClothingAnalyzer, ClothingAttributes
from closet.weather import WeatherResolver

logger = logging.getLogger(__name__)


class ClosetService:
    """Ties storage, the upstream clients and the recommender together.

    The latest weather reading lives only on this object; it is never
    written to storage.
    """

    def __init__(
        self,
        settings: ClosetSettings,
        storage: ClosetStorage,
        weather_client: WeatherClient,
        vision_client: VisionClient | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        self._storage = storage
        self._weather_client = weather_client
        self._vision_client = vision_client
        self._weather = WeatherResolver(weather_client)
        self._analyzer = ClothingAnalyzer(vision_client) if vision_client else None
        self._recommender = OutfitRecommender(storage, rng=rng)
        self._current_weather: WeatherSnapshot | None = None

    @property
    def storage(self) -> ClosetStorage:
        return self._storage

    @property
    def current_weather(self) -> WeatherSnapshot | None:
        return self._current_weather

    def set_current_weather(self, weather: WeatherSnapshot | None) -> None:
        self._current_weather = weather

    def clear_weather(self) -> None:
        self._current_weather = None

    async def close(self) -> None:
        """Release upstream HTTP clients."""

        await self._weather_client.close()
        if self._vision_client is not None:
            await self._vision_client.close()

    async def resolve_weather(self, latitude: float, longitude: float, unit: str | None = None) -> WeatherSnapshot:
        """Resolve weather without touching the stored current reading."""

        if unit is None:
            unit = (await self._storage.load_preferences()).temperature_unit
        return await self._weather.resolve(latitude, longitude, unit)

    async def refresh_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Fetch weather in the user's preferred unit and keep it as the current reading."""

        snapshot = await self.resolve_weather(latitude, longitude)
        self._current_weather = snapshot
        logger.info("Current weather: %s, %s %s", snapshot.condition, snapshot.temperature, snapshot.unit.value)
        return snapshot

    async def analyze_clothing(self, image: bytes | str) -> ClothingAttributes:
        """Classify a clothing photo into category, colours and material."""

        if self._analyzer is None:
            raise VisionServiceError("Vision model is not configured.")
        return await self._analyzer.analyze(image)

    async def add_clothing(
        self,
        name: str,
        image: str,
        attributes: ClothingAttributes,
        tags: Iterable[str] | None = None,
    ) -> ClothingItem:
        """Store a new item built from normalised attributes."""

        item = ClothingItem(
            id=new_id(),
            name=name,
            image=image,
            category=attributes.category,
            colors=list(attributes.colors),
            material=attributes.material,
            tags=list(tags or []),
        )
        await self._storage.add_item(item)
        logger.info("Added %s item %s", item.category.value, item.id)
        return item

    async def update_clothing(self, item_id: str, **changes: Any) -> ClothingItem | None:
        return await self._storage.update_item(item_id, **changes)

    async def remove_clothing(self, item_id: str) -> bool:
        return await self._storage.remove_item(item_id)

    async def generate_outfit(self, mode: OutfitType | str) -> Outfit:
        """Generate and log an outfit using the current weather reading."""

        return await self._recommender.recommend(mode, weather=self._current_weather)

    async def update_preferences(self, **changes: Any) -> UserPreferences:
        return await self._storage.update_preferences(**changes)


__all__ = ["ClosetService"]
