"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Literal

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from closet.api.vision_client import DATA_URL_PREFIX, VisionClient, VisionServiceError
from closet.api.weather_client import WeatherClient
from closet.config.settings import ClosetSettings, get_settings
from closet.domain.enums import Category, Color, Material, TemperatureUnit
from closet.errors import EmptyWardrobe, MalformedResponse, NoModelResponse, WeatherUnavailable
from closet.logic import ClosetService
from closet.monitoring.logging import configure_logging
from closet.storage import ClosetStorage
from closet.vision import ClothingAttributes

logger = logging.getLogger(__name__)


class AnalyzeClothingRequest(BaseModel):
    image: str | None = None


class NewClothingRequest(BaseModel):
    name: str
    image: str
    category: Category
    colors: list[Color] = Field(min_length=1)
    material: Material
    tags: list[str] = Field(default_factory=list)


class GenerateOutfitRequest(BaseModel):
    type: Literal["weather", "random"]


class PreferencesUpdate(BaseModel):
    location_enabled: bool | None = Field(default=None, alias="locationEnabled")
    onboarding_complete: bool | None = Field(default=None, alias="onboardingComplete")
    temperature_unit: TemperatureUnit | None = Field(default=None, alias="temperatureUnit")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def build_service(settings: ClosetSettings) -> ClosetService:
    """Wire the default service from settings."""

    vision_client = VisionClient(settings) if settings.vision_api_key else None
    if vision_client is None:
        logger.warning("VISION_API_KEY is not configured; clothing analysis is disabled.")
    return ClosetService(
        settings,
        ClosetStorage(Path(settings.storage_root)),
        WeatherClient(settings),
        vision_client,
    )


def create_app(service: ClosetService | None = None) -> FastAPI:
    """Initialise the FastAPI application around a closet service."""

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        owned = service is None
        app.state.service = service or build_service(settings)
        try:
            yield
        finally:
            if owned:
                await app.state.service.close()

    app = FastAPI(
        title="Digital Closet API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )

    def _service(request: Request) -> ClosetService:
        return request.app.state.service

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/api/weather", tags=["weather"])
    async def get_weather(
        request: Request,
        lat: float | None = None,
        lon: float | None = None,
        unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT,
    ) -> Any:
        if lat is None or lon is None:
            return _error("Latitude and longitude are required", 400)
        closet = _service(request)
        try:
            snapshot = await closet.resolve_weather(lat, lon, unit)
        except ValueError as exc:
            return _error(str(exc), 400)
        except WeatherUnavailable:
            return _error("Failed to fetch weather data", 500)
        closet.set_current_weather(snapshot)
        return snapshot.to_dict()

    @app.post("/api/analyze-clothing", tags=["clothing"])
    async def analyze_clothing(request: Request, body: AnalyzeClothingRequest) -> Any:
        if not body.image:
            return _error("Image is required", 400)
        if not body.image.startswith(DATA_URL_PREFIX):
            return _error("Invalid image format", 400)
        try:
            attributes = await _service(request).analyze_clothing(body.image)
        except (NoModelResponse, MalformedResponse, VisionServiceError) as exc:
            logger.error("AI analysis error: %s", exc)
            return _error("Failed to analyze image", 500)
        return attributes.model_dump(mode="json")

    @app.get("/api/clothing", tags=["clothing"])
    async def list_clothing(request: Request) -> list[dict[str, Any]]:
        items = await _service(request).storage.list_items()
        return [item.to_dict() for item in items]

    @app.post("/api/clothing", status_code=201, tags=["clothing"])
    async def add_clothing(request: Request, body: NewClothingRequest) -> dict[str, Any]:
        attributes = ClothingAttributes(category=body.category, colors=body.colors, material=body.material)
        item = await _service(request).add_clothing(body.name, body.image, attributes, body.tags)
        return item.to_dict()

    @app.delete("/api/clothing/{item_id}", tags=["clothing"])
    async def remove_clothing(request: Request, item_id: str) -> Any:
        if not await _service(request).remove_clothing(item_id):
            return _error("Clothing item not found", 404)
        return {"deleted": item_id}

    @app.post("/api/outfits", tags=["outfits"])
    async def generate_outfit(request: Request, body: GenerateOutfitRequest) -> Any:
        try:
            outfit = await _service(request).generate_outfit(body.type)
        except EmptyWardrobe as exc:
            return _error(str(exc), 409)
        return outfit.to_dict()

    @app.get("/api/outfits", tags=["outfits"])
    async def recent_outfits(request: Request, limit: int = Query(7, ge=1)) -> list[dict[str, Any]]:
        outfits = await _service(request).storage.recent_outfits(limit)
        return [outfit.to_dict() for outfit in outfits]

    @app.get("/api/preferences", tags=["preferences"])
    async def get_preferences(request: Request) -> dict[str, Any]:
        return (await _service(request).storage.load_preferences()).to_dict()

    @app.patch("/api/preferences", tags=["preferences"])
    async def update_preferences(request: Request, body: PreferencesUpdate) -> dict[str, Any]:
        changes = body.model_dump(exclude_none=True)
        preferences = await _service(request).update_preferences(**changes)
        return preferences.to_dict()

    return app


app = create_app()
