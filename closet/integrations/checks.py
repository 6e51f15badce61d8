"""Connectivity checks for the upstream weather and vision services."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from closet.api.vision_client import VisionClient
from closet.api.weather_client import WeatherClient
from closet.config.settings import get_settings


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except Exception as exc:  # noqa: BLE001 - reported, not raised
        return IntegrationCheckResult(name=name, success=False, message=f"{type(exc).__name__}: {exc}")

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Ping returned no data.",
    )


async def check_weather() -> IntegrationCheckResult:
    """Fetch current conditions for a fixed coordinate."""

    async def _ping() -> bool:
        client = WeatherClient(get_settings())
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Open-Meteo",
        factory=_ping,
        success_message="Weather API is reachable.",
    )


async def check_vision() -> IntegrationCheckResult:
    """List models on the configured vision endpoint."""

    async def _ping() -> bool:
        client = VisionClient(get_settings())
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Vision model",
        factory=_ping,
        success_message="Vision API is reachable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_weather(), check_vision()))
