"""Turn raw forecast and geocoding responses into a user-facing weather summary."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from closet.api.weather_client import WeatherClient, WeatherRequestError
from closet.domain.enums import TemperatureUnit
from closet.domain.models import WeatherSnapshot, utc_now_iso
from closet.errors import WeatherUnavailable

logger = logging.getLogger(__name__)

UNKNOWN_CONDITION = "Unknown"
DEFAULT_LOCATION = "Your location"

# WMO weather interpretation codes as reported by Open-Meteo.
WEATHER_CONDITIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

_CITY_KEYS = ("city", "town", "village", "county")


def describe_condition(code: Any) -> str:
    """Map a weather code to its label; anything unrecognised is ``"Unknown"``."""

    if isinstance(code, bool):
        return UNKNOWN_CONDITION
    if isinstance(code, float) and code.is_integer():
        code = int(code)
    if not isinstance(code, int):
        return UNKNOWN_CONDITION
    return WEATHER_CONDITIONS.get(code, UNKNOWN_CONDITION)


def format_location(address: Mapping[str, Any] | None) -> str:
    """Pick the most specific place name available in a geocoding address."""

    if not address:
        return DEFAULT_LOCATION
    city = next((address[key] for key in _CITY_KEYS if address.get(key)), None)
    country = address.get("country") or None
    if city and country:
        return f"{city}, {country}"
    if city:
        return str(city)
    if country:
        return str(country)
    return DEFAULT_LOCATION


def _validate_coordinates(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"Latitude {latitude} is out of range.")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"Longitude {longitude} is out of range.")


class WeatherResolver:
    """Resolves coordinates into a :class:`WeatherSnapshot`."""

    def __init__(self, client: WeatherClient) -> None:
        self._client = client

    async def _resolve_location(self, latitude: float, longitude: float) -> str:
        try:
            address = await self._client.reverse_geocode(latitude, longitude)
            return format_location(address)
        except WeatherRequestError as exc:
            logger.warning("Reverse geocoding failed, using placeholder location: %s", exc)
        except Exception as exc:  # noqa: BLE001 - location is best effort
            logger.warning("Unexpected geocoding error, using placeholder location: %r", exc)
        return DEFAULT_LOCATION

    async def resolve(
        self,
        latitude: float,
        longitude: float,
        unit: TemperatureUnit | str = TemperatureUnit.FAHRENHEIT,
    ) -> WeatherSnapshot:
        """Fetch current conditions; geocoding problems never fail the call."""

        _validate_coordinates(latitude, longitude)
        unit = TemperatureUnit(unit)
        try:
            current = await self._client.fetch_current(latitude, longitude, unit)
        except WeatherRequestError as exc:
            logger.error("Weather fetch failed for (%s, %s): %s", latitude, longitude, exc)
            raise WeatherUnavailable("Failed to fetch weather data") from exc

        condition = describe_condition(current.weather_code)
        if condition == UNKNOWN_CONDITION:
            logger.info("Unrecognised weather code %r", current.weather_code)

        location = await self._resolve_location(latitude, longitude)
        return WeatherSnapshot(
            temperature=current.temperature,
            condition=condition,
            location=location,
            timestamp=utc_now_iso(),
            unit=unit,
        )


async def resolve_weather(
    client: WeatherClient,
    latitude: float,
    longitude: float,
    unit: TemperatureUnit | str = TemperatureUnit.FAHRENHEIT,
) -> WeatherSnapshot:
    """Shortcut for ``WeatherResolver(client).resolve(...)``."""

    return await WeatherResolver(client).resolve(latitude, longitude, unit)


__all__ = [
    "WEATHER_CONDITIONS",
    "UNKNOWN_CONDITION",
    "DEFAULT_LOCATION",
    "WeatherResolver",
    "resolve_weather",
    "describe_condition",
    "format_location",
]
