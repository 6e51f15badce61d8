"""Async wrapper around the Open-Meteo forecast and Nominatim reverse-geocoding endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from closet.config.settings import ClosetSettings
from closet.domain.enums import TemperatureUnit

logger = logging.getLogger(__name__)

_UNIT_PARAM = {
    TemperatureUnit.FAHRENHEIT: "fahrenheit",
    TemperatureUnit.CELSIUS: "celsius",
}


class WeatherRequestError(RuntimeError):
    """Raised when a weather or geocoding request fails or returns unusable data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


@dataclass(slots=True, frozen=True)
class CurrentConditions:
    """Raw current-conditions block as reported upstream."""

    temperature: float
    weather_code: Any


class WeatherClient:
    """Fetches current conditions and address breakdowns for a coordinate pair."""

    def __init__(
        self,
        settings: ClosetSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._forecast = httpx.AsyncClient(
            base_url=settings.weather_base_url.rstrip("/"),
            timeout=settings.weather_timeout,
            transport=transport,
        )
        self._geocode = httpx.AsyncClient(
            base_url=settings.geocode_base_url.rstrip("/"),
            timeout=settings.weather_timeout,
            headers={"User-Agent": settings.geocode_user_agent},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP clients."""

        await self._forecast.aclose()
        await self._geocode.aclose()

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        params: Mapping[str, Any],
    ) -> Any:
        try:
            response = await client.get(endpoint, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            raise WeatherRequestError(f"Timed out calling {endpoint}.") from exc
        except httpx.HTTPStatusError as exc:
            raise WeatherRequestError(
                f"{endpoint} returned {exc.response.status_code}.",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherRequestError(f"Request to {endpoint} failed: {exc}") from exc
        except ValueError as exc:
            raise WeatherRequestError(f"{endpoint} returned a non-JSON body.") from exc

    async def fetch_current(
        self,
        latitude: float,
        longitude: float,
        unit: TemperatureUnit,
    ) -> CurrentConditions:
        """Return the current temperature (in ``unit``) and WMO weather code."""

        payload = await self._get_json(
            self._forecast,
            "/forecast",
            {
                "latitude": latitude,
                "longitude": longitude,
                "current": "temperature_2m,weather_code",
                "temperature_unit": _UNIT_PARAM[TemperatureUnit(unit)],
            },
        )
        current = payload.get("current") if isinstance(payload, Mapping) else None
        if not isinstance(current, Mapping) or current.get("temperature_2m") is None:
            raise WeatherRequestError("Forecast response has no current conditions.")
        try:
            temperature = float(current["temperature_2m"])
        except (TypeError, ValueError) as exc:
            raise WeatherRequestError("Forecast temperature is not numeric.") from exc
        return CurrentConditions(temperature=temperature, weather_code=current.get("weather_code"))

    async def reverse_geocode(self, latitude: float, longitude: float) -> dict[str, Any]:
        """Return the address breakdown for a coordinate pair."""

        payload = await self._get_json(
            self._geocode,
            "/reverse",
            {"format": "json", "lat": latitude, "lon": longitude, "zoom": 10},
        )
        address = payload.get("address") if isinstance(payload, Mapping) else None
        if not isinstance(address, Mapping):
            raise WeatherRequestError("Geocoding response has no address.")
        return dict(address)

    async def ping(self) -> bool:
        """Return ``True`` if the forecast endpoint answers for a fixed location."""

        await self.fetch_current(0.0, 0.0, TemperatureUnit.CELSIUS)
        return True


__all__ = ["WeatherClient", "WeatherRequestError", "CurrentConditions"]
