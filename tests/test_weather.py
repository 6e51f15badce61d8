"""Tests for weather code mapping, location formatting and the weather client."""

from __future__ import annotations

import httpx
import pytest
import pytest_mock

from closet.api.weather_client import CurrentConditions, WeatherClient, WeatherRequestError
from closet.config.settings import ClosetSettings
from closet.domain.enums import TemperatureUnit
from closet.errors import WeatherUnavailable
from closet.weather import (
    DEFAULT_LOCATION,
    WEATHER_CONDITIONS,
    WeatherResolver,
    describe_condition,
    format_location,
    resolve_weather,
)


@pytest.mark.parametrize(
    ("code", "label"),
    [
        (0, "Clear sky"),
        (45, "Fog"),
        (95, "Thunderstorm"),
        (99, "Thunderstorm with heavy hail"),
        (95.0, "Thunderstorm"),
        (120, "Unknown"),
        (None, "Unknown"),
        ("95", "Unknown"),
        (True, "Unknown"),
        (2.5, "Unknown"),
    ],
)
def test_describe_condition(code: object, label: str) -> None:
    assert describe_condition(code) == label


def test_condition_table_covers_freezing_codes() -> None:
    assert {56, 57, 66, 67} <= WEATHER_CONDITIONS.keys()
    assert len(WEATHER_CONDITIONS) == 28


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ({"city": "Paris", "town": "Ignored", "country": "France"}, "Paris, France"),
        ({"town": "Hay-on-Wye", "country": "United Kingdom"}, "Hay-on-Wye, United Kingdom"),
        ({"village": "Giethoorn"}, "Giethoorn"),
        ({"county": "Kerry", "country": "Ireland"}, "Kerry, Ireland"),
        ({"country": "Iceland"}, "Iceland"),
        ({"city": "", "country": ""}, DEFAULT_LOCATION),
        ({}, DEFAULT_LOCATION),
        (None, DEFAULT_LOCATION),
    ],
)
def test_format_location(address: dict | None, expected: str) -> None:
    assert format_location(address) == expected


def _weather_client(mocker: pytest_mock.MockerFixture) -> WeatherClient:
    return mocker.create_autospec(WeatherClient, instance=True)


@pytest.mark.asyncio
async def test_resolver_builds_snapshot(mocker: pytest_mock.MockerFixture) -> None:
    client = _weather_client(mocker)
    client.fetch_current.return_value = CurrentConditions(temperature=72.5, weather_code=95)
    client.reverse_geocode.return_value = {"city": "Austin", "country": "United States"}

    snapshot = await WeatherResolver(client).resolve(30.27, -97.74)

    assert snapshot.temperature == 72.5
    assert snapshot.condition == "Thunderstorm"
    assert snapshot.location == "Austin, United States"
    assert snapshot.unit is TemperatureUnit.FAHRENHEIT
    assert snapshot.timestamp
    client.fetch_current.assert_awaited_once_with(30.27, -97.74, TemperatureUnit.FAHRENHEIT)


@pytest.mark.asyncio
async def test_resolver_passes_requested_unit(mocker: pytest_mock.MockerFixture) -> None:
    client = _weather_client(mocker)
    client.fetch_current.return_value = CurrentConditions(temperature=-3.0, weather_code=71)
    client.reverse_geocode.return_value = {"town": "Tromsø", "country": "Norway"}

    snapshot = await resolve_weather(client, 69.65, 18.96, "C")

    assert snapshot.unit is TemperatureUnit.CELSIUS
    assert snapshot.condition == "Slight snow"
    client.fetch_current.assert_awaited_once_with(69.65, 18.96, TemperatureUnit.CELSIUS)


@pytest.mark.asyncio
async def test_unknown_code_is_reported_as_unknown(mocker: pytest_mock.MockerFixture) -> None:
    client = _weather_client(mocker)
    client.fetch_current.return_value = CurrentConditions(temperature=50.0, weather_code=120)
    client.reverse_geocode.return_value = {"city": "Oslo", "country": "Norway"}

    snapshot = await WeatherResolver(client).resolve(59.9, 10.7)

    assert snapshot.condition == "Unknown"


@pytest.mark.asyncio
@pytest.mark.parametrize("failure", [WeatherRequestError("geocoder down", 503), RuntimeError("boom")])
async def test_geocoding_failure_uses_placeholder(
    mocker: pytest_mock.MockerFixture,
    failure: Exception,
) -> None:
    client = _weather_client(mocker)
    client.fetch_current.return_value = CurrentConditions(temperature=64.0, weather_code=2)
    client.reverse_geocode.side_effect = failure

    snapshot = await WeatherResolver(client).resolve(51.5, -0.12)

    assert snapshot.location == DEFAULT_LOCATION
    assert snapshot.condition == "Partly cloudy"


@pytest.mark.asyncio
async def test_fetch_failure_raises_weather_unavailable(mocker: pytest_mock.MockerFixture) -> None:
    client = _weather_client(mocker)
    client.fetch_current.side_effect = WeatherRequestError("forecast down", 500)

    with pytest.raises(WeatherUnavailable, match="Failed to fetch weather data"):
        await WeatherResolver(client).resolve(51.5, -0.12)

    client.reverse_geocode.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(("lat", "lon"), [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (0.0, -181.0)])
async def test_out_of_range_coordinates_are_rejected(
    mocker: pytest_mock.MockerFixture,
    lat: float,
    lon: float,
) -> None:
    client = _weather_client(mocker)

    with pytest.raises(ValueError):
        await WeatherResolver(client).resolve(lat, lon)

    client.fetch_current.assert_not_called()


def _transport(forecast: httpx.Response, geocode: httpx.Response, seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/forecast"):
            return forecast
        if request.url.path.endswith("/reverse"):
            return geocode
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_client_requests_forecast_and_address() -> None:
    seen: list[httpx.Request] = []
    transport = _transport(
        httpx.Response(200, json={"current": {"temperature_2m": 10.5, "weather_code": 3}}),
        httpx.Response(200, json={"address": {"city": "Berlin", "country": "Germany"}}),
        seen,
    )
    client = WeatherClient(ClosetSettings(), transport=transport)
    try:
        snapshot = await WeatherResolver(client).resolve(52.52, 13.4, TemperatureUnit.CELSIUS)
    finally:
        await client.close()

    assert snapshot.temperature == 10.5
    assert snapshot.condition == "Overcast"
    assert snapshot.location == "Berlin, Germany"

    forecast_request, geocode_request = seen
    assert forecast_request.url.host == "api.open-meteo.com"
    assert forecast_request.url.params["temperature_unit"] == "celsius"
    assert forecast_request.url.params["current"] == "temperature_2m,weather_code"
    assert geocode_request.url.host == "nominatim.openstreetmap.org"
    assert geocode_request.url.params["format"] == "json"
    assert geocode_request.headers["User-Agent"] == "DigitalClosetApp"


@pytest.mark.asyncio
async def test_client_geocode_error_still_returns_weather() -> None:
    seen: list[httpx.Request] = []
    transport = _transport(
        httpx.Response(200, json={"current": {"temperature_2m": 80, "weather_code": 0}}),
        httpx.Response(500, text="upstream error"),
        seen,
    )
    client = WeatherClient(ClosetSettings(), transport=transport)
    try:
        snapshot = await WeatherResolver(client).resolve(25.0, 55.0)
    finally:
        await client.close()

    assert snapshot.location == DEFAULT_LOCATION
    assert snapshot.temperature == 80.0
    assert seen[0].url.params["temperature_unit"] == "fahrenheit"


@pytest.mark.asyncio
async def test_client_maps_http_errors() -> None:
    transport = _transport(httpx.Response(502), httpx.Response(200, json={}), [])
    client = WeatherClient(ClosetSettings(), transport=transport)
    try:
        with pytest.raises(WeatherRequestError) as excinfo:
            await client.fetch_current(0.0, 0.0, TemperatureUnit.FAHRENHEIT)
    finally:
        await client.close()

    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_client_rejects_missing_current_block() -> None:
    transport = _transport(
        httpx.Response(200, json={"hourly": {}}),
        httpx.Response(200, json={"display_name": "nowhere"}),
        [],
    )
    client = WeatherClient(ClosetSettings(), transport=transport)
    try:
        with pytest.raises(WeatherRequestError):
            await client.fetch_current(0.0, 0.0, TemperatureUnit.FAHRENHEIT)
        with pytest.raises(WeatherRequestError):
            await client.reverse_geocode(0.0, 0.0)
    finally:
        await client.close()
