"""Tests for the geocoding and weather client with mocked httpx."""

import asyncio

import httpx
import pytest
import respx

from rythu_weather.config import Settings
from rythu_weather.schemas import Coordinates
from rythu_weather.services.speech import BrowserSpeechRecognizer, BrowserSpeechSynthesizer
from rythu_weather.services.telugu import LOCATION_NOT_FOUND_MESSAGE
from rythu_weather.services.voice_session import VoiceSession
from rythu_weather.services.weather_client import (
    LocationNotFoundError,
    WeatherClient,
    WeatherUnavailableError,
    weather_code_to_category,
)

GEO_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
OWM_GEO_URL = "https://api.openweathermap.org/geo/1.0/direct"
OWM_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

HYDERABAD = Coordinates(name="Hyderabad", latitude=17.385, longitude=78.4867)


def _run(coro):
    return asyncio.run(coro)


async def _call(client: WeatherClient, method: str, *args):
    try:
        return await getattr(client, method)(*args)
    finally:
        await client.close()


@pytest.fixture
def client() -> WeatherClient:
    return WeatherClient(settings=Settings())


@pytest.fixture
def owm_client() -> WeatherClient:
    return WeatherClient(settings=Settings(weather_provider="openweather", openweather_api_key="test-key"))


class TestGetCoordinates:
    @respx.mock
    def test_first_open_meteo_match_wins(self, client: WeatherClient):
        route = respx.get(GEO_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "results": [
                        {"name": "Hyderabad", "latitude": 17.385, "longitude": 78.4867, "country": "India", "admin1": "Telangana"},
                        {"name": "Hyderabad", "latitude": 25.39, "longitude": 68.37, "country": "Pakistan"},
                    ]
                },
            )
        )

        result = _run(_call(client, "get_coordinates", "  Hyderabad "))

        assert result.name == "Hyderabad"
        assert result.latitude == pytest.approx(17.385)
        assert result.admin1 == "Telangana"
        assert route.calls[0].request.url.params["name"] == "Hyderabad"

    @respx.mock
    def test_falls_back_to_nominatim(self, client: WeatherClient):
        respx.get(GEO_URL).mock(return_value=httpx.Response(200, json={}))
        nominatim = respx.get(NOMINATIM_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "lat": "16.3067",
                        "lon": "80.4365",
                        "display_name": "Guntur, Andhra Pradesh, India",
                        "address": {"city": "Guntur", "state": "Andhra Pradesh", "country": "India"},
                    }
                ],
            )
        )

        result = _run(_call(client, "get_coordinates", "Guntur"))

        assert nominatim.called
        assert "Rythu Weather API" in nominatim.calls[0].request.headers["user-agent"]
        assert result.name == "Guntur"
        assert result.longitude == pytest.approx(80.4365)

    @respx.mock
    def test_no_match_anywhere_is_not_found(self, client: WeatherClient):
        respx.get(GEO_URL).mock(return_value=httpx.Response(200, json={"results": []}))
        respx.get(NOMINATIM_URL).mock(return_value=httpx.Response(200, json=[]))

        with pytest.raises(LocationNotFoundError):
            _run(_call(client, "get_coordinates", "Atlantis"))

    @respx.mock
    def test_network_failure_is_not_found(self, client: WeatherClient):
        respx.get(GEO_URL).mock(side_effect=httpx.ConnectError("boom"))

        with pytest.raises(LocationNotFoundError) as exc_info:
            _run(_call(client, "get_coordinates", "Hyderabad"))
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_server_error_is_not_retried(self, client: WeatherClient):
        route = respx.get(GEO_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(LocationNotFoundError):
            _run(_call(client, "get_coordinates", "Hyderabad"))
        assert route.call_count == 1

    @pytest.mark.parametrize(
        "payload",
        [{"results": None}, {"results": ["Hyderabad"]}, {"results": {"name": "Hyderabad"}}, ["Hyderabad"]],
    )
    @respx.mock
    def test_malformed_payload_is_not_found(self, client: WeatherClient, payload):
        respx.get(GEO_URL).mock(return_value=httpx.Response(200, json=payload))
        respx.get(NOMINATIM_URL).mock(return_value=httpx.Response(200, json=[]))

        with pytest.raises(LocationNotFoundError):
            _run(_call(client, "get_coordinates", "Hyderabad"))

    def test_blank_place_skips_the_network(self, client: WeatherClient):
        with pytest.raises(LocationNotFoundError):
            _run(_call(client, "get_coordinates", "   "))

    @respx.mock
    def test_openweather_geocoding(self, owm_client: WeatherClient):
        route = respx.get(OWM_GEO_URL).mock(
            return_value=httpx.Response(
                200, json=[{"name": "Vijayawada", "lat": 16.5062, "lon": 80.648, "country": "IN", "state": "Andhra Pradesh"}]
            )
        )

        result = _run(_call(owm_client, "get_coordinates", "Vijayawada"))

        assert result.name == "Vijayawada"
        assert route.calls[0].request.url.params["appid"] == "test-key"


class TestGetWeather:
    @respx.mock
    def test_open_meteo_current_conditions(self, client: WeatherClient):
        route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "current": {
                        "time": "2026-06-01T09:00",
                        "temperature_2m": 31.2,
                        "relative_humidity_2m": 60,
                        "weather_code": 0,
                        "wind_speed_10m": 10.4,
                    }
                },
            )
        )

        reading = _run(_call(client, "get_weather", HYDERABAD, "Hyderabad"))

        assert reading.location == "Hyderabad"
        assert reading.temperature == pytest.approx(31.2)
        assert reading.humidity == pytest.approx(60.0)
        assert reading.wind_speed == pytest.approx(10.4)
        assert reading.weather_desc == "clear sky"
        assert route.calls[0].request.url.params["wind_speed_unit"] == "kmh"

    @respx.mock
    def test_location_falls_back_to_resolved_name(self, client: WeatherClient):
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "current": {
                        "temperature_2m": 25,
                        "relative_humidity_2m": 90,
                        "weather_code": 63,
                        "wind_speed_10m": 5,
                    }
                },
            )
        )

        reading = _run(_call(client, "get_weather", HYDERABAD, ""))

        assert reading.location == "Hyderabad"
        assert reading.weather_desc == "rain"

    @respx.mock
    def test_missing_current_block_is_unavailable(self, client: WeatherClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json={"hourly": {}}))

        with pytest.raises(WeatherUnavailableError):
            _run(_call(client, "get_weather", HYDERABAD, "Hyderabad"))

    @respx.mock
    def test_provider_error_is_unavailable(self, client: WeatherClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(WeatherUnavailableError):
            _run(_call(client, "get_weather", HYDERABAD, "Hyderabad"))

    @respx.mock
    def test_openweather_converts_wind_to_kmh(self, owm_client: WeatherClient):
        respx.get(OWM_WEATHER_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "weather": [{"main": "Clouds", "description": "Scattered Clouds"}],
                    "main": {"temp": 29.5, "humidity": 72},
                    "wind": {"speed": 5.0},
                },
            )
        )

        reading = _run(_call(owm_client, "get_weather", HYDERABAD, "Hyderabad"))

        assert reading.wind_speed == pytest.approx(18.0)
        assert reading.weather_desc == "scattered clouds"

    @respx.mock
    def test_openweather_malformed_blocks_are_unavailable(self, owm_client: WeatherClient):
        respx.get(OWM_WEATHER_URL).mock(
            return_value=httpx.Response(200, json={"main": [29.5], "wind": "calm", "weather": None})
        )

        with pytest.raises(WeatherUnavailableError):
            _run(_call(owm_client, "get_weather", HYDERABAD, "Hyderabad"))


def test_weather_code_to_category() -> None:
    assert weather_code_to_category(0) == "clear sky"
    assert weather_code_to_category(3) == "broken clouds"
    assert weather_code_to_category(45) == "mist"
    assert weather_code_to_category(81) == "shower rain"
    assert weather_code_to_category(95) == "thunderstorm"
    assert weather_code_to_category(None) == "unknown"
    assert weather_code_to_category(12) == "unknown"


def test_provider_requires_api_key() -> None:
    settings = Settings(weather_provider="openweather", openweather_api_key=None)
    assert WeatherClient(settings=settings).provider == "open-meteo"


@respx.mock
def test_malformed_geocoding_payload_becomes_location_not_found_state() -> None:
    respx.get(GEO_URL).mock(return_value=httpx.Response(200, json={"results": None}))
    respx.get(NOMINATIM_URL).mock(return_value=httpx.Response(200, json=[]))
    client = WeatherClient(settings=Settings())
    session = VoiceSession(client, BrowserSpeechRecognizer(), BrowserSpeechSynthesizer())

    async def submit() -> bool:
        try:
            return await session.submit_transcript("Hyderabad")
        finally:
            await client.close()

    assert asyncio.run(submit()) is False
    assert session.state.result == "error"
    assert session.state.reading is None
    assert session.state.error == LOCATION_NOT_FOUND_MESSAGE
