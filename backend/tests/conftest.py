"""Shared test fixtures."""

import pytest

from rythu_weather.schemas import Coordinates, WeatherReading
from rythu_weather.services.weather_client import LocationNotFoundError, WeatherUnavailableError


class FakeRouteWeatherClient:
    provider = "open-meteo"

    async def close(self) -> None:
        return None

    async def get_coordinates(self, place: str) -> Coordinates:
        if place.strip().lower() == "atlantis":
            raise LocationNotFoundError("No geocoding match for 'Atlantis'.")
        return Coordinates(
            name=place.strip(),
            latitude=17.385,
            longitude=78.4867,
            country="India",
            admin1="Telangana",
        )

    async def get_weather(self, coordinates: Coordinates, place: str) -> WeatherReading:
        if place == "Nowhere":
            raise WeatherUnavailableError("No current conditions for 'Nowhere'.")
        return WeatherReading(
            location=place,
            temperature=31.0,
            humidity=60.0,
            wind_speed=10.0,
            weather_desc="clear sky",
        )


@pytest.fixture
def fake_weather_client() -> FakeRouteWeatherClient:
    """Weather client that knows every place except Atlantis; Nowhere has no weather."""
    return FakeRouteWeatherClient()
