from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from rythu_weather.config import Settings
from rythu_weather.schemas import Coordinates, WeatherReading


logger = logging.getLogger(__name__)

# WMO weather codes reported by Open-Meteo, folded into the category strings
# OpenWeather uses for its current-weather descriptions.
WEATHER_CODE_CATEGORIES = {
    0: "clear sky",
    1: "few clouds",
    2: "scattered clouds",
    3: "broken clouds",
    45: "mist",
    48: "mist",
    51: "drizzle",
    53: "drizzle",
    55: "drizzle",
    56: "drizzle",
    57: "drizzle",
    61: "rain",
    63: "rain",
    65: "rain",
    66: "rain",
    67: "rain",
    71: "snow",
    73: "snow",
    75: "snow",
    77: "snow",
    80: "shower rain",
    81: "shower rain",
    82: "shower rain",
    85: "snow",
    86: "snow",
    95: "thunderstorm",
    96: "thunderstorm",
    99: "thunderstorm",
}

MS_TO_KMH = 3.6


class WeatherLookupError(Exception):
    """Base class for failures while resolving a place or its weather."""


class LocationNotFoundError(WeatherLookupError):
    pass


class WeatherUnavailableError(WeatherLookupError):
    pass


@dataclass
class WeatherClient:
    settings: Settings
    _client: httpx.AsyncClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.settings.request_timeout_seconds)

    @property
    def provider(self) -> str:
        if self.settings.weather_provider == "openweather" and self.settings.openweather_api_key:
            return "openweather"
        return "open-meteo"

    async def close(self) -> None:
        await self._client.aclose()

    async def get_coordinates(self, place: str) -> Coordinates:
        place = place.strip()
        if not place:
            raise LocationNotFoundError("Empty place name.")

        try:
            if self.provider == "openweather":
                results = await self._geocode_openweather(place)
            else:
                results = await self._geocode_open_meteo(place)
                if not results:
                    logger.info("Open-Meteo has no match for %r, trying Nominatim", place)
                    results = await self._geocode_nominatim(place)
        except (httpx.HTTPError, ValueError) as exc:
            raise LocationNotFoundError(f"Geocoding failed for {place!r}: {exc}") from exc

        if not results:
            raise LocationNotFoundError(f"No geocoding match for {place!r}.")
        return results[0]

    async def get_weather(self, coordinates: Coordinates, place: str) -> WeatherReading:
        location = place.strip() or coordinates.name or ""
        try:
            if self.provider == "openweather":
                return await self._weather_openweather(coordinates, location)
            return await self._weather_open_meteo(coordinates, location)
        except (httpx.HTTPError, ValueError) as exc:
            raise WeatherUnavailableError(f"Weather provider error for {location!r}: {exc}") from exc

    async def _geocode_open_meteo(self, place: str) -> list[Coordinates]:
        payload = await self._get_json(
            url=self.settings.open_meteo_geo_url,
            params={"name": place, "count": 5, "language": "en", "format": "json"},
        )
        results = (payload.get("results") or []) if isinstance(payload, dict) else []
        if not isinstance(results, list):
            return []

        mapped: list[Coordinates] = []
        for item in results:
            if not isinstance(item, dict):
                continue
            latitude = _as_float(item.get("latitude"))
            longitude = _as_float(item.get("longitude"))
            if latitude is None or longitude is None:
                continue
            mapped.append(
                Coordinates(
                    name=item.get("name"),
                    latitude=latitude,
                    longitude=longitude,
                    country=item.get("country"),
                    admin1=item.get("admin1"),
                )
            )
        return mapped

    async def _geocode_nominatim(self, place: str) -> list[Coordinates]:
        payload = await self._get_json(
            url=self.settings.nominatim_geo_url,
            params={"q": place, "format": "jsonv2", "limit": 5, "addressdetails": 1},
            headers={"User-Agent": f"{self.settings.app_name}/{self.settings.app_version}"},
        )
        if not isinstance(payload, list):
            return []

        mapped: list[Coordinates] = []
        for item in payload:
            if not isinstance(item, dict):
                continue

            address = item.get("address", {}) if isinstance(item.get("address"), dict) else {}
            latitude = _as_float(item.get("lat"))
            longitude = _as_float(item.get("lon"))
            if latitude is None or longitude is None:
                continue

            name = (
                item.get("name")
                or address.get("city")
                or address.get("town")
                or address.get("village")
                or address.get("state")
                or item.get("display_name")
            )
            mapped.append(
                Coordinates(
                    name=name,
                    latitude=latitude,
                    longitude=longitude,
                    country=address.get("country"),
                    admin1=address.get("state") or address.get("region"),
                )
            )
        return mapped

    async def _geocode_openweather(self, place: str) -> list[Coordinates]:
        payload = await self._get_json(
            url=self.settings.openweather_geo_url,
            params={"q": place, "limit": 5, "appid": self.settings.openweather_api_key},
        )
        if not isinstance(payload, list):
            return []

        mapped: list[Coordinates] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            latitude = _as_float(item.get("lat"))
            longitude = _as_float(item.get("lon"))
            if latitude is None or longitude is None:
                continue
            mapped.append(
                Coordinates(
                    name=item.get("name"),
                    latitude=latitude,
                    longitude=longitude,
                    country=item.get("country"),
                    admin1=item.get("state"),
                )
            )
        return mapped

    async def _weather_open_meteo(self, coordinates: Coordinates, location: str) -> WeatherReading:
        payload = await self._get_json(
            url=f"{self.settings.open_meteo_base_url}/forecast",
            params={
                "latitude": coordinates.latitude,
                "longitude": coordinates.longitude,
                "current": "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m",
                "wind_speed_unit": "kmh",
                "timezone": "auto",
            },
        )
        current = payload.get("current") if isinstance(payload, dict) else None
        if not isinstance(current, dict):
            raise WeatherUnavailableError(f"No current conditions for {location!r}.")

        temperature = _as_float(current.get("temperature_2m"))
        humidity = _as_float(current.get("relative_humidity_2m"))
        wind_speed = _as_float(current.get("wind_speed_10m"))
        if temperature is None or humidity is None or wind_speed is None:
            raise WeatherUnavailableError(f"Incomplete current conditions for {location!r}.")

        return WeatherReading(
            location=location,
            temperature=temperature,
            humidity=humidity,
            wind_speed=wind_speed,
            weather_desc=weather_code_to_category(_as_int(current.get("weather_code"))),
        )

    async def _weather_openweather(self, coordinates: Coordinates, location: str) -> WeatherReading:
        payload = await self._get_json(
            url=self.settings.openweather_weather_url,
            params={
                "lat": coordinates.latitude,
                "lon": coordinates.longitude,
                "appid": self.settings.openweather_api_key,
                "units": "metric",
            },
        )
        if not isinstance(payload, dict):
            raise WeatherUnavailableError(f"No current conditions for {location!r}.")

        main = payload.get("main") if isinstance(payload.get("main"), dict) else {}
        wind = payload.get("wind") if isinstance(payload.get("wind"), dict) else {}
        conditions = payload.get("weather") if isinstance(payload.get("weather"), list) else []

        temperature = _as_float(main.get("temp"))
        humidity = _as_float(main.get("humidity"))
        wind_speed_ms = _as_float(wind.get("speed"))
        if temperature is None or humidity is None or wind_speed_ms is None:
            raise WeatherUnavailableError(f"Incomplete current conditions for {location!r}.")

        description = ""
        if conditions and isinstance(conditions[0], dict):
            description = str(conditions[0].get("description") or "")

        return WeatherReading(
            location=location,
            temperature=temperature,
            humidity=humidity,
            wind_speed=round(wind_speed_ms * MS_TO_KMH, 1),
            weather_desc=description.strip().lower() or "unknown",
        )

    async def _get_json(
        self,
        *,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()


def weather_code_to_category(code: int | None) -> str:
    if code is None:
        return "unknown"
    return WEATHER_CODE_CATEGORIES.get(code, "unknown")


def _as_float(value: object) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: object) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
