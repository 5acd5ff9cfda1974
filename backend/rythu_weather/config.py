from __future__ import annotations

import os
from dataclasses import dataclass


SUPPORTED_PROVIDERS = ("open-meteo", "openweather")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    app_name: str = "Rythu Weather API"
    app_version: str = "1.0.0"
    weather_provider: str = "open-meteo"
    openweather_api_key: str | None = None
    open_meteo_base_url: str = "https://api.open-meteo.com/v1"
    open_meteo_geo_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    nominatim_geo_url: str = "https://nominatim.openstreetmap.org/search"
    openweather_geo_url: str = "https://api.openweathermap.org/geo/1.0/direct"
    openweather_weather_url: str = "https://api.openweathermap.org/data/2.5/weather"
    speech_language: str = "te-IN"
    request_timeout_seconds: float = 12.0
    log_level: str = "INFO"
    frontend_origins: tuple[str, ...] = ("http://localhost:5173", "http://127.0.0.1:5173")


def get_settings() -> Settings:
    origins_raw = os.getenv("FRONTEND_ORIGINS", "").strip()
    provider_raw = os.getenv("WEATHER_PROVIDER", "").strip().lower()
    api_key_raw = os.getenv("OPENWEATHER_API_KEY", "").strip()
    timeout_raw = os.getenv("REQUEST_TIMEOUT_SECONDS", "").strip()
    log_level_raw = os.getenv("LOG_LEVEL", "").strip().upper()

    parsed_origins = tuple(item.strip() for item in origins_raw.split(",") if item.strip())

    try:
        request_timeout_seconds = float(timeout_raw) if timeout_raw else 12.0
    except ValueError:
        request_timeout_seconds = 12.0

    provider = provider_raw if provider_raw in SUPPORTED_PROVIDERS else Settings.weather_provider
    if provider == "openweather" and not api_key_raw:
        # OpenWeather cannot be called without a key.
        provider = Settings.weather_provider

    return Settings(
        weather_provider=provider,
        openweather_api_key=api_key_raw or None,
        request_timeout_seconds=max(1.0, request_timeout_seconds),
        log_level=log_level_raw if log_level_raw in LOG_LEVELS else Settings.log_level,
        frontend_origins=parsed_origins or Settings.frontend_origins,
    )
