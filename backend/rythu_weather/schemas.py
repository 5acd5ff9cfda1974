from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinates(BaseModel):
    name: str | None = Field(default=None, description="Resolved place name.")
    latitude: float
    longitude: float
    country: str | None = None
    admin1: str | None = None


class WeatherReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    temperature: float = Field(description="Air temperature in degrees Celsius.")
    humidity: float = Field(description="Relative humidity in percent.")
    wind_speed: float = Field(description="Wind speed in km/h.")
    weather_desc: str = Field(description="Lower-case weather category, e.g. 'clear sky'.")


class CapabilitiesRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recognition: bool = True
    synthesis: bool = True


class TranscriptRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transcript: str = Field(max_length=120)

    @field_validator("transcript")
    @classmethod
    def strip_transcript(cls, value: str) -> str:
        return value.strip()


class VisibilityRequest(BaseModel):
    hidden: bool


class SpeechEventRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    utterance_id: int = Field(ge=1)
    event: Literal["start", "end", "error"]
    detail: str | None = Field(default=None, max_length=200)
