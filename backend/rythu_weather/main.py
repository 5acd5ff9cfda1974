from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from rythu_weather.config import get_settings
from rythu_weather.schemas import (
    CapabilitiesRequest,
    Coordinates,
    SpeechEventRequest,
    TranscriptRequest,
    VisibilityRequest,
)
from rythu_weather.services.advisory import build_advisory, matching_rules
from rythu_weather.services.speech import BrowserSpeechRecognizer, BrowserSpeechSynthesizer
from rythu_weather.services.telugu import build_display, build_speech_text
from rythu_weather.services.voice_session import VoiceSession
from rythu_weather.services.weather_client import (
    LocationNotFoundError,
    WeatherClient,
    WeatherUnavailableError,
)


settings = get_settings()
logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

weather_client = WeatherClient(settings=settings)
voice_session = VoiceSession(
    weather_client=weather_client,
    recognizer=BrowserSpeechRecognizer(),
    synthesizer=BrowserSpeechSynthesizer(),
    language=settings.speech_language,
)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.frontend_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("shutdown")
async def shutdown_event() -> None:
    await weather_client.close()


@app.get("/api/health")
async def health() -> dict:
    return {
        "status": "ok",
        "service": settings.app_name,
        "provider": weather_client.provider,
        "timestamp_utc": datetime.now(tz=timezone.utc).isoformat(),
    }


@app.get("/api/geocode")
async def geocode(query: str = Query(min_length=2, max_length=80)) -> dict:
    try:
        coordinates = await weather_client.get_coordinates(query)
    except LocationNotFoundError as exc:
        logger.warning("Geocoding failed for %r: %s", query, exc)
        raise HTTPException(status_code=404, detail="Location not found.") from exc
    return {"result": _serialize_location(coordinates)}


@app.get("/api/weather")
async def weather(location: str = Query(min_length=2, max_length=80)) -> dict:
    try:
        coordinates = await weather_client.get_coordinates(location)
        reading = await weather_client.get_weather(coordinates, location)
    except LocationNotFoundError as exc:
        logger.warning("Geocoding failed for %r: %s", location, exc)
        raise HTTPException(status_code=404, detail="Location not found.") from exc
    except WeatherUnavailableError as exc:
        logger.warning("Weather lookup failed for %r: %s", location, exc)
        raise HTTPException(status_code=502, detail=f"Weather provider error: {exc}") from exc

    advisory = build_advisory(reading)
    return {
        "location": _serialize_location(coordinates),
        "reading": reading.model_dump(),
        "display": build_display(reading, advisory),
        "advisory": advisory,
        "advisory_rules": matching_rules(reading),
        "speech_text": build_speech_text(reading, advisory),
        "speech_language": settings.speech_language,
        "generated_at_utc": datetime.now(tz=timezone.utc).isoformat(),
    }


@app.get("/api/session")
async def session_state() -> dict:
    return voice_session.snapshot()


@app.post("/api/session/capabilities")
async def session_capabilities(payload: CapabilitiesRequest) -> dict:
    voice_session.set_capabilities(recognition=payload.recognition, synthesis=payload.synthesis)
    return voice_session.snapshot()


@app.post("/api/session/mic")
async def session_mic() -> dict:
    voice_session.press_mic()
    return voice_session.snapshot()


@app.post("/api/session/transcript")
async def session_transcript(payload: TranscriptRequest) -> dict:
    await voice_session.submit_transcript(payload.transcript)
    return voice_session.snapshot()


@app.post("/api/session/replay")
async def session_replay() -> dict:
    voice_session.replay()
    return voice_session.snapshot()


@app.post("/api/session/visibility")
async def session_visibility(payload: VisibilityRequest) -> dict:
    voice_session.set_visibility(hidden=payload.hidden)
    return voice_session.snapshot()


@app.post("/api/session/speech-events")
async def session_speech_event(payload: SpeechEventRequest) -> dict:
    accepted = voice_session.handle_speech_event(payload.utterance_id, payload.event, payload.detail)
    return {"accepted": accepted, "state": voice_session.snapshot()}


def _serialize_location(location: Coordinates) -> dict:
    return {
        "name": location.name,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "country": location.country,
        "admin1": location.admin1,
    }
