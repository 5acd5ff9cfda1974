from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from rythu_weather.schemas import WeatherReading
from rythu_weather.services.advisory import build_advisory
from rythu_weather.services.speech import (
    SpeechChannel,
    SpeechEvent,
    SpeechRecognizer,
    SpeechSynthesizer,
    Utterance,
)
from rythu_weather.services.telugu import (
    LOCATION_NOT_FOUND_MESSAGE,
    NO_ADVICE,
    VOICE_INPUT_UNSUPPORTED_MESSAGE,
    VOICE_OUTPUT_FAILED_MESSAGE,
    VOICE_OUTPUT_UNSUPPORTED_MESSAGE,
    build_display,
    build_speech_text,
    format_transcript,
)
from rythu_weather.services.weather_client import WeatherClient, WeatherLookupError


logger = logging.getLogger(__name__)

ResultState = Literal["empty", "shown", "error"]


@dataclass
class ViewState:
    reading: WeatherReading | None = None
    advisory: str | None = None
    error: str | None = None
    result: ResultState = "empty"
    transcript: str = ""
    listening: bool = False
    speaking: bool = False

    @property
    def audio(self) -> str:
        if self.listening:
            return "listening"
        if self.speaking:
            return "speaking"
        return "idle"


class VoiceSession:
    """Controller behind the farmer's voice screen.

    Owns the single view state. Every public method is one UI event
    (mic press, transcript, replay, visibility change, speech callback) and
    applies its state changes in one step between awaits.

    Overlapping lookups are resolved by cancel-and-replace: each lookup takes
    a new generation number and only the newest generation may write to the
    view state or start speech.
    """

    def __init__(
        self,
        weather_client: WeatherClient,
        recognizer: SpeechRecognizer,
        synthesizer: SpeechSynthesizer,
        *,
        language: str = "te-IN",
    ) -> None:
        self.weather_client = weather_client
        self.recognizer = recognizer
        self.language = language
        self.state = ViewState()
        self.channel = SpeechChannel(synthesizer, language=language, on_speaking=self._set_speaking)
        self._generation = 0

    @property
    def synthesizer(self) -> SpeechSynthesizer:
        return self.channel.synthesizer

    def set_capabilities(self, *, recognition: bool, synthesis: bool) -> None:
        self.recognizer.supported = recognition
        self.synthesizer.supported = synthesis
        if not recognition and self.state.listening:
            self.stop_listening()

    def press_mic(self) -> None:
        if self.state.listening:
            self.stop_listening()
        else:
            self.start_listening()

    def start_listening(self) -> None:
        if not self.recognizer.supported:
            self.state.error = VOICE_INPUT_UNSUPPORTED_MESSAGE
            return
        self.state.listening = True
        self.state.transcript = ""
        self.recognizer.start(language=self.language, continuous=False)

    def stop_listening(self) -> None:
        self.state.listening = False
        self.recognizer.stop()

    async def submit_transcript(self, transcript: str) -> bool:
        transcript = transcript.strip()
        if not transcript:
            return False
        self.stop_listening()
        self.state.transcript = transcript
        return await self.lookup(transcript)

    async def lookup(self, place: str) -> bool:
        self._generation += 1
        generation = self._generation
        self.state.error = None
        self.state.advisory = None

        try:
            coordinates = await self.weather_client.get_coordinates(place)
            reading = await self.weather_client.get_weather(coordinates, place)
        except WeatherLookupError as exc:
            if generation != self._generation:
                logger.info("Dropping failed lookup for %r, superseded by a newer one", place)
                return False
            logger.warning("Error fetching weather data for %r: %s", place, exc)
            self.state.reading = None
            self.state.result = "error"
            self.state.error = LOCATION_NOT_FOUND_MESSAGE
            self._speak_error()
            return False

        if generation != self._generation:
            logger.info("Dropping lookup for %r, superseded by a newer one", place)
            return False

        advisory = build_advisory(reading)
        self.state.reading = reading
        self.state.advisory = advisory
        self.state.result = "shown"
        self.speak_weather(reading, advisory)
        return True

    def speak_weather(self, reading: WeatherReading, advisory: str) -> Utterance | None:
        if not self.synthesizer.supported:
            self.state.error = VOICE_OUTPUT_UNSUPPORTED_MESSAGE
            return None

        try:
            return self.channel.speak(build_speech_text(reading, advisory))
        except Exception:
            logger.exception("Error in speech synthesis")
            self.state.error = VOICE_OUTPUT_FAILED_MESSAGE
            return None

    def replay(self) -> Utterance | None:
        if self.state.reading is None:
            return None
        return self.speak_weather(self.state.reading, self.state.advisory or NO_ADVICE)

    def set_visibility(self, *, hidden: bool) -> None:
        if not hidden:
            return
        self.channel.cancel()
        self.state.speaking = False

    def handle_speech_event(self, utterance_id: int, event: SpeechEvent, detail: str | None = None) -> bool:
        return self.channel.handle_event(utterance_id, event, detail)

    def snapshot(self) -> dict:
        state = self.state
        utterance = self.channel.active
        return {
            "result": state.result,
            "audio": state.audio,
            "listening": state.listening,
            "speaking": state.speaking,
            "transcript": state.transcript,
            "transcript_text": format_transcript(state.transcript),
            "error": state.error,
            "reading": state.reading.model_dump() if state.reading is not None else None,
            "display": build_display(state.reading, state.advisory) if state.reading is not None else None,
            "advisory": state.advisory,
            "utterance": utterance.to_dict() if utterance is not None else None,
            "speech_language": self.language,
            "recognition": {"language": self.language, "continuous": False},
            "capabilities": {
                "recognition": self.recognizer.supported,
                "synthesis": self.synthesizer.supported,
            },
        }

    def _speak_error(self) -> None:
        if not self.synthesizer.supported:
            return
        try:
            self.channel.speak(LOCATION_NOT_FOUND_MESSAGE)
        except Exception:
            logger.exception("Error speaking the lookup failure message")

    def _set_speaking(self, speaking: bool) -> None:
        self.state.speaking = speaking
