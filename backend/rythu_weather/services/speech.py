"""
Speech input and output seams.

The microphone and the speaker belong to the client platform. The service only
decides what to listen for and what to say; the classes here carry those
decisions to whichever platform implementation is plugged in.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Literal


logger = logging.getLogger(__name__)

SpeechEvent = Literal["start", "end", "error"]
SpeechEventCallback = Callable[[int, SpeechEvent, str | None], bool]


@dataclass(frozen=True)
class Utterance:
    utterance_id: int
    text: str
    language: str

    def to_dict(self) -> dict:
        return {"utterance_id": self.utterance_id, "text": self.text, "language": self.language}


class SpeechRecognizer(ABC):
    """Abstract speech-to-text capability."""

    supported: bool = True

    @abstractmethod
    def start(self, *, language: str, continuous: bool) -> None:
        """
        Begin listening for a single utterance.

        Args:
            language: BCP-47 language tag, e.g. "te-IN"
            continuous: Keep listening after the first final result
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop listening. Safe to call when not listening."""


class SpeechSynthesizer(ABC):
    """Abstract text-to-speech capability."""

    supported: bool = True

    @abstractmethod
    def speak(self, utterance: Utterance, notify: SpeechEventCallback) -> None:
        """
        Queue an utterance for playback.

        Args:
            utterance: What to say
            notify: Called with (utterance_id, event, detail) on start/end/error
        """

    @abstractmethod
    def cancel(self, utterance: Utterance) -> None:
        """Stop an utterance that is queued or playing."""

    def finished(self, utterance: Utterance) -> None:
        """Called once the platform reports the utterance ended or failed."""


class BrowserSpeechRecognizer(SpeechRecognizer):
    """Recognition performed by the browser; this side records what was asked for."""

    def __init__(self) -> None:
        self.supported = True
        self.active = False
        self.language: str | None = None
        self.continuous = False

    def start(self, *, language: str, continuous: bool) -> None:
        self.active = True
        self.language = language
        self.continuous = continuous

    def stop(self) -> None:
        self.active = False


class BrowserSpeechSynthesizer(SpeechSynthesizer):
    """Synthesis performed by the browser.

    The pending utterance is handed to the client with every state snapshot;
    the client reports start/end/error back through the speech-events route.
    """

    def __init__(self) -> None:
        self.supported = True
        self.pending: Utterance | None = None

    def speak(self, utterance: Utterance, notify: SpeechEventCallback) -> None:
        self.pending = utterance

    def cancel(self, utterance: Utterance) -> None:
        if self.pending is not None and self.pending.utterance_id == utterance.utterance_id:
            self.pending = None

    def finished(self, utterance: Utterance) -> None:
        self.cancel(utterance)


class SpeechChannel:
    """Single-slot handle over a synthesizer.

    Speaking always releases the held utterance first, so at most one
    utterance is active. Events for any other utterance are dropped.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        *,
        language: str,
        on_speaking: Callable[[bool], None],
    ) -> None:
        self.synthesizer = synthesizer
        self.language = language
        self._on_speaking = on_speaking
        self._active: Utterance | None = None
        self._last_id = 0

    @property
    def active(self) -> Utterance | None:
        return self._active

    def speak(self, text: str) -> Utterance:
        self.cancel()
        self._last_id += 1
        utterance = Utterance(utterance_id=self._last_id, text=text, language=self.language)
        self._active = utterance
        try:
            self.synthesizer.speak(utterance, self.handle_event)
        except Exception:
            if self._active is utterance:
                self._active = None
            raise
        return utterance

    def cancel(self) -> None:
        if self._active is None:
            return
        utterance, self._active = self._active, None
        self.synthesizer.cancel(utterance)
        self._on_speaking(False)

    def handle_event(self, utterance_id: int, event: SpeechEvent, detail: str | None = None) -> bool:
        active = self._active
        if active is None or active.utterance_id != utterance_id:
            logger.debug("Ignoring %s event for stale utterance %s", event, utterance_id)
            return False

        if event == "start":
            self._on_speaking(True)
            return True

        if event == "error":
            logger.error("Speech synthesis error for utterance %s: %s", utterance_id, detail)

        self._active = None
        self.synthesizer.finished(active)
        self._on_speaking(False)
        return True
