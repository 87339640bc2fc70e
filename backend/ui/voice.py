"""Voice input and output for the chat UI.

Speech engines are pluggable and report through event notifications
(start, result, end, error). The controller keeps recording and speaking
mutually exclusive: starting one stops the other.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

RECOGNITION_UNSUPPORTED = "Speech recognition not supported in this browser"


class SpeechRecognizer(ABC):
    """Speech-to-text engine.

    The controller assigns the ``on_*`` handlers before calling ``start``.
    ``on_result`` receives the running transcript of the whole capture and
    whether it is final.
    """

    on_start: Callable[[], None] | None = None
    on_result: Callable[[str, bool], None] | None = None
    on_end: Callable[[], None] | None = None
    on_error: Callable[[str], None] | None = None

    @abstractmethod
    def start(self) -> None:
        """Begin capturing audio."""

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing; the engine still reports ``on_end``."""


class SpeechSynthesizer(ABC):
    """Text-to-speech engine with one active utterance at a time."""

    on_start: Callable[[], None] | None = None
    on_end: Callable[[], None] | None = None
    on_error: Callable[[str], None] | None = None

    @abstractmethod
    def speak(self, text: str) -> None:
        """Queue an utterance."""

    @abstractmethod
    def cancel(self) -> None:
        """Drop the current and queued utterances."""


class VoiceController:
    """Tracks recording/speaking state over the speech engines.

    Args:
        recognizer: Speech-to-text engine, or None when unavailable.
        synthesizer: Text-to-speech engine, or None when unavailable.
        on_transcript: Called with the running transcript while recording.
        on_error: Called with a user-facing message when voice fails.
    """

    def __init__(
        self,
        recognizer: SpeechRecognizer | None = None,
        synthesizer: SpeechSynthesizer | None = None,
        *,
        on_transcript: Callable[[str], None] | None = None,
        on_error: Callable[[str | None], None] | None = None,
    ) -> None:
        self.recognizer = recognizer
        self.synthesizer = synthesizer
        self.is_recording = False
        self.is_speaking = False
        self._on_transcript = on_transcript
        self._on_error = on_error

        if recognizer is not None:
            recognizer.on_result = self._handle_result
            recognizer.on_error = self._handle_recognition_error
            recognizer.on_end = self._handle_recognition_end

        if synthesizer is not None:
            synthesizer.on_start = self._handle_speech_start
            synthesizer.on_end = self._handle_speech_end
            synthesizer.on_error = self._handle_speech_error

    # --- Recording ---

    def toggle_recording(self) -> None:
        if self.recognizer is None:
            self._report(RECOGNITION_UNSUPPORTED)
            return

        if self.is_recording:
            self.recognizer.stop()
            self.is_recording = False
            return

        if self.is_speaking:
            self.stop_speaking()
        self.recognizer.start()
        self.is_recording = True
        self._report(None)

    def _handle_result(self, transcript: str, is_final: bool) -> None:
        if self._on_transcript is not None:
            self._on_transcript(transcript)

    def _handle_recognition_error(self, error: str) -> None:
        logger.error("Speech recognition error: %s", error)
        self.is_recording = False
        self._report(f"Speech recognition error: {error}")

    def _handle_recognition_end(self) -> None:
        self.is_recording = False

    # --- Speaking ---

    def speak(self, text: str) -> None:
        """Read text aloud, replacing any current utterance."""
        if self.synthesizer is None or not text:
            return

        if self.is_recording and self.recognizer is not None:
            self.recognizer.stop()
            self.is_recording = False

        self.synthesizer.cancel()
        self.synthesizer.speak(text)

    def stop_speaking(self) -> None:
        if self.synthesizer is not None:
            self.synthesizer.cancel()
        self.is_speaking = False

    def _handle_speech_start(self) -> None:
        self.is_speaking = True

    def _handle_speech_end(self) -> None:
        self.is_speaking = False

    def _handle_speech_error(self, error: str) -> None:
        logger.warning("Speech synthesis error: %s", error)
        self.is_speaking = False

    def _report(self, message: str | None) -> None:
        if self._on_error is not None:
            self._on_error(message)
