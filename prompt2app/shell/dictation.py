"""
Speech-to-text capability used to dictate prompts.

The shell only talks to `SpeechRecognizer`, so a missing microphone or API key
degrades to a disabled control instead of a failure.
"""

import io
from abc import ABC, abstractmethod
from typing import Optional

from openai import OpenAI, OpenAIError

from prompt2app.exceptions import DictationError, DictationUnavailableError


NO_SPEECH_MESSAGE = "No speech detected. Please try again."


class SpeechRecognizer(ABC):
    """Single-utterance speech recognition."""

    @property
    def available(self) -> bool:
        return True

    @property
    def unavailable_reason(self) -> Optional[str]:
        return None

    @abstractmethod
    def transcribe(self, audio: bytes, filename: str = "dictation.wav") -> str:
        """
        Turn one recorded utterance into text.

        Args:
            audio: Encoded audio (wav, webm, mp3, ...).
            filename: Name hinting the audio format.

        Returns:
            Recognized transcript, stripped.

        Raises:
            DictationError: On recognition failure or when nothing was said.
        """


class UnavailableRecognizer(SpeechRecognizer):
    """Stand-in when no speech recognition is configured."""

    def __init__(self, reason: str = "Voice input may not be supported in this environment."):
        self.reason = reason

    @property
    def available(self) -> bool:
        return False

    @property
    def unavailable_reason(self) -> Optional[str]:
        return self.reason

    def transcribe(self, audio: bytes, filename: str = "dictation.wav") -> str:
        raise DictationUnavailableError(self.reason)


class StaticRecognizer(SpeechRecognizer):
    """Returns a fixed transcript (or raises a fixed error) for every utterance."""

    def __init__(self, transcript: str = "", error: Optional[Exception] = None):
        self.transcript = transcript
        self.error = error
        self.calls = 0

    def transcribe(self, audio: bytes, filename: str = "dictation.wav") -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        text = self.transcript.strip()
        if not text:
            raise DictationError(NO_SPEECH_MESSAGE)
        return text


class OpenAIWhisperRecognizer(SpeechRecognizer):
    """Transcribes audio with the OpenAI audio transcription endpoint."""

    def __init__(
        self,
        model: str = "whisper-1",
        language: Optional[str] = "en",
        api_key: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the recognizer.

        Args:
            model: Transcription model name.
            language: ISO-639-1 language hint, or None for auto-detect.
            api_key: OpenAI API key (falls back to OPENAI_API_KEY via the SDK).
            client: Pre-built OpenAI client.
        """
        self.model = model
        self.language = language
        self._client = client
        self._client_error: Optional[str] = None

        if self._client is None:
            try:
                self._client = OpenAI(api_key=api_key) if api_key else OpenAI()
            except OpenAIError as e:
                self._client_error = str(e)

    @property
    def available(self) -> bool:
        return self._client is not None

    @property
    def unavailable_reason(self) -> Optional[str]:
        if self.available:
            return None
        return f"Voice input is disabled: {self._client_error or 'OpenAI client not configured'}"

    def transcribe(self, audio: bytes, filename: str = "dictation.wav") -> str:
        if not self.available:
            raise DictationUnavailableError(self.unavailable_reason)
        if not audio:
            raise DictationError(NO_SPEECH_MESSAGE)

        audio_file = io.BytesIO(audio)
        audio_file.name = filename

        kwargs = {"model": self.model, "file": audio_file}
        if self.language:
            kwargs["language"] = self.language

        try:
            result = self._client.audio.transcriptions.create(**kwargs)
        except OpenAIError as e:
            raise DictationError(f"An error occurred with voice input: {e}") from e

        text = (getattr(result, "text", None) or "").strip()
        if not text:
            raise DictationError(NO_SPEECH_MESSAGE)
        return text


def get_recognizer(settings) -> SpeechRecognizer:
    """
    Build the configured recognizer.

    Args:
        settings: `Settings` instance.

    Returns:
        A SpeechRecognizer; UnavailableRecognizer when dictation is off.
    """
    if settings.dictation_provider == "openai":
        return OpenAIWhisperRecognizer(
            model=settings.dictation_model,
            language=settings.dictation_language,
            api_key=settings.openai_api_key,
        )
    if settings.dictation_provider in ("none", "off", ""):
        return UnavailableRecognizer()
    raise ValueError(f"Unsupported dictation provider: {settings.dictation_provider}")
