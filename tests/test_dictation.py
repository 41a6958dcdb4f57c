"""
Tests for speech recognizers.
"""

from types import SimpleNamespace

import pytest
from openai import OpenAIError

from prompt2app.config import Settings
from prompt2app.exceptions import DictationError, DictationUnavailableError
from prompt2app.shell.dictation import (
    OpenAIWhisperRecognizer,
    StaticRecognizer,
    UnavailableRecognizer,
    get_recognizer,
)


class FakeTranscriptions:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_client(text=None, error=None):
    transcriptions = FakeTranscriptions(text=text, error=error)
    return SimpleNamespace(audio=SimpleNamespace(transcriptions=transcriptions)), transcriptions


def test_whisper_transcribes_single_utterance():
    client, transcriptions = fake_client(text="  a to-do list \n")
    recognizer = OpenAIWhisperRecognizer(client=client, language="en")

    assert recognizer.available
    assert recognizer.transcribe(b"RIFFdata", filename="clip.webm") == "a to-do list"

    request = transcriptions.requests[0]
    assert request["model"] == "whisper-1"
    assert request["language"] == "en"
    assert request["file"].name == "clip.webm"
    assert request["file"].read() == b"RIFFdata"


def test_whisper_omits_language_when_autodetecting():
    client, transcriptions = fake_client(text="hola")
    OpenAIWhisperRecognizer(client=client, language=None).transcribe(b"x")
    assert "language" not in transcriptions.requests[0]


def test_whisper_blank_transcript_is_no_speech():
    client, _ = fake_client(text="   ")
    with pytest.raises(DictationError, match="No speech detected"):
        OpenAIWhisperRecognizer(client=client).transcribe(b"x")


def test_whisper_empty_audio_is_no_speech():
    client, transcriptions = fake_client(text="ignored")
    with pytest.raises(DictationError, match="No speech detected"):
        OpenAIWhisperRecognizer(client=client).transcribe(b"")
    assert transcriptions.requests == []


def test_whisper_api_error_becomes_dictation_error():
    client, _ = fake_client(error=OpenAIError("rate limited"))
    with pytest.raises(DictationError, match="rate limited"):
        OpenAIWhisperRecognizer(client=client).transcribe(b"x")


def test_whisper_without_api_key_is_unavailable(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    recognizer = OpenAIWhisperRecognizer()

    assert not recognizer.available
    assert recognizer.unavailable_reason.startswith("Voice input is disabled")
    with pytest.raises(DictationUnavailableError):
        recognizer.transcribe(b"x")


def test_unavailable_recognizer():
    recognizer = UnavailableRecognizer("No microphone")
    assert not recognizer.available
    assert recognizer.unavailable_reason == "No microphone"
    with pytest.raises(DictationUnavailableError):
        recognizer.transcribe(b"x")


def test_static_recognizer_counts_calls():
    recognizer = StaticRecognizer(" a to-do list ")
    assert recognizer.transcribe(b"x") == "a to-do list"
    assert recognizer.calls == 1


def test_get_recognizer_honors_settings():
    assert isinstance(get_recognizer(Settings(dictation_provider="none")), UnavailableRecognizer)
    recognizer = get_recognizer(Settings(dictation_provider="openai", openai_api_key="sk-test"))
    assert isinstance(recognizer, OpenAIWhisperRecognizer)
    assert recognizer.available
    with pytest.raises(ValueError, match="Unsupported dictation provider"):
        get_recognizer(Settings(dictation_provider="carrier-pigeon"))
