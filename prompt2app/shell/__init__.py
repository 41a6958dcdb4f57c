"""
Interactive shell: prompt/document state machine and dictation capability.
"""

from prompt2app.shell.controller import ShellController
from prompt2app.shell.dictation import (
    OpenAIWhisperRecognizer,
    SpeechRecognizer,
    StaticRecognizer,
    UnavailableRecognizer,
    get_recognizer,
)

__all__ = [
    "ShellController",
    "SpeechRecognizer",
    "OpenAIWhisperRecognizer",
    "StaticRecognizer",
    "UnavailableRecognizer",
    "get_recognizer",
]
