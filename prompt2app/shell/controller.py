"""
Interactive shell state machine, independent of any UI framework.

The Streamlit page keeps one ShellController in session state and renders
whatever it holds; tests drive it directly with fake generators and recognizers.
"""

from typing import List, Optional, Protocol

from prompt2app.exceptions import (
    DictationError,
    DictationUnavailableError,
    EmptyPromptError,
    GenerationError,
    Prompt2AppError,
)
from prompt2app.io.artifacts import build_save_artifact
from prompt2app.models import (
    DictationStatus,
    GeneratedDocument,
    Notification,
    SaveArtifact,
    ShellStatus,
)
from prompt2app.shell.dictation import SpeechRecognizer, UnavailableRecognizer


class DocumentGenerator(Protocol):
    def generate(self, prompt: str) -> GeneratedDocument:
        ...


class ShellController:
    """Holds the prompt and latest document and applies user actions to them."""

    def __init__(
        self,
        generator: DocumentGenerator,
        recognizer: Optional[SpeechRecognizer] = None,
    ):
        """
        Initialize the shell.

        Args:
            generator: Anything with `generate(prompt) -> GeneratedDocument`.
            recognizer: Speech recognizer; dictation is disabled when omitted.
        """
        self.generator = generator
        self.recognizer = recognizer or UnavailableRecognizer()

        self.prompt: str = ""
        self.document: Optional[GeneratedDocument] = None
        self.status = ShellStatus.IDLE
        self.dictation_status = DictationStatus.IDLE
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification):
        self.notifications.append(notification)

    def drain_notifications(self) -> List[Notification]:
        """Return pending notifications and forget them."""
        pending, self.notifications = self.notifications, []
        return pending

    # --- availability -------------------------------------------------

    @property
    def is_generating(self) -> bool:
        return self.status == ShellStatus.GENERATING

    @property
    def can_generate(self) -> bool:
        return not self.is_generating

    @property
    def can_clear(self) -> bool:
        return not self.is_generating and self.document is not None

    @property
    def can_save(self) -> bool:
        return not self.is_generating and self.document is not None

    # --- generation -----------------------------------------------------

    def generate(self) -> Optional[GeneratedDocument]:
        """
        Send the current prompt to the generator.

        Returns:
            The new document, or None when the prompt was empty, a request was
            already in flight, or generation failed.
        """
        if self.is_generating:
            return None

        if not self.prompt.strip():
            error = EmptyPromptError()
            self.notify(Notification.error(error.title, error.description))
            return None

        self.status = ShellStatus.GENERATING
        self.document = None
        try:
            document = self.generator.generate(self.prompt)
        except Prompt2AppError as e:
            self.notify(Notification.error(GenerationError.title, e.description))
            return None
        except Exception as e:
            self.notify(Notification.error(
                GenerationError.title,
                str(e) or GenerationError.default_message,
            ))
            return None
        finally:
            self.status = ShellStatus.IDLE

        self.document = document
        return document

    def regenerate(self) -> Optional[GeneratedDocument]:
        """Re-send the identical current prompt."""
        return self.generate()

    def clear(self):
        if self.is_generating:
            return
        self.document = None

    def save(self) -> Optional[SaveArtifact]:
        """
        Package the current document for download.

        Returns:
            SaveArtifact, or None (with a notification) when there is nothing to save.
        """
        if not self.can_save:
            self.notify(Notification.error(
                "No Code to Save",
                "Please generate an app preview first.",
            ))
            return None
        return build_save_artifact(self.document)

    def confirm_saved(self):
        """Queue the confirmation shown once the download has been handed over."""
        self.notify(Notification.success(
            "HTML Saved",
            "The generated HTML preview has been downloaded.",
        ))

    # --- dictation ------------------------------------------------------

    @property
    def dictation_available(self) -> bool:
        return self.recognizer.available

    @property
    def dictation_note(self) -> Optional[str]:
        """Explanation shown next to the disabled voice control."""
        if self.dictation_available:
            return None
        return self.recognizer.unavailable_reason or "Voice input may not be supported in this environment."

    @property
    def is_listening(self) -> bool:
        return self.dictation_status == DictationStatus.LISTENING

    def start_dictation(self) -> bool:
        if not self.dictation_available:
            error = DictationUnavailableError(self.dictation_note)
            self.notify(Notification.error(error.title, error.description))
            return False
        self.dictation_status = DictationStatus.LISTENING
        return True

    def stop_dictation(self):
        self.dictation_status = DictationStatus.IDLE

    def toggle_dictation(self, audio: Optional[bytes] = None) -> Optional[str]:
        """
        Start listening when idle; when listening, stop and transcribe `audio` if given.

        Returns:
            The recognized transcript, if one was appended.
        """
        if not self.is_listening:
            self.start_dictation()
            return None
        if audio is None:
            self.stop_dictation()
            return None
        return self.finish_dictation(audio)

    def accept_transcript(self, transcript: str) -> str:
        """
        Append a recognized transcript to the prompt, space-joined.

        Returns:
            The updated prompt.
        """
        transcript = transcript.strip()
        if transcript:
            self.prompt = f"{self.prompt} {transcript}" if self.prompt else transcript
        return self.prompt

    def finish_dictation(self, audio: bytes, filename: str = "dictation.wav") -> Optional[str]:
        """
        Transcribe one utterance and append it to the prompt.

        Returns:
            The transcript, or None on failure (a notification is queued).
        """
        try:
            transcript = self.recognizer.transcribe(audio, filename=filename)
        except DictationError as e:
            self.notify(Notification.error(e.title, e.description))
            return None
        except Exception as e:
            self.notify(Notification.error(
                DictationError.title,
                str(e) or DictationError.default_message,
            ))
            return None
        finally:
            self.dictation_status = DictationStatus.IDLE

        self.accept_transcript(transcript)
        return transcript
