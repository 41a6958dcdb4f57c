"""
Error types raised by the generation gateway and dictation capability.

Each error carries the title the interactive shell shows the user.
"""


class Prompt2AppError(Exception):
    """Base class for all user-facing failures."""

    title = "Something went wrong"
    default_message = "An unexpected error occurred. Please try again."

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def description(self) -> str:
        return str(self)


class EmptyPromptError(Prompt2AppError):
    title = "Prompt is empty"
    default_message = "Please enter a description for your app."


class GenerationError(Prompt2AppError):
    title = "App Generation Failed"
    default_message = "An unexpected error occurred. Please try again."


class DictationError(Prompt2AppError):
    title = "Voice Input Error"
    default_message = "An error occurred with voice input."


class DictationUnavailableError(DictationError):
    title = "Voice Input Not Supported"
    default_message = "Voice input is not available in this environment."
