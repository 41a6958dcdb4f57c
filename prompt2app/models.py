"""
Data models and schemas for the prompt-to-app generation pipeline.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field


SAVE_FILE_NAME = "prompt2app_preview.html"
SAVE_MIME_TYPE = "text/html"


class GenerateAppInput(BaseModel):
    """Gateway request."""
    prompt: str = Field(description="A natural language description of the desired web app.")


class GenerateAppOutput(BaseModel):
    """Structured output returned by the model."""
    code: str = Field(description="The generated HTML code for the app preview.")


def new_document_id() -> str:
    return f"app_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:6]}"


class GeneratedDocument(BaseModel):
    """A generated HTML document and where it came from."""
    document_id: str = Field(default_factory=new_document_id)
    prompt: str
    code: str
    title: Optional[str] = None
    generation_timestamp: datetime = Field(default_factory=datetime.now)
    model_name: str
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    generation_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def total_tokens(self) -> Optional[int]:
        if self.prompt_tokens is None or self.completion_tokens is None:
            return None
        return self.prompt_tokens + self.completion_tokens


class ShellStatus(str, Enum):
    """Externally meaningful states of the interactive shell."""
    IDLE = "idle"
    GENERATING = "generating"


class DictationStatus(str, Enum):
    """Dictation toggle state."""
    IDLE = "idle"
    LISTENING = "listening"


class NotificationLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """A single user-facing message."""
    level: NotificationLevel
    title: str
    description: str = ""

    @classmethod
    def error(cls, title: str, description: str = "") -> "Notification":
        return cls(level=NotificationLevel.ERROR, title=title, description=description)

    @classmethod
    def success(cls, title: str, description: str = "") -> "Notification":
        return cls(level=NotificationLevel.SUCCESS, title=title, description=description)

    @classmethod
    def info(cls, title: str, description: str = "") -> "Notification":
        return cls(level=NotificationLevel.INFO, title=title, description=description)


class SaveArtifact(BaseModel):
    """A document offered for download."""
    file_name: str = SAVE_FILE_NAME
    mime: str = SAVE_MIME_TYPE
    data: str
