"""
Runtime configuration read from the environment (and `.env`).
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-3-5-sonnet-latest",
}


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


class Settings(BaseModel):
    """Application settings."""
    provider: str = "openai"
    model_name: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 8192
    request_timeout: Optional[float] = None  # None waits for the model indefinitely
    output_dir: Path = Path("outputs")

    dictation_provider: str = "openai"
    dictation_model: str = "whisper-1"
    dictation_language: Optional[str] = "en"

    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    @property
    def resolved_model(self) -> str:
        return self.model_name or DEFAULT_MODELS.get(self.provider, "")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Returns:
            Settings populated from APPGEN_*, DICTATION_* and provider API key variables.
        """
        load_dotenv()

        return cls(
            provider=os.getenv("APPGEN_PROVIDER", "openai").lower(),
            model_name=os.getenv("APPGEN_MODEL") or None,
            temperature=_env_float("APPGEN_TEMPERATURE", 0.7),
            max_tokens=_env_int("APPGEN_MAX_TOKENS", 8192),
            request_timeout=_env_float("APPGEN_REQUEST_TIMEOUT", None),
            output_dir=Path(os.getenv("APPGEN_OUTPUT_DIR", "outputs")),
            dictation_provider=os.getenv("DICTATION_PROVIDER", "openai").lower(),
            dictation_model=os.getenv("DICTATION_MODEL", "whisper-1"),
            dictation_language=os.getenv("DICTATION_LANGUAGE", "en") or None,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        )
