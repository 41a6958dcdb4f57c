"""
Tests for environment-driven settings.
"""

from pathlib import Path

import pytest

from prompt2app.config import Settings

ENV_VARS = [
    "APPGEN_PROVIDER", "APPGEN_MODEL", "APPGEN_TEMPERATURE", "APPGEN_MAX_TOKENS",
    "APPGEN_REQUEST_TIMEOUT", "APPGEN_OUTPUT_DIR", "DICTATION_PROVIDER",
    "DICTATION_MODEL", "DICTATION_LANGUAGE", "OPENAI_API_KEY", "ANTHROPIC_API_KEY",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()
    assert settings.provider == "openai"
    assert settings.resolved_model == "gpt-4o"
    assert settings.temperature == 0.7
    assert settings.max_tokens == 8192
    assert settings.request_timeout is None
    assert settings.output_dir == Path("outputs")
    assert settings.dictation_provider == "openai"
    assert settings.dictation_language == "en"


def test_overrides(clean_env):
    clean_env.setenv("APPGEN_PROVIDER", "Anthropic")
    clean_env.setenv("APPGEN_TEMPERATURE", "0.2")
    clean_env.setenv("APPGEN_MAX_TOKENS", "4096")
    clean_env.setenv("APPGEN_REQUEST_TIMEOUT", "90")
    clean_env.setenv("APPGEN_OUTPUT_DIR", "build/apps")
    clean_env.setenv("DICTATION_PROVIDER", "none")
    clean_env.setenv("ANTHROPIC_API_KEY", "ak-test")

    settings = Settings.from_env()

    assert settings.provider == "anthropic"
    assert settings.resolved_model == "claude-3-5-sonnet-latest"
    assert settings.temperature == 0.2
    assert settings.max_tokens == 4096
    assert settings.request_timeout == 90.0
    assert settings.output_dir == Path("build/apps")
    assert settings.dictation_provider == "none"
    assert settings.anthropic_api_key == "ak-test"


@pytest.mark.parametrize("name,value", [
    ("APPGEN_TEMPERATURE", "warm"),
    ("APPGEN_MAX_TOKENS", "lots"),
    ("APPGEN_REQUEST_TIMEOUT", "soon"),
])
def test_invalid_numbers_name_the_variable(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        Settings.from_env()
