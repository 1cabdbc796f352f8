"""
Tests for settings loading.
"""

import pytest

from napkin2web.config import DEFAULT_CANDIDATES, Settings
from napkin2web.errors import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "NAPKIN_PROVIDER",
        "NAPKIN_MODELS",
        "NAPKIN_TEMPERATURE",
        "NAPKIN_MAX_TOKENS",
        "NAPKIN_RATE_LIMIT_BACKOFF",
        "NAPKIN_API_URL",
        "NAPKIN_HTTP_TIMEOUT",
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep a local .env file from leaking into the tests
    monkeypatch.setattr("napkin2web.config.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()

    assert settings.provider == "gemini"
    assert settings.candidate_models == DEFAULT_CANDIDATES["gemini"]
    assert settings.temperature == 0.3
    assert settings.max_tokens == 8192
    assert settings.rate_limit_backoff == 3.0
    assert settings.api_url == "http://localhost:8000"
    assert settings.api_key is None


def test_overrides(clean_env):
    clean_env.setenv("NAPKIN_PROVIDER", "Anthropic")
    clean_env.setenv("NAPKIN_MODELS", "claude-a, claude-b,")
    clean_env.setenv("NAPKIN_RATE_LIMIT_BACKOFF", "0.5")
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-test")

    settings = Settings.from_env()

    assert settings.provider == "anthropic"
    assert settings.candidate_models == ["claude-a", "claude-b"]
    assert settings.rate_limit_backoff == 0.5
    assert settings.require_api_key() == "sk-test"


def test_unsupported_provider(clean_env):
    clean_env.setenv("NAPKIN_PROVIDER", "mystery")

    with pytest.raises(ConfigurationError, match="Unsupported provider"):
        Settings.from_env()


def test_missing_key(clean_env):
    settings = Settings.from_env()

    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY is not configured"):
        settings.require_api_key()


@pytest.mark.parametrize("name, value", [
    ("NAPKIN_TEMPERATURE", "warm"),
    ("NAPKIN_MAX_TOKENS", "8k"),
    ("NAPKIN_RATE_LIMIT_BACKOFF", "soon"),
    ("NAPKIN_HTTP_TIMEOUT", ""),
])
def test_invalid_number(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError, match=f"Invalid value for {name}"):
        Settings.from_env()
