"""
Runtime configuration read from the environment (and a local .env file).
"""

import os
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from napkin2web.errors import ConfigurationError


# Tried in order for every task; the first model that answers wins.
DEFAULT_CANDIDATES: Dict[str, List[str]] = {
    "gemini": [
        "gemini-2.0-flash-exp",
        "gemini-flash-latest",
        "gemini-2.0-flash",
    ],
    "openai": [
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
    ],
    "anthropic": [
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
}

API_KEY_ENV: Dict[str, str] = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

RATE_LIMIT_BACKOFF_SECONDS = 3.0


def _env_number(name: str, default: str, cast: Callable[[str], Any]) -> Any:
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}")


class Settings(BaseModel):
    """Service settings."""
    provider: str = "gemini"
    candidate_models: List[str] = Field(default_factory=lambda: list(DEFAULT_CANDIDATES["gemini"]))
    api_key: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 8192
    rate_limit_backoff: float = RATE_LIMIT_BACKOFF_SECONDS
    api_url: str = "http://localhost:8000"
    http_timeout: float = 120.0

    @property
    def api_key_env(self) -> str:
        return API_KEY_ENV[self.provider]

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Reads NAPKIN_PROVIDER, NAPKIN_MODELS, NAPKIN_TEMPERATURE,
        NAPKIN_MAX_TOKENS, NAPKIN_RATE_LIMIT_BACKOFF, NAPKIN_API_URL,
        NAPKIN_HTTP_TIMEOUT and the provider's API key variable.

        Returns:
            Settings object.
        """
        load_dotenv()

        provider = os.getenv("NAPKIN_PROVIDER", "gemini").lower()
        if provider not in DEFAULT_CANDIDATES:
            raise ConfigurationError(f"Unsupported provider: {provider}")

        models_env = os.getenv("NAPKIN_MODELS", "")
        candidates = [m.strip() for m in models_env.split(",") if m.strip()]

        return cls(
            provider=provider,
            candidate_models=candidates or list(DEFAULT_CANDIDATES[provider]),
            api_key=os.getenv(API_KEY_ENV[provider]) or None,
            temperature=_env_number("NAPKIN_TEMPERATURE", "0.3", float),
            max_tokens=_env_number("NAPKIN_MAX_TOKENS", "8192", int),
            rate_limit_backoff=_env_number(
                "NAPKIN_RATE_LIMIT_BACKOFF", str(RATE_LIMIT_BACKOFF_SECONDS), float
            ),
            api_url=os.getenv("NAPKIN_API_URL", "http://localhost:8000"),
            http_timeout=_env_number("NAPKIN_HTTP_TIMEOUT", "120", float),
        )

    def require_api_key(self) -> str:
        """Return the provider API key or fail with a configuration error."""
        if not self.api_key:
            raise ConfigurationError(f"{self.api_key_env} is not configured")
        return self.api_key
