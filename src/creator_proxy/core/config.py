"""core.config

Runtime settings read from the environment (optionally via a local ``.env``).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from creator_proxy.core.exceptions import ConfigurationError
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.core.retry import RetryStrategy

GEMINI_OPENAI_BASE_URL = 'https://generativelanguage.googleapis.com/v1beta/openai/'
ANTHROPIC_OPENAI_BASE_URL = 'https://api.anthropic.com/v1/'


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


class CreatorSettings(BaseModel):
    # Provider credentials
    gemini_api_key: str | None = Field(default_factory=lambda: os.getenv('GEMINI_API_KEY'))
    claude_api_key: str | None = Field(default_factory=lambda: os.getenv('ANTHROPIC_API_KEY'))

    # Provider endpoints (OpenAI-compatible)
    gemini_base_url: str = Field(default_factory=lambda: os.getenv('GEMINI_BASE_URL', GEMINI_OPENAI_BASE_URL))
    claude_base_url: str = Field(default_factory=lambda: os.getenv('ANTHROPIC_BASE_URL', ANTHROPIC_OPENAI_BASE_URL))

    # Provider call behaviour
    provider_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv('CREATOR_PROVIDER_TIMEOUT_SECONDS', '120')), gt=0.0
    )
    provider_max_attempts: int = Field(
        default_factory=lambda: int(os.getenv('CREATOR_PROVIDER_MAX_ATTEMPTS', '1')), ge=1
    )

    # Chain behaviour; None means no overall deadline
    chain_timeout_seconds: float | None = Field(
        default_factory=lambda: _optional_float(os.getenv('CREATOR_CHAIN_TIMEOUT_SECONDS')), gt=0.0
    )

    # Observability
    log_level: str = Field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))
    log_format: str = Field(default_factory=lambda: os.getenv('LOG_FORMAT', 'json'))

    def api_key_for(self, provider: ModelIdentity) -> str:
        """Return the API key for *provider* or raise `ConfigurationError`."""
        key = self.gemini_api_key if provider is ModelIdentity.gemini else self.claude_api_key
        if not key:
            raise ConfigurationError(f'No API key configured for provider: {provider}')
        return key

    def base_url_for(self, provider: ModelIdentity) -> str:
        return self.gemini_base_url if provider is ModelIdentity.gemini else self.claude_base_url

    def retry_strategy(self) -> RetryStrategy:
        return RetryStrategy(max_attempts=self.provider_max_attempts)

    def secrets(self) -> list[str]:
        """Values that must never appear in logs."""
        return [key for key in (self.gemini_api_key, self.claude_api_key) if key]


def load_settings() -> CreatorSettings:
    """Load ``.env`` (if present) into the environment and build settings."""
    load_dotenv()
    return CreatorSettings()
