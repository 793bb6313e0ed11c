from __future__ import annotations

import pytest

from creator_proxy.core.config import ANTHROPIC_OPENAI_BASE_URL, GEMINI_OPENAI_BASE_URL, CreatorSettings
from creator_proxy.core.exceptions import ConfigurationError
from creator_proxy.core.model_id import ModelIdentity

_ENV_VARS = (
    'GEMINI_API_KEY',
    'ANTHROPIC_API_KEY',
    'GEMINI_BASE_URL',
    'ANTHROPIC_BASE_URL',
    'CREATOR_PROVIDER_TIMEOUT_SECONDS',
    'CREATOR_PROVIDER_MAX_ATTEMPTS',
    'CREATOR_CHAIN_TIMEOUT_SECONDS',
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:  # noqa: ARG001
    settings = CreatorSettings()
    assert settings.gemini_base_url == GEMINI_OPENAI_BASE_URL
    assert settings.claude_base_url == ANTHROPIC_OPENAI_BASE_URL
    assert settings.provider_max_attempts == 1
    assert settings.chain_timeout_seconds is None
    assert settings.secrets() == []


def test_reads_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv('GEMINI_API_KEY', 'g-key')
    clean_env.setenv('ANTHROPIC_API_KEY', 'c-key')
    clean_env.setenv('CREATOR_CHAIN_TIMEOUT_SECONDS', '90')
    clean_env.setenv('CREATOR_PROVIDER_MAX_ATTEMPTS', '3')

    settings = CreatorSettings()
    assert settings.api_key_for(ModelIdentity.gemini) == 'g-key'
    assert settings.api_key_for(ModelIdentity.claude) == 'c-key'
    assert settings.chain_timeout_seconds == 90  # noqa: PLR2004
    assert settings.retry_strategy().max_attempts == 3  # noqa: PLR2004
    assert sorted(settings.secrets()) == ['c-key', 'g-key']


def test_missing_key_raises(clean_env: pytest.MonkeyPatch) -> None:  # noqa: ARG001
    settings = CreatorSettings(gemini_api_key='g-key')
    with pytest.raises(ConfigurationError, match='claude'):
        settings.api_key_for(ModelIdentity.claude)


def test_base_url_per_provider() -> None:
    settings = CreatorSettings(gemini_base_url='http://gemini.local/', claude_base_url='http://claude.local/')
    assert settings.base_url_for(ModelIdentity.gemini) == 'http://gemini.local/'
    assert settings.base_url_for(ModelIdentity.claude) == 'http://claude.local/'
