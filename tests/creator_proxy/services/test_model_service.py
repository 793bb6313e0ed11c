from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from structlog.testing import capture_logs

from creator_proxy.core.exceptions import ErrorCode, RateLimitExceededError
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.core.types import ModelRequest, ProviderOutcome
from creator_proxy.services.model_service import ModelService

GEMINI = ModelIdentity.gemini.model_id
CLAUDE = ModelIdentity.claude.model_id


def _service(factory: Any) -> ModelService:
    return ModelService(factory, default_system_prompt='DEFAULT')


def test_primary_success_skips_fallback(make_factory: Callable[..., Any]) -> None:
    factory = make_factory({GEMINI: 'from gemini', CLAUDE: 'from claude'})

    response = _service(factory).generate(ModelRequest(prompt='hi', model=ModelIdentity.gemini))

    assert response.success
    assert response.content == 'from gemini'
    assert response.model is ModelIdentity.gemini
    assert response.model_id == GEMINI
    assert not response.used_fallback
    assert response.tokens_input == 100  # noqa: PLR2004
    assert len(factory.calls) == 1


def test_fallback_content_replaces_failed_primary(make_factory: Callable[..., Any]) -> None:
    factory = make_factory(
        {
            CLAUDE: ProviderOutcome(success=False, content='partial junk', error='overloaded'),
            GEMINI: 'from gemini',
        }
    )

    response = _service(factory).generate(ModelRequest(prompt='hi', model=ModelIdentity.claude))

    assert response.success
    assert response.used_fallback
    assert response.content == 'from gemini'
    assert response.model is ModelIdentity.gemini
    assert [call[0].model for call in factory.calls] == [CLAUDE, GEMINI]


def test_both_fail(make_factory: Callable[..., Any]) -> None:
    factory = make_factory(
        {
            GEMINI: ProviderOutcome.failure('gemini quota', ErrorCode.RATE_LIMITED),
            CLAUDE: RateLimitExceededError('claude quota'),
        }
    )

    with capture_logs() as logs:
        response = _service(factory).generate(ModelRequest(prompt='hi', model=ModelIdentity.gemini))

    assert not response.success
    assert response.content == ''
    assert response.used_fallback
    assert response.model is ModelIdentity.gemini
    assert response.error_code is ErrorCode.ALL_MODELS_FAILED
    assert response.error == 'Both models failed. Primary: gemini quota. Fallback: claude quota'
    assert response.total_tokens == 0
    assert [log['event'] for log in logs if log['event'] != 'provider_call_failed'] == [
        'model_generation_started',
        'primary_model_failed_trying_fallback',
        'all_models_failed',
    ]


def test_failure_without_message_gets_placeholder(make_factory: Callable[..., Any]) -> None:
    factory = make_factory({GEMINI: '', CLAUDE: ''})
    response = _service(factory).generate(ModelRequest(prompt='hi'))
    assert response.error == 'Both models failed. Primary: Unknown error. Fallback: Unknown error'


def test_raising_client_counts_as_failure(make_factory: Callable[..., Any]) -> None:
    factory = make_factory({GEMINI: RuntimeError('socket closed'), CLAUDE: 'from claude'})

    response = _service(factory).generate(ModelRequest(prompt='hi', model=ModelIdentity.gemini))

    assert response.success
    assert response.used_fallback
    assert response.content == 'from claude'


def test_factory_errors_count_as_failure() -> None:
    def _factory(ref: Any) -> Any:
        raise RuntimeError(f'no client for {ref.provider}')

    response = _service(_factory).generate(ModelRequest(prompt='hi', model=ModelIdentity.claude))

    assert response.error_code is ErrorCode.ALL_MODELS_FAILED
    assert 'no client for claude' in response.error
    assert 'no client for gemini' in response.error


def test_default_system_prompt_is_substituted(make_factory: Callable[..., Any]) -> None:
    factory = make_factory({GEMINI: ''})
    factory.responses[CLAUDE] = 'ok'

    _service(factory).generate(ModelRequest(prompt='hi', temperature=0.1, max_tokens=42))

    # Both attempts get identical options
    (_, _, primary_opts), (_, _, fallback_opts) = factory.calls
    assert primary_opts.system_prompt == 'DEFAULT'
    assert primary_opts == fallback_opts
    assert primary_opts.temperature == 0.1  # noqa: PLR2004
    assert primary_opts.max_tokens == 42  # noqa: PLR2004


def test_caller_system_prompt_wins(make_factory: Callable[..., Any]) -> None:
    factory = make_factory({GEMINI: 'ok'})
    _service(factory).generate(ModelRequest(prompt='hi', system_prompt='CUSTOM'))
    assert factory.calls[0][2].system_prompt == 'CUSTOM'


def test_default_system_prompt_required() -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        ModelService(lambda ref: ref, default_system_prompt='')  # type: ignore[arg-type, return-value]
