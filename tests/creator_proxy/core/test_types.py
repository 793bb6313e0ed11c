from __future__ import annotations

import pydantic
import pytest

from creator_proxy.core.exceptions import ErrorCode
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.core.types import (
    Attachment,
    GenerationRequest,
    Message,
    ModelRequest,
    ModelServiceResponse,
    ProviderOutcome,
    Role,
)

_PNG = Attachment(name='shot.png', mime_type='image/png', base64_data='aGVsbG8=')


def test_prompt_required_without_files() -> None:
    with pytest.raises(pydantic.ValidationError):
        GenerationRequest(prompt='   ')


def test_empty_prompt_allowed_with_files() -> None:
    request = GenerationRequest(prompt='', attached_files=[_PNG])
    assert request.attached_files[0].is_image


@pytest.mark.parametrize('temperature', [-0.1, 2.1])
def test_temperature_range(temperature: float) -> None:
    with pytest.raises(pydantic.ValidationError):
        GenerationRequest(prompt='hi', temperature=temperature)


def test_to_options_prefers_explicit_system_prompt() -> None:
    request = GenerationRequest(
        prompt='hi',
        system_prompt='caller',
        temperature=0.2,
        max_tokens=10,
        conversation_history=[Message(role=Role.user, content='earlier')],
        attached_files=[_PNG],
    )
    assert request.to_options().system_prompt == 'caller'
    options = request.to_options(system_prompt='override')
    assert options.system_prompt == 'override'
    assert options.temperature == 0.2  # noqa: PLR2004
    assert options.max_tokens == 10  # noqa: PLR2004
    assert options.conversation_history[0].content == 'earlier'
    assert options.files == [_PNG]


def test_model_request_defaults_to_gemini() -> None:
    assert ModelRequest(prompt='hi').model is ModelIdentity.gemini
    assert ModelRequest(prompt='hi', model='claude').model is ModelIdentity.claude


def test_outcome_helpers() -> None:
    outcome = ProviderOutcome(success=True, content='x', tokens_input=3, tokens_output=4)
    assert outcome.total_tokens == 7  # noqa: PLR2004

    failed = ProviderOutcome.failure('boom', ErrorCode.PROVIDER_ERROR, latency_ms=12)
    assert not failed.success
    assert failed.content == ''
    assert failed.error_code is ErrorCode.PROVIDER_ERROR


def test_outcomes_are_immutable() -> None:
    response = ModelServiceResponse(success=True, content='x', model=ModelIdentity.claude, model_id='m')
    with pytest.raises(pydantic.ValidationError):
        response.content = 'y'  # type: ignore[misc]
