from __future__ import annotations

import pytest

from creator_proxy.core.config import CreatorSettings
from creator_proxy.core.exceptions import InvalidRequestError
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.core.types import Attachment, GenerationRequest, ModelRequest
from creator_proxy.services import bootstrap
from creator_proxy.services.model_service import ModelService
from creator_proxy.services.tier_chain import TierChainService


@pytest.fixture
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, str, list[str]]]:
    calls: list[tuple[str, str, list[str]]] = []
    monkeypatch.setattr(
        bootstrap, 'configure_logging', lambda level, fmt, *, secrets: calls.append((level, fmt, secrets))
    )
    return calls


def test_build_services(no_logging_setup: list[tuple[str, str, list[str]]]) -> None:
    settings = CreatorSettings(
        gemini_api_key='g-key', claude_api_key='c-key', log_level='DEBUG', log_format='console'
    )

    assert isinstance(bootstrap.build_model_service(settings), ModelService)
    assert isinstance(bootstrap.build_tier_chain_service(settings), TierChainService)
    assert no_logging_setup == [('DEBUG', 'console', ['g-key', 'c-key'])] * 2


def test_tier_chain_service_gets_chain_timeout(no_logging_setup: list[tuple[str, str, list[str]]]) -> None:  # noqa: ARG001
    settings = CreatorSettings(gemini_api_key='g', claude_api_key='c', chain_timeout_seconds=45)
    service = bootstrap.build_tier_chain_service(settings)
    assert service._chain_timeout_seconds == 45  # noqa: SLF001, PLR2004


def test_build_request_sanitizes() -> None:
    request = bootstrap.build_request('Build it <script>x()</script>', context={'site': 'demo'})
    assert type(request) is GenerationRequest
    assert request.prompt == 'Build it'
    assert request.context == {'site': 'demo'}


def test_build_request_for_model_service() -> None:
    request = bootstrap.build_request('hello', model='claude', temperature=0.2)
    assert isinstance(request, ModelRequest)
    assert request.model is ModelIdentity.claude


def test_build_request_allows_files_without_prompt() -> None:
    image = Attachment(name='a.png', mime_type='image/png', base64_data='AA==')
    request = bootstrap.build_request('', attached_files=[image])
    assert request.attached_files == [image]


@pytest.mark.parametrize(
    ('prompt', 'kwargs'),
    [
        ('', {}),
        ('x' * 20, {'max_length': 10}),
        ('<script>only()</script>', {}),
        ('hello', {'temperature': 5}),
        ('hello', {'model': 'openai'}),
    ],
)
def test_build_request_rejects_bad_input(prompt: str, kwargs: dict[str, object]) -> None:
    with pytest.raises(InvalidRequestError):
        bootstrap.build_request(prompt, **kwargs)  # type: ignore[arg-type]
