import pytest

from creator_proxy.core.abc import AbstractLLMClient
from creator_proxy.core.exceptions import ProviderNotFoundError
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.core.types import GenerationOptions, ProviderOutcome
from creator_proxy.registry.provider_registry import ProviderRegistry


class DummyAdapter(AbstractLLMClient):
    provider = ModelIdentity.gemini

    def _invoke(self, prompt: str, options: GenerationOptions) -> ProviderOutcome:  # noqa: ARG002
        return ProviderOutcome(success=True, content='dummy')


@pytest.mark.usefixtures('isolated_registry')
def test_register_and_fetch() -> None:
    reg = ProviderRegistry()
    reg.register(ModelIdentity.gemini, DummyAdapter)
    assert ModelIdentity.gemini in reg.available_providers()
    assert reg.get_adapter_cls(ModelIdentity.gemini) is DummyAdapter
    assert reg.mapping()[ModelIdentity.gemini] is DummyAdapter


def test_registry_is_a_singleton() -> None:
    assert ProviderRegistry() is ProviderRegistry()


@pytest.mark.usefixtures('isolated_registry')
def test_register_type_validation() -> None:
    reg = ProviderRegistry()
    with pytest.raises(TypeError):
        reg.register(ModelIdentity.claude, object)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        reg.register('gemini', DummyAdapter)  # type: ignore[arg-type]


@pytest.mark.usefixtures('isolated_registry')
def test_unknown_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    reg = ProviderRegistry()
    monkeypatch.setattr(reg, '_registry', {})
    with pytest.raises(ProviderNotFoundError):
        reg.get_adapter_cls(ModelIdentity.claude)
