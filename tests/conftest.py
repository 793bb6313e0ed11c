from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from creator_proxy.core.abc import AbstractLLMClient
from creator_proxy.core.model_id import ModelRef
from creator_proxy.core.types import GenerationOptions, ProviderOutcome
from creator_proxy.registry.provider_registry import provider_registry


class ScriptedClient(AbstractLLMClient):
    """Fake adapter answering from its factory's script."""

    def __init__(self, ref: ModelRef, factory: ScriptedFactory) -> None:
        super().__init__(ref.model)
        self.provider = ref.provider  # type: ignore[misc]
        self._ref = ref
        self._factory = factory

    def _invoke(self, prompt: str, options: GenerationOptions) -> ProviderOutcome:
        self._factory.calls.append((self._ref, prompt, options))
        reply = self._factory.responses[self._ref.model]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return ProviderOutcome(
                success=bool(reply),
                content=reply,
                tokens_input=self._factory.tokens_input,
                tokens_output=self._factory.tokens_output,
                cost_usd=self._factory.cost_usd,
            )
        return reply


class ScriptedFactory:
    """ClientFactory whose clients reply per model id and record every call.

    A reply is either the content string (empty string = failed call), a
    full ProviderOutcome, or an exception to raise.
    """

    def __init__(
        self,
        responses: dict[str, Any],
        *,
        tokens_input: int = 100,
        tokens_output: int = 50,
        cost_usd: float = 0.01,
    ) -> None:
        self.responses = responses
        self.tokens_input = tokens_input
        self.tokens_output = tokens_output
        self.cost_usd = cost_usd
        self.calls: list[tuple[ModelRef, str, GenerationOptions]] = []

    def __call__(self, ref: ModelRef) -> AbstractLLMClient:
        return ScriptedClient(ref, self)

    def calls_for(self, model_id: str) -> list[tuple[ModelRef, str, GenerationOptions]]:
        return [call for call in self.calls if call[0].model == model_id]


@pytest.fixture
def make_factory() -> Callable[..., ScriptedFactory]:
    return ScriptedFactory


@pytest.fixture
def isolated_registry(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Let a test register adapters without leaking them into other tests."""
    monkeypatch.setattr(provider_registry, '_registry', dict(provider_registry.mapping()))
    yield
