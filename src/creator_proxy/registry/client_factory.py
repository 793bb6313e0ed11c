"""registry.client_factory

Factory responsible for converting a ModelRef (or raw string) into a fully
initialized adapter instance (subclass of AbstractLLMClient).

Services never build adapters themselves: they receive a `ClientFactory`
callable at construction, which tests replace with one returning fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

from creator_proxy.core.model_id import ModelRef, parse_model_ref
from creator_proxy.registry.provider_registry import provider_registry

if TYPE_CHECKING:
    from collections.abc import Callable

    from creator_proxy.core.abc import AbstractLLMClient
    from creator_proxy.core.config import CreatorSettings

ClientFactory: TypeAlias = 'Callable[[ModelRef], AbstractLLMClient]'


class LLMClientFactory:
    """Factory for creating provider-specific LLM clients.

    This class is stateless; all information resides in provider_registry.
    """

    @staticmethod
    def initialize_client(model: str | ModelRef, **adapter_kwargs: Any) -> AbstractLLMClient:
        """Return a concrete adapter for model.

        Parameters
        ----------
        model
            Either a raw string ("provider:model") or a pre-parsed
            ModelRef instance.
        **adapter_kwargs
            Keyword arguments forwarded to the adapter's constructor
            (API key, base URL, timeout, retry strategy, ...).

        """
        ref = parse_model_ref(model) if isinstance(model, str) else model
        adapter_class = provider_registry.get_adapter_cls(ref.provider)
        return adapter_class(model=ref.model, **adapter_kwargs)


def settings_client_factory(settings: CreatorSettings) -> ClientFactory:
    """Build a `ClientFactory` that configures adapters from *settings*.

    Importing the bundled adapters registers them with provider_registry.
    A missing API key surfaces as `ConfigurationError` when the client for
    that provider is first requested.
    """
    import creator_proxy.adapters.claude_adapter  # noqa: F401
    import creator_proxy.adapters.gemini_adapter  # noqa: F401

    def _factory(ref: ModelRef) -> AbstractLLMClient:
        return LLMClientFactory.initialize_client(
            ref,
            api_key=settings.api_key_for(ref.provider),
            base_url=settings.base_url_for(ref.provider),
            timeout_seconds=settings.provider_timeout_seconds,
            retry_strategy=settings.retry_strategy(),
        )

    return _factory
