"""registry.provider_registry

Global registry that maps each `ModelIdentity` to its concrete adapter class
(a subclass of AbstractLLMClient).

Keys are members of the closed `ModelIdentity` enum; raw strings are
rejected so that supporting a new provider is always an explicit change to
the enum rather than a new free-form key.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

from creator_proxy.core.exceptions import ProviderNotFoundError
from creator_proxy.core.model_id import ModelIdentity

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

    from creator_proxy.core.abc import AbstractLLMClient

ClientT = TypeVar('ClientT', bound='AbstractLLMClient')


class _ThreadSafeSingleton(type):
    """Metaclass ensuring a single registry instance across threads."""

    _instance: ProviderRegistry | None = None
    _lock = threading.Lock()

    def __call__(cls, *args: object, **kwargs: object) -> ProviderRegistry:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ProviderRegistry(Generic[ClientT], metaclass=_ThreadSafeSingleton):
    """Centralised look-up and registration for provider → adapter mappings.

    Usage (inside adapter modules):

    ```python
    from creator_proxy.registry.provider_registry import provider_registry

    class GeminiAdapter(OpenAICompatibleAdapter):
        provider = ModelIdentity.gemini

    provider_registry.register(ModelIdentity.gemini, GeminiAdapter)
    ```
    """

    _registry: MutableMapping[ModelIdentity, type[ClientT]]

    def __init__(self) -> None:  # pragma: no cover - called once via singleton
        self._registry = {}

    def register(self, provider: ModelIdentity, adapter_cls: type[ClientT]) -> None:
        """Register adapter_cls for provider.

        Raises
        ------
        TypeError
            If provider is not a `ModelIdentity` or adapter_cls does not
            subclass AbstractLLMClient.

        """
        from creator_proxy.core.abc import AbstractLLMClient  # local import avoids cycles

        if not isinstance(provider, ModelIdentity):
            raise TypeError('provider must be a ModelIdentity')
        if not isinstance(adapter_cls, type) or not issubclass(adapter_cls, AbstractLLMClient):
            raise TypeError('adapter_cls must subclass AbstractLLMClient')
        with _ThreadSafeSingleton._lock:
            self._registry[provider] = adapter_cls

    def get_adapter_cls(self, provider: ModelIdentity) -> type[ClientT]:
        """Return the adapter class registered for provider.

        Raises
        ------
        ProviderNotFoundError
            If no adapter has been registered for provider.

        """
        try:
            return self._registry[provider]
        except KeyError as exc:
            raise ProviderNotFoundError(f'No adapter registered for provider: {provider}') from exc

    def available_providers(self) -> list[ModelIdentity]:
        """Return the registered providers, sorted by name."""
        return sorted(self._registry)

    def mapping(self) -> Mapping[ModelIdentity, type[ClientT]]:
        """Return a read-only copy of the provider registry mapping."""
        return dict(self._registry)


provider_registry: ProviderRegistry = ProviderRegistry()
