"""core.abc

Abstract base class that *all* provider adapters must implement.

Design goals
============
1. **Uniform capability** - callers interact exclusively via
    `generate(prompt, options)` and always get a `ProviderOutcome` back.
    They never touch provider-specific payloads.
2. **Errors become outcomes** - domain errors raised by an adapter are turned
    into ``success=False`` outcomes carrying the error's code. Anything else
    (bugs, unexpected exceptions) propagates to the caller.
3. **Optional retry** - `_invoke()` runs under `with_retry()` using the
    adapter's strategy.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import structlog

from creator_proxy.core.exceptions import CreatorProxyError
from creator_proxy.core.retry import RetryStrategy, with_retry
from creator_proxy.core.types import ProviderOutcome

if TYPE_CHECKING:
    from creator_proxy.core.model_id import ModelIdentity
    from creator_proxy.core.types import GenerationOptions

log = structlog.get_logger()


class AbstractLLMClient(ABC):
    """Provider-independent LLM client interface."""

    #: Which supported provider the adapter talks to.
    provider: ClassVar[ModelIdentity]

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------

    def __init__(
        self,
        model: str,
        *,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        """Store *model* name and optional retry strategy."""
        self._model: str = model
        self._retry_strategy: RetryStrategy = retry_strategy or RetryStrategy()

    @property
    def model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, prompt: str, options: GenerationOptions) -> ProviderOutcome:
        """Run one generation and report it as a `ProviderOutcome`.

        Subclasses **must not** override this - override `_invoke()` instead.
        """
        started = time.monotonic()

        @with_retry(self._retry_strategy)
        def _call() -> ProviderOutcome:
            return self._invoke(prompt, options)

        try:
            outcome = _call()
        except CreatorProxyError as exc:
            latency_ms = _elapsed_ms(started)
            log.warning(
                'provider_call_failed',
                provider=str(self.provider),
                model=self._model,
                error=str(exc),
                error_code=str(exc.error_code),
            )
            return ProviderOutcome.failure(str(exc), exc.error_code, latency_ms=latency_ms)

        return outcome.model_copy(update={'latency_ms': _elapsed_ms(started)})

    # ------------------------------------------------------------------
    # Methods to implement in concrete adapters
    # ------------------------------------------------------------------

    @abstractmethod
    def _invoke(self, prompt: str, options: GenerationOptions) -> ProviderOutcome:
        """Provider-specific **blocking** implementation (to be overridden)."""

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} model={self._model!r}>'


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
