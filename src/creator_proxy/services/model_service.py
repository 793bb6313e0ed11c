"""services.model_service

One logical "ask a model" operation with automatic single-level fallback:
the selected model is called first and, if it fails, the other supported
model is called with the identical prompt and options.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from creator_proxy.core.exceptions import CreatorProxyError, ErrorCode
from creator_proxy.core.model_id import ModelIdentity, ModelRef, partner
from creator_proxy.core.types import ModelServiceResponse, ProviderOutcome

if TYPE_CHECKING:
    from creator_proxy.core.types import GenerationOptions, ModelRequest
    from creator_proxy.registry.client_factory import ClientFactory

log = structlog.get_logger()


class ModelService:
    """Call the requested model, falling back to its partner on failure.

    `default_system_prompt` is substituted whenever a request carries no
    system prompt of its own.
    """

    def __init__(self, client_factory: ClientFactory, *, default_system_prompt: str) -> None:
        if not default_system_prompt:
            raise ValueError('default_system_prompt must not be empty')
        self._client_factory = client_factory
        self._default_system_prompt = default_system_prompt

    def generate(self, request: ModelRequest) -> ModelServiceResponse:
        started = time.monotonic()
        primary = request.model
        fallback = partner(primary)
        options = request.to_options(system_prompt=request.system_prompt or self._default_system_prompt)

        log.info('model_generation_started', model=str(primary), prompt_length=len(request.prompt))

        primary_outcome = self._call_model(primary, request.prompt, options)
        if primary_outcome.success:
            log.info(
                'primary_model_succeeded',
                model=str(primary),
                tokens=primary_outcome.total_tokens,
                latency_ms=primary_outcome.latency_ms,
            )
            return self._respond(primary, primary_outcome, used_fallback=False, started=started)

        log.warning(
            'primary_model_failed_trying_fallback',
            primary=str(primary),
            fallback=str(fallback),
            error=primary_outcome.error,
        )

        fallback_outcome = self._call_model(fallback, request.prompt, options)
        if fallback_outcome.success:
            log.info(
                'fallback_model_succeeded',
                model=str(fallback),
                tokens=fallback_outcome.total_tokens,
                latency_ms=fallback_outcome.latency_ms,
            )
            return self._respond(fallback, fallback_outcome, used_fallback=True, started=started)

        log.error(
            'all_models_failed',
            primary=str(primary),
            fallback=str(fallback),
            primary_error=primary_outcome.error,
            fallback_error=fallback_outcome.error,
        )
        # used_fallback=True here records that the fallback was attempted.
        return ModelServiceResponse(
            success=False,
            content='',
            model=primary,
            model_id=primary.model_id,
            used_fallback=True,
            latency_ms=_elapsed_ms(started),
            error=f'Both models failed. Primary: {primary_outcome.error}. Fallback: {fallback_outcome.error}',
            error_code=ErrorCode.ALL_MODELS_FAILED,
        )

    def _call_model(self, model: ModelIdentity, prompt: str, options: GenerationOptions) -> ProviderOutcome:
        """Call one model; a client that raises counts as a failed call."""
        started = time.monotonic()
        try:
            client = self._client_factory(ModelRef.of(model, model.model_id))
            outcome = client.generate(prompt, options)
        except CreatorProxyError as exc:
            log.error('model_call_failed', model=str(model), error=str(exc))
            return ProviderOutcome.failure(str(exc), exc.error_code, latency_ms=_elapsed_ms(started))
        except Exception as exc:
            log.exception('model_call_failed', model=str(model), error=str(exc))
            return ProviderOutcome.failure(
                str(exc) or exc.__class__.__name__, ErrorCode.PROVIDER_ERROR, latency_ms=_elapsed_ms(started)
            )

        if outcome.success:
            return outcome
        return outcome.model_copy(
            update={
                'error': outcome.error or 'Unknown error',
                'error_code': outcome.error_code or ErrorCode.UNKNOWN_ERROR,
            }
        )

    @staticmethod
    def _respond(
        model: ModelIdentity, outcome: ProviderOutcome, *, used_fallback: bool, started: float
    ) -> ModelServiceResponse:
        return ModelServiceResponse(
            **outcome.model_dump(exclude={'latency_ms'}),
            model=model,
            model_id=model.model_id,
            used_fallback=used_fallback,
            latency_ms=_elapsed_ms(started),
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
