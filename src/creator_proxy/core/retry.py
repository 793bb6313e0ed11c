"""core.retry

Provider-level retry with exponential back-off + optional jitter.

This belongs to the provider capability, not to the orchestration core: the
services never retry a call themselves (ModelService's fallback to the other
model is the only retry they perform). The default strategy built from
settings makes a single attempt.
"""

from __future__ import annotations

import functools
import secrets
import time
from typing import TYPE_CHECKING, ParamSpec, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from creator_proxy.core.exceptions import GenerationTimeoutError, RateLimitExceededError

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec('P')
T = TypeVar('T')

log = structlog.get_logger()


class RetryStrategy(BaseModel):
    """Configuration for exponential back-off retry with optional jitter."""

    max_attempts: int = Field(default=1, ge=1, description='Total attempts including the first call')
    base_backoff_sec: float = Field(default=1.0, ge=0.0, description='Initial delay before first retry (seconds)')
    max_backoff_sec: float = Field(default=30.0, ge=0.0, description='Upper bound for any sleep interval')
    jitter: bool = Field(default=True, description='Add random jitter (0-1s) to each interval')

    model_config = ConfigDict(frozen=True)

    def compute_delay(self, attempt_number: int) -> float:
        """Calculate sleep duration for the given attempt number (1-indexed)."""
        delay = min(self.base_backoff_sec * (2 ** (attempt_number - 1)), self.max_backoff_sec)
        if self.jitter:
            delay += secrets.randbelow(101) / 100
        return delay


def with_retry(
    strategy: RetryStrategy | None = None,
    retry_on: tuple[type[Exception], ...] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Retry decorator that retries a function according to the specified strategy.

    Parameters
    ----------
    strategy
        Retry policy. Defaults to RetryStrategy() (a single attempt) if None.
    retry_on
        Exception types that trigger a retry. Defaults to
        (RateLimitExceededError, GenerationTimeoutError, ConnectionError).
        The last such error is re-raised once attempts are exhausted; any
        other exception bubbles up immediately.

    """
    retry_strategy = strategy or RetryStrategy()
    retry_exceptions = retry_on or (RateLimitExceededError, GenerationTimeoutError, ConnectionError)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attempt_number = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except retry_exceptions as exc:
                    if attempt_number >= retry_strategy.max_attempts:
                        raise
                    delay = retry_strategy.compute_delay(attempt_number)
                    log.info('provider_call_retry', attempt=attempt_number, delay_sec=delay, error=str(exc))
                    time.sleep(delay)
                    attempt_number += 1

        return wrapper

    return decorator
