"""core.exceptions

Centralised exception hierarchy and error codes for *creator_proxy*.

Each error carries an `error_code` attribute so that the orchestration layer
can turn a raised exception into a failed outcome (``success=False``) with a
stable machine-readable code, without scattering code-selection logic
throughout adapter code.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorCode(StrEnum):
    """Machine-readable codes reported on failed outcomes and responses."""

    INVALID_REQUEST = 'INVALID_REQUEST'
    CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
    MODEL_NOT_FOUND = 'MODEL_NOT_FOUND'
    RATE_LIMITED = 'RATE_LIMITED'
    TIMEOUT = 'TIMEOUT'
    PROVIDER_ERROR = 'PROVIDER_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'
    # Orchestration-level codes
    ALL_MODELS_FAILED = 'ALL_MODELS_FAILED'
    CHAIN_STEP_FAILED = 'CHAIN_STEP_FAILED'
    CHAIN_EXECUTION_FAILED = 'CHAIN_EXECUTION_FAILED'
    CHAIN_TIMEOUT = 'CHAIN_TIMEOUT'


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------


class CreatorProxyError(Exception):
    """Base class for all *creator_proxy* domain errors."""

    #: Default code if not overridden by subclass.
    error_code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)

    def to_json(self) -> dict[str, dict[str, str]]:
        """Unified error body for upper layers."""
        return {'error': {'type': self.__class__.__name__, 'code': str(self.error_code), 'message': str(self)}}


# ---------------------------------------------------------------------------
# Concrete error classes
# ---------------------------------------------------------------------------


class ProviderNotFoundError(CreatorProxyError):
    """Raised when `ProviderRegistry` has no adapter for a provider."""

    error_code: ClassVar[ErrorCode] = ErrorCode.INVALID_REQUEST


class InvalidRequestError(CreatorProxyError):
    """Raised when a caller's prompt fails intake validation."""

    error_code: ClassVar[ErrorCode] = ErrorCode.INVALID_REQUEST


class ConfigurationError(CreatorProxyError):
    """Raised when a required setting (e.g. an API key) is missing."""

    error_code: ClassVar[ErrorCode] = ErrorCode.CONFIGURATION_ERROR


class ModelNotFoundError(CreatorProxyError):
    """Raised when a model is unknown for a valid provider."""

    error_code: ClassVar[ErrorCode] = ErrorCode.MODEL_NOT_FOUND


class RateLimitExceededError(CreatorProxyError):
    """Raised when provider rate limits persist beyond retry strategy."""

    error_code: ClassVar[ErrorCode] = ErrorCode.RATE_LIMITED


class LLMClientError(CreatorProxyError):
    """Generic upstream provider error (e.g., unexpected 5xx)."""

    error_code: ClassVar[ErrorCode] = ErrorCode.PROVIDER_ERROR


class GenerationTimeoutError(CreatorProxyError):
    """Raised when a provider call exceeds its time budget."""

    error_code: ClassVar[ErrorCode] = ErrorCode.TIMEOUT
