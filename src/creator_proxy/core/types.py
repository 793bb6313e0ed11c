"""core.types

Shared DTOs and enums used throughout *creator_proxy*.

These models live in the **core** layer so that *adapters*, *registry*, and
the *services* can depend on them without causing circular imports. Every
object here is created for a single call and discarded afterwards.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from creator_proxy.core.exceptions import ErrorCode
from creator_proxy.core.model_id import ModelIdentity

# ---------------------------------------------------------------------------
# Chat roles
# ---------------------------------------------------------------------------


class Role(StrEnum):
    system = 'system'
    user = 'user'
    assistant = 'assistant'


# ---------------------------------------------------------------------------
# Messages and attachments
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str

    # Immutable value-object
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class Attachment(BaseModel):
    """File sent alongside a prompt, carried as base64."""

    name: str
    mime_type: str
    base64_data: str

    model_config = ConfigDict(frozen=True)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith('image/')


# ---------------------------------------------------------------------------
# Generation options (the uniform provider capability input)
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """Temperature, token budget, system prompt and context for one call."""

    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(8000, ge=1, description='Maximum tokens in completion')
    system_prompt: str | None = None
    conversation_history: list[Message] = Field(default_factory=list)
    files: list[Attachment] = Field(default_factory=list)
    timeout_seconds: float | None = Field(None, gt=0.0, description='Per-call time budget')

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class GenerationRequest(BaseModel):
    """What a caller hands to the orchestration core."""

    prompt: str = ''
    system_prompt: str | None = None
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(8000, ge=1)
    conversation_history: list[Message] = Field(default_factory=list)
    attached_files: list[Attachment] = Field(default_factory=list)
    # Opaque description of the caller's environment (site context)
    context: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def _prompt_or_files(self) -> GenerationRequest:
        if not self.prompt.strip() and not self.attached_files:
            raise ValueError('prompt must not be empty unless files are attached')
        return self

    def to_options(self, *, system_prompt: str | None = None) -> GenerationOptions:
        """Project the request onto provider options."""
        return GenerationOptions(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            system_prompt=system_prompt if system_prompt is not None else self.system_prompt,
            conversation_history=list(self.conversation_history),
            files=list(self.attached_files),
        )


class ModelRequest(GenerationRequest):
    """GenerationRequest bound to a primary model for ModelService."""

    model: ModelIdentity = ModelIdentity.gemini


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


class ProviderOutcome(BaseModel):
    """Result of exactly one provider call."""

    success: bool
    content: str = ''
    tokens_input: int = Field(0, ge=0)
    tokens_output: int = Field(0, ge=0)
    cost_usd: float = Field(0.0, ge=0.0)
    latency_ms: int = Field(0, ge=0)
    error: str | None = None
    error_code: ErrorCode | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def total_tokens(self) -> int:
        return self.tokens_input + self.tokens_output

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode, *, latency_ms: int = 0) -> ProviderOutcome:
        return cls(success=False, error=error, error_code=error_code, latency_ms=latency_ms)


class ModelServiceResponse(ProviderOutcome):
    """ProviderOutcome plus which model answered.

    `used_fallback` means "the fallback model was attempted": it is True when
    the fallback answered and also when both models failed.
    """

    model: ModelIdentity
    model_id: str
    used_fallback: bool = False
