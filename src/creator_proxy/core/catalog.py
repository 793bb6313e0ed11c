"""core.catalog

Catalog of the concrete models the tier chains run on, with per-1000-token
pricing used to estimate the cost of each provider call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, Field

from creator_proxy.core.model_id import ModelIdentity, ModelRef

if TYPE_CHECKING:
    from collections.abc import Mapping

log = structlog.get_logger()


class ModelPricing(BaseModel):
    """USD per 1000 tokens."""

    input: float = Field(..., ge=0.0)
    output: float = Field(..., ge=0.0)

    model_config = ConfigDict(frozen=True)


class ModelSpec(BaseModel):
    id: str
    display_name: str
    description: str
    provider: ModelIdentity
    pricing: ModelPricing
    context_window: int
    max_output_tokens: int
    supports_multimodal: bool = True
    is_active: bool = True

    model_config = ConfigDict(frozen=True)

    @property
    def ref(self) -> ModelRef:
        return ModelRef.of(self.provider, self.id)


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------

GEMINI_FLASH = ModelSpec(
    id='gemini-2.5-flash-preview-05-20',
    display_name='Gemini 2.5 Flash',
    description='Fast and cost-effective for iterative tasks',
    provider=ModelIdentity.gemini,
    pricing=ModelPricing(input=0.00015, output=0.0006),
    context_window=1_000_000,
    max_output_tokens=8192,
)

GEMINI_PRO = ModelSpec(
    id='gemini-2.5-pro-preview-05-06',
    display_name='Gemini 2.5 Pro',
    description='Advanced reasoning and complex task handling',
    provider=ModelIdentity.gemini,
    pricing=ModelPricing(input=0.00125, output=0.005),
    context_window=1_000_000,
    max_output_tokens=8192,
)

# ---------------------------------------------------------------------------
# Claude
# ---------------------------------------------------------------------------

CLAUDE_SONNET = ModelSpec(
    id='claude-sonnet-4-20250514',
    display_name='Claude Sonnet 4',
    description='Balanced model for coding and creative tasks',
    provider=ModelIdentity.claude,
    pricing=ModelPricing(input=0.003, output=0.015),
    context_window=200_000,
    max_output_tokens=8192,
)

CLAUDE_OPUS = ModelSpec(
    id='claude-opus-4-5-20251101',
    display_name='Claude Opus 4.5',
    description='Highest quality for complex, critical tasks',
    provider=ModelIdentity.claude,
    pricing=ModelPricing(input=0.015, output=0.075),
    context_window=200_000,
    max_output_tokens=8192,
)

ALL_MODELS: tuple[ModelSpec, ...] = (GEMINI_FLASH, GEMINI_PRO, CLAUDE_SONNET, CLAUDE_OPUS)

MODEL_BY_ID: Mapping[str, ModelSpec] = {spec.id: spec for spec in ALL_MODELS}

# Charged when a model id is not in the catalog, so unknown models never look free.
FALLBACK_PRICING = ModelPricing(input=0.01, output=0.03)


def get_model_spec(model_id: str) -> ModelSpec | None:
    return MODEL_BY_ID.get(model_id)


def is_valid_model(model_id: str) -> bool:
    """True when *model_id* is catalogued and active."""
    spec = MODEL_BY_ID.get(model_id)
    return spec is not None and spec.is_active


def get_provider_models(provider: ModelIdentity) -> list[ModelSpec]:
    return [spec for spec in ALL_MODELS if spec.provider is provider and spec.is_active]


def calculate_model_cost(model_id: str, tokens_input: int, tokens_output: int) -> float:
    """Estimate the USD cost of one call from its token usage."""
    spec = MODEL_BY_ID.get(model_id)
    if spec is None:
        log.warning('unknown_model_pricing', model=model_id)
        pricing = FALLBACK_PRICING
    else:
        pricing = spec.pricing
    return (tokens_input * pricing.input + tokens_output * pricing.output) / 1000
