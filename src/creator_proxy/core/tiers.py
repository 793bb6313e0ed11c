"""core.tiers

Performance tiers and the ordered stage table each tier runs.

* ``flow``  - analyzer (Gemini Flash) -> implementer (Claude Sonnet)
* ``craft`` - analyzer (Gemini Flash) -> strategist (Gemini Pro) -> implementer (Claude Opus)

Credits are a flat rate per tier, independent of the tokens a chain burns.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from creator_proxy.core.catalog import CLAUDE_OPUS, CLAUDE_SONNET, GEMINI_FLASH, GEMINI_PRO
from creator_proxy.core.model_id import ModelRef  # noqa: TC001 - resolved at runtime by pydantic

if TYPE_CHECKING:
    from collections.abc import Mapping


class PerformanceTier(StrEnum):
    flow = 'flow'
    craft = 'craft'


class StepRole(StrEnum):
    analyzer = 'analyzer'
    strategist = 'strategist'
    implementer = 'implementer'


class StageDefinition(BaseModel):
    """One role of a tier chain, bound to one model."""

    role: StepRole
    model: ModelRef
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., ge=1)

    model_config = ConfigDict(frozen=True)


_ANALYZER = {'role': StepRole.analyzer, 'temperature': 0.3, 'max_tokens': 2000}
_STRATEGIST = {'role': StepRole.strategist, 'temperature': 0.5, 'max_tokens': 4000}
_IMPLEMENTER = {'role': StepRole.implementer, 'temperature': 0.7, 'max_tokens': 8000}

TIER_STAGES: Mapping[PerformanceTier, tuple[StageDefinition, ...]] = {
    PerformanceTier.flow: (
        StageDefinition(model=GEMINI_FLASH.ref, **_ANALYZER),
        StageDefinition(model=CLAUDE_SONNET.ref, **_IMPLEMENTER),
    ),
    PerformanceTier.craft: (
        StageDefinition(model=GEMINI_FLASH.ref, **_ANALYZER),
        StageDefinition(model=GEMINI_PRO.ref, **_STRATEGIST),
        StageDefinition(model=CLAUDE_OPUS.ref, **_IMPLEMENTER),
    ),
}

TIER_CREDITS: Mapping[PerformanceTier, float] = {
    PerformanceTier.flow: 0.5,
    PerformanceTier.craft: 2.0,
}

if set(TIER_STAGES) != set(PerformanceTier) or set(TIER_CREDITS) != set(PerformanceTier):  # pragma: no cover
    raise RuntimeError('every PerformanceTier needs a stage table and a credit cost')

for _stages in TIER_STAGES.values():  # chains always end by implementing
    if _stages[0].role is not StepRole.analyzer or _stages[-1].role is not StepRole.implementer:  # pragma: no cover
        raise RuntimeError('tier chains must start with the analyzer and end with the implementer')


def stages_for(tier: PerformanceTier) -> tuple[StageDefinition, ...]:
    return TIER_STAGES[tier]


def is_valid_tier(value: str) -> bool:
    return value in PerformanceTier.__members__


def default_tier() -> PerformanceTier:
    return PerformanceTier.flow


# ---------------------------------------------------------------------------
# Tier selection
# ---------------------------------------------------------------------------


class TierSelection(BaseModel):
    """What the caller knows when choosing a tier for a request."""

    credits_available: float = Field(..., ge=0.0)
    performance_tier: PerformanceTier | None = None
    task_complexity: Literal['simple', 'moderate', 'complex'] | None = None
    is_elementor_template: bool = False


def determine_optimal_tier(selection: TierSelection) -> PerformanceTier:
    """Pick the tier for a request.

    An explicitly requested tier wins when the caller can afford it. Otherwise
    Elementor templates and complex tasks get ``craft`` when affordable, and
    everything else runs on ``flow``.
    """
    requested = selection.performance_tier
    if requested is not None and selection.credits_available >= TIER_CREDITS[requested]:
        return requested

    can_afford_craft = selection.credits_available >= TIER_CREDITS[PerformanceTier.craft]
    if can_afford_craft and (selection.is_elementor_template or selection.task_complexity == 'complex'):
        return PerformanceTier.craft

    return default_tier()
