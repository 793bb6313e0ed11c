"""services.tier_chain

Tier chain orchestration.

A chain runs the tier's stages strictly in order, feeding each stage's
output into the next stage's prompt:

* ``flow``  - analyzer -> implementer -> syntactic validation
* ``craft`` - analyzer -> strategist -> implementer -> syntactic validation

Every stage that runs leaves a `ChainStepResult` in ``steps``, and its
tokens and cost are added to the totals whether or not it produced output.
A stage with empty output stops the chain with ``CHAIN_STEP_FAILED`` and the
steps gathered so far. An exception raised outside a stage's provider call
stops the chain with ``CHAIN_EXECUTION_FAILED``; that response carries no
steps and zero totals.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, Field

from creator_proxy.core.deadline import Deadline
from creator_proxy.core.exceptions import ErrorCode
from creator_proxy.core.model_id import ModelIdentity  # noqa: TC001 - resolved at runtime by pydantic
from creator_proxy.core.tiers import TIER_CREDITS, PerformanceTier, StepRole, stages_for
from creator_proxy.core.types import GenerationOptions
from creator_proxy.services.prompts import ChainPrompts, build_stage_prompt
from creator_proxy.services.validation import ValidationResult, validate_syntax

if TYPE_CHECKING:
    from creator_proxy.core.tiers import StageDefinition
    from creator_proxy.core.types import GenerationRequest
    from creator_proxy.registry.client_factory import ClientFactory

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class ChainStepResult(BaseModel):
    """Audit record of one executed stage."""

    step: StepRole
    provider: ModelIdentity
    model: str
    output: str = ''
    tokens_input: int = 0
    tokens_output: int = 0
    cost_usd: float = 0.0
    latency_ms: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def total_tokens(self) -> int:
        return self.tokens_input + self.tokens_output


class ChainValidation(BaseModel):
    syntactic: ValidationResult

    model_config = ConfigDict(frozen=True)


class TierChainResponse(BaseModel):
    success: bool
    tier: PerformanceTier
    content: str = ''
    strategy: str | None = None
    validation: ChainValidation | None = None
    steps: list[ChainStepResult] = Field(default_factory=list)
    total_tokens: int = 0
    total_cost_usd: float = 0.0
    total_latency_ms: int = 0
    credits_used: float = 0.0
    error: str | None = None
    error_code: ErrorCode | None = None

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class TierChainService:
    """Run a tier's ordered stage pipeline and report one consolidated result."""

    def __init__(
        self,
        client_factory: ClientFactory,
        *,
        prompts: ChainPrompts | None = None,
        chain_timeout_seconds: float | None = None,
    ) -> None:
        self._client_factory = client_factory
        self._prompts = prompts or ChainPrompts()
        self._chain_timeout_seconds = chain_timeout_seconds

    def execute(
        self,
        request: GenerationRequest,
        tier: PerformanceTier | str,
        *,
        timeout_seconds: float | None = None,
    ) -> TierChainResponse:
        """Run the chain for *tier*.

        *timeout_seconds* overrides the service-wide deadline for this call.
        Raises ValueError for an unknown tier name; every other failure is
        reported on the returned response.
        """
        tier = PerformanceTier(tier)
        started = time.monotonic()
        log.info(
            'tier_chain_started',
            tier=str(tier),
            prompt_length=len(request.prompt),
            has_context=bool(request.context),
        )

        try:
            deadline = Deadline(timeout_seconds if timeout_seconds is not None else self._chain_timeout_seconds)
            return self._run_chain(request, tier, deadline, started)
        except Exception as exc:
            log.exception('tier_chain_failed', tier=str(tier), error=str(exc))
            return TierChainResponse(
                success=False,
                tier=tier,
                total_latency_ms=_elapsed_ms(started),
                error=str(exc) or 'Chain execution failed',
                error_code=ErrorCode.CHAIN_EXECUTION_FAILED,
            )

    # ------------------------------------------------------------------
    # Chain
    # ------------------------------------------------------------------

    def _run_chain(
        self, request: GenerationRequest, tier: PerformanceTier, deadline: Deadline, started: float
    ) -> TierChainResponse:
        steps: list[ChainStepResult] = []
        total_tokens = 0
        total_cost = 0.0
        outputs: dict[StepRole, str] = {}
        previous_output: str | None = None

        for index, stage in enumerate(stages_for(tier), start=1):
            if deadline.expired:
                log.warning('tier_chain_deadline_exceeded', tier=str(tier), step=str(stage.role))
                return self._error_response(
                    tier,
                    steps,
                    total_tokens,
                    total_cost,
                    started,
                    error=f'Chain deadline exceeded before {stage.role} step',
                    error_code=ErrorCode.CHAIN_TIMEOUT,
                )

            log.debug(
                'tier_chain_step_started', tier=str(tier), index=index, step=str(stage.role), model=str(stage.model)
            )
            prompt = build_stage_prompt(stage.role, tier, request, previous_output)
            result = self._run_stage(stage, tier, request, prompt, deadline)

            steps.append(result)
            total_tokens += result.total_tokens
            total_cost += result.cost_usd

            if not result.output:
                return self._error_response(
                    tier,
                    steps,
                    total_tokens,
                    total_cost,
                    started,
                    error=f'{stage.role.capitalize()} step failed',
                    error_code=ErrorCode.CHAIN_STEP_FAILED,
                )

            outputs[stage.role] = result.output
            previous_output = result.output

        content = outputs[StepRole.implementer]
        syntactic = validate_syntax(content)
        total_latency_ms = _elapsed_ms(started)

        log.info(
            'tier_chain_completed',
            tier=str(tier),
            total_tokens=total_tokens,
            total_cost_usd=total_cost,
            total_latency_ms=total_latency_ms,
            validation_passed=syntactic.valid,
        )

        return TierChainResponse(
            success=True,
            tier=tier,
            content=content,
            strategy=outputs.get(StepRole.strategist),
            validation=ChainValidation(syntactic=syntactic),
            steps=steps,
            total_tokens=total_tokens,
            total_cost_usd=total_cost,
            total_latency_ms=total_latency_ms,
            credits_used=TIER_CREDITS[tier],
        )

    # ------------------------------------------------------------------
    # Stage
    # ------------------------------------------------------------------

    def _run_stage(
        self,
        stage: StageDefinition,
        tier: PerformanceTier,
        request: GenerationRequest,
        prompt: str,
        deadline: Deadline,
    ) -> ChainStepResult:
        """Run one stage; a provider call that raises yields an empty step."""
        started = time.monotonic()
        empty = ChainStepResult(step=stage.role, provider=stage.model.provider, model=stage.model.model)

        try:
            options = self._stage_options(stage, tier, request, deadline)
            client = self._client_factory(stage.model)
            outcome = client.generate(prompt, options)
        except Exception as exc:
            log.exception('tier_chain_step_failed', step=str(stage.role), model=str(stage.model), error=str(exc))
            return empty.model_copy(update={'latency_ms': _elapsed_ms(started)})

        if not outcome.success:
            log.warning(
                'tier_chain_step_failed',
                step=str(stage.role),
                model=str(stage.model),
                error=outcome.error,
                error_code=outcome.error_code and str(outcome.error_code),
            )

        return empty.model_copy(
            update={
                'output': outcome.content if outcome.success else '',
                'tokens_input': outcome.tokens_input,
                'tokens_output': outcome.tokens_output,
                'cost_usd': outcome.cost_usd,
                'latency_ms': _elapsed_ms(started),
            }
        )

    def _stage_options(
        self, stage: StageDefinition, tier: PerformanceTier, request: GenerationRequest, deadline: Deadline
    ) -> GenerationOptions:
        system_prompt = self._prompts.system_prompt_for(stage.role, tier)
        if stage.role is StepRole.implementer and request.system_prompt:
            system_prompt = request.system_prompt

        # The strategist works from the analysis alone.
        carries_conversation = stage.role is not StepRole.strategist
        return GenerationOptions(
            temperature=stage.temperature,
            max_tokens=stage.max_tokens,
            system_prompt=system_prompt,
            conversation_history=list(request.conversation_history) if carries_conversation else [],
            files=list(request.attached_files) if carries_conversation else [],
            timeout_seconds=deadline.remaining(),
        )

    @staticmethod
    def _error_response(
        tier: PerformanceTier,
        steps: list[ChainStepResult],
        total_tokens: int,
        total_cost: float,
        started: float,
        *,
        error: str,
        error_code: ErrorCode,
    ) -> TierChainResponse:
        log.warning('tier_chain_aborted', tier=str(tier), steps=len(steps), error=error, error_code=str(error_code))
        return TierChainResponse(
            success=False,
            tier=tier,
            steps=steps,
            total_tokens=total_tokens,
            total_cost_usd=total_cost,
            total_latency_ms=_elapsed_ms(started),
            credits_used=0.0,
            error=error,
            error_code=error_code,
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
