"""services.bootstrap

Wiring for callers: build the services from settings and turn raw caller
input into a validated `GenerationRequest`.
"""

from __future__ import annotations

from typing import Any

from creator_proxy.core.config import CreatorSettings, load_settings
from creator_proxy.core.exceptions import InvalidRequestError
from creator_proxy.core.logging import configure_logging
from creator_proxy.core.prompt_utils import DEFAULT_MAX_PROMPT_LENGTH, sanitize_prompt, validate_prompt
from creator_proxy.core.types import Attachment, GenerationRequest, ModelRequest
from creator_proxy.registry.client_factory import settings_client_factory
from creator_proxy.services.model_service import ModelService
from creator_proxy.services.prompts import DEFAULT_SYSTEM_PROMPT, ChainPrompts
from creator_proxy.services.tier_chain import TierChainService


def _prepare(settings: CreatorSettings | None) -> CreatorSettings:
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format, secrets=settings.secrets())
    return settings


def build_model_service(
    settings: CreatorSettings | None = None, *, default_system_prompt: str = DEFAULT_SYSTEM_PROMPT
) -> ModelService:
    settings = _prepare(settings)
    return ModelService(settings_client_factory(settings), default_system_prompt=default_system_prompt)


def build_tier_chain_service(
    settings: CreatorSettings | None = None, *, prompts: ChainPrompts | None = None
) -> TierChainService:
    settings = _prepare(settings)
    return TierChainService(
        settings_client_factory(settings),
        prompts=prompts,
        chain_timeout_seconds=settings.chain_timeout_seconds,
    )


def build_request(
    prompt: str,
    *,
    attached_files: list[Attachment] | None = None,
    max_length: int = DEFAULT_MAX_PROMPT_LENGTH,
    model: str | None = None,
    **fields: Any,
) -> GenerationRequest:
    """Validate and sanitize caller input into a request.

    Passing *model* yields a `ModelRequest` for `ModelService`. Prompts may
    be empty only when files are attached.

    Raises
    ------
    InvalidRequestError
        If the prompt is missing, empty or too long, or the remaining
        fields do not form a valid request.

    """
    files = attached_files or []
    if prompt or not files:
        check = validate_prompt(prompt, max_length)
        if not check.valid:
            raise InvalidRequestError(check.error)
        prompt = sanitize_prompt(prompt)

    payload = {'prompt': prompt, 'attached_files': files, **fields}
    try:
        if model is not None:
            return ModelRequest(model=model, **payload)
        return GenerationRequest(**payload)
    except ValueError as exc:  # pydantic.ValidationError subclasses ValueError
        raise InvalidRequestError(str(exc)) from exc
