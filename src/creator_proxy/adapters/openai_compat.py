"""adapters.openai_compat

Adapter base that bridges :class:`creator_proxy.core.abc.AbstractLLMClient`
with an **OpenAI-compatible Chat Completions** endpoint. Both Gemini and
Anthropic expose one, so a single *openai==1.x* client covers both providers;
the concrete subclasses only pin the provider and its default base URL.
"""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING, Any, ClassVar

import openai
import structlog

from creator_proxy.core.abc import AbstractLLMClient
from creator_proxy.core.catalog import calculate_model_cost
from creator_proxy.core.exceptions import (
    GenerationTimeoutError,
    LLMClientError,
    ModelNotFoundError,
    RateLimitExceededError,
)
from creator_proxy.core.types import ProviderOutcome

if TYPE_CHECKING:
    from creator_proxy.core.retry import RetryStrategy
    from creator_proxy.core.types import Attachment, GenerationOptions

log = structlog.get_logger()

_TEXT_MIME_TYPES = {'application/json', 'application/xml', 'application/javascript'}


class OpenAICompatibleAdapter(AbstractLLMClient):
    """Adapter for a provider's OpenAI-compatible ChatCompletion API."""

    default_base_url: ClassVar[str]

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        retry_strategy: RetryStrategy | None = None,
        client: openai.OpenAI | None = None,
    ) -> None:
        super().__init__(model, retry_strategy=retry_strategy)
        # SDK-level retries stay off: retrying is governed by retry_strategy.
        self._client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url or self.default_base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )

    # ------------------------------------------------------------------
    # Synchronous path
    # ------------------------------------------------------------------

    def _invoke(self, prompt: str, options: GenerationOptions) -> ProviderOutcome:
        request: dict[str, Any] = {
            'model': self._model,
            'messages': self.build_messages(prompt, options),
            'temperature': options.temperature,
            'max_tokens': options.max_tokens,
        }
        if options.timeout_seconds is not None:
            request['timeout'] = options.timeout_seconds

        try:
            response = self._client.chat.completions.create(**request)
        except openai.RateLimitError as exc:
            raise RateLimitExceededError('Rate limit exceeded') from exc
        except openai.NotFoundError as exc:
            raise ModelNotFoundError(f'Unknown model for provider {self.provider}: {self._model}') from exc
        except openai.APITimeoutError as exc:
            raise GenerationTimeoutError('Provider request timed out') from exc
        except openai.OpenAIError as exc:  # generic fallback
            raise LLMClientError(f'Upstream provider error: {exc}') from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMClientError('Empty response from provider')

        tokens_input = response.usage.prompt_tokens if response.usage else 0
        tokens_output = response.usage.completion_tokens if response.usage else 0
        return ProviderOutcome(
            success=True,
            content=content,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            cost_usd=calculate_model_cost(self._model, tokens_input, tokens_output),
        )

    # ------------------------------------------------------------------
    # Payload construction
    # ------------------------------------------------------------------

    def build_messages(self, prompt: str, options: GenerationOptions) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if options.system_prompt:
            messages.append({'role': 'system', 'content': options.system_prompt})
        messages.extend({'role': str(m.role), 'content': m.content} for m in options.conversation_history)

        if not options.files:
            messages.append({'role': 'user', 'content': prompt})
            return messages

        parts: list[dict[str, Any]] = []
        if prompt:
            parts.append({'type': 'text', 'text': prompt})
        for attachment in options.files:
            part = self._attachment_part(attachment)
            if part is not None:
                parts.append(part)
        messages.append({'role': 'user', 'content': parts})
        return messages

    def _attachment_part(self, attachment: Attachment) -> dict[str, Any] | None:
        if attachment.is_image:
            url = f'data:{attachment.mime_type};base64,{attachment.base64_data}'
            return {'type': 'image_url', 'image_url': {'url': url}}

        if attachment.mime_type.startswith('text/') or attachment.mime_type in _TEXT_MIME_TYPES:
            try:
                text = base64.b64decode(attachment.base64_data, validate=True).decode('utf-8')
            except (binascii.Error, UnicodeDecodeError):
                log.warning('attachment_undecodable', name=attachment.name, mime_type=attachment.mime_type)
                return None
            return {'type': 'text', 'text': f'File: {attachment.name}\n```\n{text}\n```'}

        log.warning('attachment_unsupported', name=attachment.name, mime_type=attachment.mime_type)
        return None
