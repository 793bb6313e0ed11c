"""core.prompt_utils

Validation and sanitization of user prompts before they reach a model.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

DEFAULT_MAX_PROMPT_LENGTH = 10_000

_SCRIPT_RE = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
_EMBED_RE = re.compile(r'<(iframe|object|embed|form)[^>]*>.*?</\1>', re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r'\son\w+\s*=', re.IGNORECASE)


class PromptCheck(BaseModel):
    valid: bool
    error: str | None = None

    model_config = ConfigDict(frozen=True)


def sanitize_prompt(prompt: str) -> str:
    """Strip script/embed blocks and inline event handlers."""
    sanitized = _SCRIPT_RE.sub('', prompt)
    sanitized = _EMBED_RE.sub('', sanitized)
    sanitized = _EVENT_HANDLER_RE.sub(' data-removed=', sanitized)
    return sanitized.strip()


def validate_prompt(prompt: str, max_length: int = DEFAULT_MAX_PROMPT_LENGTH) -> PromptCheck:
    if not isinstance(prompt, str) or not prompt:
        return PromptCheck(valid=False, error='Prompt is required and must be a string')

    trimmed = prompt.strip()
    if not trimmed:
        return PromptCheck(valid=False, error='Prompt cannot be empty')
    if len(trimmed) > max_length:
        return PromptCheck(valid=False, error=f'Prompt exceeds maximum length of {max_length} characters')

    return PromptCheck(valid=True)
