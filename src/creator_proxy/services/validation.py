"""services.validation

Deterministic smoke test for the implementer's output. No model is called.

The checks are deliberately shallow: they count braces and parentheses in
each embedded PHP span or fenced code block, so characters inside string
literals and comments are counted too. Unparseable JSON is not an error;
only unbalanced embedded code is reported.
"""

from __future__ import annotations

import json
import re

from pydantic import BaseModel, ConfigDict

_JSON_BLOCK_RE = re.compile(r'```(?:json)?\s*([\s\S]*?)\s*```')
_PHP_SPAN_RE = re.compile(r'<\?php[\s\S]*?\?>')
_JS_BLOCK_RE = re.compile(r'```(?:javascript|js)?\s*[\s\S]*?\s*```')
_JS_MARKERS = ('function', 'const', 'let')


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] | None = None

    model_config = ConfigDict(frozen=True)


def _unbalanced(text: str, opening: str, closing: str) -> bool:
    return text.count(opening) != text.count(closing)


def _check_json(content: str) -> None:
    # Parse failures are tolerated: plain prose is a valid answer.
    if (match := _JSON_BLOCK_RE.search(content)) is not None:
        candidate = match.group(1)
    elif content.strip().startswith('{'):
        candidate = content
    else:
        return
    try:
        json.loads(candidate)
    except ValueError:
        pass


def validate_syntax(content: str) -> ValidationResult:
    errors: list[str] = []

    _check_json(content)

    if '<?php' in content:
        for span in _PHP_SPAN_RE.findall(content):
            if _unbalanced(span, '{', '}'):
                errors.append('Potential unbalanced braces in PHP code')
            if _unbalanced(span, '(', ')'):
                errors.append('Potential unbalanced parentheses in PHP code')

    if any(marker in content for marker in _JS_MARKERS):
        for block in _JS_BLOCK_RE.findall(content):
            if _unbalanced(block, '{', '}'):
                errors.append('Potential unbalanced braces in JavaScript code')

    return ValidationResult(valid=not errors, errors=errors or None)
