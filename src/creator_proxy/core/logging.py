"""core.logging

structlog configuration shared by the services and adapters. Provider API
keys are redacted from every event before it is rendered.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, TypeAlias, cast

import structlog

_SENSITIVE_KEYS = {
    'authorization',
    'x-api-key',
    'x-goog-api-key',
    'api_key',
    'apikey',
}

_BEARER_RE = re.compile(r'(?i)\bBearer\s+([A-Za-z0-9._-]{6,})')

Processor: TypeAlias = Callable[[Any, str, MutableMapping[str, Any]], Mapping[str, Any] | str | bytes]


def _redact(obj: Any, *, secrets: list[str]) -> Any:
    if isinstance(obj, str):
        for secret in secrets:
            obj = obj.replace(secret, '[REDACTED]')
        return _BEARER_RE.sub('Bearer [REDACTED]', obj)
    if isinstance(obj, list | tuple):
        return type(obj)(_redact(v, secrets=secrets) for v in obj)
    if isinstance(obj, dict):
        return {
            k: '[REDACTED]' if str(k).lower() in _SENSITIVE_KEYS else _redact(v, secrets=secrets)
            for k, v in obj.items()
        }
    return obj


def redaction_processor(secrets: list[str]) -> Processor:
    """Build a processor that masks *secrets* and credential-looking keys."""
    known = [s for s in secrets if s]

    def _processor(_logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]) -> Mapping[str, Any]:
        return cast(dict[str, Any], _redact(dict(event_dict), secrets=known))

    return _processor


def configure_logging(level: str = 'INFO', fmt: str = 'json', *, secrets: list[str] | None = None) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level)

    processors: list[Processor] = [
        cast(Processor, structlog.contextvars.merge_contextvars),
        cast(Processor, structlog.processors.add_log_level),
        cast(Processor, structlog.processors.TimeStamper(fmt='iso')),
        redaction_processor(secrets or []),
    ]
    if fmt == 'json':
        processors.append(cast(Processor, structlog.processors.JSONRenderer()))
    else:
        processors.append(cast(Processor, structlog.dev.ConsoleRenderer()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )
