"""core.model_id

The two supported model identities and the canonical model reference

    "<provider>:<model_name>"

Dispatch on provider always goes through the closed `ModelIdentity` enum,
never through free-form string keys.
"""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Regular-expression helpers
# ---------------------------------------------------------------------------

_MODEL_REF_REGEX: re.Pattern[str] = re.compile(
    r'^(?P<provider>[a-z0-9_-]+):(?P<model>[a-z0-9_.-]+)$',
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Model identity
# ---------------------------------------------------------------------------


class ModelIdentity(StrEnum):
    gemini = 'gemini'
    claude = 'claude'

    @property
    def partner(self) -> ModelIdentity:
        """The fallback partner: always the other supported model."""
        return _PARTNERS[self]

    @property
    def model_id(self) -> str:
        """Concrete model used when this identity is picked directly."""
        return _MODEL_IDS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_PARTNERS: dict[ModelIdentity, ModelIdentity] = {
    ModelIdentity.gemini: ModelIdentity.claude,
    ModelIdentity.claude: ModelIdentity.gemini,
}

_MODEL_IDS: dict[ModelIdentity, str] = {
    ModelIdentity.gemini: 'gemini-3-pro-preview',
    ModelIdentity.claude: 'claude-sonnet-4-20250514',
}

_DISPLAY_NAMES: dict[ModelIdentity, str] = {
    ModelIdentity.gemini: 'Gemini 3 Pro',
    ModelIdentity.claude: 'Claude Sonnet 4',
}

if set(_PARTNERS) != set(ModelIdentity) or set(_MODEL_IDS) != set(ModelIdentity):  # pragma: no cover
    raise RuntimeError('every ModelIdentity needs a partner and a model id')


def partner(model: ModelIdentity) -> ModelIdentity:
    """Return the fallback model for *model*."""
    return model.partner


def is_valid_identity(value: str) -> bool:
    return value in ModelIdentity.__members__


# ---------------------------------------------------------------------------
# Model reference
# ---------------------------------------------------------------------------


class ModelRef(BaseModel):
    """Value-object pointing at one concrete model of one provider.

    * `provider` … supported provider (``gemini`` or ``claude``)
    * `model` … concrete model name (e.g. ``gemini-2.5-flash-preview-05-20``)

    The *raw* string is preserved for logging/debugging purposes.
    """

    provider: ModelIdentity
    model: str = Field(..., pattern=r'^[a-z0-9_.-]+$', description='model name')
    raw: str = Field('', description='original, unmodified identifier')

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator('provider', 'model', mode='before')
    @classmethod
    def _to_lower(cls, v: str) -> str:
        """Force lower-case for case-insensitive matching."""
        return v.lower() if isinstance(v, str) else v

    @classmethod
    def parse(cls, raw: str) -> ModelRef:
        """Parse and validate a *raw* reference string.

        >>> ModelRef.parse("gemini:gemini-2.5-pro-preview-05-06")
        ModelRef(provider=<ModelIdentity.gemini: 'gemini'>, model='gemini-2.5-pro-preview-05-06', ...)
        """
        if (m := _MODEL_REF_REGEX.match(raw.strip())) is None:
            raise ValueError(f"Invalid model reference. Expected '<provider>:<model>', got: {raw}")
        if not is_valid_identity(m.group('provider').lower()):
            raise ValueError(f'Unsupported provider: {m.group("provider")}')
        return cls(provider=m.group('provider'), model=m.group('model'), raw=raw)

    @classmethod
    def of(cls, provider: ModelIdentity, model: str) -> ModelRef:
        return cls(provider=provider, model=model, raw=f'{provider}:{model}')

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f'{self.provider}:{self.model}'


# Convenience alias so callers don't need to import the class explicitly
parse_model_ref = ModelRef.parse
