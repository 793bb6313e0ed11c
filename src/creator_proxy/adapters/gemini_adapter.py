"""adapters.gemini_adapter

Google Gemini through its OpenAI-compatible endpoint.
"""

from __future__ import annotations

from typing import ClassVar

from creator_proxy.adapters.openai_compat import OpenAICompatibleAdapter
from creator_proxy.core.config import GEMINI_OPENAI_BASE_URL
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.registry.provider_registry import provider_registry


class GeminiAdapter(OpenAICompatibleAdapter):
    provider: ClassVar[ModelIdentity] = ModelIdentity.gemini
    default_base_url: ClassVar[str] = GEMINI_OPENAI_BASE_URL


# ---------------------------------------------------------------------------
# Automatic registration
# ---------------------------------------------------------------------------

provider_registry.register(ModelIdentity.gemini, GeminiAdapter)
