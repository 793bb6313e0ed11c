"""adapters.claude_adapter

Anthropic Claude through its OpenAI SDK compatibility endpoint.
"""

from __future__ import annotations

from typing import ClassVar

from creator_proxy.adapters.openai_compat import OpenAICompatibleAdapter
from creator_proxy.core.config import ANTHROPIC_OPENAI_BASE_URL
from creator_proxy.core.model_id import ModelIdentity
from creator_proxy.registry.provider_registry import provider_registry


class ClaudeAdapter(OpenAICompatibleAdapter):
    provider: ClassVar[ModelIdentity] = ModelIdentity.claude
    default_base_url: ClassVar[str] = ANTHROPIC_OPENAI_BASE_URL


# ---------------------------------------------------------------------------
# Automatic registration
# ---------------------------------------------------------------------------

provider_registry.register(ModelIdentity.claude, ClaudeAdapter)
