"""services.prompts

Prompt construction for the tier chain stages, plus the injectable system
prompts the services fall back on when a caller supplies none.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from creator_proxy.core.tiers import PerformanceTier, StepRole

if TYPE_CHECKING:
    from collections.abc import Mapping

    from creator_proxy.core.types import GenerationRequest


DEFAULT_SYSTEM_PROMPT = """You are Creator, an expert WordPress AI assistant. You help users build and modify WordPress sites.

IMPORTANT: You MUST respond ONLY with a valid JSON object (no markdown, no code blocks, just raw JSON).

Response format:
{
  "intent": "action_type",
  "confidence": 0.95,
  "actions": [
    {
      "type": "action_name",
      "params": {...},
      "status": "ready"
    }
  ],
  "message": "Your response to the user explaining what you're doing"
}

AVAILABLE ACTION TYPES:

1. Content Management:
- "create_page": Create a WordPress page
  params: { "title": "string", "content": "HTML", "status": "draft|publish", "use_elementor": true, "elementor_data": "[...]" }
- "create_post": Create a WordPress post
  params: { "title": "string", "content": "HTML", "status": "draft|publish", "category": [ids] }
- "update_post" / "update_page": Update existing content
  params: { "post_id": number, "title": "string", "content": "HTML", "status": "string" }
- "delete_post": Delete a post/page
  params: { "post_id": number, "force": boolean }

2. Elementor:
- "add_elementor_widget": Add widget to an existing Elementor page
  params: { "post_id": number, "widget_type": "string", "settings": {...} }

3. Plugins:
- "create_plugin": Create a custom plugin
  params: { "name": "string", "slug": "string", "description": "string", "code": "PHP code", "activate": true }
- "activate_plugin" / "deactivate_plugin": Toggle a plugin
  params: { "plugin_slug": "string" }

4. Files:
- "read_file": params: { "file_path": "string" }
- "write_file": params: { "file_path": "string", "content": "string" }

5. Database:
- "db_query": Execute SELECT query, params: { "query": "SELECT...", "limit": 100 }
- "db_insert": params: { "table": "string", "data": {...} }
- "db_update": params: { "table": "string", "data": {...}, "where": {...} }

6. Settings:
- "update_option": params: { "option_name": "string", "option_value": "any" }
- "update_meta": params: { "object_id": number, "meta_key": "string", "meta_value": "any" }

7. Analysis:
- "analyze_code": params: { "file_path": "string" }
- "analyze_plugin": params: { "plugin_slug": "string" }

ELEMENTOR PAGE CREATION:
When asked to create an Elementor page, use "create_page" with use_elementor: true and
elementor_data: a JSON STRING containing the Elementor section/column/widget tree.

IMPORTANT RULES:
1. ALWAYS respond in the user's language
2. Generate COMPLETE, WORKING content - don't just describe what you would do
3. For Elementor pages, generate the FULL elementor_data with ALL sections requested
4. Use realistic placeholder content
5. Include proper styling in Elementor settings (colors, fonts, spacing)
6. IDs must be unique alphanumeric strings

Widget types for Elementor: heading, text-editor, image, button, icon-box, image-box, testimonial, form, google_maps, spacer, divider, icon-list"""


_RESPONSE_SHAPE = """Respond with a JSON object:
{
  "intent": "action_type or conversation",
  "confidence": 0.0-1.0,
  "actions": [{"type": "action_name", "params": {...}, "status": "pending|ready"}],
  "message": "Your response to the user"
}"""

_IMPLEMENTER_BASE = """You are Creator, an expert WordPress AI assistant. You help users build and modify WordPress sites.

Always respond in valid JSON format with:
- intent: the type of action or "conversation"
- confidence: 0.0-1.0 score
- actions: array of actions to perform
- message: your response to the user in their language"""


class ChainPrompts(BaseModel):
    """System prompts used by each stage when the caller supplies none."""

    analyzer: dict[PerformanceTier, str] = {
        PerformanceTier.flow: (
            'You are a WordPress expert assistant. Analyze requests quickly and extract actionable information.'
        ),
        PerformanceTier.craft: (
            'You are a senior WordPress architect. Perform thorough analysis of complex WordPress requirements.'
        ),
    }
    strategist: str = (
        'You are a senior WordPress solutions architect. '
        'Create detailed, production-ready implementation strategies.\n'
        'Focus on:\n- Clean architecture\n- WordPress best practices\n- Maintainability\n- Performance\n- Security'
    )
    implementer: dict[PerformanceTier, str] = {
        PerformanceTier.flow: (
            f'{_IMPLEMENTER_BASE}\n\n'
            'You are operating in FLOW mode (balanced speed/quality). Provide:\n'
            '- Working code with essential documentation\n'
            '- Standard error handling\n'
            '- Clear, concise explanations'
        ),
        PerformanceTier.craft: (
            f'{_IMPLEMENTER_BASE}\n\n'
            'You are operating in CRAFT mode (maximum quality). Provide:\n'
            '- Production-ready, well-documented code\n'
            '- Comprehensive error handling\n'
            '- Performance optimizations\n'
            '- Security best practices\n'
            '- Detailed explanations for complex logic'
        ),
    }

    model_config = ConfigDict(frozen=True)

    def system_prompt_for(self, role: StepRole, tier: PerformanceTier) -> str:
        match role:
            case StepRole.analyzer:
                return self.analyzer[tier]
            case StepRole.strategist:
                return self.strategist
            case StepRole.implementer:
                return self.implementer[tier]


# ---------------------------------------------------------------------------
# Stage prompts
# ---------------------------------------------------------------------------


def format_context(context: Mapping[str, Any] | None) -> str:
    """Serialize the caller's site context; raises TypeError if it can't."""
    if not context:
        return 'No context provided'
    return json.dumps(context, indent=2, ensure_ascii=False)


def build_analyzer_prompt(request: GenerationRequest, tier: PerformanceTier) -> str:
    context = format_context(request.context)

    if tier is PerformanceTier.flow:
        return f"""Analyze this WordPress-related request quickly and extract key information.

## Site Context
{context}

## User Request
{request.prompt}

## Your Task
Provide a brief analysis containing:
1. Main intent (what the user wants to achieve)
2. Key entities mentioned (plugins, themes, pages, etc.)
3. Technical requirements
4. Potential challenges or considerations

Keep your response concise and actionable.
"""

    return f"""Perform a deep analysis of this WordPress request for a complex implementation.

## Site Context
{context}

## User Request
{request.prompt}

## Your Task
Provide a comprehensive analysis:

1. **Intent Analysis**
   - Primary goal
   - Secondary goals
   - Implicit requirements

2. **Technical Scope**
   - WordPress components involved (themes, plugins, CPT, etc.)
   - Database considerations
   - Frontend/backend separation

3. **Dependencies**
   - Required plugins
   - Theme compatibility
   - PHP/JavaScript requirements

4. **Risk Assessment**
   - Potential conflicts
   - Performance implications
   - Security considerations

5. **Implementation Complexity**
   - Estimated steps
   - Critical path items
   - Optional enhancements
"""


def build_strategist_prompt(request: GenerationRequest, analysis: str) -> str:
    return f"""Based on the following context analysis, create a detailed implementation strategy.

## Context Analysis
{analysis}

## Original Request
{request.prompt}

## Your Task
Create a comprehensive implementation strategy:

1. **Architecture Overview**
   - High-level approach
   - Component breakdown
   - Data flow

2. **Implementation Steps**
   - Ordered list of specific actions
   - For each step: what to do, why, and how

3. **Code Structure**
   - Files to create/modify
   - Functions/classes needed
   - Hooks to use

4. **Integration Points**
   - How components connect
   - API endpoints if needed
   - Event handlers

5. **Testing Strategy**
   - Key test cases
   - Edge cases to handle

6. **Rollback Plan**
   - How to undo changes if needed
"""


def build_implementer_prompt(request: GenerationRequest, previous_output: str, tier: PerformanceTier) -> str:
    """Implementer prompt from the analysis (flow) or the strategy (craft)."""
    if tier is PerformanceTier.flow:
        return f"""Implement the following WordPress request based on the context analysis.

## Context Analysis
{previous_output}

## Original Request
{request.prompt}

## Instructions
- Provide working code or clear step-by-step instructions
- Include all necessary code snippets
- Explain where to place each piece of code
- Consider user skill level in explanations

{_RESPONSE_SHAPE}
"""

    return f"""Implement the following WordPress request based on the detailed strategy provided.

## Implementation Strategy
{previous_output}

## Original Request
{request.prompt}

## Instructions
- Follow the strategy precisely
- Provide production-ready code
- Include comprehensive error handling
- Add inline documentation for complex logic
- Consider performance and security best practices

{_RESPONSE_SHAPE}
"""


def build_stage_prompt(
    role: StepRole,
    tier: PerformanceTier,
    request: GenerationRequest,
    previous_output: str | None,
) -> str:
    match role:
        case StepRole.analyzer:
            return build_analyzer_prompt(request, tier)
        case StepRole.strategist:
            return build_strategist_prompt(request, previous_output or '')
        case StepRole.implementer:
            return build_implementer_prompt(request, previous_output or '', tier)
