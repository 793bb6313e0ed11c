from __future__ import annotations

import pytest

from creator_proxy.core.model_id import ModelIdentity, ModelRef, is_valid_identity, parse_model_ref, partner


@pytest.mark.parametrize('model', list(ModelIdentity))
def test_partner_is_a_symmetric_two_cycle(model: ModelIdentity) -> None:
    assert partner(model) != model
    assert partner(partner(model)) == model
    assert model.partner is partner(model)


def test_partner_mapping() -> None:
    assert partner(ModelIdentity.gemini) is ModelIdentity.claude
    assert partner(ModelIdentity.claude) is ModelIdentity.gemini


def test_model_ids() -> None:
    assert ModelIdentity.gemini.model_id == 'gemini-3-pro-preview'
    assert ModelIdentity.claude.model_id == 'claude-sonnet-4-20250514'


def test_is_valid_identity() -> None:
    assert is_valid_identity('gemini')
    assert is_valid_identity('claude')
    assert not is_valid_identity('openai')


def test_valid_parse_and_str() -> None:
    ref: ModelRef = ModelRef.parse('Gemini:Gemini-2.5-Pro-Preview-05-06')
    assert ref.provider is ModelIdentity.gemini
    assert ref.model == 'gemini-2.5-pro-preview-05-06'
    assert ref.raw == 'Gemini:Gemini-2.5-Pro-Preview-05-06'
    assert str(ref) == 'gemini:gemini-2.5-pro-preview-05-06'


@pytest.mark.parametrize('bad_ref', ['claude', 'claude-sonnet', ':', 'claude:', 'openai:gpt-4o'])
def test_invalid_parse(bad_ref: str) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        ModelRef.parse(bad_ref)


def test_of_builds_raw_and_is_hashable() -> None:
    ref = ModelRef.of(ModelIdentity.claude, 'claude-opus-4-5-20251101')
    assert ref.raw == 'claude:claude-opus-4-5-20251101'
    assert {ref: 1}[ModelRef.of(ModelIdentity.claude, 'claude-opus-4-5-20251101')] == 1


def test_function_alias() -> None:
    assert isinstance(parse_model_ref('claude:claude-sonnet-4-20250514'), ModelRef)
