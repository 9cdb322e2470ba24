"""Tests for provider reasoning and sampling options."""

import pytest

from modelgate.core.catalog import ProviderName
from modelgate.core.errors import ConfigurationError
from modelgate.core.reasoning import (
    BedrockOptions,
    BedrockReasoningConfig,
    bedrock_claude_beta_options,
    build_provider_options,
    parse_int_setting,
    parse_unit_interval_setting,
)


def _rendered(provider, model_id, env):
    options = build_provider_options(provider, model_id, env)
    return options.to_provider_options() if options is not None else None


# ---------------------------------------------------------------------------
# OpenAI / Azure
# ---------------------------------------------------------------------------


def test_openai_reasoning_model_defaults_to_detailed_summary(make_env):
    assert _rendered(ProviderName.OPENAI, "o3-mini", make_env()) == {
        "openai": {"reasoning_summary": "detailed"}
    }


def test_openai_reasoning_model_with_effort(make_env):
    env = make_env(OPENAI_REASONING_EFFORT="HIGH", OPENAI_REASONING_SUMMARY="brief")
    assert _rendered(ProviderName.OPENAI, "gpt-5", env) == {
        "openai": {"reasoning_effort": "high", "reasoning_summary": "brief"}
    }


def test_openai_plain_model_has_no_options(make_env):
    assert build_provider_options(ProviderName.OPENAI, "gpt-4o", make_env()) is None


def test_openai_invalid_effort_is_rejected(make_env):
    with pytest.raises(ConfigurationError) as excinfo:
        build_provider_options(
            ProviderName.OPENAI, "o3", make_env(OPENAI_REASONING_EFFORT="extreme")
        )
    assert excinfo.value.variable == "OPENAI_REASONING_EFFORT"
    assert "must be one of" in str(excinfo.value)


def test_azure_options_only_when_explicitly_set(make_env):
    assert build_provider_options(ProviderName.AZURE, "o3-mini", make_env()) is None
    env = make_env(AZURE_REASONING_EFFORT="medium")
    assert _rendered(ProviderName.AZURE, "o3-mini", env) == {
        "azure": {"reasoning_effort": "medium"}
    }


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


def test_anthropic_thinking_budget_for_capable_model(make_env):
    env = make_env(ANTHROPIC_THINKING_BUDGET_TOKENS="4096")
    assert _rendered(ProviderName.ANTHROPIC, "claude-sonnet-4-5", env) == {
        "anthropic": {"thinking": {"type": "enabled", "budget_tokens": 4096}}
    }


def test_anthropic_budget_ignored_for_model_without_thinking(make_env):
    env = make_env(ANTHROPIC_THINKING_BUDGET_TOKENS="4096")
    assert build_provider_options(ProviderName.ANTHROPIC, "claude-3-5-haiku-20241022", env) is None


def test_anthropic_without_budget_has_no_options(make_env):
    assert build_provider_options(ProviderName.ANTHROPIC, "claude-opus-4-1", make_env()) is None


@pytest.mark.parametrize(
    "raw,fragment",
    [("512", "must be >= 1024"), ("70000", "must be <= 64000"), ("lots", "must be a valid integer")],
)
def test_anthropic_budget_range(make_env, raw, fragment):
    with pytest.raises(ConfigurationError, match=fragment):
        build_provider_options(
            ProviderName.ANTHROPIC,
            "claude-sonnet-4-5",
            make_env(ANTHROPIC_THINKING_BUDGET_TOKENS=raw),
        )


# ---------------------------------------------------------------------------
# Google
# ---------------------------------------------------------------------------


def test_google_budget_model(make_env):
    env = make_env(GOOGLE_THINKING_BUDGET="8192")
    assert _rendered(ProviderName.GOOGLE, "gemini-2.5-pro", env) == {
        "google": {"thinking_config": {"include_thoughts": True, "thinking_budget": 8192}}
    }


def test_google_level_model_ignores_budget(make_env):
    env = make_env(GOOGLE_THINKING_BUDGET="8192", GOOGLE_THINKING_LEVEL="low")
    assert _rendered(ProviderName.GOOGLE, "gemini-3-pro-preview", env) == {
        "google": {"thinking_config": {"include_thoughts": True, "thinking_level": "low"}}
    }


def test_google_thinking_model_always_includes_thoughts(make_env):
    assert _rendered(ProviderName.GOOGLE, "gemini-2.5-flash", make_env()) == {
        "google": {"thinking_config": {"include_thoughts": True}}
    }


def test_google_effort_for_non_thinking_model(make_env):
    env = make_env(GOOGLE_REASONING_EFFORT="low")
    assert _rendered(ProviderName.GOOGLE, "gemini-1.5-pro", env) == {
        "google": {"reasoning_effort": "low"}
    }


def test_google_sampling_settings_are_merged(make_env):
    env = make_env(
        GOOGLE_THINKING_BUDGET="2048",
        GOOGLE_CANDIDATE_COUNT="2",
        GOOGLE_TOP_K="40",
        GOOGLE_TOP_P="0.9",
    )
    assert _rendered(ProviderName.GOOGLE, "gemini-2.5-flash", env) == {
        "google": {
            "thinking_config": {"include_thoughts": True, "thinking_budget": 2048},
            "candidate_count": 2,
            "top_k": 40,
            "top_p": 0.9,
        }
    }


def test_google_sampling_without_reasoning(make_env):
    env = make_env(GOOGLE_TOP_K="5")
    assert _rendered(ProviderName.GOOGLE, "gemini-1.5-flash", env) == {"google": {"top_k": 5}}


@pytest.mark.parametrize("raw", ["1.5", "-0.1", "abc", "nan"])
def test_google_top_p_out_of_range(make_env, raw):
    with pytest.raises(ConfigurationError, match="between 0 and 1") as excinfo:
        build_provider_options(ProviderName.GOOGLE, "gemini-2.5-pro", make_env(GOOGLE_TOP_P=raw))
    assert excinfo.value.variable == "GOOGLE_TOP_P"


def test_zero_top_p_is_kept(make_env):
    assert parse_unit_interval_setting(make_env(GOOGLE_TOP_P="0"), "GOOGLE_TOP_P") == 0.0
    assert _rendered(ProviderName.GOOGLE, "gemini-1.5-pro", make_env(GOOGLE_TOP_P="0")) == {
        "google": {"top_p": 0.0}
    }


def test_candidate_count_range(make_env):
    with pytest.raises(ConfigurationError, match="must be <= 8"):
        build_provider_options(
            ProviderName.GOOGLE, "gemini-2.5-pro", make_env(GOOGLE_CANDIDATE_COUNT="9")
        )


# ---------------------------------------------------------------------------
# Bedrock / Ollama / others
# ---------------------------------------------------------------------------


def test_bedrock_claude_budget(make_env):
    env = make_env(BEDROCK_REASONING_BUDGET_TOKENS="2048")
    options = build_provider_options(
        ProviderName.BEDROCK, "us.anthropic.claude-sonnet-4-5-20250929-v1:0", env
    )
    assert options == BedrockOptions(reasoning_config=BedrockReasoningConfig(budget_tokens=2048))


def test_bedrock_nova_effort(make_env):
    env = make_env(BEDROCK_REASONING_EFFORT="medium")
    assert _rendered(ProviderName.BEDROCK, "amazon.nova-pro-v1:0", env) == {
        "bedrock": {"reasoning_config": {"type": "enabled", "max_reasoning_effort": "medium"}}
    }


def test_bedrock_setting_for_other_family_is_ignored(make_env):
    env = make_env(BEDROCK_REASONING_EFFORT="high")
    assert (
        build_provider_options(ProviderName.BEDROCK, "anthropic.claude-sonnet-4-5-v1:0", env)
        is None
    )


def test_bedrock_merge_keeps_both_sides():
    merged = bedrock_claude_beta_options().merge(
        BedrockOptions(reasoning_config=BedrockReasoningConfig(budget_tokens=4096))
    )
    assert merged.to_provider_options() == {
        "bedrock": {
            "reasoning_config": {"type": "enabled", "budget_tokens": 4096},
            "anthropic_beta": ["fine-grained-tool-streaming-2025-05-14"],
        }
    }


def test_bedrock_merge_deduplicates_beta_flags():
    beta = bedrock_claude_beta_options()
    assert beta.merge(beta).anthropic_beta == beta.anthropic_beta


@pytest.mark.parametrize("raw,expected", [("true", True), ("TRUE", True), ("false", False), (None, False)])
def test_ollama_thinking_flag(make_env, raw, expected):
    env = make_env(OLLAMA_ENABLE_THINKING=raw) if raw is not None else make_env()
    options = build_provider_options(ProviderName.OLLAMA, "qwen3:8b", env)
    if expected:
        assert options.to_provider_options() == {"ollama": {"think": True}}
    else:
        assert options is None


@pytest.mark.parametrize(
    "provider",
    [
        ProviderName.OPENROUTER,
        ProviderName.DEEPSEEK,
        ProviderName.SILICONFLOW,
        ProviderName.GLM,
        ProviderName.QWEN,
        ProviderName.DOUBAO,
        ProviderName.QINIU,
        ProviderName.KIMI,
    ],
)
def test_openai_compatible_providers_have_no_options(make_env, provider):
    env = make_env(OPENAI_REASONING_EFFORT="high", ANTHROPIC_THINKING_BUDGET_TOKENS="4096")
    assert build_provider_options(provider, "claude-sonnet-4-5", env) is None


def test_every_provider_has_an_options_builder(make_env):
    for provider in ProviderName:
        build_provider_options(provider, "some-model", make_env())


def test_parse_int_setting_unset(make_env):
    assert parse_int_setting(make_env(), "ANYTHING", 1, 2) is None


@pytest.mark.parametrize("raw", ["4_096", "٤٠٩٦", "0x1000", "4096.0", "4 096"])
def test_integer_settings_must_be_plain_decimal(make_env, raw):
    env = make_env(ANTHROPIC_THINKING_BUDGET_TOKENS=raw)
    with pytest.raises(ConfigurationError, match="must be a valid integer") as excinfo:
        parse_int_setting(env, "ANTHROPIC_THINKING_BUDGET_TOKENS", 1024, 64000)
    assert excinfo.value.variable == "ANTHROPIC_THINKING_BUDGET_TOKENS"


def test_integer_setting_accepts_surrounding_whitespace(make_env):
    env = make_env(GOOGLE_TOP_K=" 40 ")
    assert parse_int_setting(env, "GOOGLE_TOP_K", 1, 100) == 40
