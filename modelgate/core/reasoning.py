"""Provider-specific reasoning and sampling options.

Options are derived from environment settings and the target model id and
returned as a typed, per-family model. ``to_provider_options`` renders the
mapping handed to the transport layer, keyed by the provider family name::

    {"anthropic": {"thinking": {"type": "enabled", "budget_tokens": 4096}}}

Every numeric or enumerated setting is validated eagerly; a malformed value
raises ``ConfigurationError`` naming the variable and the accepted range.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from modelgate.core.catalog import ProviderName
from modelgate.core.config import EnvironmentSnapshot
from modelgate.core.errors import ConfigurationError
from modelgate.core.model_families import ModelFamily, ThinkingControl, classify_model_id
from modelgate.utils.log import get_logger

logger = get_logger()

OPENAI_EFFORT_LEVELS = ("minimal", "low", "medium", "high")
EFFORT_LEVELS = ("low", "medium", "high")
SUMMARY_LEVELS = ("none", "brief", "detailed")
DEFAULT_REASONING_SUMMARY = "detailed"
GOOGLE_THINKING_LEVELS = ("low", "high")
ANTHROPIC_THINKING_TYPES = ("enabled", "disabled")

ANTHROPIC_BUDGET_RANGE = (1024, 64000)
BEDROCK_BUDGET_RANGE = (1024, 64000)
GOOGLE_BUDGET_RANGE = (1024, 100000)
GOOGLE_CANDIDATE_COUNT_RANGE = (1, 8)
GOOGLE_TOP_K_RANGE = (1, 100)

BEDROCK_ANTHROPIC_BETA: Tuple[str, ...] = ("fine-grained-tool-streaming-2025-05-14",)

_DECIMAL_INTEGER = re.compile(r"[+-]?[0-9]+")


# ---------------------------------------------------------------------------
# Setting parsers
# ---------------------------------------------------------------------------


def parse_int_setting(
    env: EnvironmentSnapshot,
    name: str,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    """Parse an integer setting, enforcing an inclusive range."""
    raw = env.value(name)
    if raw is None:
        return None
    if not _DECIMAL_INTEGER.fullmatch(raw):
        raise ConfigurationError(f"{name} must be a valid integer, got: {raw}", variable=name)
    parsed = int(raw)
    if minimum is not None and parsed < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got: {parsed}", variable=name)
    if maximum is not None and parsed > maximum:
        raise ConfigurationError(f"{name} must be <= {maximum}, got: {parsed}", variable=name)
    return parsed


def parse_unit_interval_setting(env: EnvironmentSnapshot, name: str) -> Optional[float]:
    """Parse a float setting that must lie in [0, 1]."""
    raw = env.value(name)
    if raw is None:
        return None
    try:
        parsed = float(raw)
    except ValueError:
        parsed = math.nan
    if math.isnan(parsed) or parsed < 0 or parsed > 1:
        raise ConfigurationError(
            f"{name} must be a number between 0 and 1, got: {raw}", variable=name
        )
    return parsed


def parse_choice_setting(
    env: EnvironmentSnapshot, name: str, choices: Tuple[str, ...]
) -> Optional[str]:
    """Parse an enumerated setting (case-insensitive)."""
    raw = env.value(name)
    if raw is None:
        return None
    normalized = raw.lower()
    if normalized not in choices:
        raise ConfigurationError(
            f"{name} must be one of {', '.join(choices)}, got: {raw}", variable=name
        )
    return normalized


# ---------------------------------------------------------------------------
# Option models
# ---------------------------------------------------------------------------


class _FrozenOptions(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProviderOptions(_FrozenOptions):
    """Options attached to requests for one provider family."""

    family: ClassVar[str] = ""

    def to_provider_options(self) -> Dict[str, Dict[str, Any]]:
        return {self.family: self.model_dump(mode="json", exclude_none=True)}


class OpenAIReasoningOptions(ProviderOptions):
    family: ClassVar[str] = "openai"

    reasoning_effort: Optional[str] = None
    reasoning_summary: Optional[str] = None


class AzureReasoningOptions(OpenAIReasoningOptions):
    family: ClassVar[str] = "azure"


class AnthropicThinking(_FrozenOptions):
    type: str = "enabled"
    budget_tokens: int


class AnthropicOptions(ProviderOptions):
    family: ClassVar[str] = "anthropic"

    thinking: AnthropicThinking


class GoogleThinkingConfig(_FrozenOptions):
    include_thoughts: bool = True
    thinking_budget: Optional[int] = None
    thinking_level: Optional[str] = None


class GoogleOptions(ProviderOptions):
    family: ClassVar[str] = "google"

    thinking_config: Optional[GoogleThinkingConfig] = None
    reasoning_effort: Optional[str] = None
    candidate_count: Optional[int] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None


class BedrockReasoningConfig(_FrozenOptions):
    type: str = "enabled"
    budget_tokens: Optional[int] = None
    max_reasoning_effort: Optional[str] = None


class BedrockOptions(ProviderOptions):
    family: ClassVar[str] = "bedrock"

    reasoning_config: Optional[BedrockReasoningConfig] = None
    anthropic_beta: Optional[Tuple[str, ...]] = None

    def merge(self, other: "BedrockOptions") -> "BedrockOptions":
        """Combine two option sets field by field; neither side is dropped."""
        betas: Tuple[str, ...] = tuple(self.anthropic_beta or ())
        for flag in other.anthropic_beta or ():
            if flag not in betas:
                betas += (flag,)
        return BedrockOptions(
            reasoning_config=other.reasoning_config or self.reasoning_config,
            anthropic_beta=betas or None,
        )


class OllamaOptions(ProviderOptions):
    family: ClassVar[str] = "ollama"

    think: bool = True


ReasoningConfig = Union[
    OpenAIReasoningOptions,
    AzureReasoningOptions,
    AnthropicOptions,
    GoogleOptions,
    BedrockOptions,
    OllamaOptions,
]


def bedrock_claude_beta_options() -> BedrockOptions:
    """Fixed beta flags for Claude models hosted on Bedrock."""
    return BedrockOptions(anthropic_beta=BEDROCK_ANTHROPIC_BETA)


# ---------------------------------------------------------------------------
# Per-family builders
# ---------------------------------------------------------------------------


def _openai_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    effort = parse_choice_setting(env, "OPENAI_REASONING_EFFORT", OPENAI_EFFORT_LEVELS)
    summary = parse_choice_setting(env, "OPENAI_REASONING_SUMMARY", SUMMARY_LEVELS)

    # Reasoning models only surface their thoughts when a summary is requested.
    if classify_model_id(model_id).family == ModelFamily.GPT_REASONING:
        return OpenAIReasoningOptions(
            reasoning_effort=effort,
            reasoning_summary=summary or DEFAULT_REASONING_SUMMARY,
        )
    if effort or summary:
        return OpenAIReasoningOptions(reasoning_effort=effort, reasoning_summary=summary)
    return None


def _azure_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    effort = parse_choice_setting(env, "AZURE_REASONING_EFFORT", EFFORT_LEVELS)
    summary = parse_choice_setting(env, "AZURE_REASONING_SUMMARY", SUMMARY_LEVELS)
    if effort or summary:
        return AzureReasoningOptions(reasoning_effort=effort, reasoning_summary=summary)
    return None


def _anthropic_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    budget = parse_int_setting(env, "ANTHROPIC_THINKING_BUDGET_TOKENS", *ANTHROPIC_BUDGET_RANGE)
    thinking_type = (
        parse_choice_setting(env, "ANTHROPIC_THINKING_TYPE", ANTHROPIC_THINKING_TYPES) or "enabled"
    )
    if budget is None:
        return None
    if not classify_model_id(model_id).reasoning_capable:
        logger.debug(
            "[reasoning] Ignoring thinking budget for model without extended thinking",
            extra={"model": model_id},
        )
        return None
    return AnthropicOptions(thinking=AnthropicThinking(type=thinking_type, budget_tokens=budget))


def _google_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    effort = parse_choice_setting(env, "GOOGLE_REASONING_EFFORT", EFFORT_LEVELS)
    budget = parse_int_setting(env, "GOOGLE_THINKING_BUDGET", *GOOGLE_BUDGET_RANGE)
    level = parse_choice_setting(env, "GOOGLE_THINKING_LEVEL", GOOGLE_THINKING_LEVELS)
    candidate_count = parse_int_setting(
        env, "GOOGLE_CANDIDATE_COUNT", *GOOGLE_CANDIDATE_COUNT_RANGE
    )
    top_k = parse_int_setting(env, "GOOGLE_TOP_K", *GOOGLE_TOP_K_RANGE)
    top_p = parse_unit_interval_setting(env, "GOOGLE_TOP_P")

    fields: Dict[str, Any] = {}
    classification = classify_model_id(model_id)
    if classification.family == ModelFamily.GEMINI and classification.reasoning_capable:
        # Thinking models need include_thoughts to return their reasoning.
        thinking: Dict[str, Any] = {"include_thoughts": True}
        if budget is not None and classification.thinking_control == ThinkingControl.BUDGET:
            thinking["thinking_budget"] = budget
        elif level is not None and classification.thinking_control == ThinkingControl.LEVEL:
            thinking["thinking_level"] = level
        fields["thinking_config"] = GoogleThinkingConfig(**thinking)
    elif effort is not None:
        fields["reasoning_effort"] = effort

    # Sampling settings are additive to whatever reasoning fields were set.
    if candidate_count is not None:
        fields["candidate_count"] = candidate_count
    if top_k is not None:
        fields["top_k"] = top_k
    if top_p is not None:
        fields["top_p"] = top_p

    return GoogleOptions(**fields) if fields else None


def _bedrock_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    budget = parse_int_setting(env, "BEDROCK_REASONING_BUDGET_TOKENS", *BEDROCK_BUDGET_RANGE)
    effort = parse_choice_setting(env, "BEDROCK_REASONING_EFFORT", EFFORT_LEVELS)

    # The reasoning shape follows the hosted model family, not the host.
    family = classify_model_id(model_id).family
    if family == ModelFamily.CLAUDE and budget is not None:
        return BedrockOptions(reasoning_config=BedrockReasoningConfig(budget_tokens=budget))
    if family == ModelFamily.NOVA and effort is not None:
        return BedrockOptions(reasoning_config=BedrockReasoningConfig(max_reasoning_effort=effort))
    return None


def _ollama_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    enabled = env.value("OLLAMA_ENABLE_THINKING")
    if enabled is not None and enabled.lower() == "true":
        return OllamaOptions(think=True)
    return None


def _no_options(model_id: str, env: EnvironmentSnapshot) -> Optional[ReasoningConfig]:
    return None


OptionsBuilder = Callable[[str, EnvironmentSnapshot], Optional[ReasoningConfig]]

_OPTIONS_BUILDERS: Mapping[ProviderName, OptionsBuilder] = {
    ProviderName.OPENAI: _openai_options,
    ProviderName.AZURE: _azure_options,
    ProviderName.ANTHROPIC: _anthropic_options,
    ProviderName.GOOGLE: _google_options,
    ProviderName.BEDROCK: _bedrock_options,
    ProviderName.OLLAMA: _ollama_options,
    ProviderName.OPENROUTER: _no_options,
    ProviderName.DEEPSEEK: _no_options,
    ProviderName.SILICONFLOW: _no_options,
    ProviderName.GLM: _no_options,
    ProviderName.QWEN: _no_options,
    ProviderName.DOUBAO: _no_options,
    ProviderName.QINIU: _no_options,
    ProviderName.KIMI: _no_options,
}

_unhandled = set(ProviderName) - set(_OPTIONS_BUILDERS)
if _unhandled:  # pragma: no cover - guards future enum additions
    raise RuntimeError(f"No options builder for: {sorted(p.value for p in _unhandled)}")


def build_provider_options(
    provider: ProviderName, model_id: str, env: EnvironmentSnapshot
) -> Optional[ReasoningConfig]:
    """Build the reasoning/sampling options for a provider and model."""
    options = _OPTIONS_BUILDERS[provider](model_id, env)
    if options is not None:
        logger.debug(
            "[reasoning] Built provider options",
            extra={"provider": provider.value, "model": model_id, "family": options.family},
        )
    return options


__all__ = [
    "AnthropicOptions",
    "AnthropicThinking",
    "AzureReasoningOptions",
    "BEDROCK_ANTHROPIC_BETA",
    "BedrockOptions",
    "BedrockReasoningConfig",
    "GoogleOptions",
    "GoogleThinkingConfig",
    "OllamaOptions",
    "OpenAIReasoningOptions",
    "ProviderOptions",
    "ReasoningConfig",
    "bedrock_claude_beta_options",
    "build_provider_options",
    "parse_choice_setting",
    "parse_int_setting",
    "parse_unit_interval_setting",
]
