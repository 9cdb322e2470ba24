"""Model identifier classification.

All knowledge about model naming conventions lives here so that option
building and client dispatch can branch on a closed classification instead
of matching substrings themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class ModelFamily(str, Enum):
    GPT_REASONING = "gpt_reasoning"
    CLAUDE = "claude"
    GEMINI = "gemini"
    NOVA = "nova"
    OTHER = "other"


class ThinkingControl(str, Enum):
    """Which reasoning knob a model accepts."""

    NONE = "none"
    BUDGET = "budget"
    LEVEL = "level"
    EFFORT = "effort"


@dataclass(frozen=True)
class ModelClassification:
    family: ModelFamily
    reasoning_capable: bool
    thinking_control: ThinkingControl = ThinkingControl.NONE


_GPT_REASONING_MARKERS = ("o1", "o3", "gpt-5")
_CLAUDE_MARKERS = ("claude", "anthropic")
_NOVA_MARKERS = ("nova", "amazon")
_GEMINI_THINKING_GENERATIONS = ("gemini-2", "gemini-3", "gemini2", "gemini3")
_GEMINI_BUDGET_MARKERS = ("2.5", "2-5")
_GEMINI_LEVEL_MARKERS = ("gemini-3", "gemini3")
# Claude 3.7 and every generation from 4 onwards accept extended thinking.
_CLAUDE_THINKING_PATTERN = re.compile(
    r"claude-(?:3[.-]7|(?:opus|sonnet|haiku)-[4-9]|[4-9](?:[.-]\d+)?-(?:opus|sonnet|haiku))"
)
BEDROCK_CLAUDE_MARKER = "anthropic.claude"
_PROMPT_CACHING_PREFIXES = ("us.anthropic", "eu.anthropic")


def _contains_any(model_id: str, markers: tuple[str, ...]) -> bool:
    return any(marker in model_id for marker in markers)


def classify_model_id(model_id: str) -> ModelClassification:
    """Classify a model identifier by family and reasoning support."""
    normalized = (model_id or "").strip().lower()

    if _contains_any(normalized, _CLAUDE_MARKERS):
        capable = bool(_CLAUDE_THINKING_PATTERN.search(normalized))
        return ModelClassification(
            ModelFamily.CLAUDE,
            reasoning_capable=capable,
            thinking_control=ThinkingControl.BUDGET if capable else ThinkingControl.NONE,
        )

    if "gemini" in normalized:
        if not _contains_any(normalized, _GEMINI_THINKING_GENERATIONS):
            return ModelClassification(ModelFamily.GEMINI, reasoning_capable=False)
        if _contains_any(normalized, _GEMINI_BUDGET_MARKERS):
            control = ThinkingControl.BUDGET
        elif _contains_any(normalized, _GEMINI_LEVEL_MARKERS):
            control = ThinkingControl.LEVEL
        else:
            control = ThinkingControl.NONE
        return ModelClassification(ModelFamily.GEMINI, reasoning_capable=True, thinking_control=control)

    if _contains_any(normalized, _NOVA_MARKERS):
        return ModelClassification(
            ModelFamily.NOVA, reasoning_capable=True, thinking_control=ThinkingControl.EFFORT
        )

    if _contains_any(normalized, _GPT_REASONING_MARKERS):
        return ModelClassification(
            ModelFamily.GPT_REASONING,
            reasoning_capable=True,
            thinking_control=ThinkingControl.EFFORT,
        )

    return ModelClassification(ModelFamily.OTHER, reasoning_capable=False)


def is_bedrock_hosted_claude(model_id: str) -> bool:
    """True for Bedrock model ids of hosted Claude models."""
    return BEDROCK_CLAUDE_MARKER in (model_id or "").lower()


def supports_prompt_caching(model_id: str) -> bool:
    """Return True if the model supports provider-side prompt caching."""
    normalized = (model_id or "").lower()
    return _contains_any(normalized, _CLAUDE_MARKERS) or normalized.startswith(
        _PROMPT_CACHING_PREFIXES
    )


__all__ = [
    "BEDROCK_CLAUDE_MARKER",
    "ModelClassification",
    "ModelFamily",
    "ThinkingControl",
    "classify_model_id",
    "is_bedrock_hosted_claude",
    "supports_prompt_caching",
]
