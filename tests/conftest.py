"""Pytest configuration and fixtures for all tests."""

import os
from typing import Callable

import pytest

from modelgate.core.config import EnvironmentSnapshot

_ISOLATED_PREFIXES = (
    "AI_",
    "AWS_",
    "AZURE_",
    "ANTHROPIC_",
    "BEDROCK_",
    "GOOGLE_",
    "OLLAMA_",
    "OPENAI_",
)
_ISOLATED_SUFFIXES = ("_API_KEY", "_BASE_URL")


@pytest.fixture
def make_env() -> Callable[..., EnvironmentSnapshot]:
    """Build an environment snapshot from keyword arguments.

    Example: make_env(AI_PROVIDER="openai", OPENAI_API_KEY="sk-test")
    """

    def _make(**values: str) -> EnvironmentSnapshot:
        return EnvironmentSnapshot.from_environ(values)

    return _make


@pytest.fixture
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove provider settings from the real process environment.

    Use for tests that go through ``EnvironmentSnapshot.from_environ()``
    without an explicit mapping, such as CLI invocations.
    """
    for name in list(os.environ):
        if name.startswith(_ISOLATED_PREFIXES) or name.endswith(_ISOLATED_SUFFIXES):
            monkeypatch.delenv(name, raising=False)
