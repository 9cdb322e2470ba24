"""Shared types for provider client construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from modelgate.core.catalog import ProviderName
from modelgate.core.config import ClientOverrides, EnvironmentSnapshot
from modelgate.core.reasoning import ReasoningConfig


class ConstructionPath(str, Enum):
    """How the client behind a model reference was built."""

    NATIVE_DEFAULT = "native_default"
    NATIVE_CUSTOM = "native_custom"
    OPENAI_COMPATIBLE = "openai_compatible"
    CREDENTIAL_CHAIN = "credential_chain"


class ApiStyle(str, Enum):
    """Request surface the transport layer should call on the client."""

    RESPONSES = "responses"
    CHAT_COMPLETIONS = "chat_completions"
    MESSAGES = "messages"
    GENERATE_CONTENT = "generate_content"
    CONVERSE = "converse"


@dataclass(frozen=True)
class ModelReference:
    """Opaque handle to a configured, call-scoped client."""

    provider: ProviderName
    model_id: str
    client: Any
    path: ConstructionPath
    api: ApiStyle
    base_url: Optional[str] = None


@dataclass(frozen=True)
class ModelDescriptor:
    """Result of a successful resolution."""

    model_reference: ModelReference
    model_id: str
    provider_options: Optional[Dict[str, Dict[str, Any]]] = None
    headers: Optional[Dict[str, str]] = None

    @property
    def provider(self) -> ProviderName:
        return self.model_reference.provider


@dataclass(frozen=True)
class ClientRequest:
    """Everything a provider builder needs for one call."""

    provider: ProviderName
    model_id: str
    env: EnvironmentSnapshot
    overrides: ClientOverrides = field(default_factory=ClientOverrides)
    options: Optional[ReasoningConfig] = None

    def api_key(self, env_var: Optional[str]) -> Optional[str]:
        """Override credential first, then the server credential."""
        return self.overrides.api_key or self.env.value(env_var)

    def base_url(self, env_var: Optional[str], default: Optional[str] = None) -> Optional[str]:
        """Override endpoint first, then the environment, then the default."""
        return self.overrides.base_url or self.env.value(env_var) or default

    @property
    def has_override_credential(self) -> bool:
        return bool(self.overrides.api_key)


__all__ = [
    "ApiStyle",
    "ClientRequest",
    "ConstructionPath",
    "ModelDescriptor",
    "ModelReference",
]
