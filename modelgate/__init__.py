"""
modelgate - model provider resolution

Resolves which LLM provider serves a request, validates its credentials
and builds a call-scoped client from environment configuration and
optional per-request overrides.

Quick Start:
    from modelgate import ClientOverrides, resolve_model

    descriptor = resolve_model(ClientOverrides(model_id="claude-sonnet-4-5"))
"""

__version__ = "0.1.0"

from modelgate.core.catalog import ProviderName
from modelgate.core.config import ClientOverrides, EnvironmentSnapshot
from modelgate.core.errors import (
    AmbiguousProviderError,
    ConfigurationError,
    CredentialError,
    ModelResolutionError,
    NoProviderConfiguredError,
    SecurityError,
    UnsupportedProviderError,
)
from modelgate.core.model_families import supports_prompt_caching
from modelgate.core.providers import ModelDescriptor, ModelReference
from modelgate.core.resolver import resolve_model

__all__ = [
    "AmbiguousProviderError",
    "ClientOverrides",
    "ConfigurationError",
    "CredentialError",
    "EnvironmentSnapshot",
    "ModelDescriptor",
    "ModelReference",
    "ModelResolutionError",
    "NoProviderConfiguredError",
    "ProviderName",
    "SecurityError",
    "UnsupportedProviderError",
    "__version__",
    "resolve_model",
    "supports_prompt_caching",
]
