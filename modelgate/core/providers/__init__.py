"""Provider client factory.

Each catalog protocol maps to exactly one builder and every provider is
dispatched through its protocol; builder modules are imported on
first use so a missing SDK only affects the providers that need it.
"""

from __future__ import annotations

import importlib
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple, cast

from modelgate.core.catalog import PROVIDER_CATALOG, ProtocolType, ProviderName
from modelgate.core.errors import UnsupportedProviderError
from modelgate.core.model_families import is_bedrock_hosted_claude
from modelgate.core.providers.base import (
    ApiStyle,
    ClientRequest,
    ConstructionPath,
    ModelDescriptor,
    ModelReference,
)
from modelgate.core.reasoning import (
    BedrockOptions,
    ReasoningConfig,
    bedrock_claude_beta_options,
)
from modelgate.utils.log import get_logger

logger = get_logger()

Builder = Callable[[ClientRequest], ModelReference]

# protocol -> (module, builder function, distribution that provides the SDK)
_PROTOCOL_BUILDERS: Dict[ProtocolType, Tuple[str, str, str]] = {
    ProtocolType.BEDROCK: ("bedrock", "build_bedrock", "boto3"),
    ProtocolType.OPENAI: ("openai", "build_openai", "openai"),
    ProtocolType.ANTHROPIC: ("anthropic", "build_anthropic", "anthropic"),
    ProtocolType.GEMINI: ("gemini", "build_google", "google-genai"),
    ProtocolType.AZURE_OPENAI: ("openai", "build_azure", "openai"),
    ProtocolType.OPENAI_COMPATIBLE: ("openai", "build_openai_compatible", "openai"),
}

_unhandled = set(ProtocolType) - set(_PROTOCOL_BUILDERS)
if _unhandled:  # pragma: no cover - guards future enum additions
    raise RuntimeError(f"No client builder for protocols: {sorted(p.value for p in _unhandled)}")

# Dispatch follows each provider's catalog protocol.
_BUILDERS: Mapping[ProviderName, Tuple[str, str, str]] = MappingProxyType(
    {name: _PROTOCOL_BUILDERS[meta.protocol] for name, meta in PROVIDER_CATALOG.items()}
)


def _load_builder(module: str, func: str, package: str) -> Builder:
    """Import a builder, pointing users to the package it needs."""
    try:
        mod = importlib.import_module(f"modelgate.core.providers.{module}")
    except ImportError as exc:
        raise RuntimeError(
            f"{func} requires the '{package}' package. Install with `pip install {package}`."
        ) from exc
    builder = getattr(mod, func, None)
    if builder is None:
        raise RuntimeError(f"{func} not found in {module}")
    return cast(Builder, builder)


def build_model_reference(request: ClientRequest) -> ModelReference:
    """Construct the call-scoped client for the resolved provider."""
    entry = _BUILDERS.get(request.provider)
    if entry is None:
        raise UnsupportedProviderError(
            f"Unknown AI provider: {request.provider}. "
            f"Supported providers: {', '.join(p.value for p in ProviderName)}",
            provider=str(request.provider),
        )
    return _load_builder(*entry)(request)


def _bedrock_options(model_id: str, options: Optional[ReasoningConfig]) -> Optional[ReasoningConfig]:
    if not is_bedrock_hosted_claude(model_id):
        return options
    beta = bedrock_claude_beta_options()
    if isinstance(options, BedrockOptions):
        return beta.merge(options)
    return beta


def build_model_descriptor(request: ClientRequest) -> ModelDescriptor:
    """Build the client and attach provider options and headers."""
    reference = build_model_reference(request)
    options = request.options
    headers: Optional[Dict[str, str]] = None

    if request.provider == ProviderName.BEDROCK:
        options = _bedrock_options(request.model_id, options)
    elif request.provider == ProviderName.ANTHROPIC:
        from modelgate.core.providers.anthropic import anthropic_beta_headers

        headers = anthropic_beta_headers()

    logger.debug(
        "[providers] Built model reference",
        extra={
            "provider": request.provider.value,
            "model": request.model_id,
            "path": reference.path.value,
            "api": reference.api.value,
            "has_options": options is not None,
        },
    )
    return ModelDescriptor(
        model_reference=reference,
        model_id=request.model_id,
        provider_options=options.to_provider_options() if options is not None else None,
        headers=headers,
    )


__all__ = [
    "ApiStyle",
    "ClientRequest",
    "ConstructionPath",
    "ModelDescriptor",
    "ModelReference",
    "build_model_descriptor",
    "build_model_reference",
]
