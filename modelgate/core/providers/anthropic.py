"""Anthropic client builder."""

from __future__ import annotations

from typing import Dict

from anthropic import Anthropic

from modelgate.core.catalog import get_provider_metadata
from modelgate.core.providers.base import (
    ApiStyle,
    ClientRequest,
    ConstructionPath,
    ModelReference,
)

# Fine-grained tool streaming needs an explicit opt-in on every request.
ANTHROPIC_BETA_HEADERS: Dict[str, str] = {
    "anthropic-beta": "fine-grained-tool-streaming-2025-05-14",
}


def anthropic_beta_headers() -> Dict[str, str]:
    """Return a fresh copy of the beta header map."""
    return dict(ANTHROPIC_BETA_HEADERS)


def build_anthropic(request: ClientRequest) -> ModelReference:
    """Anthropic is always built as a custom client carrying the beta headers."""
    meta = get_provider_metadata(request.provider)
    base_url = request.base_url(meta.base_url_env_var, meta.default_base_url)
    client = Anthropic(
        api_key=request.api_key(meta.required_credential_env_var),
        base_url=base_url,
        default_headers=anthropic_beta_headers(),
    )
    return ModelReference(
        provider=request.provider,
        model_id=request.model_id,
        client=client,
        path=ConstructionPath.NATIVE_CUSTOM,
        api=ApiStyle.MESSAGES,
        base_url=base_url,
    )


__all__ = ["ANTHROPIC_BETA_HEADERS", "anthropic_beta_headers", "build_anthropic"]
