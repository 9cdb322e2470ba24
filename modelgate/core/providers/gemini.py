"""Google Gemini client builder."""

from __future__ import annotations

from typing import Any, Dict

from modelgate.core.catalog import get_provider_metadata
from modelgate.core.providers.base import (
    ApiStyle,
    ClientRequest,
    ConstructionPath,
    ModelReference,
)

GEMINI_SDK_IMPORT_ERROR = (
    "Gemini client requires the 'google-genai' package. Install it with: pip install google-genai"
)


def build_google(request: ClientRequest) -> ModelReference:
    try:
        from google import genai  # type: ignore
        from google.genai import types as genai_types  # type: ignore
    except (ImportError, ModuleNotFoundError) as exc:  # pragma: no cover - import guard
        raise RuntimeError(GEMINI_SDK_IMPORT_ERROR) from exc

    meta = get_provider_metadata(request.provider)
    base_url = request.base_url(meta.base_url_env_var)

    # vertexai is pinned so the SDK does not switch backends from ambient variables.
    client_kwargs: Dict[str, Any] = {
        "api_key": request.api_key(meta.required_credential_env_var),
        "vertexai": False,
    }
    if base_url:
        client_kwargs["http_options"] = genai_types.HttpOptions(base_url=base_url)

    customized = bool(base_url) or request.has_override_credential
    return ModelReference(
        provider=request.provider,
        model_id=request.model_id,
        client=genai.Client(**client_kwargs),
        path=ConstructionPath.NATIVE_CUSTOM if customized else ConstructionPath.NATIVE_DEFAULT,
        api=ApiStyle.GENERATE_CONTENT,
        base_url=base_url,
    )


__all__ = ["build_google"]
