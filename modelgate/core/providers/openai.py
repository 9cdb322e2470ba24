"""OpenAI, Azure OpenAI and OpenAI-compatible client builders."""

from __future__ import annotations

from openai import AzureOpenAI, OpenAI

from modelgate.core.catalog import get_provider_metadata
from modelgate.core.config import (
    AZURE_API_VERSION_ENV,
    AZURE_RESOURCE_NAME_ENV,
    DEFAULT_AZURE_API_VERSION,
)
from modelgate.core.errors import CredentialError
from modelgate.core.providers.base import (
    ApiStyle,
    ClientRequest,
    ConstructionPath,
    ModelReference,
)
from modelgate.utils.log import get_logger

logger = get_logger()

# Local servers ignore the key, but the SDK refuses to build without one.
_PLACEHOLDER_API_KEY = "not-needed"


def build_openai(request: ClientRequest) -> ModelReference:
    """Native OpenAI: Responses API by default, Chat Completions when customized."""
    meta = get_provider_metadata(request.provider)
    api_key = request.api_key(meta.required_credential_env_var)
    custom_base_url = request.base_url(meta.base_url_env_var)

    if custom_base_url or request.has_override_credential:
        base_url = custom_base_url or meta.default_base_url
        return ModelReference(
            provider=request.provider,
            model_id=request.model_id,
            client=OpenAI(api_key=api_key, base_url=base_url),
            path=ConstructionPath.NATIVE_CUSTOM,
            api=ApiStyle.CHAT_COMPLETIONS,
            base_url=base_url,
        )

    return ModelReference(
        provider=request.provider,
        model_id=request.model_id,
        client=OpenAI(api_key=api_key, base_url=meta.default_base_url),
        path=ConstructionPath.NATIVE_DEFAULT,
        api=ApiStyle.RESPONSES,
        base_url=meta.default_base_url,
    )


def _azure_resource_endpoint(resource_name: str) -> str:
    return f"https://{resource_name}.openai.azure.com"


def build_azure(request: ClientRequest) -> ModelReference:
    """Azure OpenAI; the base URL wins over the resource name."""
    meta = get_provider_metadata(request.provider)
    api_key = request.api_key(meta.required_credential_env_var)
    base_url = request.base_url(meta.base_url_env_var)
    resource_name = request.env.value(AZURE_RESOURCE_NAME_ENV)
    api_version = request.env.value(AZURE_API_VERSION_ENV) or DEFAULT_AZURE_API_VERSION

    if base_url:
        client = AzureOpenAI(api_key=api_key, base_url=base_url, api_version=api_version)
        endpoint = base_url
    elif resource_name:
        endpoint = _azure_resource_endpoint(resource_name)
        client = AzureOpenAI(api_key=api_key, azure_endpoint=endpoint, api_version=api_version)
    else:
        raise CredentialError(
            f"Azure requires either {meta.base_url_env_var} or {AZURE_RESOURCE_NAME_ENV} "
            "to be set, or a custom base URL to be provided.",
            variable=AZURE_RESOURCE_NAME_ENV,
        )

    return ModelReference(
        provider=request.provider,
        model_id=request.model_id,
        client=client,
        path=(
            ConstructionPath.NATIVE_CUSTOM
            if request.overrides.base_url or request.has_override_credential
            else ConstructionPath.NATIVE_DEFAULT
        ),
        api=ApiStyle.CHAT_COMPLETIONS,
        base_url=endpoint,
    )


def build_openai_compatible(request: ClientRequest) -> ModelReference:
    """Generic client for every provider that speaks the OpenAI protocol."""
    meta = get_provider_metadata(request.provider)
    api_key = request.api_key(meta.required_credential_env_var) or _PLACEHOLDER_API_KEY
    base_url = request.base_url(meta.base_url_env_var, meta.default_base_url)

    logger.debug(
        "[providers] Building OpenAI-compatible client",
        extra={"provider": request.provider.value, "base_url": base_url},
    )
    return ModelReference(
        provider=request.provider,
        model_id=request.model_id,
        client=OpenAI(api_key=api_key, base_url=base_url),
        path=ConstructionPath.OPENAI_COMPATIBLE,
        api=ApiStyle.CHAT_COMPLETIONS,
        base_url=base_url,
    )


__all__ = ["build_azure", "build_openai", "build_openai_compatible"]
