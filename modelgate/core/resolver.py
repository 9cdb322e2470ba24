"""Model provider resolution.

``resolve_model`` turns environment configuration plus optional client
overrides into a ``ModelDescriptor``:

1. security gate (a custom base URL requires the caller's own API key)
2. model id (override, then ``AI_MODEL``)
3. provider selection (client override > ``AI_PROVIDER`` > auto-detection)
4. server credential validation (skipped for client overrides)
5. reasoning/sampling options
6. client construction

Each call is a pure function of its inputs; nothing is cached.
"""

from __future__ import annotations

from typing import List, Optional

from modelgate.core.catalog import (
    PROVIDER_CATALOG,
    ProviderName,
    client_override_providers,
    credentialed_providers,
    get_provider_metadata,
    lookup_provider,
)
from modelgate.core.config import (
    AI_MODEL_ENV,
    AI_PROVIDER_ENV,
    AZURE_RESOURCE_NAME_ENV,
    ClientOverrides,
    EnvironmentSnapshot,
)
from modelgate.core.errors import (
    AmbiguousProviderError,
    ConfigurationError,
    CredentialError,
    NoProviderConfiguredError,
    SecurityError,
    UnsupportedProviderError,
)
from modelgate.core.providers import ClientRequest, ModelDescriptor, build_model_descriptor
from modelgate.core.reasoning import build_provider_options
from modelgate.utils.log import get_logger

logger = get_logger()


def enforce_security_gate(overrides: ClientOverrides) -> None:
    """Reject a custom base URL that arrives without the caller's own API key.

    Otherwise the server's stored credential could be sent to an endpoint
    chosen by the caller.
    """
    if overrides.base_url and not overrides.api_key:
        logger.warning(
            "[resolver] Rejected custom base URL without API key",
            extra={"provider": overrides.provider},
        )
        raise SecurityError(
            "API key is required when using a custom base URL. "
            "Please provide your own API key in Settings."
        )


def resolve_model_id(env: EnvironmentSnapshot, overrides: ClientOverrides) -> str:
    model_id = overrides.model_id or env.value(AI_MODEL_ENV)
    if model_id:
        return model_id
    if overrides.is_client_override:
        raise ConfigurationError(
            "Model ID is required when using a custom AI provider. "
            "Please specify a model in Settings.",
            variable=AI_MODEL_ENV,
        )
    raise ConfigurationError(
        f"{AI_MODEL_ENV} environment variable is required. "
        f"Example: {AI_MODEL_ENV}=claude-sonnet-4-5",
        variable=AI_MODEL_ENV,
    )


def _azure_has_endpoint(env: EnvironmentSnapshot) -> bool:
    meta = get_provider_metadata(ProviderName.AZURE)
    return env.has(meta.base_url_env_var) or env.has(AZURE_RESOURCE_NAME_ENV)


def configured_providers(env: EnvironmentSnapshot) -> List[ProviderName]:
    """Providers whose server credential is present, in catalog order.

    Providers without a credential variable never count; Azure counts only
    when its endpoint can be constructed as well.
    """
    configured: List[ProviderName] = []
    for meta in credentialed_providers():
        if not env.has(meta.required_credential_env_var):
            continue
        if meta.name == ProviderName.AZURE and not _azure_has_endpoint(env):
            continue
        configured.append(meta.name)
    return configured


def _no_provider_message(env: EnvironmentSnapshot) -> str:
    lines = [
        "No AI provider configured. Please set one of the following API keys:",
    ]
    for meta in credentialed_providers():
        lines.append(f"- {meta.required_credential_env_var} for {meta.display_name}")
    keyless = [p.value for p, meta in PROVIDER_CATALOG.items() if not meta.required_credential_env_var]
    lines.append(
        f"Or set {AI_PROVIDER_ENV} to one of {', '.join(keyless)} "
        "for providers that need no API key."
    )
    azure_key = get_provider_metadata(ProviderName.AZURE).required_credential_env_var
    if env.has(azure_key):
        lines.append(
            f"{azure_key} is set but Azure also needs AZURE_BASE_URL or {AZURE_RESOURCE_NAME_ENV}."
        )
    return "\n".join(lines)


def detect_provider(env: EnvironmentSnapshot) -> ProviderName:
    """Select the single configured provider, failing closed otherwise."""
    configured = configured_providers(env)
    if len(configured) == 1:
        logger.info(
            "[resolver] Auto-detected provider",
            extra={"provider": configured[0].value},
        )
        return configured[0]
    if not configured:
        raise NoProviderConfiguredError(_no_provider_message(env))
    names = [p.value for p in configured]
    raise AmbiguousProviderError(
        f"Multiple AI providers configured ({', '.join(names)}). "
        f"Please set {AI_PROVIDER_ENV} to specify which one to use.",
        providers=names,
    )


def select_provider(env: EnvironmentSnapshot, overrides: ClientOverrides) -> ProviderName:
    """Pick the provider governing this call.

    Precedence: client override (provider + API key, restricted to the
    client allow-list), then ``AI_PROVIDER``, then auto-detection.
    """
    if overrides.is_client_override:
        provider = lookup_provider(overrides.provider)
        if provider is None or not get_provider_metadata(provider).allowed_for_client_override:
            allowed = ", ".join(p.value for p in client_override_providers())
            raise UnsupportedProviderError(
                f"Invalid provider: {overrides.provider}. Allowed providers: {allowed}",
                provider=overrides.provider,
            )
        return provider

    if overrides.provider:
        logger.debug(
            "[resolver] Ignoring provider override without an API key",
            extra={"provider": overrides.provider},
        )

    configured = env.value(AI_PROVIDER_ENV)
    if configured:
        provider = lookup_provider(configured)
        if provider is None:
            raise UnsupportedProviderError(
                f"Unknown AI provider: {configured}. "
                f"Supported providers: {', '.join(p.value for p in ProviderName)}",
                provider=configured,
            )
        return provider

    return detect_provider(env)


def validate_credentials(
    provider: ProviderName, env: EnvironmentSnapshot, overrides: ClientOverrides
) -> None:
    """Check server-side credentials for a provider.

    Client overrides bring their own key and are not validated here.
    """
    if overrides.is_client_override:
        return

    meta = get_provider_metadata(provider)
    required = meta.required_credential_env_var
    if required and not env.has(required):
        raise CredentialError(
            f"{required} environment variable is required for {provider.value} provider. "
            "Please set it in your environment.",
            variable=required,
        )

    if provider == ProviderName.AZURE and not _azure_has_endpoint(env):
        raise CredentialError(
            f"Azure requires either {meta.base_url_env_var} or {AZURE_RESOURCE_NAME_ENV} "
            "to be set.",
            variable=AZURE_RESOURCE_NAME_ENV,
        )


def resolve_model(
    overrides: Optional[ClientOverrides] = None,
    env: Optional[EnvironmentSnapshot] = None,
) -> ModelDescriptor:
    """Resolve, validate and configure the model for one request."""
    overrides = overrides or ClientOverrides()
    env = env if env is not None else EnvironmentSnapshot.from_environ()

    enforce_security_gate(overrides)
    model_id = resolve_model_id(env, overrides)
    provider = select_provider(env, overrides)
    validate_credentials(provider, env, overrides)

    logger.info(
        "[resolver] Initializing provider",
        extra={
            "provider": provider.value,
            "model": model_id,
            "client_override": overrides.is_client_override,
            "custom_base_url": bool(overrides.base_url),
        },
    )

    options = build_provider_options(provider, model_id, env)
    return build_model_descriptor(
        ClientRequest(
            provider=provider,
            model_id=model_id,
            env=env,
            overrides=overrides,
            options=options,
        )
    )


__all__ = [
    "configured_providers",
    "detect_provider",
    "enforce_security_gate",
    "resolve_model",
    "resolve_model_id",
    "select_provider",
    "validate_credentials",
]
