"""Tests for server-side credential validation."""

import pytest

from modelgate.core.catalog import ProviderName, credentialed_providers
from modelgate.core.config import ClientOverrides
from modelgate.core.errors import CredentialError
from modelgate.core.resolver import resolve_model, validate_credentials


@pytest.mark.parametrize(
    "meta", credentialed_providers(), ids=lambda meta: meta.name.value
)
def test_missing_server_credential_names_the_variable(make_env, meta):
    with pytest.raises(CredentialError) as excinfo:
        validate_credentials(meta.name, make_env(), ClientOverrides())
    assert excinfo.value.variable == meta.required_credential_env_var
    assert meta.required_credential_env_var in str(excinfo.value)
    assert excinfo.value.error_code == "missing_credentials"


def test_present_credential_passes(make_env):
    validate_credentials(ProviderName.OPENAI, make_env(OPENAI_API_KEY="sk"), ClientOverrides())


def test_blank_credential_is_missing(make_env):
    with pytest.raises(CredentialError):
        validate_credentials(ProviderName.KIMI, make_env(KIMI_API_KEY="   "), ClientOverrides())


@pytest.mark.parametrize("provider", [ProviderName.BEDROCK, ProviderName.OLLAMA])
def test_keyless_providers_need_no_credential(make_env, provider):
    validate_credentials(provider, make_env(), ClientOverrides())


def test_azure_requires_endpoint_setting(make_env):
    with pytest.raises(CredentialError) as excinfo:
        validate_credentials(ProviderName.AZURE, make_env(AZURE_API_KEY="az"), ClientOverrides())
    assert excinfo.value.variable == "AZURE_RESOURCE_NAME"
    assert "AZURE_BASE_URL" in str(excinfo.value)


def test_client_override_skips_server_validation(make_env):
    overrides = ClientOverrides(provider="anthropic", api_key="sk-client")
    validate_credentials(ProviderName.ANTHROPIC, make_env(), overrides)


def test_explicit_provider_without_key_fails_in_resolution(make_env):
    env = make_env(AI_PROVIDER="openrouter", AI_MODEL="anthropic/claude-sonnet-4.5")
    with pytest.raises(CredentialError) as excinfo:
        resolve_model(ClientOverrides(), env)
    assert excinfo.value.variable == "OPENROUTER_API_KEY"


def test_azure_key_without_endpoint_fails_in_resolution(make_env):
    env = make_env(AI_PROVIDER="azure", AZURE_API_KEY="az-key", AI_MODEL="gpt-4o")
    with pytest.raises(CredentialError) as excinfo:
        resolve_model(ClientOverrides(), env)
    assert excinfo.value.variable == "AZURE_RESOURCE_NAME"
    assert "AZURE_BASE_URL" in str(excinfo.value)
