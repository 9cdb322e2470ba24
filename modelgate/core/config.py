"""Configuration inputs for model resolution.

Two sources feed every resolution:

- ``EnvironmentSnapshot``: server-side settings copied once from the process
  environment (optionally layered over a dotenv file). Resolution code only
  ever reads from the snapshot, never from ``os.environ`` directly.
- ``ClientOverrides``: untrusted, request-scoped values supplied by the
  caller's settings form.
"""

from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import dotenv_values
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from modelgate.utils.log import get_logger


logger = get_logger()

AI_PROVIDER_ENV = "AI_PROVIDER"
AI_MODEL_ENV = "AI_MODEL"
AZURE_RESOURCE_NAME_ENV = "AZURE_RESOURCE_NAME"
AZURE_API_VERSION_ENV = "AZURE_API_VERSION"
AWS_REGION_ENV = "AWS_REGION"

DEFAULT_AZURE_API_VERSION = "2025-04-01-preview"
DEFAULT_AWS_REGION = "us-west-2"

# Request headers written by the settings form.
OVERRIDE_HEADERS = {
    "provider": "x-ai-provider",
    "base_url": "x-ai-base-url",
    "api_key": "x-ai-api-key",
    "model_id": "x-ai-model",
}


class EnvironmentSnapshot(BaseModel):
    """Immutable view of environment configuration for one resolution."""

    model_config = ConfigDict(frozen=True)

    values: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("values", mode="after")
    @classmethod
    def _read_only(cls, values: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(values))

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "EnvironmentSnapshot":
        """Copy the given mapping (default: ``os.environ``) into a snapshot."""
        source = os.environ if environ is None else environ
        return cls(values=dict(source))

    @classmethod
    def from_env_file(
        cls,
        path: Union[str, Path],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "EnvironmentSnapshot":
        """Layer a dotenv file beneath process values; process values win."""
        env_path = Path(path)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")
        file_values = {k: v for k, v in dotenv_values(env_path).items() if v is not None}
        merged: Dict[str, str] = dict(file_values)
        merged.update(os.environ if environ is None else environ)
        logger.debug(
            "[config] Loaded environment file",
            extra={"path": str(env_path), "variable_count": len(file_values)},
        )
        return cls(values=merged)

    def value(self, name: Optional[str]) -> Optional[str]:
        """Return a stripped setting, or None when unset or blank."""
        if not name:
            return None
        raw = self.values.get(name)
        if raw is None:
            return None
        stripped = raw.strip()
        return stripped or None

    def has(self, name: Optional[str]) -> bool:
        return self.value(name) is not None


class ClientOverrides(BaseModel):
    """Request-scoped provider settings supplied by the caller."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())

    provider: Optional[str] = None
    base_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("base_url", "baseUrl")
    )
    api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("api_key", "apiKey")
    )
    model_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("model_id", "modelId")
    )

    @field_validator("provider", "base_url", "api_key", "model_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def is_client_override(self) -> bool:
        """True when the caller names a provider and brings its own credential."""
        return bool(self.provider and self.api_key)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ClientOverrides":
        """Build overrides from request headers (names matched case-insensitively)."""
        lowered = {str(k).lower(): v for k, v in headers.items()}
        return cls(**{field: lowered.get(header) for field, header in OVERRIDE_HEADERS.items()})

    def __repr__(self) -> str:
        return (
            f"ClientOverrides(provider={self.provider!r}, base_url={self.base_url!r}, "
            f"api_key={'***' if self.api_key else None}, model_id={self.model_id!r})"
        )

    __str__ = __repr__


__all__ = [
    "AI_MODEL_ENV",
    "AI_PROVIDER_ENV",
    "AWS_REGION_ENV",
    "AZURE_API_VERSION_ENV",
    "AZURE_RESOURCE_NAME_ENV",
    "ClientOverrides",
    "DEFAULT_AWS_REGION",
    "DEFAULT_AZURE_API_VERSION",
    "EnvironmentSnapshot",
]
