"""Resolution error types with stable error codes."""

from __future__ import annotations

from typing import Optional, Sequence


class ModelResolutionError(Exception):
    """Base resolution failure carrying a stable error code."""

    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class SecurityError(ModelResolutionError):
    """A custom endpoint was supplied without a matching credential."""

    def __init__(self, message: str) -> None:
        super().__init__("security_violation", message)


class UnsupportedProviderError(ModelResolutionError):
    """Unknown provider name, or one not allowed for client overrides."""

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__("unsupported_provider", message)
        self.provider = provider


class NoProviderConfiguredError(ModelResolutionError):
    """Auto-detection found no configured provider."""

    def __init__(self, message: str) -> None:
        super().__init__("no_provider_configured", message)


class AmbiguousProviderError(ModelResolutionError):
    """Auto-detection found more than one configured provider."""

    def __init__(self, message: str, *, providers: Sequence[str] = ()) -> None:
        super().__init__("ambiguous_provider", message)
        self.providers = tuple(providers)


class CredentialError(ModelResolutionError):
    """Missing server credential or endpoint-construction setting."""

    def __init__(self, message: str, *, variable: Optional[str] = None) -> None:
        super().__init__("missing_credentials", message)
        self.variable = variable


class ConfigurationError(ModelResolutionError):
    """Malformed or out-of-range setting, or a missing model identifier."""

    def __init__(self, message: str, *, variable: Optional[str] = None) -> None:
        super().__init__("invalid_configuration", message)
        self.variable = variable


__all__ = [
    "AmbiguousProviderError",
    "ConfigurationError",
    "CredentialError",
    "ModelResolutionError",
    "NoProviderConfiguredError",
    "SecurityError",
    "UnsupportedProviderError",
]
