"""Static provider catalog.

Every supported provider is described once here: which environment
variable authenticates it server-side, whether clients may select it with
their own credentials, where its endpoint can be overridden and which
wire protocol its client speaks.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class ProviderName(str, Enum):
    """Closed set of provider variants."""

    BEDROCK = "bedrock"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    AZURE = "azure"
    OLLAMA = "ollama"
    OPENROUTER = "openrouter"
    DEEPSEEK = "deepseek"
    SILICONFLOW = "siliconflow"
    GLM = "glm"
    QWEN = "qwen"
    DOUBAO = "doubao"
    QINIU = "qiniu"
    KIMI = "kimi"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ProviderName"]:
        """Accept names with stray casing or whitespace."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class ProtocolType(str, Enum):
    """Client construction protocol for a provider."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    AZURE_OPENAI = "azure_openai"
    BEDROCK = "bedrock"
    OPENAI_COMPATIBLE = "openai_compatible"


class ProviderMetadata(BaseModel):
    """Provider metadata independent of any request."""

    model_config = ConfigDict(frozen=True)

    name: ProviderName
    display_name: str
    protocol: ProtocolType
    # None means no server credential is needed (local or cloud-IAM backed).
    required_credential_env_var: Optional[str] = None
    allowed_for_client_override: bool = False
    base_url_env_var: Optional[str] = None
    default_base_url: Optional[str] = None


def _entry(
    name: ProviderName,
    display_name: str,
    protocol: ProtocolType,
    credential: Optional[str],
    *,
    allowed: bool = True,
    base_url_env: Optional[str] = None,
    default_base_url: Optional[str] = None,
) -> Tuple[ProviderName, ProviderMetadata]:
    return name, ProviderMetadata(
        name=name,
        display_name=display_name,
        protocol=protocol,
        required_credential_env_var=credential,
        allowed_for_client_override=allowed,
        base_url_env_var=base_url_env,
        default_base_url=default_base_url,
    )


PROVIDER_CATALOG: Mapping[ProviderName, ProviderMetadata] = MappingProxyType(
    dict(
        [
            _entry(
                ProviderName.BEDROCK,
                "AWS Bedrock",
                ProtocolType.BEDROCK,
                None,
                allowed=False,
            ),
            _entry(
                ProviderName.OPENAI,
                "OpenAI",
                ProtocolType.OPENAI,
                "OPENAI_API_KEY",
                base_url_env="OPENAI_BASE_URL",
                default_base_url="https://api.openai.com/v1",
            ),
            _entry(
                ProviderName.ANTHROPIC,
                "Anthropic",
                ProtocolType.ANTHROPIC,
                "ANTHROPIC_API_KEY",
                base_url_env="ANTHROPIC_BASE_URL",
                default_base_url="https://api.anthropic.com",
            ),
            _entry(
                ProviderName.GOOGLE,
                "Google",
                ProtocolType.GEMINI,
                "GOOGLE_GENERATIVE_AI_API_KEY",
                base_url_env="GOOGLE_BASE_URL",
            ),
            _entry(
                ProviderName.AZURE,
                "Azure OpenAI",
                ProtocolType.AZURE_OPENAI,
                "AZURE_API_KEY",
                base_url_env="AZURE_BASE_URL",
            ),
            _entry(
                ProviderName.OLLAMA,
                "Ollama",
                ProtocolType.OPENAI_COMPATIBLE,
                None,
                allowed=False,
                base_url_env="OLLAMA_BASE_URL",
                default_base_url="http://localhost:11434/v1",
            ),
            _entry(
                ProviderName.OPENROUTER,
                "OpenRouter",
                ProtocolType.OPENAI_COMPATIBLE,
                "OPENROUTER_API_KEY",
                base_url_env="OPENROUTER_BASE_URL",
                default_base_url="https://openrouter.ai/api/v1",
            ),
            _entry(
                ProviderName.DEEPSEEK,
                "DeepSeek",
                ProtocolType.OPENAI_COMPATIBLE,
                "DEEPSEEK_API_KEY",
                base_url_env="DEEPSEEK_BASE_URL",
                default_base_url="https://api.deepseek.com/v1",
            ),
            _entry(
                ProviderName.SILICONFLOW,
                "SiliconFlow",
                ProtocolType.OPENAI_COMPATIBLE,
                "SILICONFLOW_API_KEY",
                base_url_env="SILICONFLOW_BASE_URL",
                default_base_url="https://api.siliconflow.com/v1",
            ),
            _entry(
                ProviderName.GLM,
                "GLM",
                ProtocolType.OPENAI_COMPATIBLE,
                "GLM_API_KEY",
                base_url_env="GLM_BASE_URL",
                default_base_url="https://open.bigmodel.cn/api/paas/v4",
            ),
            _entry(
                ProviderName.QWEN,
                "Qwen",
                ProtocolType.OPENAI_COMPATIBLE,
                "QWEN_API_KEY",
                base_url_env="QWEN_BASE_URL",
                default_base_url="https://dashscope.aliyun.com/compatible-mode/v1",
            ),
            _entry(
                ProviderName.DOUBAO,
                "Doubao",
                ProtocolType.OPENAI_COMPATIBLE,
                "DOUBAO_API_KEY",
                base_url_env="DOUBAO_BASE_URL",
                default_base_url="https://ark.cn-beijing.volces.com/api/v3",
            ),
            _entry(
                ProviderName.QINIU,
                "Qiniu",
                ProtocolType.OPENAI_COMPATIBLE,
                "QINIU_API_KEY",
                base_url_env="QINIU_BASE_URL",
                default_base_url="https://api.qiniucdn.com/v1",
            ),
            _entry(
                ProviderName.KIMI,
                "Kimi",
                ProtocolType.OPENAI_COMPATIBLE,
                "KIMI_API_KEY",
                base_url_env="KIMI_BASE_URL",
                default_base_url="https://api.moonshot.cn/v1",
            ),
        ]
    )
)

_missing_entries = set(ProviderName) - set(PROVIDER_CATALOG)
if _missing_entries:  # pragma: no cover - guards future enum additions
    raise RuntimeError(
        f"Provider catalog is missing entries for: {sorted(p.value for p in _missing_entries)}"
    )


def get_provider_metadata(provider: ProviderName) -> ProviderMetadata:
    """Return catalog metadata for a provider."""
    return PROVIDER_CATALOG[provider]


def lookup_provider(name: Optional[str]) -> Optional[ProviderName]:
    """Map a free-form name to a catalog entry, or None when unknown."""
    if not name:
        return None
    try:
        return ProviderName(name)
    except ValueError:
        return None


def client_override_providers() -> Tuple[ProviderName, ...]:
    """Providers that callers may select with their own credentials."""
    return tuple(p for p, meta in PROVIDER_CATALOG.items() if meta.allowed_for_client_override)


def credentialed_providers() -> Tuple[ProviderMetadata, ...]:
    """Catalog entries that authenticate with a server-side credential variable."""
    return tuple(meta for meta in PROVIDER_CATALOG.values() if meta.required_credential_env_var)


__all__ = [
    "PROVIDER_CATALOG",
    "ProtocolType",
    "ProviderMetadata",
    "ProviderName",
    "client_override_providers",
    "credentialed_providers",
    "get_provider_metadata",
    "lookup_provider",
]
