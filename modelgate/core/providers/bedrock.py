"""AWS Bedrock client builder.

Bedrock authenticates through the AWS credential chain rather than an API
key, so caller-supplied ``api_key``/``base_url`` overrides are ignored.
Explicit ``AWS_ACCESS_KEY_ID``/``AWS_SECRET_ACCESS_KEY`` values in the
environment snapshot are passed through; otherwise boto3 falls back to its
ambient chain (shared profiles, SSO, instance or task roles).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ProfileNotFound

from modelgate.core.config import AWS_REGION_ENV, DEFAULT_AWS_REGION
from modelgate.core.errors import ConfigurationError
from modelgate.core.providers.base import (
    ApiStyle,
    ClientRequest,
    ConstructionPath,
    ModelReference,
)
from modelgate.utils.log import get_logger

logger = get_logger()

BEDROCK_RUNTIME_SERVICE = "bedrock-runtime"


@dataclass
class BedrockRuntimeClient:
    """Lazily created ``bedrock-runtime`` client.

    botocore resolves credentials when a client is created, which may query
    instance metadata; creation is deferred until the transport first asks
    for the client.
    """

    session: Any
    region: str
    _client: Optional[Any] = field(default=None, init=False, repr=False)

    def get(self) -> Any:
        if self._client is None:
            self._client = self.session.client(BEDROCK_RUNTIME_SERVICE, region_name=self.region)
        return self._client


def _session_kwargs(request: ClientRequest, region: str) -> Dict[str, Any]:
    env = request.env
    kwargs: Dict[str, Any] = {"region_name": region}
    access_key = env.value("AWS_ACCESS_KEY_ID")
    secret_key = env.value("AWS_SECRET_ACCESS_KEY")
    if access_key and secret_key:
        kwargs["aws_access_key_id"] = access_key
        kwargs["aws_secret_access_key"] = secret_key
        session_token = env.value("AWS_SESSION_TOKEN")
        if session_token:
            kwargs["aws_session_token"] = session_token
    else:
        if access_key or secret_key:
            logger.warning(
                "[providers] Incomplete AWS key pair; falling back to the AWS credential chain",
                extra={"missing": "AWS_SECRET_ACCESS_KEY" if access_key else "AWS_ACCESS_KEY_ID"},
            )
        profile = env.value("AWS_PROFILE")
        if profile:
            kwargs["profile_name"] = profile
    return kwargs


def build_bedrock(request: ClientRequest) -> ModelReference:
    region = request.env.value(AWS_REGION_ENV) or DEFAULT_AWS_REGION
    if request.overrides.api_key or request.overrides.base_url:
        logger.debug(
            "[providers] Ignoring client endpoint/credential overrides for Bedrock",
            extra={"model": request.model_id},
        )

    kwargs = _session_kwargs(request, region)
    logger.debug(
        "[providers] Building Bedrock client",
        extra={
            "region": region,
            "explicit_keys": "aws_access_key_id" in kwargs,
            "profile": kwargs.get("profile_name"),
        },
    )
    try:
        session = boto3.session.Session(**kwargs)
    except ProfileNotFound as exc:
        raise ConfigurationError(
            f"AWS_PROFILE names an unknown profile: {kwargs.get('profile_name')}",
            variable="AWS_PROFILE",
        ) from exc
    return ModelReference(
        provider=request.provider,
        model_id=request.model_id,
        client=BedrockRuntimeClient(session=session, region=region),
        path=ConstructionPath.CREDENTIAL_CHAIN,
        api=ApiStyle.CONVERSE,
    )


__all__ = ["BEDROCK_RUNTIME_SERVICE", "BedrockRuntimeClient", "build_bedrock"]
