"""Builder for RDS provider clients."""

from __future__ import annotations

from typing import Any

from kubernetes import client

from ..models import RDSInstance
from ..services.aws.client import AWSRDSClient
from ..services.kubernetes.providers import get_provider, provider_namespace
from ..utils.secrets import get_secret_value


def create_rds_client_from_spec(
    spec: dict[str, Any],
    namespace: str,
    core_api: client.CoreV1Api,
    request_timeout: float | None = None,
    max_attempts: int = 3,
) -> AWSRDSClient:
    """Create an RDS client from a Provider CRD spec.

    Args:
        spec: Provider CRD spec
        namespace: Namespace holding the credential secrets
        core_api: Kubernetes CoreV1Api instance
        request_timeout: Timeout for Kubernetes and AWS calls in seconds
        max_attempts: Maximum attempts made by botocore per AWS call

    Returns:
        Configured RDS client

    Raises:
        ValueError: If configuration is invalid
    """
    auth = spec.get("auth", {})
    access_key_ref = auth.get("accessKeySecretRef", {})
    secret_key_ref = auth.get("secretKeySecretRef", {})

    access_key_name = access_key_ref.get("name")
    access_key_key = access_key_ref.get("key", "access-key")
    secret_key_name = secret_key_ref.get("name")
    secret_key_key = secret_key_ref.get("key", "secret-key")

    if not access_key_name or not secret_key_name:
        raise ValueError("accessKeySecretRef and secretKeySecretRef are required")

    region = spec.get("region")
    if not region:
        raise ValueError("region is required")

    access_key = get_secret_value(core_api, namespace, access_key_name, access_key_key, request_timeout)
    secret_key = get_secret_value(core_api, namespace, secret_key_name, secret_key_key, request_timeout)

    # Get optional session token
    session_token = None
    session_token_ref = auth.get("sessionTokenSecretRef") or {}
    session_token_name = session_token_ref.get("name")
    if session_token_name:
        session_token_key = session_token_ref.get("key", "session-token")
        session_token = get_secret_value(core_api, namespace, session_token_name, session_token_key, request_timeout)

    provider_type = spec.get("type", "aws")
    if provider_type != "aws":
        raise ValueError(f"Unsupported provider type: {provider_type}")

    kwargs: dict[str, Any] = {}
    if request_timeout is not None:
        kwargs["read_timeout"] = request_timeout

    return AWSRDSClient(
        region=region,
        access_key=access_key,
        secret_key=secret_key,
        session_token=session_token,
        endpoint=spec.get("endpoint"),
        max_attempts=max_attempts,
        **kwargs,
    )


class ProviderConnector:
    """Builds an RDS client from the provider referenced by a record."""

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        core_api: client.CoreV1Api,
        request_timeout: float | None = None,
        max_attempts: int = 3,
    ) -> None:
        self.custom_api = custom_api
        self.core_api = core_api
        self.request_timeout = request_timeout
        self.max_attempts = max_attempts

    def connect(self, record: RDSInstance) -> AWSRDSClient:
        ref = record.spec.provider_ref
        provider = get_provider(self.custom_api, ref, record.metadata.namespace, self.request_timeout)
        return create_rds_client_from_spec(
            provider.get("spec", {}),
            provider_namespace(ref, record.metadata.namespace),
            self.core_api,
            request_timeout=self.request_timeout,
            max_attempts=self.max_attempts,
        )
