"""Utilities for managing Kubernetes secrets."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from kubernetes import client

from ..constants import FIELD_MANAGER


def get_secret_value(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    key: str,
    request_timeout: float | None = None,
) -> str:
    """Get a value from a Kubernetes secret.

    Args:
        api: Kubernetes API client
        namespace: Namespace of the secret
        secret_name: Name of the secret
        key: Key in the secret
        request_timeout: Optional request timeout in seconds

    Returns:
        Secret value

    Raises:
        ValueError: If secret or key not found
    """
    try:
        secret = api.read_namespaced_secret(
            name=secret_name,
            namespace=namespace,
            _request_timeout=request_timeout,
        )
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise ValueError(f"Secret '{secret_name}' not found in namespace '{namespace}'") from e
        raise

    data = secret.data or {}
    if key not in data:
        raise ValueError(f"Key '{key}' not found in secret '{secret_name}'")

    value = data[key]
    # Handle both string and bytes (different versions of kubernetes client)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return value
    return value.decode("utf-8")


def create_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    data: dict[str, str],
    owner_references: list[dict[str, Any]] | None = None,
    labels: dict[str, str] | None = None,
    request_timeout: float | None = None,
) -> None:
    """Create a Kubernetes secret.

    Args:
        api: Kubernetes API client
        namespace: Namespace for the secret
        secret_name: Name of the secret
        data: Secret data as plain strings
        owner_references: Owner references for the secret
        labels: Labels for the secret
        request_timeout: Optional request timeout in seconds
    """
    secret = client.V1Secret(
        metadata=client.V1ObjectMeta(
            name=secret_name,
            namespace=namespace,
            owner_references=owner_references or [],
            labels=labels or {},
        ),
        type="Opaque",
        string_data=dict(data),
    )

    api.create_namespaced_secret(
        namespace=namespace,
        body=secret,
        field_manager=FIELD_MANAGER,
        _request_timeout=request_timeout,
    )


def patch_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    data: dict[str, str],
    request_timeout: float | None = None,
) -> None:
    """Merge keys into an existing Kubernetes secret.

    Keys not present in ``data`` are left untouched.

    Args:
        api: Kubernetes API client
        namespace: Namespace of the secret
        secret_name: Name of the secret
        data: Secret data as plain strings
        request_timeout: Optional request timeout in seconds
    """
    api.patch_namespaced_secret(
        name=secret_name,
        namespace=namespace,
        body={"stringData": dict(data)},
        field_manager=FIELD_MANAGER,
        _request_timeout=request_timeout,
    )
