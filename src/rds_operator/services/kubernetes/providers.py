"""Lookup of Provider custom resources."""

from __future__ import annotations

from typing import Any

from kubernetes import client

from ...constants import API_GROUP, API_VERSION, PLURAL_PROVIDERS
from ...models import ObjectRef
from .client import call_api


def provider_namespace(ref: ObjectRef, namespace: str) -> str:
    """Namespace of a provider reference, defaulting to the record's."""
    return ref.namespace or namespace


def get_provider(
    api: client.CustomObjectsApi,
    ref: ObjectRef,
    namespace: str,
    request_timeout: float | None = None,
) -> dict[str, Any]:
    """Get a Provider CRD.

    Args:
        api: Kubernetes CustomObjectsApi instance
        ref: Reference to the provider
        namespace: Namespace of the referencing record
        request_timeout: Optional request timeout in seconds

    Returns:
        Provider CRD object

    Raises:
        client.exceptions.ApiException: If provider not found or API error
    """
    return call_api(
        "get_provider",
        api.get_namespaced_custom_object,
        group=API_GROUP,
        version=API_VERSION,
        namespace=provider_namespace(ref, namespace),
        plural=PLURAL_PROVIDERS,
        name=ref.name,
        _request_timeout=request_timeout,
    )
