"""Resolution of the references an RDSInstance depends on."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client

from ...exceptions import ReferencesBlockedError
from ...models import ObjectRef, RDSInstance
from .client import call_api
from .providers import get_provider, provider_namespace

logger = logging.getLogger(__name__)

CREDENTIAL_REFS = ("accessKeySecretRef", "secretKeySecretRef", "sessionTokenSecretRef")


def plural_for(kind: str) -> str:
    """Return the resource plural of a kind, e.g. ``RDSInstanceClass`` -> ``rdsinstanceclasses``."""
    lowered = kind.lower()
    if lowered.endswith(("s", "x", "ch", "sh")):
        return f"{lowered}es"
    if lowered.endswith("y") and lowered[-2:-1] not in "aeiou":
        return f"{lowered[:-1]}ies"
    return f"{lowered}s"


class ReferenceResolver:
    """Resolves the provider, its credentials, and claim/class references.

    A reference to an object that does not exist yet blocks resolution with
    ReferencesBlockedError. Any other API failure propagates as a transient
    error.
    """

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        core_api: client.CoreV1Api,
        request_timeout: float | None = None,
    ) -> None:
        self.custom_api = custom_api
        self.core_api = core_api
        self.request_timeout = request_timeout

    def resolve(self, record: RDSInstance) -> None:
        namespace = record.metadata.namespace
        provider = self._resolve_provider(record.spec.provider_ref, namespace)
        self._resolve_credentials(provider, provider_namespace(record.spec.provider_ref, namespace))

        for field_name, ref in (("claimRef", record.spec.claim_ref), ("classRef", record.spec.class_ref)):
            if ref is not None:
                self._resolve_object(field_name, ref, namespace)

    def _resolve_provider(self, ref: ObjectRef, namespace: str) -> dict[str, Any]:
        try:
            return get_provider(self.custom_api, ref, namespace, self.request_timeout)
        except client.exceptions.ApiException as e:
            if e.status == 404:
                raise ReferencesBlockedError(
                    f"Provider {ref.name} not found in namespace {provider_namespace(ref, namespace)}"
                ) from e
            raise

    def _resolve_credentials(self, provider: dict[str, Any], namespace: str) -> None:
        auth = (provider.get("spec") or {}).get("auth") or {}
        for ref_name in CREDENTIAL_REFS:
            secret_ref = auth.get(ref_name) or {}
            secret_name = secret_ref.get("name")
            if not secret_name:
                continue
            try:
                secret = call_api(
                    "get_credentials_secret",
                    self.core_api.read_namespaced_secret,
                    name=secret_name,
                    namespace=namespace,
                    _request_timeout=self.request_timeout,
                )
            except client.exceptions.ApiException as e:
                if e.status == 404:
                    raise ReferencesBlockedError(
                        f"Credentials secret {secret_name} not found in namespace {namespace}"
                    ) from e
                raise
            key = secret_ref.get("key")
            if key and key not in (secret.data or {}):
                raise ReferencesBlockedError(f"Key {key} not found in credentials secret {secret_name}")

    def _resolve_object(self, field_name: str, ref: ObjectRef, namespace: str) -> None:
        if not ref.api_version or not ref.kind:
            logger.debug(f"Skipping {field_name} {ref.name}: apiVersion and kind are not set")
            return

        group, _, version = ref.api_version.rpartition("/")
        try:
            call_api(
                "get_referenced_object",
                self.custom_api.get_namespaced_custom_object,
                group=group,
                version=version,
                namespace=ref.namespace or namespace,
                plural=plural_for(ref.kind),
                name=ref.name,
                _request_timeout=self.request_timeout,
            )
        except client.exceptions.ApiException as e:
            if e.status == 404:
                raise ReferencesBlockedError(
                    f"{field_name} {ref.kind} {ref.name} not found in namespace {ref.namespace or namespace}"
                ) from e
            raise
