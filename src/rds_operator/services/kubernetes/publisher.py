"""Connection detail publishing to Kubernetes secrets."""

from __future__ import annotations

import logging

from kubernetes import client

from ...constants import FIELD_MANAGER, LABEL_INSTANCE_NAME, LABEL_MANAGED_BY
from ...models import RDSInstance
from ...utils.secrets import create_secret, patch_secret
from .client import call_api

logger = logging.getLogger(__name__)


def connection_secret_name(record: RDSInstance) -> str:
    """Return the name of the secret holding the record's connection details."""
    ref = record.spec.write_connection_secret_to_ref
    if ref is not None:
        return ref.name
    return f"{record.metadata.name}-connection"


class SecretPublisher:
    """Publishes connection details into a secret owned by the record.

    Publishing merges keys into the secret, so details written by earlier
    phases (the generated password) survive later publishes (the endpoint).
    Publishing the same payload twice leaves the secret unchanged.
    """

    def __init__(self, api: client.CoreV1Api, request_timeout: float | None = None) -> None:
        self.api = api
        self.request_timeout = request_timeout

    def publish(self, record: RDSInstance, details: dict[str, str]) -> None:
        namespace = record.metadata.namespace
        secret_name = connection_secret_name(record)

        try:
            call_api(
                "create_connection_secret",
                create_secret,
                api=self.api,
                namespace=namespace,
                secret_name=secret_name,
                data=details,
                owner_references=[record.owner_reference()],
                labels={
                    LABEL_MANAGED_BY: FIELD_MANAGER,
                    LABEL_INSTANCE_NAME: record.metadata.name,
                },
                request_timeout=self.request_timeout,
            )
            logger.info(f"Created connection secret {namespace}/{secret_name}")
            return
        except client.exceptions.ApiException as e:
            if e.status != 409:
                raise

        call_api(
            "patch_connection_secret",
            patch_secret,
            api=self.api,
            namespace=namespace,
            secret_name=secret_name,
            data=details,
            request_timeout=self.request_timeout,
        )
