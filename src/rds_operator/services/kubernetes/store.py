"""Record store backed by the Kubernetes API."""

from __future__ import annotations

import copy
import logging
from typing import Any

from kubernetes import client

from ...constants import API_GROUP, API_VERSION, PLURAL_RDS_INSTANCES
from ...exceptions import ConflictError, RecordNotFoundError
from ...models import Key, RDSInstance
from .client import call_api

logger = logging.getLogger(__name__)


class KubernetesRecordStore:
    """Fetches and persists RDSInstance records with optimistic concurrency.

    Writes carry the resourceVersion the record was read at; a write against a
    stale version raises ConflictError instead of overwriting.
    """

    def __init__(
        self,
        api: client.CustomObjectsApi,
        request_timeout: float | None = None,
        group: str = API_GROUP,
        version: str = API_VERSION,
        plural: str = PLURAL_RDS_INSTANCES,
    ) -> None:
        self.api = api
        self.request_timeout = request_timeout
        self.group = group
        self.version = version
        self.plural = plural

    def get(self, key: Key) -> RDSInstance:
        """Fetch the record stored under key.

        Raises:
            RecordNotFoundError: If the record no longer exists
        """
        try:
            obj = call_api(
                "get_rds_instance",
                self.api.get_namespaced_custom_object,
                group=self.group,
                version=self.version,
                namespace=key.namespace,
                plural=self.plural,
                name=key.name,
                _request_timeout=self.request_timeout,
            )
        except client.exceptions.ApiException as e:
            if e.status == 404:
                raise RecordNotFoundError(f"RDSInstance {key} not found") from e
            raise
        return RDSInstance.from_dict(obj)

    def update(self, record: RDSInstance) -> None:
        """Persist finalizers and status of the record.

        Finalizers are written first so an external instance is never recorded
        in status without the finalizer guarding it. Once the last finalizer of
        a deleting record is removed the API server purges it, and there is no
        status left to write.

        Raises:
            ConflictError: If the record changed since it was read
        """
        if self._finalizers_changed(record):
            obj = self._replace(record, status=False)
            record.metadata.resource_version = obj.get("metadata", {}).get("resourceVersion")
            record.raw = obj
            if record.deletion_intended and not record.metadata.finalizers:
                logger.info(f"RDSInstance {record.key} released its last finalizer")
                return

        try:
            obj = self._replace(record, status=True)
        except RecordNotFoundError:
            if record.deletion_intended and not record.metadata.finalizers:
                return
            raise
        record.metadata.resource_version = obj.get("metadata", {}).get("resourceVersion")
        record.raw = obj

    def _finalizers_changed(self, record: RDSInstance) -> bool:
        stored = (record.raw.get("metadata") or {}).get("finalizers") or []
        return list(record.metadata.finalizers) != list(stored)

    def _body(self, record: RDSInstance) -> dict[str, Any]:
        body = copy.deepcopy(record.raw) if record.raw else record.to_dict()
        metadata = body.setdefault("metadata", {})
        metadata["finalizers"] = list(record.metadata.finalizers)
        metadata["resourceVersion"] = record.metadata.resource_version
        body["status"] = record.status.to_dict()
        return body

    def _replace(self, record: RDSInstance, status: bool) -> dict[str, Any]:
        if status:
            operation = "replace_rds_instance_status"
            func = self.api.replace_namespaced_custom_object_status
        else:
            operation = "replace_rds_instance"
            func = self.api.replace_namespaced_custom_object

        try:
            return call_api(
                operation,
                func,
                group=self.group,
                version=self.version,
                namespace=record.metadata.namespace,
                plural=self.plural,
                name=record.metadata.name,
                body=self._body(record),
                _request_timeout=self.request_timeout,
            )
        except client.exceptions.ApiException as e:
            if e.status == 409:
                raise ConflictError(
                    f"RDSInstance {record.key} was modified since resourceVersion "
                    f"{record.metadata.resource_version}"
                ) from e
            if e.status == 404:
                raise RecordNotFoundError(f"RDSInstance {record.key} not found") from e
            raise
