"""Status persistence shared by the reconciler and its phases."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .. import metrics
from ..constants import KIND_RDS_INSTANCE, REASON_RECONCILE_ERROR
from ..handlers.base import BaseHandler
from ..models import Key, RDSInstance
from ..utils.cancellation import Cancellation, check_cancelled
from ..utils.conditions import reconcile_error
from ..utils.errors import sanitize_exception
from .result import Result


class RecordStore(Protocol):
    """Fetches and persists records."""

    def get(self, key: Key) -> RDSInstance:
        ...

    def update(self, record: RDSInstance) -> None:
        ...


class EventRecorder(Protocol):
    """Records Kubernetes events about a record."""

    def reconcile_failed(self, body: dict[str, Any], message: str) -> None:
        ...

    def references_blocked(self, body: dict[str, Any], message: str) -> None:
        ...

    def instance_created(self, body: dict[str, Any], instance_name: str) -> None:
        ...

    def instance_available(self, body: dict[str, Any], instance_name: str) -> None:
        ...

    def instance_deleted(self, body: dict[str, Any], instance_name: str) -> None:
        ...

    def instance_retained(self, body: dict[str, Any], instance_name: str) -> None:
        ...


class StatusHandler(BaseHandler):
    """Writes record status through the store and records failures."""

    def __init__(
        self,
        store: RecordStore,
        recorder: EventRecorder | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(KIND_RDS_INSTANCE, logger)
        self.store = store
        self.recorder = recorder

    def persist(self, record: RDSInstance, cancel: Cancellation | None = None) -> None:
        """Persist the record. Store errors, conflicts included, propagate."""
        check_cancelled(cancel, "update")
        self.store.update(record)

    def fail(self, record: RDSInstance, error: Exception, cancel: Cancellation | None = None) -> Result:
        """Record a ReconcileError condition, persist, and ask for an immediate retry."""
        message = sanitize_exception(error)
        self.log_error(record, "Reconcile attempt failed", error=error, reason=REASON_RECONCILE_ERROR)
        metrics.error_total.labels(kind=self.kind, error_type=type(error).__name__).inc()
        if self.recorder is not None:
            self.recorder.reconcile_failed(record.to_dict(), message)

        record.status.set_conditions(reconcile_error(error))
        self.persist(record, cancel)
        return Result.immediate()
