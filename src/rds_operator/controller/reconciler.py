"""Lifecycle reconciler for RDSInstance records.

The phase to run is derived from the record on every invocation:

- a record marked for deletion is deleted,
- a record without ``status.instanceName`` has never been created,
- anything else is synced with the external instance.

References are resolved before any of these phases runs, and only until the
ReferencesResolved condition is true.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .. import metrics
from ..constants import COND_REFERENCES_RESOLVED, REASON_REFERENCES_BLOCKED
from ..exceptions import RecordNotFoundError, ReconcileCancelled, ReferencesBlockedError
from ..models import Key, RDSInstance
from ..services.rds.base import RDSClient
from ..tracing import trace_span
from ..utils.cancellation import Cancellation, check_cancelled
from ..utils.conditions import reconcile_error, references_blocked, references_resolved
from ..utils.errors import sanitize_exception
from .base import EventRecorder, RecordStore, StatusHandler
from .phases import Phases
from .result import Result

DEFAULT_LONG_WAIT_SECONDS = 60.0


class Connector(Protocol):
    """Builds a provider client for a record."""

    def connect(self, record: RDSInstance) -> RDSClient:
        ...


class ReferenceResolver(Protocol):
    """Resolves the references a record depends on.

    Raises ReferencesBlockedError when a reference cannot be satisfied yet.
    """

    def resolve(self, record: RDSInstance) -> None:
        ...


class Reconciler(StatusHandler):
    """Drives one RDSInstance toward its desired state per invocation."""

    def __init__(
        self,
        store: RecordStore,
        connector: Connector,
        resolver: ReferenceResolver,
        phases: Phases,
        recorder: EventRecorder | None = None,
        logger: logging.Logger | None = None,
        long_wait: float = DEFAULT_LONG_WAIT_SECONDS,
    ) -> None:
        super().__init__(store, recorder, logger)
        self.connector = connector
        self.resolver = resolver
        self.phases = phases
        self.long_wait = long_wait

    def reconcile(self, key: Key, cancel: Cancellation | None = None) -> Result:
        """Reconcile the record stored under key.

        Args:
            key: Namespace and name of the record
            cancel: Flag checked before every blocking call

        Returns:
            When the dispatcher should invoke the reconciler again

        Raises:
            ReconcileCancelled: If cancel was set before a blocking call
            ConflictError: If the record changed since it was read
        """
        with trace_span("reconcile_rdsinstance", kind=self.kind, attributes={"record.key": str(key)}):
            return self._reconcile(key, cancel)

    def _reconcile(self, key: Key, cancel: Cancellation | None) -> Result:
        check_cancelled(cancel, "get record")
        try:
            record = self.store.get(key)
        except RecordNotFoundError:
            # Deleted records need no work; owned cleanup ran before the finalizer was removed
            self.logger.debug(f"RDSInstance {key} not found, nothing to reconcile")
            return Result.done()

        self.log_debug(record, "Reconciling", reason="Reconciling", instance_name=record.status.instance_name)

        check_cancelled(cancel, "connect")
        try:
            client = self.connector.connect(record)
        except ReconcileCancelled:
            raise
        except Exception as e:
            return self.fail(record, e, cancel)

        if not record.status.conditions.is_true(COND_REFERENCES_RESOLVED):
            blocked = self._resolve_references(record, cancel)
            if blocked is not None:
                return blocked

        if record.deletion_intended:
            return self.phases.delete(record, client, cancel)

        if not record.status.instance_name:
            return self.phases.create(record, client, cancel)

        return self.phases.sync(record, client, cancel)

    def _resolve_references(self, record: RDSInstance, cancel: Cancellation | None) -> Result | None:
        """Resolve references, returning a long-wait result if they are not resolvable yet."""
        check_cancelled(cancel, "resolve references")
        try:
            self.resolver.resolve(record)
        except ReconcileCancelled:
            raise
        except ReferencesBlockedError as e:
            message = sanitize_exception(e)
            self.log_warning(record, f"References blocked: {message}", reason=REASON_REFERENCES_BLOCKED)
            metrics.references_blocked_total.labels(kind=self.kind).inc()
            if self.recorder is not None:
                self.recorder.references_blocked(record.to_dict(), message)
            condition = references_blocked(e)
        except Exception as e:
            self.log_error(record, "Reference resolution failed", error=e, reason="ReferenceResolutionFailed")
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            condition = reconcile_error(e)
        else:
            record.status.set_conditions(references_resolved())
            return None

        record.status.set_conditions(condition)
        self.persist(record, cancel)
        return Result.after(self.long_wait)
