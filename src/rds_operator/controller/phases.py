"""Create, sync and delete phases of the RDSInstance lifecycle.

Every phase either mutates the record status and persists it before
returning, or raises before causing any side effect beyond the failed call.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from .. import metrics
from ..builders.instance import instance_name_for
from ..constants import (
    CONNECTION_ENDPOINT_KEY,
    CONNECTION_PASSWORD_KEY,
    CONNECTION_USERNAME_KEY,
    COND_READY,
    FINALIZER,
    REASON_AVAILABLE,
)
from ..exceptions import AlreadyExistsError, NotFoundError, UnexpectedStateError
from ..models import ExternalState, RDSInstance, ReclaimPolicy
from ..services.rds.base import RDSClient
from ..tracing import trace_span
from ..utils.cancellation import Cancellation, check_cancelled
from ..utils.conditions import (
    available,
    creating,
    deleting,
    reconcile_success,
    unavailable,
)
from ..utils.passwords import DEFAULT_PASSWORD_LENGTH, generate_password
from .base import EventRecorder, RecordStore, StatusHandler
from .result import Result


class ConnectionPublisher(Protocol):
    """Durably stores connection details for a record."""

    def publish(self, record: RDSInstance, details: dict[str, str]) -> None:
        ...


class Phases(Protocol):
    """The lifecycle phases the reconciler dispatches to."""

    def create(self, record: RDSInstance, client: RDSClient, cancel: Cancellation | None = None) -> Result:
        ...

    def sync(self, record: RDSInstance, client: RDSClient, cancel: Cancellation | None = None) -> Result:
        ...

    def delete(self, record: RDSInstance, client: RDSClient, cancel: Cancellation | None = None) -> Result:
        ...


class InstancePhases(StatusHandler):
    """Lifecycle phases for RDS database instances."""

    def __init__(
        self,
        store: RecordStore,
        publisher: ConnectionPublisher,
        recorder: EventRecorder | None = None,
        logger: logging.Logger | None = None,
        password_generator: Callable[[int], str] = generate_password,
        password_length: int = DEFAULT_PASSWORD_LENGTH,
    ) -> None:
        super().__init__(store, recorder, logger)
        self.publisher = publisher
        self.password_generator = password_generator
        self.password_length = password_length

    def create(self, record: RDSInstance, client: RDSClient, cancel: Cancellation | None = None) -> Result:
        """Create the external instance and mark the record as provisioned."""
        record.status.set_conditions(creating())
        name = instance_name_for(record)
        password = self.password_generator(self.password_length)

        check_cancelled(cancel, "create instance")
        with trace_span("create_instance", kind=self.kind, attributes={"db.instance": name}):
            try:
                client.create_instance(name, password, record.spec)
                created = True
            except AlreadyExistsError:
                # An existing instance does not use the password generated above
                created = False
                self.log_info(record, f"DB instance {name} already exists", reason="AlreadyExists", instance_name=name)
                metrics.instance_operations_total.labels(operation="create", result="already_exists").inc()
            except Exception as e:
                metrics.instance_operations_total.labels(operation="create", result="failed").inc()
                return self.fail(record, e, cancel)

        if created:
            metrics.instance_operations_total.labels(operation="create", result="success").inc()
            check_cancelled(cancel, "publish credentials")
            try:
                self.publisher.publish(record, {
                    CONNECTION_USERNAME_KEY: record.spec.master_username,
                    CONNECTION_PASSWORD_KEY: password,
                })
            except Exception as e:
                return self.fail(record, e, cancel)
            self.log_info(record, f"Created DB instance {name}", reason="InstanceCreated", instance_name=name)
            if self.recorder is not None:
                self.recorder.instance_created(record.to_dict(), name)

        record.status.instance_name = name
        record.add_finalizer(FINALIZER)
        record.status.set_conditions(creating(), reconcile_success())
        self.persist(record, cancel)
        return Result.immediate()

    def sync(self, record: RDSInstance, client: RDSClient, cancel: Cancellation | None = None) -> Result:
        """Copy the external instance state into the record status."""
        name = record.status.instance_name

        check_cancelled(cancel, "get instance")
        with trace_span("sync_instance", kind=self.kind, attributes={"db.instance": name}):
            try:
                instance = client.get_instance(name)
            except NotFoundError as e:
                self.log_warning(record, f"DB instance {name} not found", reason="InstanceNotFound", instance_name=name)
                record.status.set_conditions(unavailable(str(e)), reconcile_success())
                self.persist(record, cancel)
                return Result.done()
            except UnexpectedStateError as e:
                record.status.state = e.state
                return self.fail(record, e, cancel)
            except Exception as e:
                return self.fail(record, e, cancel)

        was_available = self._ready_reason(record) == REASON_AVAILABLE
        record.status.state = instance.state.value
        record.status.endpoint = instance.endpoint
        record.status.provider_id = instance.provider_id

        if instance.state is ExternalState.CREATING:
            record.status.set_conditions(creating(), reconcile_success())
            self.persist(record, cancel)
            return Result.immediate()

        if instance.state is ExternalState.FAILED:
            record.status.set_conditions(unavailable(), reconcile_success())
            self.persist(record, cancel)
            return Result.done()

        if instance.state is not ExternalState.AVAILABLE:
            return self.fail(record, UnexpectedStateError(instance.state.value), cancel)

        record.status.set_conditions(available())
        record.set_bindable()

        check_cancelled(cancel, "publish connection details")
        try:
            self.publisher.publish(record, {
                CONNECTION_USERNAME_KEY: record.spec.master_username,
                CONNECTION_ENDPOINT_KEY: record.status.endpoint,
            })
        except Exception as e:
            return self.fail(record, e, cancel)

        if not was_available:
            self.log_info(record, f"DB instance {name} is available", reason="InstanceAvailable", instance_name=name)
            if self.recorder is not None:
                self.recorder.instance_available(record.to_dict(), name)

        record.status.set_conditions(reconcile_success())
        self.persist(record, cancel)
        return Result.done()

    def delete(self, record: RDSInstance, client: RDSClient, cancel: Cancellation | None = None) -> Result:
        """Delete or retain the external instance, then release the finalizer."""
        record.status.set_conditions(deleting())
        name = record.status.instance_name

        if record.spec.reclaim_policy is ReclaimPolicy.DELETE:
            # An instance created before a failed publish has no instanceName yet
            name = name or instance_name_for(record)
            check_cancelled(cancel, "delete instance")
            with trace_span("delete_instance", kind=self.kind, attributes={"db.instance": name}):
                try:
                    client.delete_instance(name)
                    metrics.instance_operations_total.labels(operation="delete", result="success").inc()
                    self.log_info(record, f"Deleted DB instance {name}", reason="InstanceDeleted", instance_name=name)
                    if self.recorder is not None:
                        self.recorder.instance_deleted(record.to_dict(), name)
                except NotFoundError:
                    metrics.instance_operations_total.labels(operation="delete", result="not_found").inc()
                    self.log_info(record, f"DB instance {name} already gone", reason="InstanceNotFound", instance_name=name)
                except Exception as e:
                    metrics.instance_operations_total.labels(operation="delete", result="failed").inc()
                    return self.fail(record, e, cancel)
        else:
            metrics.instance_operations_total.labels(operation="delete", result="retained").inc()
            self.log_info(record, f"Retaining DB instance {name} per reclaimPolicy=Retain", reason="InstanceRetained", instance_name=name)
            if name and self.recorder is not None:
                self.recorder.instance_retained(record.to_dict(), name)

        record.remove_finalizer(FINALIZER)
        record.status.set_conditions(reconcile_success())
        self.persist(record, cancel)
        return Result.done()

    @staticmethod
    def _ready_reason(record: RDSInstance) -> str | None:
        condition = record.status.conditions.get(COND_READY)
        return condition.reason if condition is not None else None
