"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_INSTANCE_AVAILABLE,
    EVENT_REASON_INSTANCE_CREATED,
    EVENT_REASON_INSTANCE_DELETED,
    EVENT_REASON_INSTANCE_RETAINED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_REFERENCES_BLOCKED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object the event refers to (apiVersion, kind and metadata)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_references_blocked(body: dict[str, Any], message: str) -> None:
    """Emit references blocked event."""
    emit_event(body, EVENT_REASON_REFERENCES_BLOCKED, message, type_="Warning")


def emit_instance_created(body: dict[str, Any], instance_name: str) -> None:
    """Emit instance created event."""
    emit_event(body, EVENT_REASON_INSTANCE_CREATED, f"DB instance {instance_name} created")


def emit_instance_available(body: dict[str, Any], instance_name: str) -> None:
    """Emit instance available event."""
    emit_event(body, EVENT_REASON_INSTANCE_AVAILABLE, f"DB instance {instance_name} is available")


def emit_instance_deleted(body: dict[str, Any], instance_name: str) -> None:
    """Emit instance deleted event."""
    emit_event(body, EVENT_REASON_INSTANCE_DELETED, f"DB instance {instance_name} deleted")


def emit_instance_retained(body: dict[str, Any], instance_name: str) -> None:
    """Emit instance retained event."""
    emit_event(body, EVENT_REASON_INSTANCE_RETAINED, f"DB instance {instance_name} retained per reclaimPolicy")


class KopfEventRecorder:
    """Records events against RDSInstance records through kopf."""

    def reconcile_failed(self, body: dict[str, Any], message: str) -> None:
        emit_reconcile_failed(body, message)

    def references_blocked(self, body: dict[str, Any], message: str) -> None:
        emit_references_blocked(body, message)

    def instance_created(self, body: dict[str, Any], instance_name: str) -> None:
        emit_instance_created(body, instance_name)

    def instance_available(self, body: dict[str, Any], instance_name: str) -> None:
        emit_instance_available(body, instance_name)

    def instance_deleted(self, body: dict[str, Any], instance_name: str) -> None:
        emit_instance_deleted(body, instance_name)

    def instance_retained(self, body: dict[str, Any], instance_name: str) -> None:
        emit_instance_retained(body, instance_name)
