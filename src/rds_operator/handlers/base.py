"""Base handler class with common functionality for all CRD handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from .. import metrics
from ..constants import FIELD_MANAGER
from ..logging import log_resource_event
from ..models import RDSInstance
from ..utils.errors import sanitize_exception

_T = TypeVar("_T")


class BaseHandler:
    """Base class for all CRD handlers with common functionality."""

    def __init__(self, kind: str, logger: logging.Logger | None = None):
        """Initialize base handler.

        Args:
            kind: The Kubernetes resource kind (e.g., "RDSInstance")
            logger: Logger to write structured events to
        """
        self.kind = kind
        self.logger = logger or logging.getLogger(__name__)

    def _get_resource_context(self, resource: RDSInstance | dict[str, Any]) -> dict[str, Any]:
        """Extract common resource context from a record or its metadata.

        Args:
            resource: Record, or Kubernetes resource metadata

        Returns:
            Dictionary with resource context fields
        """
        if isinstance(resource, RDSInstance):
            return {
                "name": resource.metadata.name,
                "namespace": resource.metadata.namespace,
                "uid": resource.metadata.uid or "unknown",
            }
        return {
            "name": resource.get("name", "unknown"),
            "namespace": resource.get("namespace", "default"),
            "uid": resource.get("uid", "unknown"),
        }

    def _log(
        self,
        level: int,
        resource: RDSInstance | dict[str, Any],
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        ctx = self._get_resource_context(resource)
        log_resource_event(
            self.logger,
            controller=FIELD_MANAGER,
            resource_kind=self.kind,
            resource_name=ctx["name"],
            namespace=ctx["namespace"],
            uid=ctx["uid"],
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_debug(
        self,
        resource: RDSInstance | dict[str, Any],
        message: str,
        event: str = "debug",
        reason: str = "Debug",
        **kwargs: Any,
    ) -> None:
        """Log a debug-level structured log message."""
        self._log(logging.DEBUG, resource, message, event, reason, **kwargs)

    def log_info(
        self,
        resource: RDSInstance | dict[str, Any],
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message.

        Args:
            resource: Record or Kubernetes resource metadata
            message: Log message
            event: Event type (default: "info")
            reason: Reason for the event (default: "Info")
            **kwargs: Additional fields to include in the log
        """
        self._log(logging.INFO, resource, message, event, reason, **kwargs)

    def log_warning(
        self,
        resource: RDSInstance | dict[str, Any],
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, resource, message, event, reason, **kwargs)

    def log_error(
        self,
        resource: RDSInstance | dict[str, Any],
        message: str,
        error: BaseException | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            resource: Record or Kubernetes resource metadata
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()

        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__

        self._log(logging.ERROR, resource, message, event, reason, **log_data)

    def reconcile_with_metrics(
        self,
        meta: dict[str, Any],
        reconcile_fn: Callable[[], _T],
    ) -> _T:
        """Execute reconciliation with metrics and error handling.

        Args:
            meta: Kubernetes resource metadata
            reconcile_fn: Function to execute for reconciliation

        Returns:
            Whatever reconcile_fn returns
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            result = reconcile_fn()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
            return result
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            self.log_error(meta, "Reconciliation failed", error=e, reason="ReconciliationFailed")
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)
