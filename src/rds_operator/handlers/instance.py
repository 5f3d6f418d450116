"""Handler for RDSInstance CRD."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from .. import metrics
from ..constants import KIND_RDS_INSTANCE
from ..controller.reconciler import Reconciler
from ..controller.result import Result
from ..exceptions import ConflictError
from ..models import Key
from ..utils.cancellation import Cancellation
from ..utils.events import emit_reconcile_started
from .base import BaseHandler

DEFAULT_REQUEUE_DELAY_SECONDS = 1.0
DEFAULT_MAX_REQUEUE_DELAY_SECONDS = 60.0


class InstanceHandler(BaseHandler):
    """Invokes the reconciler from kopf and turns its result into kopf retries."""

    def __init__(
        self,
        reconciler: Reconciler,
        requeue_delay: float = DEFAULT_REQUEUE_DELAY_SECONDS,
        max_requeue_delay: float = DEFAULT_MAX_REQUEUE_DELAY_SECONDS,
        logger: logging.Logger | None = None,
    ):
        """Initialize RDSInstance handler.

        Args:
            reconciler: Reconciler to invoke
            requeue_delay: Delay before the first immediate requeue
            max_requeue_delay: Upper bound of the growing immediate-requeue delay
            logger: Logger to write structured events to
        """
        super().__init__(KIND_RDS_INSTANCE, logger)
        self.reconciler = reconciler
        self.requeue_delay = requeue_delay
        self.max_requeue_delay = max_requeue_delay

    def handle(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        retry: int = 0,
        stopped: Cancellation | None = None,
    ) -> None:
        """Reconcile the RDSInstance kopf invoked us for.

        Raises:
            kopf.TemporaryError: If the reconciler asked to be invoked again
        """
        key = Key(meta.get("namespace", "default"), meta.get("name", ""))
        emit_reconcile_started(body)

        try:
            result = self.reconcile_with_metrics(meta, lambda: self.reconciler.reconcile(key, stopped))
        except ConflictError as e:
            # Re-read the record on the next attempt instead of waiting out kopf's default backoff
            raise kopf.TemporaryError(f"RDSInstance {key} changed during reconciliation", delay=self.requeue_delay) from e

        metrics.resource_status_total.labels(kind=self.kind, status="requeued" if result.requeue else "settled").inc()
        self.raise_for_requeue(result, retry)

    def requeue_delay_for(self, retry: int) -> float:
        """Delay of an immediate requeue, growing with consecutive retries."""
        return min(self.requeue_delay * (2 ** min(retry, 16)), self.max_requeue_delay)

    def raise_for_requeue(self, result: Result, retry: int = 0) -> None:
        """Translate a requeue hint into a kopf retry."""
        if not result.requeue:
            return
        if result.requeue_after is not None:
            raise kopf.TemporaryError("requeue requested", delay=result.requeue_after)
        raise kopf.TemporaryError("requeue requested", delay=self.requeue_delay_for(retry))
