"""Main entry point for the RDS Operator."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from . import tracing
from .builders.provider import ProviderConnector
from .config import OperatorConfig
from .constants import API_GROUP, API_GROUP_VERSION, KIND_RDS_INSTANCE
from .controller.phases import InstancePhases
from .controller.reconciler import Reconciler
from .handlers.instance import InstanceHandler
from .services.kubernetes.client import get_core_api, get_custom_objects_api, load_kube_config
from .services.kubernetes.publisher import SecretPublisher
from .services.kubernetes.resolver import ReferenceResolver
from .services.kubernetes.store import KubernetesRecordStore
from .utils.events import KopfEventRecorder

# Read at import time: kopf needs the timer interval when handlers are registered
RESYNC_INTERVAL_SECONDS = OperatorConfig.from_env().resync_interval_seconds


def build_instance_handler(config: OperatorConfig) -> InstanceHandler:
    """Assemble the RDSInstance reconciler and its collaborators."""
    load_kube_config()
    custom_api = get_custom_objects_api()
    core_api = get_core_api()
    timeout = config.request_timeout_seconds

    logger = logging.getLogger("rds_operator.controller")
    recorder = KopfEventRecorder()
    store = KubernetesRecordStore(custom_api, request_timeout=timeout)

    phases = InstancePhases(
        store,
        SecretPublisher(core_api, request_timeout=timeout),
        recorder=recorder,
        logger=logger,
        password_length=config.password_length,
    )
    reconciler = Reconciler(
        store,
        ProviderConnector(custom_api, core_api, request_timeout=timeout, max_attempts=config.aws_max_attempts),
        ReferenceResolver(custom_api, core_api, request_timeout=timeout),
        phases,
        recorder=recorder,
        logger=logger,
        long_wait=config.long_wait_seconds,
    )
    return InstanceHandler(
        reconciler,
        requeue_delay=config.requeue_delay_seconds,
        max_requeue_delay=config.long_wait_seconds,
        logger=logger,
    )


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    config = OperatorConfig.from_env()

    structured_logging.setup_structured_logging(config.log_level)
    tracing.initialize_tracing()

    # Keep kopf's own bookkeeping out of status, which the reconciler owns
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(prefix=API_GROUP)
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(prefix=API_GROUP)

    settings.posting.level = logging.WARNING
    settings.networking.request_timeout = config.request_timeout_seconds
    settings.execution.max_workers = config.max_workers

    health.start_health_server(config.metrics_port)

    memo.instance_handler = build_instance_handler(config)


@kopf.on.create(API_GROUP_VERSION, KIND_RDS_INSTANCE)
@kopf.on.update(API_GROUP_VERSION, KIND_RDS_INSTANCE)
@kopf.on.resume(API_GROUP_VERSION, KIND_RDS_INSTANCE)
@kopf.on.delete(API_GROUP_VERSION, KIND_RDS_INSTANCE, optional=True)
def handle_rds_instance(
    body: dict[str, Any],
    meta: dict[str, Any],
    memo: kopf.Memo,
    retry: int,
    **kwargs: Any,
) -> None:
    """Handle RDSInstance changes and deletion."""
    memo.instance_handler.handle(body, meta, retry=retry, stopped=kwargs.get("stopped"))


@kopf.timer(
    API_GROUP_VERSION,
    KIND_RDS_INSTANCE,
    interval=RESYNC_INTERVAL_SECONDS,
    initial_delay=RESYNC_INTERVAL_SECONDS,
)
def resync_rds_instance(
    body: dict[str, Any],
    meta: dict[str, Any],
    memo: kopf.Memo,
    retry: int,
    stopped: kopf.DaemonStopped,
    **kwargs: Any,
) -> None:
    """Periodically resync RDSInstance status with the external instance."""
    memo.instance_handler.handle(body, meta, retry=retry, stopped=stopped)
