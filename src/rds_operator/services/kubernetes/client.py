"""Kubernetes API client construction."""

from __future__ import annotations

import time
from typing import Any, Callable

from kubernetes import client, config

from ... import metrics


def call_api(operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
    """Call a Kubernetes API method, recording call metrics."""
    start_time = time.time()
    try:
        result = func(**kwargs)
        metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
        return result
    except Exception:
        metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
        raise
    finally:
        duration = time.time() - start_time
        metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)


def load_kube_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def get_custom_objects_api() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client."""
    return client.CustomObjectsApi()


def get_core_api() -> client.CoreV1Api:
    """Get Kubernetes CoreV1Api client."""
    return client.CoreV1Api()
