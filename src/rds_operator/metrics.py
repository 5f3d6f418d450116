"""Prometheus metrics for the RDS Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "rds_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "rds_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "rds_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "rds_operator_resource_status_total",
    "Observed resource status after reconciliation",
    ["kind", "status"],
)

# RDS operation metrics
instance_operations_total = Counter(
    "rds_operator_instance_operations_total",
    "Total number of RDS instance lifecycle operations",
    ["operation", "result"],
)

# Reference resolution metrics
references_blocked_total = Counter(
    "rds_operator_references_blocked_total",
    "Total number of reconciliations blocked on unresolved references",
    ["kind"],
)

# API call metrics
api_call_total = Counter(
    "rds_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "rds_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)
