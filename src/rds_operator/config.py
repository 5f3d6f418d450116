"""Operator configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime settings of the operator."""

    metrics_port: int = 8080
    resync_interval_seconds: float = 300.0
    long_wait_seconds: float = 60.0
    requeue_delay_seconds: float = 1.0
    request_timeout_seconds: float = 30.0
    max_workers: int = 4
    password_length: int = 20
    aws_max_attempts: int = 3
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Build the configuration from environment variables.

        Raises:
            ValueError: If a variable holds a malformed number
        """
        return cls(
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            resync_interval_seconds=float(os.getenv("RESYNC_INTERVAL_SECONDS", "300")),
            long_wait_seconds=float(os.getenv("LONG_WAIT_SECONDS", "60")),
            requeue_delay_seconds=float(os.getenv("REQUEUE_DELAY_SECONDS", "1")),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
            max_workers=int(os.getenv("MAX_WORKERS", "4")),
            password_length=int(os.getenv("PASSWORD_LENGTH", "20")),
            aws_max_attempts=int(os.getenv("AWS_MAX_ATTEMPTS", "3")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
