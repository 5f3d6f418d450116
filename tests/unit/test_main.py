"""Tests for operator assembly."""

from __future__ import annotations

from unittest.mock import patch

import kopf

from rds_operator.config import OperatorConfig
from rds_operator.handlers.instance import InstanceHandler
from rds_operator.main import RESYNC_INTERVAL_SECONDS, build_instance_handler, resync_rds_instance


class TestBuildInstanceHandler:
    """Test cases for build_instance_handler."""

    @patch("rds_operator.main.get_core_api")
    @patch("rds_operator.main.get_custom_objects_api")
    @patch("rds_operator.main.load_kube_config")
    def test_build_instance_handler(self, mock_load, mock_custom_api, mock_core_api):
        """Test that configuration reaches the assembled collaborators."""
        config = OperatorConfig(
            long_wait_seconds=90.0,
            requeue_delay_seconds=2.0,
            request_timeout_seconds=12.0,
            password_length=24,
            aws_max_attempts=4,
        )

        handler = build_instance_handler(config)

        mock_load.assert_called_once()
        assert isinstance(handler, InstanceHandler)
        assert handler.requeue_delay == 2.0
        assert handler.max_requeue_delay == 90.0

        reconciler = handler.reconciler
        assert reconciler.long_wait == 90.0
        assert reconciler.store.request_timeout == 12.0
        assert reconciler.connector.max_attempts == 4
        assert reconciler.phases.password_length == 24
        assert reconciler.phases.store is reconciler.store


class TestResyncTimer:
    """Test cases for the resync timer registration."""

    def test_first_tick_waits_one_interval(self):
        """Test that the resync timer does not fire alongside on.create."""
        registry = kopf.get_default_registry()
        timers = [h for h in registry._spawning.get_all_handlers() if h.fn is resync_rds_instance]

        assert len(timers) == 1
        assert timers[0].interval == RESYNC_INTERVAL_SECONDS
        assert timers[0].initial_delay == RESYNC_INTERVAL_SECONDS
