"""Tests for the Kubernetes record store."""

from __future__ import annotations

import copy
from unittest.mock import Mock

import pytest
from kubernetes import client

from conftest import make_body
from rds_operator.constants import FINALIZER
from rds_operator.exceptions import ConflictError, RecordNotFoundError
from rds_operator.models import Key, RDSInstance
from rds_operator.services.kubernetes.store import KubernetesRecordStore


def _echo(resource_version: str):
    """Make the API return the submitted body with a new resourceVersion."""

    def replace(**kwargs):
        body = copy.deepcopy(kwargs["body"])
        body["metadata"]["resourceVersion"] = resource_version
        return body

    return replace


class TestGet:
    """Test cases for KubernetesRecordStore.get."""

    def test_get_returns_record(self):
        """Test that a stored object is parsed into a record."""
        api = Mock()
        api.get_namespaced_custom_object.return_value = make_body()
        store = KubernetesRecordStore(api, request_timeout=5)

        record = store.get(Key("default", "orders-db"))

        assert record.metadata.name == "orders-db"
        assert record.spec.engine == "postgres"
        api.get_namespaced_custom_object.assert_called_once_with(
            group="database.cloud37.dev",
            version="v1alpha1",
            namespace="default",
            plural="rdsinstances",
            name="orders-db",
            _request_timeout=5,
        )

    def test_get_not_found(self):
        """Test that a missing object raises RecordNotFoundError."""
        api = Mock()
        api.get_namespaced_custom_object.side_effect = client.exceptions.ApiException(status=404)
        store = KubernetesRecordStore(api)

        with pytest.raises(RecordNotFoundError):
            store.get(Key("default", "orders-db"))

    def test_get_other_error_propagates(self):
        """Test that other API errors are not translated."""
        api = Mock()
        api.get_namespaced_custom_object.side_effect = client.exceptions.ApiException(status=500)
        store = KubernetesRecordStore(api)

        with pytest.raises(client.exceptions.ApiException):
            store.get(Key("default", "orders-db"))


class TestUpdate:
    """Test cases for KubernetesRecordStore.update."""

    def test_status_only_when_finalizers_unchanged(self):
        """Test that only status is written when finalizers did not change."""
        api = Mock()
        api.replace_namespaced_custom_object_status.side_effect = _echo("101")
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(make_body(finalizers=[FINALIZER]))
        record.status.instance_name = "postgres-abc-123"

        store.update(record)

        api.replace_namespaced_custom_object.assert_not_called()
        body = api.replace_namespaced_custom_object_status.call_args.kwargs["body"]
        assert body["status"]["instanceName"] == "postgres-abc-123"
        assert body["metadata"]["resourceVersion"] == "100"
        assert record.metadata.resource_version == "101"

    def test_finalizers_written_before_status(self):
        """Test that a new finalizer is written before status, chaining resourceVersion."""
        api = Mock()
        calls = []

        def replace(**kwargs):
            calls.append(("object", kwargs["body"]["metadata"]["resourceVersion"]))
            return _echo("101")(**kwargs)

        def replace_status(**kwargs):
            calls.append(("status", kwargs["body"]["metadata"]["resourceVersion"]))
            return _echo("102")(**kwargs)

        api.replace_namespaced_custom_object.side_effect = replace
        api.replace_namespaced_custom_object_status.side_effect = replace_status
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(make_body())
        record.add_finalizer(FINALIZER)

        store.update(record)

        assert calls == [("object", "100"), ("status", "101")]
        assert record.metadata.resource_version == "102"

    def test_update_preserves_user_spec(self):
        """Test that fields the model does not know are written back unchanged."""
        api = Mock()
        api.replace_namespaced_custom_object_status.side_effect = _echo("101")
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(make_body(spec={"customField": "keep-me"}))

        store.update(record)

        body = api.replace_namespaced_custom_object_status.call_args.kwargs["body"]
        assert body["spec"]["customField"] == "keep-me"

    def test_conflict_raises_conflict_error(self):
        """Test that a stale resourceVersion raises ConflictError."""
        api = Mock()
        api.replace_namespaced_custom_object_status.side_effect = client.exceptions.ApiException(status=409)
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(make_body())

        with pytest.raises(ConflictError):
            store.update(record)

    def test_last_finalizer_removed_skips_status(self):
        """Test that a deleting record releasing its last finalizer writes no status."""
        api = Mock()
        api.replace_namespaced_custom_object.side_effect = _echo("101")
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(
            make_body(finalizers=[FINALIZER], deletion_timestamp="2026-01-01T00:00:00Z")
        )
        record.remove_finalizer(FINALIZER)

        store.update(record)

        body = api.replace_namespaced_custom_object.call_args.kwargs["body"]
        assert body["metadata"]["finalizers"] == []
        api.replace_namespaced_custom_object_status.assert_not_called()

    def test_status_not_found_after_release_is_ignored(self):
        """Test that a purged record is not an error once its finalizers are gone."""
        api = Mock()
        api.replace_namespaced_custom_object_status.side_effect = client.exceptions.ApiException(status=404)
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(make_body(deletion_timestamp="2026-01-01T00:00:00Z"))

        store.update(record)

    def test_status_not_found_raises(self):
        """Test that a record vanishing mid-reconcile is reported."""
        api = Mock()
        api.replace_namespaced_custom_object_status.side_effect = client.exceptions.ApiException(status=404)
        store = KubernetesRecordStore(api)
        record = RDSInstance.from_dict(make_body(finalizers=[FINALIZER]))

        with pytest.raises(RecordNotFoundError):
            store.update(record)
