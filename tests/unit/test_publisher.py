"""Tests for connection secret publishing."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from kubernetes import client

from conftest import make_record
from rds_operator.services.kubernetes.publisher import SecretPublisher, connection_secret_name


class TestConnectionSecretName:
    """Test cases for connection_secret_name."""

    def test_default_name(self):
        """Test the name used without writeConnectionSecretToRef."""
        assert connection_secret_name(make_record()) == "orders-db-connection"

    def test_explicit_name(self):
        """Test that writeConnectionSecretToRef names the secret."""
        record = make_record(spec={"writeConnectionSecretToRef": {"name": "orders-conn"}})
        assert connection_secret_name(record) == "orders-conn"


class TestSecretPublisher:
    """Test cases for SecretPublisher."""

    @patch("rds_operator.services.kubernetes.publisher.patch_secret")
    @patch("rds_operator.services.kubernetes.publisher.create_secret")
    def test_publish_creates_owned_secret(self, mock_create, mock_patch):
        """Test that the first publish creates a secret owned by the record."""
        api = Mock()
        record = make_record()
        publisher = SecretPublisher(api, request_timeout=5)

        publisher.publish(record, {"username": "admin", "password": "pw"})

        kwargs = mock_create.call_args.kwargs
        assert kwargs["namespace"] == "default"
        assert kwargs["secret_name"] == "orders-db-connection"
        assert kwargs["data"] == {"username": "admin", "password": "pw"}
        assert kwargs["owner_references"][0]["uid"] == "ABC-123"
        assert kwargs["owner_references"][0]["kind"] == "RDSInstance"
        assert kwargs["request_timeout"] == 5
        mock_patch.assert_not_called()

    @patch("rds_operator.services.kubernetes.publisher.patch_secret")
    @patch("rds_operator.services.kubernetes.publisher.create_secret")
    def test_publish_merges_into_existing_secret(self, mock_create, mock_patch):
        """Test that an existing secret is patched with the new keys."""
        api = Mock()
        mock_create.side_effect = client.exceptions.ApiException(status=409)
        publisher = SecretPublisher(api)

        publisher.publish(make_record(), {"username": "admin", "endpoint": "db.example.com"})

        mock_patch.assert_called_once_with(
            api=api,
            namespace="default",
            secret_name="orders-db-connection",
            data={"username": "admin", "endpoint": "db.example.com"},
            request_timeout=None,
        )

    @patch("rds_operator.services.kubernetes.publisher.patch_secret")
    @patch("rds_operator.services.kubernetes.publisher.create_secret")
    def test_publish_other_error_propagates(self, mock_create, mock_patch):
        """Test that create failures other than conflicts propagate."""
        mock_create.side_effect = client.exceptions.ApiException(status=403)
        publisher = SecretPublisher(Mock())

        with pytest.raises(client.exceptions.ApiException):
            publisher.publish(make_record(), {"username": "admin"})

        mock_patch.assert_not_called()
