"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest

from rds_operator.constants import API_GROUP_VERSION, KIND_RDS_INSTANCE
from rds_operator.exceptions import RecordNotFoundError
from rds_operator.models import ExternalState, RDSInstance
from rds_operator.services.aws.models import DBInstance


def make_body(
    name: str = "orders-db",
    namespace: str = "default",
    uid: str = "ABC-123",
    spec: dict[str, Any] | None = None,
    status: dict[str, Any] | None = None,
    finalizers: list[str] | None = None,
    deletion_timestamp: str | None = None,
) -> dict[str, Any]:
    """Build an RDSInstance body as returned by the API server."""
    metadata: dict[str, Any] = {
        "name": name,
        "namespace": namespace,
        "uid": uid,
        "resourceVersion": "100",
        "finalizers": list(finalizers or []),
    }
    if deletion_timestamp is not None:
        metadata["deletionTimestamp"] = deletion_timestamp

    body: dict[str, Any] = {
        "apiVersion": API_GROUP_VERSION,
        "kind": KIND_RDS_INSTANCE,
        "metadata": metadata,
        "spec": {
            "engine": "postgres",
            "masterUsername": "admin",
            "providerRef": {"name": "aws"},
            **(spec or {}),
        },
    }
    if status is not None:
        body["status"] = status
    return body


def make_record(**kwargs: Any) -> RDSInstance:
    """Build an RDSInstance record."""
    return RDSInstance.from_dict(make_body(**kwargs))


class FakeStore:
    """In-memory record store that remembers every persisted snapshot."""

    def __init__(self, record: RDSInstance | None = None) -> None:
        self.record = record
        self.updates: list[dict[str, Any]] = []
        self.error: Exception | None = None

    def get(self, key):
        if self.record is None:
            raise RecordNotFoundError(f"RDSInstance {key} not found")
        return self.record

    def update(self, record: RDSInstance) -> None:
        if self.error is not None:
            raise self.error
        self.updates.append(record.to_dict())


class FakeRDSClient:
    """RDS client recording calls, with scripted results."""

    def __init__(self) -> None:
        self.created: list[tuple[str, str]] = []
        self.deleted: list[str] = []
        self.create_error: Exception | None = None
        self.get_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.instance = DBInstance(name="", state=ExternalState.CREATING)

    def create_instance(self, name, password, spec):
        if self.create_error is not None:
            raise self.create_error
        self.created.append((name, password))
        return DBInstance(name=name, state=ExternalState.CREATING)

    def get_instance(self, name):
        if self.get_error is not None:
            raise self.get_error
        return self.instance

    def delete_instance(self, name):
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(name)


@pytest.fixture
def record() -> RDSInstance:
    return make_record()


@pytest.fixture
def store(record: RDSInstance) -> FakeStore:
    return FakeStore(record)


@pytest.fixture
def rds_client() -> FakeRDSClient:
    return FakeRDSClient()


@pytest.fixture
def publisher() -> Mock:
    return Mock()


@pytest.fixture
def recorder() -> Mock:
    return Mock()
