"""Record model for RDSInstance resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import (
    API_GROUP_VERSION,
    BINDING_PHASE_UNBINDABLE,
    BINDING_PHASE_UNBOUND,
    KIND_RDS_INSTANCE,
    RECLAIM_DELETE,
    RECLAIM_RETAIN,
)
from .exceptions import UnexpectedStateError
from .utils.conditions import Condition, Conditions


class ReclaimPolicy(str, Enum):
    """What happens to the external resource when the record is deleted."""

    DELETE = RECLAIM_DELETE
    RETAIN = RECLAIM_RETAIN


class ExternalState(str, Enum):
    """Database instance states reported by the provider."""

    CREATING = "creating"
    AVAILABLE = "available"
    FAILED = "failed"
    DELETING = "deleting"

    @classmethod
    def parse(cls, value: str | None) -> ExternalState:
        """Parse a provider state string.

        Raises:
            UnexpectedStateError: If the value is not a known state
        """
        try:
            return cls(value)
        except ValueError:
            raise UnexpectedStateError(str(value or "")) from None


@dataclass(frozen=True)
class Key:
    """Identity of a record in the store."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ObjectRef:
    """Reference to another object, optionally in another namespace."""

    name: str
    namespace: str | None = None
    api_version: str | None = None
    kind: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ObjectRef | None:
        if not data or not data.get("name"):
            return None
        return cls(
            name=data["name"],
            namespace=data.get("namespace"),
            api_version=data.get("apiVersion"),
            kind=data.get("kind"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.namespace:
            data["namespace"] = self.namespace
        if self.api_version:
            data["apiVersion"] = self.api_version
        if self.kind:
            data["kind"] = self.kind
        return data


@dataclass
class Metadata:
    """Object metadata the reconciler reads or owns."""

    name: str
    namespace: str = "default"
    uid: str = ""
    resource_version: str | None = None
    generation: int = 0
    deletion_timestamp: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    # Insertion-ordered set
    finalizers: dict[str, None] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metadata:
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", "default"),
            uid=data.get("uid", ""),
            resource_version=data.get("resourceVersion"),
            generation=data.get("generation", 0),
            deletion_timestamp=data.get("deletionTimestamp"),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            finalizers=dict.fromkeys(data.get("finalizers") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "namespace": self.namespace,
            "finalizers": list(self.finalizers),
        }
        if self.uid:
            data["uid"] = self.uid
        if self.resource_version is not None:
            data["resourceVersion"] = self.resource_version
        if self.generation:
            data["generation"] = self.generation
        if self.deletion_timestamp is not None:
            data["deletionTimestamp"] = self.deletion_timestamp
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        return data


@dataclass
class RDSInstanceSpec:
    """Desired state of a database instance."""

    engine: str
    master_username: str
    provider_ref: ObjectRef
    engine_version: str | None = None
    instance_class: str = "db.t3.micro"
    size: int = 20
    security_groups: list[str] = field(default_factory=list)
    subnet_group_name: str | None = None
    multi_az: bool = False
    publicly_accessible: bool = False
    reclaim_policy: ReclaimPolicy = ReclaimPolicy.RETAIN
    claim_ref: ObjectRef | None = None
    class_ref: ObjectRef | None = None
    write_connection_secret_to_ref: ObjectRef | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RDSInstanceSpec:
        provider_ref = ObjectRef.from_dict(data.get("providerRef"))
        if provider_ref is None:
            raise ValueError("providerRef.name is required")
        return cls(
            engine=data.get("engine", ""),
            master_username=data.get("masterUsername", ""),
            provider_ref=provider_ref,
            engine_version=data.get("engineVersion"),
            instance_class=data.get("class", "db.t3.micro"),
            size=int(data.get("size", 20)),
            security_groups=list(data.get("securityGroups") or []),
            subnet_group_name=data.get("subnetGroupName"),
            multi_az=bool(data.get("multiAZ", False)),
            publicly_accessible=bool(data.get("publiclyAccessible", False)),
            reclaim_policy=ReclaimPolicy(data.get("reclaimPolicy", RECLAIM_RETAIN)),
            claim_ref=ObjectRef.from_dict(data.get("claimRef")),
            class_ref=ObjectRef.from_dict(data.get("classRef")),
            write_connection_secret_to_ref=ObjectRef.from_dict(data.get("writeConnectionSecretToRef")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "engine": self.engine,
            "masterUsername": self.master_username,
            "providerRef": self.provider_ref.to_dict(),
            "class": self.instance_class,
            "size": self.size,
            "multiAZ": self.multi_az,
            "publiclyAccessible": self.publicly_accessible,
            "reclaimPolicy": self.reclaim_policy.value,
        }
        if self.engine_version:
            data["engineVersion"] = self.engine_version
        if self.security_groups:
            data["securityGroups"] = list(self.security_groups)
        if self.subnet_group_name:
            data["subnetGroupName"] = self.subnet_group_name
        if self.claim_ref is not None:
            data["claimRef"] = self.claim_ref.to_dict()
        if self.class_ref is not None:
            data["classRef"] = self.class_ref.to_dict()
        if self.write_connection_secret_to_ref is not None:
            data["writeConnectionSecretToRef"] = self.write_connection_secret_to_ref.to_dict()
        return data


@dataclass
class RDSInstanceStatus:
    """Observed state, owned by the reconciler."""

    instance_name: str = ""
    state: str = ""
    endpoint: str = ""
    provider_id: str = ""
    binding_phase: str = BINDING_PHASE_UNBINDABLE
    conditions: Conditions = field(default_factory=Conditions)

    def set_conditions(self, *conditions: Condition) -> None:
        self.conditions.set(*conditions)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RDSInstanceStatus:
        data = data or {}
        return cls(
            instance_name=data.get("instanceName", ""),
            state=data.get("state", ""),
            endpoint=data.get("endpoint", ""),
            provider_id=data.get("providerID", ""),
            binding_phase=data.get("bindingPhase", BINDING_PHASE_UNBINDABLE),
            conditions=Conditions.from_list(data.get("conditions")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "instanceName": self.instance_name,
            "state": self.state,
            "endpoint": self.endpoint,
            "providerID": self.provider_id,
            "bindingPhase": self.binding_phase,
            "conditions": self.conditions.to_list(),
        }


@dataclass
class RDSInstance:
    """Desired and observed state of one managed database instance."""

    metadata: Metadata
    spec: RDSInstanceSpec
    status: RDSInstanceStatus = field(default_factory=RDSInstanceStatus)
    # Body as read from the API server, written back with only finalizers and status changed
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def key(self) -> Key:
        return Key(self.metadata.namespace, self.metadata.name)

    @property
    def deletion_intended(self) -> bool:
        return self.metadata.deletion_timestamp is not None

    def has_finalizer(self, finalizer: str) -> bool:
        return finalizer in self.metadata.finalizers

    def add_finalizer(self, finalizer: str) -> None:
        self.metadata.finalizers.setdefault(finalizer, None)

    def remove_finalizer(self, finalizer: str) -> None:
        self.metadata.finalizers.pop(finalizer, None)

    def set_bindable(self) -> None:
        """Mark the record as consumable, keeping an existing binding."""
        if self.status.binding_phase == BINDING_PHASE_UNBINDABLE:
            self.status.binding_phase = BINDING_PHASE_UNBOUND

    def owner_reference(self) -> dict[str, Any]:
        return {
            "apiVersion": API_GROUP_VERSION,
            "kind": KIND_RDS_INSTANCE,
            "name": self.metadata.name,
            "uid": self.metadata.uid,
            "controller": True,
            "blockOwnerDeletion": True,
        }

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> RDSInstance:
        return cls(
            metadata=Metadata.from_dict(body.get("metadata") or {}),
            spec=RDSInstanceSpec.from_dict(body.get("spec") or {}),
            status=RDSInstanceStatus.from_dict(body.get("status")),
            raw=body,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_GROUP_VERSION,
            "kind": KIND_RDS_INSTANCE,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }
