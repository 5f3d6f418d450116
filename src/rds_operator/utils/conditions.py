"""Utilities for managing resource conditions."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterator

from ..constants import (
    COND_READY,
    COND_REFERENCES_RESOLVED,
    COND_SYNCED,
    REASON_AVAILABLE,
    REASON_CREATING,
    REASON_DELETING,
    REASON_RECONCILE_ERROR,
    REASON_RECONCILE_SUCCESS,
    REASON_REFERENCES_BLOCKED,
    REASON_REFERENCES_RESOLVED,
    REASON_UNAVAILABLE,
)
from .errors import sanitize_exception

STATUS_TRUE = "True"
STATUS_FALSE = "False"
STATUS_UNKNOWN = "Unknown"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Condition:
    """A single typed status entry."""

    type: str
    status: str
    reason: str
    message: str = ""
    last_transition_time: str = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status,
            "reason": self.reason,
            "message": self.message,
            "lastTransitionTime": self.last_transition_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Condition:
        return cls(
            type=data.get("type", ""),
            status=data.get("status", STATUS_UNKNOWN),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
            last_transition_time=data.get("lastTransitionTime") or _now(),
        )


class Conditions:
    """Conditions keyed by type, one entry per type.

    Setting a condition replaces the entry of the same type. The transition
    time only moves when the status value changes.
    """

    def __init__(self, conditions: list[Condition] | None = None) -> None:
        self._by_type: dict[str, Condition] = {}
        for condition in conditions or []:
            self._by_type[condition.type] = condition

    def set(self, *conditions: Condition) -> None:
        """Set one or more conditions, last write wins per type."""
        for condition in conditions:
            existing = self._by_type.get(condition.type)
            if existing is not None and existing.status == condition.status:
                condition = replace(condition, last_transition_time=existing.last_transition_time)
            self._by_type[condition.type] = condition

    def get(self, condition_type: str) -> Condition | None:
        return self._by_type.get(condition_type)

    def is_true(self, condition_type: str) -> bool:
        condition = self._by_type.get(condition_type)
        return condition is not None and condition.status == STATUS_TRUE

    def __iter__(self) -> Iterator[Condition]:
        return iter(self._by_type.values())

    def __len__(self) -> int:
        return len(self._by_type)

    def __contains__(self, condition_type: object) -> bool:
        return condition_type in self._by_type

    def to_list(self) -> list[dict[str, Any]]:
        return [condition.to_dict() for condition in self._by_type.values()]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]] | None) -> Conditions:
        return cls([Condition.from_dict(item) for item in data or [] if item.get("type")])


def creating() -> Condition:
    """The external resource is being created."""
    return Condition(COND_READY, STATUS_FALSE, REASON_CREATING)


def available() -> Condition:
    """The external resource is available for use."""
    return Condition(COND_READY, STATUS_TRUE, REASON_AVAILABLE)


def unavailable(message: str = "") -> Condition:
    """The external resource exists but is not usable."""
    return Condition(COND_READY, STATUS_FALSE, REASON_UNAVAILABLE, message)


def deleting() -> Condition:
    """The external resource is being deleted."""
    return Condition(COND_READY, STATUS_FALSE, REASON_DELETING)


def reconcile_success() -> Condition:
    """The last reconciliation succeeded."""
    return Condition(COND_SYNCED, STATUS_TRUE, REASON_RECONCILE_SUCCESS)


def reconcile_error(error: Exception) -> Condition:
    """The last reconciliation failed with the given error."""
    return Condition(COND_SYNCED, STATUS_FALSE, REASON_RECONCILE_ERROR, sanitize_exception(error))


def references_resolved() -> Condition:
    """All references of the record have been resolved."""
    return Condition(COND_REFERENCES_RESOLVED, STATUS_TRUE, REASON_REFERENCES_RESOLVED)


def references_blocked(error: Exception) -> Condition:
    """A reference of the record cannot be resolved yet."""
    return Condition(
        COND_REFERENCES_RESOLVED,
        STATUS_FALSE,
        REASON_REFERENCES_BLOCKED,
        sanitize_exception(error),
    )
