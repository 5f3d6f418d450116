"""Exception types raised by the RDS Operator and its collaborators."""

from __future__ import annotations


class OperatorError(Exception):
    """Base class for operator errors."""


class ProviderError(OperatorError):
    """An error reported by the managed database provider."""


class NotFoundError(ProviderError):
    """The external resource does not exist."""


class AlreadyExistsError(ProviderError):
    """The external resource already exists."""


class UnexpectedStateError(ProviderError):
    """The provider reported a state outside the known enumeration."""

    def __init__(self, state: str) -> None:
        super().__init__(f"unexpected resource status: {state}")
        self.state = state


class ReferencesBlockedError(OperatorError):
    """A referenced object cannot be resolved yet."""


class RecordNotFoundError(OperatorError):
    """The record to reconcile no longer exists."""


class ConflictError(OperatorError):
    """A record update targeted a stale resourceVersion."""


class ReconcileCancelled(OperatorError):
    """The dispatcher cancelled the running reconciliation."""
