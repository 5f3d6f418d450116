"""Requeue hints returned by the reconciler."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Result:
    """When the dispatcher should invoke the reconciler again.

    The dispatcher owns actual timing and backoff; the reconciler only asks.
    """

    requeue: bool = False
    requeue_after: float | None = None

    @classmethod
    def done(cls) -> Result:
        """No further invocation needed until something changes."""
        return cls()

    @classmethod
    def immediate(cls) -> Result:
        """Invoke again as soon as possible."""
        return cls(requeue=True)

    @classmethod
    def after(cls, seconds: float) -> Result:
        """Invoke again after a fixed delay."""
        return cls(requeue=True, requeue_after=seconds)
