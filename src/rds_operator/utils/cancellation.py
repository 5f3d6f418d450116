"""Cancellation checks for blocking calls."""

from __future__ import annotations

from typing import Protocol

from ..exceptions import ReconcileCancelled


class Cancellation(Protocol):
    """Anything with an ``is_set()`` flag, such as ``threading.Event``."""

    def is_set(self) -> bool:
        ...


def check_cancelled(cancel: Cancellation | None, operation: str) -> None:
    """Raise ReconcileCancelled if the dispatcher asked to stop.

    Args:
        cancel: Cancellation flag, or None if the call cannot be cancelled
        operation: Name of the blocking call about to be issued
    """
    if cancel is not None and cancel.is_set():
        raise ReconcileCancelled(f"reconciliation cancelled before {operation}")
