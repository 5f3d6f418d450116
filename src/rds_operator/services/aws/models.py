"""Models for AWS RDS operations."""

from __future__ import annotations

from dataclasses import dataclass

from ...models import ExternalState


@dataclass(frozen=True)
class DBInstance:
    """Observed view of an RDS database instance."""

    name: str
    state: ExternalState
    endpoint: str = ""
    provider_id: str = ""
