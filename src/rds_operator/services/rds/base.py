"""Base RDS provider interface."""

from __future__ import annotations

from typing import Protocol

from ...models import RDSInstanceSpec
from ..aws.models import DBInstance


class RDSClient(Protocol):
    """Protocol defining managed database provider operations."""

    def create_instance(self, name: str, password: str, spec: RDSInstanceSpec) -> DBInstance:
        """Create a database instance.

        Raises:
            AlreadyExistsError: If an instance with this name already exists
        """
        ...

    def get_instance(self, name: str) -> DBInstance:
        """Get a database instance by name.

        Raises:
            NotFoundError: If the instance does not exist
            UnexpectedStateError: If the reported state is not a known state
        """
        ...

    def delete_instance(self, name: str) -> None:
        """Delete a database instance by name.

        Raises:
            NotFoundError: If the instance does not exist
        """
        ...
