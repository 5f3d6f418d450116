"""AWS RDS client implementation."""

from __future__ import annotations

import logging
import time
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ... import metrics
from ...builders.instance import create_instance_params_from_spec
from ...exceptions import AlreadyExistsError, NotFoundError
from ...models import ExternalState, RDSInstanceSpec
from .models import DBInstance

logger = logging.getLogger(__name__)

ALREADY_EXISTS_CODES = {"DBInstanceAlreadyExists", "DBInstanceAlreadyExistsFault"}
NOT_FOUND_CODES = {"DBInstanceNotFound", "DBInstanceNotFoundFault"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


class AWSRDSClient:
    """AWS RDS provider implementation."""

    def __init__(
        self,
        region: str,
        access_key: str,
        secret_key: str,
        session_token: str | None = None,
        endpoint: str | None = None,
        connect_timeout: float = 10.0,
        read_timeout: float = 30.0,
        max_attempts: int = 3,
    ) -> None:
        """Initialize AWS RDS provider.

        Args:
            region: AWS region
            access_key: Access key ID
            secret_key: Secret access key
            session_token: Optional session token for temporary credentials
            endpoint: Optional endpoint URL override
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
            max_attempts: Maximum attempts made by botocore per call
        """
        self.region = region
        self.endpoint = endpoint

        config = Config(
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"max_attempts": max_attempts, "mode": "standard"},
        )

        self.client = boto3.client(
            "rds",
            endpoint_url=endpoint,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=session_token,
            config=config,
        )

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        start_time = time.time()
        try:
            response = getattr(self.client, operation)(**kwargs)
            metrics.api_call_total.labels(api_type="aws", operation=operation, result="success").inc()
            return response
        except ClientError:
            metrics.api_call_total.labels(api_type="aws", operation=operation, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="aws", operation=operation).observe(duration)

    def create_instance(self, name: str, password: str, spec: RDSInstanceSpec) -> DBInstance:
        """Create a database instance."""
        params = create_instance_params_from_spec(name, password, spec)
        try:
            response = self._call("create_db_instance", **params)
        except ClientError as e:
            if _error_code(e) in ALREADY_EXISTS_CODES:
                raise AlreadyExistsError(f"DB instance {name} already exists") from e
            logger.error(f"Failed to create DB instance {name}: {_error_code(e)}")
            raise
        return self._to_instance(name, response.get("DBInstance", {}))

    def get_instance(self, name: str) -> DBInstance:
        """Get a database instance by name."""
        try:
            response = self._call("describe_db_instances", DBInstanceIdentifier=name)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise NotFoundError(f"DB instance {name} not found") from e
            logger.error(f"Failed to describe DB instance {name}: {_error_code(e)}")
            raise

        instances = response.get("DBInstances", [])
        if not instances:
            raise NotFoundError(f"DB instance {name} not found")
        return self._to_instance(name, instances[0])

    def delete_instance(self, name: str) -> None:
        """Delete a database instance without taking a final snapshot."""
        try:
            self._call(
                "delete_db_instance",
                DBInstanceIdentifier=name,
                SkipFinalSnapshot=True,
            )
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise NotFoundError(f"DB instance {name} not found") from e
            logger.error(f"Failed to delete DB instance {name}: {_error_code(e)}")
            raise

    @staticmethod
    def _to_instance(name: str, data: dict[str, Any]) -> DBInstance:
        endpoint = data.get("Endpoint") or {}
        return DBInstance(
            name=data.get("DBInstanceIdentifier", name),
            state=ExternalState.parse(data.get("DBInstanceStatus")),
            endpoint=endpoint.get("Address", ""),
            provider_id=data.get("DBInstanceArn", ""),
        )
