"""Builder for RDS instance parameters."""

from __future__ import annotations

from typing import Any

from ..constants import FIELD_MANAGER
from ..models import RDSInstance, RDSInstanceSpec


def instance_name_for(record: RDSInstance) -> str:
    """Return the external instance identifier for a record.

    The name only depends on the engine and the record UID, so retries after a
    partial failure target the same external instance.
    """
    return f"{record.spec.engine}-{record.metadata.uid}".lower()


def create_instance_params_from_spec(
    name: str,
    password: str,
    spec: RDSInstanceSpec,
) -> dict[str, Any]:
    """Create the CreateDBInstance request parameters from the record spec.

    Args:
        name: External instance identifier
        password: Master user password
        spec: RDSInstance spec

    Returns:
        Keyword arguments for ``create_db_instance``
    """
    params: dict[str, Any] = {
        "DBInstanceIdentifier": name,
        "Engine": spec.engine,
        "DBInstanceClass": spec.instance_class,
        "AllocatedStorage": spec.size,
        "MasterUsername": spec.master_username,
        "MasterUserPassword": password,
        "MultiAZ": spec.multi_az,
        "PubliclyAccessible": spec.publicly_accessible,
        "Tags": [{"Key": "managed-by", "Value": FIELD_MANAGER}],
    }

    if spec.engine_version:
        params["EngineVersion"] = spec.engine_version

    if spec.security_groups:
        params["VpcSecurityGroupIds"] = list(spec.security_groups)

    if spec.subnet_group_name:
        params["DBSubnetGroupName"] = spec.subnet_group_name

    return params
