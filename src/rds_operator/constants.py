"""Constants for the RDS Operator."""

# API Group
API_GROUP = "database.cloud37.dev"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_PROVIDER = "Provider"
KIND_RDS_INSTANCE = "RDSInstance"

# Plurals
PLURAL_PROVIDERS = "providers"
PLURAL_RDS_INSTANCES = "rdsinstances"

# Controller
CONTROLLER_NAME = "rds.database.cloud37.dev"

# Labels
LABEL_MANAGED_BY = f"{API_GROUP}/managed-by"
LABEL_INSTANCE_NAME = f"{API_GROUP}/instance-name"

# Finalizers
FINALIZER = f"finalizer.{CONTROLLER_NAME}"

# Field Manager
FIELD_MANAGER = "rds-operator"

# Reclaim policies
RECLAIM_DELETE = "Delete"
RECLAIM_RETAIN = "Retain"

# Binding phases
BINDING_PHASE_UNBINDABLE = "Unbindable"
BINDING_PHASE_UNBOUND = "Unbound"
BINDING_PHASE_BOUND = "Bound"

# Condition Types
COND_READY = "Ready"
COND_SYNCED = "Synced"
COND_REFERENCES_RESOLVED = "ReferencesResolved"

# Condition Reasons
REASON_CREATING = "Creating"
REASON_AVAILABLE = "Available"
REASON_UNAVAILABLE = "Unavailable"
REASON_DELETING = "Deleting"
REASON_RECONCILE_SUCCESS = "ReconcileSuccess"
REASON_RECONCILE_ERROR = "ReconcileError"
REASON_REFERENCES_RESOLVED = "ReferenceResolutionSuccess"
REASON_REFERENCES_BLOCKED = "ReferenceResolutionBlocked"

# Connection secret keys
CONNECTION_USERNAME_KEY = "username"
CONNECTION_PASSWORD_KEY = "password"
CONNECTION_ENDPOINT_KEY = "endpoint"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_INSTANCE_CREATED = "InstanceCreated"
EVENT_REASON_INSTANCE_AVAILABLE = "InstanceAvailable"
EVENT_REASON_INSTANCE_DELETED = "InstanceDeleted"
EVENT_REASON_INSTANCE_RETAINED = "InstanceRetained"
EVENT_REASON_REFERENCES_BLOCKED = "ReferencesBlocked"
