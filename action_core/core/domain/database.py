"""Database node connection models."""

from enum import Enum

from pydantic import Field

from .values import NodeConfigModel


class DatabaseType(str, Enum):
    """Database engines a Database node can target."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    MONGODB = "mongodb"
    REDIS = "redis"


class ConnectionSecurityLevel(str, Enum):
    """Security classification of a connection configuration."""

    SECURE = "secure"
    WARNING = "warning"
    INSECURE = "insecure"


class DatabaseConnection(NodeConfigModel):
    """Connection settings of a Database node.

    At least one of ``connection_string`` and ``credential_ref`` must be
    non-empty for the connection to count as configured.
    """

    connection_string: str = Field(
        default="",
        description="Connection URL, may contain {{VARIABLE}} placeholders",
    )
    credential_ref: str | None = Field(
        None,
        description="Reference to a stored secret, e.g. node_id.VARIABLE_NAME",
    )
    pool_size: int | None = Field(None, description="Connection pool size")


class DatabaseNodeConfig(NodeConfigModel):
    """Database node configuration relevant to connection security."""

    db_type: DatabaseType = DatabaseType.POSTGRESQL
    connection: DatabaseConnection = Field(default_factory=DatabaseConnection)


class ConnectionValidationResult(NodeConfigModel):
    """Outcome of validating a connection configuration."""

    is_valid: bool
    security_level: ConnectionSecurityLevel
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
