"""Connection security rules.

Each rule inspects one aspect of a Database node connection and reports at
most one finding. Rules with error severity block saving the node; warnings
are advisory.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ...core.domain.database import DatabaseConnection, DatabaseType
from .patterns import (
    CONNECTION_STRING_PATTERNS,
    MAX_POOL_SIZES,
    has_plaintext_credentials,
    is_local_connection,
    is_valid_credential_ref,
)


class FindingSeverity(str, Enum):
    """Severity of a rule finding."""

    ERROR = "error"      # Blocks saving or executing the node
    WARNING = "warning"  # Advisory only


class ConnectionRule(ABC):
    """Abstract base class for connection security rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the rule name for logging and debugging."""
        pass

    @property
    @abstractmethod
    def severity(self) -> FindingSeverity:
        """Get the severity of this rule's findings."""
        pass

    @abstractmethod
    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        """Check the rule against a connection.

        Args:
            connection: Connection configuration to check
            db_type: Database type the connection targets

        Returns:
            A finding message, or None if the rule passes
        """
        pass


class ConnectionPresenceRule(ConnectionRule):
    """Either a connection string or a credential reference is required."""

    @property
    def name(self) -> str:
        return "connection_presence"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.ERROR

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if not connection.connection_string and not connection.credential_ref:
            return "Either connection string or credential reference is required"
        return None


class PoolSizeMinimumRule(ConnectionRule):
    """A configured pool must hold at least one connection."""

    @property
    def name(self) -> str:
        return "pool_size_minimum"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.ERROR

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if connection.pool_size is not None and connection.pool_size < 1:
            return "Pool size must be at least 1"
        return None


class ConnectionStringFormatRule(ConnectionRule):
    """The connection string should use the scheme of its database type."""

    @property
    def name(self) -> str:
        return "connection_string_format"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.WARNING

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if not connection.connection_string:
            return None
        pattern = CONNECTION_STRING_PATTERNS.get(db_type)
        if pattern is not None and not pattern.search(connection.connection_string):
            return f"Connection string may not be in the correct format for {db_type.value}"
        return None


class PlaintextCredentialsRule(ConnectionRule):
    """Secrets should not be stored literally in the connection string."""

    @property
    def name(self) -> str:
        return "plaintext_credentials"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.WARNING

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if connection.connection_string and has_plaintext_credentials(connection.connection_string):
            return "Connection string appears to contain plaintext credentials"
        return None


class LocalConnectionRule(ConnectionRule):
    """Flag connections that point at a local or development host."""

    @property
    def name(self) -> str:
        return "local_connection"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.WARNING

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if connection.connection_string and is_local_connection(connection.connection_string):
            return "Connection appears to be for local/development environment"
        return None


class PoolSizeMaximumRule(ConnectionRule):
    """Pool size should stay within the recommended maximum."""

    @property
    def name(self) -> str:
        return "pool_size_maximum"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.WARNING

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        max_pool = MAX_POOL_SIZES[db_type]
        if connection.pool_size is not None and connection.pool_size > max_pool:
            return f"Pool size exceeds recommended maximum of {max_pool} for {db_type.value}"
        return None


class SqlitePoolingRule(ConnectionRule):
    """SQLite has no connection pooling."""

    @property
    def name(self) -> str:
        return "sqlite_pooling"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.WARNING

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if db_type == DatabaseType.SQLITE and connection.pool_size is not None and connection.pool_size > 1:
            return "SQLite does not support connection pooling; pool size will be ignored"
        return None


class CredentialRefFormatRule(ConnectionRule):
    """Credential references use the node_id.VARIABLE_NAME format."""

    @property
    def name(self) -> str:
        return "credential_ref_format"

    @property
    def severity(self) -> FindingSeverity:
        return FindingSeverity.WARNING

    def check(self, connection: DatabaseConnection, db_type: DatabaseType) -> str | None:
        if connection.credential_ref and not is_valid_credential_ref(connection.credential_ref):
            return "Credential reference should be in format: node_id.VARIABLE_NAME"
        return None


def get_default_rules() -> list[ConnectionRule]:
    """Get the default set of connection rules, in reporting order."""
    return [
        ConnectionPresenceRule(),
        PoolSizeMinimumRule(),
        ConnectionStringFormatRule(),
        PlaintextCredentialsRule(),
        LocalConnectionRule(),
        PoolSizeMaximumRule(),
        SqlitePoolingRule(),
        CredentialRefFormatRule(),
    ]
