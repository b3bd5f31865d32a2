"""Database connection security validation.

This module provides the ConnectionSecurityValidator that runs connection
rules against a Database node configuration and classifies how safely its
credentials are handled.
"""

import logging
from collections.abc import Sequence

from ...core.domain.database import (
    ConnectionSecurityLevel,
    ConnectionValidationResult,
    DatabaseConnection,
    DatabaseType,
)
from .patterns import (
    DEFAULT_POOL_SIZES,
    extract_database_name,
    extract_host,
    has_plaintext_credentials,
    has_variable_interpolation,
    mask_connection_string,
)
from .rules import ConnectionRule, FindingSeverity, get_default_rules

logger = logging.getLogger(__name__)


class ConnectionConfigError(Exception):
    """Raised when a connection configuration blocks saving or execution."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid database connection: {'; '.join(errors)}")


class ConnectionSecurityValidator:
    """Validates Database node connections against security rules.

    Errors block saving the node; warnings are advisory. The resulting
    security level prefers credential references and variable interpolation
    over literal secrets.
    """

    def __init__(self, rules: Sequence[ConnectionRule] | None = None):
        """Initialize the validator.

        Args:
            rules: Optional custom rules to use instead of the defaults
        """
        self.rules = list(rules) if rules is not None else get_default_rules()

    def validate(
        self,
        connection: DatabaseConnection,
        db_type: DatabaseType,
    ) -> ConnectionValidationResult:
        """Validate a database connection configuration.

        Args:
            connection: The connection configuration to validate
            db_type: The database type

        Returns:
            Validation result with security level, warnings and errors
        """
        db_type = DatabaseType(db_type)
        errors: list[str] = []
        warnings: list[str] = []

        for rule in self.rules:
            finding = rule.check(connection, db_type)
            if finding is None:
                continue
            if rule.severity == FindingSeverity.ERROR:
                errors.append(finding)
            else:
                warnings.append(finding)

        security_level = self.determine_security_level(connection, warnings, errors)

        logger.debug(
            f"Connection validation for {db_type.value} "
            f"({mask_connection_string(connection.connection_string) or connection.credential_ref}): "
            f"level={security_level.value}, errors={len(errors)}, warnings={len(warnings)}"
        )

        return ConnectionValidationResult(
            is_valid=not errors,
            security_level=security_level,
            warnings=warnings,
            errors=errors,
        )

    def determine_security_level(
        self,
        connection: DatabaseConnection,
        warnings: Sequence[str],
        errors: Sequence[str],
    ) -> ConnectionSecurityLevel:
        """Determine the security level of a connection.

        Precedence: any error is insecure; a credential reference without a
        connection string is secure; literal credentials are a warning;
        variable interpolation is secure; any other warning is a warning.
        """
        if errors:
            return ConnectionSecurityLevel.INSECURE

        connection_string = connection.connection_string

        if connection.credential_ref and not connection_string:
            return ConnectionSecurityLevel.SECURE

        if connection_string and has_plaintext_credentials(connection_string):
            return ConnectionSecurityLevel.WARNING

        if connection_string and has_variable_interpolation(connection_string):
            return ConnectionSecurityLevel.SECURE

        if warnings:
            return ConnectionSecurityLevel.WARNING

        return ConnectionSecurityLevel.SECURE

    def require_valid(
        self,
        connection: DatabaseConnection,
        db_type: DatabaseType,
    ) -> ConnectionValidationResult:
        """Validate a connection and raise if it has errors.

        Raises:
            ConnectionConfigError: If the configuration has blocking errors
        """
        result = self.validate(connection, db_type)
        if not result.is_valid:
            logger.error(f"Database connection rejected: {result.errors}")
            raise ConnectionConfigError(result.errors)
        for warning in result.warnings:
            logger.warning(f"Database connection: {warning}")
        return result


_default_validator = ConnectionSecurityValidator()


def validate_connection(
    connection: DatabaseConnection,
    db_type: DatabaseType,
) -> ConnectionValidationResult:
    """Validate a connection with the default rules."""
    return _default_validator.validate(connection, db_type)


def determine_security_level(
    connection: DatabaseConnection,
    warnings: Sequence[str],
    errors: Sequence[str],
) -> ConnectionSecurityLevel:
    """Determine the security level of a connection."""
    return _default_validator.determine_security_level(connection, warnings, errors)


def create_default_connection(db_type: DatabaseType) -> DatabaseConnection:
    """Create an empty connection with the default pool size for a type."""
    return DatabaseConnection(
        connection_string="",
        pool_size=DEFAULT_POOL_SIZES[DatabaseType(db_type)],
    )


def create_secure_connection(credential_ref: str, db_type: DatabaseType) -> DatabaseConnection:
    """Create a connection that reads its credentials from a reference."""
    return DatabaseConnection(
        connection_string="",
        credential_ref=credential_ref,
        pool_size=DEFAULT_POOL_SIZES[DatabaseType(db_type)],
    )


def is_connection_configured(connection: DatabaseConnection) -> bool:
    """Check whether a connection string or credential reference is set."""
    return bool(connection.connection_string or connection.credential_ref)


def get_connection_summary(connection: DatabaseConnection) -> str:
    """One-line description of a connection that is safe to display."""
    if connection.credential_ref:
        return f"Using credentials from: {connection.credential_ref}"

    if connection.connection_string:
        host = extract_host(connection.connection_string)
        database = extract_database_name(connection.connection_string)

        if host and database:
            return f"{host}/{database}"
        if host:
            return host

        return mask_connection_string(connection.connection_string)[:50] + "..."

    return "No connection configured"
