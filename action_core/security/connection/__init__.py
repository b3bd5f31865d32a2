"""Connection Security - Validation and masking for Database node connections.

This module checks Database node connection settings against security rules
and provides masking helpers for logging connection strings.
"""

from .patterns import (
    extract_database_name,
    extract_host,
    has_plaintext_credentials,
    has_variable_interpolation,
    is_local_connection,
    is_valid_credential_ref,
    mask_connection_string,
)
from .rules import ConnectionRule, FindingSeverity
from .validator import (
    ConnectionConfigError,
    ConnectionSecurityValidator,
    determine_security_level,
    validate_connection,
)

__all__ = [
    "ConnectionConfigError",
    "ConnectionRule",
    "ConnectionSecurityValidator",
    "FindingSeverity",
    "determine_security_level",
    "extract_database_name",
    "extract_host",
    "has_plaintext_credentials",
    "has_variable_interpolation",
    "is_local_connection",
    "is_valid_credential_ref",
    "mask_connection_string",
    "validate_connection",
]
