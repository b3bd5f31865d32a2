"""Security - Sandbox classification and connection validation.

The security layer classifies Code node sandboxes and validates Database node
connections at configuration-save or pre-execution time.
"""

from .connection import ConnectionSecurityValidator, validate_connection
from .sandbox import get_sandbox_security_level, validate_sandbox_config

__all__ = [
    "ConnectionSecurityValidator",
    "get_sandbox_security_level",
    "validate_connection",
    "validate_sandbox_config",
]
