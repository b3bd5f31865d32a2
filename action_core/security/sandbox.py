"""Sandbox security classification for Code nodes.

Classifies a Code node's sandbox permissions and validates its execution
limits. Nothing here runs user code; the workflow engine consults these
checks before handing code to the sandbox.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..core.config import settings
from ..core.domain.sandbox import SandboxConfig, SandboxSecurityLevel, SandboxSummary

logger = logging.getLogger(__name__)


# Allowed ranges for sandbox limits (0 = unlimited)
SANDBOX_LIMITS: dict[str, dict[str, Any]] = {
    "memory_limit": {"min": 0, "max": 1024, "default": 128, "unit": "MB"},
    "time_limit": {"min": 0, "max": 60000, "default": 5000, "unit": "ms"},
}

DEFAULT_SANDBOX_CONFIG = SandboxConfig(
    network_access=False,
    file_system_access=False,
    memory_limit=SANDBOX_LIMITS["memory_limit"]["default"],
    time_limit=SANDBOX_LIMITS["time_limit"]["default"],
)

_LEVEL_DESCRIPTIONS = {
    SandboxSecurityLevel.STRICT: "No network or file system access. Code runs in complete isolation.",
    SandboxSecurityLevel.RELAXED: "Limited access enabled. Some restrictions have been relaxed.",
    SandboxSecurityLevel.OPEN: "Full access enabled. Code can make network requests and access the file system.",
}


class SandboxConfigError(Exception):
    """Raised when a sandbox configuration blocks execution."""

    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__(f"Invalid sandbox configuration: {'; '.join(violations)}")


def validate_sandbox_config(sandbox: SandboxConfig) -> list[str]:
    """Validate the limits of a sandbox configuration.

    Args:
        sandbox: The sandbox configuration to validate

    Returns:
        List of violation messages, empty if the configuration is valid
    """
    errors: list[str] = []

    memory = SANDBOX_LIMITS["memory_limit"]
    if sandbox.memory_limit < memory["min"]:
        errors.append("Memory limit cannot be negative")
    if sandbox.memory_limit > memory["max"]:
        errors.append(f"Memory limit cannot exceed {memory['max']}{memory['unit']}")

    time_limit = SANDBOX_LIMITS["time_limit"]
    if sandbox.time_limit < time_limit["min"]:
        errors.append("Time limit cannot be negative")
    if sandbox.time_limit > time_limit["max"]:
        errors.append(f"Time limit cannot exceed {time_limit['max']}{time_limit['unit']}")

    return errors


def is_sandbox_config_valid(sandbox: SandboxConfig) -> bool:
    """Check whether a sandbox configuration has no limit violations."""
    return not validate_sandbox_config(sandbox)


def get_sandbox_security_level(sandbox: SandboxConfig) -> SandboxSecurityLevel:
    """Classify a sandbox by its two access permissions.

    Args:
        sandbox: The sandbox configuration

    Returns:
        strict when neither access is granted, open when both are, relaxed
        when exactly one is
    """
    if not sandbox.network_access and not sandbox.file_system_access:
        return SandboxSecurityLevel.STRICT
    if sandbox.network_access and sandbox.file_system_access:
        return SandboxSecurityLevel.OPEN
    return SandboxSecurityLevel.RELAXED


def is_sandbox_secure(sandbox: SandboxConfig) -> bool:
    """A sandbox is secure only at the strict level."""
    return get_sandbox_security_level(sandbox) == SandboxSecurityLevel.STRICT


def get_security_level_description(level: SandboxSecurityLevel) -> str:
    """Human-readable description of a security level."""
    return _LEVEL_DESCRIPTIONS[SandboxSecurityLevel(level)]


def create_sandbox_config(
    network_access: bool = False,
    file_system_access: bool = False,
    memory_limit: int | None = None,
    time_limit: int | None = None,
) -> SandboxConfig:
    """Create a sandbox configuration.

    Limits left as None take the configured defaults
    (``SANDBOX_DEFAULT_MEMORY_LIMIT_MB`` and ``SANDBOX_DEFAULT_TIME_LIMIT_MS``).
    """
    return SandboxConfig(
        network_access=network_access,
        file_system_access=file_system_access,
        memory_limit=(
            settings.sandbox_default_memory_limit_mb if memory_limit is None else memory_limit
        ),
        time_limit=(
            settings.sandbox_default_time_limit_ms if time_limit is None else time_limit
        ),
    )


def create_strict_sandbox() -> SandboxConfig:
    """Create a sandbox with no network or file system access."""
    return create_sandbox_config(False, False)


def create_open_sandbox() -> SandboxConfig:
    """Create a sandbox with full access. Only for trusted code."""
    return create_sandbox_config(True, True)


def merge_sandbox_config(partial: Mapping[str, Any]) -> SandboxConfig:
    """Fill a partial sandbox configuration with the defaults.

    Keys may use either the persisted camelCase names or snake_case.
    """
    values = DEFAULT_SANDBOX_CONFIG.model_dump(by_alias=True)
    for key, value in partial.items():
        field = SandboxConfig.model_fields.get(key)
        values[field.alias if field is not None and field.alias else key] = value
    return SandboxConfig.model_validate(values)


def sandbox_config_to_string(sandbox: SandboxConfig) -> str:
    """Compact description of a sandbox, e.g. ``"network, mem:128MB"``."""
    parts: list[str] = []

    if sandbox.network_access:
        parts.append("network")
    if sandbox.file_system_access:
        parts.append("fs")
    if sandbox.memory_limit > 0:
        parts.append(f"mem:{sandbox.memory_limit}MB")
    if sandbox.time_limit > 0:
        parts.append(f"time:{sandbox.time_limit}ms")

    if not parts:
        return "strict (no access)"

    return ", ".join(parts)


def get_sandbox_summary(sandbox: SandboxConfig) -> SandboxSummary:
    """Summary of a sandbox configuration for display."""
    level = get_sandbox_security_level(sandbox)
    return SandboxSummary(
        level=level,
        label=level.value.capitalize(),
        description=get_security_level_description(level),
    )


def enforce_sandbox_config(sandbox: SandboxConfig) -> SandboxSecurityLevel:
    """Gate a Code node before execution.

    Returns:
        The sandbox security level

    Raises:
        SandboxConfigError: If any limit is out of range
    """
    violations = validate_sandbox_config(sandbox)
    if violations:
        logger.error(f"Sandbox configuration rejected: {violations}")
        raise SandboxConfigError(violations)

    level = get_sandbox_security_level(sandbox)
    if level == SandboxSecurityLevel.OPEN:
        logger.warning("Code node runs with full network and file system access")
    elif level == SandboxSecurityLevel.RELAXED:
        logger.info(f"Code node sandbox relaxed: {sandbox_config_to_string(sandbox)}")

    return level
