"""Code node sandbox models."""

from enum import Enum

from pydantic import Field

from .values import NodeConfigModel


class SandboxSecurityLevel(str, Enum):
    """Coarse classification of a Code node's access permissions."""

    STRICT = "strict"    # No network or file system access
    RELAXED = "relaxed"  # Exactly one of network or file system access
    OPEN = "open"        # Both network and file system access


class SandboxConfig(NodeConfigModel):
    """Execution limits and permissions of a Code node.

    Limits are not range-checked here so that out-of-range values saved by an
    editor can be reported by ``validate_sandbox_config`` instead of failing
    to load. A limit of 0 means unlimited.
    """

    network_access: bool = False
    file_system_access: bool = False
    memory_limit: int = Field(default=128, description="Memory limit in MB")
    time_limit: int = Field(default=5000, description="Time limit in ms")


class SandboxSummary(NodeConfigModel):
    """Display summary of a sandbox configuration."""

    level: SandboxSecurityLevel
    label: str
    description: str
