"""Action node decision core.

Routing, synchronization and aggregation logic for workflow Switch, Merge and
Loop nodes, plus security checks for Code and Database nodes.
"""

from .core.config import Settings, settings
from .core.logging_config import configure_logging

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "configure_logging",
    "settings",
]
