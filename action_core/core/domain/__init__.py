"""Domain models for the action node decision core.

This module contains the configuration records authored for each node kind
and the result records the decision core hands back to the workflow engine.
"""

# Shared value types
from .values import MISSING, NodeConfigModel, WorkflowState

# Switch models - Condition routing
from .switch import (
    ConditionOperator,
    ConditionResult,
    EvaluationMode,
    SwitchCondition,
    SwitchEvaluationResult,
    SwitchNodeConfig,
)

# Merge models - Branch synchronization
from .merge import (
    BranchState,
    CombineStrategy,
    MergeMode,
    MergeNodeConfig,
    MergeOutcome,
    MergeStatus,
    MergeTimeout,
    TimeoutBehavior,
)

# Loop models - Iteration aggregation
from .loop import AggregatedResults, IterationResult, ResultsConfig

# Sandbox models - Code node security
from .sandbox import SandboxConfig, SandboxSecurityLevel, SandboxSummary

# Database models - Connection security
from .database import (
    ConnectionSecurityLevel,
    ConnectionValidationResult,
    DatabaseConnection,
    DatabaseNodeConfig,
    DatabaseType,
)

__all__ = [
    # Shared
    "MISSING",
    "NodeConfigModel",
    "WorkflowState",

    # Switch
    "ConditionOperator",
    "ConditionResult",
    "EvaluationMode",
    "SwitchCondition",
    "SwitchEvaluationResult",
    "SwitchNodeConfig",

    # Merge
    "BranchState",
    "CombineStrategy",
    "MergeMode",
    "MergeNodeConfig",
    "MergeOutcome",
    "MergeStatus",
    "MergeTimeout",
    "TimeoutBehavior",

    # Loop
    "AggregatedResults",
    "IterationResult",
    "ResultsConfig",

    # Sandbox
    "SandboxConfig",
    "SandboxSecurityLevel",
    "SandboxSummary",

    # Database
    "ConnectionSecurityLevel",
    "ConnectionValidationResult",
    "DatabaseConnection",
    "DatabaseNodeConfig",
    "DatabaseType",
]
