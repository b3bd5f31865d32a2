"""Merge node models.

A Merge node waits for concurrently running branches and combines their
outputs into a single value once its wait condition is met or its timeout
fires.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field, JsonValue

from ..config import settings
from .values import NodeConfigModel


class MergeMode(str, Enum):
    """Completion threshold a Merge node requires before proceeding."""

    WAIT_ALL = "wait_all"  # Every incoming branch
    WAIT_ANY = "wait_any"  # The first branch to finish
    WAIT_N = "wait_n"      # A configured number of branches


class CombineStrategy(str, Enum):
    """How completed branch outputs are shaped into one value."""

    ARRAY = "array"
    OBJECT = "object"
    FIRST = "first"
    LAST = "last"


class TimeoutBehavior(str, Enum):
    """What a Merge node does when its timeout elapses first."""

    CONTINUE = "continue"  # Combine whatever has completed
    ERROR = "error"        # Fail without combining


class MergeStatus(str, Enum):
    """How a merge instance was resolved."""

    COMPLETED = "completed"  # Wait condition satisfied
    TIMED_OUT = "timed_out"  # Timeout fired, partial combination
    FAILED = "failed"        # Timeout fired with behavior=error
    CANCELLED = "cancelled"  # Workflow run ended while waiting


class MergeTimeout(NodeConfigModel):
    """Timeout settings of a Merge node."""

    enabled: bool = False
    ms: int = Field(
        default_factory=lambda: settings.merge_default_timeout_ms,
        description="Milliseconds to wait before the timeout fires",
    )
    behavior: TimeoutBehavior = TimeoutBehavior.ERROR


class MergeNodeConfig(NodeConfigModel):
    """Wait and combine configuration of a Merge node."""

    mode: MergeMode = MergeMode.WAIT_ALL
    wait_count: int | None = Field(
        None,
        description="Branches required in wait_n mode",
    )
    combine_strategy: CombineStrategy = CombineStrategy.ARRAY
    branch_keys: list[str] | None = Field(
        None,
        description="Object keys assigned to branches in arrival order",
    )
    timeout: MergeTimeout = Field(default_factory=MergeTimeout)


class BranchState(NodeConfigModel):
    """Completion state of one branch feeding a merge instance."""

    branch_id: str = Field(..., min_length=1)
    completed: bool = False
    result: JsonValue = None
    arrival_order: int | None = Field(
        None,
        description="Monotonic sequence number assigned on completion",
    )


class MergeOutcome(NodeConfigModel):
    """Resolution of a merge instance."""

    instance_id: str
    status: MergeStatus
    value: JsonValue = None
    completed_branches: list[str] = Field(
        default_factory=list,
        description="Completed branch ids in arrival order",
    )
    error: str | None = None
    resolved_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def succeeded(self) -> bool:
        """Whether downstream nodes should receive ``value``."""
        return self.status in (MergeStatus.COMPLETED, MergeStatus.TIMED_OUT)
