"""Merge node synchronization and result combination."""

from .strategies import (
    combine_results,
    order_by_arrival,
    required_count,
    should_proceed,
    validate_merge_config,
)
from .synchronizer import MergeInstance, MergeInstanceError, MergeSynchronizer

__all__ = [
    "MergeInstance",
    "MergeInstanceError",
    "MergeSynchronizer",
    "combine_results",
    "order_by_arrival",
    "required_count",
    "should_proceed",
    "validate_merge_config",
]
