"""Merge wait conditions and combine strategies.

Pure helpers used by the synchronizer: deciding whether enough branches have
completed, and shaping the completed branch outputs into one value.
"""

from collections.abc import Sequence
from typing import Any

from ...domain.merge import BranchState, CombineStrategy, MergeMode, MergeNodeConfig


def required_count(mode: MergeMode, total: int, wait_count: int | None = None) -> int:
    """Number of completed branches a merge needs before it proceeds.

    wait_n clamps the configured count to ``[1, total]`` so that a count
    larger than the number of branches waits for all of them rather than
    forever. The result is never below 1 except for wait_all with no
    branches.
    """
    if mode == MergeMode.WAIT_ALL:
        return total
    if mode == MergeMode.WAIT_ANY:
        return 1
    return max(1, min(wait_count or 1, total))


def should_proceed(
    mode: MergeMode,
    branches: Sequence[BranchState],
    wait_count: int | None = None,
) -> bool:
    """Determine whether a merge should proceed.

    Args:
        mode: Merge wait mode
        branches: Every branch feeding the merge, completed or not
        wait_count: Branches required in wait_n mode

    Returns:
        True for wait_all when every branch completed, for wait_any when at
        least one completed, for wait_n when at least
        ``clamp(wait_count, 1, total)`` completed
    """
    completed_count = sum(1 for branch in branches if branch.completed)
    total = len(branches)

    if mode == MergeMode.WAIT_ALL:
        return completed_count == total
    return completed_count >= required_count(mode, total, wait_count)


def order_by_arrival(branches: Sequence[BranchState]) -> list[BranchState]:
    """Completed branches in arrival order.

    Branches without an arrival number keep their relative position after
    the numbered ones.
    """
    completed = [branch for branch in branches if branch.completed]
    return sorted(
        completed,
        key=lambda branch: (branch.arrival_order is None, branch.arrival_order or 0),
    )


def combine_results(
    strategy: CombineStrategy,
    branches: Sequence[BranchState],
    branch_keys: Sequence[str] | None = None,
) -> Any:
    """Combine completed branch results.

    Args:
        strategy: Combine strategy
        branches: Branch states; incomplete branches are ignored
        branch_keys: Object keys assigned in arrival order (object strategy)

    Returns:
        array: list of results in arrival order
        object: mapping of ``branch_keys[i]`` (or the branch id) to result
        first/last: result of the earliest/latest arrival, None if none
    """
    completed = order_by_arrival(branches)
    strategy = CombineStrategy(strategy)

    if strategy == CombineStrategy.ARRAY:
        return [branch.result for branch in completed]

    if strategy == CombineStrategy.OBJECT:
        keys = list(branch_keys or [])
        combined: dict[str, Any] = {}
        for position, branch in enumerate(completed):
            key = keys[position] if position < len(keys) else None
            combined[key or branch.branch_id] = branch.result
        return combined

    if not completed:
        return None
    if strategy == CombineStrategy.FIRST:
        return completed[0].result
    return completed[-1].result


def validate_merge_config(config: MergeNodeConfig) -> list[str]:
    """Validate a Merge node configuration.

    Returns:
        List of validation error messages, empty if the configuration is valid
    """
    errors: list[str] = []

    if config.mode == MergeMode.WAIT_N and (config.wait_count is None or config.wait_count < 1):
        errors.append("Wait count must be at least 1 in wait_n mode")

    if config.timeout.ms < 0:
        errors.append("Timeout cannot be negative")

    if config.branch_keys:
        duplicates = sorted({key for key in config.branch_keys if config.branch_keys.count(key) > 1})
        if duplicates:
            errors.append(f"Branch keys must be unique (duplicated: {', '.join(duplicates)})")

    return errors
