"""Merge node branch synchronization.

Concurrent workflow branches report completion to the synchronizer as events.
Each merge instance keeps its own branch map, lock and outcome future; the
first of "wait condition satisfied" and "timeout elapsed" resolves it, and
everything reported after that is ignored.
"""

import asyncio
import logging
from collections.abc import Sequence
from concurrent.futures import Future
from typing import Any

from ...domain.merge import (
    BranchState,
    MergeNodeConfig,
    MergeOutcome,
    MergeStatus,
    TimeoutBehavior,
)
from .strategies import combine_results, order_by_arrival, should_proceed

logger = logging.getLogger(__name__)


class MergeInstanceError(Exception):
    """Raised when a merge instance cannot be started."""
    pass


class MergeInstance:
    """Waiting state of one activation of a Merge node.

    Instances are created by ``MergeSynchronizer.begin`` and must only be
    mutated by the synchronizer while holding ``lock``.
    """

    def __init__(
        self,
        instance_id: str,
        config: MergeNodeConfig,
        branch_ids: Sequence[str],
        run_id: str | None = None,
    ):
        self.instance_id = instance_id
        self.config = config
        self.run_id = run_id
        self.branches: dict[str, BranchState] = {
            branch_id: BranchState(branch_id=branch_id) for branch_id in branch_ids
        }
        self.resolved = False
        self.lock = asyncio.Lock()
        self.arrivals = 0
        self.timer: asyncio.Task | None = None
        self._outcome: asyncio.Future[MergeOutcome] = (
            asyncio.get_running_loop().create_future()
        )

    @property
    def expected_total(self) -> int:
        """Number of branches feeding this instance."""
        return len(self.branches)

    @property
    def completed_count(self) -> int:
        """Number of branches that have reported completion."""
        return sum(1 for branch in self.branches.values() if branch.completed)

    @property
    def outcome(self) -> MergeOutcome | None:
        """The resolution, or None while still waiting."""
        if self._outcome.done():
            return self._outcome.result()
        return None

    async def wait(self) -> MergeOutcome:
        """Suspend until the instance resolves.

        Cancelling the waiter does not cancel the instance itself.
        """
        return await asyncio.shield(self._outcome)

    def combine(self) -> Any:
        """Combine the branches completed so far."""
        return combine_results(
            self.config.combine_strategy,
            list(self.branches.values()),
            self.config.branch_keys,
        )


class MergeSynchronizer:
    """Tracks branch completions for every waiting merge instance.

    Instance ids must be unique per activation (for example
    ``"{run_id}:{node_id}"``); an id can be reused once its previous
    instance has resolved.
    """

    def __init__(self) -> None:
        """Initialize an empty synchronizer."""
        self._instances: dict[str, MergeInstance] = {}

    @property
    def active_instances(self) -> list[str]:
        """Ids of instances that are still waiting."""
        return list(self._instances)

    def get(self, instance_id: str) -> MergeInstance | None:
        """Get a waiting instance by id."""
        return self._instances.get(instance_id)

    def begin(
        self,
        instance_id: str,
        config: MergeNodeConfig,
        branch_ids: Sequence[str],
        run_id: str | None = None,
    ) -> MergeInstance:
        """Start waiting for the branches of a merge instance.

        Must be called from the event loop that will receive the branch
        completions. Arms the timeout when the configuration enables one.

        Args:
            instance_id: Unique id of this merge activation
            config: Merge node configuration
            branch_ids: Ids of every branch feeding the merge
            run_id: Workflow run the instance belongs to

        Returns:
            The waiting instance

        Raises:
            MergeInstanceError: If the id is already waiting or the branch
                list is empty or contains duplicates
        """
        if instance_id in self._instances:
            raise MergeInstanceError(f"Merge instance '{instance_id}' is already waiting")
        if not branch_ids:
            raise MergeInstanceError(f"Merge instance '{instance_id}' has no branches")
        if len(set(branch_ids)) != len(branch_ids):
            raise MergeInstanceError(f"Merge instance '{instance_id}' has duplicate branch ids")

        instance = MergeInstance(instance_id, config, branch_ids, run_id)
        self._instances[instance_id] = instance

        if config.timeout.enabled:
            instance.timer = asyncio.create_task(
                self._expire(instance, config.timeout.ms / 1000),
                name=f"merge-timeout-{instance_id}",
            )

        timeout_label = f"{config.timeout.ms}ms" if config.timeout.enabled else "none"
        logger.info(
            f"Merge {instance_id} waiting for {len(branch_ids)} branches "
            f"(mode={config.mode.value}, timeout={timeout_label})"
        )
        return instance

    async def complete_branch(
        self,
        instance_id: str,
        branch_id: str,
        result: Any = None,
    ) -> bool:
        """Record that a branch has completed.

        Args:
            instance_id: Merge instance the branch feeds
            branch_id: Completed branch
            result: Output of the branch

        Returns:
            True if the completion was recorded; False if it was ignored
            because the instance is unknown or already resolved, the branch is
            unknown, or the branch had already completed
        """
        instance = self._instances.get(instance_id)
        if instance is None:
            logger.debug(
                f"Ignoring completion of branch {branch_id}: "
                f"merge {instance_id} is not waiting"
            )
            return False

        async with instance.lock:
            if instance.resolved:
                logger.debug(f"Ignoring late completion of branch {branch_id} for merge {instance_id}")
                return False

            branch = instance.branches.get(branch_id)
            if branch is None:
                logger.warning(f"Merge {instance_id} has no branch '{branch_id}'")
                return False
            if branch.completed:
                logger.debug(f"Ignoring duplicate completion of branch {branch_id} for merge {instance_id}")
                return False

            instance.branches[branch_id] = BranchState(
                branch_id=branch_id,
                completed=True,
                result=result,
                arrival_order=instance.arrivals + 1,
            )
            instance.arrivals += 1

            logger.debug(
                f"Merge {instance_id}: branch {branch_id} completed "
                f"({instance.completed_count}/{instance.expected_total})"
            )

            config = instance.config
            if should_proceed(config.mode, list(instance.branches.values()), config.wait_count):
                self._resolve(instance, MergeStatus.COMPLETED, value=instance.combine())

        return True

    def complete_branch_threadsafe(
        self,
        loop: asyncio.AbstractEventLoop,
        instance_id: str,
        branch_id: str,
        result: Any = None,
    ) -> Future:
        """Report a branch completion from a thread other than the loop's.

        Returns:
            Future resolving to the ``complete_branch`` return value
        """
        return asyncio.run_coroutine_threadsafe(
            self.complete_branch(instance_id, branch_id, result),
            loop,
        )

    async def end_run(self, run_id: str) -> int:
        """Cancel every instance of a workflow run that is still waiting.

        Returns:
            Number of instances cancelled
        """
        cancelled = 0
        for instance in [i for i in self._instances.values() if i.run_id == run_id]:
            async with instance.lock:
                if instance.resolved:
                    continue
                self._resolve(
                    instance,
                    MergeStatus.CANCELLED,
                    error="Workflow run ended before the merge resolved",
                )
                cancelled += 1

        if cancelled:
            logger.info(f"Cancelled {cancelled} waiting merge instance(s) for run {run_id}")
        return cancelled

    async def _expire(self, instance: MergeInstance, delay: float) -> None:
        """Timeout task racing against branch completions."""
        await asyncio.sleep(delay)

        async with instance.lock:
            if instance.resolved:
                return

            timeout = instance.config.timeout
            completed, total = instance.completed_count, instance.expected_total

            if timeout.behavior == TimeoutBehavior.CONTINUE:
                logger.warning(
                    f"Merge {instance.instance_id} timed out after {timeout.ms}ms, "
                    f"continuing with {completed}/{total} branches"
                )
                self._resolve(instance, MergeStatus.TIMED_OUT, value=instance.combine())
            else:
                logger.error(
                    f"Merge {instance.instance_id} timed out after {timeout.ms}ms "
                    f"with {completed}/{total} branches completed"
                )
                self._resolve(
                    instance,
                    MergeStatus.FAILED,
                    error=(
                        f"Merge timed out after {timeout.ms}ms "
                        f"({completed}/{total} branches completed)"
                    ),
                )

    def _resolve(
        self,
        instance: MergeInstance,
        status: MergeStatus,
        value: Any = None,
        error: str | None = None,
    ) -> MergeOutcome:
        """Resolve an instance exactly once. Caller must hold its lock."""
        instance.resolved = True

        timer = instance.timer
        if timer is not None and timer is not asyncio.current_task():
            timer.cancel()

        if self._instances.get(instance.instance_id) is instance:
            del self._instances[instance.instance_id]

        outcome = MergeOutcome(
            instance_id=instance.instance_id,
            status=status,
            value=value,
            completed_branches=[
                branch.branch_id for branch in order_by_arrival(list(instance.branches.values()))
            ],
            error=error,
        )
        instance._outcome.set_result(outcome)

        logger.info(
            f"Merge {instance.instance_id} resolved: status={status.value}, "
            f"branches={outcome.completed_branches}"
        )
        return outcome
