"""Loop result aggregation.

Folds the per-iteration outcomes of a forEach, while or times loop into the
summary the Loop node writes back to the workflow state.
"""

import logging
from collections.abc import Sequence

from pydantic import JsonValue

from ..domain.loop import AggregatedResults, IterationResult, ResultsConfig

logger = logging.getLogger(__name__)


def aggregate_loop_results(
    iterations: Sequence[IterationResult],
    config: ResultsConfig,
) -> AggregatedResults:
    """Aggregate loop iteration results.

    Properties:
    - When collect is false, results is empty
    - When collect is true, results follow iteration index order and failed
      iterations contribute None
    - Counts are accurate regardless of the collect setting
    - all_succeeded is true only when there was at least one iteration and
      none failed

    Args:
        iterations: Iteration outcomes, in any order
        config: Result aggregation configuration

    Returns:
        Aggregated results
    """
    total_iterations = len(iterations)
    success_count = sum(1 for iteration in iterations if iteration.success)
    failure_count = total_iterations - success_count
    all_succeeded = failure_count == 0 and total_iterations > 0

    results: list[JsonValue] = []
    if config.collect:
        ordered = sorted(iterations, key=lambda iteration: iteration.index)
        results = [
            iteration.value if iteration.success else None
            for iteration in ordered
        ]

    if failure_count:
        logger.info(
            f"Loop finished with {failure_count}/{total_iterations} failed iterations"
        )

    return AggregatedResults(
        results=results,
        total_iterations=total_iterations,
        success_count=success_count,
        failure_count=failure_count,
        all_succeeded=all_succeeded,
    )


def create_success_result(index: int, value: JsonValue) -> IterationResult:
    """Create the result of a successful iteration."""
    return IterationResult(index=index, value=value, success=True)


def create_failure_result(index: int, error: str) -> IterationResult:
    """Create the result of a failed iteration."""
    return IterationResult(index=index, value=None, success=False, error=error)


def validate_aggregated_results(
    aggregated: AggregatedResults,
    config: ResultsConfig,
) -> bool:
    """Check that aggregated results are internally consistent.

    Checks that success and failure counts add up to the total, that the
    results length matches the collect setting, and that all_succeeded agrees
    with the counts.
    """
    if aggregated.success_count + aggregated.failure_count != aggregated.total_iterations:
        return False

    expected_length = aggregated.total_iterations if config.collect else 0
    if len(aggregated.results) != expected_length:
        return False

    expected_all_succeeded = (
        aggregated.failure_count == 0 and aggregated.total_iterations > 0
    )
    return aggregated.all_succeeded == expected_all_succeeded


def get_aggregation_key(config: ResultsConfig, default_output_key: str) -> str:
    """Get the state key for storing aggregated results.

    Args:
        config: Result aggregation configuration
        default_output_key: Output key from the node's mapping

    Returns:
        The configured aggregation key, or the default when unset or empty
    """
    return config.aggregation_key or default_output_key
