"""Unit tests for loop result aggregation."""

import logging

import pytest

from action_core.core.domain import AggregatedResults, IterationResult, ResultsConfig
from action_core.core.workflow.loop import (
    aggregate_loop_results,
    create_failure_result,
    create_success_result,
    get_aggregation_key,
    validate_aggregated_results,
)


class TestAggregateLoopResults:
    """Test cases for aggregate_loop_results."""

    def test_mixed_results_collected(self):
        """Test a loop with one failed iteration."""
        iterations = [
            create_success_result(0, "a"),
            create_failure_result(1, "x"),
            create_success_result(2, "c"),
        ]

        aggregated = aggregate_loop_results(iterations, ResultsConfig(collect=True))

        assert aggregated.results == ["a", None, "c"]
        assert aggregated.total_iterations == 3
        assert aggregated.success_count == 2
        assert aggregated.failure_count == 1
        assert aggregated.all_succeeded is False

    def test_collect_disabled(self):
        """Test counts are kept when results are not collected."""
        iterations = [create_success_result(0, 1), create_success_result(1, 2)]

        aggregated = aggregate_loop_results(iterations, ResultsConfig(collect=False))

        assert aggregated.results == []
        assert aggregated.total_iterations == 2
        assert aggregated.success_count == 2
        assert aggregated.all_succeeded is True

    def test_no_iterations(self):
        """Test an empty loop never counts as all succeeded."""
        aggregated = aggregate_loop_results([], ResultsConfig())

        assert aggregated == AggregatedResults()
        assert aggregated.all_succeeded is False

    def test_results_follow_iteration_index(self):
        """Test out-of-order completions are placed by index."""
        iterations = [
            create_success_result(2, {"n": 2}),
            create_success_result(0, {"n": 0}),
            create_failure_result(1, "timeout"),
        ]

        aggregated = aggregate_loop_results(iterations, ResultsConfig())

        assert aggregated.results == [{"n": 0}, None, {"n": 2}]

    def test_failures_are_logged(self, caplog):
        """Test failed iterations are reported in the log."""
        iterations = [create_failure_result(0, "boom"), create_success_result(1, True)]

        with caplog.at_level(logging.INFO, logger="action_core.core.workflow.loop"):
            aggregate_loop_results(iterations, ResultsConfig())

        assert "1/2 failed iterations" in caplog.text

    @pytest.mark.parametrize("collect", [True, False])
    def test_aggregation_properties(self, collect):
        """Test count and length invariants across many outcome patterns."""
        config = ResultsConfig(collect=collect)

        for size in range(6):
            for mask in range(2 ** size):
                iterations = [
                    create_success_result(i, i) if mask & (1 << i) else create_failure_result(i, "err")
                    for i in range(size)
                ]

                aggregated = aggregate_loop_results(iterations, config)

                assert aggregated.success_count + aggregated.failure_count == aggregated.total_iterations
                assert aggregated.total_iterations == size
                assert len(aggregated.results) == (size if collect else 0)
                assert aggregated.all_succeeded == (size > 0 and aggregated.failure_count == 0)
                assert validate_aggregated_results(aggregated, config) is True


class TestIterationHelpers:
    """Test cases for iteration result helpers."""

    def test_create_success_result(self):
        """Test a successful iteration."""
        result = create_success_result(4, [1, 2])

        assert result == IterationResult(index=4, value=[1, 2], success=True)
        assert result.error is None

    def test_create_failure_result(self):
        """Test a failed iteration carries only the error."""
        result = create_failure_result(1, "division by zero")

        assert result.success is False
        assert result.value is None
        assert result.error == "division by zero"


class TestValidateAggregatedResults:
    """Test cases for aggregated result consistency checks."""

    def test_inconsistent_counts(self):
        """Test counts that do not add up."""
        aggregated = AggregatedResults(results=[1], total_iterations=1, success_count=1, failure_count=1)

        assert validate_aggregated_results(aggregated, ResultsConfig()) is False

    def test_results_present_when_not_collecting(self):
        """Test results must be empty when collect is false."""
        aggregated = AggregatedResults(
            results=[1], total_iterations=1, success_count=1, all_succeeded=True
        )

        assert validate_aggregated_results(aggregated, ResultsConfig(collect=False)) is False
        assert validate_aggregated_results(aggregated, ResultsConfig(collect=True)) is True

    def test_all_succeeded_mismatch(self):
        """Test all_succeeded must agree with the counts."""
        aggregated = AggregatedResults(all_succeeded=True)

        assert validate_aggregated_results(aggregated, ResultsConfig()) is False


class TestGetAggregationKey:
    """Test cases for aggregation key selection."""

    def test_configured_key(self):
        """Test the configured key wins."""
        assert get_aggregation_key(ResultsConfig(aggregation_key="processed"), "output") == "processed"

    @pytest.mark.parametrize("key", [None, ""])
    def test_default_key(self, key):
        """Test the output key is used when no key is configured."""
        assert get_aggregation_key(ResultsConfig(aggregation_key=key), "output") == "output"
