"""Switch condition evaluation.

Resolves dot-separated field paths in the workflow state and tests them with
the Switch node operators. Every function here is pure and never raises on
odd input: a type mismatch or a bad regular expression simply does not match.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from ..domain.switch import (
    ConditionOperator,
    ConditionResult,
    EvaluationMode,
    SwitchCondition,
    SwitchEvaluationResult,
    SwitchNodeConfig,
)
from ..domain.values import MISSING, WorkflowState

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def strict_equals(left: Any, right: Any) -> bool:
    """Type-strict equality.

    Booleans never equal numbers, ``MISSING`` only equals itself, and
    sequences or mappings are compared element by element with the same rule.
    """
    if _is_number(left) and _is_number(right):
        return left == right
    if _is_sequence(left) and _is_sequence(right):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            strict_equals(left[key], right[key]) for key in left
        )
    if type(left) is not type(right):
        return False
    return left == right


def _contains_strict(items: Iterable[Any], needle: Any) -> bool:
    return any(strict_equals(item, needle) for item in items)


def _numeric(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if _is_number(field_value) and _is_number(condition_value):
            return compare(field_value, condition_value)
        return False

    return evaluate


def _strings(compare: Callable[[str, str], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if isinstance(field_value, str) and isinstance(condition_value, str):
            return compare(field_value, condition_value)
        return False

    return evaluate


def _contains(field_value: Any, condition_value: Any) -> bool:
    if isinstance(field_value, str) and isinstance(condition_value, str):
        return condition_value in field_value
    if _is_sequence(field_value):
        return _contains_strict(field_value, condition_value)
    return False


def _matches(field_value: str, pattern: str) -> bool:
    try:
        return re.search(pattern, field_value) is not None
    except re.error as e:
        logger.debug(f"Invalid pattern {pattern!r} in matches condition: {e}")
        return False


def _in(field_value: Any, condition_value: Any) -> bool:
    if _is_sequence(condition_value):
        return _contains_strict(condition_value, field_value)
    return False


def _empty(field_value: Any, condition_value: Any) -> bool:
    if field_value is None or field_value is MISSING:
        return True
    if isinstance(field_value, str) or _is_sequence(field_value):
        return len(field_value) == 0
    if isinstance(field_value, Mapping):
        return len(field_value) == 0
    return False


def _exists(field_value: Any, condition_value: Any) -> bool:
    return field_value is not None and field_value is not MISSING


_OPERATORS: dict[ConditionOperator, Callable[[Any, Any], bool]] = {
    ConditionOperator.EQ: strict_equals,
    ConditionOperator.NEQ: lambda a, b: not strict_equals(a, b),
    ConditionOperator.GT: _numeric(lambda a, b: a > b),
    ConditionOperator.LT: _numeric(lambda a, b: a < b),
    ConditionOperator.GTE: _numeric(lambda a, b: a >= b),
    ConditionOperator.LTE: _numeric(lambda a, b: a <= b),
    ConditionOperator.CONTAINS: _contains,
    ConditionOperator.STARTS_WITH: _strings(str.startswith),
    ConditionOperator.ENDS_WITH: _strings(str.endswith),
    ConditionOperator.MATCHES: _strings(_matches),
    ConditionOperator.IN: _in,
    ConditionOperator.EMPTY: _empty,
    ConditionOperator.EXISTS: _exists,
}


def get_nested_value(state: Any, path: str) -> Any:
    """Get a nested value from the workflow state using dot notation.

    Args:
        state: The workflow state (or any nested value)
        path: Dot-separated path, e.g. ``"user.profile.name"``. Integer
            segments index into lists, e.g. ``"items.0.id"``.

    Returns:
        The value at the path, or ``MISSING`` if any segment cannot be resolved
    """
    current = state
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return MISSING
            current = current[part]
        elif _is_sequence(current) and part.isascii() and part.isdigit():
            index = int(part)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def evaluate_operator(
    operator: ConditionOperator,
    field_value: Any,
    condition_value: Any,
) -> bool:
    """Evaluate a single operator against a state value.

    Args:
        operator: The comparison operator
        field_value: The value resolved from the workflow state
        condition_value: The value configured on the condition

    Returns:
        Whether the condition matches
    """
    try:
        evaluate = _OPERATORS[ConditionOperator(operator)]
    except (KeyError, ValueError):
        logger.debug(f"Unknown condition operator: {operator!r}")
        return False
    return evaluate(field_value, condition_value)


def evaluate_condition(condition: SwitchCondition, state: WorkflowState) -> ConditionResult:
    """Evaluate a single Switch condition against the workflow state."""
    field_value = get_nested_value(state, condition.field)
    matched = evaluate_operator(condition.operator, field_value, condition.value)

    return ConditionResult(
        condition_id=condition.id,
        matched=matched,
        output_port=condition.output_port,
    )


def evaluate_switch(
    conditions: Sequence[SwitchCondition],
    state: WorkflowState,
    evaluation_mode: EvaluationMode,
) -> SwitchEvaluationResult:
    """Evaluate the conditions of a Switch node in declaration order.

    In first_match mode evaluation stops at the first matching condition, so
    later conditions are never evaluated. In all_match mode every condition
    is evaluated.

    Args:
        conditions: Conditions to evaluate
        state: The workflow state
        evaluation_mode: first_match or all_match

    Returns:
        Matched ports in evaluation order plus per-condition results
    """
    condition_results: list[ConditionResult] = []
    matched_ports: list[str] = []
    first_matched_port: str | None = None

    for condition in conditions:
        result = evaluate_condition(condition, state)
        condition_results.append(result)

        if not result.matched:
            continue

        matched_ports.append(result.output_port)
        if first_matched_port is None:
            first_matched_port = result.output_port

        if evaluation_mode == EvaluationMode.FIRST_MATCH:
            break

    logger.debug(
        f"Switch evaluated {len(condition_results)}/{len(conditions)} conditions "
        f"({EvaluationMode(evaluation_mode).value}): matched={matched_ports}"
    )

    return SwitchEvaluationResult(
        matched_ports=matched_ports,
        condition_results=condition_results,
        has_match=bool(matched_ports),
        first_matched_port=first_matched_port,
    )


def get_switch_output_ports(
    conditions: Sequence[SwitchCondition],
    state: WorkflowState,
    evaluation_mode: EvaluationMode,
    default_branch: str | None = None,
) -> list[str]:
    """Get the output port(s) a Switch node routes to.

    Returns:
        ``[first_matched_port]`` in first_match mode, every matched port in
        all_match mode, ``[default_branch]`` when nothing matched and a
        default exists, otherwise an empty list
    """
    result = evaluate_switch(conditions, state, evaluation_mode)

    if result.has_match:
        if evaluation_mode == EvaluationMode.FIRST_MATCH:
            return [result.first_matched_port]
        return result.matched_ports

    if default_branch:
        return [default_branch]

    return []


def route_switch_node(config: SwitchNodeConfig, state: WorkflowState) -> list[str]:
    """Get the output ports for a Switch node configuration."""
    return get_switch_output_ports(
        config.conditions,
        state,
        config.evaluation_mode,
        config.default_branch,
    )


def validate_switch_config(config: SwitchNodeConfig) -> list[str]:
    """Validate a Switch node configuration.

    Returns:
        List of validation error messages, empty if the configuration is valid
    """
    errors: list[str] = []
    seen_ids: set[str] = set()

    for position, condition in enumerate(config.conditions, start=1):
        label = f"Condition {position} ({condition.id})"

        if condition.id in seen_ids:
            errors.append(f"{label}: duplicate condition id")
        seen_ids.add(condition.id)

        if not condition.field.strip():
            errors.append(f"{label}: field path is required")
        if not condition.output_port.strip():
            errors.append(f"{label}: output port is required")

        if condition.operator == ConditionOperator.IN and not _is_sequence(condition.value):
            errors.append(f"{label}: 'in' requires a list of values")

        if condition.operator == ConditionOperator.MATCHES:
            if not isinstance(condition.value, str):
                errors.append(f"{label}: 'matches' requires a regular expression string")
            else:
                try:
                    re.compile(condition.value)
                except re.error as e:
                    errors.append(f"{label}: invalid regular expression ({e})")

    return errors
