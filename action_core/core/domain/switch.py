"""Switch node models.

A Switch node routes a workflow run to one or more output ports by testing
conditions against the current workflow state.
"""

from enum import Enum

from pydantic import ConfigDict, Field, JsonValue

from .values import NodeConfigModel


class ConditionOperator(str, Enum):
    """Comparison operators available to Switch conditions."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    MATCHES = "matches"
    IN = "in"
    EMPTY = "empty"
    EXISTS = "exists"


class EvaluationMode(str, Enum):
    """How many matching conditions a Switch node routes to."""

    FIRST_MATCH = "first_match"  # Route to the first matching port only
    ALL_MATCH = "all_match"      # Route to every matching port


class SwitchCondition(NodeConfigModel):
    """A single routing condition of a Switch node."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique condition identifier")
    field: str = Field(..., description="Dot-separated path into the workflow state")
    operator: ConditionOperator = Field(..., description="Comparison operator")
    value: JsonValue = Field(
        default=None,
        description="Value to compare the field against",
    )
    output_port: str = Field(..., description="Port to route to when the condition matches")


class SwitchNodeConfig(NodeConfigModel):
    """Routing configuration of a Switch node."""

    conditions: list[SwitchCondition] = Field(default_factory=list)
    evaluation_mode: EvaluationMode = Field(default=EvaluationMode.FIRST_MATCH)
    default_branch: str | None = Field(
        None,
        description="Port used when no condition matches",
    )


class ConditionResult(NodeConfigModel):
    """Result of evaluating a single condition."""

    condition_id: str
    matched: bool
    output_port: str


class SwitchEvaluationResult(NodeConfigModel):
    """Result of evaluating the conditions of a Switch node."""

    matched_ports: list[str] = Field(default_factory=list)
    condition_results: list[ConditionResult] = Field(default_factory=list)
    has_match: bool = False
    first_matched_port: str | None = None
