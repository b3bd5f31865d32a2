"""Loop node result models."""

from pydantic import Field, JsonValue, model_validator

from .values import NodeConfigModel


class ResultsConfig(NodeConfigModel):
    """Result aggregation settings of a Loop node."""

    collect: bool = Field(
        default=True,
        description="Whether iteration outputs are collected into an array",
    )
    aggregation_key: str | None = Field(
        None,
        description="State key for the aggregated results (defaults to the node output key)",
    )


class IterationResult(NodeConfigModel):
    """Outcome of a single loop iteration."""

    index: int = Field(..., ge=0, description="0-based iteration index")
    value: JsonValue = None
    success: bool
    error: str | None = None

    @model_validator(mode="after")
    def check_failed_iteration_has_no_value(self) -> "IterationResult":
        """Failed iterations carry an error, never a value."""
        if not self.success and self.value is not None:
            raise ValueError("Failed iterations cannot carry a value")
        return self


class AggregatedResults(NodeConfigModel):
    """Summary of a finished loop."""

    results: list[JsonValue] = Field(default_factory=list)
    total_iterations: int = 0
    success_count: int = 0
    failure_count: int = 0
    all_succeeded: bool = False
