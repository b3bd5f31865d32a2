"""Shared value types for node configuration and workflow state.

Workflow state and node outputs are JSON-like values. Configuration records
are persisted with the rest of a saved workflow document, so every model here
serializes with camelCase keys and must survive a JSON round trip unchanged.
"""

from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, JsonValue
from pydantic.alias_generators import to_camel

WorkflowState: TypeAlias = Mapping[str, JsonValue]


class _Missing:
    """Marker for a value that is absent, as opposed to JSON null."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class NodeConfigModel(BaseModel):
    """Base model for node configuration and result records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self) -> str:
        """Serialize using the persisted (camelCase) field names."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes):
        """Deserialize a record previously produced by ``to_json``."""
        return cls.model_validate_json(data)
