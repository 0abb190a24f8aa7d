"""Execution request/result models and value serialization.

``ExecutionResult`` is a tagged union discriminated by ``kind``:

- :class:`ExecutionSuccess` carries the serialized return value and its type.
- :class:`ExecutionFailure` carries the error message and a failure category.

Both render to the wire payload consumed by the model host with
``to_payload()``.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ExecutionRequest(BaseModel):
    """Input schema for the orchestration tool."""

    code: str = Field(
        ...,
        description=(
            "Python code to execute as the body of an async function. "
            "Use await for capability calls and return a value or object."
        ),
    )


class FailureKind(str, Enum):
    """Why a script did not produce a value."""

    compilation = "compilation"
    capability = "capability"
    runtime = "runtime"
    timeout = "timeout"
    serialization = "serialization"


class ExecutionSuccess(BaseModel):
    """Script settled with a value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    value: str
    value_type: str

    @property
    def success(self) -> bool:
        return True

    def to_payload(self) -> Dict[str, Any]:
        return {"success": True, "result": self.value, "type": self.value_type}


class ExecutionFailure(BaseModel):
    """Script failed, timed out or could not be compiled."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    error_message: str
    failure_kind: FailureKind

    @property
    def success(self) -> bool:
        return False

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error_message, "type": "error"}


ExecutionResult = Annotated[Union[ExecutionSuccess, ExecutionFailure], Field(discriminator="kind")]


class ExecutionPayload(BaseModel):
    """Output schema of the orchestration tool (the wire form of a result)."""

    success: bool = Field(..., description="Whether the script produced a value")
    result: str | None = Field(None, description="Serialized return value when successful")
    error: str | None = Field(None, description="Error message when failed")
    type: str = Field(..., description="Type of the returned value, or 'error'")


def _json_default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    return str(obj)


def value_type_of(value: Any) -> str:
    """Name the JSON-level type of a script return value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (dict, list, tuple, set, frozenset, BaseModel)):
        return "object"
    return type(value).__name__


def serialize_value(value: Any) -> Tuple[str, str]:
    """Serialize a script return value for transmission back to the model.

    Objects are rendered as indented JSON; strings are passed through; other
    primitives use their JSON form (``5``, ``true``, ``null``).

    Returns:
        ``(text, value_type)``

    Raises:
        ValueError: For values JSON cannot represent (e.g. circular references).
    """
    value_type = value_type_of(value)
    if isinstance(value, str):
        return value, value_type
    if value_type == "object":
        return json.dumps(value, indent=2, default=_json_default, ensure_ascii=False), value_type
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value), value_type
    return str(value), value_type
