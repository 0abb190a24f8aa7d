from __future__ import annotations

import pytest
from pydantic import BaseModel, TypeAdapter

from codemode_ai.sandbox import (
    ExecutionFailure,
    ExecutionPayload,
    ExecutionRequest,
    ExecutionResult,
    ExecutionSuccess,
    FailureKind,
    serialize_value,
)
from codemode_ai.sandbox.models import value_type_of


class _Keyword(BaseModel):
    keyword: str
    volume: int


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, ("5", "number")),
        (2.5, ("2.5", "number")),
        (True, ("true", "boolean")),
        (None, ("null", "null")),
        ("plain text", ("plain text", "string")),
        ({"k": "v"}, ('{\n  "k": "v"\n}', "object")),
        ((1, 2), ("[\n  1,\n  2\n]", "object")),
    ],
)
def test_serialize_value(value, expected) -> None:
    assert serialize_value(value) == expected


def test_serialize_nested_models_and_sets() -> None:
    text, value_type = serialize_value({"kw": _Keyword(keyword="seo", volume=10), "tags": {"b", "a"}})
    assert value_type == "object"
    assert '"keyword": "seo"' in text
    assert '"a"' in text and '"b"' in text


def test_value_type_of_other_objects() -> None:
    assert value_type_of(b"raw") == "bytes"
    assert value_type_of(_Keyword(keyword="x", volume=1)) == "object"


def test_payloads() -> None:
    assert ExecutionSuccess(value="5", value_type="number").to_payload() == {
        "success": True,
        "result": "5",
        "type": "number",
    }
    failure = ExecutionFailure(error_message="boom", failure_kind=FailureKind.runtime)
    assert failure.to_payload() == {"success": False, "error": "boom", "type": "error"}
    assert ExecutionPayload.model_validate(failure.to_payload()).error == "boom"


def test_result_union_discriminates_on_kind() -> None:
    adapter = TypeAdapter(ExecutionResult)
    parsed = adapter.validate_python({"kind": "failure", "error_message": "x", "failure_kind": "timeout"})
    assert isinstance(parsed, ExecutionFailure) and parsed.failure_kind is FailureKind.timeout
    assert isinstance(adapter.validate_python({"kind": "success", "value": "1", "value_type": "number"}), ExecutionSuccess)


def test_request_schema_has_code_field() -> None:
    schema = ExecutionRequest.model_json_schema()
    assert schema["required"] == ["code"]
