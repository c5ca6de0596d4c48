import json

from yart.tools.base import ToolOutput
from yart.tools.errors import (
    ArgumentsError,
    IsolationFailure,
    LogicError,
    SerializationError,
    ToolError,
    ToolErrorKind,
)


def test_tool_error_new():
    error = ToolError("Custom error")
    assert error.message == "Custom error"
    assert str(error) == "Custom error"
    assert error.kind is ToolErrorKind.LOGIC
    assert error.cause is None


def test_tool_error_blank_message():
    assert str(ToolError("   ")) == "Unknown tool error"


def test_tool_error_keeps_message_verbatim():
    error = ToolError("  padded  ")
    assert error.message == "  padded  "
    assert str(error) == "  padded  "


def test_tool_error_from_exception_collapses_to_text():
    cause = OSError("Boxed error")
    error = ToolError.from_exception(cause)

    assert str(error) == "Boxed error"
    assert error.cause is cause
    assert "cause" not in error.to_dict()
    assert error.to_log_dict()["cause"] == repr(cause)


def test_tool_error_from_tool_error_is_identity():
    original = IsolationFailure("Channel closed")
    assert LogicError.from_exception(original) is original


def test_error_kinds():
    assert LogicError("x").kind is ToolErrorKind.LOGIC
    assert IsolationFailure("x").kind is ToolErrorKind.ISOLATION
    assert SerializationError("x").kind is ToolErrorKind.SERIALIZATION
    assert ArgumentsError("x").kind is ToolErrorKind.ARGUMENTS


def test_prefixed_messages():
    assert str(SerializationError.from_exception(ValueError("bad"))) == "Serialization error: bad"
    assert str(ArgumentsError.from_exception(ValueError("bad"))) == "Deserialization error: bad"


def test_to_dict():
    assert SerializationError("Serialization error: nope").to_dict() == {
        "error": "Serialization error: nope",
        "kind": "serialization",
        "error_type": "SerializationError",
    }


def test_tool_output_serialization():
    output = ToolOutput(result={"key": "value"})
    serialized = output.model_dump_json()
    assert json.loads(serialized) == {"result": {"key": "value"}}

    restored = ToolOutput.model_validate_json(serialized)
    assert restored.result == {"key": "value"}
