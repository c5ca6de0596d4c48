"""Tools module - tool compiler, isolation wrapper and shared tool types."""

from yart.tools.base import Fallible, Tool, ToolDefinition, ToolOutput
from yart.tools.compiler import (
    ArgsOnly,
    ContextAndArgs,
    GeneratedTool,
    NoArgs,
    ToolSpec,
    compile_tool,
    rig_tool,
    to_upper_camel_case,
)
from yart.tools.errors import (
    ArgumentsError,
    IsolationFailure,
    LogicError,
    SerializationError,
    ToolError,
    ToolErrorKind,
    ToolSpecError,
)
from yart.tools.isolation import wrap_unsafe
from yart.tools.schema import derive_parameters

__all__ = [
    "Fallible",
    "Tool",
    "ToolDefinition",
    "ToolOutput",
    "ArgsOnly",
    "ContextAndArgs",
    "GeneratedTool",
    "NoArgs",
    "ToolSpec",
    "compile_tool",
    "rig_tool",
    "to_upper_camel_case",
    "ArgumentsError",
    "IsolationFailure",
    "LogicError",
    "SerializationError",
    "ToolError",
    "ToolErrorKind",
    "ToolSpecError",
    "wrap_unsafe",
    "derive_parameters",
]
