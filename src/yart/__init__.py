"""
yart - Build agent tools from plain async functions.

A decorated function becomes a Tool class with a constant name, a JSON Schema
for its arguments and a uniform ``call`` entry point that runs the body in an
isolated task.
"""

from yart.tools import (
    Fallible,
    Tool,
    ToolDefinition,
    ToolError,
    ToolOutput,
    derive_parameters,
    rig_tool,
    wrap_unsafe,
)

__version__ = "0.1.0"

__all__ = [
    "Fallible",
    "Tool",
    "ToolDefinition",
    "ToolError",
    "ToolOutput",
    "derive_parameters",
    "rig_tool",
    "wrap_unsafe",
    "__version__",
]
