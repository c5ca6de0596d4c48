"""
Base Tool - The contract every generated tool satisfies.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, TypeVar, Union

from pydantic import BaseModel, Field

from yart.tools.errors import ToolError

T = TypeVar("T")

# Return annotation of a tool body: the success type or a ToolError.
Fallible = Union[T, ToolError]


class ToolOutput(BaseModel):
    """Successful result of a tool call."""

    result: Any = None


class ToolDefinition(BaseModel):
    """Tool definition handed to the host framework."""

    name: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)  # JSON Schema


class Tool(ABC):
    """
    Abstract base class for tools.

    All tools expose:
    - name: constant public name
    - definition: name, description and parameter schema
    - call: serialized arguments in, ``ToolOutput`` out, ``ToolError`` raised on failure
    """

    NAME: ClassVar[str]

    def name(self) -> str:
        """Get the tool name."""
        return self.NAME

    @abstractmethod
    async def definition(self, prompt: str = "") -> ToolDefinition:
        """Get tool definition."""
        pass

    @abstractmethod
    async def call(self, args: Any = None) -> ToolOutput:
        """
        Execute the tool.

        Args:
            args: Serialized arguments (JSON text, JSON value or typed instance)

        Returns:
            ToolOutput wrapping the JSON form of the result

        Raises:
            ToolError: On any failure
        """
        pass
