"""
Tool errors - definition-time and run-time error types.

Definition errors are raised while a tool is being built by the decorator and
never reach a running system. Run-time errors are what ``call`` raises; every
failure inside a call ends up as one of the ``ToolError`` subclasses below.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


# =============================================================================
# Definition-time errors
# =============================================================================

class ToolSpecError(TypeError):
    """A function could not be turned into a tool."""


class MissingAttributeError(ToolSpecError):
    """A required decorator attribute (``description``) was not given."""


class UnsupportedArityError(ToolSpecError):
    """The function declares a parameter count other than 0, 1 or 2."""


class UnsupportedParameterError(ToolSpecError):
    """A parameter is not a plain, annotated positional parameter."""


class InvalidReturnTypeError(ToolSpecError):
    """The return annotation is not ``Fallible[T]``."""


# =============================================================================
# Run-time errors
# =============================================================================

class ToolErrorKind(str, Enum):
    """Where a failed call went wrong."""
    LOGIC = "logic"
    ISOLATION = "isolation"
    SERIALIZATION = "serialization"
    ARGUMENTS = "arguments"


class ToolError(Exception):
    """
    Uniform failure value of a tool call.

    The message is the only thing a host sees. The original exception, if any,
    is kept on ``cause`` for logging and never leaks into ``to_dict``.
    """

    kind: ToolErrorKind = ToolErrorKind.LOGIC

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        safe_message = message if isinstance(message, str) and message.strip() else "Unknown tool error"
        super().__init__(safe_message)
        self.message = safe_message
        self.cause = cause

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ToolError":
        """Collapse any exception into a ToolError carrying its display text."""
        if isinstance(exc, ToolError):
            return exc
        return cls(str(exc) or exc.__class__.__name__, cause=exc)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form handed back to agents."""
        return {
            "error": self.message,
            "kind": self.kind.value,
            "error_type": self.__class__.__name__,
        }

    def to_log_dict(self) -> Dict[str, Any]:
        payload = self.to_dict()
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def __str__(self) -> str:
        return self.message


class LogicError(ToolError):
    """The tool body rejected the call."""
    kind = ToolErrorKind.LOGIC


class IsolationFailure(ToolError):
    """The detached task running the body ended without delivering a result."""
    kind = ToolErrorKind.ISOLATION


class SerializationError(ToolError):
    """The success value could not be turned into JSON."""
    kind = ToolErrorKind.SERIALIZATION

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ToolError":
        if isinstance(exc, ToolError):
            return exc
        return cls(f"Serialization error: {exc}", cause=exc)


class ArgumentsError(ToolError):
    """The serialized arguments did not match the tool's argument type."""
    kind = ToolErrorKind.ARGUMENTS

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ToolError":
        if isinstance(exc, ToolError):
            return exc
        return cls(f"Deserialization error: {exc}", cause=exc)
