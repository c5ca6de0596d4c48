"""
Tool compiler - turn an annotated function into a Tool class.

Usage:
    @rig_tool(name="echo", description="Echo input with context")
    async def echo_tool(ctx: EchoContext, args: EchoArgs) -> Fallible[EchoOutput]:
        ...

    tool = echo_tool(ctx)          # echo_tool is the generated class ``EchoTool``
    output = await tool.call({"input": "hi"})

Parameters are assigned roles by position only:

    0 parameters  -> no context, no arguments
    1 parameter   -> arguments
    2 parameters  -> context, arguments
"""

from __future__ import annotations

import asyncio
import copy
import functools
import inspect
import sys
import types
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from loguru import logger
from pydantic import TypeAdapter

from yart.config.manager import get_config
from yart.tools.base import Tool, ToolDefinition, ToolOutput
from yart.tools.errors import (
    ArgumentsError,
    InvalidReturnTypeError,
    LogicError,
    MissingAttributeError,
    ToolError,
    ToolSpecError,
    UnsupportedArityError,
    UnsupportedParameterError,
)
from yart.tools.isolation import wrap_unsafe
from yart.tools.schema import derive_parameters, dump_result, load_arguments

_NONE_TYPE = type(None)
_SIMPLE_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_UNION_TYPES: Tuple[Any, ...] = (Union,)
if sys.version_info >= (3, 10):
    _UNION_TYPES += (types.UnionType,)


def to_upper_camel_case(identifier: str) -> str:
    """find_token_metadata -> FindTokenMetadata"""
    return "".join(part[:1].upper() + part[1:] for part in identifier.split("_"))


# =============================================================================
# Call shapes
# =============================================================================

@dataclass(frozen=True)
class NoArgs:
    """Body takes nothing."""

    @property
    def context_type(self) -> Any:
        return None

    @property
    def args_type(self) -> Any:
        return _NONE_TYPE

    def invoke(self, body: Callable, ctx: Any, args: Any) -> Any:
        return body()


@dataclass(frozen=True)
class ArgsOnly:
    """Body takes the deserialized arguments."""

    args_type: Any

    @property
    def context_type(self) -> Any:
        return None

    def invoke(self, body: Callable, ctx: Any, args: Any) -> Any:
        return body(args)


@dataclass(frozen=True)
class ContextAndArgs:
    """Body takes the shared context, then the deserialized arguments."""

    context_type: Any
    args_type: Any

    def invoke(self, body: Callable, ctx: Any, args: Any) -> Any:
        return body(ctx, args)


CallShape = Union[NoArgs, ArgsOnly, ContextAndArgs]


@dataclass(frozen=True)
class ToolSpec:
    """Everything needed to build a tool."""

    description: str
    body: Callable[..., Any]
    name: Optional[str] = None
    context_type: Any = None
    args_type: Any = None
    result_type: Any = Any

    @property
    def tool_name(self) -> str:
        return self.name if self.name is not None else self.body.__name__

    @property
    def struct_name(self) -> str:
        return to_upper_camel_case(self.body.__name__)

    @property
    def shape(self) -> CallShape:
        if self.context_type is not None:
            if self.args_type is None:
                raise UnsupportedArityError(
                    f"{self.body.__name__}: a context can only be declared together with arguments"
                )
            return ContextAndArgs(self.context_type, self.args_type)
        if self.args_type is not None:
            return ArgsOnly(self.args_type)
        return NoArgs()


# =============================================================================
# Generated tool base classes
# =============================================================================

def _is_empty_payload(payload: Any) -> bool:
    if payload is None:
        return True
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        return payload.strip() in ("", "null", "{}")
    return isinstance(payload, dict) and not payload


class GeneratedTool(Tool):
    """Shared runtime of every compiled tool; subclasses only carry data."""

    spec: ClassVar[ToolSpec]
    shape: ClassVar[CallShape]
    struct_name: ClassVar[str]
    _parameters: ClassVar[Dict[str, Any]]
    _args_adapter: ClassVar[Optional[TypeAdapter]]
    _result_adapter: ClassVar[TypeAdapter]

    _ctx: Any = None

    @staticmethod
    @abstractmethod
    async def internal_call(*args: Any) -> Any:
        """The compiled body."""

    @property
    def ctx(self) -> Any:
        return self._ctx

    async def definition(self, prompt: str = "") -> ToolDefinition:
        return ToolDefinition(
            name=self.NAME,
            description=self.spec.description,
            parameters=copy.deepcopy(self._parameters),
        )

    def _load_args(self, args: Any) -> Any:
        if self._args_adapter is None:
            if not _is_empty_payload(args):
                raise ArgumentsError(f"Deserialization error: {self.NAME} takes no arguments")
            return None
        return load_arguments(self.shape.args_type, args, self._args_adapter)

    async def call(self, args: Any = None) -> ToolOutput:
        if get_config().get("tools.log_arguments", False):
            logger.debug(f"Calling tool {self.NAME} with {args!r}")

        try:
            parsed = self._load_args(args)
            ctx = self._ctx
            result = await wrap_unsafe(lambda: self.shape.invoke(self.internal_call, ctx, parsed))
            if isinstance(result, ToolError):
                raise result
            serialized = dump_result(self.spec.result_type, result, self._result_adapter)
        except ToolError as e:
            logger.warning(f"Tool {self.NAME} failed ({e.kind.value}): {e.message}")
            raise
        except Exception as e:
            error = LogicError.from_exception(e)
            logger.warning(f"Tool {self.NAME} failed ({error.kind.value}): {error.message}")
            raise error from e

        return ToolOutput(result=serialized)

    def __repr__(self) -> str:
        return f"{self.struct_name}(name={self.NAME!r})"


class ContextTool(GeneratedTool):
    """Compiled tool holding a shared context."""

    def __init__(self, ctx: Any):
        self._ctx = ctx


class ContextFreeTool(GeneratedTool):
    """Compiled tool without a context."""

    def __init__(self):
        self._ctx = None


# =============================================================================
# Signature inspection
# =============================================================================

def _resolve_hints(func: Callable) -> Dict[str, Any]:
    try:
        return get_type_hints(func, include_extras=True)
    except Exception as e:
        raise ToolSpecError(f"{func.__name__}: cannot resolve annotations: {e}") from e


def _split_parameters(func: Callable, hints: Dict[str, Any]) -> Tuple[Any, Any]:
    """Map declared parameters onto (context_type, args_type) by position."""
    params = list(inspect.signature(func).parameters.values())

    if len(params) > 2:
        raise UnsupportedArityError(
            f"{func.__name__}: tools take 0-2 parameters (context and/or args), got {len(params)}"
        )

    for p in params:
        if p.name in ("self", "cls"):
            raise UnsupportedParameterError(f"{func.__name__}: receiver parameter '{p.name}' is not supported")
        if p.kind not in _SIMPLE_KINDS:
            raise UnsupportedParameterError(f"{func.__name__}: parameter '{p.name}' must be a plain positional parameter")
        if p.name not in hints:
            raise UnsupportedParameterError(f"{func.__name__}: parameter '{p.name}' needs a type annotation")

    if len(params) == 2:
        return hints[params[0].name], hints[params[1].name]
    if len(params) == 1:
        return None, hints[params[0].name]
    return None, None


def _is_error_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, ToolError)


def unwrap_fallible(annotation: Any) -> Any:
    """
    Extract the success type from a ``Fallible[T]`` annotation.

    Raises:
        InvalidReturnTypeError: ``annotation`` is not a union with ToolError
    """
    if get_origin(annotation) in _UNION_TYPES:
        members = get_args(annotation)
        errors = [m for m in members if _is_error_type(m)]
        success = [m for m in members if not _is_error_type(m)]
        if errors and success:
            if len(success) == 1:
                return success[0]
            return Union[tuple(success)]

    raise InvalidReturnTypeError(
        f"return type must be a fallible result wrapping exactly one success type "
        f"(Fallible[T]), got {annotation!r}"
    )


def spec_from_function(func: Callable, description: str, name: Optional[str] = None) -> ToolSpec:
    """Build a ToolSpec from a function's signature."""
    hints = _resolve_hints(func)
    context_type, args_type = _split_parameters(func, hints)

    if "return" not in hints:
        raise InvalidReturnTypeError(f"{func.__name__}: missing return annotation, expected Fallible[T]")
    result_type = unwrap_fallible(hints["return"])

    return ToolSpec(
        description=description,
        body=func,
        name=name,
        context_type=context_type,
        args_type=args_type,
        result_type=result_type,
    )


# =============================================================================
# Compilation
# =============================================================================

def _call_in_worker(func: Callable, *args: Any) -> Any:
    # StopIteration cannot be set on an asyncio Future.
    try:
        return func(*args)
    except StopIteration as e:
        raise RuntimeError(f"{func.__name__} raised StopIteration") from e


def _as_coroutine_function(func: Callable) -> Callable:
    if inspect.iscoroutinefunction(func):
        return func

    @functools.wraps(func)
    async def run_in_thread(*args: Any) -> Any:
        return await asyncio.to_thread(_call_in_worker, func, *args)

    return run_in_thread


def compile_tool(spec: ToolSpec) -> type:
    """
    Generate the Tool class for ``spec``.

    Returns:
        A ``GeneratedTool`` subclass named after the body in UpperCamelCase
    """
    shape = spec.shape
    struct_name = spec.struct_name
    body = spec.body
    base = ContextTool if isinstance(shape, ContextAndArgs) else ContextFreeTool

    qualname = getattr(body, "__qualname__", body.__name__)
    prefix, _, _ = qualname.rpartition(".")

    namespace = {
        "NAME": spec.tool_name,
        "spec": spec,
        "shape": shape,
        "struct_name": struct_name,
        "internal_call": staticmethod(_as_coroutine_function(body)),
        "_parameters": derive_parameters(shape.args_type),
        "_args_adapter": None if isinstance(shape, NoArgs) else TypeAdapter(shape.args_type),
        "_result_adapter": TypeAdapter(spec.result_type),
        "__doc__": body.__doc__ or spec.description,
        "__module__": getattr(body, "__module__", __name__),
        "__qualname__": f"{prefix}.{struct_name}" if prefix else struct_name,
    }
    cls = type(struct_name, (base,), namespace)

    logger.debug(f"Compiled tool {spec.tool_name} -> {struct_name} ({type(shape).__name__})")
    return cls


def rig_tool(
    func: Optional[Callable] = None,
    *,
    description: Optional[str] = None,
    name: Optional[str] = None,
):
    """
    Decorator compiling a function into a Tool class.

    Args:
        description: Human-readable description (required, may be empty)
        name: Public tool name, defaults to the function name

    Raises:
        ToolSpecError: The function cannot be compiled
    """
    if not isinstance(description, str):
        raise MissingAttributeError("rig_tool requires a description attribute")
    if name is not None and not isinstance(name, str):
        raise ToolSpecError("rig_tool name must be a string")

    def wrap_func(f: Callable) -> type:
        return compile_tool(spec_from_function(f, description, name))

    if func is not None:
        return wrap_func(func)
    return wrap_func
