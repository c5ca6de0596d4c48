"""
Tool Schema Converter - express compiled tools in other host formats.

Supports:
- OpenAI tool/function schemas (Chat Completions API)
- OpenAI Agent SDK tool schemas
- MCP tool schemas (Model Context Protocol)
- LangChain StructuredTool wrappers
"""

from __future__ import annotations

from typing import Any, Dict, List

from langchain_core.tools import StructuredTool, ToolException
from loguru import logger
from pydantic import BaseModel, create_model

from yart.tools.base import Tool, ToolDefinition
from yart.tools.compiler import GeneratedTool, NoArgs
from yart.tools.errors import ToolError

OpenAITool = Dict[str, Any]
OpenAIAgentSDKTool = Dict[str, Any]
MCPTool = Dict[str, Any]

# Field name used when the argument type is not itself a model.
VALUE_FIELD = "value"


def _ensure_object_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Ensure schema is a JSON Schema object with properties."""
    if not schema or schema.get("type") == "null":
        return {"type": "object", "properties": {}, "required": []}
    schema = dict(schema)
    schema.pop("$schema", None)
    if schema.get("type") != "object":
        definitions = schema.pop("definitions", None)
        schema.pop("title", None)
        schema = {"type": "object", "properties": {VALUE_FIELD: schema}, "required": [VALUE_FIELD]}
        if definitions:
            schema["definitions"] = definitions
    schema.setdefault("properties", {})
    schema.setdefault("required", [])
    return schema


def _definition_to_openai(defn: ToolDefinition) -> OpenAITool:
    return {
        "type": "function",
        "function": {
            "name": defn.name,
            "description": defn.description,
            "parameters": _ensure_object_schema(defn.parameters),
        },
    }


def _definition_to_openai_agent_sdk(defn: ToolDefinition) -> OpenAIAgentSDKTool:
    return {
        "type": "function",
        "name": defn.name,
        "description": defn.description,
        "parameters": _ensure_object_schema(defn.parameters),
    }


def _definition_to_mcp(defn: ToolDefinition) -> MCPTool:
    return {
        "name": defn.name,
        "description": defn.description,
        "inputSchema": _ensure_object_schema(defn.parameters),
    }


async def to_openai_tool(tool: Tool, prompt: str = "") -> OpenAITool:
    """Convert a tool to OpenAI Chat Completions format."""
    return _definition_to_openai(await tool.definition(prompt))


async def to_openai_agent_sdk_tool(tool: Tool, prompt: str = "") -> OpenAIAgentSDKTool:
    """Convert a tool to OpenAI Agent SDK format."""
    return _definition_to_openai_agent_sdk(await tool.definition(prompt))


async def to_mcp_tool(tool: Tool, prompt: str = "") -> MCPTool:
    """Convert a tool to MCP format (name, description, inputSchema)."""
    return _definition_to_mcp(await tool.definition(prompt))


async def convert_tools_to_openai(tools: List[Tool]) -> List[OpenAITool]:
    return [await to_openai_tool(t) for t in tools]


async def convert_tools_to_mcp(tools: List[Tool]) -> List[MCPTool]:
    return [await to_mcp_tool(t) for t in tools]


def _args_model(tool: GeneratedTool) -> type:
    shape = tool.shape
    if isinstance(shape, NoArgs):
        return create_model(f"{tool.struct_name}Args")
    if isinstance(shape.args_type, type) and issubclass(shape.args_type, BaseModel):
        return shape.args_type
    return create_model(f"{tool.struct_name}Args", **{VALUE_FIELD: (shape.args_type, ...)})


def to_langchain_tool(tool: GeneratedTool) -> StructuredTool:
    """
    Wrap a compiled tool as a LangChain StructuredTool.

    ToolError failures surface as ToolException so LangChain hands the
    message back to the model instead of raising.
    """
    args_model = _args_model(tool)
    wraps_value = not isinstance(tool.shape, NoArgs) and args_model is not tool.shape.args_type

    async def run(**kwargs: Any) -> Any:
        if isinstance(tool.shape, NoArgs):
            payload = None
        elif wraps_value:
            payload = kwargs.get(VALUE_FIELD)
        else:
            payload = kwargs
        try:
            output = await tool.call(payload)
        except ToolError as e:
            raise ToolException(e.message) from e
        return output.result

    logger.debug(f"Wrapping tool {tool.NAME} for LangChain")
    return StructuredTool.from_function(
        coroutine=run,
        name=tool.NAME,
        description=tool.spec.description or tool.NAME,
        args_schema=args_model,
        handle_tool_error=True,
    )
