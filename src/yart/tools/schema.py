"""
Schema derivation and (de)serialization for tool arguments and results.

pydantic does the heavy lifting; this module reshapes its JSON Schema output
into the draft-07 layout hosts expect (``definitions`` instead of ``$defs``,
``["string", "null"]`` for optional fields, no per-field titles) and maps
validation/serialization failures onto tool errors.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from yart.config.manager import DRAFT_07, get_config
from yart.tools.errors import ArgumentsError, SerializationError

REF_TEMPLATE = "#/definitions/{model}"

_NONE_TYPE = type(None)
_MISSING = object()


def _title_for(tp: Any) -> str:
    if tp is None or tp is _NONE_TYPE:
        return "Null"
    name = getattr(tp, "__name__", None) or "Parameters"
    return name[:1].upper() + name[1:]


def _collapse_nullable(node: Dict[str, Any]) -> None:
    variants = node.get("anyOf")
    if not variants:
        return
    nullable = any(v == {"type": "null"} for v in variants)
    if not nullable:
        return

    if node.get("default", _MISSING) is None:
        del node["default"]

    simple = all(set(v) == {"type"} and isinstance(v["type"], str) for v in variants)
    if simple:
        del node["anyOf"]
        node["type"] = [v["type"] for v in variants]


def _normalize(node: Any, keep_title: bool = False) -> Any:
    if not isinstance(node, dict):
        return node

    node = dict(node)
    if not keep_title:
        node.pop("title", None)

    if isinstance(node.get("properties"), dict):
        node["properties"] = {k: _normalize(v) for k, v in node["properties"].items()}
    if isinstance(node.get("items"), dict):
        node["items"] = _normalize(node["items"])
    if isinstance(node.get("additionalProperties"), dict):
        node["additionalProperties"] = _normalize(node["additionalProperties"])
    for key in ("anyOf", "oneOf", "allOf", "prefixItems"):
        if isinstance(node.get(key), list):
            node[key] = [_normalize(v) for v in node[key]]

    _collapse_nullable(node)
    return node


def derive_parameters(tp: Any, dialect: Optional[str] = None) -> Dict[str, Any]:
    """
    Produce the JSON Schema document describing ``tp``.

    Args:
        tp: Argument type (pydantic model, dataclass, TypedDict, builtin, ``None``)
        dialect: ``$schema`` URI, defaults to the configured dialect

    Returns:
        Draft-07 style schema with ``$schema``, ``title``, ``definitions``
    """
    if tp is None:
        tp = _NONE_TYPE

    raw = TypeAdapter(tp).json_schema(ref_template=REF_TEMPLATE)
    definitions = raw.pop("$defs", None)

    body = _normalize(raw, keep_title=True)
    title = body.pop("title", None) or _title_for(tp)

    schema: Dict[str, Any] = {
        "$schema": dialect or get_config().get("schema.dialect", DRAFT_07),
        "title": title,
    }
    schema.update(body)
    if definitions:
        schema["definitions"] = {name: _normalize(d) for name, d in definitions.items()}
    return schema


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or str(exc)


def load_arguments(tp: Any, payload: Any, adapter: Optional[TypeAdapter] = None) -> Any:
    """
    Deserialize tool arguments.

    Args:
        tp: Argument type
        payload: JSON text (str/bytes), a JSON value, or an instance of ``tp``
        adapter: Pre-built adapter for ``tp``

    Raises:
        ArgumentsError: The payload does not match ``tp``
    """
    adapter = adapter or TypeAdapter(tp)
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return _load_text(adapter, payload)
        return adapter.validate_python(payload)
    except ValidationError as e:
        raise ArgumentsError(
            f"Deserialization error: {_describe_validation_error(e)}", cause=e
        ) from e


def _load_text(adapter: TypeAdapter, payload: Any) -> Any:
    """JSON text first; text that is itself a valid argument value is taken as is."""
    try:
        return adapter.validate_json(payload)
    except ValidationError as json_error:
        try:
            return adapter.validate_python(payload, strict=True)
        except ValidationError:
            raise json_error from None


def dump_result(tp: Any, value: Any, adapter: Optional[TypeAdapter] = None) -> Any:
    """
    Serialize a result value into a JSON value.

    Raises:
        SerializationError: ``value`` cannot be represented as JSON of type ``tp``
    """
    adapter = adapter or TypeAdapter(tp)
    try:
        return adapter.dump_python(value, mode="json", warnings="error")
    except (TypeError, ValueError) as e:
        raise SerializationError.from_exception(e) from e
