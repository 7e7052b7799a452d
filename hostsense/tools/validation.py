"""Validate raw call arguments against a tool's parameter schema.

Each ToolDefinition compiles into a pydantic model, built once at
registration. Omitted or null optional fields take their declared default, unknown
fields are dropped, and pydantic lax coercion applies (``"5"`` is accepted
for an integer).
"""

from collections.abc import Mapping
from typing import Any, Literal

import pydantic
from pydantic import ConfigDict, Field, create_model

from .errors import ValidationError
from .schemas import ToolDefinition, ToolParameter


_PYTHON_TYPES: dict[str, Any] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "array": list,
    "object": dict,
}

_TYPE_ERRORS = ("_type", "_parsing", "is_instance_of", "model_type", "dict_type", "list_type")


def _field_for(param: ToolParameter) -> tuple[Any, Any]:
    py_type: Any = _PYTHON_TYPES[param.type]
    if param.enum and param.type == "string":
        py_type = Literal[tuple(param.enum)]

    constraints: dict[str, Any] = {"description": param.description}
    if param.minimum is not None:
        constraints["ge"] = param.minimum
    if param.maximum is not None:
        constraints["le"] = param.maximum

    if param.required:
        return py_type, Field(..., **constraints)
    return py_type | None, Field(default=param.default, **constraints)


def build_model(definition: ToolDefinition) -> type[pydantic.BaseModel]:
    """Build the argument model for a tool."""
    fields = {p.name: _field_for(p) for p in definition.parameters}
    return create_model(
        f"{definition.name}_args",
        __config__=ConfigDict(extra="ignore"),
        **fields,
    )


def _describe(error: dict[str, Any]) -> tuple[str | None, str]:
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    kind = error.get("type", "")

    if kind == "missing":
        return field, f"missing field: {field}"
    if any(marker in kind for marker in _TYPE_ERRORS):
        return field, f"invalid type for field '{field}': {error['msg']}"
    return field, f"invalid value for field '{field}': {error['msg']}"


def validate_arguments(
    definition: ToolDefinition,
    raw_args: Mapping[str, Any] | None,
    model: type[pydantic.BaseModel] | None = None,
) -> dict[str, Any]:
    """
    Validate and coerce raw arguments for a tool.

    Args:
        definition: Tool whose schema applies
        raw_args: Untyped key-value map as decoded from the wire
        model: Prebuilt argument model (built from the definition if omitted)

    Returns:
        Typed keyword arguments, defaults applied

    Raises:
        ValidationError: naming the first offending field
    """
    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, Mapping):
        raise ValidationError(
            f"arguments must be an object, got {type(raw_args).__name__}"
        )

    model = model or build_model(definition)
    try:
        parsed = model.model_validate(dict(raw_args))
    except pydantic.ValidationError as e:
        field, message = _describe(e.errors()[0])
        raise ValidationError(message, field=field) from e

    args = parsed.model_dump()
    # An explicit null on an optional field means "use the default"
    for param in definition.parameters:
        if not param.required and args.get(param.name) is None:
            args[param.name] = param.default
    return args
