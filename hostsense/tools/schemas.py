"""Pydantic schemas for tool definitions and call outcomes."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


ParameterType = Literal["string", "integer", "number", "boolean", "array", "object"]


class ToolParameter(BaseModel):
    """Definition of a tool parameter."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Parameter name")
    type: ParameterType = Field(description="Parameter type")
    description: str = Field(description="Parameter description")
    required: bool = Field(default=True, description="Whether parameter is required")
    default: Any = Field(default=None, description="Default value if not required")
    enum: list[str] | None = Field(default=None, description="Allowed values for string type")
    minimum: float | None = Field(default=None, description="Inclusive lower bound for numbers")
    maximum: float | None = Field(default=None, description="Inclusive upper bound for numbers")

    def to_json_schema(self) -> dict[str, Any]:
        """Convert to a JSON Schema property."""
        prop: dict[str, Any] = {
            "type": self.type,
            "description": self.description,
        }
        if self.enum:
            prop["enum"] = self.enum
        if self.minimum is not None:
            prop["minimum"] = self.minimum
        if self.maximum is not None:
            prop["maximum"] = self.maximum
        if not self.required and self.default is not None:
            prop["default"] = self.default
        return prop


class ToolDefinition(BaseModel):
    """Definition of a callable tool, advertised to callers."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Tool name (function name)")
    description: str = Field(min_length=1, description="Human-readable tool description")
    parameters: list[ToolParameter] = Field(
        default_factory=list,
        description="List of parameters",
    )

    @model_validator(mode="after")
    def _check_unique_parameters(self) -> "ToolDefinition":
        seen: set[str] = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(f"duplicate parameter '{param.name}' in tool '{self.name}'")
            seen.add(param.name)
        return self

    def to_input_schema(self) -> dict[str, Any]:
        """Convert parameters to a JSON Schema object."""
        return {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }


class ErrorKind(str, Enum):
    """Error categories reported by the dispatcher."""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    INTERNAL = "internal"


class ContentBlock(BaseModel):
    """One unit of tool output."""

    type: Literal["text"] = "text"
    text: str


class ToolFailure(BaseModel):
    """Structured error returned instead of content."""

    code: ErrorKind
    message: str


class ToolOutcome(BaseModel):
    """Result of a tool call: content on success, an error otherwise."""

    content: list[ContentBlock] = Field(default_factory=list)
    error: ToolFailure | None = None

    @classmethod
    def success(cls, text: str) -> "ToolOutcome":
        return cls(content=[ContentBlock(text=text)])

    @classmethod
    def failure(cls, code: ErrorKind, message: str) -> "ToolOutcome":
        return cls(error=ToolFailure(code=code, message=message))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def text(self) -> str:
        """Joined text content, or the error message for failures."""
        if self.error is not None:
            return self.error.message
        return "\n".join(block.text for block in self.content)
