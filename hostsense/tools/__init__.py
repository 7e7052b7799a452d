"""Tool registry, schemas and dispatcher."""

from .dispatcher import ToolDispatcher
from .errors import (
    DuplicateToolError,
    RegistryFrozenError,
    ToolError,
    ToolNotFoundError,
    ValidationError,
)
from .registry import RegisteredTool, ToolRegistry
from .schemas import ContentBlock, ErrorKind, ToolDefinition, ToolOutcome, ToolParameter

__all__ = [
    "ToolDispatcher",
    "ToolRegistry",
    "RegisteredTool",
    "ToolDefinition",
    "ToolParameter",
    "ToolOutcome",
    "ContentBlock",
    "ErrorKind",
    "ToolError",
    "ToolNotFoundError",
    "DuplicateToolError",
    "RegistryFrozenError",
    "ValidationError",
]
