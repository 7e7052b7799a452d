"""Exceptions raised by the tool registry and argument validation."""


class ToolError(Exception):
    """Base class for tool registry and dispatch errors."""


class ToolNotFoundError(ToolError):
    """Raised when a tool name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown tool: {name}")


class DuplicateToolError(ToolError):
    """Raised when registering a name that is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"tool already registered: {name}")


class RegistryFrozenError(ToolError):
    """Raised when registering into a registry after startup completed."""


class ValidationError(ToolError):
    """Raised when call arguments do not match a tool's parameter schema."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
