"""Tool registry mapping tool names to definitions and callables."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import pydantic

from .errors import DuplicateToolError, RegistryFrozenError, ToolNotFoundError
from .schemas import ToolDefinition, ToolParameter
from .validation import build_model

logger = logging.getLogger("hostsense.tools.registry")
F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class RegisteredTool:
    """A tool definition paired with the function that implements it."""

    definition: ToolDefinition
    func: Callable[..., Any]
    args_model: type[pydantic.BaseModel]

    @property
    def name(self) -> str:
        return self.definition.name


class ToolRegistry:
    """Registry of callable tools.

    Tools are registered once at startup, then the registry is frozen and
    only read from. Listing preserves registration order.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._tools: dict[str, RegisteredTool] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "ToolRegistry":
        """Stop accepting registrations."""
        self._frozen = True
        logger.debug(f"Registry frozen with {len(self._tools)} tools")
        return self

    def add(self, definition: ToolDefinition, func: Callable[..., Any]) -> RegisteredTool:
        """
        Register a function under a definition.

        Raises:
            DuplicateToolError: if the name is already registered
            RegistryFrozenError: if the registry has been frozen
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"cannot register '{definition.name}': registry is frozen"
            )
        if definition.name in self._tools:
            raise DuplicateToolError(definition.name)

        entry = RegisteredTool(
            definition=definition,
            func=func,
            args_model=build_model(definition),
        )
        self._tools[definition.name] = entry
        logger.debug(f"Registered tool: {definition.name}")
        return entry

    def register(
        self,
        name: str,
        description: str,
        parameters: list[ToolParameter] | None = None,
    ) -> Callable[[F], F]:
        """
        Decorator to register a function as a tool.

        Args:
            name: Tool name
            description: Tool description advertised to callers
            parameters: List of parameter definitions

        Returns:
            Decorator function

        Example:
            @registry.register(
                name="get_idle_time",
                description="Get user idle time",
            )
            async def get_idle_time():
                ...
        """
        definition = ToolDefinition(
            name=name,
            description=description,
            parameters=parameters or [],
        )

        def decorator(func: F) -> F:
            self.add(definition, func)
            return func

        return decorator

    def get(self, name: str) -> RegisteredTool:
        """Get a registered tool, raising ToolNotFoundError on miss."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def get_definition(self, name: str) -> ToolDefinition | None:
        """Get a tool definition by name."""
        entry = self._tools.get(name)
        return entry.definition if entry else None

    def list_definitions(self) -> list[ToolDefinition]:
        """Get all tool definitions in registration order."""
        return [entry.definition for entry in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def __len__(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)
