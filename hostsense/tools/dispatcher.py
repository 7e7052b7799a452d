"""Request dispatcher: validate, route and normalize tool calls."""

import asyncio
import inspect
import logging
import time
from collections.abc import Mapping
from typing import Any

from .errors import ToolNotFoundError, ValidationError
from .registry import RegisteredTool, ToolRegistry
from .schemas import ErrorKind, ToolDefinition, ToolOutcome
from .validation import validate_arguments

logger = logging.getLogger("hostsense.tools.dispatcher")


def render_result(result: Any) -> str:
    """Convert a tool's return value to text."""
    if isinstance(result, str):
        return result
    if hasattr(result, "to_text"):
        return result.to_text()
    if hasattr(result, "model_dump_json"):
        return result.model_dump_json(indent=2)
    return str(result)


class ToolDispatcher:
    """In-process call interface consumed by the transport adapters.

    Every call produces a ToolOutcome. Unknown names, invalid arguments and
    failures raised by tool bodies are reported as structured errors and
    never escape to the caller.
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    def list_tools(self) -> list[ToolDefinition]:
        """All tool definitions in registration order."""
        return self.registry.list_definitions()

    async def call_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> ToolOutcome:
        """
        Execute a named tool call.

        Args:
            name: Registered tool name
            arguments: Raw, untyped arguments

        Returns:
            ToolOutcome with text content or an error
        """
        try:
            entry = self.registry.get(name)
        except ToolNotFoundError as e:
            logger.error(f"Unknown tool requested: {name}")
            return ToolOutcome.failure(ErrorKind.NOT_FOUND, str(e))

        try:
            params = validate_arguments(entry.definition, arguments, entry.args_model)
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {name}: {e}")
            return ToolOutcome.failure(ErrorKind.INVALID_ARGUMENT, str(e))

        logger.info(f"Executing tool: {name} with args: {params}")
        start_time = time.perf_counter()

        try:
            result = await self._invoke(entry, params)
            outcome = ToolOutcome.success(render_result(result))
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.exception(f"Tool {name} failed with error: {message}")
            outcome = ToolOutcome.failure(ErrorKind.INTERNAL, message)

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(f"Tool {name} completed in {duration_ms}ms, success={not outcome.is_error}")
        return outcome

    async def _invoke(self, entry: RegisteredTool, params: dict[str, Any]) -> Any:
        func = entry.func
        if inspect.iscoroutinefunction(func):
            return await func(**params)

        # Blocking collaborators run off the event loop
        result = await asyncio.to_thread(func, **params)
        if inspect.isawaitable(result):
            result = await result
        return result
