"""FastAPI router for tools API endpoints."""

import time
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from .dispatcher import ToolDispatcher
from .schemas import ErrorKind, ToolDefinition


# Request/Response Models

class ToolResponse(BaseModel):
    """Response for a single tool."""

    name: str
    displayName: str
    description: str
    category: str
    inputSchema: dict[str, Any]


class ExecuteToolResponse(BaseModel):
    """Response from tool execution."""

    name: str = Field(description="Name of the tool")
    result: str | None = Field(default=None, description="Tool text output")
    error: str | None = Field(default=None, description="Error message if failed")
    duration: int | None = Field(default=None, description="Execution time in ms")


# Category inferred from the tool name prefix
CATEGORY_KEYWORDS = {
    "battery": "power",
    "ble": "bluetooth",
    "display": "display",
    "idle": "input",
    "interfaces": "network",
    "usb": "usb",
    "git": "git",
    "weather": "weather",
    "forecast": "weather",
}


def tool_definition_to_response(tool_def: ToolDefinition) -> ToolResponse:
    """Convert a ToolDefinition to a ToolResponse."""
    category = "system"
    name_lower = tool_def.name.lower()
    for keyword, value in CATEGORY_KEYWORDS.items():
        if keyword in name_lower:
            category = value
            break

    return ToolResponse(
        name=tool_def.name,
        displayName=tool_def.name.replace("_", " ").title(),
        description=tool_def.description,
        category=category,
        inputSchema=tool_def.to_input_schema(),
    )


def create_tools_router(get_dispatcher: Callable[[], ToolDispatcher]) -> APIRouter:
    """Create the tools API router.

    Args:
        get_dispatcher: Dependency returning the dispatcher that routes calls
            to registered tools

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/tools", tags=["tools"])

    @router.get("", response_model=list[ToolResponse])
    async def list_tools(
        dispatcher: ToolDispatcher = Depends(get_dispatcher),
    ) -> list[ToolResponse]:
        """List all available tools."""
        return [tool_definition_to_response(d) for d in dispatcher.list_tools()]

    @router.post("/{tool_name}/execute", response_model=ExecuteToolResponse)
    async def execute_tool(
        tool_name: str,
        params: dict[str, Any] | None = None,
        dispatcher: ToolDispatcher = Depends(get_dispatcher),
    ) -> ExecuteToolResponse:
        """Execute a specific tool with the given parameters."""
        start_time = time.perf_counter()
        outcome = await dispatcher.call_tool(tool_name, params or {})
        duration_ms = int((time.perf_counter() - start_time) * 1000)

        if outcome.error is not None:
            if outcome.error.code == ErrorKind.NOT_FOUND:
                raise HTTPException(status_code=404, detail=outcome.error.message)
            if outcome.error.code == ErrorKind.INVALID_ARGUMENT:
                raise HTTPException(status_code=422, detail=outcome.error.message)

        return ExecuteToolResponse(
            name=tool_name,
            result=None if outcome.is_error else outcome.text,
            error=outcome.text if outcome.is_error else None,
            duration=duration_ms,
        )

    return router
