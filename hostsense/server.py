"""MCP stdio server exposing the tool registry.

The transport layer only adapts wire types: listing maps ToolDefinitions
to MCP tools, and calls are forwarded to the dispatcher whose outcome is
mapped to text content or an error result.
"""

import logging

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .config import Settings, get_settings
from .sensors import SensorContext, build_registry
from .tools import ToolDispatcher, ToolOutcome

logger = logging.getLogger("hostsense.server")

SERVER_NAME = "hostsense"


class ToolCallFailed(Exception):
    """Raised inside the MCP handler so the SDK marks the result as an error."""


def build_dispatcher(context: SensorContext) -> ToolDispatcher:
    """Register every sensor tool and wrap the frozen registry in a dispatcher."""
    registry = build_registry(context)
    logger.info(f"Registered {len(registry)} tools")
    return ToolDispatcher(registry)


def to_mcp_content(outcome: ToolOutcome) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=block.text) for block in outcome.content]


def create_mcp_server(dispatcher: ToolDispatcher) -> Server:
    """Create a low-level MCP server bound to the dispatcher."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.to_input_schema(),
            )
            for definition in dispatcher.list_tools()
        ]

    # Arguments are validated by the dispatcher so every error carries its message
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        outcome = await dispatcher.call_tool(name, arguments)
        if outcome.error is not None:
            raise ToolCallFailed(outcome.error.message)
        return to_mcp_content(outcome)

    return server


async def run_stdio(settings: Settings | None = None) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    settings = settings or get_settings()
    context = SensorContext.create(settings)
    try:
        dispatcher = build_dispatcher(context)
        server = create_mcp_server(dispatcher)
        logger.info("Starting MCP server on stdio")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await context.aclose()
        logger.info("MCP server stopped")
