"""CLI interface for HostSense."""

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .logging_config import get_logger, setup_logging
from .sensors import SensorContext, build_registry
from .tools import ToolDispatcher, ToolOutcome

logger = get_logger("hostsense.cli")

app = typer.Typer(
    name="hostsense",
    help="Host sensor tools for MCP clients",
    no_args_is_help=True,
)
console = Console()
# stdout carries tool output and MCP framing
err_console = Console(stderr=True)


@app.callback()
def configure(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Override HOSTSENSE_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Configure logging before any command runs."""
    settings = get_settings()
    setup_logging(
        (log_level or settings.log_level).upper(),
        settings.log_to_file,
        settings.log_dir,
    )


def parse_arguments(raw: str | None) -> dict:
    """Parse the --args JSON object."""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"not valid JSON: {e}", param_hint="--args") from e
    if not isinstance(value, dict):
        raise typer.BadParameter("must be a JSON object", param_hint="--args")
    return value


async def call_once(name: str, arguments: dict) -> ToolOutcome:
    """Build the registry, run one tool call and release shared resources."""
    context = SensorContext.create(get_settings())
    try:
        dispatcher = ToolDispatcher(build_registry(context))
        return await dispatcher.call_tool(name, arguments)
    finally:
        await context.aclose()


@app.command()
def tools():
    """List available tools."""

    async def collect():
        context = SensorContext.create(get_settings())
        try:
            return build_registry(context).list_definitions()
        finally:
            await context.aclose()

    table = Table(title="HostSense Tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Parameters", style="yellow")

    for definition in asyncio.run(collect()):
        params = ", ".join(
            p.name if p.required else f"[{p.name}]" for p in definition.parameters
        )
        table.add_row(definition.name, definition.description, params or "-")

    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. get_system_info"),
    args: str = typer.Option(
        None,
        "--args",
        "-a",
        help='Tool arguments as a JSON object, e.g. \'{"location": "Paris"}\'',
    ),
):
    """Run a single tool and print its text output."""
    arguments = parse_arguments(args)
    outcome = asyncio.run(call_once(name, arguments))

    if outcome.is_error:
        err_console.print(f"[red]{outcome.error.code.value}:[/red] {outcome.error.message}")
        raise typer.Exit(code=1)

    # plain text on stdout
    print(outcome.text)


@app.command()
def serve():
    """Serve tools over MCP on stdin/stdout."""
    from .server import run_stdio

    err_console.print("[bold blue]HostSense MCP server[/bold blue] (stdio)")
    asyncio.run(run_stdio(get_settings()))


@app.command("serve-http")
def serve_http(
    host: str = typer.Option(None, "--host", help="Bind address (default from settings)"),
    port: int = typer.Option(None, "--port", help="Bind port (default from settings)"),
):
    """Serve the HTTP tools API."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    err_console.print(f"[bold blue]HostSense API[/bold blue] on http://{host}:{port}")
    uvicorn.run(
        "hostsense.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
