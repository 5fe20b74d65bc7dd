"""CLI commands for godoty_mcp.

`serve` is what MCP clients launch; the other commands are for humans setting
the server up.
"""

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from godoty_mcp import __version__
from godoty_mcp.cli.shared.logging_utils import configure_stderr_logging, ensure_rotating_log_file

app = typer.Typer(
    name="godoty-mcp",
    help="godoty-mcp - Godot editor tools for MCP agents",
    no_args_is_help=True,
)

console = Console()
# serve owns stdout for MCP frames; anything human-readable goes to stderr there.
err_console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"godoty-mcp v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """godoty-mcp - Godot editor tools for MCP agents."""
    pass


def _load_config():
    from godoty_mcp.config.access import get_config as get_cached_config

    try:
        return get_cached_config()
    except ValueError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


# ============================================================================
# Serve
# ============================================================================


@app.command()
def serve(
    url: str = typer.Option(None, "--url", "-u", help="Godot bridge WebSocket URL (overrides config)"),
    no_reconnect: bool = typer.Option(False, "--no-reconnect", help="Do not reconnect when the editor goes away"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging to stderr"),
    log_file: bool = typer.Option(False, "--log-file", help="Also log to ~/.godoty/logs/serve.log"),
):
    """Serve Godot tools over MCP stdio."""
    from godoty_mcp.bridge.client import GodotClient
    from godoty_mcp.server import GodotyMCPServer

    config = _load_config()
    godot = config.godot.model_copy()
    if url:
        godot.url = url
    if no_reconnect:
        godot.reconnect = False

    configure_stderr_logging(config.logging.level, verbose=verbose)
    if log_file or config.logging.file:
        ensure_rotating_log_file("serve", level="DEBUG" if verbose else config.logging.level.upper())

    server = GodotyMCPServer.from_config(config, client=GodotClient.from_config(godot))
    try:
        asyncio.run(server.serve())
    except KeyboardInterrupt:
        err_console.print("\nGoodbye!")


# ============================================================================
# Tools / Status
# ============================================================================


@app.command()
def tools():
    """List the tools exposed to agents."""
    from godoty_mcp.tools.registry import build_routes, remote_method_for

    table = Table(title="Godot Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Domain")
    table.add_column("Remote method", style="green")
    table.add_column("Description")

    for route in build_routes():
        table.add_row(route.name, route.domain.value, remote_method_for(route.name), route.descriptor.description)

    console.print(table)


@app.command()
def status(
    url: str = typer.Option(None, "--url", "-u", help="Godot bridge WebSocket URL (overrides config)"),
):
    """Check whether the Godot editor bridge is reachable."""
    from godoty_mcp.bridge.client import GodotClient
    from godoty_mcp.config.loader import get_config_path
    from godoty_mcp.utils.exceptions import ConnectFailedError

    config_path = get_config_path()
    config = _load_config()
    target = url or config.godot.url

    console.print("godoty-mcp Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[dim]defaults[/dim]'}")
    console.print(f"Godot: {target}")

    async def check() -> str | None:
        client = GodotClient(target, reconnect=False)
        try:
            await client.connect()
        except ConnectFailedError as e:
            return e.details.get("reason") or e.message
        await client.disconnect()
        return None

    error = asyncio.run(check())
    if error is None:
        console.print("Bridge: [green]✓ connected[/green]")
        return
    console.print(f"Bridge: [red]✗ unreachable[/red] [dim]({error})[/dim]")
    raise typer.Exit(1)


@app.command("mcp-config")
def mcp_config(
    command: str = typer.Option("godoty-mcp", "--command", help="Executable MCP clients should launch"),
    url: str = typer.Option(None, "--url", "-u", help="Pin the Godot bridge URL via GODOT_WS_URL"),
):
    """Print the MCP client registration entry for this server."""
    from godoty_mcp.tools.registry import all_tools

    entry: dict = {
        "command": command,
        "args": ["serve"],
        "disabled": False,
        "alwaysAllow": [tool.name for tool in all_tools()],
    }
    if url:
        entry["env"] = {"GODOT_WS_URL": url}
    typer.echo(json.dumps({"mcpServers": {"godoty": entry}}, indent=2))


if __name__ == "__main__":
    app()
