"""CLI commands for designmcp.

Top-level commands: init (write the default config file), serve (run the
HTTP/SSE server), tools (list the design-system tools), status (config and
limits).
"""

import errno
import socket

import typer
from rich.console import Console
from rich.table import Table

from designmcp import __logo__, __version__
from designmcp.cli.command_groups.status_command import status_command
from designmcp.cli.shared.logging_utils import ensure_rotating_log_file

app = typer.Typer(
    name="designmcp",
    help=f"{__logo__} designmcp - JSON-RPC control plane for design-system queries",
    no_args_is_help=True,
)

console = Console()


def is_port_in_use(host: str, port: int) -> bool:
    """Whether the server's bind address is held by another process. IPv6 literals are accepted."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    with socket.socket(family, socket.SOCK_STREAM) as probe:
        try:
            probe.bind((host, port))
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            raise
    return False


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} designmcp v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """designmcp - JSON-RPC control plane for design-system queries."""
    pass


@app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file"),
):
    """Write the effective configuration to ~/.designmcp/config.json."""
    from designmcp.config.loader import get_config_path, save_config
    from designmcp.config.schema import Config

    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists[/yellow] at {config_path}. Pass [cyan]--force[/cyan] to overwrite.")
        raise typer.Exit(1)
    save_config(Config())
    console.print(f"[green]✓[/green] Wrote default config to {config_path}")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind host (defaults to config server.host)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (defaults to config server.port)"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
):
    """Start the HTTP server (SSE stream, ingress, stateless /mcp, /health)."""
    from designmcp.config.access import get_config as get_cached_config

    config = get_cached_config()
    host = host or config.server.host
    port = port or config.server.port

    if is_port_in_use(host, port):
        console.print(
            f"[red]Port {port} is already in use.[/red] "
            f"Close the process using it, or pass [cyan]--port[/cyan] (current: {host}:{port})."
        )
        raise typer.Exit(1)

    log_path = ensure_rotating_log_file("serve", level="DEBUG" if verbose else "INFO")
    console.print(f"{__logo__} Starting designmcp on {host}:{port}...")
    console.print(f"[dim]Logs: {log_path}[/dim]")

    import uvicorn

    from designmcp.api.server import create_app

    api_app = create_app(config)
    uvicorn_config = uvicorn.Config(
        api_app,
        host=host,
        port=port,
        log_level="debug" if verbose else "info",
    )
    console.print(f"[green]✓[/green] API: http://{host}:{port}/ (GET /sse, POST /messages, POST /mcp, GET /health)")
    uvicorn.Server(uvicorn_config).run()


@app.command()
def tools():
    """List the design-system tools served over tools/list."""
    from designmcp.services.design_system import DesignSystemTools

    table = Table(title=f"{__logo__} Design-system tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Arguments", no_wrap=True)
    table.add_column("Description")
    for definition in DesignSystemTools().definitions():
        schema = definition["inputSchema"]
        required = set(schema.get("required", []))
        args = ", ".join(f"{name}{'' if name in required else '?'}" for name in schema.get("properties", {}))
        table.add_row(definition["name"], args or "[dim]-[/dim]", definition["description"])
    console.print(table)


@app.command()
def status():
    """Show designmcp status."""
    status_command(console)


if __name__ == "__main__":
    app()
