"""Status command: config location and effective limits."""

from __future__ import annotations

from rich.console import Console

from designmcp import __logo__


def status_command(console: Console) -> None:
    """Show designmcp status."""
    from designmcp.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()

    console.print(f"{__logo__} designmcp Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[dim](defaults)[/dim]'}")
    console.print(f"Bind: {config.server.host}:{config.server.port}")
    console.print(f"Public host: {config.server.default_host}")

    rl = config.rate_limit
    if rl.enabled:
        console.print(f"Rate limit: {rl.max_requests} requests / {rl.window_ms} ms")
    else:
        console.print("Rate limit: [yellow]disabled[/yellow]")

    tr = config.transport
    timeout = f"{tr.handler_timeout_s}s" if tr.handler_timeout_s is not None else "[dim]none[/dim]"
    console.print(f"Idle timeout: {tr.idle_timeout_s}s, keep-alive: {tr.keepalive_interval_s}s")
    console.print(f"Handler timeout: {timeout}, max batch: {tr.max_batch_size}")
