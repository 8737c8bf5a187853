"""API command - Manage the Loomin REST API server."""

from __future__ import annotations

import httpx
import typer

from loomin.cli.console import get_console
from loomin.cli.core import LoominCommand


class ApiCommand(LoominCommand):
    """Start the Loomin REST API server."""

    def _validate_inputs(self, host: str, port: int) -> bool:
        """Validate host and port inputs."""
        if not (1 <= port <= 65535):
            self.print_error(f"Invalid port number {port}.")
            return False
        if not host:
            self.print_error("Invalid host.")
            return False
        return True

    def execute(
        self, host: str = "0.0.0.0", port: int = 8000, reload: bool = False
    ) -> int:
        """Start the API server."""
        try:
            if not self._validate_inputs(host, port):
                return 1

            self.console.print("\n[cyan]Starting Loomin API Server[/cyan]")
            self.console.print(f"  Host: {host}")
            self.console.print(f"  Port: {port}")
            self.console.print(f"  Reload: {reload}")
            self.console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

            # Lazy import: building the app loads config
            from loomin.api.main import run_server

            run_server(host=host, port=port, reload=reload)
            return 0

        except KeyboardInterrupt:
            self.console.print("\n[yellow]Server stopped[/yellow]")
            return 0
        except Exception as e:
            return self.handle_error(e, "Failed to start API server")


api_app = typer.Typer(help="Manage the Loomin API server")


@api_app.command("start")
def start(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port number"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    cmd = ApiCommand()
    exit_code = cmd.execute(host=host, port=port, reload=reload)
    raise typer.Exit(code=exit_code)


@api_app.command("status")
def status(
    host: str = typer.Option("localhost", "--host", "-h", help="API host"),
    port: int = typer.Option(8000, "--port", "-p", help="API port"),
) -> None:
    """Check if the API server is running."""
    url = f"http://{host}:{port}/v1/health"
    console = get_console()
    try:
        response = httpx.get(url, timeout=2)
    except httpx.HTTPError:
        console.print(f"[red]API Server is NOT running at http://{host}:{port}[/red]")
        raise typer.Exit(code=1)

    if response.status_code != 200:
        console.print(
            f"[yellow]API Server responded with status {response.status_code}[/yellow]"
        )
        raise typer.Exit(code=1)

    health = response.json()
    console.print(f"[green]API Server is running at http://{host}:{port}[/green]")
    console.print(f"Health check: [bold]{health.get('status', 'unknown')}[/bold]")
