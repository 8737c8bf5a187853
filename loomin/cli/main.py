"""Loomin CLI - Main application entry point.

Registers the evaluate, api and cache commands.
"""

from __future__ import annotations

from typing import Optional

import typer

from loomin.cli.commands import api_app, cache_app, evaluate_command
from loomin.core.logging import configure_logging

app = typer.Typer(
    name="loomin",
    help="Turn engineering notes into physics simulation verdicts",
    add_completion=True,
    pretty_exceptions_enable=False,
)


def version_callback(value: bool) -> None:
    """Show version and exit.

    Args:
        value: True if --version flag provided
    """
    if value:
        from loomin import __version__

        typer.echo(f"Loomin version {__version__}")
        raise typer.Exit()


def verbose_callback(value: bool) -> None:
    """Switch logging to DEBUG and show tracebacks in error panels."""
    if value:
        from loomin.cli.console import set_verbose_mode

        configure_logging(level="DEBUG")
        set_verbose_mode(True)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        callback=verbose_callback,
        is_eager=True,
        help="Enable debug logging and tracebacks",
    ),
) -> None:
    """Loomin - notes to simulation.

    Core Commands:
        evaluate   - Extract variables from a note and run the physics rules
        api start  - Serve POST /api/extract to the editor
        cache      - Inspect or clear cached LLM results

    Examples:
        loomin evaluate "wind_speed = 80 mph"
        loomin api start --port 8000
        loomin cache stats
    """
    # Keep stdout for command output unless --verbose asked for more
    if not verbose:
        configure_logging(level="WARNING")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.command("evaluate", rich_help_panel="Core")(evaluate_command)
app.add_typer(api_app, name="api", rich_help_panel="System")
app.add_typer(cache_app, name="cache", rich_help_panel="System")


def cli_main() -> None:
    """Entry point for console_scripts.

    This function is called when running 'loomin' command.
    """
    app()


if __name__ == "__main__":
    cli_main()
