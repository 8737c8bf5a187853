"""Cache commands - Inspect and clear the simulation result cache."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from loomin.cli.core import LoominCommand
from loomin.core.exceptions import sanitize_message
from loomin.storage.factory import get_cache_store


class CacheStatsCommand(LoominCommand):
    """Show cache backend and entry count."""

    def execute(self, config_path: Optional[Path] = None) -> int:
        try:
            config = self.load_config(config_path)
            store = get_cache_store(config)
            try:
                entries = asyncio.run(store.count())
            finally:
                store.close()
        except Exception as e:
            return self.handle_error(e, "Could not read the cache")

        table = Table(title="Simulation Cache", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Backend", config.storage.backend)
        if config.storage.backend == "sqlite":
            table.add_row("Database", sanitize_message(config.database_url))
        table.add_row("Entries", str(entries))
        self.console.print(table)
        return 0


class CacheClearCommand(LoominCommand):
    """Delete every cached result."""

    def execute(self, yes: bool = False, config_path: Optional[Path] = None) -> int:
        if not yes and not typer.confirm("Delete all cached simulation results?"):
            self.print_info("Cancelled")
            return 0

        try:
            config = self.load_config(config_path)
            store = get_cache_store(config)
            try:
                removed = asyncio.run(store.clear())
            finally:
                store.close()
        except Exception as e:
            return self.handle_error(e, "Could not clear the cache")

        self.print_success(f"Removed {removed} cached result(s)")
        return 0


cache_app = typer.Typer(help="Inspect the simulation result cache")


@cache_app.command("stats")
def stats(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (default: ./config.yaml)"
    ),
) -> None:
    """Show the cache backend and how many results it holds."""
    exit_code = CacheStatsCommand().execute(config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)


@cache_app.command("clear")
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (default: ./config.yaml)"
    ),
) -> None:
    """Remove every cached result.

    Cached notes are re-extracted by the LLM on their next evaluation.
    """
    exit_code = CacheClearCommand().execute(yes, config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
