"""Base class for all CLI commands.

Commands return an exit code from execute(); the typer wrapper turns it
into typer.Exit. Errors are rendered as panels, never as raw tracebacks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from loomin.cli.console import ErrorRenderer, get_console
from loomin.core.config import Config


class LoominCommand(ABC):
    """Abstract base class for all Loomin CLI commands.

    Provides common functionality:
    - Console output
    - Configuration loading
    - Error rendering

    Example:
        class MyCommand(LoominCommand):
            def execute(self, text: str) -> int:
                return 0  # Success
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize command.

        Args:
            console: Rich console (for testing, inject a recording console)
        """
        self.console = console or get_console()

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> int:
        """Execute the command.

        Returns:
            Exit code (0 = success, non-zero = error)
        """

    def load_config(self, config_path: Optional[Path] = None) -> Config:
        """Load configuration from config.yaml in the working directory.

        Args:
            config_path: Explicit config file (from --config)

        Returns:
            Config object
        """
        from loomin.core.config_loaders import load_config

        return load_config(config_path)

    # === Output Methods ===

    def print_success(self, message: str) -> None:
        self.console.print(f"[green][OK][/green] {message}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red][ERROR][/red] {message}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow][WARN][/yellow] {message}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[blue][INFO][/blue] {message}")

    # === Error Handling ===

    def handle_error(self, error: Exception, context: str = "") -> int:
        """Render an error panel and return exit code 1.

        Does not exit - returns exit code for caller to decide.
        """
        ErrorRenderer.render(error, context=context)
        return 1
