"""Console output helpers.

Provides a shared rich Console and the error panel used by every command.
"""

from __future__ import annotations

import traceback
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

# Shared console instance
_console: Console | None = None

# Verbose mode flag (set by CLI --verbose flag)
_verbose_mode: bool = False


def get_console() -> Console:
    """Get shared console instance (lazy-loaded).

    Returns:
        Rich Console instance
    """
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_verbose_mode(enabled: bool) -> None:
    """Enable or disable tracebacks in error panels."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


def tip(message: str) -> None:
    """Display a dim tip line under the main output.

    Args:
        message: Tip text to display
    """
    get_console().print(f"  [dim]Tip: {message}[/dim]")


class ErrorRenderer:
    """Renders errors with "Why it happened" and "How to fix" sections.

    Loomin exceptions carry their own error code and guidance. Other
    exceptions get a generic panel.
    """

    @staticmethod
    def render(exc: BaseException, context: str = "") -> None:
        """Render an exception as an error panel.

        Args:
            exc: Exception to render
            context: Optional context line (e.g., "Evaluation failed")
        """
        from loomin.core.exceptions import LoominError

        if isinstance(exc, LoominError):
            error_code = exc.error_code
            why = exc.why_it_happened
            how_to_fix = exc.how_to_fix
        else:
            error_code = "LM-ERR-999"
            why = f"Unexpected {type(exc).__name__}"
            how_to_fix = ["Run again with --verbose to see the traceback"]

        content = ErrorRenderer._build_error_content(str(exc), context, why, how_to_fix)
        panel = Panel(
            content,
            title=f"[bold red]Error: {error_code}[/bold red]",
            border_style="red",
            padding=(1, 2),
        )
        get_console().print(panel)

        if is_verbose_mode():
            get_console().print(
                "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                style="dim",
            )

    @staticmethod
    def _build_error_content(
        message: str, context: str, why: str, how_to_fix: List[str]
    ) -> Text:
        text = Text()
        if context:
            text.append(f"{context}\n\n", style="italic")
        text.append(f"{message}\n\n", style="bold")
        text.append("Why it happened:\n", style="yellow")
        text.append(f"  {why}\n\n")
        text.append("How to fix:\n", style="green")
        for suggestion in how_to_fix:
            text.append(f"  - {suggestion}\n")
        return text
