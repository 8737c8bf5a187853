"""CLI command implementations."""

from loomin.cli.commands.api import api_app
from loomin.cli.commands.cache import cache_app
from loomin.cli.commands.evaluate import command as evaluate_command

__all__ = ["api_app", "cache_app", "evaluate_command"]
