"""CLI core utilities.

Usage:
    from loomin.cli.core import LoominCommand

    class MyCommand(LoominCommand):
        def execute(self, name: str) -> int:
            config = self.load_config()
            ...
            return 0
"""

from __future__ import annotations

from loomin.cli.core.command_base import LoominCommand

__all__ = ["LoominCommand"]
