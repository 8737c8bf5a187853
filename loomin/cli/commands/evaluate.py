"""Evaluate command - Run notes through the simulation pipeline.

Reads note text from the argument, a file, or stdin and prints the
extracted topic, variables and physics verdict.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from loomin.cli.console import tip
from loomin.cli.core import LoominCommand
from loomin.simulation.models import PipelineResult, SimulationStatus
from loomin.simulation.pipeline import build_pipeline

STATUS_STYLES = {
    SimulationStatus.OPTIMAL: "green",
    SimulationStatus.WARNING: "yellow",
    SimulationStatus.CRITICAL_FAILURE: "bold red",
}


class EvaluateCommand(LoominCommand):
    """Evaluate one note and display the verdict."""

    def execute(
        self,
        text: Optional[str] = None,
        file: Optional[Path] = None,
        as_json: bool = False,
        config_path: Optional[Path] = None,
    ) -> int:
        """Evaluate a note.

        Args:
            text: Note text (ignored when file is given)
            file: File holding the note
            as_json: Print the wire JSON instead of tables
            config_path: Explicit config file

        Returns:
            0 on success, 1 on error
        """
        try:
            notes = self._read_notes(text, file)
            config = self.load_config(config_path)
            pipeline = build_pipeline(config)
            try:
                result = asyncio.run(pipeline.evaluate(notes))
            finally:
                pipeline.cache.store.close()
        except Exception as e:
            return self.handle_error(e, "Evaluation failed")

        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2))
        else:
            self._display_result(result)
        return 0

    def _read_notes(self, text: Optional[str], file: Optional[Path]) -> str:
        if file is not None:
            return file.read_text(encoding="utf-8")
        if text is not None:
            return text
        return typer.get_text_stream("stdin").read()

    def _display_result(self, result: PipelineResult) -> None:
        extraction = result.extraction
        verdict = result.simulation

        table = Table(title="Extraction", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Topic", extraction.topic.value)
        table.add_row("Source", result.source.value)
        for name, value in extraction.vars.items():
            table.add_row(name, str(value))
        self.console.print(table)

        style = STATUS_STYLES[verdict.status]
        lines = [verdict.message]
        if verdict.recommendation:
            lines.append(f"\n[bold]Recommendation:[/bold] {verdict.recommendation}")
        if verdict.ai_explanation:
            lines.append(f"\n[italic]{verdict.ai_explanation}[/italic]")
        self.console.print(
            Panel(
                "\n".join(lines),
                title=f"[{style}]{verdict.status.value}[/{style}]",
                border_style=style,
            )
        )
        if extraction.degraded:
            self.print_warning(
                "LLM extraction failed; showing the fallback topic with no variables"
            )
            tip("Check the provider API key, or set LOOMIN_LLM_PROVIDER=ollama")


def command(
    text: Optional[str] = typer.Argument(
        None, help="Note text (reads stdin when omitted)"
    ),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Read the note from a file",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the API JSON payload"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (default: ./config.yaml)"
    ),
) -> None:
    """Evaluate a note and print the simulation verdict.

    Examples:
        # Explicit variables skip the LLM
        loomin evaluate "wind_speed = 80 mph"

        # Free text goes through the configured LLM provider
        loomin evaluate "A three blade turbine in a violent storm"

        # Machine-readable output
        loomin evaluate --file notes.txt --json
    """
    cmd = EvaluateCommand()
    exit_code = cmd.execute(text, file, as_json, config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
