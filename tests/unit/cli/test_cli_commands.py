"""
Tests for the loomin CLI.

Test Strategy
-------------
- typer's CliRunner against the real app
- Each test runs in a temp working directory with no config.yaml
- The pipeline builder is patched where a test needs the LLM path
"""

import asyncio
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from loomin import __version__
from loomin.cli.main import app
from loomin.storage.sql import SQLCacheStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def workdir(temp_dir: Path, monkeypatch, clean_env) -> Path:
    monkeypatch.chdir(temp_dir)
    return temp_dir


class TestMainCallback:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"Loomin version {__version__}" in result.stdout

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "evaluate" in result.stdout


class TestEvaluateCommand:
    def test_direct_path_json(self, monkeypatch):
        monkeypatch.setenv("LOOMIN_STORAGE_BACKEND", "memory")

        result = runner.invoke(
            app, ["evaluate", "--json", "Robot\npayload = 11\narm_length = 6"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["extraction"]["topic"] == "robot_arm"
        assert data["simulation"]["recommendation"] == "Reduce payload to 10.2 kg."

    def test_rich_output(self, monkeypatch):
        monkeypatch.setenv("LOOMIN_STORAGE_BACKEND", "memory")

        result = runner.invoke(app, ["evaluate", "wind turbine\nwind_speed = 76\nblade_count = 0"])

        assert result.exit_code == 0
        assert "CRITICAL_FAILURE" in result.stdout
        assert "wind_turbine" in result.stdout

    def test_reads_file(self, workdir: Path, monkeypatch):
        monkeypatch.setenv("LOOMIN_STORAGE_BACKEND", "memory")
        notes = workdir / "notes.txt"
        notes.write_text("Torque = 12 Nm\n")

        result = runner.invoke(app, ["evaluate", "--file", str(notes), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["extraction"]["vars"]["Torque"] == 12

    def test_reads_stdin(self, monkeypatch):
        monkeypatch.setenv("LOOMIN_STORAGE_BACKEND", "memory")

        result = runner.invoke(app, ["evaluate", "--json"], input="voltage = 5\n")

        assert result.exit_code == 0
        assert json.loads(result.stdout)["extraction"]["vars"]["voltage"] == 5

    def test_llm_path_uses_pipeline(self, monkeypatch, make_pipeline):
        monkeypatch.setattr(
            "loomin.cli.commands.evaluate.build_pipeline",
            lambda config: make_pipeline(),
        )

        result = runner.invoke(app, ["evaluate", "--json", "a stormy wind farm"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["extraction"]["topic"] == "wind_turbine"

    def test_invalid_config_renders_error(self, workdir: Path):
        (workdir / "config.yaml").write_text("- not\n- a mapping\n")

        result = runner.invoke(app, ["evaluate", "wind_speed = 5"])

        assert result.exit_code == 1
        assert "LM-VAL-002" in result.stdout


class TestCacheCommands:
    def test_stats_memory(self, monkeypatch):
        monkeypatch.setenv("LOOMIN_STORAGE_BACKEND", "memory")

        result = runner.invoke(app, ["cache", "stats"])

        assert result.exit_code == 0
        assert "memory" in result.stdout
        assert "Entries" in result.stdout

    def test_stats_and_clear_sqlite(self, workdir: Path):
        data_dir = workdir / ".data"
        data_dir.mkdir()
        store = SQLCacheStore(f"sqlite:///{data_dir / 'simulation_cache.db'}")
        asyncio.run(store.create("notes", "{}"))
        store.close()

        stats = runner.invoke(app, ["cache", "stats"])
        cleared = runner.invoke(app, ["cache", "clear", "--yes"])

        assert stats.exit_code == 0
        assert "sqlite" in stats.stdout
        assert cleared.exit_code == 0
        assert "Removed 1 cached result(s)" in cleared.stdout

    def test_clear_cancelled(self, monkeypatch):
        monkeypatch.setenv("LOOMIN_STORAGE_BACKEND", "memory")

        result = runner.invoke(app, ["cache", "clear"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.stdout


class TestApiCommand:
    def test_start_invokes_server(self, monkeypatch):
        calls = {}

        def fake_run_server(host, port, reload):
            calls.update(host=host, port=port, reload=reload)

        monkeypatch.setattr("loomin.api.main.run_server", fake_run_server)

        result = runner.invoke(app, ["api", "start", "--host", "127.0.0.1", "-p", "9000"])

        assert result.exit_code == 0
        assert calls == {"host": "127.0.0.1", "port": 9000, "reload": False}

    def test_start_rejects_bad_port(self):
        result = runner.invoke(app, ["api", "start", "--port", "70000"])

        assert result.exit_code == 1
        assert "Invalid port" in result.stdout
