"""CLI tests against the recorded fixture session."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lspnav.cli import app

RECORDING = Path(__file__).resolve().parent / "data" / "recording.yaml"
APP_FILE = "/work/project/src/app.ts"


@pytest.fixture()
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def _gather(runner: CliRunner, method: str, *extra: str):
    return runner.invoke(
        app,
        ["gather", "--recording", str(RECORDING), "--method", method, "--file", APP_FILE, *extra],
    )


def test_methods_lists_selectable_tags(runner: CliRunner) -> None:
    result = runner.invoke(app, ["methods"])
    assert result.exit_code == 0, result.output
    tags = result.stdout.split()
    assert len(tags) == 9
    assert "workspaceSymbol/resolve" not in tags
    assert "textDocument/references" in tags


def test_gather_definition(runner: CliRunner) -> None:
    result = _gather(runner, "textDocument/definition", "--line", "10", "--col", "5")
    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[:2] == ["/work/project/src/util.ts:3:17", "/work/project/src/util.d.ts:1:10"]


def test_gather_references_as_json(runner: CliRunner) -> None:
    result = _gather(runner, "textDocument/references", "--json")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [entry["display"] for entry in payload] == [
        "/work/project/src/app.ts:10:5",
        "/work/project/test/app.test.ts:4:3",
    ]


def test_unsupported_method_prints_nothing(runner: CliRunner) -> None:
    result = _gather(runner, "textDocument/typeDefinition")
    assert result.exit_code == 0
    assert "util.ts" not in result.output


def test_call_hierarchy_tree(runner: CliRunner) -> None:
    result = _gather(runner, "callHierarchy/incomingCalls", "--line", "21", "--col", "10", "--expand-depth", "2")
    assert result.exit_code == 0, result.output
    assert "render  /work/project/src/app.ts:21:10" in result.stdout
    assert "main:4:3" in result.stdout


def test_resolve_workspace_symbols(runner: CliRunner) -> None:
    result = runner.invoke(app, ["resolve", "--recording", str(RECORDING), "--query", "format"])
    assert result.exit_code == 0, result.output
    assert "formatDate" in result.stdout
    assert "/work/project/src/date.ts:15:17" in result.stdout


def test_config_file_supplies_defaults(runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "lspnav.yaml").write_text(
        f"recording: {RECORDING}\nsource:\n  method: textDocument/references\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["gather", "--file", APP_FILE])
    assert result.exit_code == 0, result.output
    assert "/work/project/test/app.test.ts:4:3" in result.stdout


def test_missing_recording_is_a_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(app, ["gather", "--method", "textDocument/definition"])
    assert result.exit_code == 2
