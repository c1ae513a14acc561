from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from varz.cli.app import app, set_runtime
from varz.core.config import VarzSettings
from varz.main import build_runtime

runner = CliRunner()


@pytest.fixture()
def console() -> Console:
    recording = Console(record=True, width=200)
    set_runtime(build_runtime(VarzSettings(), console=recording))
    return recording


def test_intent_command(console: Console) -> None:
    result = runner.invoke(app, ["intent", "save my work"])
    assert result.exit_code == 0
    assert "save" in console.export_text()


def test_explain_command(console: Console, tmp_path: Path) -> None:
    source = tmp_path / "loop.py"
    source.write_text('for i in range(3):\n    print("hey")\n', encoding="utf-8")
    result = runner.invoke(app, ["explain", str(source), "--facts"])
    assert result.exit_code == 0
    output = console.export_text()
    assert 'This python code prints "hey" 3 times.' in output
    assert "Structure" in output


def test_generate_command(console: Console) -> None:
    result = runner.invoke(app, ["generate", "print hello world"])
    assert result.exit_code == 0
    output = console.export_text()
    assert 'console.log("hello world");' in output
    assert "output.print" in output


def test_say_runs_editor_commands(console: Console) -> None:
    result = runner.invoke(app, ["say", "save the file"])
    assert result.exit_code == 0
    assert "VARZ: File saved successfully." in console.export_text()


def test_say_reads_selected_lines(console: Console, tmp_path: Path) -> None:
    source = tmp_path / "main.js"
    source.write_text("import fs from 'fs';\nconsole.log(\"ready\");\n", encoding="utf-8")
    result = runner.invoke(app, ["say", "read this", "--file", str(source), "--lines", "2"])
    assert result.exit_code == 0
    assert 'VARZ: This javascript code prints "ready".' in console.export_text()


def test_config_show(console: Console) -> None:
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "workbench.action.debug.start" in console.export_text()


def test_unknown_named_command_fails(console: Console) -> None:
    result = runner.invoke(app, ["invoke", "varz.nothing"])
    assert result.exit_code == 1
    assert "Unknown command varz.nothing" in console.export_text()


def test_explain_facts_show_signature(console: Console, tmp_path: Path) -> None:
    source = tmp_path / "square.c"
    source.write_text("int square(int x) {\n    return x * x;\n}\n", encoding="utf-8")
    result = runner.invoke(app, ["explain", str(source), "--facts"])
    assert result.exit_code == 0
    assert "square(int x) -> int" in console.export_text()


def test_explain_rejects_undecodable_file(console: Console, tmp_path: Path) -> None:
    source = tmp_path / "blob.py"
    source.write_bytes(b"\xff\xfe\xfa binary")
    result = runner.invoke(app, ["explain", str(source)])
    assert result.exit_code == 1
    assert "Cannot read" in console.export_text()
