import json

import pytest
import typer
from typer.testing import CliRunner

from persona_quill.cli import app, parse_persona

runner = CliRunner()

TEXT = "Hey folks! We shipped the new API today. Will you try it and share feedback?"


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.setenv("PERSONA_STORE", "sqlite")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "cli.db"))
    sample = tmp_path / "alice.txt"
    sample.write_text(TEXT, encoding="utf-8")
    return tmp_path


def test_parse_persona():
    assert parse_persona("alice").weight == 1.0
    ref = parse_persona("bob:0.25")
    assert (ref.name, ref.weight) == ("bob", 0.25)
    with pytest.raises(typer.BadParameter):
        parse_persona("bob:heavy")


def test_analyze_json(workspace):
    result = runner.invoke(app, ["analyze", str(workspace / "alice.txt"), "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["word_count"] == 15


def test_train_list_show_remove(workspace):
    result = runner.invoke(app, ["train", "Alice", str(workspace / "alice.txt"), "-c", "posts"])
    assert result.exit_code == 0, result.stdout
    assert "alice" in result.stdout

    result = runner.invoke(app, ["list"])
    assert "alice" in result.stdout

    result = runner.invoke(app, ["show", "alice", "-o", str(workspace / "report.md")])
    assert result.exit_code == 0
    assert "# Persona: alice" in (workspace / "report.md").read_text()

    assert runner.invoke(app, ["remove", "alice"]).exit_code == 0
    result = runner.invoke(app, ["remove", "alice"])
    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_train_reserved_name(workspace):
    result = runner.invoke(app, ["train", "bap", str(workspace / "alice.txt")])
    assert result.exit_code == 1
    assert "reserved" in result.stdout


def test_export_import(workspace):
    runner.invoke(app, ["train", "alice", str(workspace / "alice.txt")])
    backup = workspace / "alice.json"
    assert runner.invoke(app, ["export", "alice", "-o", str(backup)]).exit_code == 0
    assert json.loads(backup.read_text())["rawContent"] == TEXT

    runner.invoke(app, ["remove", "alice"])
    result = runner.invoke(app, ["import", str(backup)])
    assert result.exit_code == 0
    assert "Imported" in result.stdout


def test_prompt_with_blend(workspace):
    runner.invoke(app, ["train", "alice", str(workspace / "alice.txt")])
    runner.invoke(app, ["train", "bob", str(workspace / "alice.txt")])
    out = workspace / "prompt.txt"
    result = runner.invoke(app, [
        "prompt", "-p", "linkedin", "-t", "Release", "-b", "Version 2 is out.",
        "--persona", "alice:3", "--persona", "bob:1", "--normalize", "-o", str(out),
    ])
    assert result.exit_code == 0, result.stdout
    prompt = out.read_text()
    assert prompt.index("alice's Writing Style (75% influence)") < prompt.index("bob's Writing Style (25% influence)")


def test_prompt_normalize_rejects_non_positive_weights(workspace):
    runner.invoke(app, ["train", "alice", str(workspace / "alice.txt")])
    runner.invoke(app, ["train", "bob", str(workspace / "alice.txt")])
    result = runner.invoke(app, [
        "prompt", "-p", "linkedin", "-b", "Version 2 is out.",
        "--persona", "alice:-1", "--persona", "bob:-3", "--normalize",
    ])
    assert result.exit_code == 1
    assert "must be > 0" in result.stdout

    result = runner.invoke(app, [
        "prompt", "-p", "linkedin", "-b", "Version 2 is out.",
        "--persona", "alice:0.004", "--persona", "bob:1", "--normalize",
    ])
    assert result.exit_code == 1
    assert "rounds to 0.00" in result.stdout


def test_prompt_unknown_platform(workspace):
    result = runner.invoke(app, ["prompt", "-p", "myspace", "-b", "body"])
    assert result.exit_code == 1
    assert "unknown platform" in result.stdout


def test_seed(workspace):
    (workspace / "bap-posts.txt").write_text(TEXT, encoding="utf-8")
    result = runner.invoke(app, ["seed", "-d", str(workspace)])
    assert result.exit_code == 0
    assert "bap" in result.stdout
    assert "Developer Advocate" in runner.invoke(app, ["show", "bap"]).stdout
