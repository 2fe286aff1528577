import json
from pathlib import Path

import pytest

from excerpt_extraction.cli import main as cli_main


def _run(argv, monkeypatch) -> int:
    monkeypatch.setattr("sys.argv", ["excerpt-extract", *argv])
    return cli_main.main()


def test_cli_processes_files(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    post = tmp_path / "post.md"
    post.write_text("# Title\n\nThe opening paragraph.\n\nMore text.\n")
    output = tmp_path / "out.jsonl"

    code = _run(["--files", str(post), "--output", str(output), "--enable"], monkeypatch)

    assert code == 0
    [document] = [json.loads(line) for line in output.read_text().splitlines()]
    assert document["excerpt"] == "The opening paragraph."
    assert "extracted=1" in capsys.readouterr().out


def test_cli_uses_config_file(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "excerpt.yaml"
    config_file.write_text(
        "enabled: true\nfallback:\n  strategy: sentence\n  count: 1\n"
    )
    docs = tmp_path / "docs.jsonl"
    docs.write_text(json.dumps({"body": "One. Two. Three.", "format": "md"}) + "\n")
    output = tmp_path / "out.jsonl"

    code = _run(
        ["--jsonl", str(docs), "--config", str(config_file), "--output", str(output), "-q"],
        monkeypatch,
    )

    assert code == 0
    assert json.loads(output.read_text())["excerpt"] == "One."


def test_cli_reports_config_errors(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "excerpt.yaml"
    config_file.write_text("marker:\n  pattern: '['\n")
    docs = tmp_path / "docs.jsonl"
    docs.write_text(json.dumps({"body": "Text."}) + "\n")

    code = _run(["--jsonl", str(docs), "--config", str(config_file)], monkeypatch)

    assert code == 1
    assert "marker.pattern must be a valid regular expression" in capsys.readouterr().err


def test_cli_reports_input_errors(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    docs = tmp_path / "docs.jsonl"
    docs.write_text(json.dumps({"title": "no body"}) + "\n")

    code = _run(["--jsonl", str(docs)], monkeypatch)

    assert code == 1
    assert "Input error" in capsys.readouterr().err


def test_cli_requires_input(monkeypatch):
    with pytest.raises(SystemExit):
        _run([], monkeypatch)
