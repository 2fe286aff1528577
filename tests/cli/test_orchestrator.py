import json
from pathlib import Path

import pytest

from excerpt_extraction.cli import orchestrator
from excerpt_extraction.config import resolve_config
from excerpt_extraction.settings import Settings


@pytest.fixture
def run_settings() -> Settings:
    return Settings(config_path=None, enabled=None, workers=1, format_field="format")


def _documents():
    return [
        {"path": "a.md", "body": "Intro.\n\n<!--more-->\n\nRest.", "format": "md"},
        {"path": "b.md", "body": "Body.", "excerpt": "Given", "format": "md"},
        {"path": "c.md", "body": "# Title\n\nParagraph one.", "format": "md"},
    ]


def _read_jsonl(path: Path):
    return [json.loads(line) for line in path.read_text().splitlines() if line]


def test_process_documents_creates_outputs(tmp_path: Path, run_settings: Settings):
    output = tmp_path / "out" / "excerpts.jsonl"
    stats = orchestrator.process_documents(
        _documents(),
        output,
        config=resolve_config({"enabled": True}),
        settings=run_settings,
        verbose=True,
    )

    assert stats == {"extracted": 2, "unchanged": 1, "failed": 0}
    written = _read_jsonl(output)
    assert [doc["excerpt"] for doc in written] == ["Intro.", "Given", "Paragraph one."]
    assert "<!--more-->" not in written[0]["body"]

    manifest = _read_jsonl(output.parent / "manifest.jsonl")
    assert [entry["status"] for entry in manifest] == [
        "extracted",
        "unchanged",
        "extracted",
    ]
    assert manifest[0]["identifier"] == {"index": 0, "path": "a.md"}
    assert not (output.parent / "errors.jsonl").exists()


def test_process_documents_disabled_config(tmp_path: Path, run_settings: Settings):
    output = tmp_path / "excerpts.jsonl"
    stats = orchestrator.process_documents(
        _documents(),
        output,
        config=resolve_config({"enabled": False}),
        settings=run_settings,
    )
    assert stats == {"extracted": 0, "unchanged": 3, "failed": 0}
    assert _read_jsonl(output) == _documents()


def _flaky_apply(document, config, *, format_field):
    if document["path"] == "b.md":
        raise RuntimeError("processor exploded")
    return {**document, "excerpt": "stub"}


def test_process_documents_records_failures(
    tmp_path: Path, run_settings: Settings, monkeypatch
):
    monkeypatch.setattr(orchestrator, "apply_excerpt", _flaky_apply)
    output = tmp_path / "excerpts.jsonl"
    stats = orchestrator.process_documents(
        _documents(),
        output,
        config=resolve_config({"enabled": True}),
        settings=run_settings,
        continue_on_error=True,
    )
    assert stats == {"extracted": 2, "unchanged": 0, "failed": 1}
    errors = _read_jsonl(tmp_path / "errors.jsonl")
    assert errors[0]["error_type"] == "RuntimeError"
    assert errors[0]["identifier"]["path"] == "b.md"
    manifest = _read_jsonl(tmp_path / "manifest.jsonl")
    assert [entry["status"] for entry in manifest] == [
        "extracted",
        "failed",
        "extracted",
    ]
    assert manifest[1]["error"] == "processor exploded"
    written = _read_jsonl(output)
    assert written[1] == _documents()[1]


def test_process_documents_stops_on_error(
    tmp_path: Path, run_settings: Settings, monkeypatch
):
    monkeypatch.setattr(orchestrator, "apply_excerpt", _flaky_apply)
    with pytest.raises(RuntimeError, match="processor exploded"):
        orchestrator.process_documents(
            _documents(),
            tmp_path / "excerpts.jsonl",
            config=resolve_config({"enabled": True}),
            settings=run_settings,
        )


def test_process_documents_with_worker_pool(tmp_path: Path, run_settings: Settings):
    documents = [
        {"body": f"Paragraph {index}.\n\nSecond.", "format": "md"}
        for index in range(6)
    ]
    output = tmp_path / "excerpts.jsonl"
    stats = orchestrator.process_documents(
        documents,
        output,
        config=resolve_config({"enabled": True}),
        settings=run_settings,
        workers=2,
    )
    assert stats["extracted"] == 6
    assert [doc["excerpt"] for doc in _read_jsonl(output)] == [
        f"Paragraph {index}." for index in range(6)
    ]


@pytest.mark.parametrize(
    ("total", "requested", "expected"),
    [(0, 4, 1), (3, 8, 3), (10, 2, 2)],
)
def test_worker_count(total: int, requested: int, expected: int):
    assert orchestrator._worker_count(total, requested) == expected
