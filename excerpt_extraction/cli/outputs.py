from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping


def _identifier(index: int, document: Mapping[str, Any]) -> Dict[str, Any]:
    identifier: Dict[str, Any] = {"index": index}
    for key in ("path", "id", "permalink", "title"):
        value = document.get(key)
        if isinstance(value, str) and value:
            identifier[key] = value
    return identifier


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def write_documents(
    output_path: Path,
    documents: Iterable[Mapping[str, Any]],
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as fh:
        for document in documents:
            fh.write(json.dumps(document, ensure_ascii=False) + "\n")
    return output_path


def append_manifest_entry(
    output_dir: Path,
    *,
    index: int,
    document: Mapping[str, Any],
    status: str,
    error: str | None,
    duration: float,
) -> None:
    manifest_path = output_dir / "manifest.jsonl"
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    entry = {
        "timestamp": _timestamp(),
        "identifier": _identifier(index, document),
        "status": status,
        "excerpt": document.get("excerpt") if status == "extracted" else None,
        "error": error,
        "duration_seconds": round(duration, 3),
    }
    with manifest_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, ensure_ascii=False) + "\n")


def append_error_entry(
    output_dir: Path,
    *,
    index: int,
    document: Mapping[str, Any],
    error: BaseException,
) -> None:
    errors_path = output_dir / "errors.jsonl"
    entry = {
        "timestamp": _timestamp(),
        "identifier": _identifier(index, document),
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    with errors_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, ensure_ascii=False) + "\n")
