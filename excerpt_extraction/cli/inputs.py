from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

Document = Dict[str, Any]


def _document_from_file(path: Path, format_field: str) -> Document:
    return {
        "path": str(path),
        "body": path.read_text(encoding="utf-8"),
        format_field: path.suffix.lstrip(".").lower(),
    }


def parse_file_list(path: Path) -> List[Path]:
    paths: List[Path] = []
    base = path.parent
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            candidate = Path(line)
            paths.append(candidate if candidate.is_absolute() else base / candidate)
    return paths


def parse_files(value: str, *, format_field: str = "format") -> List[Document]:
    """Read documents from comma-separated paths or a ``.list`` file.

    A ``.list`` file names one document path per line; relative paths are
    resolved against the directory of the list file.
    """
    path = Path(value)
    if path.exists() and path.suffix == ".list":
        paths = parse_file_list(path)
    else:
        paths = [Path(item.strip()) for item in value.split(",") if item.strip()]
    documents: List[Document] = []
    for item in paths:
        if not item.is_file():
            raise ValueError(f"Document file not found: {item}")
        documents.append(_document_from_file(item, format_field))
    return documents


def parse_jsonl(path: Path) -> List[Document]:
    documents: List[Document] = []
    with path.open("r", encoding="utf-8") as fh:
        for line_num, raw in enumerate(fh, 1):
            raw = raw.strip()
            if not raw:
                continue
            try:
                payload = json.loads(raw)
            except json.JSONDecodeError as exc:
                raise ValueError(
                    f"Invalid JSON on line {line_num}: {exc}"
                ) from exc
            if not isinstance(payload, dict):
                raise ValueError(f"Record on line {line_num} is not an object")
            documents.append(payload)
    return documents


def validate_documents(documents: List[Document]) -> List[Document]:
    for index, document in enumerate(documents, 1):
        if not isinstance(document.get("body"), str):
            raise ValueError(
                f"Document {index} must contain a string 'body' field."
            )
    return documents
