from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tqdm import tqdm

from excerpt_extraction.extract import apply_excerpt
from excerpt_extraction.settings import Settings
from excerpt_extraction.types import Config

from .outputs import (
    append_error_entry,
    append_manifest_entry,
    write_documents,
)

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def _timed_apply(
    document: Document,
    config: Config,
    format_field: str,
) -> Tuple[Document, float]:
    start = time.monotonic()
    updated = apply_excerpt(document, config, format_field=format_field)
    return updated, time.monotonic() - start


def _worker_count(total: int, requested: int) -> int:
    if total == 0:
        return 1
    if requested <= 0:
        return min(total, max(os.cpu_count() or 1, 1))
    return min(total, requested)


def _status(original: Document, updated: Document) -> str:
    if "excerpt" not in original and "excerpt" in updated:
        return "extracted"
    return "unchanged"


def process_documents(
    documents: List[Document],
    output_path: Path,
    *,
    config: Config,
    settings: Settings,
    workers: Optional[int] = None,
    continue_on_error: bool = False,
    verbose: bool = False,
) -> Dict[str, int]:
    output_dir = output_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    worker_count = _worker_count(
        len(documents),
        settings.workers if workers is None else workers,
    )
    logger.debug(
        "Processing %d document(s) with %d worker(s)",
        len(documents),
        worker_count,
    )

    results: List[Document] = [dict(document) for document in documents]
    stats = {"extracted": 0, "unchanged": 0, "failed": 0}
    bar = tqdm(total=len(documents), desc="Extracting", unit="document")

    def _record_failure(index: int, error: BaseException, duration: float) -> None:
        original = documents[index]
        bar.update(1)
        append_manifest_entry(
            output_dir,
            index=index,
            document=original,
            status="failed",
            error=str(error),
            duration=duration,
        )
        append_error_entry(output_dir, index=index, document=original, error=error)
        stats["failed"] += 1
        bar.write(f"Error processing document {index}: {error}")

    def _record_success(index: int, updated: Document, duration: float) -> None:
        bar.update(1)
        status = _status(documents[index], updated)
        results[index] = updated
        append_manifest_entry(
            output_dir,
            index=index,
            document=updated,
            status=status,
            error=None,
            duration=duration,
        )
        stats[status] += 1
        if verbose:
            bar.write(f"Document {index}: {status}")

    if worker_count == 1:
        for index, document in enumerate(documents):
            start = time.monotonic()
            try:
                updated, duration = _timed_apply(
                    document, config, settings.format_field
                )
            except Exception as exc:
                _record_failure(index, exc, time.monotonic() - start)
                if not continue_on_error:
                    bar.close()
                    raise
                continue
            _record_success(index, updated, duration)
    else:
        with ProcessPoolExecutor(max_workers=worker_count) as pool:
            future_map = {
                pool.submit(
                    _timed_apply, document, config, settings.format_field
                ): idx
                for idx, document in enumerate(documents)
            }
            for future in as_completed(future_map):
                idx = future_map[future]
                try:
                    updated, duration = future.result()
                except Exception as exc:
                    _record_failure(idx, exc, 0.0)
                    if not continue_on_error:
                        pool.shutdown(wait=False, cancel_futures=True)
                        bar.close()
                        raise
                    continue
                _record_success(idx, updated, duration)
    bar.close()

    write_documents(output_path, results)
    return stats
