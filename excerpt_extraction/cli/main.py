from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from excerpt_extraction.config import ConfigError
from excerpt_extraction.settings import get_settings, load_config

from .inputs import (
    parse_files,
    parse_jsonl,
    validate_documents,
)
from .orchestrator import process_documents


DESCRIPTION = """
Derive excerpts for documents using range markers, a split marker,
or a paragraph/sentence/word fallback, and write the updated documents.
"""

EXAMPLES = """Examples:
  # Markdown files named inline
  excerpt-extract --files posts/a.md,posts/b.md --output ./excerpts.jsonl

  # Batch from JSONL with a YAML config
  excerpt-extract --jsonl documents.jsonl --config excerpt.yaml --enable

  # Keep going after failing documents, using all CPUs
  excerpt-extract --jsonl documents.jsonl --max-workers 0 --continue-on-error
"""


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="excerpt-extract",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "--jsonl", type=Path, help="JSONL file with one document per line"
    )
    input_group.add_argument(
        "--files",
        type=str,
        help="Comma-separated document paths or a .list file",
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=Path("./excerpts.jsonl"),
        help="JSONL file receiving the updated documents",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file with excerpt options (overrides EXCERPT_CONFIG_PATH)",
    )
    parser.add_argument(
        "--enable",
        action="store_true",
        help="Force the extension on regardless of configuration",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        help="Override worker process count (0 = all CPUs)",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Keep going after failures",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print progress messages",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Minimal console output",
    )
    return parser


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def gather_documents(args: argparse.Namespace, format_field: str) -> list[dict]:
    if args.jsonl:
        return parse_jsonl(args.jsonl)
    if args.files:
        return parse_files(args.files, format_field=format_field)
    return []


def run(args: argparse.Namespace) -> int:
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    settings = get_settings()
    if args.config:
        settings = dataclasses.replace(
            settings, config_path=args.config.expanduser().resolve()
        )

    try:
        config = load_config(
            settings, overrides={"enabled": True} if args.enable else None
        )
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 1

    try:
        documents = validate_documents(
            gather_documents(args, settings.format_field)
        )
    except (OSError, ValueError) as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1

    if not documents:
        print("No documents were provided.", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Processing {len(documents)} document(s)...")

    try:
        stats = process_documents(
            documents,
            args.output,
            config=config,
            settings=settings,
            workers=args.max_workers,
            continue_on_error=args.continue_on_error,
            verbose=args.verbose,
        )
    except Exception as exc:
        print(f"Processing failed: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        summary = (
            "\nSummary: extracted="
            f"{stats['extracted']} unchanged={stats['unchanged']} "
            f"failed={stats['failed']}"
        )
        print(summary)

    return 0 if stats["failed"] == 0 else 1


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    try:
        return run(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
