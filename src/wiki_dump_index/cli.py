"""Command-line interface for building index documents from a Wikipedia dump."""

from __future__ import annotations

import argparse
import logging
import os
import time
from typing import List, Optional

from datasets import Dataset
from tqdm import tqdm

from wiki_dump_index.extract import DumpOpenError
from wiki_dump_index.extractor import Extractor
from wiki_dump_index.index import build_index_rows
from wiki_dump_index.io import iter_jsonl, write_jsonl, write_parquet, write_text_files

DUMP_PATH = os.path.join("data", "raw", "enwiki-latest-pages-articles.xml.bz2")
JSONL_PATH = os.path.join("data", "enwiki_index.jsonl")
PARQUET_PATH = os.path.join("data", "enwiki_index.parquet")


def format_elapsed(seconds: float) -> str:
    """Render a duration as ``42s``, ``3:07`` or ``1:02:03``."""
    total = int(round(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    if minutes:
        return f"{minutes}:{secs:02d}"
    return f"{secs}s"


def quality_checks(parquet_path: str) -> None:
    dataset = Dataset.from_parquet(parquet_path)
    print("Dataset features:")
    print(dataset.features)
    print(f"Rows: {len(dataset)}")

    if "contents" not in dataset.column_names:
        raise AssertionError("Expected 'contents' column in dataset")
    if len(dataset) and not any((text or "").strip() for text in dataset["contents"]):
        raise AssertionError("No non-empty contents found in dataset")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build index documents from a Wikipedia dump.")
    parser.add_argument("--dump", default=DUMP_PATH, help="Path to the XML dump (.xml or .xml.bz2)")
    parser.add_argument("--jsonl", default=JSONL_PATH, help="JSONL output path")
    parser.add_argument(
        "--parquet",
        default=PARQUET_PATH,
        help="Parquet output path (empty string to skip)",
    )
    parser.add_argument(
        "--text-dir",
        default=None,
        help="Also write each article's contents to a file in this directory",
    )
    parser.add_argument("--ignore-stubs", action="store_true", help="Skip stub articles")
    parser.add_argument("--max-pages", type=int, default=None, help="Max pages to read")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level",
    )
    parser.add_argument("--log-file", default=None, help="Write the run log to this file instead of stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=args.log_file,
        force=True,
    )

    try:
        extractor = Extractor(args.dump)
    except DumpOpenError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Wikipedia dump: {args.dump}")
    print("Ignoring stubs" if args.ignore_stubs else "Including stubs")

    start = time.monotonic()
    with extractor:
        rows_iter, counts = build_index_rows(
            extractor,
            ignore_stubs=args.ignore_stubs,
            max_pages=args.max_pages,
        )
        print(f"Writing JSONL to {args.jsonl}...")
        write_jsonl(tqdm(rows_iter, desc="articles", unit="art"), args.jsonl)

    if args.parquet:
        print(f"Writing Parquet to {args.parquet}...")
        write_parquet(iter_jsonl(args.jsonl), args.parquet)

    if args.text_dir:
        print(f"Writing text files to {args.text_dir}...")
        write_text_files(iter_jsonl(args.jsonl), args.text_dir)

    result = counts()
    print("Summary:")
    print(f"  Pages seen: {result.seen}")
    print(f"  Articles written: {result.written}")
    print(f"  Non-article pages skipped: {result.non_articles_skipped}")
    print(f"  Stubs skipped: {result.stubs_skipped}")
    print(f"  Elapsed: {format_elapsed(time.monotonic() - start)}")

    if args.parquet:
        quality_checks(args.parquet)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
