"""Output helpers for index documents."""

from __future__ import annotations

import json
import os
import tempfile
from typing import Iterable, List

from datasets import Dataset, Features, Value, concatenate_datasets


FEATURES = Features(
    {
        "path": Value("string"),
        "title": Value("string"),
        "tokenized_title": Value("string"),
        "categories": Value("string"),
        "links": Value("string"),
        "contents": Value("string"),
    }
)


def _ensure_parent(out_path: str) -> None:
    parent = os.path.dirname(out_path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_jsonl(rows_iter: Iterable[dict], out_path: str) -> int:
    """Write rows as JSONL with one object per line; return the row count."""
    _ensure_parent(out_path)
    count = 0
    with open(out_path, "w", encoding="utf-8") as handle:
        for row in rows_iter:
            handle.write(json.dumps(row, ensure_ascii=False) + "\n")
            count += 1
    return count


def _chunk_rows(rows_iter: Iterable[dict], batch_size: int) -> Iterable[List[dict]]:
    batch: List[dict] = []
    for row in rows_iter:
        batch.append(row)
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


def write_parquet(rows_iter: Iterable[dict], out_path: str, batch_size: int = 10_000) -> None:
    """Write rows to parquet shards and merge them into a final dataset.

    Shards go to a temporary directory beside ``out_path`` that is removed
    once the merged file is written.
    """
    _ensure_parent(out_path)

    with tempfile.TemporaryDirectory(dir=os.path.dirname(out_path) or None) as shard_dir:
        shard_paths = []
        for index, batch in enumerate(_chunk_rows(rows_iter, batch_size), start=1):
            dataset = Dataset.from_list(batch, features=FEATURES)
            shard_path = os.path.join(shard_dir, f"part_{index:05d}.parquet")
            dataset.to_parquet(shard_path)
            shard_paths.append(shard_path)

        if not shard_paths:
            Dataset.from_list([], features=FEATURES).to_parquet(out_path)
            return

        datasets = [Dataset.from_parquet(path) for path in shard_paths]
        combined = concatenate_datasets(datasets)
        combined.to_parquet(out_path)


def text_file_name(title: str) -> str:
    return title.replace("/", "_")


def write_text_files(rows_iter: Iterable[dict], out_dir: str) -> int:
    """Write each row's contents to ``out_dir/<title>``; return the file count."""
    if os.path.exists(out_dir) and not os.path.isdir(out_dir):
        raise NotADirectoryError(f"'{out_dir}' exists and is not a directory.")
    os.makedirs(out_dir, exist_ok=True)

    count = 0
    for row in rows_iter:
        path = os.path.join(out_dir, text_file_name(row["title"]))
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(row["contents"])
        count += 1
    return count


def iter_jsonl(path: str) -> Iterable[dict]:
    """Read back rows written by :func:`write_jsonl`."""
    with open(path, "r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON on line {line_number} of {path}") from exc
