import json
import logging

import pytest

from conftest import page_xml
from wiki_dump_index.cli import format_elapsed, main


@pytest.fixture(autouse=True)
def reset_root_logging():
    """main() reconfigures the root logger; drop its handlers afterwards."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0s"), (59, "59s"), (61, "1:01"), (3599.6, "1:00:00"), (3661, "1:01:01")],
)
def test_format_elapsed(seconds, expected):
    assert format_elapsed(seconds) == expected


@pytest.fixture
def dump_path(write_dump):
    return write_dump([
        page_xml("Foo Bar", "'''Foo''' is in [[Paris]].{{city-stub}}"),
        page_xml("Old Name", "#REDIRECT [[Foo Bar]]", redirect="Foo Bar"),
        page_xml("Baz", "Baz text."),
    ])


def test_main_writes_outputs(tmp_path, dump_path, capsys):
    jsonl = tmp_path / "out" / "index.jsonl"
    parquet = tmp_path / "out" / "index.parquet"
    text_dir = tmp_path / "texts"

    code = main([
        "--dump", dump_path,
        "--jsonl", str(jsonl),
        "--parquet", str(parquet),
        "--text-dir", str(text_dir),
    ])

    assert code == 0
    rows = [json.loads(line) for line in jsonl.read_text(encoding="utf-8").splitlines()]
    assert [row["title"] for row in rows] == ["foo_bar", "baz"]
    assert parquet.exists()
    assert (text_dir / "baz").read_text(encoding="utf-8").split() == ["baz", "text"]
    out = capsys.readouterr().out
    assert "Articles written: 2" in out
    assert "Non-article pages skipped: 1" in out


def test_main_ignore_stubs_without_parquet(tmp_path, dump_path, capsys):
    jsonl = tmp_path / "index.jsonl"
    code = main(["--dump", dump_path, "--jsonl", str(jsonl), "--parquet", "", "--ignore-stubs"])
    assert code == 0
    rows = [json.loads(line) for line in jsonl.read_text(encoding="utf-8").splitlines()]
    assert [row["title"] for row in rows] == ["baz"]
    assert "Stubs skipped: 1" in capsys.readouterr().out


def test_main_missing_dump(tmp_path, capsys):
    code = main(["--dump", str(tmp_path / "missing.xml"), "--jsonl", str(tmp_path / "x.jsonl")])
    assert code == 1
    assert "Error: Cannot open dump file" in capsys.readouterr().out


def test_main_logs_to_file(tmp_path, dump_path):
    log_file = tmp_path / "run.log"
    code = main([
        "--dump", dump_path,
        "--jsonl", str(tmp_path / "index.jsonl"),
        "--parquet", "",
        "--log-level", "INFO",
        "--log-file", str(log_file),
    ])
    assert code == 0
    assert "Indexed 2 of 3 pages" in log_file.read_text(encoding="utf-8")
