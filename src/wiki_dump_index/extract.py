"""Streaming page reader for Wikipedia XML dumps."""

from __future__ import annotations

import bz2
import logging
from typing import Iterator, Optional, TextIO

logger = logging.getLogger(__name__)

PAGE_START = "<page>"
PAGE_END = "</page>"


class DumpError(Exception):
    """Base error for dump handling."""


class DumpOpenError(DumpError):
    """The dump file could not be opened for reading."""


def open_dump(dump_path: str) -> TextIO:
    """Open a dump for forward, line-oriented reading.

    Files ending in ``.bz2`` are decompressed on the fly.

    Raises:
        DumpOpenError: if the file cannot be opened.
    """
    try:
        if str(dump_path).endswith(".bz2"):
            return bz2.open(dump_path, "rt", encoding="utf-8")
        return open(dump_path, "r", encoding="utf-8")
    except OSError as exc:
        raise DumpOpenError(f"Cannot open dump file {dump_path}: {exc}") from exc


class PageCursor:
    """Forward-only cursor holding the raw body of one page at a time.

    The body is everything strictly between a line containing ``<page>`` and
    the next line containing ``</page>``, with line breaks dropped. Both
    markers are expected on lines of their own.
    """

    def __init__(self, dump_path: str) -> None:
        self.dump_path = dump_path
        self._handle = open_dump(dump_path)
        self.body = ""

    def advance(self) -> bool:
        """Load the next page; return False at end of input or on a read error."""
        self.body = ""
        if self._handle.closed:
            return False
        try:
            body = self._read_page()
        except (OSError, EOFError, UnicodeDecodeError) as exc:
            logger.warning("Stopped reading %s: %s", self.dump_path, exc)
            # a failed read ends the traversal for good
            self._handle.close()
            return False
        if body is None:
            return False
        self.body = body
        return True

    def _read_page(self) -> Optional[str]:
        readline = self._handle.readline

        line = readline()
        while line and PAGE_START not in line:
            line = readline()
        if not line:
            return None

        parts = []
        line = readline()
        while line and PAGE_END not in line:
            parts.append(line.rstrip("\r\n"))
            line = readline()
        if not line:
            logger.debug("Unterminated page at end of %s", self.dump_path)
            return None
        return "".join(parts)

    def close(self) -> None:
        self._handle.close()

    def __iter__(self) -> Iterator[str]:
        while self.advance():
            yield self.body

    def __enter__(self) -> "PageCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
