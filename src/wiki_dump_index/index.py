"""Build flat index documents from the articles of a dump."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, NamedTuple, Optional, Tuple

from wiki_dump_index.extractor import Extractor
from wiki_dump_index.fields import PageType

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50_000


class IndexCounts(NamedTuple):
    seen: int
    written: int
    non_articles_skipped: int
    stubs_skipped: int


def index_document(extractor: Extractor, doc_id: int) -> Dict[str, str]:
    """Render the current page as an index row.

    The title is extracted once and rendered twice: as an identifier with
    underscores and as analysed text with spaces.
    """
    separators = extractor.separators
    title_separator = separators.title

    separators.title = "_"
    title = extractor.title(refresh=False).lower()
    separators.title = " "
    tokenized_title = extractor.title(refresh=False).lower()
    separators.title = title_separator

    return {
        "path": str(doc_id),
        "title": title,
        "tokenized_title": tokenized_title,
        "categories": extractor.categories().lower(),
        "links": extractor.links().lower(),
        "contents": extractor.abstract().lower(),
    }


def build_index_rows(
    extractor: Extractor,
    ignore_stubs: bool = False,
    max_pages: Optional[int] = None,
    progress_every: int = PROGRESS_EVERY,
) -> Tuple[Iterator[Dict[str, str]], Callable[[], IndexCounts]]:
    """Lazily turn every article of the dump into an index row.

    Returns the row iterator and a callable reporting the counters, which
    are final once the iterator is exhausted.
    """
    seen = 0
    written = 0
    non_articles_skipped = 0
    stubs_skipped = 0

    def generator():
        nonlocal seen, written, non_articles_skipped, stubs_skipped
        while extractor.advance():
            seen += 1
            if max_pages is not None and seen > max_pages:
                seen -= 1
                break
            # page_type() refreshes the title as a side effect
            if extractor.page_type() != PageType.ARTICLE:
                non_articles_skipped += 1
                continue
            if ignore_stubs and extractor.is_stub():
                stubs_skipped += 1
                continue
            written += 1
            yield index_document(extractor, written)
            if progress_every and written % progress_every == 0:
                logger.info(
                    "%d articles (%d pages seen, %d non-articles, %d stubs skipped)",
                    written,
                    seen,
                    non_articles_skipped,
                    stubs_skipped,
                )
        logger.info(
            "Indexed %d of %d pages (%d non-articles, %d stubs skipped)",
            written,
            seen,
            non_articles_skipped,
            stubs_skipped,
        )

    return generator(), lambda: IndexCounts(
        seen,
        written,
        non_articles_skipped,
        stubs_skipped,
    )
