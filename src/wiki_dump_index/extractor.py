"""Field extraction for the pages of a Wikipedia XML dump."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from wiki_dump_index.clean import TAG_CLOSE, TAG_OPEN, TAG_SPAN_RE, filter_markup
from wiki_dump_index.extract import PageCursor
from wiki_dump_index.fields import PageFields, PageType, Separators

logger = logging.getLogger(__name__)

TITLE_START = "<title>"
TITLE_END = "</title>"
TEXT_START = "<text "
TEXT_END = "</text>"
HEADING = "=="
REDIRECT_MARKER = "<redirect"
STUB_MARKER = "-stub}}"
DISAMBIG_SUFFIX = "(disambiguation)"
DISAMBIG_TEMPLATES = ("{{disambig}}", "{{Disambig}}")
EXTERNAL_LINK_HEADERS = ("External Links", "External links")
CATEGORY_OPEN = "[[Category:"
LINK_OPEN = "[["
LINK_CLOSE = "]]"
QUOTE_ENTITY = "&quot;"

TITLE_PREFIXES = (
    ("Wikipedia:", PageType.WIKIPEDIA),
    ("File:", PageType.FILE),
    ("Template:", PageType.TEMPLATE),
    ("Category:", PageType.CATEGORY),
    ("Portal:", PageType.PORTAL),
)

LINK_SUFFIX_RE = re.compile(r"[#|]")


def _text_start(body: str) -> int:
    """Index just past the ``>`` closing the ``<text ...>`` tag, or -1."""
    tag = body.find(TEXT_START)
    if tag < 0:
        return -1
    close = body.find(">", tag)
    if close < 0:
        return -1
    return close + 1


def _drop_external_links(text: str) -> str:
    """Cut an External links header up to the end of its line.

    Page bodies from :class:`PageCursor` carry no line breaks, so for them
    this always truncates the text at the header.
    """
    for header in EXTERNAL_LINK_HEADERS:
        start = text.find(header)
        if start >= 0:
            break
    if start <= 0:
        return text
    newline = text.find("\n", start)
    if newline < 0:
        return text[:start]
    return text[:start] + text[newline:]


def _strip_link_suffix(name: str) -> str:
    """Drop a ``#section`` anchor or ``|label`` from a link target."""
    return LINK_SUFFIX_RE.split(name, 1)[0]


def _strip_encoded_tags(link: str) -> str:
    link = link.replace("&lt;", TAG_OPEN).replace("&gt;", TAG_CLOSE)
    return TAG_SPAN_RE.sub(" ", link)


def _first_quoted(link: str) -> str:
    start = link.find(QUOTE_ENTITY)
    if start < 0:
        return link
    end = link.find(QUOTE_ENTITY, start + len(QUOTE_ENTITY))
    if end < 0:
        end = start
    return link[start:end + len(QUOTE_ENTITY)]


def _join(tokens: List[str], separator: str, list_separator: str) -> str:
    return list_separator.join(token.replace(" ", separator) for token in tokens)


class Extractor:
    """Walks a dump page by page and derives fields from the current page.

    Call :meth:`advance` before reading any field. Every field accessor takes
    a ``refresh`` flag: ``True`` (the default) recomputes the value from the
    current page, ``False`` returns the value cached since the last advance,
    or the field's empty default if it was never computed. Rendering options
    in :attr:`separators` can be changed between calls without recomputing.
    """

    def __init__(self, dump_path: str, separators: Optional[Separators] = None) -> None:
        self.cursor = PageCursor(dump_path)
        self.separators = separators or Separators()
        self.fields = PageFields(
            title=self._extract_title,
            page_type=self._extract_page_type,
            stub=self._extract_stub,
            categories=self._extract_categories,
            links=self._extract_links,
            text=self._extract_text,
            abstract=self._extract_abstract,
        )
        self.page_count = 0

    def advance(self) -> bool:
        """Move to the next page and clear every cached field."""
        found = self.cursor.advance()
        self.fields.reset()
        if found:
            self.page_count += 1
        else:
            logger.debug("No further pages after %d in %s", self.page_count, self.cursor.dump_path)
        return found

    def source(self) -> str:
        return self.cursor.body

    def title(self, refresh: bool = True) -> str:
        title = self.fields.title.get(refresh)
        if self.separators.title == " ":
            return title
        return title.replace(" ", self.separators.title)

    def page_type(self, refresh: bool = True) -> PageType:
        return self.fields.page_type.get(refresh)

    def is_stub(self, refresh: bool = True) -> bool:
        return self.fields.stub.get(refresh)

    def category_list(self, refresh: bool = True) -> List[str]:
        return list(self.fields.categories.get(refresh))

    def categories(self, refresh: bool = True) -> str:
        """Categories joined into one string using the current separators."""
        return _join(
            self.fields.categories.get(refresh),
            self.separators.category,
            self.separators.category_list,
        )

    def link_list(self, refresh: bool = True) -> List[str]:
        return list(self.fields.links.get(refresh))

    def links(self, refresh: bool = True) -> str:
        """Article links joined into one string using the current separators."""
        return _join(
            self.fields.links.get(refresh),
            self.separators.link,
            self.separators.link_list,
        )

    def text(self, refresh: bool = True) -> str:
        return self.fields.text.get(refresh)

    def abstract(self, refresh: bool = True) -> str:
        return self.fields.abstract.get(refresh)

    def close(self) -> None:
        self.cursor.close()

    def __enter__(self) -> "Extractor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Extraction against the raw page body. None of these raise on malformed
    # markup; a missing marker yields the field's empty value.

    def _extract_title(self) -> str:
        body = self.cursor.body
        start = body.find(TITLE_START)
        end = body.find(TITLE_END)
        if start < 0 or end < 0:
            return ""
        start += len(TITLE_START)
        if end < start:
            return ""
        return body[start:end]

    def _extract_page_type(self) -> PageType:
        body = self.cursor.body
        if not body:
            return PageType.UNKNOWN
        title = self.fields.title.recompute()
        if not title:
            return PageType.UNKNOWN

        if REDIRECT_MARKER in body:
            return PageType.REDIRECT
        for prefix, page_type in TITLE_PREFIXES:
            if title.startswith(prefix):
                return page_type
        if title.endswith(DISAMBIG_SUFFIX) or any(marker in body for marker in DISAMBIG_TEMPLATES):
            return PageType.DISAMBIGUATION
        return PageType.ARTICLE

    def _extract_stub(self) -> bool:
        return STUB_MARKER in self.cursor.body

    def _extract_text(self) -> str:
        body = self.cursor.body
        start = _text_start(body)
        end = body.find(TEXT_END)
        if start < 0 or end < 0:
            return ""
        return filter_markup(_drop_external_links(body[start:end]))

    def _extract_abstract(self) -> str:
        body = self.cursor.body
        start = _text_start(body)
        if start < 0:
            return ""
        end = body.find(HEADING, start)
        if end < 0:
            end = body.find(TEXT_END, start)
            if end < 0:
                return ""
        return filter_markup(body[start:end])

    def _extract_categories(self) -> List[str]:
        categories = []
        for segment in self.cursor.body.split(CATEGORY_OPEN)[1:]:
            end = segment.find(LINK_CLOSE)
            if end < 0:
                continue
            categories.append(_strip_link_suffix(segment[:end]))
        return categories

    def _extract_links(self) -> List[str]:
        body = self.cursor.body
        start = body.find(TEXT_START)
        end = body.find(TEXT_END)
        if start < 0 or end < 0:
            return []

        links = []
        seen = set()
        for segment in body[start:end].split(LINK_OPEN)[1:]:
            # namespaced targets such as File:, Category: or interwiki
            if ":" in segment:
                continue
            close = segment.find(LINK_CLOSE)
            if close < 0:
                continue
            link = _strip_link_suffix(segment[:close])
            if "&lt;" in link:
                link = _strip_encoded_tags(link)
            if QUOTE_ENTITY in link:
                link = _first_quoted(link)
            if link in seen:
                continue
            seen.add(link)
            links.append(link)
        return links
