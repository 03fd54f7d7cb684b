"""Per-page field cache and extractor configuration types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")


class PageType(enum.Enum):
    UNKNOWN = "unknown"
    ARTICLE = "article"
    REDIRECT = "redirect"
    DISAMBIGUATION = "disambiguation"
    WIKIPEDIA = "wikipedia"
    FILE = "file"
    TEMPLATE = "template"
    CATEGORY = "category"
    PORTAL = "portal"


@dataclass
class Separators:
    """Delimiters used when rendering titles, categories and links.

    ``title``, ``category`` and ``link`` replace the spaces inside a single
    name; ``category_list`` and ``link_list`` join several names.
    """

    title: str = "_"
    category: str = "_"
    category_list: str = " "
    link: str = "_"
    link_list: str = " "


class FieldCell(Generic[T]):
    """Memo cell for one derived field of the current page.

    ``fresh`` tells whether the value was computed since the last reset.
    """

    def __init__(self, compute: Callable[[], T], default: Callable[[], T]) -> None:
        self._compute = compute
        self._default = default
        self.value: T = default()
        self.fresh = False

    def get_cached(self) -> T:
        return self.value

    def recompute(self) -> T:
        self.value = self._compute()
        self.fresh = True
        return self.value

    def get(self, refresh: bool = True) -> T:
        if refresh:
            return self.recompute()
        return self.get_cached()

    def reset(self) -> None:
        self.value = self._default()
        self.fresh = False


class PageFields:
    """All memo cells of one extractor, reset together on every page advance."""

    def __init__(
        self,
        title: Callable[[], str],
        page_type: Callable[[], PageType],
        stub: Callable[[], bool],
        categories: Callable[[], List[str]],
        links: Callable[[], List[str]],
        text: Callable[[], str],
        abstract: Callable[[], str],
    ) -> None:
        self.title = FieldCell(title, str)
        self.page_type = FieldCell(page_type, lambda: PageType.UNKNOWN)
        self.stub = FieldCell(stub, bool)
        self.categories = FieldCell(categories, list)
        self.links = FieldCell(links, list)
        self.text = FieldCell(text, str)
        self.abstract = FieldCell(abstract, str)

    def cells(self) -> List[FieldCell]:
        return [
            self.title,
            self.page_type,
            self.stub,
            self.categories,
            self.links,
            self.text,
            self.abstract,
        ]

    def reset(self) -> None:
        for cell in self.cells():
            cell.reset()
