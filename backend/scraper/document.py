"""Queryable document capability used by the extractors.

The extractors only ever talk to the small :class:`Document` / :class:`Element`
protocol below, so they run unchanged against a live Playwright page
(:class:`PageDocument`) or a static HTML string parsed with BeautifulSoup
(:class:`HtmlDocument`, used for saved pages and the test suite).

Any failure to query the underlying tree is raised as
:class:`~backend.errors.QueryFailure`.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag
from playwright.sync_api import Error as PlaywrightError
from soupsieve import SelectorSyntaxError

from backend.errors import QueryFailure


class Element(Protocol):
    def query_all(self, selector: str) -> List["Element"]: ...

    def query(self, selector: str) -> Optional["Element"]: ...

    def text(self) -> str: ...

    def attribute(self, name: str) -> Optional[str]: ...


class Document(Protocol):
    def query_all(self, selector: str) -> List[Element]: ...

    def html(self) -> str: ...


# ---------------------------------------------------------------------------
# BeautifulSoup implementation
# ---------------------------------------------------------------------------

class SoupElement:
    """:class:`Element` backed by a BeautifulSoup ``Tag``."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def query_all(self, selector: str) -> List[Element]:
        try:
            return [SoupElement(t) for t in self._tag.select(selector)]
        except (SelectorSyntaxError, NotImplementedError) as exc:
            raise QueryFailure(f"Selector {selector!r} could not be evaluated", str(exc)) from exc

    def query(self, selector: str) -> Optional[Element]:
        matches = self.query_all(selector)
        return matches[0] if matches else None

    def text(self) -> str:
        return self._tag.get_text().strip()

    def attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):  # multi-valued attributes such as ``class``
            return " ".join(value)
        return value


class HtmlDocument:
    """:class:`Document` over a static HTML string."""

    def __init__(self, html: str) -> None:
        if html is None:
            raise QueryFailure("Document was never rendered", "no HTML to parse")
        self._html = html
        self._soup = BeautifulSoup(html, "html.parser")

    def query_all(self, selector: str) -> List[Element]:
        return SoupElement(self._soup).query_all(selector)

    def html(self) -> str:
        return self._html


# ---------------------------------------------------------------------------
# Playwright implementation
# ---------------------------------------------------------------------------

class HandleElement:
    """:class:`Element` backed by a Playwright ``ElementHandle``."""

    def __init__(self, handle: Any) -> None:
        self._handle = handle

    def query_all(self, selector: str) -> List[Element]:
        try:
            return [HandleElement(h) for h in self._handle.query_selector_all(selector)]
        except PlaywrightError as exc:
            raise QueryFailure(f"Selector {selector!r} could not be evaluated", str(exc)) from exc

    def query(self, selector: str) -> Optional[Element]:
        try:
            handle = self._handle.query_selector(selector)
        except PlaywrightError as exc:
            raise QueryFailure(f"Selector {selector!r} could not be evaluated", str(exc)) from exc
        return HandleElement(handle) if handle is not None else None

    def text(self) -> str:
        try:
            return (self._handle.text_content() or "").strip()
        except PlaywrightError as exc:
            raise QueryFailure("Element text could not be read", str(exc)) from exc

    def attribute(self, name: str) -> Optional[str]:
        try:
            return self._handle.get_attribute(name)
        except PlaywrightError as exc:
            raise QueryFailure(f"Attribute {name!r} could not be read", str(exc)) from exc


class PageDocument:
    """:class:`Document` over a live, settled Playwright ``Page``."""

    def __init__(self, page: Any) -> None:
        self._page = page

    def query_all(self, selector: str) -> List[Element]:
        try:
            return [HandleElement(h) for h in self._page.query_selector_all(selector)]
        except PlaywrightError as exc:
            raise QueryFailure(f"Selector {selector!r} could not be evaluated", str(exc)) from exc

    def html(self) -> str:
        try:
            return self._page.content()
        except PlaywrightError as exc:
            raise QueryFailure("Page content could not be serialised", str(exc)) from exc
