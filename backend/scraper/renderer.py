"""Headless-browser page rendering.

:class:`PlaywrightRenderer` loads a URL in Chromium, waits for the network to
go idle, and hands the settled page to the caller as a
:class:`~backend.scraper.document.Document`.  The browser is closed exactly
once when the ``with`` block exits, whatever happens inside it.

Every navigation, timeout or engine error is raised as
:class:`~backend.errors.RenderFailure`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from backend.config import settings
from backend.errors import RenderFailure
from backend.scraper.document import Document, PageDocument


class Renderer(Protocol):
    def open(self, url: str) -> ContextManager[Document]: ...


class PlaywrightRenderer:
    """Render pages with a fresh Chromium instance per call to :meth:`open`."""

    def __init__(
        self,
        timeout_ms: int | None = None,
        idle_timeout_ms: int | None = None,
        headless: bool | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.render_timeout_ms
        self.idle_timeout_ms = (
            idle_timeout_ms if idle_timeout_ms is not None else settings.network_idle_timeout_ms
        )
        self.headless = headless if headless is not None else settings.headless
        self.user_agent = user_agent if user_agent is not None else settings.user_agent

    @contextmanager
    def open(self, url: str) -> Iterator[Document]:
        """Yield a settled :class:`PageDocument` for *url*.

        Raises:
            RenderFailure: If the browser cannot start, navigation fails, or
                the page does not reach network-idle in time.
        """
        try:
            pw = sync_playwright().start()
        except PlaywrightError as exc:
            raise RenderFailure("Browser engine could not start", str(exc)) from exc

        try:
            try:
                browser = pw.chromium.launch(headless=self.headless)
            except PlaywrightError as exc:
                raise RenderFailure("Browser could not be launched", str(exc)) from exc

            try:
                document = self._load(browser, url)
                yield document
            finally:
                try:
                    browser.close()
                except PlaywrightError as exc:
                    print(f"[RENDER] Browser close failed: {exc}")
        finally:
            pw.stop()

    def _load(self, browser, url: str) -> Document:
        try:
            context = browser.new_context(user_agent=self.user_agent)
            page = context.new_page()
            page.goto(url, timeout=self.timeout_ms)
            print("[RENDER] Page loaded, waiting for network idle …")
            page.wait_for_load_state("networkidle", timeout=self.idle_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise RenderFailure("Timed out loading page", str(exc)) from exc
        except PlaywrightError as exc:
            raise RenderFailure("Page navigation failed", str(exc)) from exc
        return PageDocument(page)
