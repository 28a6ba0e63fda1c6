"""Tests for the Playwright renderer adapter and the page-backed document.

Mocking strategy:
- ``backend.scraper.renderer.sync_playwright`` is patched with a
  ``MagicMock`` tree (playwright → chromium → browser → context → page), so
  no browser install is required.  Error paths use Playwright's real
  ``Error`` / ``TimeoutError`` classes.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from backend.errors import QueryFailure, RenderFailure
from backend.scraper.document import PageDocument
from backend.scraper.extractor import extract_products
from backend.scraper.renderer import PlaywrightRenderer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fake_playwright():
    """Return ``(sync_playwright_factory, pw, browser, page)`` mocks."""
    page = MagicMock(name="page")
    context = MagicMock(name="context")
    context.new_page.return_value = page
    browser = MagicMock(name="browser")
    browser.new_context.return_value = context
    pw = MagicMock(name="playwright")
    pw.chromium.launch.return_value = browser
    factory = MagicMock(name="sync_playwright")
    factory.return_value.start.return_value = pw
    return factory, pw, browser, page


def _renderer() -> PlaywrightRenderer:
    return PlaywrightRenderer(timeout_ms=1000, idle_timeout_ms=500, headless=True, user_agent="ua")


# ---------------------------------------------------------------------------
# PlaywrightRenderer.open
# ---------------------------------------------------------------------------

class TestPlaywrightRenderer:
    def test_yields_page_document_and_closes_once(self) -> None:
        factory, pw, browser, page = _fake_playwright()
        with patch("backend.scraper.renderer.sync_playwright", factory):
            with _renderer().open("https://shop.test/x/") as doc:
                assert isinstance(doc, PageDocument)

        page.goto.assert_called_once_with("https://shop.test/x/", timeout=1000)
        page.wait_for_load_state.assert_called_once_with("networkidle", timeout=500)
        pw.chromium.launch.assert_called_once_with(headless=True)
        browser.new_context.assert_called_once_with(user_agent="ua")
        browser.close.assert_called_once()
        pw.stop.assert_called_once()

    def test_navigation_timeout_raises_render_failure(self) -> None:
        factory, pw, browser, page = _fake_playwright()
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 1000ms exceeded.")
        with patch("backend.scraper.renderer.sync_playwright", factory):
            with pytest.raises(RenderFailure) as info:
                with _renderer().open("https://shop.test/x/"):
                    pytest.fail("body must not run when navigation fails")

        assert "timeout" in str(info.value).lower()
        browser.close.assert_called_once()
        pw.stop.assert_called_once()

    def test_network_idle_timeout_raises_render_failure(self) -> None:
        factory, pw, browser, page = _fake_playwright()
        page.wait_for_load_state.side_effect = PlaywrightTimeoutError("Timeout 500ms exceeded.")
        with patch("backend.scraper.renderer.sync_playwright", factory):
            with pytest.raises(RenderFailure):
                with _renderer().open("https://shop.test/x/"):
                    pass
        browser.close.assert_called_once()

    def test_navigation_error_raises_render_failure(self) -> None:
        factory, pw, browser, page = _fake_playwright()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        with patch("backend.scraper.renderer.sync_playwright", factory):
            with pytest.raises(RenderFailure) as info:
                with _renderer().open("https://nowhere.test/"):
                    pass
        assert "ERR_NAME_NOT_RESOLVED" in info.value.details
        browser.close.assert_called_once()

    def test_launch_failure_raises_render_failure(self) -> None:
        factory, pw, browser, page = _fake_playwright()
        pw.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
        with patch("backend.scraper.renderer.sync_playwright", factory):
            with pytest.raises(RenderFailure):
                with _renderer().open("https://shop.test/x/"):
                    pass
        browser.close.assert_not_called()
        pw.stop.assert_called_once()

    def test_error_inside_block_still_closes_once(self) -> None:
        factory, pw, browser, page = _fake_playwright()
        with patch("backend.scraper.renderer.sync_playwright", factory):
            with pytest.raises(QueryFailure):
                with _renderer().open("https://shop.test/x/"):
                    raise QueryFailure("boom")
        browser.close.assert_called_once()
        pw.stop.assert_called_once()


# ---------------------------------------------------------------------------
# PageDocument
# ---------------------------------------------------------------------------

def _handle(text=None, attrs=None, children=None):
    handle = MagicMock()
    handle.text_content.return_value = text
    handle.get_attribute.side_effect = lambda name: (attrs or {}).get(name)
    children = children or {}
    handle.query_selector_all.side_effect = lambda sel: children.get(sel, [])
    handle.query_selector.side_effect = lambda sel: (children.get(sel) or [None])[0]
    return handle


class TestPageDocument:
    def test_extracts_products_through_handles(self) -> None:
        card = _handle(
            children={
                ".woocommerce-loop-product__title": [_handle(text="  Piston Kit A \n")],
                ".price": [_handle(text="$99")],
                "img": [_handle(attrs={"src": "a.jpg"})],
            }
        )
        page = MagicMock()
        page.query_selector_all.side_effect = lambda sel: [card] if sel == ".product" else []

        products = extract_products(PageDocument(page))

        assert len(products) == 1
        assert products[0].title == "Piston Kit A"
        assert products[0].price == "$99"
        assert products[0].image_url == "a.jpg"

    def test_closed_page_raises_query_failure(self) -> None:
        page = MagicMock()
        page.query_selector_all.side_effect = PlaywrightError("Target page has been closed")
        with pytest.raises(QueryFailure):
            PageDocument(page).query_all(".product")

    def test_html_uses_page_content(self) -> None:
        page = MagicMock()
        page.content.return_value = "<html></html>"
        assert PageDocument(page).html() == "<html></html>"
