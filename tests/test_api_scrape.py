"""Tests for the scrape API router.

All tests use the FastAPI TestClient.  The renderer and LLM are mocked so no
browser or model server is required:

* ``backend.pipeline.runner.PlaywrightRenderer`` is patched to build an
  in-memory renderer serving fixed HTML.
* ``backend.synthesis.synthesizer._get_llm`` is patched to return a
  ``MagicMock`` chat model.
"""

from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from backend.api.app import create_app
from backend.errors import RenderFailure
from backend.scraper.document import HtmlDocument
from backend.scraper.models import Query
from backend.scraper.urls import build_catalog_url


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_BODY = {"year": "2022", "make": "honda", "model": "crf-250-r"}

_HTML = """\
<html><body>
  <h1 class="page-title">Piston Kits</h1>
  <div class="product">
    <h2 class="woocommerce-loop-product__title">Piston Kit A</h2>
    <span class="price">$149.95</span>
  </div>
</body></html>
"""


def _renderer_factory(html: str | None = None, error: Exception | None = None):
    class _Renderer:
        @contextmanager
        def open(self, url: str):
            if error is not None:
                raise error
            yield HtmlDocument(html)

    return lambda *args, **kwargs: _Renderer()


def _llm(content: str = "Descripción generada.") -> MagicMock:
    llm = MagicMock()
    llm.invoke.return_value = SimpleNamespace(content=content)
    return llm


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(create_app(), raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestScrapeSuccess:
    def test_returns_products_and_page_info(self, client: TestClient) -> None:
        with patch("backend.pipeline.runner.PlaywrightRenderer", _renderer_factory(_HTML)), \
             patch("backend.synthesis.synthesizer._get_llm", return_value=_llm()):
            resp = client.post("/scrape", json=_BODY)

        assert resp.status_code == 200
        data = resp.json()
        assert data["description"] == "Descripción generada."
        assert data["products"] == [
            {"title": "Piston Kit A", "price": "$149.95", "imageUrl": ""}
        ]
        assert data["pageInfo"]["title"] == "Piston Kits"
        assert data["url"] == build_catalog_url(Query(**_BODY))
        assert data["htmlPreview"].endswith("...")
        assert "scrapingError" not in data

    def test_numeric_year_accepted(self, client: TestClient) -> None:
        body = {"year": 2022, "make": "honda", "model": "crf-250-r"}
        with patch("backend.pipeline.runner.PlaywrightRenderer", _renderer_factory(_HTML)), \
             patch("backend.synthesis.synthesizer._get_llm", return_value=_llm()):
            resp = client.post("/scrape", json=body)

        assert resp.status_code == 200
        assert "/yr-2022/" in resp.json()["url"]

    def test_boolean_year_still_rejected(self, client: TestClient) -> None:
        resp = client.post("/scrape", json={"year": True, "make": "honda", "model": "crf"})
        assert resp.status_code == 422


class TestScrapeDegraded:
    def test_render_failure_returns_generic_description(self, client: TestClient) -> None:
        error = RenderFailure("Timed out loading page", "Timeout 30000ms exceeded.")
        with patch("backend.pipeline.runner.PlaywrightRenderer", _renderer_factory(error=error)), \
             patch("backend.synthesis.synthesizer._get_llm", return_value=_llm("Genérica.")):
            resp = client.post("/scrape", json=_BODY)

        assert resp.status_code == 200
        data = resp.json()
        assert data["scrapingError"] is True
        assert "Timeout 30000ms exceeded." in data["errorDetails"]
        assert data["description"] == "Genérica."
        assert data["url"] == build_catalog_url(Query(**_BODY))
        assert "products" not in data


class TestScrapeHardFailures:
    def test_generation_error_returns_502(self, client: TestClient) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = ConnectionError("LM Studio is not running")
        with patch("backend.pipeline.runner.PlaywrightRenderer", _renderer_factory(_HTML)), \
             patch("backend.synthesis.synthesizer._get_llm", return_value=llm):
            resp = client.post("/scrape", json=_BODY)

        assert resp.status_code == 502
        data = resp.json()
        assert data["error"] == "Description generation failed"
        assert "LM Studio is not running" in data["details"]

    def test_missing_field_returns_422(self, client: TestClient) -> None:
        resp = client.post("/scrape", json={"year": "2022", "make": "honda"})
        assert resp.status_code == 422
        data = resp.json()
        assert data["error"] == "Invalid request body"
        assert "model" in data["details"]

    def test_blank_field_returns_422(self, client: TestClient) -> None:
        resp = client.post("/scrape", json={"year": "2022", "make": " ", "model": "crf"})
        assert resp.status_code == 422
        assert resp.json()["error"] == "Missing vehicle fields"

    def test_unparseable_body_returns_422(self, client: TestClient) -> None:
        resp = client.post(
            "/scrape", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 422
        assert set(resp.json()) == {"error", "details"}

    def test_malformed_request_acquires_no_renderer(self, client: TestClient) -> None:
        with patch("backend.api.routers.scrape.run_pipeline") as pipeline:
            client.post("/scrape", json={"year": "", "make": "honda", "model": "crf"})
        pipeline.assert_not_called()

    def test_unexpected_error_returns_500(self, client: TestClient) -> None:
        with patch(
            "backend.api.routers.scrape.run_pipeline",
            side_effect=RuntimeError("unexpected"),
        ):
            resp = client.post("/scrape", json=_BODY)

        assert resp.status_code == 500
        assert resp.json()["details"] == "unexpected"


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok"}
