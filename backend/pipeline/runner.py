"""High-level runner for the catalog description pipeline.

``run_pipeline`` is the single public function in this module.  It builds
the catalog URL, renders and extracts the page, and hands the resulting
:class:`~backend.scraper.models.ExtractionOutcome` to the synthesizer:

    BUILD_URL -> RENDER -> EXTRACT -> SYNTH            (success)
    BUILD_URL -> RENDER ✗ / EXTRACT ✗ -> SYNTH         (degraded)

Render and extraction errors never escape; they become a degraded result.
A synthesis error on either path propagates as
:class:`~backend.errors.GenerationError`.  An empty catalog page is *not* an
error and takes the success path.
"""

from __future__ import annotations

from typing import Any

from backend.config import settings
from backend.errors import QueryFailure, RenderFailure
from backend.scraper.extractor import extract_metadata, extract_products
from backend.scraper.models import (
    DescriptionRequest,
    ExtractionFailure,
    ExtractionOutcome,
    ExtractionSuccess,
    PipelineResult,
    Query,
)
from backend.scraper.renderer import PlaywrightRenderer, Renderer
from backend.scraper.urls import build_catalog_url
from backend.synthesis.synthesizer import synthesize


def _html_preview(html: str) -> str:
    return html[: settings.html_preview_chars] + "..."


def scrape_catalog(url: str, renderer: Renderer) -> ExtractionOutcome:
    """Render *url* and extract products + metadata.

    The renderer's resources are released when this function returns,
    before any synthesis starts.
    """
    print(f"[RENDER] Loading {url}")
    try:
        with renderer.open(url) as document:
            products = extract_products(document)
            metadata = extract_metadata(document)
            preview = _html_preview(document.html())
    except RenderFailure as exc:
        print(f"[RENDER] ✗ {exc}")
        return ExtractionFailure(cause=str(exc))
    except QueryFailure as exc:
        print(f"[QUERY] ✗ Rendered document could not be queried: {exc}")
        return ExtractionFailure(cause=str(exc))
    except Exception as exc:  # e.g. the Playwright driver failing to spawn
        print(f"[RENDER] ✗ Unexpected {type(exc).__name__}: {exc}")
        return ExtractionFailure(cause=f"{type(exc).__name__}: {exc}")

    print(f"[EXTRACT] {len(products)} product(s) found.")
    print(f"[EXTRACT] Page info: title={metadata.title!r} htmlLength={metadata.html_length}")
    return ExtractionSuccess(products=products, metadata=metadata, html_preview=preview)


def run_pipeline(
    query: Query,
    renderer: Renderer | None = None,
    llm: Any | None = None,
) -> PipelineResult:
    """Produce a description for *query*.

    Args:
        query: Vehicle year / make / model.
        renderer: Page renderer; defaults to a :class:`PlaywrightRenderer`
            configured from ``settings``.
        llm: Chat model passed through to
            :func:`~backend.synthesis.synthesizer.synthesize`.

    Returns:
        A success-shaped or degraded :class:`PipelineResult`.

    Raises:
        GenerationError: If description generation fails on either path.
    """
    url = build_catalog_url(query)
    outcome = scrape_catalog(url, renderer or PlaywrightRenderer())

    if isinstance(outcome, ExtractionFailure):
        print(f"[FALLBACK] Scraping failed for {query.label!r}; using generic description.")

    description = synthesize(DescriptionRequest(query=query, outcome=outcome), llm=llm)

    if isinstance(outcome, ExtractionSuccess):
        print(f"[DONE] Description ready for {query.label!r}.")
        return PipelineResult.success(description, url, outcome)

    print(f"[DONE] Degraded description ready for {query.label!r}.")
    return PipelineResult.fallback(description, url, outcome)
