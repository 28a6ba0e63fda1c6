"""Catalog URL construction."""

from __future__ import annotations

from backend.config import settings
from backend.scraper.models import Query


def build_catalog_url(query: Query, base_url: str | None = None) -> str:
    """Return the catalog page URL for *query*.

    Values are substituted verbatim; callers are responsible for passing
    URL-safe, already lower-cased segments.
    """
    base = (base_url if base_url is not None else settings.catalog_base_url).rstrip("/")
    return f"{base}/yr-{query.year}/mk-{query.make}/ml-{query.model}/"
