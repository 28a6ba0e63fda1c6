"""Scraper package — catalog URL, page rendering & structured extraction."""

from backend.scraper.document import Document, HtmlDocument, PageDocument
from backend.scraper.extractor import PRODUCT_TIERS, extract_metadata, extract_products
from backend.scraper.models import PageMetadata, ProductRecord, Query
from backend.scraper.renderer import PlaywrightRenderer
from backend.scraper.urls import build_catalog_url

__all__ = [
    "build_catalog_url",
    "extract_products",
    "extract_metadata",
    "PRODUCT_TIERS",
    "PlaywrightRenderer",
    "Document",
    "HtmlDocument",
    "PageDocument",
    "Query",
    "ProductRecord",
    "PageMetadata",
]
