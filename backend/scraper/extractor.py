"""Product and metadata extraction from a rendered catalog document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from backend.errors import QueryFailure
from backend.scraper.document import Document, Element
from backend.scraper.models import PageMetadata, ProductRecord


# ---------------------------------------------------------------------------
# Selector tiers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SelectorTier:
    """One strategy for locating product cards and their sub-fields."""

    name: str
    container: str
    title: str
    price: str
    image: str


# Tried in order; the first tier that matches any container wins.
PRODUCT_TIERS: Tuple[SelectorTier, ...] = (
    SelectorTier(
        name="primary",
        container=".product",
        title=".woocommerce-loop-product__title",
        price=".price",
        image="img",
    ),
    SelectorTier(
        name="secondary",
        container=".products .product, ul.products li",
        title="h2, .woocommerce-loop-product__title",
        price=".price, .amount",
        image="img",
    ),
)

_DESCRIPTION_SELECTOR = ".term-description"
_BREADCRUMB_SELECTOR = ".woocommerce-breadcrumb"
_TITLE_SELECTOR = "h1.page-title"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _require_document(document: Optional[Document]) -> Document:
    if document is None:
        raise QueryFailure("Document was never rendered", "no document to query")
    return document


def _first_text(root: Element | Document, selector: str) -> str:
    """Return the stripped text of the first match of *selector*, or ``""``."""
    matches = root.query_all(selector)
    return matches[0].text() if matches else ""


def _record_from(element: Element, tier: SelectorTier) -> ProductRecord:
    title_el = element.query(tier.title)
    price_el = element.query(tier.price)
    image_el = element.query(tier.image)
    return ProductRecord(
        title=title_el.text() if title_el is not None else "",
        price=price_el.text() if price_el is not None else "",
        image_url=(image_el.attribute("src") or "") if image_el is not None else "",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def match_tier(
    document: Document,
    tiers: Tuple[SelectorTier, ...] = PRODUCT_TIERS,
) -> Tuple[Optional[SelectorTier], List[Element]]:
    """Return the first tier with at least one container match and its matches.

    Returns ``(None, [])`` when no tier matches anything.
    """
    document = _require_document(document)
    for tier in tiers:
        containers = document.query_all(tier.container)
        if containers:
            return tier, containers
    return None, []


def extract_products(
    document: Document,
    tiers: Tuple[SelectorTier, ...] = PRODUCT_TIERS,
) -> List[ProductRecord]:
    """Extract product records from *document* in document order.

    An empty list is a valid outcome (empty catalog page).  Each record's
    fields default to ``""`` independently when their selector has no match.

    Raises:
        QueryFailure: If the document cannot be queried at all.
    """
    tier, containers = match_tier(document, tiers)
    if tier is None:
        return []
    return [_record_from(element, tier) for element in containers]


def extract_metadata(document: Document) -> PageMetadata:
    """Extract title, breadcrumbs, description and markup size from *document*.

    Raises:
        QueryFailure: If the document cannot be queried at all.
    """
    document = _require_document(document)
    return PageMetadata(
        title=_first_text(document, _TITLE_SELECTOR),
        breadcrumbs=_first_text(document, _BREADCRUMB_SELECTOR),
        description=_first_text(document, _DESCRIPTION_SELECTOR),
        html_length=len(document.html()),
    )
