"""Data models for the catalog pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from backend.errors import MalformedRequest

_QUERY_FIELDS = ("year", "make", "model")


@dataclass(frozen=True)
class Query:
    """A vehicle lookup: free-form year, make and model strings."""

    year: str
    make: str
    model: str

    @classmethod
    def from_mapping(cls, data: Any) -> "Query":
        """Build a :class:`Query` from a decoded request body.

        Raises:
            MalformedRequest: If *data* is not a mapping or any of the three
                fields is missing, not a string, or blank.
        """
        if not isinstance(data, Mapping):
            raise MalformedRequest(
                "Request body must be an object",
                f"expected an object with {', '.join(_QUERY_FIELDS)}, "
                f"got {type(data).__name__}",
            )
        missing = [
            name
            for name in _QUERY_FIELDS
            if not isinstance(data.get(name), str) or not data[name].strip()
        ]
        if missing:
            raise MalformedRequest(
                "Missing vehicle fields",
                f"required non-empty string field(s): {', '.join(missing)}",
            )
        return cls(year=data["year"], make=data["make"], model=data["model"])

    @property
    def label(self) -> str:
        return f"{self.year} {self.make} {self.model}"


@dataclass(frozen=True)
class ProductRecord:
    """One product card found on the catalog page."""

    title: str = ""
    price: str = ""
    image_url: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "price": self.price, "imageUrl": self.image_url}


@dataclass(frozen=True)
class PageMetadata:
    """Auxiliary page fields; ``html_length`` is a diagnostic only."""

    title: str = ""
    breadcrumbs: str = ""
    description: str = ""
    html_length: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "breadcrumbs": self.breadcrumbs,
            "description": self.description,
            "htmlLength": self.html_length,
        }


# ---------------------------------------------------------------------------
# Extraction outcome — tagged variant
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractionSuccess:
    products: List[ProductRecord]
    metadata: PageMetadata
    html_preview: str = ""


@dataclass(frozen=True)
class ExtractionFailure:
    cause: str


ExtractionOutcome = Union[ExtractionSuccess, ExtractionFailure]


@dataclass(frozen=True)
class DescriptionRequest:
    """Everything the synthesizer needs to write a description."""

    query: Query
    outcome: ExtractionOutcome


# ---------------------------------------------------------------------------
# Terminal artifact
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """Final result of one pipeline run.

    Build it with :meth:`success` or :meth:`fallback`; the two shapes are
    never mixed.
    """

    description: str
    source_url: str
    products: List[ProductRecord] = field(default_factory=list)
    metadata: Optional[PageMetadata] = None
    degraded: bool = False
    degraded_reason: Optional[str] = None
    html_preview: Optional[str] = None

    @classmethod
    def success(
        cls,
        description: str,
        source_url: str,
        outcome: ExtractionSuccess,
    ) -> "PipelineResult":
        return cls(
            description=description,
            source_url=source_url,
            products=list(outcome.products),
            metadata=outcome.metadata,
            html_preview=outcome.html_preview,
        )

    @classmethod
    def fallback(
        cls,
        description: str,
        source_url: str,
        outcome: ExtractionFailure,
    ) -> "PipelineResult":
        return cls(
            description=description,
            source_url=source_url,
            degraded=True,
            degraded_reason=outcome.cause,
        )

    def to_response(self) -> dict[str, Any]:
        """Serialise to the JSON body returned by ``POST /scrape``."""
        if self.degraded:
            return {
                "description": self.description,
                "scrapingError": True,
                "errorDetails": self.degraded_reason,
                "url": self.source_url,
            }
        return {
            "description": self.description,
            "products": [p.to_dict() for p in self.products],
            "pageInfo": self.metadata.to_dict() if self.metadata else None,
            "url": self.source_url,
            "htmlPreview": self.html_preview,
        }
