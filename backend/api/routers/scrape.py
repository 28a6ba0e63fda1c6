"""Scrape-and-describe endpoint.

Routes
------
POST /scrape    Body: {"year": "2022", "make": "honda", "model": "crf-250-r"}

Response shapes
---------------
success   200  {"description", "products", "pageInfo", "url", "htmlPreview"}
degraded  200  {"description", "scrapingError": true, "errorDetails", "url"}
failure   4xx/5xx  {"error", "details"}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from backend.errors import GenerationError
from backend.pipeline.runner import run_pipeline
from backend.scraper.models import Query

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    year: str
    make: str
    model: str

    @field_validator("year", mode="before")
    @classmethod
    def year_as_text(cls, value: Any) -> Any:
        # Forms and scripts often send the year as a JSON number.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post("")
def scrape_endpoint(body: ScrapeRequest) -> Any:
    """Render the catalog page for a vehicle and describe its product line.

    Malformed bodies and description-generation failures are turned into
    ``{"error", "details"}`` responses by the handlers in ``backend.api.app``.
    """
    query = Query.from_mapping(body.model_dump())
    try:
        result = run_pipeline(query)
    except GenerationError:
        raise
    except Exception as exc:
        print(f"[API] Unexpected error for {query.label!r}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Unexpected error while generating the description",
                "details": str(exc),
            },
        )
    return result.to_response()
