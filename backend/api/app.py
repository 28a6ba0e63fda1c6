"""FastAPI application factory.

Routers
-------
    /scrape    — render a vehicle's catalog page and describe its products
    /health    — liveness probe

Error handlers
--------------
Hard failures are returned as ``{"error": ..., "details": ...}``:

    MalformedRequest / body validation   → 422
    GenerationError                      → 502
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.errors import GenerationError, MalformedRequest

from backend.api.routers import scrape as scrape_router


def _error_response(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


async def _malformed_request_handler(request: Request, exc: MalformedRequest) -> JSONResponse:
    print(f"[API] Malformed request: {exc}")
    return _error_response(422, exc.message, exc.details)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = ", ".join(
        ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
        for err in exc.errors()
    )
    print(f"[API] Request body rejected: {fields}")
    return _error_response(422, "Invalid request body", f"invalid or missing: {fields}")


async def _generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    print(f"[API] Description generation failed: {exc}")
    return _error_response(502, exc.message, exc.details)


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Catalog Scribe API",
        description=(
            "Renders a vendor catalog page for a vehicle (year / make / model), "
            "extracts product listings and page metadata, and writes a "
            "natural-language description of the matching product line. "
            "Falls back to a clearly-flagged generic description when the "
            "page cannot be scraped."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(MalformedRequest, _malformed_request_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(GenerationError, _generation_error_handler)

    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
