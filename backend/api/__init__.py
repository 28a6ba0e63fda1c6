"""FastAPI HTTP layer for the catalog description pipeline.

    uvicorn backend.api:app --reload
"""

from backend.api.app import app

__all__ = ["app"]
