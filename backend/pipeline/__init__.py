"""Pipeline package — orchestrates scrape → describe for one vehicle query."""

from backend.pipeline.runner import run_pipeline, scrape_catalog

__all__ = ["run_pipeline", "scrape_catalog"]
