"""Catalog Scribe CLI — entry-point for all backend operations.

Usage:
    python cli/main.py --help

Commands:
    url       → print the catalog URL for a vehicle
    describe  → render, extract and describe (full pipeline)
    extract   → run the extractors over a saved HTML file
    serve     → run the HTTP API under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json

import typer

from backend.errors import GenerationError, MalformedRequest
from backend.scraper.models import Query

app = typer.Typer(
    name="catalog",
    help="Catalog Scribe backend CLI.",
    no_args_is_help=True,
)


def _query(year: str, make: str, model: str) -> Query:
    try:
        return Query.from_mapping({"year": year, "make": make, "model": model})
    except MalformedRequest as exc:
        typer.echo(f"[error] {exc}", err=True)
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# url
# ---------------------------------------------------------------------------
@app.command("url")
def url_cmd(
    year: str = typer.Argument(..., help="Model year, e.g. 2022."),
    make: str = typer.Argument(..., help="Make slug, e.g. honda."),
    model: str = typer.Argument(..., help="Model slug, e.g. crf-250-r."),
) -> None:
    """Print the catalog URL that would be scraped for a vehicle."""
    from backend.scraper.urls import build_catalog_url

    typer.echo(build_catalog_url(_query(year, make, model)))


# ---------------------------------------------------------------------------
# describe
# ---------------------------------------------------------------------------
@app.command("describe")
def describe_cmd(
    year: str = typer.Argument(..., help="Model year, e.g. 2022."),
    make: str = typer.Argument(..., help="Make slug, e.g. honda."),
    model: str = typer.Argument(..., help="Model slug, e.g. crf-250-r."),
    as_json: bool = typer.Option(False, "--json", help="Print the API response body as JSON."),
) -> None:
    """Scrape the catalog page for a vehicle and generate a description."""
    from backend.pipeline.runner import run_pipeline

    query = _query(year, make, model)
    try:
        result = run_pipeline(query)
    except GenerationError as exc:
        typer.echo(f"[describe] ✗ {exc}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_response(), indent=2, ensure_ascii=False))
        return

    typer.echo(f"[describe] URL      : {result.source_url}")
    if result.degraded:
        typer.echo(f"[describe] Degraded : {result.degraded_reason}")
    else:
        typer.echo(f"[describe] Products : {len(result.products)}")
        for p in result.products:
            typer.echo(f"  - {p.title or '(untitled)'}  {p.price or '(no price)'}")
    typer.echo("")
    typer.echo(result.description)


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------
@app.command("extract")
def extract_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved HTML file."),
) -> None:
    """Run the product and metadata extractors over a saved catalog page."""
    from backend.errors import QueryFailure
    from backend.scraper.document import HtmlDocument
    from backend.scraper.extractor import extract_metadata, extract_products

    html = path.read_text(encoding="utf-8", errors="replace")
    try:
        document = HtmlDocument(html)
        products = extract_products(document)
        metadata = extract_metadata(document)
    except QueryFailure as exc:
        typer.echo(f"[extract] ✗ {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(
        json.dumps(
            {"products": [p.to_dict() for p in products], "pageInfo": metadata.to_dict()},
            indent=2,
            ensure_ascii=False,
        )
    )


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------
@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    typer.echo(f"[serve] Listening on http://{host}:{port}")
    uvicorn.run("backend.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
