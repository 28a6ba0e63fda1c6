"""Description synthesis from an extraction outcome.

``synthesize`` is the single entry point for both pipeline paths.  The
:class:`~backend.scraper.models.ExtractionOutcome` tag only decides which
prompt is built; both prompts go through the same model call, which is
attempted once and bounded by ``settings.synthesis_timeout``.
"""

from __future__ import annotations

import json
import threading
from typing import Any

from backend.config import settings
from backend.errors import GenerationError
from backend.scraper.models import (
    DescriptionRequest,
    ExtractionFailure,
    ExtractionSuccess,
    Query,
)
from backend.synthesis.llm import _get_llm


# ---------------------------------------------------------------------------
# Prompt construction
# ---------------------------------------------------------------------------

def _base_prompt(query: Query) -> str:
    product_line = settings.product_line
    return (
        f"Write a detailed description in {settings.description_language} of "
        f"{product_line} for a {query.make} {query.model} motorcycle, "
        f"model year {query.year}.\n\n"
        "The description must include:\n"
        f"1. Main features of the {product_line}\n"
        "2. Compatibility with this specific model\n"
        f"3. Advantages of using {product_line}\n"
        "4. General installation recommendations"
    )


def build_prompt(request: DescriptionRequest) -> str:
    """Return the prompt text for *request*.

    A successful extraction grounds the prompt in the page text and the
    product list; a failed one asks for a generic description instead.
    """
    base = _base_prompt(request.query)
    outcome = request.outcome

    if isinstance(outcome, ExtractionSuccess):
        page_text = outcome.metadata.description or outcome.metadata.title or "Not available"
        products = json.dumps([p.to_dict() for p in outcome.products], ensure_ascii=False)
        return (
            f"{base}\n\n"
            f"Page information: {page_text}\n\n"
            f"Products found: {products}"
        )

    if isinstance(outcome, ExtractionFailure):
        return (
            f"{base}\n\n"
            "Note: this is a generic description because no product-specific "
            "information could be retrieved. Keep the content plausible for "
            "this vehicle without inventing part numbers or prices."
        )

    raise TypeError(f"Unknown extraction outcome: {type(outcome).__name__}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _content_text(response: Any) -> str:
    """Flatten a chat response to plain text.

    ``AIMessage.content`` is either a string or a list of content blocks;
    only the text blocks are kept.
    """
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)


def _invoke(llm: Any, prompt: str, timeout: float) -> str:
    # Daemon worker: a model that never answers must not keep the process alive.
    outcome: dict[str, Any] = {}

    def _call() -> None:
        try:
            outcome["response"] = llm.invoke(prompt)
        except Exception as exc:  # provider clients raise their own error types
            outcome["error"] = exc

    worker = threading.Thread(target=_call, name="synthesis", daemon=True)
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        raise GenerationError(
            "Description generation timed out",
            f"no response from the language model within {timeout:g}s",
        )
    if "error" in outcome:
        exc = outcome["error"]
        raise GenerationError("Description generation failed", str(exc)) from exc
    return _content_text(outcome["response"])


def synthesize(
    request: DescriptionRequest,
    llm: Any | None = None,
    timeout: float | None = None,
) -> str:
    """Generate a description for *request*.

    Args:
        request: Vehicle query plus the extraction outcome.
        llm: Chat model exposing ``invoke(prompt)``.  Defaults to the
            provider configured in ``settings``.
        timeout: Seconds to wait for the model.  Defaults to
            ``settings.synthesis_timeout``.

    Raises:
        GenerationError: If the model is unreachable, times out, or returns
            no content.  There is no retry.
    """
    is_fallback = isinstance(request.outcome, ExtractionFailure)
    prompt = build_prompt(request)

    print(
        "[SYNTH] Generating generic fallback description …"
        if is_fallback
        else "[SYNTH] Generating grounded description …"
    )
    if llm is None:
        try:
            llm = _get_llm()
        except Exception as exc:  # missing provider package or credentials
            raise GenerationError("Language model unavailable", str(exc)) from exc

    text = _invoke(llm, prompt, settings.synthesis_timeout if timeout is None else timeout)
    if not text.strip():
        raise GenerationError(
            "Description generation failed", "the language model returned no content"
        )

    print(f"[SYNTH] Description written ({len(text)} chars).")
    return text
