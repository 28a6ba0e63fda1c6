"""Exception taxonomy for the description pipeline.

``RenderFailure`` and ``QueryFailure`` are recovered inside the pipeline and
turned into a degraded result.  ``GenerationError`` and ``MalformedRequest``
are hard failures that reach the caller.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for every error raised by the pipeline.

    ``message`` is the human-readable summary; ``details`` carries the raw
    underlying error text for diagnosis.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message

    def __str__(self) -> str:
        if self.details and self.details != self.message:
            return f"{self.message}: {self.details}"
        return self.message


class RenderFailure(PipelineError):
    """Navigation, timeout or browser-engine error while loading the page."""


class QueryFailure(PipelineError):
    """The rendered document could not be queried at all."""


class GenerationError(PipelineError):
    """The language model failed, timed out, or returned empty content."""


class MalformedRequest(PipelineError):
    """The incoming query could not be parsed into year / make / model."""
