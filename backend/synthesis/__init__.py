"""Synthesis package — prompt construction and language-model calls."""

from backend.synthesis.synthesizer import build_prompt, synthesize

__all__ = ["build_prompt", "synthesize"]
