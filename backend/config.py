"""Centralised settings for the catalog description backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    catalog_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "CATALOG_BASE_URL",
            "https://www.pro-x.com/product-category/engine/"
            "pistons-piston-components/piston-kits",
        )
    )

    # ------------------------------------------------------------------
    # Renderer (headless Chromium via Playwright)
    # ------------------------------------------------------------------
    render_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_TIMEOUT", "30.0"))
    )
    network_idle_timeout: float = field(
        default_factory=lambda: float(os.environ.get("NETWORK_IDLE_TIMEOUT", "30.0"))
    )
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", "true"))
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT",
            "Mozilla/5.0 (compatible; CatalogScribe/1.0)",
        )
    )
    html_preview_chars: int = field(
        default_factory=lambda: int(os.environ.get("HTML_PREVIEW_CHARS", "500"))
    )

    # ------------------------------------------------------------------
    # Description model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "lmstudio")
    )
    lmstudio_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "LMSTUDIO_BASE_URL", "http://localhost:1234/v1"
        )
    )
    lmstudio_model: str = field(
        default_factory=lambda: os.environ.get(
            "LMSTUDIO_MODEL", "oh-dcft-v3.1-claude-3-5-sonnet-20241022"
        )
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TEMPERATURE", "0.7"))
    )
    synthesis_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SYNTHESIS_TIMEOUT", "120.0"))
    )

    # ------------------------------------------------------------------
    # Prompt content
    # ------------------------------------------------------------------
    product_line: str = field(
        default_factory=lambda: os.environ.get("PRODUCT_LINE", "Pro-X pistons")
    )
    description_language: str = field(
        default_factory=lambda: os.environ.get("DESCRIPTION_LANGUAGE", "Spanish")
    )

    @property
    def render_timeout_ms(self) -> int:
        """Navigation timeout in the milliseconds Playwright expects."""
        return int(self.render_timeout * 1000)

    @property
    def network_idle_timeout_ms(self) -> int:
        return int(self.network_idle_timeout * 1000)


# Module-level singleton — import this everywhere:
#   from backend.config import settings
settings = Settings()
