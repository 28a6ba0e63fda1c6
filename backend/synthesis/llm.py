"""Chat-model factory for description generation.

Providers
---------
``lmstudio`` (default)
    LM Studio's OpenAI-compatible server at ``LMSTUDIO_BASE_URL``,
    model ``LMSTUDIO_MODEL``.

``ollama``
    Local Ollama, model ``OLLAMA_CHAT_MODEL``.

``openai``
    OpenAI chat API, model ``OPENAI_CHAT_MODEL``.  Requires ``OPENAI_API_KEY``.

Set ``LLM_PROVIDER`` in your ``.env`` to switch providers.
"""

from __future__ import annotations

from typing import Any

from backend.config import settings


def _get_llm() -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model,
            temperature=settings.llm_temperature,
            timeout=settings.synthesis_timeout,
            max_retries=0,
        )

    if settings.llm_provider == "lmstudio":
        from langchain_openai import ChatOpenAI

        # LM Studio ignores the key but the client refuses to start without one.
        return ChatOpenAI(
            model=settings.lmstudio_model,
            base_url=settings.lmstudio_base_url,
            api_key="lm-studio",
            temperature=settings.llm_temperature,
            timeout=settings.synthesis_timeout,
            max_retries=0,
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        temperature=settings.llm_temperature,
        client_kwargs={"timeout": settings.synthesis_timeout},
    )
