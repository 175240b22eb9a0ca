from __future__ import annotations

from typing import Callable

from ..types import LLMCallable
from .anthropic import create_anthropic_async_client, create_anthropic_client
from .ollama import create_ollama_async_client, create_ollama_client
from .openai import create_openai_async_client, create_openai_client
from .openrouter import create_openrouter_async_client, create_openrouter_client

_ASYNC_FACTORIES: dict[str, Callable[..., LLMCallable]] = {
    "openai": create_openai_async_client,
    "anthropic": create_anthropic_async_client,
    "ollama": create_ollama_async_client,
    "openrouter": create_openrouter_async_client,
}


_SYNC_FACTORIES: dict[str, Callable[..., LLMCallable]] = {
    "openai": create_openai_client,
    "anthropic": create_anthropic_client,
    "ollama": create_ollama_client,
    "openrouter": create_openrouter_client,
}


def create_client(provider: str, model: str, *, use_async: bool = True, **kwargs) -> LLMCallable | None:
    """Client for ``provider``, or None for ``"none"``/empty.

    Async clients by default. ``use_async=False`` gives blocking ones, which
    ``invoke`` runs in a worker thread.
    """
    provider = (provider or "none").strip().lower()
    if provider == "none":
        return None
    factories = _ASYNC_FACTORIES if use_async else _SYNC_FACTORIES
    factory = factories.get(provider)
    if factory is None:
        raise ValueError(f"unknown LLM provider: {provider!r}")
    if not model:
        raise ValueError(f"a model name is required for provider {provider!r}")
    return factory(model, **kwargs)


__all__ = [
    "create_client",
    "create_openai_client", "create_openai_async_client",
    "create_anthropic_client", "create_anthropic_async_client",
    "create_ollama_client", "create_ollama_async_client",
    "create_openrouter_client", "create_openrouter_async_client",
]
