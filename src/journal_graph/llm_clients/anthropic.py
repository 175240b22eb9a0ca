from __future__ import annotations

from typing import Callable, Coroutine


def _text(resp) -> str:
    return "".join(block.text for block in resp.content if getattr(block, "type", "") == "text")


def create_anthropic_client(model: str, max_tokens: int = 2048, **kwargs) -> Callable[[str], str]:
    from anthropic import Anthropic
    client = Anthropic(**kwargs)

    def call(prompt: str) -> str:
        resp = client.messages.create(
            model=model, max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return _text(resp)

    return call


def create_anthropic_async_client(model: str, max_tokens: int = 2048, **kwargs) -> Callable[[str], Coroutine]:
    from anthropic import AsyncAnthropic
    client = AsyncAnthropic(**kwargs)

    async def call(prompt: str) -> str:
        resp = await client.messages.create(
            model=model, max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return _text(resp)

    return call
