from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any

from .types import LLMCallable

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """The text-generation backend is missing, failed, or timed out."""


async def invoke(llm: LLMCallable | None, prompt: str, timeout: float | None = None) -> str:
    if llm is None:
        raise LLMUnavailableError("no text-generation backend configured")
    try:
        if inspect.iscoroutinefunction(llm):
            result = await asyncio.wait_for(llm(prompt), timeout)
        else:
            result = await asyncio.wait_for(asyncio.to_thread(llm, prompt), timeout)
            if inspect.isawaitable(result):
                result = await asyncio.wait_for(result, timeout)
    except asyncio.TimeoutError as exc:
        raise LLMUnavailableError(f"text generation timed out after {timeout}s") from exc
    except Exception as exc:
        raise LLMUnavailableError(f"text generation failed: {exc}") from exc
    if not isinstance(result, str):
        raise LLMUnavailableError(f"text generation returned {type(result).__name__}, expected str")
    return result


def extract_json_object(raw: str) -> Any | None:
    """Parse the span from the first ``{`` to the last ``}`` of ``raw``.

    Returns None when the response holds no object at all. Invalid JSON inside
    the braces raises ``json.JSONDecodeError``.
    """
    start = raw.find("{")
    if start == -1:
        return None
    end = raw.rfind("}")
    if end < start:
        return None
    return json.loads(raw[start:end + 1])
