from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from typing import Literal, Sequence

from .extractor import render_transcript
from .llm import LLMUnavailableError, invoke
from .prompts import COMPANION_REPLY, FALLBACK_REPLIES, WRAP_UP_OFFER, WRAP_UP_REPLY
from .types import LLMCallable, Message

logger = logging.getLogger(__name__)

WRAP_UP_PATTERN = re.compile(r"\b(bye|good night|end|wrap up|done for today|stop)\b")
WRAP_UP_AFTER_MESSAGES = 4
HISTORY_WINDOW = 12


@dataclass
class CompanionReply:
    reply: str
    prompt_to_end: bool = False
    source: Literal["llm", "template", "wrap_up"] = "template"


class Companion:
    """Replies to journal messages, falling back to canned templates when the LLM is unavailable."""

    def __init__(self, llm: LLMCallable | None = None, timeout: float | None = 30.0, rng: random.Random | None = None):
        self._llm = llm
        self._timeout = timeout
        self._rng = rng or random.Random()

    async def reply(
        self,
        user_name: str,
        text: str,
        mood_label: str,
        user_message_count: int,
        history: Sequence[Message] = (),
        context: str = "",
    ) -> CompanionReply:
        if WRAP_UP_PATTERN.search(text.lower()):
            return CompanionReply(reply=WRAP_UP_REPLY, prompt_to_end=True, source="wrap_up")

        result = await self._generate(user_name, mood_label, history, context)
        if user_message_count >= WRAP_UP_AFTER_MESSAGES:
            result.reply = f"{result.reply} {WRAP_UP_OFFER}"
            result.prompt_to_end = True
        return result

    async def _generate(self, user_name: str, mood_label: str, history: Sequence[Message], context: str) -> CompanionReply:
        if self._llm is not None:
            prompt = COMPANION_REPLY.format(
                user_name=user_name,
                mood_label=mood_label,
                context=context or "(nothing yet)",
                history=render_transcript(list(history)[-HISTORY_WINDOW:]),
            )
            try:
                text = (await invoke(self._llm, prompt, timeout=self._timeout)).strip()
                if text:
                    return CompanionReply(reply=text, source="llm")
            except LLMUnavailableError as exc:
                logger.warning("Companion reply fell back to template: %s", exc)
        return CompanionReply(reply=self.template_reply(user_name, mood_label), source="template")

    def template_reply(self, user_name: str, mood_label: str) -> str:
        options = FALLBACK_REPLIES.get(mood_label, FALLBACK_REPLIES["neutral"])
        return self._rng.choice(options).format(user_name=user_name)
