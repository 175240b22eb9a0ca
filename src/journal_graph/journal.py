from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import date as Date
from datetime import datetime
from pathlib import Path

from .companion import Companion, CompanionReply
from .config import JournalConfig, normalize_check_in_time, normalize_user_name
from .context import ContextRetriever
from .dashboard import Dashboard, build_dashboard, clamp_days, normalize_date
from .extractor import EventExtractor
from .graph_assembler import GraphAssembler
from .graph_writer import GraphWriter, PersistSummary
from .llm import LLMUnavailableError
from .llm_clients import create_client
from .mood import analyze_mood, mood_label_from_score
from .storage.sqlite_store import SQLiteStore
from .types import Conversation, LLMCallable, LifeGraph, Message

logger = logging.getLogger(__name__)

MIN_TRANSCRIPT_MESSAGES = 2


class ConversationClosedError(RuntimeError):
    """Raised when writing to a day whose conversation was already ended."""


@dataclass
class DayView:
    conversation: Conversation
    messages: list[Message] = field(default_factory=list)


@dataclass
class ChatTurn:
    conversation: Conversation
    messages: list[Message]
    reply: CompanionReply


@dataclass
class DayClosure:
    conversation: Conversation
    messages: list[Message]
    extracted: PersistSummary | None = None
    extraction_error: str | None = None


class Journal:
    def __init__(
        self,
        user_id: str,
        llm: LLMCallable | None = None,
        db_path: str | Path | None = None,
        *,
        user_name: str | None = None,
        check_in_time: str | None = None,
        llm_timeout: float | None = 30.0,
    ):
        self.user_id = (str(user_id or "").strip() or "default-user")[:64]
        self.user_name = normalize_user_name(user_name)
        self.check_in_time = normalize_check_in_time(check_in_time)

        self._storage = SQLiteStore(db_path)
        self._extractor = EventExtractor(llm, timeout=llm_timeout)
        self._writer = GraphWriter(self._storage)
        self._assembler = GraphAssembler(self._storage)
        self._context = ContextRetriever(self._storage)
        self._companion = Companion(llm, timeout=llm_timeout)

    @classmethod
    def from_config(cls, user_id: str, config: JournalConfig) -> "Journal":
        llm = create_client(config.llm_provider, config.llm_model)
        return cls(
            user_id,
            llm,
            config.db_path,
            user_name=config.user_name,
            check_in_time=config.check_in_time,
            llm_timeout=config.llm_timeout,
        )

    # ── Daily conversation ──

    async def open_day(self, date: str | None = None, *, force_prompt: bool = False, now: datetime | None = None) -> DayView:
        now = now or datetime.now()
        day = normalize_date(date, now.date())
        conv = await self._storage.ensure_conversation(self.user_id, day)
        empty = conv.user_message_count + conv.assistant_message_count == 0
        if empty and not conv.is_ended:
            due = day == now.date().isoformat() and self._check_in_due(now)
            if force_prompt or due:
                await self._storage.insert_message(
                    conv.id, Message(sender="assistant", content=f"Hi {self.user_name}, how was your day?")
                )
        return await self._view(day)

    async def send_message(self, text: str, date: str | None = None) -> ChatTurn:
        text = str(text or "").strip()
        if not text:
            raise ValueError("message text is required")
        day = normalize_date(date)
        conv = await self._storage.ensure_conversation(self.user_id, day)
        if conv.is_ended:
            raise ConversationClosedError(f"the conversation for {day} was already closed")

        mood = analyze_mood(text)
        await self._storage.insert_message(
            conv.id, Message(sender="user", content=text, mood_label=mood.label, mood_score=mood.score)
        )
        average = await self._storage.average_user_mood(conv.id)
        await self._storage.update_conversation_mood(conv.id, average, mood_label_from_score(average))

        conv = await self._storage.get_conversation(self.user_id, day)
        history = await self._storage.get_messages(conv.id)
        context = await self._context.relevant_context(self.user_id, text)
        reply = await self._companion.reply(
            self.user_name, text, mood.label, conv.user_message_count, history, context,
        )
        await self._storage.insert_message(conv.id, Message(sender="assistant", content=reply.reply))

        view = await self._view(day)
        return ChatTurn(conversation=view.conversation, messages=view.messages, reply=reply)

    async def end_day(self, date: str | None = None) -> DayClosure:
        day = normalize_date(date)
        conv = await self._storage.ensure_conversation(self.user_id, day)
        if conv.is_ended:
            view = await self._view(day)
            return DayClosure(conversation=view.conversation, messages=view.messages)

        await self._storage.end_conversation(conv.id)
        transcript = await self._storage.get_messages(conv.id)
        closure = DayClosure(conversation=conv, messages=transcript)

        if len(transcript) >= MIN_TRANSCRIPT_MESSAGES:
            try:
                graph = await self._extractor.extract(transcript)
            except (LLMUnavailableError, json.JSONDecodeError) as exc:
                logger.warning("Life graph extraction failed for %s on %s: %s", self.user_id, day, exc)
                closure.extraction_error = str(exc)
            else:
                closure.extracted = await self._writer.persist(graph, self.user_id, day)
        else:
            logger.info("Skipping extraction for %s on %s: transcript too short", self.user_id, day)

        await self._storage.insert_message(
            conv.id,
            Message(
                sender="assistant",
                content=f"Nice work checking in today, {self.user_name}. I'll ask again at {self.check_in_time} tomorrow.",
            ),
        )
        view = await self._view(day)
        closure.conversation, closure.messages = view.conversation, view.messages
        return closure

    # ── Life graph ──

    async def graph(self) -> LifeGraph:
        return await self._assembler.assemble(self.user_id)

    async def delete_event(self, event_id: int) -> int:
        return await self._storage.delete_event(self.user_id, int(event_id))

    async def clear_graph(self) -> int:
        deleted = await self._storage.clear_user(self.user_id)
        logger.info("Cleared %d life graph rows for %s", deleted, self.user_id)
        return deleted

    async def relevant_context(self, query: str) -> str:
        return await self._context.relevant_context(self.user_id, query)

    # ── Dashboard ──

    async def dashboard(self, days: int | str | None = None, today: Date | None = None) -> Dashboard:
        limit = clamp_days(days)
        conversations = await self._storage.list_conversations(self.user_id, limit)
        return build_dashboard(conversations, today)

    async def close(self) -> None:
        await self._storage.close()

    async def _view(self, day: str) -> DayView:
        conv = await self._storage.get_conversation(self.user_id, day)
        return DayView(conversation=conv, messages=await self._storage.get_messages(conv.id))

    def _check_in_due(self, now: datetime) -> bool:
        hour, minute = (int(part) for part in self.check_in_time.split(":"))
        return now.hour * 60 + now.minute >= hour * 60 + minute

    # ── Sync wrappers ──

    def send_message_sync(self, text: str, date: str | None = None) -> ChatTurn:
        return asyncio.run(self.send_message(text, date))

    def end_day_sync(self, date: str | None = None) -> DayClosure:
        return asyncio.run(self.end_day(date))

    def graph_sync(self) -> LifeGraph:
        return asyncio.run(self.graph())

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
