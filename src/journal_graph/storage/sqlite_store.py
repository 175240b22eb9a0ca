from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

import aiosqlite

from ..types import (
    Conversation,
    Entity,
    Event,
    ExtractedEntity,
    ExtractedEvent,
    ExtractedRelationship,
    Message,
    Relationship,
    _now,
)

logger = logging.getLogger(__name__)

DEFAULT_DB_DIR = Path.home() / ".journal_graph"

SCHEMA = """
CREATE TABLE IF NOT EXISTS entities (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    local_id TEXT NOT NULL,
    type TEXT NOT NULL,
    name TEXT NOT NULL,
    attributes TEXT NOT NULL DEFAULT '{}',
    created_at TEXT NOT NULL,
    UNIQUE(user_id, local_id)
);
CREATE TABLE IF NOT EXISTS events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    event_date TEXT NOT NULL,
    summary TEXT NOT NULL,
    event_type TEXT NOT NULL DEFAULT 'general',
    domains TEXT NOT NULL DEFAULT '[]',
    emotional_tone TEXT NOT NULL DEFAULT 'neutral',
    importance INTEGER NOT NULL DEFAULT 3,
    related_entities TEXT NOT NULL DEFAULT '[]',
    keywords TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS relationships (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    from_id TEXT NOT NULL,
    to_id TEXT NOT NULL,
    relationship_type TEXT NOT NULL,
    strength INTEGER NOT NULL DEFAULT 3,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS conversations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    mood_label TEXT NOT NULL DEFAULT 'neutral',
    mood_score REAL NOT NULL DEFAULT 0,
    is_ended INTEGER NOT NULL DEFAULT 0,
    started_at TEXT NOT NULL,
    ended_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE(user_id, date)
);
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    conversation_id INTEGER NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
    sender TEXT NOT NULL CHECK(sender IN ('assistant', 'user')),
    content TEXT NOT NULL,
    mood_label TEXT,
    mood_score REAL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_entities_user ON entities(user_id);
CREATE INDEX IF NOT EXISTS idx_events_user ON events(user_id, event_date);
CREATE INDEX IF NOT EXISTS idx_relationships_user ON relationships(user_id);
CREATE INDEX IF NOT EXISTS idx_conversations_user_date ON conversations(user_id, date);
CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id, created_at);
"""

CONVERSATION_SELECT = """
SELECT
    c.*,
    COALESCE(SUM(CASE WHEN m.sender = 'user' THEN 1 ELSE 0 END), 0) AS user_message_count,
    COALESCE(SUM(CASE WHEN m.sender = 'assistant' THEN 1 ELSE 0 END), 0) AS assistant_message_count
FROM conversations c
LEFT JOIN messages m ON m.conversation_id = c.id
"""


def _ts(dt: datetime) -> str:
    return dt.isoformat()


def _parse_ts(s: str) -> datetime:
    dt = datetime.fromisoformat(s)
    return dt.astimezone(timezone.utc) if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _casefold(value: str | None) -> str | None:
    # SQLite lower() only folds ASCII.
    return value.casefold() if isinstance(value, str) else value


def _encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def decode_json(raw: str | None, default: dict | list, column: str = "") -> Any:
    """Tolerant decode for JSON text columns.

    Unparseable text, or JSON whose top-level shape differs from ``default``,
    decodes to a fresh copy of ``default`` instead of raising.
    """
    if raw is None or raw == "":
        return type(default)()
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Unreadable JSON in column %s, using default", column or "?")
        return type(default)()
    if not isinstance(value, type(default)):
        logger.warning("Unexpected JSON shape in column %s, using default", column or "?")
        return type(default)()
    return value


def _row_to_entity(row: aiosqlite.Row) -> Entity:
    return Entity(
        id=row["id"],
        user_id=row["user_id"],
        local_id=row["local_id"],
        type=row["type"],
        name=row["name"],
        attributes=decode_json(row["attributes"], {}, "entities.attributes"),
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_event(row: aiosqlite.Row) -> Event:
    return Event(
        id=row["id"],
        user_id=row["user_id"],
        event_date=row["event_date"],
        summary=row["summary"],
        event_type=row["event_type"],
        domains=decode_json(row["domains"], [], "events.domains"),
        emotional_tone=row["emotional_tone"],
        importance=row["importance"],
        related_entities=decode_json(row["related_entities"], [], "events.related_entities"),
        keywords=decode_json(row["keywords"], [], "events.keywords"),
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_relationship(row: aiosqlite.Row) -> Relationship:
    return Relationship(
        id=row["id"],
        user_id=row["user_id"],
        from_id=row["from_id"],
        to_id=row["to_id"],
        relationship_type=row["relationship_type"],
        strength=row["strength"],
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_conversation(row: aiosqlite.Row) -> Conversation:
    return Conversation(
        id=row["id"],
        user_id=row["user_id"],
        date=row["date"],
        mood_label=row["mood_label"],
        mood_score=float(row["mood_score"] or 0),
        is_ended=bool(row["is_ended"]),
        started_at=_parse_ts(row["started_at"]),
        ended_at=_parse_ts(row["ended_at"]) if row["ended_at"] else None,
        updated_at=_parse_ts(row["updated_at"]),
        user_message_count=int(row["user_message_count"]),
        assistant_message_count=int(row["assistant_message_count"]),
    )


def _row_to_message(row: aiosqlite.Row) -> Message:
    return Message(
        id=row["id"],
        sender=row["sender"],
        content=row["content"],
        mood_label=row["mood_label"],
        mood_score=row["mood_score"],
        created_at=_parse_ts(row["created_at"]),
    )


class SQLiteStore:
    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
            db_path = DEFAULT_DB_DIR / "journal.db"
        self._db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
            self._db.row_factory = aiosqlite.Row
            await self._db.create_function("casefold", 1, _casefold, deterministic=True)
            await self._db.execute("PRAGMA journal_mode=WAL")
            await self._db.execute("PRAGMA foreign_keys=ON")
            await self._db.executescript(SCHEMA)
            await self._db.commit()
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── Entities ──

    async def upsert_entity(self, user_id: str, entity: ExtractedEntity) -> Entity:
        db = await self._conn()
        await db.execute(
            "INSERT INTO entities (user_id, local_id, type, name, attributes, created_at) VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(user_id, local_id) DO UPDATE SET "
            "type = excluded.type, name = excluded.name, attributes = excluded.attributes",
            (user_id, entity.local_id, entity.type, entity.name, _encode(entity.attributes), _ts(_now())),
        )
        await db.commit()
        cur = await db.execute(
            "SELECT * FROM entities WHERE user_id = ? AND local_id = ?",
            (user_id, entity.local_id),
        )
        return _row_to_entity(await cur.fetchone())

    async def get_entities(self, user_id: str) -> list[Entity]:
        db = await self._conn()
        cur = await db.execute("SELECT * FROM entities WHERE user_id = ? ORDER BY id", (user_id,))
        return [_row_to_entity(row) async for row in cur]

    async def count_entities(self, user_id: str) -> int:
        db = await self._conn()
        cur = await db.execute("SELECT COUNT(*) AS n FROM entities WHERE user_id = ?", (user_id,))
        return (await cur.fetchone())["n"]

    async def search_entities_by_name(self, user_id: str, tokens: Iterable[str], limit: int = 10) -> list[Entity]:
        tokens = [t.casefold() for t in tokens if t]
        if not tokens:
            return []
        db = await self._conn()
        clause = " OR ".join("instr(casefold(name), ?) > 0" for _ in tokens)
        cur = await db.execute(
            f"SELECT * FROM entities WHERE user_id = ? AND ({clause}) ORDER BY id LIMIT ?",
            (user_id, *tokens, limit),
        )
        return [_row_to_entity(row) async for row in cur]

    # ── Events ──

    async def insert_event(self, user_id: str, event_date: str, event: ExtractedEvent) -> Event:
        db = await self._conn()
        created_at = _now()
        cur = await db.execute(
            "INSERT INTO events (user_id, event_date, summary, event_type, domains, emotional_tone, importance, related_entities, keywords, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                user_id, event_date, event.summary, event.event_type,
                _encode(event.domains), event.emotional_tone, event.importance,
                _encode(event.related_entities), _encode(event.keywords), _ts(created_at),
            ),
        )
        await db.commit()
        return Event(
            id=cur.lastrowid, user_id=user_id, event_date=event_date,
            summary=event.summary, event_type=event.event_type,
            domains=list(event.domains), emotional_tone=event.emotional_tone,
            importance=event.importance, related_entities=list(event.related_entities),
            keywords=list(event.keywords), created_at=created_at,
        )

    async def get_events(self, user_id: str) -> list[Event]:
        db = await self._conn()
        cur = await db.execute("SELECT * FROM events WHERE user_id = ? ORDER BY id", (user_id,))
        return [_row_to_event(row) async for row in cur]

    async def get_event(self, user_id: str, event_id: int) -> Event | None:
        db = await self._conn()
        cur = await db.execute("SELECT * FROM events WHERE user_id = ? AND id = ?", (user_id, event_id))
        row = await cur.fetchone()
        return _row_to_event(row) if row else None

    async def count_events(self, user_id: str) -> int:
        db = await self._conn()
        cur = await db.execute("SELECT COUNT(*) AS n FROM events WHERE user_id = ?", (user_id,))
        return (await cur.fetchone())["n"]

    async def get_events_mentioning(self, user_id: str, local_id: str, limit: int = 3) -> list[Event]:
        db = await self._conn()
        cur = await db.execute(
            "SELECT * FROM events WHERE user_id = ? AND instr(related_entities, ?) > 0 "
            "ORDER BY event_date DESC, id DESC LIMIT ?",
            (user_id, local_id, limit),
        )
        return [_row_to_event(row) async for row in cur]

    async def delete_event(self, user_id: str, event_id: int) -> int:
        db = await self._conn()
        node_id = f"event:{event_id}"
        cur = await db.execute("DELETE FROM events WHERE user_id = ? AND id = ?", (user_id, event_id))
        deleted = cur.rowcount
        if deleted == 0:
            await db.commit()
            return 0
        cur = await db.execute(
            "DELETE FROM relationships WHERE user_id = ? AND (from_id = ? OR to_id = ?)",
            (user_id, node_id, node_id),
        )
        deleted += cur.rowcount
        await db.commit()
        return deleted

    # ── Relationships ──

    async def insert_relationship(self, user_id: str, rel: ExtractedRelationship) -> Relationship:
        db = await self._conn()
        created_at = _now()
        cur = await db.execute(
            "INSERT INTO relationships (user_id, from_id, to_id, relationship_type, strength, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (user_id, rel.from_id, rel.to_id, rel.relationship_type, rel.strength, _ts(created_at)),
        )
        await db.commit()
        return Relationship(
            id=cur.lastrowid, user_id=user_id, from_id=rel.from_id, to_id=rel.to_id,
            relationship_type=rel.relationship_type, strength=rel.strength, created_at=created_at,
        )

    async def get_relationships(self, user_id: str) -> list[Relationship]:
        db = await self._conn()
        cur = await db.execute("SELECT * FROM relationships WHERE user_id = ? ORDER BY id", (user_id,))
        return [_row_to_relationship(row) async for row in cur]

    async def clear_user(self, user_id: str) -> int:
        db = await self._conn()
        deleted = 0
        for table in ("relationships", "events", "entities"):
            cur = await db.execute(f"DELETE FROM {table} WHERE user_id = ?", (user_id,))
            deleted += cur.rowcount
        await db.commit()
        return deleted

    # ── Conversations ──

    async def ensure_conversation(self, user_id: str, date: str) -> Conversation:
        db = await self._conn()
        now = _ts(_now())
        await db.execute(
            "INSERT INTO conversations (user_id, date, started_at, created_at, updated_at) VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(user_id, date) DO NOTHING",
            (user_id, date, now, now, now),
        )
        await db.commit()
        return await self.get_conversation(user_id, date)

    async def get_conversation(self, user_id: str, date: str) -> Conversation | None:
        db = await self._conn()
        cur = await db.execute(
            CONVERSATION_SELECT + " WHERE c.user_id = ? AND c.date = ? GROUP BY c.id",
            (user_id, date),
        )
        row = await cur.fetchone()
        return _row_to_conversation(row) if row else None

    async def list_conversations(self, user_id: str, limit: int = 30) -> list[Conversation]:
        db = await self._conn()
        cur = await db.execute(
            CONVERSATION_SELECT + " WHERE c.user_id = ? GROUP BY c.id ORDER BY c.date DESC LIMIT ?",
            (user_id, limit),
        )
        return [_row_to_conversation(row) async for row in cur]

    async def insert_message(self, conversation_id: int, message: Message) -> Message:
        db = await self._conn()
        cur = await db.execute(
            "INSERT INTO messages (conversation_id, sender, content, mood_label, mood_score, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (
                conversation_id, message.sender, message.content,
                message.mood_label, message.mood_score, _ts(message.created_at),
            ),
        )
        message.id = cur.lastrowid
        await db.execute(
            "UPDATE conversations SET updated_at = ? WHERE id = ?",
            (_ts(_now()), conversation_id),
        )
        await db.commit()
        return message

    async def get_messages(self, conversation_id: int) -> list[Message]:
        db = await self._conn()
        cur = await db.execute(
            "SELECT * FROM messages WHERE conversation_id = ? ORDER BY id",
            (conversation_id,),
        )
        return [_row_to_message(row) async for row in cur]

    async def update_conversation_mood(self, conversation_id: int, score: float, label: str) -> None:
        db = await self._conn()
        await db.execute(
            "UPDATE conversations SET mood_score = ?, mood_label = ?, updated_at = ? WHERE id = ?",
            (score, label, _ts(_now()), conversation_id),
        )
        await db.commit()

    async def average_user_mood(self, conversation_id: int) -> float:
        db = await self._conn()
        cur = await db.execute(
            "SELECT AVG(mood_score) AS average_score, COUNT(*) AS entries FROM messages "
            "WHERE conversation_id = ? AND sender = 'user' AND mood_score IS NOT NULL",
            (conversation_id,),
        )
        row = await cur.fetchone()
        return float(row["average_score"]) if row["entries"] else 0.0

    async def end_conversation(self, conversation_id: int) -> None:
        db = await self._conn()
        now = _ts(_now())
        await db.execute(
            "UPDATE conversations SET is_ended = 1, ended_at = ?, updated_at = ? WHERE id = ? AND is_ended = 0",
            (now, now, conversation_id),
        )
        await db.commit()
