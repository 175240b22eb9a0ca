from __future__ import annotations

import logging

from .storage.sqlite_store import SQLiteStore

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 4
MAX_ENTITIES = 10
EVENTS_PER_ENTITY = 3


def query_tokens(text: str) -> list[str]:
    return [t.casefold() for t in text.split() if len(t) >= MIN_TOKEN_LENGTH]


class ContextRetriever:
    """Builds a short digest of past events tied to entities named in some text."""

    def __init__(self, storage: SQLiteStore):
        self._storage = storage

    async def relevant_context(self, user_id: str, query: str) -> str:
        tokens = query_tokens(query)
        if not tokens:
            return ""

        entities = await self._storage.search_entities_by_name(user_id, tokens, limit=MAX_ENTITIES)
        lines: list[str] = []
        for entity in entities:
            # Loose match: local id as a substring of the stored related_entities list.
            events = await self._storage.get_events_mentioning(user_id, entity.local_id, limit=EVENTS_PER_ENTITY)
            if not events:
                continue
            lines.append(f"{entity.name} ({entity.type}):")
            lines.extend(f"  - {e.summary} ({e.event_date})" for e in events)

        logger.debug("Context for %r: %d entities matched, %d lines", query, len(entities), len(lines))
        return "\n".join(lines)
