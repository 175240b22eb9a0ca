from __future__ import annotations

import logging
from dataclasses import dataclass

from .storage.sqlite_store import SQLiteStore
from .types import ExtractedRelationship, ExtractionResult

logger = logging.getLogger(__name__)


class LocalIdMap:
    """Per-call translation between extraction-local ids and durable node ids.

    Events and entities live in separate namespaces. Lookups check events
    before entities, so an id used for both resolves to the event.
    """

    def __init__(self) -> None:
        self._events: dict[str, str] = {}
        self._entities: dict[str, str] = {}
        self._reverse: dict[str, str] = {}

    def bind_event(self, local_id: str, durable_id: str) -> None:
        self._events[local_id] = durable_id
        self._reverse[durable_id] = local_id

    def bind_entity(self, local_id: str, durable_id: str) -> None:
        self._entities[local_id] = durable_id
        self._reverse[durable_id] = local_id

    def lookup(self, local_id: str) -> str | None:
        return self._events.get(local_id) or self._entities.get(local_id)

    def resolve(self, local_id: str) -> str:
        """Durable id for ``local_id``, or ``local_id`` itself when unknown."""
        return self.lookup(local_id) or local_id

    def local_for(self, durable_id: str) -> str | None:
        return self._reverse.get(durable_id)

    def __contains__(self, local_id: str) -> bool:
        return self.lookup(local_id) is not None

    def __len__(self) -> int:
        return len(self._events) + len(self._entities)


@dataclass
class PersistSummary:
    entities: int = 0
    events: int = 0
    relationships: int = 0
    unresolved: int = 0


class GraphWriter:
    def __init__(self, storage: SQLiteStore):
        self._storage = storage

    async def persist(self, graph: ExtractionResult, user_id: str, date: str) -> PersistSummary:
        ids = LocalIdMap()
        summary = PersistSummary()

        # Entities first, then events: relationships may point into either space.
        for raw in graph.entities:
            entity = await self._storage.upsert_entity(user_id, raw)
            ids.bind_entity(raw.local_id, entity.node_id)
            summary.entities += 1

        for raw in graph.events:
            event = await self._storage.insert_event(user_id, date, raw)
            if raw.local_id:
                ids.bind_event(raw.local_id, event.node_id)
            summary.events += 1

        for raw in graph.relationships:
            from_id, to_id = ids.resolve(raw.from_id), ids.resolve(raw.to_id)
            for endpoint in (raw.from_id, raw.to_id):
                if endpoint not in ids:
                    logger.debug("Unresolved relationship endpoint %r stored as-is", endpoint)
                    summary.unresolved += 1
            await self._storage.insert_relationship(
                user_id,
                ExtractedRelationship(
                    from_id=from_id,
                    to_id=to_id,
                    relationship_type=raw.relationship_type,
                    strength=raw.strength,
                ),
            )
            summary.relationships += 1

        logger.info(
            "Saved graph for %s on %s: %d entities, %d events, %d relationships (%d unresolved endpoints)",
            user_id, date, summary.entities, summary.events, summary.relationships, summary.unresolved,
        )
        return summary
