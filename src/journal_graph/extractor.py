from __future__ import annotations

import logging
from typing import Any, Sequence

from .llm import extract_json_object, invoke
from .prompts import EXTRACT_LIFE_GRAPH
from .taxonomy import DOMAINS, canonical_domain
from .types import (
    DEFAULT_DOMAIN,
    DEFAULT_ENTITY_TYPE,
    DEFAULT_EVENT_TYPE,
    DEFAULT_IMPORTANCE,
    DEFAULT_STRENGTH,
    DEFAULT_TONE,
    EMOTIONAL_TONES,
    ENTITY_TYPES,
    EVENT_TYPES,
    ExtractedEntity,
    ExtractedEvent,
    ExtractedRelationship,
    ExtractionResult,
    LLMCallable,
    Message,
)

logger = logging.getLogger(__name__)


def render_transcript(messages: Sequence[Message]) -> str:
    return "\n".join(
        f"{'User' if m.sender == 'user' else 'Assistant'}: {m.content}" for m in messages
    )


def _clamp_rating(value: Any, default: int) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return max(1, min(5, rating))


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


class EventExtractor:
    """Turns one closed day's transcript into entities, events and relationships.

    Ids in the result are the ones chosen by the model and only mean anything
    within a single result; ``GraphWriter`` translates them to durable ids.
    """

    def __init__(self, llm: LLMCallable | None, timeout: float | None = 30.0):
        self._llm = llm
        self._timeout = timeout

    def build_prompt(self, messages: Sequence[Message]) -> str:
        return EXTRACT_LIFE_GRAPH.format(
            entity_types=", ".join(ENTITY_TYPES),
            event_types=", ".join(EVENT_TYPES),
            domains=", ".join(DOMAINS),
            tones=", ".join(EMOTIONAL_TONES),
            transcript=render_transcript(messages),
        )

    async def extract(self, messages: Sequence[Message]) -> ExtractionResult:
        raw = await invoke(self._llm, self.build_prompt(messages), timeout=self._timeout)
        payload = extract_json_object(raw)
        if payload is None:
            logger.info("Extraction response held no JSON object; nothing extracted")
            return ExtractionResult()
        result = self.parse(payload)
        logger.info(
            "Extracted %d entities, %d events, %d relationships",
            len(result.entities), len(result.events), len(result.relationships),
        )
        return result

    def parse(self, payload: Any) -> ExtractionResult:
        if not isinstance(payload, dict):
            return ExtractionResult()
        return ExtractionResult(
            entities=[e for e in map(self._entity, self._records(payload, "entities")) if e],
            events=[e for e in map(self._event, self._records(payload, "events")) if e],
            relationships=[r for r in map(self._relationship, self._records(payload, "relationships")) if r],
        )

    @staticmethod
    def _records(payload: dict, key: str) -> list[dict]:
        records = payload.get(key)
        if not isinstance(records, list):
            return []
        dropped = [r for r in records if not isinstance(r, dict)]
        if dropped:
            logger.warning("Dropping %d non-object %s records", len(dropped), key)
        return [r for r in records if isinstance(r, dict)]

    @staticmethod
    def _entity(raw: dict) -> ExtractedEntity | None:
        local_id, name = _text(raw.get("id")), _text(raw.get("name"))
        if not local_id or not name:
            logger.debug("Dropping entity without id or name: %r", raw)
            return None
        entity_type = _text(raw.get("type")).lower()
        attributes = raw.get("attributes")
        return ExtractedEntity(
            local_id=local_id,
            type=entity_type if entity_type in ENTITY_TYPES else DEFAULT_ENTITY_TYPE,
            name=name,
            attributes=attributes if isinstance(attributes, dict) else {},
        )

    @staticmethod
    def _event(raw: dict) -> ExtractedEvent | None:
        summary = _text(raw.get("summary"))
        if not summary:
            logger.debug("Dropping event without summary: %r", raw)
            return None
        domains: list[str] = []
        for name in _str_list(raw.get("domains")):
            domain = canonical_domain(name)
            if domain and domain not in domains:
                domains.append(domain)
        tone = _text(raw.get("emotional_tone")).lower()
        return ExtractedEvent(
            local_id=_text(raw.get("id")),
            summary=summary,
            event_type=_text(raw.get("event_type")).lower() or DEFAULT_EVENT_TYPE,
            domains=domains or [DEFAULT_DOMAIN],
            emotional_tone=tone if tone in EMOTIONAL_TONES else DEFAULT_TONE,
            importance=_clamp_rating(raw.get("importance"), DEFAULT_IMPORTANCE),
            related_entities=_str_list(raw.get("related_entities")),
            keywords=_str_list(raw.get("keywords")),
        )

    @staticmethod
    def _relationship(raw: dict) -> ExtractedRelationship | None:
        from_id, to_id = _text(raw.get("from_id")), _text(raw.get("to_id"))
        if not from_id or not to_id:
            logger.debug("Dropping relationship without endpoints: %r", raw)
            return None
        return ExtractedRelationship(
            from_id=from_id,
            to_id=to_id,
            relationship_type=_text(raw.get("relationship_type")) or "RELATED_TO",
            strength=_clamp_rating(raw.get("strength"), DEFAULT_STRENGTH),
        )
