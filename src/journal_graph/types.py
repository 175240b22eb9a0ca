from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Literal, Union

LLMCallable = Callable[[str], Union[str, Awaitable[str]]]

Sender = Literal["user", "assistant"]

ENTITY_TYPES = ("place", "person", "food", "activity", "preference", "object", "organization")
EMOTIONAL_TONES = (
    "positive", "negative", "neutral", "stressed", "anxious",
    "happy", "sad", "grateful", "excited",
)
EVENT_TYPES = (
    "work", "study", "social", "exercise", "meal", "date",
    "family", "health", "leisure", "errand", "general",
)

DEFAULT_EVENT_TYPE = "general"
DEFAULT_DOMAIN = "Personal Life"
DEFAULT_TONE = "neutral"
DEFAULT_IMPORTANCE = 3
DEFAULT_STRENGTH = 3
DEFAULT_ENTITY_TYPE = "object"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Message:
    sender: Sender = "user"
    content: str = ""
    mood_label: str | None = None
    mood_score: float | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=_now)


# ── Extraction output (transcript-local ids) ──


@dataclass
class ExtractedEntity:
    local_id: str = ""
    type: str = DEFAULT_ENTITY_TYPE
    name: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ExtractedEvent:
    local_id: str = ""
    summary: str = ""
    event_type: str = DEFAULT_EVENT_TYPE
    domains: list[str] = field(default_factory=lambda: [DEFAULT_DOMAIN])
    emotional_tone: str = DEFAULT_TONE
    importance: int = DEFAULT_IMPORTANCE
    related_entities: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)


@dataclass
class ExtractedRelationship:
    from_id: str = ""
    to_id: str = ""
    relationship_type: str = "RELATED_TO"
    strength: int = DEFAULT_STRENGTH


@dataclass
class ExtractionResult:
    entities: list[ExtractedEntity] = field(default_factory=list)
    events: list[ExtractedEvent] = field(default_factory=list)
    relationships: list[ExtractedRelationship] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.entities or self.events or self.relationships)


# ── Stored rows (durable ids) ──


@dataclass
class Entity:
    id: int = 0
    user_id: str = ""
    local_id: str = ""
    type: str = DEFAULT_ENTITY_TYPE
    name: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_now)

    @property
    def node_id(self) -> str:
        return f"entity:{self.id}"


@dataclass
class Event:
    id: int = 0
    user_id: str = ""
    event_date: str = ""
    summary: str = ""
    event_type: str = DEFAULT_EVENT_TYPE
    domains: list[str] = field(default_factory=lambda: [DEFAULT_DOMAIN])
    emotional_tone: str = DEFAULT_TONE
    importance: int = DEFAULT_IMPORTANCE
    related_entities: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)

    @property
    def node_id(self) -> str:
        return f"event:{self.id}"


@dataclass
class Relationship:
    id: int = 0
    user_id: str = ""
    from_id: str = ""
    to_id: str = ""
    relationship_type: str = "RELATED_TO"
    strength: int = DEFAULT_STRENGTH
    created_at: datetime = field(default_factory=_now)


@dataclass
class Conversation:
    id: int = 0
    user_id: str = ""
    date: str = ""
    mood_label: str = "neutral"
    mood_score: float = 0.0
    is_ended: bool = False
    started_at: datetime = field(default_factory=_now)
    ended_at: datetime | None = None
    updated_at: datetime = field(default_factory=_now)
    user_message_count: int = 0
    assistant_message_count: int = 0


# ── Assembled graph ──


@dataclass
class GraphNode:
    id: str
    type: Literal["domain", "event", "entity"]
    color: str
    icon: str
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, **self.fields, "color": self.color, "icon": self.icon}


@dataclass
class GraphEdge:
    source: str
    target: str
    type: str
    strength: int | None = None

    def to_dict(self) -> dict[str, Any]:
        edge: dict[str, Any] = {"source": self.source, "target": self.target, "type": self.type}
        if self.strength is not None:
            edge["strength"] = self.strength
        return edge


@dataclass
class LifeGraph:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    event_count: int = 0
    entity_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "eventCount": self.event_count,
            "entityCount": self.entity_count,
        }
