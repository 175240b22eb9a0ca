from .context import ContextRetriever
from .extractor import EventExtractor
from .graph_assembler import GraphAssembler
from .graph_writer import GraphWriter, LocalIdMap, PersistSummary
from .journal import ConversationClosedError, DayClosure, Journal
from .llm import LLMUnavailableError
from .storage.sqlite_store import SQLiteStore
from .types import (
    Entity,
    Event,
    ExtractedEntity,
    ExtractedEvent,
    ExtractedRelationship,
    ExtractionResult,
    LifeGraph,
    Message,
    Relationship,
)

__all__ = [
    "Journal",
    "DayClosure",
    "ConversationClosedError",
    "EventExtractor",
    "GraphWriter",
    "GraphAssembler",
    "ContextRetriever",
    "LocalIdMap",
    "PersistSummary",
    "SQLiteStore",
    "LLMUnavailableError",
    "Message",
    "Entity",
    "Event",
    "Relationship",
    "ExtractedEntity",
    "ExtractedEvent",
    "ExtractedRelationship",
    "ExtractionResult",
    "LifeGraph",
]
