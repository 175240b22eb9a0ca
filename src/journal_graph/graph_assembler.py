from __future__ import annotations

from .storage.sqlite_store import SQLiteStore
from .taxonomy import DOMAINS, domain_node_id, domain_style, entity_style, tone_color
from .types import DEFAULT_DOMAIN, Entity, Event, GraphEdge, GraphNode, LifeGraph, Relationship

BELONGS_TO = "BELONGS TO"
FOLLOWS = "FOLLOWS"


def display_type(relationship_type: str) -> str:
    return relationship_type.upper().replace("_", " ")


def domain_nodes() -> list[GraphNode]:
    return [
        GraphNode(id=domain_node_id(name), type="domain", color=style.color, icon=style.icon, fields={"name": name})
        for name, style in DOMAINS.items()
    ]


def event_node(event: Event) -> GraphNode:
    primary = event.domains[0] if event.domains else DEFAULT_DOMAIN
    return GraphNode(
        id=event.node_id,
        type="event",
        color=tone_color(event.emotional_tone),
        icon=domain_style(primary).icon,
        fields={
            "dbId": event.id,
            "summary": event.summary,
            "event_type": event.event_type,
            "event_date": event.event_date,
            "domains": list(event.domains),
            "primaryDomain": primary,
            "emotional_tone": event.emotional_tone,
            "importance": event.importance,
            "keywords": list(event.keywords),
            "related_entities": list(event.related_entities),
        },
    )


def entity_node(entity: Entity) -> GraphNode:
    style = entity_style(entity.type)
    return GraphNode(
        id=entity.node_id,
        type="entity",
        color=style.color,
        icon=style.icon,
        fields={
            "dbId": entity.id,
            "localId": entity.local_id,
            "entityType": entity.type,
            "name": entity.name,
            "attributes": dict(entity.attributes),
        },
    )


def relationship_edges(relationships: list[Relationship]) -> list[GraphEdge]:
    # Endpoints are not checked against the node list; consumers drop edges they cannot place.
    return [
        GraphEdge(source=r.from_id, target=r.to_id, type=display_type(r.relationship_type), strength=r.strength)
        for r in relationships
    ]


def membership_edges(events: list[Event]) -> list[GraphEdge]:
    return [
        GraphEdge(source=event.node_id, target=domain_node_id(domain), type=BELONGS_TO)
        for event in events
        for domain in event.domains
    ]


def temporal_edges(events: list[Event]) -> list[GraphEdge]:
    """Link each event to the previous event seen in each of its domains.

    ``events`` must be in creation order. Every domain keeps its own pointer,
    so the result is one chain per domain rather than a global timeline.
    """
    last_in_domain: dict[str, Event] = {}
    edges: list[GraphEdge] = []
    for event in events:
        linked: set[int] = set()
        for domain in event.domains:
            previous = last_in_domain.get(domain)
            if previous is not None and previous.id not in linked:
                edges.append(GraphEdge(source=event.node_id, target=previous.node_id, type=FOLLOWS))
                linked.add(previous.id)
            last_in_domain[domain] = event
    return edges


class GraphAssembler:
    def __init__(self, storage: SQLiteStore):
        self._storage = storage

    async def assemble(self, user_id: str) -> LifeGraph:
        events = await self._storage.get_events(user_id)
        entities = await self._storage.get_entities(user_id)
        relationships = await self._storage.get_relationships(user_id)

        nodes = domain_nodes()
        nodes.extend(event_node(e) for e in events)
        nodes.extend(entity_node(e) for e in entities)

        edges = relationship_edges(relationships)
        edges.extend(membership_edges(events))
        edges.extend(temporal_edges(events))

        return LifeGraph(nodes=nodes, edges=edges, event_count=len(events), entity_count=len(entities))
