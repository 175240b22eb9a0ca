import pytest

from journal_graph.graph_writer import GraphWriter, LocalIdMap
from journal_graph.types import ExtractedEntity, ExtractedEvent, ExtractedRelationship, ExtractionResult


def _graph(**overrides) -> ExtractionResult:
    graph = ExtractionResult(
        entities=[ExtractedEntity("e1", "person", "Sam"), ExtractedEntity("e2", "place", "Park")],
        events=[ExtractedEvent("ev1", "Walked in the park with Sam.", domains=["Friends"], related_entities=["e1", "e2"])],
        relationships=[
            ExtractedRelationship("ev1", "e1", "WITH", 4),
            ExtractedRelationship("ev1", "e2", "AT", 3),
        ],
    )
    for key, value in overrides.items():
        setattr(graph, key, value)
    return graph


@pytest.mark.asyncio
async def test_persist_translates_local_ids(storage):
    summary = await GraphWriter(storage).persist(_graph(), "u1", "2024-05-01")

    assert (summary.entities, summary.events, summary.relationships, summary.unresolved) == (2, 1, 2, 0)
    entities = {e.local_id: e for e in await storage.get_entities("u1")}
    (event,) = await storage.get_events("u1")
    assert event.event_date == "2024-05-01"
    assert event.related_entities == ["e1", "e2"]

    rels = await storage.get_relationships("u1")
    assert [(r.from_id, r.to_id, r.strength) for r in rels] == [
        (f"event:{event.id}", f"entity:{entities['e1'].id}", 4),
        (f"event:{event.id}", f"entity:{entities['e2'].id}", 3),
    ]


@pytest.mark.asyncio
async def test_unresolved_endpoint_passes_through(storage):
    graph = _graph(relationships=[ExtractedRelationship("ev1", "ghost", "WITH")])
    summary = await GraphWriter(storage).persist(graph, "u1", "2024-05-01")

    assert summary.unresolved == 1
    (rel,) = await storage.get_relationships("u1")
    assert rel.from_id.startswith("event:")
    assert rel.to_id == "ghost"


@pytest.mark.asyncio
async def test_repeated_persist_upserts_entities_and_appends_events(storage):
    writer = GraphWriter(storage)
    await writer.persist(_graph(), "u1", "2024-05-01")
    renamed = [ExtractedEntity("e1", "person", "Samuel", {"nickname": "Sam"}), ExtractedEntity("e2", "place", "Park")]
    await writer.persist(_graph(entities=renamed), "u1", "2024-05-01")

    entities = await storage.get_entities("u1")
    assert len(entities) == 2
    assert entities[0].name == "Samuel"
    assert entities[0].attributes == {"nickname": "Sam"}
    assert await storage.count_events("u1") == 2
    assert len(await storage.get_relationships("u1")) == 4


@pytest.mark.asyncio
async def test_event_ids_take_precedence_over_entity_ids(storage):
    graph = ExtractionResult(
        entities=[ExtractedEntity("x", "object", "Bike")],
        events=[ExtractedEvent("x", "Fixed the bike.")],
        relationships=[ExtractedRelationship("x", "x", "SELF")],
    )
    await GraphWriter(storage).persist(graph, "u1", "2024-05-01")
    (rel,) = await storage.get_relationships("u1")
    assert rel.from_id.startswith("event:")
    assert rel.to_id.startswith("event:")


def test_local_id_map_is_bidirectional():
    ids = LocalIdMap()
    ids.bind_entity("e1", "entity:7")
    ids.bind_event("ev1", "event:3")

    assert ids.resolve("e1") == "entity:7"
    assert ids.resolve("ev1") == "event:3"
    assert ids.resolve("nope") == "nope"
    assert ids.local_for("event:3") == "ev1"
    assert "e1" in ids and "nope" not in ids
    assert len(ids) == 2
