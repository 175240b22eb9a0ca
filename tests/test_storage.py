import pytest

from journal_graph.storage.sqlite_store import decode_json
from journal_graph.types import ExtractedEntity, ExtractedEvent, ExtractedRelationship, Message


@pytest.mark.asyncio
async def test_entity_upsert_keeps_one_row(storage):
    first = await storage.upsert_entity("u1", ExtractedEntity("e1", "person", "Sam", {"relation": "friend"}))
    second = await storage.upsert_entity("u1", ExtractedEntity("e1", "person", "Samantha", {"relation": "sister"}))

    assert first.id == second.id
    entities = await storage.get_entities("u1")
    assert len(entities) == 1
    assert entities[0].name == "Samantha"
    assert entities[0].attributes == {"relation": "sister"}


@pytest.mark.asyncio
async def test_entity_local_ids_scoped_per_user(storage):
    await storage.upsert_entity("u1", ExtractedEntity("e1", "person", "Sam"))
    await storage.upsert_entity("u2", ExtractedEntity("e1", "person", "Alex"))
    assert await storage.count_entities("u1") == 1
    assert await storage.count_entities("u2") == 1


@pytest.mark.asyncio
async def test_events_are_never_deduplicated(storage):
    event = ExtractedEvent(local_id="ev1", summary="Went to the gym.")
    for _ in range(3):
        await storage.insert_event("u1", "2024-05-01", event)
    assert await storage.count_events("u1") == 3


@pytest.mark.asyncio
async def test_event_json_columns_roundtrip(storage):
    saved = await storage.insert_event(
        "u1", "2024-05-01",
        ExtractedEvent(summary="Dinner", domains=["Family", "Health"], related_entities=["e1"], keywords=["pasta"]),
    )
    loaded = await storage.get_event("u1", saved.id)
    assert loaded.domains == ["Family", "Health"]
    assert loaded.related_entities == ["e1"]
    assert loaded.keywords == ["pasta"]


@pytest.mark.asyncio
async def test_corrupt_json_columns_decode_to_defaults(storage):
    saved = await storage.insert_event("u1", "2024-05-01", ExtractedEvent(summary="Dinner"))
    db = await storage._conn()
    await db.execute(
        "UPDATE events SET domains = ?, keywords = ? WHERE id = ?",
        ("not json", '{"a": 1}', saved.id),
    )
    await db.commit()

    loaded = await storage.get_event("u1", saved.id)
    assert loaded.domains == []
    assert loaded.keywords == []


def test_decode_json_shapes():
    assert decode_json('{"a": 1}', {}) == {"a": 1}
    assert decode_json("[1, 2]", {}) == {}
    assert decode_json(None, []) == []
    assert decode_json("{broken", []) == []


@pytest.mark.asyncio
async def test_delete_event_removes_incident_relationships_only(storage):
    a = await storage.insert_event("u1", "2024-05-01", ExtractedEvent(summary="A"))
    b = await storage.insert_event("u1", "2024-05-01", ExtractedEvent(summary="B"))
    sam = await storage.upsert_entity("u1", ExtractedEntity("e1", "person", "Sam"))
    await storage.insert_relationship("u1", ExtractedRelationship(a.node_id, sam.node_id, "WITH"))
    await storage.insert_relationship("u1", ExtractedRelationship(b.node_id, a.node_id, "CAUSED"))
    await storage.insert_relationship("u1", ExtractedRelationship(b.node_id, sam.node_id, "WITH"))

    deleted = await storage.delete_event("u1", a.id)

    assert deleted == 3
    remaining = await storage.get_relationships("u1")
    assert [(r.from_id, r.to_id) for r in remaining] == [(b.node_id, sam.node_id)]
    assert await storage.count_entities("u1") == 1
    assert [e.id for e in await storage.get_events("u1")] == [b.id]


@pytest.mark.asyncio
async def test_delete_missing_event_is_noop(storage):
    assert await storage.delete_event("u1", 999) == 0


@pytest.mark.asyncio
async def test_clear_user_reports_total(storage):
    for i in range(3):
        await storage.upsert_entity("u1", ExtractedEntity(f"e{i}", "object", f"Thing {i}"))
    for i in range(5):
        await storage.insert_event("u1", "2024-05-01", ExtractedEvent(summary=f"Event {i}"))
    for i in range(4):
        await storage.insert_relationship("u1", ExtractedRelationship(f"event:{i}", "entity:1", "WITH"))
    await storage.insert_event("u2", "2024-05-01", ExtractedEvent(summary="Other user"))

    assert await storage.clear_user("u1") == 12
    assert await storage.count_entities("u1") == 0
    assert await storage.count_events("u1") == 0
    assert await storage.get_relationships("u1") == []
    assert await storage.count_events("u2") == 1


@pytest.mark.asyncio
async def test_search_entities_by_name_case_insensitive(storage):
    await storage.upsert_entity("u1", ExtractedEntity("e1", "place", "Blue Bottle Cafe"))
    await storage.upsert_entity("u1", ExtractedEntity("e2", "person", "Sam"))
    found = await storage.search_entities_by_name("u1", ["bottle"])
    assert [e.name for e in found] == ["Blue Bottle Cafe"]


@pytest.mark.asyncio
async def test_events_mentioning_newest_first(storage):
    await storage.insert_event("u1", "2024-05-01", ExtractedEvent(summary="Old", related_entities=["e1"]))
    await storage.insert_event("u1", "2024-05-03", ExtractedEvent(summary="New", related_entities=["e1"]))
    await storage.insert_event("u1", "2024-05-02", ExtractedEvent(summary="Other", related_entities=["e2"]))

    events = await storage.get_events_mentioning("u1", "e1")
    assert [e.summary for e in events] == ["New", "Old"]


@pytest.mark.asyncio
async def test_conversation_lifecycle(storage):
    conv = await storage.ensure_conversation("u1", "2024-05-01")
    again = await storage.ensure_conversation("u1", "2024-05-01")
    assert conv.id == again.id

    await storage.insert_message(conv.id, Message(sender="user", content="hi", mood_score=1.0, mood_label="good"))
    await storage.insert_message(conv.id, Message(sender="assistant", content="hello"))
    loaded = await storage.get_conversation("u1", "2024-05-01")
    assert loaded.user_message_count == 1
    assert loaded.assistant_message_count == 1
    assert await storage.average_user_mood(conv.id) == 1.0

    await storage.end_conversation(conv.id)
    ended = await storage.get_conversation("u1", "2024-05-01")
    assert ended.is_ended
    assert ended.ended_at is not None


@pytest.mark.asyncio
async def test_search_entities_by_name_folds_unicode(storage):
    await storage.upsert_entity("u1", ExtractedEntity("e1", "person", "ÖZGÜR"))
    await storage.upsert_entity("u1", ExtractedEntity("e2", "place", "Straße Café"))
    assert [e.name for e in await storage.search_entities_by_name("u1", ["özgür"])] == ["ÖZGÜR"]
    assert [e.name for e in await storage.search_entities_by_name("u1", ["STRASSE"])] == ["Straße Café"]
