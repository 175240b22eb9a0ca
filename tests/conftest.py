import json

import pytest

from journal_graph.storage.sqlite_store import SQLiteStore
from journal_graph.types import Message


@pytest.fixture
def tmp_db(tmp_path):
    return tmp_path / "test_journal.db"


@pytest.fixture
async def storage(tmp_db):
    store = SQLiteStore(tmp_db)
    yield store
    await store.close()


SAMPLE_GRAPH = {
    "entities": [
        {"id": "e1", "type": "person", "name": "Sam", "attributes": {"relation": "friend"}},
        {"id": "e2", "type": "place", "name": "Blue Bottle Cafe", "attributes": {}},
    ],
    "events": [
        {
            "id": "ev1", "summary": "Had coffee with Sam at Blue Bottle.", "event_type": "social",
            "domains": ["Friends"], "emotional_tone": "happy", "importance": 3,
            "related_entities": ["e1", "e2"], "keywords": ["coffee"],
        },
        {
            "id": "ev2", "summary": "Went for a run after coffee.", "event_type": "exercise",
            "domains": ["Health", "Personal Life"], "emotional_tone": "positive", "importance": 2,
            "related_entities": [], "keywords": ["run"],
        },
    ],
    "relationships": [
        {"from_id": "ev1", "to_id": "e1", "relationship_type": "WITH", "strength": 4},
        {"from_id": "ev1", "to_id": "e2", "relationship_type": "AT", "strength": 3},
        {"from_id": "ev1", "to_id": "ev2", "relationship_type": "FOLLOWED_BY", "strength": 2},
    ],
}


def make_mock_llm(responses: dict[str, str] | None = None):
    """Creates a mock LLM that returns canned responses based on prompt keywords."""
    default_responses = {
        "life graph": "Here is the graph:\n" + json.dumps(SAMPLE_GRAPH),
        "journaling companion": "That sounds like a lovely afternoon. What made it special?",
    }
    if responses:
        default_responses.update(responses)

    def mock_llm(prompt: str) -> str:
        for keyword, response in default_responses.items():
            if keyword.lower() in prompt.lower():
                return response
        return "OK"

    return mock_llm


def make_failing_llm(exc: Exception | None = None):
    def failing_llm(_prompt: str) -> str:
        raise exc or ConnectionError("backend unreachable")

    return failing_llm


@pytest.fixture
def mock_llm():
    return make_mock_llm()


@pytest.fixture
def transcript():
    return [
        Message(sender="assistant", content="Hi Friend, how was your day?"),
        Message(sender="user", content="Great! Had coffee with Sam at Blue Bottle and then went for a run."),
    ]
