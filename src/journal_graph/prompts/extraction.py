EXTRACT_LIFE_GRAPH = """You turn one day of a personal journaling conversation into a life graph of events, entities, and relationships.

Extract EVERY distinct thing that happened as its own event.
Do NOT merge a multi-part story into one event: "had coffee with Sam, then went to the gym" is two events.
Only extract what the user actually said happened; do not invent details.

Entities are things that can come up again on other days.
Each entity has:
- "id": a short id unique in this response (e.g. "e1", "e2")
- "type": exactly one of: {entity_types}
- "name": the name as the user refers to it (e.g. "Sam", "Blue Bottle Cafe")
- "attributes": an object of short free-form details (may be empty)

Each event has:
- "id": a short id unique in this response (e.g. "ev1", "ev2")
- "summary": one sentence describing what happened
- "event_type": one of: {event_types}
- "domains": a non-empty list drawn from: {domains}. Put the best fit first.
- "emotional_tone": exactly one of: {tones}
- "importance": an integer from 1 (trivial) to 5 (life-changing)
- "related_entities": ids of the entities involved
- "keywords": a few short lowercase tags

Relationships connect ids from this response:
- between events, e.g. "FOLLOWED_BY", "CAUSED", "PART_OF"
- between an event and an entity, e.g. "AT", "WITH", "ATE", "INVOLVES"
Each has "from_id", "to_id", "relationship_type" (UPPER_SNAKE_CASE) and "strength" (integer 1-5).

Conversation:
{transcript}

Answer with a single raw JSON object and nothing else: no prose, no markdown, no code fences.
Shape:
{{"entities": [{{"id": "e1", "type": "person", "name": "Sam", "attributes": {{"relation": "friend"}}}}],
 "events": [{{"id": "ev1", "summary": "Had coffee with Sam.", "event_type": "social", "domains": ["Friends"], "emotional_tone": "happy", "importance": 3, "related_entities": ["e1"], "keywords": ["coffee"]}}],
 "relationships": [{{"from_id": "ev1", "to_id": "e1", "relationship_type": "WITH", "strength": 4}}]}}
If nothing happened, answer {{"entities": [], "events": [], "relationships": []}}."""
