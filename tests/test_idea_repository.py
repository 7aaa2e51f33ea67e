"""
Tests for the Idea Repository translation layer.
"""

import json
import pytest
from datetime import timedelta
from unittest.mock import MagicMock

from ideapress.exceptions import IdeaNotFoundError
from ideapress.services.idea_repository import (
    IdeaRepository,
    idea_to_metadata,
    metadata_to_idea,
)
from conftest import BASE_TIME, InMemoryVectorStore, make_idea


class TestMetadataEncoding:
    """Tests for the Idea <-> metadata mapping."""

    def test_encodes_flat_strings(self):
        """Tags, flags and timestamps become plain strings."""
        idea = make_idea("Async Python", tags=["python", "asyncio", "concurrency"])
        metadata = idea_to_metadata(idea)

        assert metadata["tags"] == json.dumps(["python", "asyncio", "concurrency"])
        assert metadata["used"] == "false"
        assert metadata["usedAt"] == ""
        assert all(isinstance(value, str) for value in metadata.values())

    def test_round_trip_unused(self):
        """Decoding the encoded metadata reproduces the idea, tag order included."""
        idea = make_idea("Async Python", tags=["zeta", "alpha", "mid"])
        assert metadata_to_idea(idea.id, idea_to_metadata(idea)) == idea

    def test_round_trip_used(self):
        """used/usedAt survive the round trip together."""
        idea = make_idea("Rust for Pythonistas", used_days_ago=3)
        decoded = metadata_to_idea(idea.id, idea_to_metadata(idea))

        assert decoded == idea
        assert decoded.used is True
        assert decoded.used_at == idea.used_at

    def test_decodes_javascript_timestamps(self):
        """Timestamps written with a trailing Z are accepted."""
        decoded = metadata_to_idea("abc", {
            "title": "Old idea",
            "description": "Written before the Python port existed.",
            "tags": '["legacy"]',
            "createdAt": "2024-05-01T10:00:00.000Z",
            "used": "true",
            "usedAt": "2024-06-01T10:00:00.000Z",
        })
        assert decoded.used is True
        assert decoded.used_at.year == 2024


class TestIdeaRepository:
    """Tests for IdeaRepository operations."""

    def test_create_and_get(self, repository, vector_store):
        """A created idea is stored with its vector and can be read back."""
        idea = make_idea("Testing with pytest")
        repository.create(idea, [1.0, 0.0, 0.0])

        assert vector_store.records[idea.id].values == [1.0, 0.0, 0.0]
        assert repository.get(idea.id) == idea

    def test_get_unknown_raises(self, repository):
        """Fetching an absent id is a not-found condition."""
        with pytest.raises(IdeaNotFoundError):
            repository.get("missing")

    def test_query_returns_scored_ideas(self, repository):
        """Query decodes matches, best first."""
        repository.create(make_idea("Near"), [1.0, 0.1, 0.0])
        repository.create(make_idea("Far"), [0.0, 0.0, 1.0])

        matches = repository.query([1.0, 0.0, 0.0], top_k=2)

        assert [match_.idea.title for match_ in matches] == ["Near", "Far"]
        assert matches[0].score > matches[1].score

    def test_mark_used_unknown_does_not_upsert(self, repository, vector_store):
        """Marking an absent id fails without writing anything."""
        with pytest.raises(IdeaNotFoundError):
            repository.mark_used("missing")
        assert vector_store.upsert_calls == []

    def test_mark_used_then_list_all(self, repository, vector_store):
        """The idea shows as used with a timestamp right after marking."""
        idea = make_idea("Type hints")
        repository.create(idea, [0.0, 1.0, 0.0])

        updated = repository.mark_used(idea.id)
        listed = {i.id: i for i in repository.list_all()}

        assert updated.used is True
        assert listed[idea.id].used is True
        assert listed[idea.id].used_at == BASE_TIME + timedelta(days=60)
        assert vector_store.records[idea.id].values == [0.0, 1.0, 0.0]

    def test_mark_used_is_monotonic(self, repository, vector_store):
        """Marking an already used idea keeps its original timestamp."""
        idea = make_idea("Packaging", used_days_ago=5)
        repository.create(idea, [0.0, 1.0, 0.0])
        vector_store.upsert_calls.clear()

        result = repository.mark_used(idea.id)

        assert result.used_at == idea.used_at
        assert vector_store.upsert_calls == []

    def test_list_all_via_listing_api(self, repository):
        """With the list API every idea is returned, oldest first."""
        repository.create(make_idea("Second", created_offset=2), [1.0, 0.0, 0.0])
        repository.create(make_idea("First", created_offset=1), [0.0, 1.0, 0.0])

        assert [idea.title for idea in repository.list_all()] == ["First", "Second"]

    def test_list_all_via_query_fallback(self):
        """Without the list API, a neutral-vector query sized to the pool is used."""
        store = InMemoryVectorStore(supports_listing=False)
        store.query = MagicMock(wraps=store.query)
        repository = IdeaRepository(store)
        repository.create(make_idea("One"), [1.0, 0.0, 0.0])
        repository.create(make_idea("Two", created_offset=1), [0.0, 0.0, 1.0])

        ideas = repository.list_all()

        assert {idea.title for idea in ideas} == {"One", "Two"}
        vector, = store.query.call_args.args
        assert store.query.call_args.kwargs["top_k"] == 2
        assert len(vector) == store.dimension
        assert any(value != 0 for value in vector)

    def test_list_all_empty_pool_skips_query(self):
        """An empty index returns no ideas without querying."""
        store = InMemoryVectorStore(supports_listing=False)
        store.query = MagicMock()

        assert IdeaRepository(store).list_all() == []
        store.query.assert_not_called()

    def test_list_all_fallback_is_capped(self):
        """Above the store maximum the listing is truncated and says so."""
        store = InMemoryVectorStore(supports_listing=False, max_top_k=2)
        repository = IdeaRepository(store)
        for i in range(3):
            repository.create(make_idea(f"Idea {i}", created_offset=i), [1.0, float(i), 0.0])

        assert len(repository.list_all()) == 2

    def test_delete_is_idempotent(self, repository, vector_store):
        """Deleting twice is not an error."""
        idea = make_idea("Short lived")
        repository.create(idea, [1.0, 0.0, 0.0])

        repository.delete(idea.id)
        repository.delete(idea.id)

        assert idea.id not in vector_store.records


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
