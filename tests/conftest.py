"""
Shared fixtures: an in-memory vector store and a deterministic embedding service.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from ideapress.models.idea import Idea
from ideapress.services.embedding_service import EmbeddingService
from ideapress.services.idea_repository import IdeaRepository
from ideapress.services.vector_service import VectorMatch, VectorRecord
from ideapress.similarity import cosine_similarity

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


class InMemoryVectorStore:
    """Stands in for VectorService, scoring queries with exact cosine similarity."""

    def __init__(self, dimension: int = 3, supports_listing: bool = True, max_top_k: int = 10000):
        self.dimension = dimension
        self.supports_listing = supports_listing
        self.max_top_k = max_top_k
        self.records: Dict[str, VectorRecord] = {}
        self.upsert_calls: List[str] = []

    def upsert(self, record_id, values, metadata):
        self.upsert_calls.append(record_id)
        self.records[record_id] = VectorRecord(id=record_id, values=list(values), metadata=dict(metadata))

    def query(self, vector, top_k, include_metadata=True):
        matches = [
            VectorMatch(id=record.id, score=cosine_similarity(vector, record.values), metadata=dict(record.metadata))
            for record in self.records.values()
        ]
        matches.sort(key=lambda match_: match_.score, reverse=True)
        return matches[:min(top_k, self.max_top_k)]

    def fetch(self, record_id) -> Optional[VectorRecord]:
        return self.records.get(record_id)

    def fetch_many(self, record_ids):
        return {record_id: self.records[record_id] for record_id in record_ids if record_id in self.records}

    def list_ids(self):
        return iter(list(self.records))

    def delete(self, record_id):
        self.records.pop(record_id, None)

    def stats(self):
        return {"total_record_count": len(self.records)}


class FakeEmbeddingService(EmbeddingService):
    """Returns preassigned vectors keyed by idea title."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, dimension: int = 3):
        self.vectors = dict(vectors or {})
        self.dimension = dimension
        self.calls: List[str] = []

    def create_embedding(self, text: str) -> List[float]:
        self._check_text(text)
        title = text.split("\n\n", 1)[0]
        self.calls.append(title)
        return list(self.vectors[title])


def make_idea(title, used_days_ago=None, idea_id=None, created_offset=0, tags=None):
    """Build an Idea; ``used_days_ago`` marks it used that many days before BASE_TIME + 30d."""
    used_at = None
    if used_days_ago is not None:
        used_at = BASE_TIME + timedelta(days=30 - used_days_ago)
    return Idea(
        id=idea_id or title.lower().replace(" ", "-"),
        title=title,
        description=f"A post about {title.lower()} for working developers.",
        tags=tags or ["python"],
        created_at=BASE_TIME + timedelta(minutes=created_offset),
        used=used_at is not None,
        used_at=used_at,
    )


@pytest.fixture
def vector_store():
    return InMemoryVectorStore()


@pytest.fixture
def repository(vector_store):
    return IdeaRepository(vector_store, clock=lambda: BASE_TIME + timedelta(days=60))


@pytest.fixture
def embedding_service():
    return FakeEmbeddingService()
