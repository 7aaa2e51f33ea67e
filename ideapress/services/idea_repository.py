"""
Idea Repository: maps Idea models onto the flat string metadata the vector store keeps.
"""

import json
import math
from datetime import datetime
from typing import Callable, Dict, List

from ideapress.exceptions import IdeaNotFoundError
from ideapress.models.idea import Idea, IdeaMatch, utc_now
from ideapress.services.vector_service import VectorService
from ideapress.utils.logger import logger


def idea_to_metadata(idea: Idea) -> Dict[str, str]:
    """
    Encode an idea as vector-store metadata.

    The store only keeps flat string values, so tags become a JSON array,
    ``used`` becomes "true"/"false" and a missing ``usedAt`` becomes "".
    """
    return {
        "title": idea.title,
        "description": idea.description,
        "tags": json.dumps(idea.tags),
        "createdAt": idea.created_at.isoformat(),
        "used": "true" if idea.used else "false",
        "usedAt": idea.used_at.isoformat() if idea.used_at else "",
    }


def metadata_to_idea(idea_id: str, metadata: Dict[str, str]) -> Idea:
    """Decode vector-store metadata back into an Idea."""
    used_at = metadata.get("usedAt") or ""
    return Idea(
        id=idea_id,
        title=metadata["title"],
        description=metadata["description"],
        tags=json.loads(metadata["tags"]),
        created_at=datetime.fromisoformat(metadata["createdAt"]),
        used=metadata.get("used") == "true",
        used_at=datetime.fromisoformat(used_at) if used_at else None,
    )


class IdeaRepository:
    """Idea-level operations over a VectorService."""

    def __init__(self, vector_service: VectorService, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the repository.

        Args:
            vector_service: Vector store adapter holding ideas and their embeddings
            clock: Source of timestamps for mark_used
        """
        self.vector_service = vector_service
        self.clock = clock

    def create(self, idea: Idea, embedding: List[float]) -> Idea:
        """Store a new idea together with its embedding."""
        metadata = idea_to_metadata(idea)
        self.vector_service.upsert(idea.id, embedding, metadata)
        logger.info(f"Stored idea {idea.id}: {idea.title}")
        return idea

    def get(self, idea_id: str) -> Idea:
        """
        Fetch a single idea.

        Raises:
            IdeaNotFoundError: If no idea has this id
        """
        record = self.vector_service.fetch(idea_id)
        if record is None:
            raise IdeaNotFoundError(idea_id)
        return metadata_to_idea(idea_id, record.metadata)

    def query(self, embedding: List[float], top_k: int = 5) -> List[IdeaMatch]:
        """Return the ``top_k`` ideas most similar to ``embedding``, best first."""
        matches = self.vector_service.query(embedding, top_k=top_k, include_metadata=True)
        return [
            IdeaMatch(idea=metadata_to_idea(match_.id, match_.metadata), score=match_.score)
            for match_ in matches
        ]

    def list_all(self) -> List[Idea]:
        """
        Return every idea in the pool, oldest first.

        Uses the store's paginated listing when available. Otherwise falls back
        to a nearest-neighbour query against a neutral vector with ``top_k`` at
        the store maximum, which cannot see past that maximum.
        """
        if self.vector_service.supports_listing:
            record_ids = list(self.vector_service.list_ids())
            records = self.vector_service.fetch_many(record_ids)
            ideas = [metadata_to_idea(record.id, record.metadata) for record in records.values()]
        else:
            ideas = self._list_by_query()
        return sorted(ideas, key=lambda idea: idea.created_at)

    def _list_by_query(self) -> List[Idea]:
        total = self.vector_service.stats()["total_record_count"]
        if total == 0:
            return []

        max_top_k = self.vector_service.max_top_k
        if total > max_top_k:
            logger.warning(
                f"Index holds ~{total} ideas but a query returns at most {max_top_k}; "
                f"listing is truncated"
            )

        # Uniform unit vector; the cosine metric cannot score an all-zero vector
        dimension = self.vector_service.dimension
        neutral = [1.0 / math.sqrt(dimension)] * dimension
        matches = self.vector_service.query(neutral, top_k=min(total, max_top_k), include_metadata=True)
        return [metadata_to_idea(match_.id, match_.metadata) for match_ in matches]

    def mark_used(self, idea_id: str) -> Idea:
        """
        Flag an idea as used, keeping its stored vector.

        Raises:
            IdeaNotFoundError: If no idea has this id; nothing is written
        """
        record = self.vector_service.fetch(idea_id)
        if record is None:
            raise IdeaNotFoundError(idea_id)

        idea = metadata_to_idea(idea_id, record.metadata)
        if idea.used:
            logger.warning(f"Idea {idea_id} was already used at {idea.used_at.isoformat()}")
            return idea

        updated = idea.mark_used(self.clock())
        self.vector_service.upsert(idea_id, record.values, idea_to_metadata(updated))
        logger.info(f"Marked idea {idea_id} as used")
        return updated

    def delete(self, idea_id: str):
        """Delete an idea. Deleting an unknown id is not an error."""
        self.vector_service.delete(idea_id)
        logger.info(f"Deleted idea {idea_id}")
