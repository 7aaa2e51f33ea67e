"""
Vector Service for handling operations related to vector databases (Pinecone).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from pinecone import Pinecone, ServerlessSpec
from pinecone.exceptions import NotFoundException

from ideapress.exceptions import StoreUnavailableError
from ideapress.utils.logger import logger
from ideapress.utils.constants import (
    EMBEDDING_DIMENSION,
    EMBEDDING_METRIC,
    PINECONE_MAX_TOP_K,
    AWS_REGION,
    AWS_CLOUD
)

# Pinecone caps the number of ids per fetch request
FETCH_BATCH_SIZE = 100


@dataclass
class VectorRecord:
    """A stored vector with its flat string metadata."""

    id: str
    values: List[float]
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class VectorMatch:
    """A query hit."""

    id: str
    score: float
    metadata: Dict[str, str] = field(default_factory=dict)


def _field(obj: Any, name: str, default=None):
    """Read a field from a Pinecone response object or a plain dict."""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


class VectorService:
    """Keyed vector storage with nearest-neighbour search."""

    max_top_k = PINECONE_MAX_TOP_K

    def __init__(
        self,
        pinecone_client: Pinecone,
        index_name: str,
        dimension: int = EMBEDDING_DIMENSION,
        supports_listing: bool = True,
        create_index: bool = True,
    ):
        """
        Initialize the vector service.

        Args:
            pinecone_client: Initialized Pinecone client
            index_name: Name of the Pinecone index to use
            dimension: Vector length of the index
            supports_listing: Whether the index offers the paginated list API (serverless only)
            create_index: Create the index on startup if it does not exist
        """
        self.pinecone_client = pinecone_client
        self.index_name = index_name
        self.dimension = dimension
        self.supports_listing = supports_listing
        self._index = None
        if create_index:
            self.ensure_index_exists()

    @property
    def index(self):
        if self._index is None:
            self._index = self.pinecone_client.Index(self.index_name)
        return self._index

    def ensure_index_exists(self):
        """Ensure that the Pinecone index exists, creating it if necessary."""
        try:
            self.pinecone_client.describe_index(self.index_name)
            logger.info(f"Index '{self.index_name}' already exists.")
        except NotFoundException:
            # Index does not exist, so create it
            try:
                self.pinecone_client.create_index(
                    name=self.index_name,
                    dimension=self.dimension,
                    metric=EMBEDDING_METRIC,
                    spec=ServerlessSpec(
                        cloud=AWS_CLOUD,
                        region=AWS_REGION
                    )
                )
            except Exception as e:
                logger.error(f"Error creating index: {e}")
                raise StoreUnavailableError(str(e), step="create_index") from e
            logger.info(f"Index '{self.index_name}' created.")
        except Exception as e:
            logger.error(f"Error checking index: {e}")
            raise StoreUnavailableError(str(e), step="describe_index") from e

    def upsert(self, record_id: str, values: List[float], metadata: Dict[str, str]):
        """Insert or overwrite a single record."""
        try:
            self.index.upsert(
                vectors=[{
                    "id": record_id,
                    "values": list(values),
                    "metadata": metadata
                }]
            )
        except Exception as e:
            logger.error(f"Error upserting record {record_id}: {e}")
            raise StoreUnavailableError(str(e), step="upsert") from e

    def query(self, vector: List[float], top_k: int, include_metadata: bool = True) -> List[VectorMatch]:
        """
        Find the records closest to ``vector``.

        Args:
            vector: Query vector
            top_k: Maximum number of matches (capped at the store maximum)
            include_metadata: Return metadata with each match

        Returns:
            Matches ordered by descending score
        """
        top_k = max(1, min(top_k, self.max_top_k))
        try:
            query_result = self.index.query(
                vector=list(vector),
                top_k=top_k,
                include_metadata=include_metadata
            )
        except Exception as e:
            logger.error(f"Error querying index: {e}")
            raise StoreUnavailableError(str(e), step="query") from e

        return [
            VectorMatch(
                id=_field(match_, 'id'),
                score=float(_field(match_, 'score') or 0.0),
                metadata=dict(_field(match_, 'metadata') or {}),
            )
            for match_ in (_field(query_result, 'matches') or [])
        ]

    def fetch(self, record_id: str) -> Optional[VectorRecord]:
        """Return the record stored under ``record_id``, or None if absent."""
        records = self.fetch_many([record_id])
        return records.get(record_id)

    def fetch_many(self, record_ids: List[str]) -> Dict[str, VectorRecord]:
        records: Dict[str, VectorRecord] = {}
        for start in range(0, len(record_ids), FETCH_BATCH_SIZE):
            batch = record_ids[start:start + FETCH_BATCH_SIZE]
            try:
                fetch_result = self.index.fetch(ids=batch)
            except Exception as e:
                logger.error(f"Error fetching records: {e}")
                raise StoreUnavailableError(str(e), step="fetch") from e

            for record_id, vector in (_field(fetch_result, 'vectors') or {}).items():
                records[record_id] = VectorRecord(
                    id=record_id,
                    values=list(_field(vector, 'values') or []),
                    metadata=dict(_field(vector, 'metadata') or {}),
                )
        return records

    def list_ids(self) -> Iterator[str]:
        """Yield every record id using the paginated list API."""
        try:
            for page in self.index.list():
                for record_id in page:
                    yield record_id
        except Exception as e:
            logger.error(f"Error listing records: {e}")
            raise StoreUnavailableError(str(e), step="list") from e

    def delete(self, record_id: str):
        """Delete a record; deleting an absent id is a no-op."""
        try:
            self.index.delete(ids=[record_id])
        except Exception as e:
            logger.error(f"Error deleting record {record_id}: {e}")
            raise StoreUnavailableError(str(e), step="delete") from e

    def stats(self) -> Dict[str, int]:
        """Return the approximate number of stored records."""
        try:
            stats = self.index.describe_index_stats()
        except Exception as e:
            logger.error(f"Error reading index stats: {e}")
            raise StoreUnavailableError(str(e), step="stats") from e
        return {"total_record_count": int(_field(stats, 'total_vector_count') or 0)}
