"""
Embedding providers for IdeaPress.
Every provider maps text to a fixed-length vector of floats.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import openai
from openai import OpenAI

from ideapress.exceptions import InvalidInputError, ProviderUnavailableError
from ideapress.models.idea import embedding_text
from ideapress.utils.constants import (
    EMBEDDING_DIMENSION,
    LOCAL_EMBEDDING_MODEL,
    OPENAI_EMBEDDING_MODEL,
)
from ideapress.utils.logger import logger


class EmbeddingService(ABC):
    """Abstract base class for embedding providers."""

    dimension: int = EMBEDDING_DIMENSION

    @abstractmethod
    def create_embedding(self, text: str) -> List[float]:
        """
        Create an embedding for the given text.

        Args:
            text: The text to create an embedding for

        Returns:
            List of floating point values representing the embedding

        Raises:
            InvalidInputError: If the text is empty
            ProviderUnavailableError: If the provider fails
        """
        pass

    def embed_idea(self, title: str, description: str) -> List[float]:
        """Create the embedding for an idea from its title and description."""
        return self.create_embedding(embedding_text(title, description))

    def _check_text(self, text: str):
        if not text or not text.strip():
            raise InvalidInputError("Cannot create an embedding for empty text")

    def _check_dimension(self, embedding: List[float]) -> List[float]:
        if len(embedding) != self.dimension:
            raise ProviderUnavailableError(
                f"Expected {self.dimension}-dimensional embedding, got {len(embedding)}",
                step="embed",
            )
        return embedding


class OpenAIEmbeddingService(EmbeddingService):
    """Embeddings from the OpenAI API, shortened to the index dimension."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = OPENAI_EMBEDDING_MODEL,
        dimension: int = EMBEDDING_DIMENSION,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the OpenAI embedding service.

        Args:
            api_key: OpenAI API key
            model: Embedding model to use
            dimension: Length of the returned vectors
            client: Pre-built client; created on first use when omitted
        """
        self.api_key = api_key
        self.model = model
        self.dimension = dimension
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise ProviderUnavailableError("OPENAI_API_KEY not configured", step="embed")
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def create_embedding(self, text: str) -> List[float]:
        self._check_text(text)
        logger.debug(f"Creating embedding for text: {text[:50]}...")
        try:
            embedding = self.client.embeddings.create(
                input=text,
                model=self.model,
                dimensions=self.dimension
            )
        except openai.BadRequestError as e:
            logger.error(f"OpenAI rejected embedding input: {e}")
            raise InvalidInputError(str(e)) from e
        except openai.OpenAIError as e:
            logger.error(f"Error creating embedding: {e}")
            raise ProviderUnavailableError(str(e), step="embed") from e

        if not embedding.data:
            logger.error("No embedding data returned from API")
            raise ProviderUnavailableError("No embedding data returned from API", step="embed")
        logger.debug("Successfully created embedding")
        return self._check_dimension(list(embedding.data[0].embedding))


class SentenceTransformerEmbeddingService(EmbeddingService):
    """Local embeddings with sentence-transformers (all-MiniLM-L6-v2 by default)."""

    def __init__(self, model_name: str = LOCAL_EMBEDDING_MODEL, dimension: int = EMBEDDING_DIMENSION, model=None):
        self.model_name = model_name
        self.dimension = dimension
        self._model = model

    @property
    def model(self):
        if self._model is None:
            logger.info(f"Loading embedding model {self.model_name}")
            try:
                # Heavy import, only paid when the local backend is actually used
                from sentence_transformers import SentenceTransformer

                self._model = SentenceTransformer(self.model_name)
            except Exception as e:
                logger.error(f"Error loading embedding model {self.model_name}: {e}")
                raise ProviderUnavailableError(str(e), step="load_model") from e
            logger.info("Embedding model loaded")
        return self._model

    def create_embedding(self, text: str) -> List[float]:
        self._check_text(text)
        model = self.model
        try:
            vector = model.encode(text, normalize_embeddings=True)
        except Exception as e:
            logger.error(f"Error creating embedding: {e}")
            raise ProviderUnavailableError(str(e), step="embed") from e
        return self._check_dimension([float(value) for value in vector])


class CachedEmbeddingService(EmbeddingService):
    """
    Wraps another provider and memoizes embeddings by a hash of the exact text.

    Changing an idea's text changes its hash, so stale entries are never served.
    """

    def __init__(self, inner: EmbeddingService, max_entries: int = 4096):
        self.inner = inner
        self.dimension = inner.dimension
        self.max_entries = max_entries
        self._cache: Dict[str, List[float]] = {}

    @staticmethod
    def text_hash(text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def create_embedding(self, text: str) -> List[float]:
        key = self.text_hash(text)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Using cached embedding for {key[:12]}")
            return list(cached)

        embedding = self.inner.create_embedding(text)
        if len(self._cache) >= self.max_entries:
            # Evict the oldest entry; dicts keep insertion order
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = list(embedding)
        return embedding

    def __len__(self):
        return len(self._cache)
