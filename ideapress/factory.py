"""
Factory for creating service instances and pipelines.
"""

from pinecone import Pinecone

from ideapress.pipeline import PublishingPipeline
from ideapress.services.content_service import GeminiContentService
from ideapress.services.embedding_service import (
    CachedEmbeddingService,
    OpenAIEmbeddingService,
    SentenceTransformerEmbeddingService,
)
from ideapress.services.idea_repository import IdeaRepository
from ideapress.services.publisher_service import PublisherService
from ideapress.services.selection import IdeaSelector
from ideapress.services.uniqueness_gate import UniquenessGate
from ideapress.services.vector_service import VectorService
from ideapress.utils.config import config as default_config


def create_embedding_service(config=default_config):
    """
    Build the embedding provider selected by ``config.embedding_backend``.

    Args:
        config: Settings object

    Returns:
        EmbeddingService instance, wrapped in a cache when enabled
    """
    if config.embedding_backend == "openai":
        service = OpenAIEmbeddingService(config.openai_api_key)
    elif config.embedding_backend == "local":
        service = SentenceTransformerEmbeddingService()
    else:
        raise ValueError(f"Unsupported embedding backend: {config.embedding_backend}")

    if config.embedding_cache_enabled:
        service = CachedEmbeddingService(service)
    return service


def create_pipeline(config=default_config):
    """
    Wire every service from configuration.

    Args:
        config: Settings object

    Returns:
        PublishingPipeline instance
    """
    if not config.pinecone_api_key:
        raise ValueError("PINECONE_API_KEY not configured")

    # Initialize Vector service
    pinecone_client = Pinecone(api_key=config.pinecone_api_key)
    vector_service = VectorService(
        pinecone_client,
        config.pinecone_index_name,
        supports_listing=config.pinecone_list_api,
    )
    repository = IdeaRepository(vector_service)

    embedding_service = create_embedding_service(config)

    return PublishingPipeline(
        embedding_service=embedding_service,
        repository=repository,
        gate=UniquenessGate(repository, threshold=config.similarity_threshold),
        selector=IdeaSelector(embedding_service),
        content_service=GeminiContentService(config.google_ai_api_key, config.google_ai_model),
        publisher_service=PublisherService(
            devto_api_key=config.devto_api_key,
            hashnode_api_key=config.hashnode_api_key,
            hashnode_publication_id=config.hashnode_publication_id,
        ),
        default_platforms=config.publish_platforms,
    )
