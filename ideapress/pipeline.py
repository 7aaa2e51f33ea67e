"""
Publishing pipeline: idea intake and the select-generate-publish run.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ideapress.exceptions import DuplicateIdeaError, PublicationError
from ideapress.models.idea import CreateIdeaRequest, GateResult, Idea
from ideapress.models.publication import PublishOutcome, PublishRequest
from ideapress.services.content_service import GeminiContentService
from ideapress.services.embedding_service import EmbeddingService
from ideapress.services.idea_repository import IdeaRepository
from ideapress.services.publisher_service import PublisherService
from ideapress.services.selection import IdeaSelector
from ideapress.services.uniqueness_gate import UniquenessGate
from ideapress.utils.logger import logger


class PublishingPipeline:
    """Ties the idea pool to content generation and publication."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        repository: IdeaRepository,
        gate: UniquenessGate,
        selector: IdeaSelector,
        content_service: Optional[GeminiContentService] = None,
        publisher_service: Optional[PublisherService] = None,
        default_platforms: Sequence[str] = ("devto", "hashnode"),
    ):
        """
        Initialize the publishing pipeline.

        Args:
            embedding_service: Provider for idea embeddings
            repository: Idea storage
            gate: Uniqueness check for new ideas
            selector: Picks the next idea to publish
            content_service: Article generator, required only for publishing
            publisher_service: Publication sink, required only for publishing
            default_platforms: Platforms used when publish_next is given none
        """
        self.embedding_service = embedding_service
        self.repository = repository
        self.gate = gate
        self.selector = selector
        self.content_service = content_service
        self.publisher_service = publisher_service
        self.default_platforms = list(default_platforms)

    def add_idea(self, request: Union[CreateIdeaRequest, Dict[str, Any]]) -> Idea:
        """
        Validate, embed, gate-check and store a new idea.

        Raises:
            pydantic.ValidationError: If the request is malformed
            DuplicateIdeaError: If the gate rejects the idea
        """
        if not isinstance(request, CreateIdeaRequest):
            request = CreateIdeaRequest(**request)

        embedding = self.embedding_service.embed_idea(request.title, request.description)
        result = self.gate.evaluate(embedding)
        if result.rejected:
            raise DuplicateIdeaError(result)

        return self.repository.create(request.to_idea(), embedding)

    def import_ideas(
        self, requests_: Sequence[Dict[str, Any]]
    ) -> Tuple[List[Idea], List[Tuple[str, GateResult]]]:
        """
        Add several ideas, skipping the ones the gate rejects.

        Returns:
            (added ideas, [(title, gate result) for each rejected idea])
        """
        added, rejected = [], []
        for i, request in enumerate(requests_, 1):
            logger.debug(f"Importing idea {i}/{len(requests_)}: {request.get('title')}")
            try:
                added.append(self.add_idea(request))
            except DuplicateIdeaError as e:
                rejected.append((request.get('title', ''), e.result))
        logger.info(f"Imported {len(added)} ideas, skipped {len(rejected)} duplicates")
        return added, rejected

    def list_ideas(self, unused_only: bool = False) -> List[Idea]:
        ideas = self.repository.list_all()
        if unused_only:
            return [idea for idea in ideas if not idea.used]
        return ideas

    def delete_idea(self, idea_id: str):
        self.repository.delete(idea_id)

    def select_next(self) -> Idea:
        """Choose the next idea without side effects."""
        return self.selector.select_next(self.repository.list_all())

    def publish_next(self, platforms: Optional[Sequence[str]] = None, is_draft: bool = False) -> PublishOutcome:
        """
        Select an idea, write the article, publish it, then mark the idea used.

        The idea is marked used only if at least one platform accepted the
        article, so a failed run does not burn it.

        Raises:
            NoUnusedIdeasError: If there is nothing left to publish
            ContentGenerationError: If the article could not be written
            PublicationError: If every platform failed
        """
        if self.content_service is None or self.publisher_service is None:
            raise RuntimeError("Publishing requires a content service and a publisher service")

        idea = self.select_next()
        logger.info(f"Selected idea: {idea.title}")

        content = self.content_service.generate_article(idea.title, idea.description, idea.tags)
        logger.info("Generated content")

        request = PublishRequest(
            title=idea.title,
            content=content,
            tags=idea.tags,
            is_draft=is_draft,
            platforms=list(platforms or self.default_platforms),
        )
        results = self.publisher_service.publish(request)
        outcome = PublishOutcome(idea_id=idea.id, title=idea.title, results=results)

        if not outcome.succeeded:
            raise PublicationError(f"Publishing '{idea.title}' failed on every platform", results=results)
        logger.info(f"Published to platforms: {', '.join(outcome.succeeded)}")

        self.repository.mark_used(idea.id)
        logger.info("Marked idea as used")
        return outcome
