"""
Selection of the next idea to publish.

Among unused ideas, picks the one whose closest match among the most
recently used ideas is the weakest (min-max dissimilarity). With no usage
history yet, picks an unused idea at random.
"""

import random
from typing import List, Optional, Sequence

from ideapress.exceptions import NoUnusedIdeasError
from ideapress.models.idea import Idea
from ideapress.services.embedding_service import EmbeddingService
from ideapress.similarity import max_similarity
from ideapress.utils.constants import RECENT_HISTORY_SIZE
from ideapress.utils.logger import logger


class IdeaSelector:
    """Chooses the idea least similar to what was published recently."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        recent_size: int = RECENT_HISTORY_SIZE,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the selector.

        Args:
            embedding_service: Provider used to embed recent and candidate ideas
            recent_size: How many of the latest used ideas count as recent history
            rng: Random source for the cold-start pick
        """
        self.embedding_service = embedding_service
        self.recent_size = recent_size
        self.rng = rng or random.Random()

    def recent_history(self, ideas: Sequence[Idea]) -> List[Idea]:
        """The most recently used ideas, newest first."""
        used = [idea for idea in ideas if idea.used and idea.used_at is not None]
        used.sort(key=lambda idea: idea.used_at, reverse=True)
        return used[:self.recent_size]

    def select_next(self, ideas: Sequence[Idea]) -> Idea:
        """
        Pick the next idea to publish. Does not mark it as used.

        Args:
            ideas: The full idea pool, used and unused

        Returns:
            The selected unused idea

        Raises:
            NoUnusedIdeasError: If every idea has been used
        """
        ideas = list(ideas)
        unused = [idea for idea in ideas if not idea.used]
        if not unused:
            raise NoUnusedIdeasError()

        recent = self.recent_history(ideas)
        logger.info(
            f"Selecting from {len(unused)} unused ideas "
            f"({len(ideas) - len(unused)} used, {len(recent)} recent)"
        )

        if not recent:
            selected = self.rng.choice(unused)
            logger.info(f"No usage history, picked {selected.id} at random: {selected.title}")
            return selected

        recent_embeddings = [
            self.embedding_service.embed_idea(idea.title, idea.description) for idea in recent
        ]

        selected = unused[0]
        best_score = 1.0
        for candidate in unused:
            embedding = self.embedding_service.embed_idea(candidate.title, candidate.description)
            score = max_similarity(embedding, recent_embeddings)
            logger.debug(f"Candidate {candidate.id} max similarity to recent: {score:.4f}")
            # Strict comparison keeps the earliest candidate on ties
            if score < best_score:
                best_score = score
                selected = candidate

        logger.info(f"Selected {selected.id} (max similarity {best_score:.4f}): {selected.title}")
        return selected
