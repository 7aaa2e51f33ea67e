"""
Uniqueness gate: rejects new ideas that are too close to an existing one.
"""

from typing import List, Optional

from ideapress.models.idea import GateResult, IdeaConflict
from ideapress.services.idea_repository import IdeaRepository
from ideapress.utils.logger import logger
from ideapress.utils.constants import (
    GATE_TOP_K,
    MAX_REPORTED_CONFLICTS,
    SIMILARITY_THRESHOLD,
)


class UniquenessGate:
    """Accept/reject check run once per idea, before it is stored."""

    def __init__(
        self,
        repository: IdeaRepository,
        threshold: float = SIMILARITY_THRESHOLD,
        top_k: int = GATE_TOP_K,
    ):
        """
        Initialize the gate.

        Args:
            repository: Repository to search for near neighbours
            threshold: Scores at or above this reject the candidate
            top_k: Number of nearest ideas to inspect
        """
        self.repository = repository
        self.threshold = threshold
        self.top_k = top_k

    def evaluate(
        self,
        candidate_embedding: List[float],
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> GateResult:
        """
        Decide whether a candidate is unique enough to store.

        Args:
            candidate_embedding: Embedding of the candidate idea
            top_k: Override for the number of neighbours to inspect
            threshold: Override for the rejection threshold

        Returns:
            GateResult carrying the active threshold and, on rejection, the
            closest conflicting ideas (at most three)
        """
        top_k = self.top_k if top_k is None else top_k
        threshold = self.threshold if threshold is None else threshold

        matches = self.repository.query(candidate_embedding, top_k=top_k)
        matches = sorted(matches, key=lambda match_: match_.score, reverse=True)
        max_score = matches[0].score if matches else 0.0

        if matches and max_score >= threshold:
            conflicts = [
                IdeaConflict(id=match_.idea.id, title=match_.idea.title, similarity=match_.score)
                for match_ in matches[:MAX_REPORTED_CONFLICTS]
            ]
            logger.info(
                f"Rejected candidate: best score {max_score:.4f} >= threshold {threshold} "
                f"(top_k={top_k}, closest: {conflicts[0].title})"
            )
            return GateResult(
                accepted=False,
                threshold=threshold,
                top_k=top_k,
                max_score=max_score,
                conflicts=conflicts,
            )

        logger.info(
            f"Accepted candidate: best score {max_score:.4f} < threshold {threshold} "
            f"(top_k={top_k}, neighbours={len(matches)})"
        )
        return GateResult(accepted=True, threshold=threshold, top_k=top_k, max_score=max_score)
