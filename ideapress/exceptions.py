"""
Exceptions raised by IdeaPress services.
"""

from typing import Optional


class IdeaPressError(Exception):
    """Base exception for IdeaPress errors."""


class DimensionMismatchError(IdeaPressError, ValueError):
    """Raised when two vectors of different lengths are compared."""

    def __init__(self, left: int, right: int):
        super().__init__(f"Vectors must have the same length (got {left} and {right})")
        self.left = left
        self.right = right


class ExternalServiceError(IdeaPressError):
    """
    Base exception for failures of an external collaborator.

    Attributes:
        step: Name of the sub-step that failed (e.g. "embed", "query", "upsert")
    """

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step

    def __str__(self):
        message = super().__str__()
        if self.step:
            return f"[{self.step}] {message}"
        return message


class ProviderUnavailableError(ExternalServiceError):
    """The embedding provider could not produce an embedding."""


class InvalidInputError(IdeaPressError, ValueError):
    """The embedding provider was given text it cannot embed."""


class StoreUnavailableError(ExternalServiceError):
    """The vector store could not be reached or rejected the request."""


class NotFoundError(IdeaPressError):
    """A record was not present in the vector store."""


class IdeaNotFoundError(NotFoundError):
    """No idea exists with the requested id."""

    def __init__(self, idea_id: str):
        super().__init__(f"Idea not found: {idea_id}")
        self.idea_id = idea_id


class NoUnusedIdeasError(IdeaPressError):
    """Every idea in the pool has already been used."""

    def __init__(self, message: str = "No unused ideas available"):
        super().__init__(message)


class DuplicateIdeaError(IdeaPressError):
    """A new idea was rejected by the uniqueness gate."""

    def __init__(self, result):
        super().__init__(
            f"Similar idea already exists (threshold {result.threshold}, "
            f"best score {result.max_score:.3f})"
        )
        self.result = result


class ContentGenerationError(ExternalServiceError):
    """The content generator failed to produce an article."""


class PublicationError(ExternalServiceError):
    """No platform accepted the article."""

    def __init__(self, message: str, results=None, step: Optional[str] = "publish"):
        super().__init__(message, step=step)
        self.results = results or []
