"""
Models for article publication requests and results.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

Platform = Literal["devto", "hashnode"]


class PublishRequest(BaseModel):
    """An article ready to be pushed to one or more platforms."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=100)
    tags: List[str] = Field(..., min_length=1, max_length=5)
    is_draft: bool = False
    platforms: List[Platform] = Field(default_factory=lambda: ["devto", "hashnode"], min_length=1)


class PublishResult(BaseModel):
    """Result of publishing to a single platform."""

    platform: str
    success: bool
    article: Optional[Any] = None
    error: Optional[str] = None


class PublishOutcome(BaseModel):
    """Result of a full select-generate-publish run."""

    idea_id: str
    title: str
    results: List[PublishResult]

    @property
    def succeeded(self) -> List[str]:
        return [result.platform for result in self.results if result.success]
