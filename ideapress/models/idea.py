"""
Shared data models for ideas and uniqueness checks.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Idea(BaseModel):
    """Model representing a blog-post idea in the pool."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Opaque unique identifier")
    title: str = Field(..., min_length=1, max_length=200, description="Short title of the post")
    description: str = Field(..., description="What the post should cover")
    tags: List[str] = Field(..., min_length=1, max_length=5, description="Ordered list of topic tags")
    created_at: datetime = Field(default_factory=utc_now)
    used: bool = False
    used_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_used_at(self) -> "Idea":
        if self.used and self.used_at is None:
            raise ValueError("used_at is required once an idea is used")
        if not self.used and self.used_at is not None:
            raise ValueError("used_at must be empty for an unused idea")
        return self

    def mark_used(self, when: Optional[datetime] = None) -> "Idea":
        """Return a copy of this idea flagged as used."""
        if self.used:
            return self
        return self.model_copy(update={"used": True, "used_at": when or utc_now()})


class CreateIdeaRequest(BaseModel):
    """Validated input for creating a new idea."""

    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=20, max_length=1000)
    tags: List[str] = Field(..., min_length=1, max_length=5)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: List[str]) -> List[str]:
        tags = [tag.strip() for tag in value if tag.strip()]
        if not tags:
            raise ValueError("At least one tag is required")
        return tags

    def to_idea(self) -> Idea:
        return Idea(title=self.title, description=self.description, tags=self.tags)


class IdeaMatch(BaseModel):
    """An idea returned by a nearest-neighbour query, with its score."""

    idea: Idea
    score: float


class IdeaConflict(BaseModel):
    """An existing idea that is too similar to a candidate."""

    id: str
    title: str
    similarity: float


class GateResult(BaseModel):
    """Outcome of a uniqueness check."""

    accepted: bool
    threshold: float
    top_k: int
    max_score: float = 0.0
    conflicts: List[IdeaConflict] = Field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return not self.accepted


def embedding_text(title: str, description: str) -> str:
    """Combine title and description into the text that gets embedded."""
    return f"{title}\n\n{description}"
