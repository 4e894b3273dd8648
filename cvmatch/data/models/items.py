"""
Requirement and profile item models.

Requirement items come from the job-posting extraction step, profile items
from profile management. Both are read-only inputs to the engine.
"""

from typing import Optional

from pydantic import Field, field_validator

from cvmatch.utils.constants import ProfileCategory, RequirementCategory

from .base import DomainModel, coerce_vector


class RequirementItem(DomainModel):
    """A structured unit extracted from a job posting."""

    id: str
    category: RequirementCategory
    title: str
    description: str = ""
    is_required: bool = Field(default=False, alias="isRequired")
    level: Optional[str] = None
    embedding: Optional[list[float]] = None

    @field_validator("embedding", mode="before")
    @classmethod
    def coerce_embedding(cls, v):
        return coerce_vector(v)

    @property
    def text(self) -> str:
        """Title and description, as used for keyword detection and embedding."""
        return f"{self.title} {self.description}".strip()

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)


class ProfileItem(DomainModel):
    """A structured unit of a candidate's background."""

    id: str
    owner_id: Optional[str] = None
    category: ProfileCategory
    title: str
    organization: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    highlights: list[str] = Field(default_factory=list)
    embedding: Optional[list[float]] = None

    @field_validator("embedding", mode="before")
    @classmethod
    def coerce_embedding(cls, v):
        return coerce_vector(v)

    @field_validator("highlights", mode="before")
    @classmethod
    def default_highlights(cls, v):
        """Treat a missing highlights list as empty."""
        return v or []

    def embedding_text(self) -> str:
        """
        Build the canonical text used to embed this item.

        Returns:
            ``"{title} at {organization} - {description} {highlights}"``,
            omitting the organization part when absent.
        """
        head = self.title
        if self.organization:
            head = f"{head} at {self.organization}"
        body = " ".join(
            part for part in (self.description or "", ", ".join(self.highlights)) if part
        )
        return f"{head} - {body}" if body else head

    def searchable_text(self) -> str:
        """Lowercased title, description and highlights for keyword checks."""
        return " ".join(
            [self.title, self.organization or "", self.description or "", " ".join(self.highlights)]
        ).lower()

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)

    def has_embedding_of(self, dimension: int) -> bool:
        """Check whether the stored embedding is usable at the given dimension."""
        return bool(self.embedding) and len(self.embedding) == dimension
