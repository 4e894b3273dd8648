"""
Match and scoring data models for cvmatch.

Defines per-requirement match results, aggregate scores, CV variants and
their comparison records.
"""

from typing import Optional

from pydantic import Field

from cvmatch.utils.constants import FocusArea, MatchQuality

from .base import DomainModel, MutableModel
from .items import ProfileItem, RequirementItem


NO_MATCH_REASONING = (
    "No matching component found in your CV. "
    "Consider adding relevant experience or skills."
)


class MatchResult(DomainModel):
    """
    Best profile item found for one requirement.

    ``profile_item is None``, ``score == 0`` and ``quality_tier == NONE``
    together form the no-match sentinel; use ``MatchResult.no_match``.
    """

    requirement: RequirementItem
    profile_item: Optional[ProfileItem] = None
    score: int = Field(default=0, ge=0, le=100)
    quality_tier: MatchQuality = MatchQuality.NONE
    reasoning: str = ""

    # Diagnostics
    similarity: float = 0.0
    keyword_bonus: int = Field(default=0, ge=0)

    @classmethod
    def no_match(
        cls, requirement: RequirementItem, reasoning: str = NO_MATCH_REASONING
    ) -> "MatchResult":
        """Build the no-match sentinel for a requirement."""
        return cls(
            requirement=requirement,
            profile_item=None,
            score=0,
            quality_tier=MatchQuality.NONE,
            reasoning=reasoning,
        )

    @property
    def is_match(self) -> bool:
        """True unless this is the no-match sentinel."""
        return self.profile_item is not None

    @property
    def is_valid(self) -> bool:
        """True when the match counts toward aggregate scores."""
        return self.profile_item is not None and self.score > 0


class CategoryScores(MutableModel):
    """Per-category 0-100 scores."""

    experience: int = Field(default=0, ge=0, le=100)
    education: int = Field(default=0, ge=0, le=100)
    skills: int = Field(default=0, ge=0, le=100)
    projects: int = Field(default=0, ge=0, le=100)


class AggregateScore(MutableModel):
    """Overall result of matching a job posting against a profile."""

    overall: int = Field(default=0, ge=0, le=100)
    by_category: CategoryScores = Field(default_factory=CategoryScores)
    unmatched: list[RequirementItem] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class SelectedItems(MutableModel):
    """Profile items chosen for a variant, grouped by aggregate category."""

    experience: list[ProfileItem] = Field(default_factory=list)
    education: list[ProfileItem] = Field(default_factory=list)
    skills: list[ProfileItem] = Field(default_factory=list)
    projects: list[ProfileItem] = Field(default_factory=list)

    def all_items(self) -> list[ProfileItem]:
        return [*self.experience, *self.education, *self.skills, *self.projects]

    def count(self) -> int:
        return len(self.all_items())


class Variant(MutableModel):
    """A CV selection built under one focus area."""

    focus_area: FocusArea
    title: str = ""
    description: str = ""
    score: int = Field(default=0, ge=0, le=100)
    selected_items: SelectedItems = Field(default_factory=SelectedItems)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    reasoning: str = ""


class VariantComparison(MutableModel):
    """Ranked variant with its pros and cons."""

    variant: Variant
    rank: int
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)


class FocusSignals(MutableModel):
    """Which focus areas a job posting emphasises."""

    technical: bool = False
    leadership: bool = False
    impact: bool = False
    innovation: bool = False


class FocusDistribution(MutableModel):
    """Score-weighted keyword presence of a profile per focus area."""

    technical: float = 0.0
    leadership: float = 0.0
    impact: float = 0.0
    innovation: float = 0.0


class FocusAreaAnalysis(MutableModel):
    """Suggested focus areas for variant generation."""

    suggested_focus_areas: list[FocusArea] = Field(default_factory=list)
    posting_signals: FocusSignals = Field(default_factory=FocusSignals)
    distribution: FocusDistribution = Field(default_factory=FocusDistribution)


class EmbeddingCoverage(MutableModel):
    """How many of an owner's profile items already carry an embedding."""

    total: int = 0
    with_embedding: int = 0
    without_embedding: int = 0
    percentage: int = 0
