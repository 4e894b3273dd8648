"""
Pydantic data models for cvmatch.

This module provides the engine's inputs (requirement and profile items)
and its results (matches, aggregate scores, variants).
"""

# Base models
from .base import DomainModel, MutableModel, coerce_vector

# Input items
from .items import ProfileItem, RequirementItem

# Results
from .match import (
    NO_MATCH_REASONING,
    AggregateScore,
    CategoryScores,
    EmbeddingCoverage,
    FocusAreaAnalysis,
    FocusDistribution,
    FocusSignals,
    MatchResult,
    SelectedItems,
    Variant,
    VariantComparison,
)

__all__ = [
    # Base
    "DomainModel",
    "MutableModel",
    "coerce_vector",
    # Items
    "ProfileItem",
    "RequirementItem",
    # Results
    "NO_MATCH_REASONING",
    "AggregateScore",
    "CategoryScores",
    "EmbeddingCoverage",
    "FocusAreaAnalysis",
    "FocusDistribution",
    "FocusSignals",
    "MatchResult",
    "SelectedItems",
    "Variant",
    "VariantComparison",
]
