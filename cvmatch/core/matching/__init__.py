"""Requirement-to-profile matching: retrieval, scoring, aggregation and the engine facade."""

from .aggregator import Aggregator
from .explanation import (
    ExplanationGenerator,
    TemplateExplanationGenerator,
    fallback_explanation,
)
from .keywords import TechnologyVocabulary, extract_technology_tokens
from .matching_engine import (
    NO_PROFILE_ITEMS_REASONING,
    MatchingEngine,
    create_matching_engine,
)
from .retriever import CandidateRetriever, TierOutcome, TierStatus
from .scorer import PairScorer, round_half_up

__all__ = [
    "Aggregator",
    "ExplanationGenerator",
    "TemplateExplanationGenerator",
    "fallback_explanation",
    "TechnologyVocabulary",
    "extract_technology_tokens",
    "NO_PROFILE_ITEMS_REASONING",
    "MatchingEngine",
    "create_matching_engine",
    "CandidateRetriever",
    "TierOutcome",
    "TierStatus",
    "PairScorer",
    "round_half_up",
]
