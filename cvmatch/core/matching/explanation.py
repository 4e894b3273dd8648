"""
Match explanations.

An ``ExplanationGenerator`` writes the short human-readable reasoning
attached to a match. The default template generator is deterministic;
an LLM-backed generator can be plugged in behind the same interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cvmatch.data.models import ProfileItem, RequirementItem
from cvmatch.utils.constants import QUALITY_ADJECTIVES, MatchQuality

from .keywords import TechnologyVocabulary, extract_technology_tokens


def quality_adjective(score: int) -> str:
    """Adjective for a score's quality tier (strong/good/fair/weak)."""
    return QUALITY_ADJECTIVES[MatchQuality.from_score(score).value]


def fallback_explanation(score: int) -> str:
    """Reasoning used when an explanation generator fails."""
    adjective = quality_adjective(score).capitalize()
    return (
        f"{adjective} semantic similarity ({score}%) between job requirement "
        f"and your experience."
    )


class ExplanationGenerator(ABC):
    """Writes the reasoning for a requirement/profile item pair."""

    @abstractmethod
    def explain(
        self,
        requirement: RequirementItem,
        profile_item: ProfileItem,
        score: int,
    ) -> str:
        """Return a one or two sentence explanation of the match."""
        pass


class TemplateExplanationGenerator(ExplanationGenerator):
    """Deterministic explanation naming the matched item and shared technologies."""

    def __init__(self, vocabulary: Optional[TechnologyVocabulary] = None):
        self.vocabulary = vocabulary

    def explain(
        self,
        requirement: RequirementItem,
        profile_item: ProfileItem,
        score: int,
    ) -> str:
        subject = f'Your {profile_item.category.value} "{profile_item.title}"'
        if profile_item.organization:
            subject += f" at {profile_item.organization}"

        sentence = (
            f"{subject} is a {quality_adjective(score)} match ({score}%) "
            f"for this {requirement.category.value}."
        )

        required = extract_technology_tokens(requirement.text, self.vocabulary)
        if required:
            offered = set(
                extract_technology_tokens(profile_item.searchable_text(), self.vocabulary)
            )
            shared = [token for token in required if token in offered]
            if shared:
                sentence += f" Shared technologies: {', '.join(shared)}."

        return sentence
