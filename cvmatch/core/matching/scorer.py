"""
Per-pair scoring of a requirement against its candidate profile items.

The score of a pair is its cosine similarity plus a small bonus for
technology keywords the requirement and the item share. The best pair
wins; a best pair under the minimum score yields the no-match sentinel.
"""

from typing import Optional, Sequence

import numpy as np

from cvmatch.data.models import MatchResult, ProfileItem, RequirementItem
from cvmatch.ml.embeddings import EmbeddingClient, cosine_similarity
from cvmatch.utils.config import get_settings
from cvmatch.utils.constants import MatchQuality
from cvmatch.utils.logger import get_logger
from cvmatch.utils.scoring import round_half_up

from .explanation import (
    ExplanationGenerator,
    TemplateExplanationGenerator,
    fallback_explanation,
)
from .keywords import TechnologyVocabulary, extract_technology_tokens

logger = get_logger(__name__)

__all__ = [
    "PairScorer",
    "extract_technology_tokens",
    "round_half_up",
]


class PairScorer:
    """
    Picks the best candidate for a requirement and scores it 0-100.

    Attributes:
        min_match_score: Combined score below which no match is reported.
        keyword_bonus_max: Bonus points awarded when every requirement
            technology token appears in the candidate.
    """

    def __init__(
        self,
        client: EmbeddingClient,
        explainer: Optional[ExplanationGenerator] = None,
        vocabulary: Optional[TechnologyVocabulary] = None,
        min_match_score: Optional[float] = None,
        keyword_bonus_max: Optional[int] = None,
    ):
        settings = get_settings().matching
        self.client = client
        self.vocabulary = vocabulary
        self.explainer = explainer or TemplateExplanationGenerator(vocabulary)
        self.min_match_score = (
            min_match_score if min_match_score is not None else settings.min_match_score
        )
        self.keyword_bonus_max = (
            keyword_bonus_max if keyword_bonus_max is not None else settings.keyword_bonus_max
        )

    def keyword_bonus(self, requirement: RequirementItem, item: ProfileItem) -> int:
        """
        Bonus points for technology tokens shared by requirement and item.

        Returns:
            ``round(max * matched / total)``; 0 when the requirement names
            no known technology.
        """
        wanted = extract_technology_tokens(requirement.text, self.vocabulary)
        if not wanted:
            return 0
        offered = set(extract_technology_tokens(item.searchable_text(), self.vocabulary))
        matched = sum(1 for token in wanted if token in offered)
        return round_half_up(self.keyword_bonus_max * matched / len(wanted))

    def score_match(
        self,
        requirement: RequirementItem,
        candidates: Sequence[ProfileItem],
    ) -> MatchResult:
        """
        Score a requirement against its candidates.

        Candidates whose embedding is missing or of the wrong length are
        embedded first; those that still cannot be embedded are skipped.

        Args:
            requirement: Requirement with an embedding.
            candidates: Candidate profile items, in retrieval order.

        Returns:
            The best match, or the no-match sentinel.
        """
        if not requirement.embedding:
            logger.warning(f"Requirement {requirement.id} has no embedding, skipping")
            return MatchResult.no_match(requirement)

        if not candidates:
            return MatchResult.no_match(requirement)

        query = np.asarray(requirement.embedding, dtype=np.float64)
        dimension = len(requirement.embedding)
        hydrated = self.client.hydrate_items(candidates, dimension=dimension)

        best: Optional[tuple[float, float, int, ProfileItem]] = None
        for item in hydrated:
            if not item.has_embedding_of(dimension):
                logger.warning(
                    f"Excluding profile item {item.id}: no usable embedding "
                    f"for requirement {requirement.id}"
                )
                continue

            similarity = cosine_similarity(query, item.embedding)
            if np.isnan(similarity):
                logger.debug(f"Excluding profile item {item.id}: zero-norm embedding")
                continue

            bonus = self.keyword_bonus(requirement, item)
            combined = min(similarity + bonus / 100, 1.0)

            if best is None or combined > best[0]:
                best = (combined, similarity, bonus, item)

        if best is None or best[0] < self.min_match_score:
            return MatchResult.no_match(requirement)

        combined, similarity, bonus, item = best
        score = max(0, min(100, round_half_up(combined * 100)))

        return MatchResult(
            requirement=requirement,
            profile_item=item,
            score=score,
            quality_tier=MatchQuality.from_score(score),
            reasoning=self._explain(requirement, item, score),
            similarity=similarity,
            keyword_bonus=bonus,
        )

    def _explain(self, requirement: RequirementItem, item: ProfileItem, score: int) -> str:
        try:
            reasoning = self.explainer.explain(requirement, item, score)
        except Exception as e:
            logger.warning(f"Explanation generator failed, using template: {e}")
            return fallback_explanation(score)
        return reasoning.strip() if reasoning and reasoning.strip() else fallback_explanation(score)
