"""
Aggregation of per-requirement matches into an overall score.

Required and optional requirements are averaged separately and blended
70/30 when both kinds are present. Category scores only count a match
toward a CV category its requirement category can bridge to.
"""

from typing import Optional, Sequence

from cvmatch.data.models import AggregateScore, CategoryScores, MatchResult
from cvmatch.utils.config import get_settings
from cvmatch.utils.constants import (
    CATEGORY_BRIDGES,
    CATEGORY_SUGGESTIONS,
    GENERIC_SUGGESTIONS,
    MAX_MISSING_SKILLS,
    SCORE_CATEGORIES,
    RequirementCategory,
)
from cvmatch.utils.logger import get_logger

from .keywords import TechnologyVocabulary, extract_technology_tokens
from .scorer import round_half_up

logger = get_logger(__name__)


def _mean(values: Sequence[int]) -> float:
    return sum(values) / len(values) if values else 0.0


class Aggregator:
    """Turns a list of match results into an ``AggregateScore``."""

    def __init__(
        self,
        required_weight: Optional[float] = None,
        optional_weight: Optional[float] = None,
        suggestion_threshold: Optional[int] = None,
        vocabulary: Optional[TechnologyVocabulary] = None,
    ):
        settings = get_settings().matching
        self.vocabulary = vocabulary
        self.required_weight = (
            required_weight if required_weight is not None else settings.required_weight
        )
        self.optional_weight = (
            optional_weight if optional_weight is not None else settings.optional_weight
        )
        self.suggestion_threshold = (
            suggestion_threshold
            if suggestion_threshold is not None
            else settings.suggestion_threshold
        )

    def aggregate(self, matches: Sequence[MatchResult]) -> AggregateScore:
        """
        Compute overall and per-category scores plus improvement suggestions.

        Args:
            matches: One result per requirement, sentinels included.

        Returns:
            AggregateScore; all zeros with generic suggestions when nothing
            matched.
        """
        valid = [m for m in matches if m.is_valid]
        unmatched = [m.requirement for m in matches if not m.is_match]

        overall = self.overall_score(matches)
        by_category = self.category_scores(valid)
        missing_skills = self.missing_skills(matches)
        suggestions = self.suggestions(matches, valid, by_category, unmatched, missing_skills)

        logger.debug(
            f"Aggregated {len(matches)} matches: overall={overall}, "
            f"valid={len(valid)}, unmatched={len(unmatched)}"
        )

        return AggregateScore(
            overall=overall,
            by_category=by_category,
            unmatched=unmatched,
            missing_skills=missing_skills,
            suggestions=suggestions,
        )

    def overall_score(self, matches: Sequence[MatchResult]) -> int:
        """Weighted blend of required and optional averages (0-100)."""
        required = [m for m in matches if m.requirement.is_required]
        optional = [m for m in matches if not m.requirement.is_required]

        required_avg = _mean([m.score for m in required if m.is_valid])
        optional_avg = _mean([m.score for m in optional if m.is_valid])

        if required and optional:
            overall = self.required_weight * required_avg + self.optional_weight * optional_avg
        elif required:
            overall = required_avg
        elif optional:
            overall = optional_avg
        else:
            return 0

        return max(0, min(100, round_half_up(overall)))

    def category_scores(self, valid: Sequence[MatchResult]) -> CategoryScores:
        """Mean score per CV category over bridged valid matches."""
        scores = {}
        for name, profile_category in SCORE_CATEGORIES.items():
            contributing = [
                m.score
                for m in valid
                if m.profile_item.category == profile_category
                and profile_category in CATEGORY_BRIDGES[m.requirement.category]
            ]
            scores[name] = round_half_up(_mean(contributing)) if contributing else 0
        return CategoryScores(**scores)

    def suggestions(
        self,
        matches: Sequence[MatchResult],
        valid: Sequence[MatchResult],
        by_category: CategoryScores,
        unmatched: Sequence,
        missing_skills: Sequence[str] = (),
    ) -> list[str]:
        """Improvement suggestions, in a fixed order."""
        if not valid:
            return list(GENERIC_SUGGESTIONS)

        suggestions = []
        has_qualification = any(
            m.requirement.category == RequirementCategory.QUALIFICATION for m in matches
        )

        for name in ("experience", "skills", "education", "projects"):
            if getattr(by_category, name) >= self.suggestion_threshold:
                continue
            if name == "education" and not has_qualification:
                continue
            suggestions.append(CATEGORY_SUGGESTIONS[name])

        if missing_skills:
            suggestions.append(f"Consider adding these skills: {', '.join(missing_skills)}")

        if unmatched:
            suggestions.append(
                f"{len(unmatched)} requirements have no matching components in your CV"
            )

        return suggestions

    def missing_skills(self, matches: Sequence[MatchResult]) -> list[str]:
        """
        Technologies the requirements name that no matched item mentions.

        Returns:
            Up to ``MAX_MISSING_SKILLS`` tokens, in order of first mention.
        """
        wanted: list[str] = []
        for match in matches:
            for token in extract_technology_tokens(match.requirement.text, self.vocabulary):
                if token not in wanted:
                    wanted.append(token)
        if not wanted:
            return []

        offered: set[str] = set()
        for match in matches:
            if match.profile_item is not None:
                offered.update(
                    extract_technology_tokens(
                        match.profile_item.searchable_text(), self.vocabulary
                    )
                )

        return [token for token in wanted if token not in offered][:MAX_MISSING_SKILLS]
