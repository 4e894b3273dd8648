"""
CV variant building and ranking.

For each focus area the ranker picks the best matched items per CV
category, has an evaluator score the selection, and orders the variants
by score.
"""

import math
from typing import Mapping, Optional, Sequence

from cvmatch.data.models import (
    MatchResult,
    ProfileItem,
    SelectedItems,
    Variant,
    VariantComparison,
)
from cvmatch.utils.config import get_settings
from cvmatch.utils.constants import (
    FOCUS_AREA_DESCRIPTIONS,
    NO_WEAKNESSES_MESSAGE,
    SCORE_CATEGORIES,
    VARIANT_SELECTION_LIMITS,
    FocusArea,
)
from cvmatch.utils.logger import get_logger
from cvmatch.utils.scoring import round_half_up

from .analysis import focus_affinity
from .evaluator import KeywordVariantEvaluator, VariantEvaluation, VariantEvaluator

logger = get_logger(__name__)

# Profile category -> SelectedItems field
_CATEGORY_FIELDS = {category: name for name, category in SCORE_CATEGORIES.items()}


class VariantRanker:
    """Builds one variant per focus area and ranks them."""

    def __init__(
        self,
        evaluator: Optional[VariantEvaluator] = None,
        min_score: Optional[int] = None,
        limits: Optional[Mapping[str, int]] = None,
    ):
        """
        Initialize the ranker.

        Args:
            evaluator: Variant evaluator. Defaults to ``KeywordVariantEvaluator``.
            min_score: Minimum match score for an item to be selectable.
            limits: Maximum items per category.
        """
        self.evaluator = evaluator or KeywordVariantEvaluator()
        self.min_score = (
            min_score if min_score is not None else get_settings().matching.variant_min_score
        )
        self.limits = dict(limits or VARIANT_SELECTION_LIMITS)

    def eligible_matches(self, matches: Sequence[MatchResult]) -> list[tuple[int, MatchResult]]:
        """
        Matches that may feed a variant, one per profile item.

        Returns:
            ``(input_index, match)`` pairs keeping the highest-scoring match
            per item id, in input order.
        """
        best: dict[str, tuple[int, MatchResult]] = {}
        for index, match in enumerate(matches):
            if match.profile_item is None or match.score < self.min_score:
                continue
            item_id = match.profile_item.id
            current = best.get(item_id)
            if current is None or match.score > current[1].score:
                best[item_id] = (index, match)
        return sorted(best.values(), key=lambda pair: pair[0])

    def select_items(
        self,
        matches: Sequence[MatchResult],
        focus_area: FocusArea,
    ) -> SelectedItems:
        """
        Pick the top items per category for a focus area.

        Items are ordered by focus affinity, then match score, then input order.
        """
        buckets: dict[str, list[tuple[int, int, int, ProfileItem]]] = {
            name: [] for name in SCORE_CATEGORIES
        }
        for index, match in self.eligible_matches(matches):
            item = match.profile_item
            field_name = _CATEGORY_FIELDS[item.category]
            affinity = focus_affinity(item, focus_area)
            buckets[field_name].append((-affinity, -match.score, index, item))

        selected = {}
        for name, entries in buckets.items():
            entries.sort(key=lambda entry: entry[:3])
            selected[name] = [entry[3] for entry in entries[: self.limits.get(name, 0)]]
        return SelectedItems(**selected)

    def build_variant(self, matches: Sequence[MatchResult], focus_area: FocusArea) -> Variant:
        """Build and evaluate the variant for one focus area."""
        selected = self.select_items(matches, focus_area)
        evaluation = self._evaluate(focus_area, selected, matches)
        score = max(0, min(100, round_half_up(evaluation.score)))

        return Variant(
            focus_area=focus_area,
            title=f"{focus_area.value.capitalize()} Focus",
            description=FOCUS_AREA_DESCRIPTIONS[focus_area],
            score=score,
            selected_items=selected,
            strengths=list(evaluation.strengths),
            weaknesses=list(evaluation.weaknesses),
            reasoning=evaluation.reasoning,
        )

    def rank_variants(
        self,
        matches: Sequence[MatchResult],
        focus_areas: Sequence[FocusArea],
    ) -> list[Variant]:
        """
        Build one variant per focus area, highest score first.

        Variants with equal scores keep the order of ``focus_areas``.
        """
        variants = [self.build_variant(matches, FocusArea(area)) for area in focus_areas]
        variants.sort(key=lambda variant: variant.score, reverse=True)

        if variants:
            logger.info(
                f"Ranked {len(variants)} variants; best: "
                f"{variants[0].focus_area.value} ({variants[0].score})"
            )
        return variants

    def compare_variants(self, variants: Sequence[Variant]) -> list[VariantComparison]:
        """Rank variants and list pros and cons for each."""
        ordered = sorted(variants, key=lambda variant: variant.score, reverse=True)
        comparisons = []
        for rank, variant in enumerate(ordered, start=1):
            pros = [f"Score: {variant.score}/100"]
            if variant.strengths:
                pros.append(f"Strong in: {', '.join(variant.strengths)}")
            if variant.focus_area == FocusArea.BALANCED:
                pros.append("Well-rounded approach")
            else:
                pros.append(f"Optimized for {variant.focus_area.value}")

            if variant.weaknesses:
                cons = [f"Could improve: {', '.join(variant.weaknesses)}"]
            else:
                cons = [NO_WEAKNESSES_MESSAGE]

            comparisons.append(
                VariantComparison(variant=variant, rank=rank, pros=pros, cons=cons)
            )
        return comparisons

    def _evaluate(
        self,
        focus_area: FocusArea,
        selected: SelectedItems,
        matches: Sequence[MatchResult],
    ) -> VariantEvaluation:
        try:
            evaluation = self.evaluator.evaluate(focus_area, selected, matches)
            if not math.isfinite(evaluation.score):
                raise ValueError(f"non-finite variant score {evaluation.score!r}")
            return evaluation
        except Exception as e:
            if isinstance(self.evaluator, KeywordVariantEvaluator):
                raise
            logger.warning(
                f"Variant evaluator failed for {focus_area.value}, "
                f"using keyword evaluation: {e}"
            )
            return KeywordVariantEvaluator().evaluate(focus_area, selected, matches)
