"""
Variant evaluation.

A ``VariantEvaluator`` scores one focus area's item selection and names
its strengths and weaknesses. The keyword evaluator is deterministic; an
LLM-backed evaluator can be plugged in behind the same interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

from cvmatch.data.models import MatchResult, SelectedItems
from cvmatch.utils.constants import FocusArea
from cvmatch.utils.logger import get_logger

from .analysis import KEYWORD_FOCUS_AREAS, focus_affinity

logger = get_logger(__name__)


@dataclass
class VariantEvaluation:
    """Score and commentary for one variant."""

    score: float
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    reasoning: str = ""


class VariantEvaluator(ABC):
    """Scores a variant's selected items for a focus area."""

    @abstractmethod
    def evaluate(
        self,
        focus_area: FocusArea,
        selected: SelectedItems,
        matches: Sequence[MatchResult],
    ) -> VariantEvaluation:
        """
        Evaluate a selection.

        Args:
            focus_area: Focus the selection was built for.
            selected: Items chosen per category.
            matches: All match results of the run.
        """
        pass


class KeywordVariantEvaluator(VariantEvaluator):
    """
    Deterministic evaluator.

    The score blends three 0-100 parts:
    - alignment: mean match score of the selected items
    - coverage: share of requirements answered by a selected item
    - focus fit: share of selected items showing the focus area's keywords
      (for balanced, the share of focus areas represented at all)
    """

    def __init__(
        self,
        alignment_weight: float = 0.6,
        coverage_weight: float = 0.2,
        focus_weight: float = 0.2,
        strength_threshold: int = 70,
        weakness_threshold: int = 50,
    ):
        self.alignment_weight = alignment_weight
        self.coverage_weight = coverage_weight
        self.focus_weight = focus_weight
        self.strength_threshold = strength_threshold
        self.weakness_threshold = weakness_threshold

    def evaluate(
        self,
        focus_area: FocusArea,
        selected: SelectedItems,
        matches: Sequence[MatchResult],
    ) -> VariantEvaluation:
        items = selected.all_items()
        if not items:
            return VariantEvaluation(
                score=0,
                weaknesses=["No matched profile items to select from"],
                reasoning=f"No items qualified for a {focus_area.value} variant.",
            )

        # Best score each selected item achieved across the run
        best_scores: dict[str, int] = {}
        for match in matches:
            if match.profile_item is None:
                continue
            item_id = match.profile_item.id
            best_scores[item_id] = max(best_scores.get(item_id, 0), match.score)

        selected_ids = {item.id for item in items}
        alignment = sum(best_scores.get(i, 0) for i in selected_ids) / len(selected_ids)

        covered = sum(
            1 for m in matches if m.profile_item is not None and m.profile_item.id in selected_ids
        )
        coverage = covered / len(matches) * 100 if matches else 0.0

        if focus_area == FocusArea.BALANCED:
            represented = sum(
                1
                for area in KEYWORD_FOCUS_AREAS
                if any(focus_affinity(item, area) > 0 for item in items)
            )
            focus_fit = represented / len(KEYWORD_FOCUS_AREAS) * 100
        else:
            showing = sum(1 for item in items if focus_affinity(item, focus_area) > 0)
            focus_fit = showing / len(items) * 100

        score = (
            self.alignment_weight * alignment
            + self.coverage_weight * coverage
            + self.focus_weight * focus_fit
        )

        strengths: list[str] = []
        weaknesses: list[str] = []
        for name in ("experience", "education", "skills", "projects"):
            chosen = getattr(selected, name)
            if not chosen:
                weaknesses.append(f"No {name} selected")
                continue
            average = sum(best_scores.get(item.id, 0) for item in chosen) / len(chosen)
            if average >= self.strength_threshold:
                strengths.append(f"{name.capitalize()} ({round(average)}% average match)")
            elif average < self.weakness_threshold:
                weaknesses.append(f"Weak {name} alignment ({round(average)}%)")

        if focus_area != FocusArea.BALANCED and focus_fit < 50:
            weaknesses.append(f"Limited evidence of {focus_area.value} strengths")
        elif focus_fit >= 50:
            strengths.append(f"Clear {focus_area.value} emphasis")

        reasoning = (
            f"Selected {len(items)} items for a {focus_area.value} focus: "
            f"average match {round(alignment)}%, {covered}/{len(matches)} "
            f"requirements covered."
        )

        return VariantEvaluation(
            score=score,
            strengths=strengths,
            weaknesses=weaknesses,
            reasoning=reasoning,
        )
