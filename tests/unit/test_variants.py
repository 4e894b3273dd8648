"""
Tests for cvmatch.core.variants: item selection, evaluation, ranking and
focus-area analysis.
"""

import pytest

from cvmatch.core.variants import (
    KeywordVariantEvaluator,
    VariantEvaluation,
    VariantEvaluator,
    VariantRanker,
    analyze_focus_areas,
    component_distribution,
    focus_affinity,
)
from cvmatch.data.models import SelectedItems
from cvmatch.utils.constants import NO_WEAKNESSES_MESSAGE, FocusArea, ProfileCategory


class FixedEvaluator(VariantEvaluator):
    def __init__(self, scores, weaknesses=None):
        self.scores = scores
        self.weaknesses = weaknesses or {}

    def evaluate(self, focus_area, selected, matches):
        return VariantEvaluation(
            score=self.scores.get(focus_area, 0),
            strengths=["Experience"] if self.scores.get(focus_area, 0) >= 70 else [],
            weaknesses=self.weaknesses.get(focus_area, []),
            reasoning="fixed",
        )


class ExplodingEvaluator(VariantEvaluator):
    def evaluate(self, focus_area, selected, matches):
        raise RuntimeError("model unavailable")


@pytest.fixture
def ranker():
    return VariantRanker(min_score=40)


# ── Item selection ──────────────────────────────────────────────────────────


class TestEligibility:
    def test_below_min_score_excluded(self, ranker, make_match):
        matches = [make_match(39), make_match(40), make_match(0)]
        eligible = ranker.eligible_matches(matches)
        assert [index for index, _ in eligible] == [1]

    def test_duplicate_item_keeps_best_match(self, ranker, make_match, make_profile_item):
        item = make_profile_item()
        matches = [make_match(60, profile_item=item), make_match(90, profile_item=item)]
        eligible = ranker.eligible_matches(matches)
        assert len(eligible) == 1
        assert eligible[0][1].score == 90

    def test_item_selected_at_most_once(self, ranker, make_match, make_profile_item):
        item = make_profile_item()
        matches = [make_match(70, profile_item=item) for _ in range(3)]
        selected = ranker.select_items(matches, FocusArea.BALANCED)
        assert [i.id for i in selected.all_items()] == [item.id]


class TestSelection:
    def test_category_limits(self, ranker, make_match, make_profile_item):
        matches = [
            make_match(50 + n, profile_item=make_profile_item(category=ProfileCategory.EXPERIENCE))
            for n in range(7)
        ]
        matches += [
            make_match(60, profile_item=make_profile_item(category=ProfileCategory.EDUCATION))
            for _ in range(4)
        ]
        selected = ranker.select_items(matches, FocusArea.BALANCED)
        assert len(selected.experience) == 5
        assert len(selected.education) == 3
        assert selected.skills == []

    def test_items_grouped_by_category(self, ranker, make_match, make_profile_item):
        skill = make_profile_item(title="Python", category=ProfileCategory.SKILL)
        project = make_profile_item(title="CLI tool", category=ProfileCategory.PROJECT)
        selected = ranker.select_items(
            [make_match(70, profile_item=skill), make_match(70, profile_item=project)],
            FocusArea.BALANCED,
        )
        assert selected.skills == [skill]
        assert selected.projects == [project]

    def test_balanced_orders_by_score(self, ranker, make_match, make_profile_item):
        low = make_profile_item(title="Support analyst")
        high = make_profile_item(title="Data analyst")
        selected = ranker.select_items(
            [make_match(55, profile_item=low), make_match(85, profile_item=high)],
            FocusArea.BALANCED,
        )
        assert selected.experience == [high, low]

    def test_focus_affinity_beats_score(self, ranker, make_match, make_profile_item):
        analyst = make_profile_item(title="Data analyst")
        lead = make_profile_item(title="Team lead", description="Mentored five developers")
        selected = ranker.select_items(
            [make_match(90, profile_item=analyst), make_match(60, profile_item=lead)],
            FocusArea.LEADERSHIP,
        )
        assert selected.experience == [lead, analyst]

    def test_ties_keep_input_order(self, ranker, make_match, make_profile_item):
        first = make_profile_item(title="Analyst A")
        second = make_profile_item(title="Analyst B")
        selected = ranker.select_items(
            [make_match(70, profile_item=first), make_match(70, profile_item=second)],
            FocusArea.IMPACT,
        )
        assert selected.experience == [first, second]

    def test_balanced_affinity_is_zero(self, make_profile_item):
        item = make_profile_item(title="Lead engineer", description="Grew revenue 20%")
        assert focus_affinity(item, FocusArea.BALANCED) == 0
        assert focus_affinity(item, FocusArea.LEADERSHIP) == 1
        assert focus_affinity(item, FocusArea.IMPACT) == 2


# ── Evaluation ──────────────────────────────────────────────────────────────


class TestKeywordEvaluator:
    def test_empty_selection(self):
        evaluation = KeywordVariantEvaluator().evaluate(FocusArea.TECHNICAL, SelectedItems(), [])
        assert evaluation.score == 0
        assert evaluation.weaknesses == ["No matched profile items to select from"]

    def test_score_blends_alignment_coverage_and_focus(self, make_match, make_profile_item):
        item = make_profile_item(title="Python developer")
        matches = [make_match(80, profile_item=item)]
        evaluation = KeywordVariantEvaluator().evaluate(
            FocusArea.TECHNICAL, SelectedItems(experience=[item]), matches
        )
        assert evaluation.score == pytest.approx(88)
        assert "Experience (80% average match)" in evaluation.strengths
        assert "Clear technical emphasis" in evaluation.strengths
        assert "No skills selected" in evaluation.weaknesses

    def test_limited_focus_evidence(self, make_match, make_profile_item):
        item = make_profile_item(title="Data analyst")
        evaluation = KeywordVariantEvaluator().evaluate(
            FocusArea.INNOVATION,
            SelectedItems(experience=[item]),
            [make_match(45, profile_item=item)],
        )
        assert "Limited evidence of innovation strengths" in evaluation.weaknesses
        assert "Weak experience alignment (45%)" in evaluation.weaknesses


# ── Ranking and comparison ──────────────────────────────────────────────────


class TestRanking:
    def test_variants_sorted_by_score(self, make_match):
        evaluator = FixedEvaluator({FocusArea.TECHNICAL: 60, FocusArea.LEADERSHIP: 80, FocusArea.BALANCED: 70})
        ranker = VariantRanker(evaluator=evaluator, min_score=40)
        variants = ranker.rank_variants(
            [make_match(70)], [FocusArea.TECHNICAL, FocusArea.LEADERSHIP, FocusArea.BALANCED]
        )
        assert [v.focus_area for v in variants] == [
            FocusArea.LEADERSHIP,
            FocusArea.BALANCED,
            FocusArea.TECHNICAL,
        ]
        assert variants[0].title == "Leadership Focus"

    def test_equal_scores_keep_requested_order(self, make_match):
        ranker = VariantRanker(evaluator=FixedEvaluator({}), min_score=40)
        areas = [FocusArea.IMPACT, FocusArea.TECHNICAL, FocusArea.INNOVATION]
        variants = ranker.rank_variants([make_match(70)], areas)
        assert [v.focus_area for v in variants] == areas

    def test_variant_score_clamped(self, make_match):
        ranker = VariantRanker(evaluator=FixedEvaluator({FocusArea.TECHNICAL: 140}), min_score=40)
        variant = ranker.build_variant([make_match(70)], FocusArea.TECHNICAL)
        assert variant.score == 100

    def test_failing_evaluator_falls_back(self, make_match, make_profile_item):
        ranker = VariantRanker(evaluator=ExplodingEvaluator(), min_score=40)
        item = make_profile_item(title="Python developer")
        variant = ranker.build_variant([make_match(80, profile_item=item)], FocusArea.TECHNICAL)
        assert variant.score == 88
        assert variant.selected_items.experience == [item]

    @pytest.mark.parametrize("value", [72.5, 70.5])
    def test_half_scores_round_up(self, make_match, value):
        ranker = VariantRanker(evaluator=FixedEvaluator({FocusArea.TECHNICAL: value}), min_score=40)
        variant = ranker.build_variant([make_match(70)], FocusArea.TECHNICAL)
        assert variant.score == int(value) + 1

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_score_falls_back(self, make_match, make_profile_item, value):
        ranker = VariantRanker(evaluator=FixedEvaluator({FocusArea.TECHNICAL: value}), min_score=40)
        item = make_profile_item(title="Python developer")
        variant = ranker.build_variant([make_match(80, profile_item=item)], FocusArea.TECHNICAL)
        assert variant.score == 88
        assert variant.reasoning != "fixed"

    def test_compare_pros_and_cons(self, make_match):
        evaluator = FixedEvaluator(
            {FocusArea.BALANCED: 75, FocusArea.TECHNICAL: 50},
            weaknesses={FocusArea.TECHNICAL: ["No skills selected", "Weak projects"]},
        )
        ranker = VariantRanker(evaluator=evaluator, min_score=40)
        variants = ranker.rank_variants([make_match(70)], [FocusArea.TECHNICAL, FocusArea.BALANCED])
        comparisons = ranker.compare_variants(variants)

        best, second = comparisons
        assert best.rank == 1
        assert best.variant.focus_area == FocusArea.BALANCED
        assert best.pros == ["Score: 75/100", "Strong in: Experience", "Well-rounded approach"]
        assert best.cons == [NO_WEAKNESSES_MESSAGE]

        assert second.rank == 2
        assert second.pros == ["Score: 50/100", "Optimized for technical"]
        assert second.cons == ["Could improve: No skills selected, Weak projects"]


# ── Focus-area analysis ─────────────────────────────────────────────────────


class TestFocusAnalysis:
    def test_balanced_only_without_signals(self, make_requirement):
        analysis = analyze_focus_areas([make_requirement(title="Good communicator")], [])
        assert analysis.suggested_focus_areas == [FocusArea.BALANCED]

    def test_posting_signals_and_strongest_area(self, make_requirement, make_match, make_profile_item):
        requirements = [make_requirement(title="Lead and mentor the team")]
        item = make_profile_item(title="Python developer")
        analysis = analyze_focus_areas(requirements, [make_match(80, profile_item=item)])

        assert analysis.posting_signals.leadership is True
        assert analysis.posting_signals.technical is False
        assert analysis.distribution.technical == pytest.approx(1.6)
        assert analysis.suggested_focus_areas == [
            FocusArea.BALANCED,
            FocusArea.LEADERSHIP,
            FocusArea.TECHNICAL,
        ]

    def test_suggestions_are_unique(self, make_requirement, make_match, make_profile_item):
        requirements = [make_requirement(title="Lead and mentor the team")]
        item = make_profile_item(title="Team lead")
        analysis = analyze_focus_areas(requirements, [make_match(80, profile_item=item)])
        areas = analysis.suggested_focus_areas
        assert len(areas) == len(set(areas))
        assert areas[0] == FocusArea.BALANCED
        assert len(areas) <= 5

    def test_distribution_ignores_sentinels(self, make_match):
        distribution = component_distribution([make_match(0)])
        assert distribution.model_dump() == {
            "technical": 0.0,
            "leadership": 0.0,
            "impact": 0.0,
            "innovation": 0.0,
        }
