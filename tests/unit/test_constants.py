"""
Tests for cvmatch.utils.constants: enums, tier thresholds, keyword tables.
"""

import re

import pytest

from cvmatch.utils.constants import (
    CATEGORY_BRIDGES,
    FOCUS_AREA_DESCRIPTIONS,
    FOCUS_AREA_KEYWORDS,
    GENERIC_SUGGESTIONS,
    SCORE_CATEGORIES,
    TECHNOLOGY_KEYWORDS,
    TRANSIENT_ERROR_PATTERNS,
    VARIANT_SELECTION_LIMITS,
    FocusArea,
    MatchQuality,
    ProfileCategory,
    RequirementCategory,
)


# ── MatchQuality.from_score() ───────────────────────────────────────────────


class TestMatchQualityFromScore:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (100, MatchQuality.EXCELLENT),
            (80, MatchQuality.EXCELLENT),
            (79, MatchQuality.GOOD),
            (60, MatchQuality.GOOD),
            (59, MatchQuality.FAIR),
            (40, MatchQuality.FAIR),
            (39, MatchQuality.WEAK),
            (20, MatchQuality.WEAK),
            (19, MatchQuality.NONE),
            (0, MatchQuality.NONE),
        ],
    )
    def test_tier_boundaries(self, score, expected):
        assert MatchQuality.from_score(score) == expected

    def test_monotonic(self):
        order = [MatchQuality.NONE, MatchQuality.WEAK, MatchQuality.FAIR, MatchQuality.GOOD, MatchQuality.EXCELLENT]
        ranks = [order.index(MatchQuality.from_score(s)) for s in range(101)]
        assert ranks == sorted(ranks)


# ── Enum value correctness ──────────────────────────────────────────────────


class TestEnums:
    def test_requirement_categories(self):
        assert {c.value for c in RequirementCategory} == {
            "requirement", "skill", "responsibility", "qualification",
        }

    def test_profile_categories(self):
        assert {c.value for c in ProfileCategory} == {"experience", "project", "education", "skill"}

    def test_focus_areas(self):
        assert [f.value for f in FocusArea] == [
            "technical", "leadership", "impact", "innovation", "balanced",
        ]

    def test_enums_compare_to_strings(self):
        assert FocusArea("technical") is FocusArea.TECHNICAL
        assert MatchQuality.NONE == "none"


# ── Bridges and tables ──────────────────────────────────────────────────────


class TestCategoryBridges:
    def test_every_requirement_category_bridged(self):
        assert set(CATEGORY_BRIDGES) == set(RequirementCategory)

    def test_skill_bridges(self):
        assert CATEGORY_BRIDGES[RequirementCategory.SKILL] == {
            ProfileCategory.SKILL, ProfileCategory.PROJECT, ProfileCategory.EXPERIENCE,
        }

    def test_qualification_excludes_project(self):
        assert ProfileCategory.PROJECT not in CATEGORY_BRIDGES[RequirementCategory.QUALIFICATION]
        assert ProfileCategory.EDUCATION in CATEGORY_BRIDGES[RequirementCategory.QUALIFICATION]

    @pytest.mark.parametrize("category", [RequirementCategory.REQUIREMENT, RequirementCategory.RESPONSIBILITY])
    def test_open_categories_bridge_everything(self, category):
        assert CATEGORY_BRIDGES[category] == set(ProfileCategory)

    def test_score_categories_cover_profile_categories(self):
        assert set(SCORE_CATEGORIES.values()) == set(ProfileCategory)


class TestTables:
    def test_technology_keywords_lowercase_and_unique(self):
        tokens = [t for group in TECHNOLOGY_KEYWORDS.values() for t in group]
        assert all(t == t.lower() for t in tokens)
        assert len(tokens) == len(set(tokens))

    def test_balanced_has_no_keywords(self):
        assert FOCUS_AREA_KEYWORDS[FocusArea.BALANCED] == []

    def test_every_focus_area_described(self):
        assert set(FOCUS_AREA_DESCRIPTIONS) == set(FocusArea)

    def test_selection_limits(self):
        assert VARIANT_SELECTION_LIMITS == {"experience": 5, "education": 3, "skills": 8, "projects": 3}

    def test_generic_suggestions(self):
        assert len(GENERIC_SUGGESTIONS) == 4

    def test_transient_patterns_compile(self):
        for pattern in TRANSIENT_ERROR_PATTERNS:
            re.compile(pattern)
