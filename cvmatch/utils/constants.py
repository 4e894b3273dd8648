"""
Application-wide constants for cvmatch.

This module contains all constant values used throughout the engine.
Keyword tables are plain data so they can be tuned without touching the
matching logic.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "cvmatch"
APP_DISPLAY_NAME: Final[str] = "CV Semantic Matching Engine"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Enums
# =============================================================================


class RequirementCategory(str, Enum):
    """Kind of structured item extracted from a job posting."""

    REQUIREMENT = "requirement"
    SKILL = "skill"
    RESPONSIBILITY = "responsibility"
    QUALIFICATION = "qualification"


class ProfileCategory(str, Enum):
    """Kind of structured item in a candidate profile."""

    EXPERIENCE = "experience"
    PROJECT = "project"
    EDUCATION = "education"
    SKILL = "skill"


class FocusArea(str, Enum):
    """Emphasis used to build alternate CV variants."""

    TECHNICAL = "technical"
    LEADERSHIP = "leadership"
    IMPACT = "impact"
    INNOVATION = "innovation"
    BALANCED = "balanced"


class MatchQuality(str, Enum):
    """Categorical quality tier for a 0-100 match score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    WEAK = "weak"
    NONE = "none"

    @classmethod
    def from_score(cls, score: float) -> "MatchQuality":
        """Convert a numeric score to a tier."""
        if score >= MATCH_THRESHOLDS["excellent"]:
            return cls.EXCELLENT
        elif score >= MATCH_THRESHOLDS["good"]:
            return cls.GOOD
        elif score >= MATCH_THRESHOLDS["fair"]:
            return cls.FAIR
        elif score >= MATCH_THRESHOLDS["weak"]:
            return cls.WEAK
        return cls.NONE


# =============================================================================
# Scoring Constants
# =============================================================================

# Lower bounds (inclusive) of each quality tier on the 0-100 scale
MATCH_THRESHOLDS: Final[dict[str, int]] = {
    "excellent": 80,
    "good": 60,
    "fair": 40,
    "weak": 20,
}

# Adjective used in explanations for each tier
QUALITY_ADJECTIVES: Final[dict[str, str]] = {
    "excellent": "strong",
    "good": "good",
    "fair": "fair",
    "weak": "weak",
    "none": "weak",
}

# Aggregate score keys, mapped to the profile category they summarise
SCORE_CATEGORIES: Final[dict[str, ProfileCategory]] = {
    "experience": ProfileCategory.EXPERIENCE,
    "education": ProfileCategory.EDUCATION,
    "skills": ProfileCategory.SKILL,
    "projects": ProfileCategory.PROJECT,
}

# Which profile categories a requirement category may count toward
CATEGORY_BRIDGES: Final[dict[RequirementCategory, frozenset[ProfileCategory]]] = {
    RequirementCategory.REQUIREMENT: frozenset(ProfileCategory),
    RequirementCategory.RESPONSIBILITY: frozenset(ProfileCategory),
    RequirementCategory.SKILL: frozenset({
        ProfileCategory.SKILL,
        ProfileCategory.PROJECT,
        ProfileCategory.EXPERIENCE,
    }),
    RequirementCategory.QUALIFICATION: frozenset({
        ProfileCategory.EDUCATION,
        ProfileCategory.EXPERIENCE,
        ProfileCategory.SKILL,
    }),
}


# =============================================================================
# Keyword Tables
# =============================================================================

# Technology vocabulary used for the keyword bonus, grouped for readability
TECHNOLOGY_KEYWORDS: Final[dict[str, list[str]]] = {
    "programming_languages": [
        "python", "java", "javascript", "typescript", "c++", "c#", "golang",
        "rust", "ruby", "php", "swift", "kotlin", "scala", "matlab", "sql",
    ],
    "frameworks": [
        "react", "angular", "vue", "next.js", "node.js", "express", "django",
        "flask", "fastapi", "spring", ".net", "rails", "laravel", "tensorflow",
        "pytorch", "keras", "scikit-learn",
    ],
    "databases": [
        "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "cassandra",
        "oracle", "sqlite", "dynamodb", "firebase", "supabase",
    ],
    "cloud_devops": [
        "aws", "azure", "gcp", "kubernetes", "docker", "terraform", "ansible",
        "ci/cd", "jenkins", "git", "linux",
    ],
    "practices": [
        "graphql", "rest api", "microservices", "kafka", "spark", "agile", "scrum",
        "machine learning", "deep learning", "nlp",
    ],
}

# Keyword sets used to bias variant selection per focus area
FOCUS_AREA_KEYWORDS: Final[dict[FocusArea, list[str]]] = {
    FocusArea.TECHNICAL: [
        "react", "node", "python", "java", "aws", "kubernetes", "docker", "sql",
        "api", "framework", "library", "code", "develop", "implement", "build",
        "engineer",
    ],
    FocusArea.LEADERSHIP: [
        "lead", "manage", "mentor", "team", "director", "head", "vp", "senior",
        "principal", "architect", "coordinate", "oversee", "hire", "train",
    ],
    FocusArea.IMPACT: [
        "revenue", "million", "billion", "users", "growth", "%", "increased",
        "reduced", "saved", "roi", "kpi", "metric", "business", "customer",
    ],
    FocusArea.INNOVATION: [
        "innovate", "patent", "research", "r&d", "new", "first", "pioneer",
        "invent", "cutting-edge", "novel", "breakthrough", "prototype",
    ],
    FocusArea.BALANCED: [],
}

FOCUS_AREA_DESCRIPTIONS: Final[dict[FocusArea, str]] = {
    FocusArea.TECHNICAL: (
        "Technical Excellence - Emphasize programming languages, frameworks, "
        "tools, technical depth, and engineering skills"
    ),
    FocusArea.LEADERSHIP: (
        "Leadership & Management - Emphasize team leadership, mentoring, "
        "decision-making, and stakeholder management"
    ),
    FocusArea.IMPACT: (
        "Business Impact - Emphasize metrics, business outcomes, revenue, "
        "user growth, and measurable achievements"
    ),
    FocusArea.INNOVATION: (
        "Innovation & R&D - Emphasize new solutions, cutting-edge technology, "
        "patents, research, and pioneering work"
    ),
    FocusArea.BALANCED: (
        "Balanced Approach - Evenly distribute focus across technical skills, "
        "leadership, impact, and innovation"
    ),
}

# Maximum number of items per aggregate category in a variant
VARIANT_SELECTION_LIMITS: Final[dict[str, int]] = {
    "experience": 5,
    "education": 3,
    "skills": 8,
    "projects": 3,
}

# Keyword hits across the posting needed before a focus area counts as emphasised
FOCUS_SIGNAL_MIN_HITS: Final[int] = 2

# Hard cap on suggested focus areas, balanced included
MAX_SUGGESTED_FOCUS_AREAS: Final[int] = 5

NO_WEAKNESSES_MESSAGE: Final[str] = "No major weaknesses identified"

# Requirement technologies reported as missing from the profile, at most
MAX_MISSING_SKILLS: Final[int] = 5

# Suggestions used when a run produced no usable match at all
GENERIC_SUGGESTIONS: Final[tuple[str, ...]] = (
    "Add relevant work experiences",
    "Add technical skills",
    "Add educational background",
    "Add projects or achievements",
)

CATEGORY_SUGGESTIONS: Final[dict[str, str]] = {
    "experience": "Add more relevant work experiences that match the job requirements",
    "skills": "Highlight more technical skills mentioned in the job description",
    "education": "Ensure your educational qualifications are clearly stated",
    "projects": "Add relevant projects to showcase your practical experience",
}


# =============================================================================
# Embedding Client Constants
# =============================================================================

# Error message fragments that mark a provider failure as transient
TRANSIENT_ERROR_PATTERNS: Final[tuple[str, ...]] = (
    r"ECONNRESET",
    r"ETIMEDOUT",
    r"ENETUNREACH",
    r"EAI_AGAIN",
    r"connection reset",
    r"connection aborted",
    r"timed out",
    r"timeout",
    r"name resolution",
    r"internal server error",
)
