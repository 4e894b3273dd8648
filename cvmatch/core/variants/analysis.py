"""
Focus-area analysis.

Keyword counting is plain substring matching on lowercased text, so short
keywords such as ``%`` or ``lead`` also count inside longer words.
"""

from typing import Mapping, Optional, Sequence

from cvmatch.data.models import (
    FocusAreaAnalysis,
    FocusDistribution,
    FocusSignals,
    MatchResult,
    ProfileItem,
    RequirementItem,
)
from cvmatch.utils.constants import (
    FOCUS_AREA_KEYWORDS,
    FOCUS_SIGNAL_MIN_HITS,
    MAX_SUGGESTED_FOCUS_AREAS,
    FocusArea,
)
from cvmatch.utils.logger import get_logger

logger = get_logger(__name__)

# Focus areas that carry their own keyword set, in reporting order
KEYWORD_FOCUS_AREAS: tuple[FocusArea, ...] = (
    FocusArea.TECHNICAL,
    FocusArea.LEADERSHIP,
    FocusArea.IMPACT,
    FocusArea.INNOVATION,
)


def keyword_hits(
    text: str,
    focus_area: FocusArea,
    keywords: Optional[Mapping[FocusArea, Sequence[str]]] = None,
) -> int:
    """Number of the focus area's keywords found in ``text``."""
    table = keywords if keywords is not None else FOCUS_AREA_KEYWORDS
    lowered = text.lower()
    return sum(1 for keyword in table.get(focus_area, []) if keyword in lowered)


def focus_affinity(
    item: ProfileItem,
    focus_area: FocusArea,
    keywords: Optional[Mapping[FocusArea, Sequence[str]]] = None,
) -> int:
    """Keyword hits of a profile item for a focus area; always 0 for balanced."""
    if focus_area == FocusArea.BALANCED:
        return 0
    return keyword_hits(item.searchable_text(), focus_area, keywords)


def posting_signals(requirements: Sequence[RequirementItem]) -> FocusSignals:
    """Which focus areas the job posting's requirements emphasise."""
    text = " ".join(requirement.text for requirement in requirements)
    return FocusSignals(
        **{
            area.value: keyword_hits(text, area) >= FOCUS_SIGNAL_MIN_HITS
            for area in KEYWORD_FOCUS_AREAS
        }
    )


def component_distribution(matches: Sequence[MatchResult]) -> FocusDistribution:
    """
    Score-weighted keyword presence of the matched items per focus area.

    Every keyword found in a matched item adds ``score / 100`` to its area.
    """
    totals = {area: 0.0 for area in KEYWORD_FOCUS_AREAS}
    for match in matches:
        if match.profile_item is None:
            continue
        weight = match.score / 100
        for area in KEYWORD_FOCUS_AREAS:
            totals[area] += weight * focus_affinity(match.profile_item, area)

    return FocusDistribution(**{area.value: round(total, 4) for area, total in totals.items()})


def analyze_focus_areas(
    requirements: Sequence[RequirementItem],
    matches: Sequence[MatchResult],
) -> FocusAreaAnalysis:
    """
    Suggest focus areas for CV variants.

    Balanced always comes first, then every area the posting emphasises,
    then the area(s) where the candidate's matched items are strongest.

    Args:
        requirements: Requirement items of the job posting.
        matches: Match results for those requirements.

    Returns:
        FocusAreaAnalysis with at most five suggestions.
    """
    signals = posting_signals(requirements)
    distribution = component_distribution(matches)

    suggested = [FocusArea.BALANCED]
    for area in KEYWORD_FOCUS_AREAS:
        if getattr(signals, area.value):
            suggested.append(area)

    strengths = {area: getattr(distribution, area.value) for area in KEYWORD_FOCUS_AREAS}
    strongest = max(strengths.values())
    if strongest > 0:
        for area, value in strengths.items():
            if value == strongest and area not in suggested:
                suggested.append(area)

    suggested = suggested[:MAX_SUGGESTED_FOCUS_AREAS]
    logger.debug(f"Suggested focus areas: {', '.join(a.value for a in suggested)}")

    return FocusAreaAnalysis(
        suggested_focus_areas=suggested,
        posting_signals=signals,
        distribution=distribution,
    )
