"""CV variant generation: focus-area analysis, evaluation and ranking."""

from .analysis import analyze_focus_areas, component_distribution, focus_affinity, posting_signals
from .evaluator import KeywordVariantEvaluator, VariantEvaluation, VariantEvaluator
from .ranker import VariantRanker

__all__ = [
    "analyze_focus_areas",
    "component_distribution",
    "focus_affinity",
    "posting_signals",
    "KeywordVariantEvaluator",
    "VariantEvaluation",
    "VariantEvaluator",
    "VariantRanker",
]
