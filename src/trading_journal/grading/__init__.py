"""Grading engine: weighted trade grades with coaching narrative."""

from .engine import (
    build_explanation,
    build_recommendations,
    calculate_trade_grade,
    composite_score,
    grade_breakdown,
    recalculate_grade,
    score_to_grade,
)
from .mindset import classify_tag, validate_mindset_tags
from .scorers import (
    score_execution,
    score_method_alignment,
    score_mindset_quality,
    score_risk_management,
    sizing_deviation,
)

__all__ = [
    "build_explanation",
    "build_recommendations",
    "calculate_trade_grade",
    "classify_tag",
    "composite_score",
    "grade_breakdown",
    "recalculate_grade",
    "score_execution",
    "score_method_alignment",
    "score_mindset_quality",
    "score_risk_management",
    "score_to_grade",
    "sizing_deviation",
    "validate_mindset_tags",
]
