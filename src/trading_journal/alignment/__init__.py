"""Alignment analyzer: agreement between a trade's direction and its analysis."""

from .analyzer import (
    analyze_alignment,
    determine_alignment_level,
    observation_score,
    validate_alignment_request,
    validate_method_analysis,
)
from .rules import ALIGNMENT_MATRIX, INDICATOR_SIGNALS, lookup_score

__all__ = [
    "ALIGNMENT_MATRIX",
    "INDICATOR_SIGNALS",
    "analyze_alignment",
    "determine_alignment_level",
    "lookup_score",
    "observation_score",
    "validate_alignment_request",
    "validate_method_analysis",
]
