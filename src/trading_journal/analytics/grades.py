"""Grade trend analytics and coaching recommendations.

Works on grades already produced by :mod:`trading_journal.grading`; it
never regrades a trade.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from trading_journal.core.config import AnalyticsConfig
from trading_journal.core.enums import CoachingCategory, Grade, GradeTrend, Priority
from trading_journal.core.models import (
    CoachingRecommendation,
    GradeAnalytics,
    GradeCorrelations,
    GradedTrade,
    GradeImprovement,
    TradeGrade,
)

logger = logging.getLogger(__name__)

_DEFAULT_ANALYTICS = AnalyticsConfig()

# message, action items per weak dimension
_COACHING: dict[CoachingCategory, tuple[str, tuple[str, ...]]] = {
    CoachingCategory.RISK_MANAGEMENT: (
        "Risk management needs immediate attention",
        (
            "Review position sizing calculations before each trade",
            "Ensure stop-losses are always set before entry",
            "Practice calculating optimal position sizes",
        ),
    ),
    CoachingCategory.METHOD_ALIGNMENT: (
        "Method analysis consistency needs improvement",
        (
            "Complete three-timeframe analysis for every trade",
            "Avoid trades with conflicting technical indicators",
            "Wait for stronger signal confluence before entering",
        ),
    ),
    CoachingCategory.MINDSET_QUALITY: (
        "Psychological preparation could be enhanced",
        (
            "Track emotional state before every trade",
            "Develop pre-trade mental preparation routine",
            "Address negative mindset patterns before trading",
        ),
    ),
    CoachingCategory.EXECUTION: (
        "Trade execution is not following the plan",
        (
            "Place stop-loss orders at entry and never widen them",
            "Define a target with at least 2:1 reward to risk before entry",
            "Review losing exits against the planned stop",
        ),
    ),
}


def _pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation; 0 when undefined (fewer than 2 points or no spread)."""
    if len(x) != len(y) or len(x) < 2:
        return 0.0
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if xs.std() == 0 or ys.std() == 0:
        return 0.0
    return float(np.corrcoef(xs, ys)[0, 1])


def _trend(change: float, band: float) -> GradeTrend:
    if abs(change) < band:
        return GradeTrend.STABLE
    return GradeTrend.IMPROVING if change > 0 else GradeTrend.DECLINING


def calculate_grade_analytics(
    grades_over_time: Sequence[GradedTrade],
    config: AnalyticsConfig | None = None,
) -> GradeAnalytics:
    """Average, distribution, half-over-half trend and grade/outcome correlation.

    ``grades_over_time`` is expected oldest first.
    """
    cfg = config or _DEFAULT_ANALYTICS
    distribution = {grade: 0 for grade in Grade}
    if not grades_over_time:
        return GradeAnalytics(grade_distribution=distribution)

    scores = [entry.grade.score for entry in grades_over_time]
    for entry in grades_over_time:
        distribution[entry.grade.overall] += 1

    average = float(np.mean(scores))
    midpoint = len(scores) // 2
    historical = scores[:midpoint]
    recent = scores[midpoint:]
    historical_average = float(np.mean(historical)) if historical else average
    recent_average = float(np.mean(recent)) if recent else average
    change = recent_average - historical_average

    correlation = 0.0
    if any(entry.outcome is not None for entry in grades_over_time):
        outcomes = [entry.outcome or 0.0 for entry in grades_over_time]
        correlation = _pearson(scores, outcomes)

    return GradeAnalytics(
        average_grade=round(average, 2),
        grade_distribution=distribution,
        grade_improvement=GradeImprovement(
            trend=_trend(change, cfg.stable_trend_band),
            change_rate=round(change, 2),
            recent_average=round(recent_average, 2),
            historical_average=round(historical_average, 2),
        ),
        correlations=GradeCorrelations(grade_vs_outcome=round(correlation, 2)),
    )


def _priority(average: float) -> Priority:
    if average < 50:
        return Priority.HIGH
    if average < 60:
        return Priority.MEDIUM
    return Priority.LOW


def generate_coaching_recommendations(
    recent_grades: Sequence[TradeGrade],
    config: AnalyticsConfig | None = None,
) -> list[CoachingRecommendation]:
    """One recommendation per dimension averaging below the threshold.

    Only the last ``coaching_window`` grades (oldest first) are considered.
    """
    cfg = config or _DEFAULT_ANALYTICS
    window = list(recent_grades)[-cfg.coaching_window:] if cfg.coaching_window > 0 else []
    if not window:
        return []

    recommendations: list[CoachingRecommendation] = []
    for category, (message, actions) in _COACHING.items():
        average = sum(g.breakdown.by_category()[category].score for g in window) / len(window)
        if average >= cfg.coaching_threshold:
            continue
        recommendations.append(CoachingRecommendation(
            category=category,
            priority=_priority(average),
            message=message,
            action_items=actions,
        ))

    if recommendations:
        logger.info(
            "Coaching: %d weak dimension(s) over last %d grades: %s",
            len(recommendations),
            len(window),
            ", ".join(r.category.value for r in recommendations),
        )
    return recommendations
