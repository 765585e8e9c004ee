"""Trade grading engine: weighted composite grade with coaching narrative.

Combines the four scorers in :mod:`.scorers` into one 0-100 score and a
letter grade:

    score = 0.35 * risk + 0.30 * alignment + 0.25 * mindset + 0.10 * execution

    Grade   Minimum score
    ─────────────────────
    A+        97
    A         93
    A-        90
    B+        87
    B         83
    B-        80
    C+        77
    C         73
    C-        70
    D         60
    F          0

Recalculation replaces the trade's current grade and appends exactly one
history entry; the engine never decides *when* to recalculate.

Usage::

    grade = calculate_trade_grade(trade)
    print(grade.overall)          # Grade.A_MINUS
    print(grade.recommendations)  # ("Complete analysis for all three timeframes",)

    result = recalculate_grade(trade, GradeReason.TRADE_CLOSE, history=previous)
    store(result.grade, result.history)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from trading_journal.core.config import GradingConfig, RiskConfig
from trading_journal.core.enums import CoachingCategory, Grade, GradeReason
from trading_journal.core.models import (
    GradeBreakdown,
    GradeComponent,
    GradeHistoryEntry,
    GradeRecalculation,
    Trade,
    TradeGrade,
)

from .scorers import (
    score_execution,
    score_method_alignment,
    score_mindset_quality,
    score_risk_management,
)

logger = logging.getLogger(__name__)

_DEFAULT_GRADING = GradingConfig()

# Minimum score for each grade
_GRADE_THRESHOLDS: list[tuple[float, Grade]] = [
    (97.0, Grade.A_PLUS),
    (93.0, Grade.A),
    (90.0, Grade.A_MINUS),
    (87.0, Grade.B_PLUS),
    (83.0, Grade.B),
    (80.0, Grade.B_MINUS),
    (77.0, Grade.C_PLUS),
    (73.0, Grade.C),
    (70.0, Grade.C_MINUS),
    (60.0, Grade.D),
]

_GENERAL_RECOMMENDATIONS = (
    "Focus on improving fundamental trading discipline",
    "Consider reducing position sizes until consistency improves",
)

_CATEGORY_LABELS: dict[CoachingCategory, str] = {
    CoachingCategory.RISK_MANAGEMENT: "risk management",
    CoachingCategory.METHOD_ALIGNMENT: "method alignment",
    CoachingCategory.MINDSET_QUALITY: "mindset quality",
    CoachingCategory.EXECUTION: "execution",
}


def score_to_grade(score: float) -> Grade:
    """Convert a numeric score (0-100) to a letter grade."""
    for threshold, grade in _GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.F


def composite_score(breakdown: GradeBreakdown) -> float:
    """Weighted sum of the component scores, rounded to 2 dp."""
    total = sum(c.score * c.weight for c in breakdown.by_category().values())
    return round(total, 2)


def grade_breakdown(
    trade: Trade,
    config: GradingConfig | None = None,
    risk_config: RiskConfig | None = None,
    equity: float | None = None,
) -> GradeBreakdown:
    cfg = config or _DEFAULT_GRADING
    return GradeBreakdown(
        risk_management=score_risk_management(trade, cfg, risk_config, equity),
        method_alignment=score_method_alignment(trade, cfg),
        mindset_quality=score_mindset_quality(trade, cfg),
        execution=score_execution(trade, cfg),
    )


def _weakest(breakdown: GradeBreakdown) -> list[tuple[CoachingCategory, GradeComponent]]:
    """Components ordered weakest first; ties keep breakdown order."""
    return sorted(breakdown.by_category().items(), key=lambda item: item[1].score)


def build_explanation(trade: Trade, score: float, breakdown: GradeBreakdown) -> tuple[str, ...]:
    lines = [
        f"Overall score: {score:.1f}/100 ({score_to_grade(score).value})",
        f"Risk sizing: {trade.risk_percentage:.2f}% of equity",
    ]
    if trade.alignment is not None:
        level = trade.alignment.alignment_level.value.replace("_", " ").lower()
        lines.append(f"Signal alignment: {level}")
    lines.append(f"Mindset tracking: {len(trade.mindset_tags)} tags recorded")

    if trade.is_closed and trade.realized_pnl is not None:
        outcome = "profitable" if trade.realized_pnl >= 0 else "loss"
        lines.append(f"Trade outcome: {outcome} (${trade.realized_pnl:.2f})")

    category, component = _weakest(breakdown)[0]
    lines.append(
        f"Weakest area: {_CATEGORY_LABELS[category]} ({component.score:.0f}/100)"
    )
    return tuple(lines)


def build_recommendations(
    score: float,
    breakdown: GradeBreakdown,
    config: GradingConfig | None = None,
) -> tuple[str, ...]:
    cfg = config or _DEFAULT_GRADING
    recommendations: list[str] = []
    for _, component in _weakest(breakdown):
        recommendations.extend(component.improvements)
    if score < cfg.recommendation_floor:
        recommendations.extend(_GENERAL_RECOMMENDATIONS)
    # dict preserves first-seen order
    return tuple(dict.fromkeys(recommendations))


def calculate_trade_grade(
    trade: Trade,
    config: GradingConfig | None = None,
    risk_config: RiskConfig | None = None,
    equity: float | None = None,
) -> TradeGrade:
    """Grade one trade from its risk figures, alignment, mindset and outcome.

    ``equity`` adds the position-sizing check to the risk component.
    """
    cfg = config or _DEFAULT_GRADING
    breakdown = grade_breakdown(trade, cfg, risk_config, equity)
    score = composite_score(breakdown)

    return TradeGrade(
        overall=score_to_grade(score),
        score=score,
        breakdown=breakdown,
        explanation=build_explanation(trade, score, breakdown),
        recommendations=build_recommendations(score, breakdown, cfg),
    )


def recalculate_grade(
    trade: Trade,
    reason: GradeReason | str,
    history: Iterable[GradeHistoryEntry] = (),
    calculated_at: datetime | None = None,
    config: GradingConfig | None = None,
    risk_config: RiskConfig | None = None,
    equity: float | None = None,
) -> GradeRecalculation:
    """Compute the replacement grade and append one history entry.

    ``history`` is never modified; the returned tuple is the old history
    plus the new entry. Pass ``calculated_at`` for reproducible output.
    """
    reason = GradeReason(reason)
    grade = calculate_trade_grade(trade, config, risk_config, equity)
    entry = GradeHistoryEntry(
        trade_id=trade.id,
        grade=grade.overall,
        score=grade.score,
        reason=reason,
        calculated_at=calculated_at or datetime.now(timezone.utc),
    )
    new_history = (*tuple(history), entry)

    logger.info(
        "Grade recalculated: trade=%s grade=%s score=%.2f reason=%s history=%d",
        trade.id or "<unsaved>",
        grade.overall.value,
        grade.score,
        reason.value,
        len(new_history),
    )
    return GradeRecalculation(grade=grade, history_entry=entry, history=new_history)
