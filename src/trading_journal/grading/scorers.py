"""The four independent grade components.

Each scorer looks at one dimension of a trade and returns a
:class:`GradeComponent` with a 0-100 score, the weight it carries in the
composite, the factors that drove it and the improvements it suggests.
Scorers never see each other's output; :mod:`.engine` combines them.

    Component          Weight   Input
    ────────────────────────────────────────────────────────
    Risk management     0.35    risk_percentage vs 2% limit
    Method alignment    0.30    AlignmentAnalysis.overall_score
    Mindset quality     0.25    MindsetTag set
    Execution           0.10    outcome, loss vs plan, reward:risk
"""

from __future__ import annotations

from trading_journal.core.config import GradingConfig, RiskConfig
from trading_journal.core.enums import AlignmentLevel, MindsetCategory, Timeframe
from trading_journal.core.models import GradeComponent, Trade
from trading_journal.risk.calculator import optimal_position_size, risk_reward_ratio

from .mindset import category_weights, classify_tag, describe_tag

_DEFAULT_GRADING = GradingConfig()
_DEFAULT_RISK = RiskConfig()

# Factor and improvement text per alignment level.
_ALIGNMENT_NOTES: dict[AlignmentLevel, tuple[str, str | None]] = {
    AlignmentLevel.STRONG_ALIGNMENT: (
        "Excellent signal alignment across timeframes", None,
    ),
    AlignmentLevel.WEAK_ALIGNMENT: ("Good signal alignment", None),
    AlignmentLevel.NEUTRAL: (
        "Neutral signal alignment",
        "Seek stronger confluence between timeframes",
    ),
    AlignmentLevel.WEAK_CONFLICT: (
        "Some signal conflicts detected",
        "Review conflicting signals before entry",
    ),
    AlignmentLevel.STRONG_CONFLICT: (
        "Major signal conflicts detected",
        "CRITICAL: Avoid trades with conflicting signals",
    ),
}


def _component(
    score: float,
    weight: float,
    factors: list[str],
    improvements: list[str],
    fallback: str,
    cfg: GradingConfig,
) -> GradeComponent:
    score = max(0.0, min(100.0, score))
    if score < cfg.good_score and not improvements:
        improvements.append(fallback)
    return GradeComponent(
        score=round(score, 2),
        weight=weight,
        factors=tuple(factors),
        improvements=tuple(improvements),
    )


# ------------------------------------------------------------------ #
# Risk management                                                      #
# ------------------------------------------------------------------ #

def risk_ratio_score(ratio: float) -> float:
    """Piecewise-linear score on ``risk_percentage / limit``.

    ``<= 0.75`` scores 100, falling to 70 at the limit, 30 at 1.5x the
    limit and 0 at 2.5x.
    """
    if ratio <= 0.75:
        return 100.0
    if ratio <= 1.0:
        return 100.0 - (ratio - 0.75) / 0.25 * 30.0
    if ratio <= 1.5:
        return 70.0 - (ratio - 1.0) / 0.5 * 40.0
    return max(0.0, 30.0 - (ratio - 1.5) * 30.0)


def sizing_deviation(trade: Trade, equity: float, risk_fraction: float) -> float | None:
    """Relative gap between the actual size and the size that risks ``risk_fraction``.

    A missing stop is taken as 2% below entry. None when no whole unit fits
    the risk budget.
    """
    stop = trade.stop_loss if trade.stop_loss > 0 else trade.entry_price * 0.98
    optimal = optimal_position_size(trade.entry_price, stop, equity, risk_fraction)
    if optimal <= 0:
        return None
    return abs(abs(trade.position_size) - optimal) / optimal


def score_risk_management(
    trade: Trade,
    config: GradingConfig | None = None,
    risk_config: RiskConfig | None = None,
    equity: float | None = None,
) -> GradeComponent:
    """Risk sizing against the per-trade limit.

    With ``equity`` the actual position size is also compared with the
    optimal size for that account.
    """
    cfg = config or _DEFAULT_GRADING
    risk_cfg = risk_config or _DEFAULT_RISK
    limit_pct = risk_cfg.individual_limit_pct * 100
    ratio = trade.risk_percentage / limit_pct
    score = risk_ratio_score(ratio)

    factors: list[str] = []
    improvements: list[str] = []

    if ratio <= 0.75:
        factors.append(f"Excellent risk sizing (<={limit_pct * 0.75:g}%)")
    elif ratio <= 1.0:
        factors.append(f"Good risk sizing (<={limit_pct:g}%)")
    elif ratio <= 1.5:
        factors.append(f"Acceptable risk sizing (<={limit_pct * 1.5:g}%)")
        improvements.append(f"Reduce position size to stay within {limit_pct:g}% rule")
    else:
        factors.append(f"Poor risk sizing (>{limit_pct * 1.5:g}%)")
        improvements.append("CRITICAL: Reduce position size significantly")

    if trade.stop_loss > 0:
        factors.append("Proper stop-loss placement")
    else:
        improvements.append("Always set stop-loss before entering trade")

    deviation = sizing_deviation(trade, equity, risk_cfg.individual_limit_pct) if equity else None
    if deviation is not None:
        if deviation <= 0.1:
            factors.append("Optimal position sizing")
        elif deviation <= 0.25:
            factors.append("Good position sizing")
            score -= 5
        else:
            improvements.append("Improve position sizing calculation")
            score -= 15

    return _component(
        score,
        cfg.weights.risk_management,
        factors,
        improvements,
        f"Keep risk per trade comfortably below {limit_pct:g}% of equity",
        cfg,
    )


# ------------------------------------------------------------------ #
# Method alignment                                                     #
# ------------------------------------------------------------------ #

def score_method_alignment(
    trade: Trade,
    config: GradingConfig | None = None,
) -> GradeComponent:
    cfg = config or _DEFAULT_GRADING
    weight = cfg.weights.method_alignment
    factors: list[str] = []
    improvements: list[str] = []

    analysis = trade.alignment
    if analysis is None:
        improvements.append("Perform multi-timeframe analysis before trading")
        return _component(
            50.0, weight, factors, improvements,
            "Perform multi-timeframe analysis before trading", cfg,
        )

    score = (analysis.overall_score + 1.0) * 50.0

    factor, improvement = _ALIGNMENT_NOTES[analysis.alignment_level]
    factors.append(factor)
    if improvement:
        improvements.append(improvement)

    covered = {row.timeframe for row in analysis.timeframe_breakdown}
    if len(covered) == len(Timeframe):
        factors.append("Complete three-timeframe analysis")
    else:
        improvements.append("Complete analysis for all three timeframes")

    return _component(
        score, weight, factors, improvements,
        "Wait for stronger signal confluence before entering", cfg,
    )


# ------------------------------------------------------------------ #
# Mindset quality                                                      #
# ------------------------------------------------------------------ #

def score_mindset_quality(
    trade: Trade,
    config: GradingConfig | None = None,
) -> GradeComponent:
    """``50 + 50 * (P - N) / max(P + N + Z, 3)`` on intensity weights."""
    cfg = config or _DEFAULT_GRADING
    weight = cfg.weights.mindset_quality
    factors: list[str] = []
    improvements: list[str] = []

    if not trade.mindset_tags:
        improvements.append("Record your mindset before each trade")
        return _component(
            50.0, weight, factors, improvements,
            "Record your mindset before each trade", cfg,
        )

    for entry in trade.mindset_tags:
        category = classify_tag(entry.tag)
        if category == MindsetCategory.CONSTRUCTIVE:
            factors.append(f"Positive mindset: {entry.tag.value}")
        elif category == MindsetCategory.DETRIMENTAL:
            factors.append(f"Negative mindset: {entry.tag.value}")
            improvements.append(f"Address {describe_tag(entry.tag)} before trading")

    weights = category_weights(trade.mindset_tags)
    positive = weights[MindsetCategory.CONSTRUCTIVE]
    negative = weights[MindsetCategory.DETRIMENTAL]
    total = positive + negative + weights[MindsetCategory.NEUTRAL]
    score = 50.0 + 50.0 * (positive - negative) / max(total, 3)

    if score >= 90:
        factors.append("Excellent psychological state")
    elif score >= 70:
        factors.append("Generally positive mindset")
    elif score < 50:
        improvements.append("Work on psychological preparation before trading")

    return _component(
        score, weight, factors, improvements,
        "Improve psychological consistency", cfg,
    )


# ------------------------------------------------------------------ #
# Execution                                                            #
# ------------------------------------------------------------------ #

def score_execution(
    trade: Trade,
    config: GradingConfig | None = None,
) -> GradeComponent:
    cfg = config or _DEFAULT_GRADING
    weight = cfg.weights.execution
    factors: list[str] = []
    improvements: list[str] = []

    pnl = trade.realized_pnl
    if not trade.is_closed or pnl is None:
        factors.append("Trade execution pending")
        return _component(
            cfg.neutral_execution_score, weight, factors, improvements,
            "Follow the trade plan through to a planned exit", cfg,
        )

    planned_risk = trade.risk_amount or 0.0
    if pnl > 0:
        score = 100.0
        factors.append("Profitable trade execution")
    elif pnl == 0:
        score = 85.0
        factors.append("Breakeven exit")
    elif abs(pnl) <= planned_risk * cfg.loss_tolerance:
        score = 80.0
        factors.append("Loss contained within risk parameters")
    else:
        score = 40.0
        factors.append("Loss exceeded planned risk")
        improvements.append("Ensure stop-loss orders are properly executed")

    if trade.target_price is not None:
        reward_risk = risk_reward_ratio(trade.entry_price, trade.stop_loss, trade.target_price)
        if reward_risk >= 3:
            factors.append("Excellent risk-reward ratio (>=3:1)")
        elif reward_risk >= cfg.min_reward_risk:
            factors.append(f"Good risk-reward ratio (>={cfg.min_reward_risk:g}:1)")
        else:
            score -= 15.0
            improvements.append("Seek trades with better risk-reward ratios")

    return _component(
        score, weight, factors, improvements,
        "Review entry and exit execution against the plan", cfg,
    )
