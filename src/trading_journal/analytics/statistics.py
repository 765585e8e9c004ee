"""Performance statistics and win-rate significance over a trade collection.

Only CLOSED trades count toward the statistics; every closed trade carries
its realized P&L. Sequence-dependent figures (streaks, drawdown) walk the
trades in entry-date order; trades without an entry date keep their input
order after the dated ones.

Usage::

    stats = calculate_performance_statistics(trades)
    print(stats.win_rate)        # 58.33
    print(stats.profit_factor)   # 1.92

    sig = assess_statistical_significance(trades)
    print(sig.is_significant)    # False
    print(sig.recommendation)    # "Need 18 more trades for statistical significance"
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from trading_journal.core.config import AnalyticsConfig
from trading_journal.core.enums import (
    BenchmarkLevel,
    BenchmarkMetric,
    StreakType,
    TradeOutcome,
)
from trading_journal.core.models import (
    BenchmarkRating,
    PerformanceStatistics,
    StatisticalSignificance,
    Trade,
)
from trading_journal.risk.calculator import _d, _to_float

logger = logging.getLogger(__name__)

_DEFAULT_ANALYTICS = AnalyticsConfig()

# z for a two-sided 95% interval
_Z_95 = 1.96


def _closed(trades: Iterable[Trade]) -> list[Trade]:
    return [t for t in trades if t.is_closed]


def _pnl(trade: Trade) -> Decimal:
    return _d(trade.realized_pnl) if trade.realized_pnl is not None else Decimal(0)


_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


def _chronological(trades: list[Trade]) -> list[Trade]:
    # Trade normalises naive dates to UTC, so every key is comparable.
    return sorted(
        trades,
        key=lambda t: (t.entry_date is None, t.entry_date or _EPOCH_MIN),
    )


# ------------------------------------------------------------------ #
# Sequence statistics                                                  #
# ------------------------------------------------------------------ #

def max_consecutive(trades: list[Trade], streak: StreakType) -> int:
    """Longest run of wins (or losses); a breakeven breaks any run."""
    wanted = TradeOutcome.WIN if streak == StreakType.WIN else TradeOutcome.LOSS
    best = run = 0
    for trade in trades:
        run = run + 1 if trade.outcome == wanted else 0
        best = max(best, run)
    return best


def current_streak(trades: list[Trade]) -> tuple[int, StreakType]:
    """Length and kind of the run ending at the most recent trade."""
    if not trades:
        return 0, StreakType.NONE
    last = trades[-1].outcome
    if last not in (TradeOutcome.WIN, TradeOutcome.LOSS):
        return 0, StreakType.NONE
    length = 0
    for trade in reversed(trades):
        if trade.outcome != last:
            break
        length += 1
    return length, StreakType.WIN if last == TradeOutcome.WIN else StreakType.LOSS


def max_drawdown(trades: list[Trade]) -> float:
    """Largest peak-to-trough fall of cumulative P&L (starting from 0)."""
    running = peak = worst = Decimal(0)
    for trade in trades:
        running += _pnl(trade)
        peak = max(peak, running)
        worst = max(worst, peak - running)
    return _to_float(worst)


def average_hold_time(trades: list[Trade]) -> float:
    """Mean hours between entry and exit over trades with both dates."""
    hours = [
        (t.exit_date - t.entry_date).total_seconds() / 3600
        for t in trades
        if t.entry_date is not None and t.exit_date is not None
    ]
    return sum(hours) / len(hours) if hours else 0.0


# ------------------------------------------------------------------ #
# Aggregate                                                            #
# ------------------------------------------------------------------ #

def calculate_performance_statistics(trades: Iterable[Trade]) -> PerformanceStatistics:
    closed = _chronological(_closed(trades))
    if not closed:
        return PerformanceStatistics()

    pnls = [_pnl(t) for t in closed]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    n = len(closed)
    breakeven = n - len(wins) - len(losses)

    gross_profit = sum(wins, Decimal(0))
    gross_loss = abs(sum(losses, Decimal(0)))
    total = sum(pnls, Decimal(0))

    win_rate = Decimal(len(wins)) / n * 100
    loss_rate = Decimal(len(losses)) / n * 100
    average_profit = gross_profit / len(wins) if wins else Decimal(0)
    average_loss = gross_loss / len(losses) if losses else Decimal(0)
    expectancy = win_rate / 100 * average_profit - (1 - win_rate / 100) * average_loss

    drawdown = max_drawdown(closed)
    risk_total = sum((_d(t.risk_amount or 0.0) for t in closed), Decimal(0))
    average_risk = risk_total / n
    streak_length, streak_kind = current_streak(closed)

    return PerformanceStatistics(
        total_trades=n,
        winning_trades=len(wins),
        losing_trades=len(losses),
        breakeven_trades=breakeven,
        win_rate=_to_float(win_rate),
        loss_rate=_to_float(loss_rate),
        win_loss_ratio=len(wins) / len(losses) if losses else 0.0,
        total_pnl=_to_float(total),
        average_profit=_to_float(average_profit),
        average_loss=_to_float(average_loss),
        average_trade=_to_float(total / n),
        expectancy=_to_float(expectancy),
        profit_factor=_to_float(gross_profit / gross_loss) if gross_loss else 0.0,
        recovery_factor=_to_float(total / _d(drawdown)) if drawdown > 0 else 0.0,
        max_win=_to_float(max(wins)) if wins else 0.0,
        max_loss=_to_float(abs(min(losses))) if losses else 0.0,
        max_consecutive_wins=max_consecutive(closed, StreakType.WIN),
        max_consecutive_losses=max_consecutive(closed, StreakType.LOSS),
        current_streak=streak_length,
        streak_type=streak_kind,
        average_risk=_to_float(average_risk),
        risk_adjusted_return=_to_float(total / average_risk) if average_risk > 0 else 0.0,
        max_drawdown=drawdown,
        average_hold_time=average_hold_time(closed),
    )


# ------------------------------------------------------------------ #
# Benchmarks                                                           #
# ------------------------------------------------------------------ #

# Lower bound of each level; anything under ACCEPTABLE is POOR.
# Expectancy is a fraction of equity per trade.
PERFORMANCE_BENCHMARKS: dict[BenchmarkMetric, dict[BenchmarkLevel, float]] = {
    BenchmarkMetric.PROFIT_FACTOR: {
        BenchmarkLevel.EXCELLENT: 2.0,
        BenchmarkLevel.GOOD: 1.5,
        BenchmarkLevel.ACCEPTABLE: 1.25,
        BenchmarkLevel.POOR: 1.0,
    },
    BenchmarkMetric.WIN_RATE: {
        BenchmarkLevel.EXCELLENT: 70.0,
        BenchmarkLevel.GOOD: 60.0,
        BenchmarkLevel.ACCEPTABLE: 50.0,
        BenchmarkLevel.POOR: 40.0,
    },
    BenchmarkMetric.EXPECTANCY: {
        BenchmarkLevel.EXCELLENT: 0.02,
        BenchmarkLevel.GOOD: 0.01,
        BenchmarkLevel.ACCEPTABLE: 0.005,
        BenchmarkLevel.POOR: 0.0,
    },
}


def benchmark_level(metric: BenchmarkMetric | str, value: float) -> BenchmarkLevel:
    """Highest level whose threshold ``value`` reaches."""
    table = PERFORMANCE_BENCHMARKS[BenchmarkMetric(metric)]
    for level in (BenchmarkLevel.EXCELLENT, BenchmarkLevel.GOOD, BenchmarkLevel.ACCEPTABLE):
        if value >= table[level]:
            return level
    return BenchmarkLevel.POOR


def benchmark_statistics(
    stats: PerformanceStatistics,
    equity: float | None = None,
) -> tuple[BenchmarkRating, ...]:
    """Rate profit factor, win rate and, given ``equity``, expectancy.

    Expectancy is rated as a fraction of ``equity``; it is left out when
    equity is unknown or not positive.
    """
    values = {
        BenchmarkMetric.PROFIT_FACTOR: stats.profit_factor,
        BenchmarkMetric.WIN_RATE: stats.win_rate,
    }
    if equity is not None and equity > 0:
        values[BenchmarkMetric.EXPECTANCY] = _to_float(_d(stats.expectancy) / _d(equity))
    return tuple(
        BenchmarkRating(metric=metric, value=value, level=benchmark_level(metric, value))
        for metric, value in values.items()
    )


# ------------------------------------------------------------------ #
# Significance                                                         #
# ------------------------------------------------------------------ #

def _binom_pmf(n: int, k: int, p: float) -> float:
    """Binomial probability mass function."""
    if k < 0 or k > n:
        return 0.0
    return math.comb(n, k) * (p ** k) * ((1 - p) ** (n - k))


def binomial_p_value(n: int, k: int, p: float = 0.5) -> float:
    """One-tailed binomial test p-value.

    P(X >= k) under H0: X ~ Binomial(n, p).
    Uses normal approximation for n > 30, exact otherwise.
    """
    if n <= 0:
        return 1.0

    if n > 30:
        mu = n * p
        sigma = math.sqrt(n * p * (1 - p))
        if sigma == 0:
            return 0.0 if k > mu else 1.0
        z = (k - 0.5 - mu) / sigma  # continuity correction
        return 0.5 * math.erfc(z / math.sqrt(2))

    return min(1.0, sum(_binom_pmf(n, i, p) for i in range(k, n + 1)))


def assess_statistical_significance(
    trades: Iterable[Trade],
    config: AnalyticsConfig | None = None,
) -> StatisticalSignificance:
    """Is the closed-trade sample large enough to trust the win rate?

    The verdict is purely sample-size based; ``p_value_win_rate`` reports
    how unlikely the observed win count would be from a fair coin.
    """
    cfg = config or _DEFAULT_ANALYTICS
    closed = _closed(trades)
    n = len(closed)
    wins = sum(1 for t in closed if t.outcome == TradeOutcome.WIN)
    required = cfg.significance_sample_size

    is_significant = n >= required
    if is_significant:
        recommendation = "Statistics are reliable for analysis"
    else:
        recommendation = f"Need {required - n} more trades for statistical significance"

    p_value = binomial_p_value(n, wins)
    logger.info(
        "Significance check: closed=%d wins=%d significant=%s p=%.4f",
        n, wins, is_significant, p_value,
    )

    return StatisticalSignificance(
        sample_size=n,
        is_significant=is_significant,
        confidence_level=cfg.confidence_level,
        margin_of_error=_Z_95 / math.sqrt(n) if n > 0 else 1.0,
        p_value_win_rate=p_value,
        recommendation=recommendation,
    )
