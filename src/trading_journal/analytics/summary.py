"""Headline summary over a filtered set of trades.

Lighter than :func:`~.statistics.calculate_performance_statistics`: the
figures a trade list shows above its rows, plus the indicator and mindset
tag the trader records most often.

Usage::

    summary = summarize_trades(trades)
    print(summary.most_common_indicator)   # Indicator.RSI
    print(return_percentage(trades[0]))    # 150.0 (1.5R)
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Hashable, Iterable, TypeVar

from trading_journal.core.enums import Indicator, MindsetTagType, TradeOutcome
from trading_journal.core.models import Trade, TradeSummary
from trading_journal.risk.calculator import _d, _to_float

_K = TypeVar("_K", bound=Hashable)


def return_percentage(trade: Trade) -> float:
    """Realized P&L as a percentage of the amount risked; 0 when either is missing."""
    if trade.realized_pnl is None or not trade.risk_amount:
        return 0.0
    return _to_float(_d(trade.realized_pnl) / _d(trade.risk_amount) * 100)


def _most_common(counts: dict[_K, int]) -> _K | None:
    # On a tie the key seen later wins.
    best = None
    best_count = 0
    for key, count in counts.items():
        if count >= best_count:
            best, best_count = key, count
    return best


def summarize_trades(trades: Iterable[Trade]) -> TradeSummary:
    trades = list(trades)
    if not trades:
        return TradeSummary()

    closed = [t for t in trades if t.realized_pnl is not None]
    wins = sum(1 for t in closed if t.outcome == TradeOutcome.WIN)
    total = sum((_d(t.realized_pnl) for t in closed), Decimal(0))
    risk = sum((_d(t.risk_amount or 0.0) for t in trades), Decimal(0))

    indicators: dict[Indicator, int] = defaultdict(int)
    mindsets: dict[MindsetTagType, int] = defaultdict(int)
    for trade in trades:
        for obs in trade.method_analysis:
            indicators[obs.indicator] += 1
        for tag in trade.mindset_tags:
            mindsets[tag.tag] += 1

    return TradeSummary(
        win_rate=wins / len(closed) * 100 if closed else 0.0,
        total_pnl=_to_float(total),
        average_risk=_to_float(risk / len(trades)),
        most_common_indicator=_most_common(indicators),
        dominant_mindset=_most_common(mindsets),
    )
