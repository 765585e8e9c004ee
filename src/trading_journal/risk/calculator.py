"""Per-trade and per-portfolio risk arithmetic and limit checks.

All monetary arithmetic is done in :class:`~decimal.Decimal` (built from
the ``str`` of each input) so that figures such as ``0.1 * 3`` do not pick
up binary floating-point error; results are handed back as ``float``.

Limits are computed, never enforced: a breach is reported as a boolean plus
its magnitude and the host decides whether to block or warn.

Usage::

    risk = trade_risk(entry_price=100, stop_loss=95, position_size=100)  # 500.0
    exceeds_individual_limit(risk, equity=20_000)                        # True
    summary = detailed_portfolio_risk(open_trades, equity=100_000)
    print(summary.risk_level)                                            # SAFE
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Protocol

from trading_journal.core.config import RiskConfig
from trading_journal.core.enums import Direction, RiskLevel, TradeStatus

if TYPE_CHECKING:
    from trading_journal.core.models import PortfolioRiskSummary

logger = logging.getLogger(__name__)

_DEFAULT_RISK = RiskConfig()


def _d(value: float | int | Decimal) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_float(value: Decimal) -> float:
    result = float(value)
    return 0.0 if result == 0 else result  # normalise -0.0


class _RiskBearing(Protocol):
    status: TradeStatus
    risk_amount: float | None


class _OpenPosition(Protocol):
    id: str
    symbol: str
    risk_amount: float | None


# ------------------------------------------------------------------ #
# Single trade                                                         #
# ------------------------------------------------------------------ #

def trade_risk(entry_price: float, stop_loss: float, position_size: float) -> float:
    """Dollar loss if the stop is hit: ``|entry - stop| * |size|``.

    A negative size is normalised by absolute value.
    """
    return _to_float(
        abs(_d(entry_price) - _d(stop_loss)) * abs(_d(position_size))
    )


def exceeds_individual_limit(
    risk_amount: float,
    equity: float,
    config: RiskConfig | None = None,
) -> bool:
    """True iff risk is strictly above 2% of equity."""
    cfg = config or _DEFAULT_RISK
    return _d(risk_amount) > _d(equity) * _d(cfg.individual_limit_pct)


def realized_pnl(
    entry_price: float,
    exit_price: float,
    position_size: float,
    direction: Direction | str,
) -> float:
    """Realized profit or loss for a closed position."""
    diff = _d(exit_price) - _d(entry_price)
    if Direction(direction) == Direction.SHORT:
        diff = -diff
    return _to_float(diff * _d(position_size))


def update_equity(current_equity: float, pnl: float) -> float:
    return _to_float(_d(current_equity) + _d(pnl))


def new_risk_percentage(risk_amount: float, equity: float) -> float:
    """Risk as a percentage of equity.

    Zero equity yields ``inf`` rather than raising, which downstream
    classifies as DANGER. Zero risk against zero equity is 0: an empty
    book on an empty account is SAFE and under the limit.
    """
    if _d(equity) == 0:
        if _d(risk_amount) == 0:
            return 0.0
        logger.warning("Risk percentage requested against zero equity")
        return math.inf
    return _to_float(_d(risk_amount) / _d(equity) * 100)


def risk_reward_ratio(entry_price: float, stop_loss: float, target_price: float) -> float:
    """Reward per unit of risk; ``inf`` when entry equals stop."""
    risk = abs(_d(entry_price) - _d(stop_loss))
    reward = abs(_d(target_price) - _d(entry_price))
    if risk == 0:
        return math.inf
    return _to_float(reward / risk)


def optimal_position_size(
    entry_price: float,
    stop_loss: float,
    equity: float,
    risk_fraction: float = 0.02,
) -> float:
    """Largest whole position whose stop-out loses ``risk_fraction`` of equity."""
    per_unit = abs(_d(entry_price) - _d(stop_loss))
    if per_unit == 0:
        return 0.0
    max_risk = _d(equity) * _d(risk_fraction)
    return _to_float((max_risk / per_unit).to_integral_value(rounding="ROUND_FLOOR"))


# ------------------------------------------------------------------ #
# Portfolio                                                            #
# ------------------------------------------------------------------ #

def portfolio_risk(trades: Iterable[_RiskBearing]) -> float:
    """Sum of risk over ACTIVE trades; CLOSED trades never count."""
    total = Decimal("0")
    for trade in trades:
        if TradeStatus(trade.status) == TradeStatus.ACTIVE:
            total += _d(trade.risk_amount or 0)
    return _to_float(total)


def exceeds_portfolio_limit(
    portfolio_risk_amount: float,
    equity: float,
    config: RiskConfig | None = None,
) -> bool:
    """True iff portfolio risk is strictly above 6% of equity."""
    cfg = config or _DEFAULT_RISK
    return _d(portfolio_risk_amount) > _d(equity) * _d(cfg.portfolio_limit_pct)


def classify_risk_level(
    total_risk_percentage: float,
    config: RiskConfig | None = None,
) -> RiskLevel:
    cfg = config or _DEFAULT_RISK
    if total_risk_percentage > _d(cfg.portfolio_limit_pct) * 100:
        return RiskLevel.DANGER
    if total_risk_percentage > _d(cfg.warning_threshold_pct):
        return RiskLevel.WARNING
    return RiskLevel.SAFE


def detailed_portfolio_risk(
    active_trades: Iterable[_OpenPosition],
    equity: float,
    config: RiskConfig | None = None,
) -> PortfolioRiskSummary:
    """Portfolio risk with a per-trade breakdown and a SAFE/WARNING/DANGER level.

    The caller passes only open trades; every entry is counted.
    """
    from trading_journal.core.models import PortfolioRiskSummary, TradeRiskLine

    cfg = config or _DEFAULT_RISK
    trades = list(active_trades)

    total = Decimal("0")
    lines: list[TradeRiskLine] = []
    for trade in trades:
        amount = _d(trade.risk_amount or 0)
        total += amount
        lines.append(TradeRiskLine(
            id=trade.id,
            symbol=trade.symbol,
            risk_amount=_to_float(amount),
            risk_percentage=new_risk_percentage(_to_float(amount), equity),
        ))

    total_amount = _to_float(total)
    total_pct = new_risk_percentage(total_amount, equity)
    level = classify_risk_level(total_pct, cfg)
    exceeds = exceeds_portfolio_limit(total_amount, equity, cfg)

    if level != RiskLevel.SAFE:
        logger.warning(
            "Portfolio risk %s: total=%.2f pct=%.2f open_trades=%d",
            level.value,
            total_amount,
            total_pct,
            len(lines),
        )

    return PortfolioRiskSummary(
        total_risk_amount=total_amount,
        total_risk_percentage=total_pct,
        exceeds_limit=exceeds,
        risk_level=level,
        active_trades=tuple(lines),
    )
