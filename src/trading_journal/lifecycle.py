"""Pure trade state transitions.

The host applies these at each lifecycle point and persists the result.
Every transition returns a :class:`LifecycleResult` holding the new
:class:`Trade`; the argument is left untouched. Invalid input comes back
as a failed ``validation`` with no trade and is never raised.

Price and risk fields are frozen once a trade is CLOSED, so stop-loss
adjustment and closing raise :class:`TradeStateError` on a closed trade.
Method analysis and mindset tags stay editable after close because they
feed the grade, not the risk figures.

Usage::

    trade = get_trade(trades_by_id, "t-42")
    trade = adjust_stop_loss(trade, 147.0, equity=100_000).trade
    closure = close_trade(trade, exit_price=160.0, current_equity=100_000)
    regraded = recalculate_grade(closure.trade, GradeReason.TRADE_CLOSE, history)
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Iterable, Mapping

from trading_journal.alignment import analyze_alignment, validate_method_analysis
from trading_journal.core.enums import TradeStatus
from trading_journal.core.errors import TradeNotFoundError, TradeStateError
from trading_journal.core.models import (
    LifecycleResult,
    MethodAnalysisObservation,
    MindsetTag,
    Trade,
    ValidationResult,
)
from trading_journal.grading.mindset import validate_mindset_tags
from trading_journal.risk import (
    new_risk_percentage,
    realized_pnl,
    recalculate_trade_risk,
    update_equity,
    validate_stop_loss_adjustment,
)

logger = logging.getLogger(__name__)

ERR_EXIT_NOT_POSITIVE = "Exit price must be a positive number"


def get_trade(trades: Mapping[str, Trade] | Iterable[Trade], trade_id: str) -> Trade:
    """Look up a trade by id in a mapping or any iterable of trades."""
    if isinstance(trades, Mapping):
        found = trades.get(trade_id)
        if found is not None:
            return found
    else:
        for trade in trades:
            if trade.id == trade_id:
                return trade
    raise TradeNotFoundError(trade_id)


def _require_open(trade: Trade, operation: str) -> None:
    if trade.is_closed:
        raise TradeStateError(trade.id, trade.status.value, operation)


def adjust_stop_loss(
    trade: Trade,
    new_stop_loss: float,
    equity: float | None = None,
) -> LifecycleResult:
    """Move the stop and recompute risk.

    ``risk_percentage`` is refreshed when ``equity`` is supplied and kept
    otherwise.
    """
    _require_open(trade, "adjust stop-loss on")
    result = validate_stop_loss_adjustment(trade, new_stop_loss)
    if not result.is_valid:
        return LifecycleResult.rejected(result)

    risk = recalculate_trade_risk(trade, new_stop_loss)
    update: dict[str, object] = {"stop_loss": float(new_stop_loss), "risk_amount": risk}
    if equity is not None:
        update["risk_percentage"] = new_risk_percentage(risk, equity)

    logger.info(
        "Stop adjusted: trade=%s stop=%s->%s risk=%.2f",
        trade.id, trade.stop_loss, new_stop_loss, risk,
    )
    return LifecycleResult(validation=result, trade=trade.evolve(**update))


def close_trade(
    trade: Trade,
    exit_price: float,
    current_equity: float,
    exit_date: datetime | None = None,
) -> LifecycleResult:
    """Close at ``exit_price``; carries the closed trade, its P&L and new equity."""
    _require_open(trade, "close")
    if (
        isinstance(exit_price, bool)
        or not isinstance(exit_price, (int, float))
        or not math.isfinite(exit_price)
        or exit_price <= 0
    ):
        return LifecycleResult.rejected(ValidationResult.fail(ERR_EXIT_NOT_POSITIVE))

    pnl = realized_pnl(trade.entry_price, exit_price, trade.position_size, trade.direction)
    closed = trade.evolve(
        exit_price=float(exit_price),
        realized_pnl=pnl,
        status=TradeStatus.CLOSED,
        exit_date=exit_date or datetime.now(timezone.utc),
    )
    equity = update_equity(current_equity, pnl)

    logger.info(
        "Trade closed: trade=%s exit=%s pnl=%.2f equity=%.2f",
        trade.id, exit_price, pnl, equity,
    )
    return LifecycleResult(
        validation=ValidationResult.ok(),
        trade=closed,
        realized_pnl=pnl,
        new_equity=equity,
    )


def replace_method_analysis(
    trade: Trade,
    observations: Iterable[MethodAnalysisObservation],
) -> LifecycleResult:
    """Swap the whole observation set and recompute alignment.

    An empty set clears the alignment.
    """
    observations = tuple(observations)
    result = validate_method_analysis(observations)
    if not result.is_valid:
        return LifecycleResult.rejected(result)

    alignment = None
    if observations:
        analysis = analyze_alignment(trade.direction, observations)
        if isinstance(analysis, ValidationResult):
            return LifecycleResult.rejected(analysis)
        alignment = analysis
    return LifecycleResult(
        validation=result,
        trade=trade.evolve(method_analysis=observations, alignment=alignment),
    )


def replace_mindset_tags(trade: Trade, tags: Iterable[MindsetTag]) -> LifecycleResult:
    tags = tuple(tags)
    result = validate_mindset_tags(tags)
    if not result.is_valid:
        return LifecycleResult.rejected(result)
    return LifecycleResult(validation=result, trade=trade.evolve(mindset_tags=tags))
