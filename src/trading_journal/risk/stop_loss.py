"""Stop-loss adjustment rules.

A stop may only move in the risk-reducing direction: up for LONG
positions, down for SHORT positions. Moving it past entry (locking in
profit) is allowed; leaving it where it is, or widening it, is not.
"""

from __future__ import annotations

import math

from trading_journal.core.enums import Direction
from trading_journal.core.models import Trade, ValidationResult

from .calculator import trade_risk

ERR_NOT_POSITIVE = "Stop-loss must be a positive number"
ERR_LONG_NOT_HIGHER = "New stop-loss must be higher than current stop for LONG positions"
ERR_SHORT_NOT_LOWER = "New stop-loss must be lower than current stop for SHORT positions"


def validate_stop_loss_adjustment(trade: Trade, new_stop_loss: float) -> ValidationResult:
    if (
        isinstance(new_stop_loss, bool)
        or not isinstance(new_stop_loss, (int, float))
        or not math.isfinite(new_stop_loss)
        or new_stop_loss <= 0
    ):
        return ValidationResult.fail(ERR_NOT_POSITIVE)

    if trade.direction == Direction.LONG and new_stop_loss <= trade.stop_loss:
        return ValidationResult.fail(ERR_LONG_NOT_HIGHER)
    if trade.direction == Direction.SHORT and new_stop_loss >= trade.stop_loss:
        return ValidationResult.fail(ERR_SHORT_NOT_LOWER)

    return ValidationResult.ok()


def recalculate_trade_risk(trade: Trade, new_stop_loss: float) -> float:
    """Risk of ``trade`` if its stop were at ``new_stop_loss``."""
    return trade_risk(trade.entry_price, new_stop_loss, trade.position_size)
