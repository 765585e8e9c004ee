"""Equity bounds and cash adjustments (deposits / withdrawals)."""

from __future__ import annotations

import math

from trading_journal.core.config import RiskConfig
from trading_journal.core.enums import CashAdjustmentType
from trading_journal.core.models import CashAdjustmentResult, ValidationResult

from .calculator import _d, _to_float

_DEFAULT_RISK = RiskConfig()

ERR_INVALID_AMOUNT = "Invalid adjustment amount"
ERR_INSUFFICIENT_FUNDS = "Insufficient funds for withdrawal"


def _finite_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def validate_equity_value(equity: float, config: RiskConfig | None = None) -> bool:
    """Equity must be finite, non-negative and below the sanity ceiling."""
    cfg = config or _DEFAULT_RISK
    return _finite_number(equity) and 0 <= equity <= cfg.max_equity


def validate_cash_adjustment(
    current_equity: float,
    kind: CashAdjustmentType | str,
    amount: float,
    config: RiskConfig | None = None,
) -> ValidationResult:
    cfg = config or _DEFAULT_RISK
    if not _finite_number(amount) or amount <= 0 or amount > cfg.max_cash_adjustment:
        return ValidationResult.fail(ERR_INVALID_AMOUNT)
    if CashAdjustmentType(kind) == CashAdjustmentType.WITHDRAWAL:
        if _d(current_equity) - _d(amount) < 0:
            return ValidationResult.fail(ERR_INSUFFICIENT_FUNDS)
    return ValidationResult.ok()


def apply_cash_adjustment(
    current_equity: float,
    kind: CashAdjustmentType | str,
    amount: float,
    config: RiskConfig | None = None,
) -> CashAdjustmentResult:
    """New equity after a deposit or withdrawal.

    A refused adjustment comes back with ``new_equity=None`` and the
    failed validation; nothing is raised.
    """
    result = validate_cash_adjustment(current_equity, kind, amount, config)
    if not result.is_valid:
        return CashAdjustmentResult(validation=result)
    if CashAdjustmentType(kind) == CashAdjustmentType.WITHDRAWAL:
        equity = _d(current_equity) - _d(amount)
    else:
        equity = _d(current_equity) + _d(amount)
    return CashAdjustmentResult(validation=result, new_equity=_to_float(equity))
