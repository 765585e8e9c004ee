"""Risk calculator: position and portfolio risk, limits, stops and equity."""

from .calculator import (
    classify_risk_level,
    detailed_portfolio_risk,
    exceeds_individual_limit,
    exceeds_portfolio_limit,
    new_risk_percentage,
    optimal_position_size,
    portfolio_risk,
    realized_pnl,
    risk_reward_ratio,
    trade_risk,
    update_equity,
)
from .equity import (
    apply_cash_adjustment,
    validate_cash_adjustment,
    validate_equity_value,
)
from .stop_loss import recalculate_trade_risk, validate_stop_loss_adjustment

__all__ = [
    "apply_cash_adjustment",
    "classify_risk_level",
    "detailed_portfolio_risk",
    "exceeds_individual_limit",
    "exceeds_portfolio_limit",
    "new_risk_percentage",
    "optimal_position_size",
    "portfolio_risk",
    "realized_pnl",
    "recalculate_trade_risk",
    "risk_reward_ratio",
    "trade_risk",
    "update_equity",
    "validate_cash_adjustment",
    "validate_equity_value",
    "validate_stop_loss_adjustment",
]
