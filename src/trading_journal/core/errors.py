"""Custom exception hierarchy for the evaluation engine.

Pre-condition failures on user input are reported as
:class:`~trading_journal.core.models.ValidationResult` values, never
raised. The exceptions below cover host-side misuse (unknown trade ids,
transitions from the wrong state) and configuration problems.
"""

from __future__ import annotations


class JournalError(Exception):
    """Base exception for all trading journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Referential / state ---
class TradeNotFoundError(JournalError):
    """Referenced trade does not exist."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__("Trade not found")


class TradeStateError(JournalError):
    """Operation not permitted in the trade's current lifecycle state."""

    def __init__(self, trade_id: str, status: str, operation: str):
        self.trade_id = trade_id
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} trade {trade_id}: trade is {status}")
