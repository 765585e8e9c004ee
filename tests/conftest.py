"""Shared fixtures for the trading-journal test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from trading_journal.core.enums import (
    Direction,
    Divergence,
    Indicator,
    Intensity,
    MindsetTagType,
    Signal,
    Timeframe,
    TradeStatus,
)
from trading_journal.core.models import MethodAnalysisObservation, MindsetTag, Trade


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 1, 2, 14, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

@pytest.fixture
def make_trade(base_time):
    """Factory for an ACTIVE AAPL long: entry 150, stop 145, 100 shares (risk 500)."""

    def _make(**overrides) -> Trade:
        fields = {
            "id": "t-1",
            "symbol": "AAPL",
            "direction": Direction.LONG,
            "entry_price": 150.0,
            "position_size": 100,
            "stop_loss": 145.0,
            "risk_percentage": 1.0,
            "entry_date": base_time,
        }
        fields.update(overrides)
        return Trade(**fields)

    return _make


@pytest.fixture
def make_closed_trade(make_trade, base_time):
    """Factory for a CLOSED trade with the given P&L."""

    def _make(pnl: float, index: int = 0, **overrides) -> Trade:
        fields = {
            "id": f"closed-{index}",
            "status": TradeStatus.CLOSED,
            "exit_price": 150.0 + pnl / 100,
            "realized_pnl": pnl,
            "entry_date": base_time + timedelta(days=index),
            "exit_date": base_time + timedelta(days=index, hours=6),
        }
        fields.update(overrides)
        return make_trade(**fields)

    return _make


@pytest.fixture
def long_trade(make_trade) -> Trade:
    return make_trade()


@pytest.fixture
def short_trade(make_trade) -> Trade:
    return make_trade(
        id="t-2",
        symbol="TSLA",
        direction=Direction.SHORT,
        entry_price=200.0,
        stop_loss=210.0,
        position_size=50,
    )


# ---------------------------------------------------------------------------
# Method analysis / mindset
# ---------------------------------------------------------------------------

@pytest.fixture
def observation():
    """Factory for a MethodAnalysisObservation (defaults: DAILY MACD BUY_SIGNAL)."""

    def _make(
        timeframe: Timeframe = Timeframe.DAILY,
        indicator: Indicator = Indicator.MACD,
        signal: Signal = Signal.BUY_SIGNAL,
        divergence: Divergence = Divergence.NONE,
    ) -> MethodAnalysisObservation:
        return MethodAnalysisObservation(
            timeframe=timeframe,
            indicator=indicator,
            signal=signal,
            divergence=divergence,
        )

    return _make


@pytest.fixture
def constructive_tags() -> tuple[MindsetTag, ...]:
    return (
        MindsetTag(tag=MindsetTagType.DISCIPLINED, intensity=Intensity.HIGH),
        MindsetTag(tag=MindsetTagType.PATIENT, intensity=Intensity.MEDIUM),
    )
