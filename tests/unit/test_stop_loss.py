"""Tests for stop-loss adjustment rules."""

import math

import pytest

from trading_journal.risk import recalculate_trade_risk, validate_stop_loss_adjustment
from trading_journal.risk.stop_loss import (
    ERR_LONG_NOT_HIGHER,
    ERR_NOT_POSITIVE,
    ERR_SHORT_NOT_LOWER,
)


@pytest.fixture
def long_at_145(make_trade):
    return make_trade(entry_price=150.0, stop_loss=145.0)


class TestLongAdjustment:
    def test_raising_stop_is_valid(self, long_at_145):
        result = validate_stop_loss_adjustment(long_at_145, 147)
        assert result.is_valid
        assert result.error is None

    def test_lowering_stop_rejected(self, long_at_145):
        result = validate_stop_loss_adjustment(long_at_145, 143)
        assert not result.is_valid
        assert result.error == ERR_LONG_NOT_HIGHER
        assert "must be higher" in result.error

    def test_unchanged_stop_rejected(self, long_at_145):
        assert not validate_stop_loss_adjustment(long_at_145, 145)

    def test_stop_above_entry_locks_profit(self, long_at_145):
        assert validate_stop_loss_adjustment(long_at_145, 155).is_valid


class TestShortAdjustment:
    def test_lowering_stop_is_valid(self, short_trade):
        assert validate_stop_loss_adjustment(short_trade, 205).is_valid

    def test_raising_stop_rejected(self, short_trade):
        result = validate_stop_loss_adjustment(short_trade, 215)
        assert result.error == ERR_SHORT_NOT_LOWER
        assert "must be lower" in result.error

    def test_unchanged_stop_rejected(self, short_trade):
        assert not validate_stop_loss_adjustment(short_trade, 210)


class TestInvalidValues:
    @pytest.mark.parametrize("value", [0, -5, math.nan, math.inf, "150", None, True])
    def test_non_positive_or_non_numeric(self, long_at_145, value):
        result = validate_stop_loss_adjustment(long_at_145, value)
        assert not result.is_valid
        assert result.error == ERR_NOT_POSITIVE


def test_recalculate_trade_risk(long_at_145):
    # entry 150, 100 shares, new stop 148 -> 2 * 100
    assert recalculate_trade_risk(long_at_145, 148) == 200
