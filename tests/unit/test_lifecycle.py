"""Tests for the pure trade state transitions."""

from datetime import datetime, timezone

import pytest

from trading_journal.core.enums import (
    AlignmentLevel,
    Intensity,
    MindsetTagType,
    Signal,
    Timeframe,
    TradeOutcome,
    TradeStatus,
)
from trading_journal.core.errors import TradeNotFoundError, TradeStateError
from trading_journal.core.models import MindsetTag, ValidationResult
from trading_journal.lifecycle import (
    adjust_stop_loss,
    close_trade,
    get_trade,
    replace_method_analysis,
    replace_mindset_tags,
)

EXIT_TIME = datetime(2024, 1, 5, 16, 0, tzinfo=timezone.utc)


@pytest.fixture
def closed_trade(long_trade):
    return close_trade(long_trade, 160.0, 100_000, exit_date=EXIT_TIME).trade


class TestGetTrade:
    def test_from_list(self, long_trade, short_trade):
        assert get_trade([long_trade, short_trade], "t-2") is short_trade

    def test_from_mapping(self, long_trade):
        assert get_trade({"t-1": long_trade}, "t-1") is long_trade

    def test_missing(self, long_trade):
        with pytest.raises(TradeNotFoundError, match="^Trade not found$") as exc_info:
            get_trade([long_trade], "nope")
        assert exc_info.value.trade_id == "nope"


class TestAdjustStopLoss:
    def test_recomputes_risk(self, long_trade):
        result = adjust_stop_loss(long_trade, 148.0)
        assert result.is_valid
        assert result.trade.stop_loss == 148.0
        assert result.trade.risk_amount == 200.0
        assert result.trade.risk_percentage == long_trade.risk_percentage
        assert long_trade.stop_loss == 145.0

    def test_refreshes_percentage_with_equity(self, long_trade):
        result = adjust_stop_loss(long_trade, 148.0, equity=100_000)
        assert result.trade.risk_percentage == 0.2

    def test_invalid_direction_is_reported(self, long_trade):
        result = adjust_stop_loss(long_trade, 140.0)
        assert not result
        assert result.trade is None
        assert "must be higher" in result.validation.error

    def test_closed_trade_rejected(self, closed_trade):
        with pytest.raises(TradeStateError) as exc_info:
            adjust_stop_loss(closed_trade, 150.0)
        assert exc_info.value.status == "CLOSED"


class TestCloseTrade:
    def test_long_close(self, long_trade):
        closure = close_trade(long_trade, 160.0, 100_000, exit_date=EXIT_TIME)
        assert closure.is_valid
        assert closure.realized_pnl == 1000.0
        assert closure.new_equity == 101_000.0
        assert closure.trade.status == TradeStatus.CLOSED
        assert closure.trade.exit_price == 160.0
        assert closure.trade.realized_pnl == 1000.0
        assert closure.trade.exit_date == EXIT_TIME
        assert closure.trade.outcome == TradeOutcome.WIN
        assert long_trade.status == TradeStatus.ACTIVE

    def test_short_loss(self, short_trade):
        closure = close_trade(short_trade, 205.0, 50_000)
        assert closure.realized_pnl == -250.0
        assert closure.new_equity == 49_750.0
        assert closure.trade.outcome == TradeOutcome.LOSS

    def test_breakeven(self, long_trade):
        closure = close_trade(long_trade, 150.0, 100_000)
        assert closure.realized_pnl == 0.0
        assert closure.trade.outcome == TradeOutcome.BREAKEVEN

    def test_naive_exit_date_read_as_utc(self, long_trade):
        closure = close_trade(long_trade, 160.0, 100_000, exit_date=datetime(2024, 1, 5, 16, 0))
        assert closure.trade.exit_date == EXIT_TIME

    def test_close_is_terminal(self, closed_trade):
        with pytest.raises(TradeStateError, match="Cannot close trade t-1"):
            close_trade(closed_trade, 170.0, 100_000)

    @pytest.mark.parametrize("price", [0, -1, float("nan")])
    def test_invalid_exit_price_is_reported(self, long_trade, price):
        closure = close_trade(long_trade, price, 100_000)
        assert closure.is_valid is False
        assert closure.validation.error == "Exit price must be a positive number"
        assert closure.trade is None
        assert closure.realized_pnl is None
        assert closure.new_equity is None

    def test_wire_names(self, long_trade):
        payload = close_trade(long_trade, 160.0, 100_000).model_dump(by_alias=True)
        assert payload["realizedPnL"] == 1000.0
        assert payload["newEquity"] == 101_000.0
        assert payload["validation"] == {"isValid": True, "error": None}


class TestReplaceMethodAnalysis:
    def test_recomputes_alignment(self, long_trade, observation):
        updated = replace_method_analysis(long_trade, [
            observation(Timeframe.DAILY),
            observation(Timeframe.WEEKLY),
        ]).trade
        assert len(updated.method_analysis) == 2
        assert updated.alignment.alignment_level == AlignmentLevel.STRONG_ALIGNMENT

    def test_replaces_wholesale(self, long_trade, observation):
        first = replace_method_analysis(long_trade, [observation(Timeframe.DAILY)]).trade
        second = replace_method_analysis(
            first, [observation(Timeframe.MONTHLY, signal=Signal.SELL_SIGNAL)]
        ).trade
        assert [o.timeframe for o in second.method_analysis] == [Timeframe.MONTHLY]
        assert second.alignment.overall_score == -1.0

    def test_empty_clears_alignment(self, long_trade, observation):
        analysed = replace_method_analysis(long_trade, [observation()]).trade
        cleared = replace_method_analysis(analysed, []).trade
        assert cleared.method_analysis == ()
        assert cleared.alignment is None

    def test_duplicate_timeframes_are_reported(self, long_trade, observation):
        result = replace_method_analysis(long_trade, [observation(), observation()])
        assert result.validation == ValidationResult.fail("Duplicate timeframe analysis")
        assert result.trade is None

    def test_allowed_after_close(self, closed_trade, observation):
        updated = replace_method_analysis(closed_trade, [observation()]).trade
        assert updated.alignment is not None
        assert updated.is_closed


class TestReplaceMindsetTags:
    def test_replace(self, long_trade):
        tags = [MindsetTag(tag=MindsetTagType.CALM, intensity=Intensity.HIGH)]
        result = replace_mindset_tags(long_trade, tags)
        assert result.is_valid
        assert result.trade.mindset_tags == tuple(tags)

    def test_too_many_is_reported(self, long_trade):
        tags = [MindsetTag(tag=t) for t in list(MindsetTagType)[:6]]
        result = replace_mindset_tags(long_trade, tags)
        assert not result
        assert "Maximum of 5" in result.validation.error

    def test_duplicates_are_reported(self, long_trade):
        tags = [MindsetTag(tag=MindsetTagType.FOMO), MindsetTag(tag=MindsetTagType.FOMO)]
        result = replace_mindset_tags(long_trade, tags)
        assert result.trade is None
        assert "Duplicate mindset tags" in result.validation.error
