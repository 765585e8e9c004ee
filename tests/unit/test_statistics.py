"""Tests for performance statistics and win-rate significance."""

import math
from datetime import datetime

import pytest

from trading_journal.analytics import (
    PERFORMANCE_BENCHMARKS,
    assess_statistical_significance,
    benchmark_level,
    benchmark_statistics,
    binomial_p_value,
    calculate_performance_statistics,
)
from trading_journal.core.config import AnalyticsConfig
from trading_journal.core.enums import BenchmarkLevel, BenchmarkMetric, StreakType


@pytest.fixture
def mixed_trades(make_closed_trade):
    """W L B W L in entry order."""
    pnls = [100.0, -50.0, 0.0, 200.0, -100.0]
    return [make_closed_trade(pnl, index=i) for i, pnl in enumerate(pnls)]


def _alternating(make_closed_trade, n: int):
    return [
        make_closed_trade(100.0 if i % 2 == 0 else -100.0, index=i)
        for i in range(n)
    ]


class TestPerformanceStatistics:
    def test_empty(self):
        stats = calculate_performance_statistics([])
        assert stats.total_trades == 0
        assert stats.win_rate == 0
        assert stats.profit_factor == 0
        assert stats.streak_type == StreakType.NONE

    def test_active_trades_ignored(self, long_trade):
        stats = calculate_performance_statistics([long_trade])
        assert stats.total_trades == 0
        assert stats.win_rate == 0

    def test_counts_and_rates(self, mixed_trades):
        stats = calculate_performance_statistics(mixed_trades)
        assert stats.total_trades == 5
        assert stats.winning_trades == 2
        assert stats.losing_trades == 2
        assert stats.breakeven_trades == 1
        assert stats.win_rate == 40.0
        assert stats.loss_rate == 40.0
        assert stats.win_loss_ratio == 1.0

    def test_pnl_figures(self, mixed_trades):
        stats = calculate_performance_statistics(mixed_trades)
        assert stats.total_pnl == 150.0
        assert stats.average_profit == 150.0
        assert stats.average_loss == 75.0
        assert stats.average_trade == 30.0
        assert stats.expectancy == 15.0
        assert stats.profit_factor == 2.0
        assert stats.max_win == 200.0
        assert stats.max_loss == 100.0

    def test_sequence_figures(self, mixed_trades):
        stats = calculate_performance_statistics(mixed_trades)
        assert stats.max_consecutive_wins == 1
        assert stats.max_consecutive_losses == 1
        assert stats.current_streak == 1
        assert stats.streak_type == StreakType.LOSS
        assert stats.max_drawdown == 100.0
        assert stats.recovery_factor == 1.5

    def test_risk_and_hold_time(self, mixed_trades):
        stats = calculate_performance_statistics(mixed_trades)
        assert stats.average_risk == 500.0
        assert stats.risk_adjusted_return == 0.3
        assert stats.average_hold_time == pytest.approx(6.0)

    def test_naive_and_aware_entry_dates_sort_together(self, make_closed_trade):
        # naive dates are read as UTC, so the mix orders without a TypeError
        trades = [
            make_closed_trade(100.0, index=1),
            make_closed_trade(100.0, index=3, entry_date=datetime(2024, 1, 5, 9, 0)),
            make_closed_trade(-100.0, index=0, entry_date=datetime(2024, 1, 2, 9, 0)),
        ]
        stats = calculate_performance_statistics(trades)
        assert stats.current_streak == 2
        assert stats.streak_type == StreakType.WIN
        assert stats.max_consecutive_losses == 1

    def test_no_losses_profit_factor_zero(self, make_closed_trade):
        trades = [make_closed_trade(100.0, index=0), make_closed_trade(50.0, index=1)]
        stats = calculate_performance_statistics(trades)
        assert stats.win_rate == 100.0
        assert stats.profit_factor == 0.0
        assert stats.win_loss_ratio == 0.0
        assert stats.max_drawdown == 0.0
        assert stats.recovery_factor == 0.0

    def test_streaks_follow_entry_order(self, make_closed_trade):
        trades = [
            make_closed_trade(100.0, index=2),
            make_closed_trade(-100.0, index=0),
            make_closed_trade(100.0, index=1),
        ]
        stats = calculate_performance_statistics(trades)
        assert stats.current_streak == 2
        assert stats.streak_type == StreakType.WIN
        assert stats.max_consecutive_wins == 2

    def test_breakeven_ends_streak(self, make_closed_trade):
        trades = [make_closed_trade(100.0, index=0), make_closed_trade(0.0, index=1)]
        stats = calculate_performance_statistics(trades)
        assert stats.current_streak == 0
        assert stats.streak_type == StreakType.NONE


class TestStatisticalSignificance:
    def test_thirty_five_alternating_trades(self, make_closed_trade):
        result = assess_statistical_significance(_alternating(make_closed_trade, 35))
        assert result.sample_size == 35
        assert result.is_significant is True
        assert result.confidence_level == 95
        assert result.recommendation == "Statistics are reliable for analysis"
        assert result.margin_of_error == pytest.approx(1.96 / math.sqrt(35))
        # 18 wins of 35 is exactly the continuity-corrected mean
        assert result.p_value_win_rate == pytest.approx(0.5)

    def test_single_trade(self, make_closed_trade):
        result = assess_statistical_significance([make_closed_trade(100.0)])
        assert result.sample_size == 1
        assert result.is_significant is False
        assert "29 more trades" in result.recommendation
        assert result.recommendation == "Need 29 more trades for statistical significance"

    def test_boundary_thirty(self, make_closed_trade):
        assert assess_statistical_significance(_alternating(make_closed_trade, 30)).is_significant
        assert not assess_statistical_significance(
            _alternating(make_closed_trade, 29)
        ).is_significant

    def test_active_trades_not_counted(self, long_trade, make_closed_trade):
        result = assess_statistical_significance([long_trade, make_closed_trade(10.0)])
        assert result.sample_size == 1

    def test_no_trades(self):
        result = assess_statistical_significance([])
        assert result.sample_size == 0
        assert result.margin_of_error == 1.0
        assert result.p_value_win_rate == 1.0
        assert result.recommendation == "Need 30 more trades for statistical significance"

    def test_configurable_sample_size(self, make_closed_trade):
        cfg = AnalyticsConfig(significance_sample_size=10)
        result = assess_statistical_significance(_alternating(make_closed_trade, 8), cfg)
        assert result.recommendation == "Need 2 more trades for statistical significance"


class TestBinomialPValue:
    def test_exact_small_sample(self):
        # P(X >= 2 | n=4, p=0.5) = 11/16
        assert binomial_p_value(4, 2) == pytest.approx(0.6875)

    def test_all_wins(self):
        assert binomial_p_value(10, 10) == pytest.approx(0.5 ** 10)

    def test_zero_wins_is_certain(self):
        assert binomial_p_value(10, 0) == pytest.approx(1.0)

    def test_strong_edge_large_sample(self):
        assert binomial_p_value(100, 80) < 0.001


class TestBenchmarks:
    @pytest.mark.parametrize(
        ("metric", "value", "level"),
        [
            (BenchmarkMetric.WIN_RATE, 75, BenchmarkLevel.EXCELLENT),
            (BenchmarkMetric.WIN_RATE, 65, BenchmarkLevel.GOOD),
            (BenchmarkMetric.WIN_RATE, 55, BenchmarkLevel.ACCEPTABLE),
            (BenchmarkMetric.WIN_RATE, 35, BenchmarkLevel.POOR),
            (BenchmarkMetric.PROFIT_FACTOR, 2.5, BenchmarkLevel.EXCELLENT),
            (BenchmarkMetric.PROFIT_FACTOR, 1.7, BenchmarkLevel.GOOD),
            (BenchmarkMetric.PROFIT_FACTOR, 1.3, BenchmarkLevel.ACCEPTABLE),
            (BenchmarkMetric.PROFIT_FACTOR, 0.8, BenchmarkLevel.POOR),
            (BenchmarkMetric.EXPECTANCY, 0.015, BenchmarkLevel.GOOD),
            (BenchmarkMetric.EXPECTANCY, -0.01, BenchmarkLevel.POOR),
        ],
    )
    def test_levels(self, metric, value, level):
        assert benchmark_level(metric, value) == level

    def test_thresholds_are_inclusive(self):
        for metric, table in PERFORMANCE_BENCHMARKS.items():
            for level in (BenchmarkLevel.EXCELLENT, BenchmarkLevel.ACCEPTABLE):
                assert benchmark_level(metric, table[level]) == level

    def test_accepts_wire_name(self):
        assert benchmark_level("WIN_RATE", 60) == BenchmarkLevel.GOOD

    def test_rates_statistics(self, mixed_trades):
        stats = calculate_performance_statistics(mixed_trades)
        ratings = {r.metric: r for r in benchmark_statistics(stats, equity=1000)}
        assert ratings[BenchmarkMetric.PROFIT_FACTOR].level == BenchmarkLevel.EXCELLENT
        assert ratings[BenchmarkMetric.WIN_RATE].level == BenchmarkLevel.POOR
        # expectancy 15 on 1000 equity is 1.5% per trade
        assert ratings[BenchmarkMetric.EXPECTANCY].value == pytest.approx(0.015)
        assert ratings[BenchmarkMetric.EXPECTANCY].level == BenchmarkLevel.GOOD

    def test_expectancy_needs_equity(self, mixed_trades):
        stats = calculate_performance_statistics(mixed_trades)
        metrics = [r.metric for r in benchmark_statistics(stats)]
        assert metrics == [BenchmarkMetric.PROFIT_FACTOR, BenchmarkMetric.WIN_RATE]
        assert len(benchmark_statistics(stats, equity=0)) == 2
