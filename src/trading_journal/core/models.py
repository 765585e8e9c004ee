"""Core domain models used across the evaluation engine.

These are the canonical records exchanged with the host application.
All of them are frozen: engine functions return new instances rather than
mutating their inputs. Field names are snake_case in Python and camelCase
on the wire (``model_dump(by_alias=True)``), matching the host's JSON.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import (
    AlignmentLevel,
    AlignmentVerdict,
    BenchmarkLevel,
    BenchmarkMetric,
    CoachingCategory,
    Direction,
    Divergence,
    Grade,
    GradeReason,
    GradeTrend,
    Indicator,
    Intensity,
    MindsetTagType,
    Priority,
    RiskLevel,
    Signal,
    StreakType,
    Timeframe,
    TradeOutcome,
    TradeStatus,
)


class JournalModel(BaseModel):
    """Base for every engine record."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationResult(JournalModel):
    """Structured pre-condition check outcome. Never raised."""

    is_valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def fail(cls, error: str) -> ValidationResult:
        return cls(is_valid=False, error=error)

    def __bool__(self) -> bool:
        return self.is_valid


# ---------------------------------------------------------------------------
# Trade inputs
# ---------------------------------------------------------------------------

# Supplied risk_amount may differ from the derived value by at most a cent.
_RISK_TOLERANCE = 0.01


class MethodAnalysisObservation(JournalModel):
    """One technical-analysis reading on one timeframe."""

    timeframe: Timeframe
    indicator: Indicator
    signal: Signal
    divergence: Divergence = Divergence.NONE
    notes: str | None = None


class MindsetTag(JournalModel):
    """Self-reported psychological state attached to a trade."""

    tag: MindsetTagType
    intensity: Intensity = Intensity.MEDIUM


class TimeframeBreakdown(JournalModel):
    timeframe: Timeframe
    indicator: Indicator
    signal: Signal
    score: float  # -1 .. 1
    alignment: AlignmentVerdict


class AlignmentAnalysis(JournalModel):
    """Directional agreement of a trade with its method analysis."""

    overall_score: float  # -1 .. 1
    alignment_level: AlignmentLevel
    warnings: tuple[str, ...] = ()
    confirmations: tuple[str, ...] = ()
    timeframe_breakdown: tuple[TimeframeBreakdown, ...] = ()


class Trade(JournalModel):
    """A single directional position with entry, size and protective stop.

    ``risk_amount`` is derived from entry, stop and size when the host does
    not supply it; a supplied value must agree with that formula. A trade
    is CLOSED exactly when it carries both ``exit_price`` and
    ``realized_pnl``. Naive timestamps are taken as UTC.

    Use :meth:`evolve` rather than ``model_copy(update=...)`` so changed
    fields go through the same checks.
    """

    id: str = ""
    symbol: str
    direction: Direction
    entry_price: float
    position_size: float
    stop_loss: float
    exit_price: float | None = None
    target_price: float | None = None
    status: TradeStatus = TradeStatus.ACTIVE
    risk_amount: float | None = None
    risk_percentage: float = 0.0
    realized_pnl: float | None = Field(default=None, alias="realizedPnL")
    entry_date: datetime | None = None
    exit_date: datetime | None = None

    method_analysis: tuple[MethodAnalysisObservation, ...] = ()
    mindset_tags: tuple[MindsetTag, ...] = ()
    alignment: AlignmentAnalysis | None = None

    @field_validator("entry_date", "exit_date")
    @classmethod
    def naive_dates_are_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def risk_and_status_consistent(self) -> Trade:
        from trading_journal.risk.calculator import trade_risk

        settled = self.exit_price is not None and self.realized_pnl is not None
        if self.status == TradeStatus.CLOSED and not settled:
            raise ValueError("CLOSED trade requires both exit_price and realized_pnl")
        if self.status == TradeStatus.ACTIVE and settled:
            raise ValueError("trade with exit_price and realized_pnl must be CLOSED")

        expected = trade_risk(self.entry_price, self.stop_loss, self.position_size)
        if self.risk_amount is None:
            object.__setattr__(self, "risk_amount", expected)
        elif not math.isclose(
            self.risk_amount, expected, rel_tol=1e-9, abs_tol=_RISK_TOLERANCE
        ):
            raise ValueError(
                f"risk_amount {self.risk_amount} does not match "
                f"|entry - stop| * size = {expected}"
            )
        return self

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED

    @property
    def outcome(self) -> TradeOutcome | None:
        """WIN / LOSS / BREAKEVEN for closed trades, None while active."""
        if not self.is_closed:
            return None
        if not self.realized_pnl:
            return TradeOutcome.BREAKEVEN
        return TradeOutcome.WIN if self.realized_pnl > 0 else TradeOutcome.LOSS

    def evolve(self, **changes: Any) -> Trade:
        """Validated copy with ``changes`` applied."""
        return Trade.model_validate({**self.model_dump(), **changes})


class LifecycleResult(JournalModel):
    """Outcome of one lifecycle transition.

    ``trade`` is the updated trade when ``validation`` passed and None when
    the input was refused. ``realized_pnl`` and ``new_equity`` are set only
    by a close.
    """

    validation: ValidationResult
    trade: Trade | None = None
    realized_pnl: float | None = Field(default=None, alias="realizedPnL")
    new_equity: float | None = None

    @classmethod
    def rejected(cls, validation: ValidationResult) -> LifecycleResult:
        return cls(validation=validation)

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid

    def __bool__(self) -> bool:
        return self.validation.is_valid


class CashAdjustmentResult(JournalModel):
    """New equity after a deposit or withdrawal, or the reason it was refused."""

    validation: ValidationResult
    new_equity: float | None = None


# ---------------------------------------------------------------------------
# Risk outputs
# ---------------------------------------------------------------------------

class TradeRiskLine(JournalModel):
    id: str
    symbol: str
    risk_amount: float
    risk_percentage: float


class PortfolioRiskSummary(JournalModel):
    total_risk_amount: float
    total_risk_percentage: float
    exceeds_limit: bool
    risk_level: RiskLevel
    active_trades: tuple[TradeRiskLine, ...] = ()


# ---------------------------------------------------------------------------
# Grading
# ---------------------------------------------------------------------------

class GradeComponent(JournalModel):
    """One weighted dimension of a trade grade."""

    score: float  # 0-100
    weight: float
    factors: tuple[str, ...] = ()
    improvements: tuple[str, ...] = ()


class GradeBreakdown(JournalModel):
    risk_management: GradeComponent
    method_alignment: GradeComponent
    mindset_quality: GradeComponent
    execution: GradeComponent

    def by_category(self) -> dict[CoachingCategory, GradeComponent]:
        return {
            CoachingCategory.RISK_MANAGEMENT: self.risk_management,
            CoachingCategory.METHOD_ALIGNMENT: self.method_alignment,
            CoachingCategory.MINDSET_QUALITY: self.mindset_quality,
            CoachingCategory.EXECUTION: self.execution,
        }


class TradeGrade(JournalModel):
    overall: Grade
    score: float  # 0-100
    breakdown: GradeBreakdown
    explanation: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()


class GradeHistoryEntry(JournalModel):
    """Immutable audit row appended on every recalculation."""

    trade_id: str
    grade: Grade
    score: float
    reason: GradeReason
    calculated_at: datetime


class GradeRecalculation(JournalModel):
    """Result of one recalculation: the replacement grade plus new history."""

    grade: TradeGrade
    history_entry: GradeHistoryEntry
    history: tuple[GradeHistoryEntry, ...]


class GradedTrade(JournalModel):
    """A grade observed at a point in time, with the trade's P&L if known."""

    grade: TradeGrade
    date: datetime
    outcome: float | None = None

    @field_validator("date")
    @classmethod
    def naive_dates_are_utc(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

class PerformanceStatistics(JournalModel):
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0

    win_rate: float = 0.0  # percentage
    loss_rate: float = 0.0  # percentage
    win_loss_ratio: float = 0.0

    total_pnl: float = Field(default=0.0, alias="totalPnL")
    average_profit: float = 0.0
    average_loss: float = 0.0
    average_trade: float = 0.0

    expectancy: float = 0.0
    profit_factor: float = 0.0
    recovery_factor: float = 0.0

    max_win: float = 0.0
    max_loss: float = 0.0
    max_consecutive_wins: int = 0
    max_consecutive_losses: int = 0
    current_streak: int = 0
    streak_type: StreakType = StreakType.NONE

    average_risk: float = 0.0
    risk_adjusted_return: float = 0.0
    max_drawdown: float = 0.0
    average_hold_time: float = 0.0  # hours


class BenchmarkRating(JournalModel):
    """Where one statistic sits against the fixed performance benchmarks."""

    metric: BenchmarkMetric
    value: float
    level: BenchmarkLevel


class TradeSummary(JournalModel):
    """Headline figures for a set of trades."""

    win_rate: float = 0.0  # percentage of closed trades
    total_pnl: float = Field(default=0.0, alias="totalPnL")
    average_risk: float = 0.0
    most_common_indicator: Indicator | None = None
    dominant_mindset: MindsetTagType | None = None


class StatisticalSignificance(JournalModel):
    sample_size: int
    is_significant: bool
    confidence_level: float
    margin_of_error: float
    p_value_win_rate: float
    recommendation: str


class CoachingRecommendation(JournalModel):
    category: CoachingCategory
    priority: Priority
    message: str
    action_items: tuple[str, ...] = ()


class GradeImprovement(JournalModel):
    trend: GradeTrend = GradeTrend.STABLE
    change_rate: float = 0.0
    recent_average: float = 0.0
    historical_average: float = 0.0


class GradeCorrelations(JournalModel):
    grade_vs_outcome: float = 0.0


class GradeAnalytics(JournalModel):
    average_grade: float = 0.0
    grade_distribution: dict[Grade, int] = Field(default_factory=dict)
    grade_improvement: GradeImprovement = Field(default_factory=GradeImprovement)
    correlations: GradeCorrelations = Field(default_factory=GradeCorrelations)
