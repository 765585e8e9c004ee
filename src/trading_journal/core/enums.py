"""Enumerations used across the evaluation engine."""

from enum import Enum


class Direction(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class TradeOutcome(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    BREAKEVEN = "BREAKEVEN"


# ---------------------------------------------------------------------------
# Method analysis taxonomy
# ---------------------------------------------------------------------------

class Timeframe(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class Indicator(str, Enum):
    MACD = "MACD"
    RSI = "RSI"
    STOCHASTICS = "STOCHASTICS"
    MOVING_AVERAGES = "MOVING_AVERAGES"
    BOLLINGER_BANDS = "BOLLINGER_BANDS"
    VOLUME = "VOLUME"
    SUPPORT_RESISTANCE = "SUPPORT_RESISTANCE"
    TRENDLINES = "TRENDLINES"
    FIBONACCI = "FIBONACCI"
    OTHER = "OTHER"


class Signal(str, Enum):
    BUY_SIGNAL = "BUY_SIGNAL"
    SELL_SIGNAL = "SELL_SIGNAL"
    CONTINUATION = "CONTINUATION"
    REVERSAL = "REVERSAL"
    BREAKOUT = "BREAKOUT"
    BREAKDOWN = "BREAKDOWN"
    OVERSOLD = "OVERSOLD"
    OVERBOUGHT = "OVERBOUGHT"
    NEUTRAL = "NEUTRAL"


class Divergence(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NONE = "NONE"


class AlignmentLevel(str, Enum):
    """Ordered from worst to best; compare with :attr:`rank`."""

    STRONG_CONFLICT = "STRONG_CONFLICT"
    WEAK_CONFLICT = "WEAK_CONFLICT"
    NEUTRAL = "NEUTRAL"
    WEAK_ALIGNMENT = "WEAK_ALIGNMENT"
    STRONG_ALIGNMENT = "STRONG_ALIGNMENT"

    @property
    def rank(self) -> int:
        return list(AlignmentLevel).index(self)


class AlignmentVerdict(str, Enum):
    ALIGNED = "ALIGNED"
    CONFLICTED = "CONFLICTED"
    NEUTRAL = "NEUTRAL"


# ---------------------------------------------------------------------------
# Mindset
# ---------------------------------------------------------------------------

class MindsetTagType(str, Enum):
    # Constructive
    DISCIPLINED = "DISCIPLINED"
    PATIENT = "PATIENT"
    CONFIDENT = "CONFIDENT"
    FOCUSED = "FOCUSED"
    CALM = "CALM"
    ANALYTICAL = "ANALYTICAL"

    # Detrimental
    ANXIOUS = "ANXIOUS"
    UNCERTAIN = "UNCERTAIN"
    FOMO = "FOMO"
    GREEDY = "GREEDY"
    FEARFUL = "FEARFUL"
    IMPULSIVE = "IMPULSIVE"
    REVENGE_TRADING = "REVENGE_TRADING"
    OVERCONFIDENT = "OVERCONFIDENT"

    # Neutral
    NEUTRAL = "NEUTRAL"
    TIRED = "TIRED"
    DISTRACTED = "DISTRACTED"


class MindsetCategory(str, Enum):
    CONSTRUCTIVE = "constructive"
    DETRIMENTAL = "detrimental"
    NEUTRAL = "neutral"


class Intensity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# ---------------------------------------------------------------------------
# Grading
# ---------------------------------------------------------------------------

class Grade(str, Enum):
    """Letter grade, best first."""

    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D = "D"
    F = "F"


class GradeReason(str, Enum):
    TRADE_CLOSE = "TRADE_CLOSE"
    ANALYSIS_UPDATE = "ANALYSIS_UPDATE"
    MINDSET_UPDATE = "MINDSET_UPDATE"
    MANUAL_RECALC = "MANUAL_RECALC"


class GradeTrend(str, Enum):
    IMPROVING = "IMPROVING"
    DECLINING = "DECLINING"
    STABLE = "STABLE"


class CoachingCategory(str, Enum):
    RISK_MANAGEMENT = "RISK_MANAGEMENT"
    METHOD_ALIGNMENT = "METHOD_ALIGNMENT"
    MINDSET_QUALITY = "MINDSET_QUALITY"
    EXECUTION = "EXECUTION"


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# ---------------------------------------------------------------------------
# Risk / equity
# ---------------------------------------------------------------------------

class RiskLevel(str, Enum):
    SAFE = "SAFE"
    WARNING = "WARNING"
    DANGER = "DANGER"


class CashAdjustmentType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class StreakType(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    NONE = "NONE"


class BenchmarkMetric(str, Enum):
    PROFIT_FACTOR = "PROFIT_FACTOR"
    WIN_RATE = "WIN_RATE"
    EXPECTANCY = "EXPECTANCY"


class BenchmarkLevel(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    POOR = "POOR"
