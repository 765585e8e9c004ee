"""Performance analytics over collections of trades and grades."""

from .grades import calculate_grade_analytics, generate_coaching_recommendations
from .statistics import (
    PERFORMANCE_BENCHMARKS,
    assess_statistical_significance,
    benchmark_level,
    benchmark_statistics,
    binomial_p_value,
    calculate_performance_statistics,
)
from .summary import return_percentage, summarize_trades

__all__ = [
    "PERFORMANCE_BENCHMARKS",
    "assess_statistical_significance",
    "benchmark_level",
    "benchmark_statistics",
    "binomial_p_value",
    "calculate_grade_analytics",
    "calculate_performance_statistics",
    "generate_coaching_recommendations",
    "return_percentage",
    "summarize_trades",
]
