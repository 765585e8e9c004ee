"""Multi-timeframe alignment analysis.

Scores how strongly a trader's own technical observations agree with the
direction of the trade they took. Each timeframe is scored independently
from the lookup in :mod:`.rules`; the overall score is their plain mean,
so no timeframe outweighs another.

Usage::

    result = analyze_alignment(Direction.LONG, trade.method_analysis)
    print(result.alignment_level)   # AlignmentLevel.STRONG_ALIGNMENT
    print(result.confirmations)     # ("DAILY: MACD BUY_SIGNAL supports LONG direction", ...)
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from trading_journal.core.enums import (
    AlignmentLevel,
    AlignmentVerdict,
    Direction,
    Divergence,
)
from trading_journal.core.models import (
    AlignmentAnalysis,
    MethodAnalysisObservation,
    TimeframeBreakdown,
    ValidationResult,
)

from .rules import divergence_agrees, lookup_score

logger = logging.getLogger(__name__)

ERR_INVALID_DIRECTION = "Invalid or missing trade direction"
ERR_ANALYSIS_REQUIRED = "Method analysis is required for alignment calculation"
ERR_DUPLICATE_TIMEFRAME = "Duplicate timeframe analysis detected"

# Lower bound (exclusive) of each level, best first.
_LEVEL_THRESHOLDS: list[tuple[float, AlignmentLevel]] = [
    (0.8, AlignmentLevel.STRONG_ALIGNMENT),
    (0.2, AlignmentLevel.WEAK_ALIGNMENT),
]


def determine_alignment_level(overall_score: float) -> AlignmentLevel:
    """Map an overall score in [-1, 1] to its level.

    ``> 0.8`` strong alignment, ``(0.2, 0.8]`` weak alignment,
    ``[-0.2, 0.2]`` neutral, ``[-0.8, -0.2)`` weak conflict,
    ``< -0.8`` strong conflict.
    """
    for threshold, level in _LEVEL_THRESHOLDS:
        if overall_score > threshold:
            return level
    if overall_score >= -0.2:
        return AlignmentLevel.NEUTRAL
    if overall_score >= -0.8:
        return AlignmentLevel.WEAK_CONFLICT
    return AlignmentLevel.STRONG_CONFLICT


def _parse_direction(direction: object) -> Direction | None:
    try:
        return Direction(direction)
    except ValueError:
        return None


def _duplicate_timeframes(observations: Sequence[MethodAnalysisObservation]) -> bool:
    timeframes = [o.timeframe for o in observations]
    return len(set(timeframes)) != len(timeframes)


def validate_method_analysis(
    observations: Sequence[MethodAnalysisObservation],
) -> ValidationResult:
    """At most one observation per timeframe."""
    if _duplicate_timeframes(observations):
        return ValidationResult.fail("Duplicate timeframe analysis")
    return ValidationResult.ok()


def validate_alignment_request(
    direction: Direction | str | None,
    observations: Sequence[MethodAnalysisObservation] | None,
) -> ValidationResult:
    if direction is None or _parse_direction(direction) is None:
        return ValidationResult.fail(ERR_INVALID_DIRECTION)
    if not observations:
        return ValidationResult.fail(ERR_ANALYSIS_REQUIRED)
    if _duplicate_timeframes(observations):
        return ValidationResult.fail(ERR_DUPLICATE_TIMEFRAME)
    return ValidationResult.ok()


def observation_score(
    direction: Direction,
    observation: MethodAnalysisObservation,
) -> float:
    return lookup_score(
        direction,
        observation.indicator,
        observation.signal,
        observation.divergence,
    )


def _verdict(score: float) -> AlignmentVerdict:
    if score > 0:
        return AlignmentVerdict.ALIGNED
    if score < 0:
        return AlignmentVerdict.CONFLICTED
    return AlignmentVerdict.NEUTRAL


def _describe(
    direction: Direction,
    observation: MethodAnalysisObservation,
    verdict: AlignmentVerdict,
) -> str:
    prefix = (
        f"{observation.timeframe.value}: {observation.indicator.value} "
        f"{observation.signal.value}"
    )
    if verdict == AlignmentVerdict.ALIGNED:
        text = f"{prefix} supports {direction.value} direction"
    else:
        text = f"{prefix} conflicts with {direction.value} direction"

    if observation.divergence != Divergence.NONE:
        stance = "supports" if divergence_agrees(observation.divergence, direction) else "opposes"
        text += f" ({observation.divergence.value} divergence {stance} {direction.value})"
    return text


def analyze_alignment(
    direction: Direction | str,
    observations: Iterable[MethodAnalysisObservation],
) -> AlignmentAnalysis | ValidationResult:
    """Score the agreement of ``observations`` with ``direction``.

    An invalid request returns the failed :class:`ValidationResult`
    instead of an analysis.
    """
    observations = list(observations)
    validation = validate_alignment_request(direction, observations)
    if not validation.is_valid:
        logger.debug("Alignment refused: %s", validation.error)
        return validation

    side = Direction(direction)
    warnings: list[str] = []
    confirmations: list[str] = []
    breakdown: list[TimeframeBreakdown] = []
    total = 0.0

    for observation in observations:
        score = observation_score(side, observation)
        verdict = _verdict(score)
        total += score

        if verdict == AlignmentVerdict.ALIGNED:
            confirmations.append(_describe(side, observation, verdict))
        elif verdict == AlignmentVerdict.CONFLICTED:
            warnings.append(_describe(side, observation, verdict))

        breakdown.append(TimeframeBreakdown(
            timeframe=observation.timeframe,
            indicator=observation.indicator,
            signal=observation.signal,
            score=score,
            alignment=verdict,
        ))

    overall = total / len(observations)
    level = determine_alignment_level(overall)

    logger.debug(
        "Alignment: direction=%s timeframes=%d score=%.3f level=%s",
        side.value,
        len(observations),
        overall,
        level.value,
    )

    return AlignmentAnalysis(
        overall_score=overall,
        alignment_level=level,
        warnings=tuple(warnings),
        confirmations=tuple(confirmations),
        timeframe_breakdown=tuple(breakdown),
    )
