"""Alignment scoring table.

The agreement of one observation with a trade direction is a pure lookup:

    score = ALIGNMENT_MATRIX[(direction, signal, divergence)]

provided the observation's indicator actually produces that signal
(``INDICATOR_SIGNALS``); otherwise the observation scores 0. The matrix is
built once from two small tables so each entry can be audited:

    Signal          LONG bias   SHORT bias
    ─────────────────────────────────────
    BUY_SIGNAL        +1.0        -1.0
    SELL_SIGNAL       -1.0        +1.0
    BREAKOUT          +0.9        -0.9
    BREAKDOWN         -0.9        +0.9
    OVERSOLD          +0.7        -0.3
    OVERBOUGHT        -0.3        +0.7
    REVERSAL          +0.7        +0.7
    CONTINUATION      +0.6        +0.6
    NEUTRAL            0.0         0.0

    Divergence pointing the same way as the signal  x1.2
    Divergence pointing against the signal          x0.8
    No divergence                                   x1.0

Products are clamped to [-1, 1].
"""

from __future__ import annotations

from trading_journal.core.enums import Direction, Divergence, Indicator, Signal

# Signal bias per direction, before divergence.
SIGNAL_BIAS: dict[Signal, dict[Direction, float]] = {
    Signal.BUY_SIGNAL: {Direction.LONG: 1.0, Direction.SHORT: -1.0},
    Signal.SELL_SIGNAL: {Direction.LONG: -1.0, Direction.SHORT: 1.0},
    Signal.BREAKOUT: {Direction.LONG: 0.9, Direction.SHORT: -0.9},
    Signal.BREAKDOWN: {Direction.LONG: -0.9, Direction.SHORT: 0.9},
    Signal.OVERSOLD: {Direction.LONG: 0.7, Direction.SHORT: -0.3},
    Signal.OVERBOUGHT: {Direction.LONG: -0.3, Direction.SHORT: 0.7},
    Signal.REVERSAL: {Direction.LONG: 0.7, Direction.SHORT: 0.7},
    Signal.CONTINUATION: {Direction.LONG: 0.6, Direction.SHORT: 0.6},
    Signal.NEUTRAL: {Direction.LONG: 0.0, Direction.SHORT: 0.0},
}

ALIGNED_DIVERGENCE_FACTOR = 1.2
OPPOSED_DIVERGENCE_FACTOR = 0.8

# Which signals each indicator can meaningfully emit.
INDICATOR_SIGNALS: dict[Indicator, frozenset[Signal]] = {
    Indicator.MACD: frozenset({
        Signal.BUY_SIGNAL, Signal.SELL_SIGNAL, Signal.CONTINUATION,
    }),
    Indicator.RSI: frozenset({
        Signal.BUY_SIGNAL, Signal.SELL_SIGNAL, Signal.OVERSOLD, Signal.OVERBOUGHT,
    }),
    Indicator.STOCHASTICS: frozenset({
        Signal.BUY_SIGNAL, Signal.SELL_SIGNAL, Signal.OVERSOLD, Signal.OVERBOUGHT,
    }),
    Indicator.MOVING_AVERAGES: frozenset({
        Signal.BREAKOUT, Signal.BREAKDOWN, Signal.CONTINUATION,
    }),
    Indicator.BOLLINGER_BANDS: frozenset({
        Signal.BREAKOUT, Signal.BREAKDOWN, Signal.OVERSOLD, Signal.OVERBOUGHT,
    }),
    Indicator.VOLUME: frozenset({Signal.BREAKOUT, Signal.BREAKDOWN}),
    Indicator.SUPPORT_RESISTANCE: frozenset({
        Signal.BREAKOUT, Signal.BREAKDOWN, Signal.REVERSAL,
    }),
    Indicator.TRENDLINES: frozenset({Signal.BREAKOUT, Signal.BREAKDOWN}),
    Indicator.FIBONACCI: frozenset({Signal.REVERSAL, Signal.CONTINUATION}),
    Indicator.OTHER: frozenset(),
}


def divergence_factor(divergence: Divergence, direction: Direction, bias: float) -> float:
    """Amplify a signal whose divergence points the same way, damp it otherwise.

    A bearish divergence behind a sell signal deepens the conflict with a
    LONG trade just as a bullish one behind a buy signal deepens agreement.
    """
    if divergence == Divergence.NONE or bias == 0:
        return 1.0
    if divergence_agrees(divergence, direction) == (bias > 0):
        return ALIGNED_DIVERGENCE_FACTOR
    return OPPOSED_DIVERGENCE_FACTOR


def divergence_agrees(divergence: Divergence, direction: Direction) -> bool:
    return (
        (divergence == Divergence.BULLISH and direction == Direction.LONG)
        or (divergence == Divergence.BEARISH and direction == Direction.SHORT)
    )


def _clamp(score: float) -> float:
    return max(-1.0, min(1.0, score))


ALIGNMENT_MATRIX: dict[tuple[Direction, Signal, Divergence], float] = {
    (direction, signal, divergence): _clamp(
        round(bias[direction] * divergence_factor(divergence, direction, bias[direction]), 6)
    )
    for signal, bias in SIGNAL_BIAS.items()
    for direction in Direction
    for divergence in Divergence
}


def indicator_recognises(indicator: Indicator, signal: Signal) -> bool:
    return signal in INDICATOR_SIGNALS.get(indicator, frozenset())


def lookup_score(
    direction: Direction,
    indicator: Indicator,
    signal: Signal,
    divergence: Divergence,
) -> float:
    """Per-observation agreement in [-1, 1]; 0 for unrecognised pairs."""
    if not indicator_recognises(indicator, signal):
        return 0.0
    return ALIGNMENT_MATRIX[(direction, signal, divergence)]
