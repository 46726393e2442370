"""
Classification labelers for span, trend and recommendation signals.
Deterministic threshold-based classifications used by the query router.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence


class LabelerError(Exception):
    """Raised when labeler input validation fails."""
    pass


@dataclass(frozen=True)
class Signal:
    """One trading signal with its direction ("bullish" or "bearish")."""
    description: str
    direction: str

    def __str__(self) -> str:
        return f"{self.description} ({self.direction.capitalize()})"


def classify_span_momentum(span: int) -> str:
    """
    Classify momentum from the latest span.

    Thresholds:
    - Strong bullish: > 10
    - Moderate bullish: 6 - 10
    - Bearish: <= 2
    - Neutral: 3 - 5

    Args:
        span: Span of the latest bar in days

    Returns:
        "strong_bullish", "moderate_bullish", "bearish" or "neutral"
    """
    if span is None:
        raise LabelerError("Span cannot be None")

    if span > 10:
        return "strong_bullish"
    elif span > 5:
        return "moderate_bullish"
    elif span <= 2:
        return "bearish"
    else:
        return "neutral"


def classify_trend(closes: Sequence[float], lookback: int = 5) -> str:
    """
    Classify the recent trend from day-over-day changes.

    Over the last `lookback` closes (lookback - 1 changes):
    - >= 3 up days: "bullish uptrend"
    - >= 3 down days: "bearish downtrend"
    - otherwise: "sideways consolidation"

    Args:
        closes: Closing prices in chronological order
        lookback: Number of trailing closes to inspect

    Returns:
        Trend label

    Raises:
        LabelerError: If fewer than lookback closes are provided
    """
    if len(closes) < lookback:
        raise LabelerError(f"Need at least {lookback} closes, got {len(closes)}")

    recent = list(closes)[-lookback:]
    changes = [curr - prev for prev, curr in zip(recent, recent[1:])]

    up_days = sum(1 for change in changes if change > 0)
    down_days = sum(1 for change in changes if change < 0)

    if up_days >= 3:
        return "bullish uptrend"
    elif down_days >= 3:
        return "bearish downtrend"
    else:
        return "sideways consolidation"


def momentum_qualifier(span: int) -> str:
    """Qualify trend momentum: span above 5 is strong."""
    return "strong momentum" if span > 5 else "weak momentum"


def recommendation_signals(
    close: float,
    ma10: Optional[float],
    span: int
) -> List[Signal]:
    """
    Build trading signals from price vs 10-day MA and span.

    - Close above MA10: bullish; below: bearish (skipped if MA10 missing)
    - Span > 7: bullish; span <= 2: bearish

    Returns:
        Signals in evaluation order
    """
    signals = []

    if ma10 is not None:
        if close > ma10:
            signals.append(Signal("Price above 10-day MA", "bullish"))
        elif close < ma10:
            signals.append(Signal("Price below 10-day MA", "bearish"))

    if span > 7:
        signals.append(Signal("High span indicates strong momentum", "bullish"))
    elif span <= 2:
        signals.append(Signal("Low span indicates weak momentum", "bearish"))

    return signals


def decide_recommendation(signals: Sequence[Signal]) -> str:
    """
    Decide BUY / SELL / HOLD by majority of signal directions.

    Returns:
        "BUY" if bullish signals outnumber bearish, "SELL" if the reverse,
        otherwise "HOLD"
    """
    bullish = sum(1 for s in signals if s.direction == "bullish")
    bearish = sum(1 for s in signals if s.direction == "bearish")

    if bullish > bearish:
        return "BUY"
    elif bearish > bullish:
        return "SELL"
    return "HOLD"


def classify_correlation_strength(correlation: float) -> str:
    """
    Classify sentiment/span correlation strength.

    Thresholds:
    - Strong: |r| > 0.5
    - Weak: 0.2 < |r| <= 0.5
    - Negligible: |r| <= 0.2
    """
    if correlation is None:
        raise LabelerError("Correlation cannot be None")

    if correlation < -1 or correlation > 1:
        raise LabelerError(f"Correlation must be between -1 and 1, got {correlation}")

    magnitude = abs(correlation)
    if magnitude > 0.5:
        return "strong"
    elif magnitude > 0.2:
        return "weak"
    return "negligible"
