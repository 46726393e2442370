"""
Rule-based query router for natural-language questions about an analysis.
Ordered intent matchers, first match wins, with deterministic handlers.
"""

import logging
import re
from typing import Callable, Dict, Optional, Pattern, Tuple

import numpy as np

from analysis.models import AnalysisResult, Intent
from reports.formatters import (
    format_date,
    format_days,
    format_percentage,
    format_price,
    format_signed_price,
)
from reports.labelers import (
    classify_span_momentum,
    classify_trend,
    decide_recommendation,
    momentum_qualifier,
    recommendation_signals,
)

# Set up logger
logger = logging.getLogger(__name__)

DEFAULT_MA_WINDOW = 10
TREND_LOOKBACK = 5

# Precedence is the tuple order
INTENT_MATCHERS: Tuple[Tuple[Intent, Pattern], ...] = (
    (Intent.MOVING_AVERAGE, re.compile(r"\b(moving averages?|averages?|ma\d*|sma)\b")),
    (Intent.SPAN, re.compile(r"\b(stock span|spans?)\b")),
    (Intent.PRICE, re.compile(r"\b(current price|latest price|prices?)\b")),
    (Intent.TREND, re.compile(r"\b(trend|trending|direction)\b")),
    (Intent.RECOMMENDATION, re.compile(r"\b(buy|sell|hold|recommend\w*)\b")),
    (Intent.HIGH, re.compile(r"\b(high|highest|peak)\b")),
    (Intent.LOW, re.compile(r"\b(low|lowest|bottom)\b")),
)

DEFAULT_RESPONSES = (
    "I can help you analyze stock data! Try asking about moving averages, "
    "current prices, trends, or recommendations.",
    "Ask me about stock spans, price movements, or technical analysis. I'm here to help!",
    "I can provide insights on trends, moving averages, and trading recommendations. "
    "What would you like to know?",
)

NO_DATA_RESPONSE = "I don't have any stock data loaded yet. Please upload some data first."

SPAN_NOTES = {
    "strong_bullish": "This indicates a strong bullish trend!",
    "moderate_bullish": "This shows moderate bullish momentum.",
    "bearish": "This suggests bearish pressure or consolidation.",
    "neutral": "This indicates neutral market sentiment.",
}

RECOMMENDATION_REASONS = {
    "BUY": "Multiple bullish indicators align for a potential buying opportunity.",
    "SELL": "Bearish signals suggest considering a sell position.",
    "HOLD": "Mixed signals suggest holding current position.",
}


def normalize_query(query: Optional[str]) -> str:
    return (query or "").lower().strip()


def classify_intent(query: Optional[str]) -> Intent:
    """
    Classify a free-text query into an Intent.

    Args:
        query: Raw user text

    Returns:
        First Intent whose matcher succeeds, else Intent.UNRECOGNIZED
    """
    text = normalize_query(query)
    for intent, pattern in INTENT_MATCHERS:
        if pattern.search(text):
            return intent
    return Intent.UNRECOGNIZED


def _has_data(context: Optional[AnalysisResult]) -> bool:
    return context is not None and not context.is_empty


def handle_moving_average(query: str, context: Optional[AnalysisResult]) -> str:
    if context is None or not context.averages:
        return NO_DATA_RESPONSE

    latest = context.latest_average
    match = re.search(r"\d+", query)
    window = int(match.group()) if match else DEFAULT_MA_WINDOW

    value = latest.get(window)
    if value is not None:
        return f"The {window}-day moving average is {format_price(value)}."

    windows = sorted(latest.averages)
    if not windows:
        return NO_DATA_RESPONSE
    if len(windows) > 1:
        window_list = ", ".join(str(w) for w in windows[:-1]) + f", and {windows[-1]}"
    else:
        window_list = str(windows[0])
    values = ", ".join(f"{w}-day: {format_price(latest.get(w))}" for w in windows)
    return f"I have moving averages for {window_list} days. The latest values are: {values}."


def handle_span(query: str, context: Optional[AnalysisResult]) -> str:
    if not _has_data(context):
        return "No stock data available. Please upload data to see span analysis."

    span = context.latest_point.span or 0
    note = SPAN_NOTES[classify_span_momentum(span)]
    return f"The current stock span is {format_days(span)}. {note}"


def handle_price(query: str, context: Optional[AnalysisResult]) -> str:
    if not _has_data(context):
        return "No stock data available. Please upload data to see current price."

    latest = context.latest_point
    previous = context.previous_point
    text = f"The current price is {format_price(latest.close)}."

    if previous is not None:
        change = latest.close - previous.close
        change_pct = change / previous.close * 100 if previous.close else 0.0
        marker = "📈" if change >= 0 else "📉"
        text += (
            f" {marker} {format_signed_price(change)} "
            f"({format_percentage(change_pct, signed=True)})"
        )
    return text


def handle_trend(query: str, context: Optional[AnalysisResult]) -> str:
    if context is None or len(context.series) < TREND_LOOKBACK:
        return (
            "I need more data to analyze the trend. "
            f"Please provide at least {TREND_LOOKBACK} days of data."
        )

    trend = classify_trend([p.close for p in context.series], lookback=TREND_LOOKBACK)
    qualifier = momentum_qualifier(context.latest_point.span or 0)
    return (
        f"The stock is showing a {trend} with {qualifier} "
        f"based on the recent {TREND_LOOKBACK}-day pattern."
    )


def handle_recommendation(query: str, context: Optional[AnalysisResult]) -> str:
    if context is None or not context.series or not context.averages:
        return "I need stock data to provide recommendations. Please upload data first."

    latest = context.latest_point
    signals = recommendation_signals(
        close=latest.close,
        ma10=context.latest_average.get(10),
        span=latest.span or 0
    )
    recommendation = decide_recommendation(signals)
    signal_text = ", ".join(str(s) for s in signals) if signals else "none"

    return (
        f"**{recommendation}** - {RECOMMENDATION_REASONS[recommendation]}\n\n"
        f"Signals: {signal_text}"
    )


def handle_high(query: str, context: Optional[AnalysisResult]) -> str:
    if not _has_data(context):
        return "No data available to find highest price."

    # max() keeps the first occurrence on ties
    peak = max(context.series, key=lambda p: p.high)
    return f"The highest price was {format_price(peak.high)} on {format_date(peak.date)}."


def handle_low(query: str, context: Optional[AnalysisResult]) -> str:
    if not _has_data(context):
        return "No data available to find lowest price."

    trough = min(context.series, key=lambda p: p.low)
    return f"The lowest price was {format_price(trough.low)} on {format_date(trough.date)}."


HANDLERS: Dict[Intent, Callable[[str, Optional[AnalysisResult]], str]] = {
    Intent.MOVING_AVERAGE: handle_moving_average,
    Intent.SPAN: handle_span,
    Intent.PRICE: handle_price,
    Intent.TREND: handle_trend,
    Intent.RECOMMENDATION: handle_recommendation,
    Intent.HIGH: handle_high,
    Intent.LOW: handle_low,
}


class QueryRouter:
    """
    Answers free-text questions against an AnalysisResult snapshot.

    Holds no conversation state. The only state is the randomness source
    used to pick a generic response for unrecognized queries.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def classify(self, query: Optional[str]) -> Intent:
        return classify_intent(query)

    def default_response(self) -> str:
        return DEFAULT_RESPONSES[int(self.rng.integers(len(DEFAULT_RESPONSES)))]

    def answer(self, query: Optional[str], context: Optional[AnalysisResult]) -> str:
        """
        Answer a query from the given context.

        Args:
            query: Raw user text (may be empty)
            context: Analysis snapshot, or None when nothing is loaded

        Returns:
            Non-empty answer text
        """
        text = normalize_query(query)
        intent = classify_intent(text)
        logger.debug(f"Query {text!r} classified as {intent.value}")

        if intent is Intent.UNRECOGNIZED:
            return self.default_response()
        return HANDLERS[intent](text, context)


def answer(
    query: Optional[str],
    context: Optional[AnalysisResult],
    rng: Optional[np.random.Generator] = None
) -> str:
    """Answer a query with a one-off router."""
    return QueryRouter(rng=rng).answer(query, context)
