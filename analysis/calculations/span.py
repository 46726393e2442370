"""
Stock span calculation utilities.
Pure functions using a monotonic stack, O(n) amortized.
"""

import math
from typing import List, Sequence, Tuple

from analysis.models import PricePoint


class SpanError(Exception):
    """Raised when span calculation receives invalid prices."""
    pass


def compute_spans(closes: Sequence[float]) -> List[int]:
    """
    Calculate the stock span for every close in the series.

    Span for day i is the number of consecutive days ending at i
    (inclusive) whose close is <= the close on day i.

    Args:
        closes: Closing prices in chronological order

    Returns:
        List of spans, same length as closes

    Raises:
        SpanError: If a close is not a finite number

    Example:
        [100, 80, 60, 70, 60, 75, 85] -> [1, 1, 1, 2, 1, 4, 6]
    """
    spans = []
    # (index, price) pairs; prices strictly decrease from bottom to top
    stack: List[Tuple[int, float]] = []

    for i, close in enumerate(closes):
        if isinstance(close, bool) or not isinstance(close, (int, float)):
            raise SpanError(f"Close at index {i} must be numeric, got {type(close)}")
        if not math.isfinite(close):
            raise SpanError(f"Close at index {i} must be finite, got {close}")

        while stack and stack[-1][1] <= close:
            stack.pop()

        span = i + 1 if not stack else i - stack[-1][0]
        spans.append(span)
        stack.append((i, close))

    return spans


def annotate_spans(series: Sequence[PricePoint]) -> List[PricePoint]:
    """
    Return copies of the bars with their span filled in.

    Args:
        series: Bars in chronological order

    Returns:
        New list of PricePoint with span set
    """
    spans = compute_spans([point.close for point in series])
    return [point.with_span(span) for point, span in zip(series, spans)]
