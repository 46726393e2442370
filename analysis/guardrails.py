"""
Guardrails for the analysis pipeline - validation and safety checks.
Rejects series the engines cannot work with and checks result alignment.
"""

import math
from typing import Sequence

from analysis.models import AverageRecord, PricePoint, SentimentSample


class DataQualityError(Exception):
    """Raised when input data cannot be analyzed."""
    pass


class DataAlignmentError(Exception):
    """Raised when pipeline outputs are not aligned with the input series."""
    pass


def validate_price_series(series: Sequence[PricePoint]) -> None:
    """
    Validate a price series before running the pipeline.

    Args:
        series: Bars in chronological order

    Raises:
        DataQualityError: If empty, a close is not a finite positive
            number, or dates are not strictly ascending
    """
    if not series:
        raise DataQualityError("No price data available for analysis")

    previous = None
    for i, point in enumerate(series):
        close = point.close
        if isinstance(close, bool) or not isinstance(close, (int, float)):
            raise DataQualityError(f"Close on row {i} must be numeric, got {type(close)}")

        if not math.isfinite(close):
            raise DataQualityError(f"Close on row {i} must be finite, got {close}")

        if close <= 0:
            raise DataQualityError(f"Close on row {i} must be positive, got {close}")

        if previous is not None and point.date <= previous.date:
            raise DataQualityError(
                f"Dates must be ascending: {point.date} follows {previous.date}"
            )
        previous = point


def check_alignment(
    series: Sequence[PricePoint],
    averages: Sequence[AverageRecord],
    sentiment: Sequence[SentimentSample]
) -> None:
    """
    Check that averages and sentiment line up with the series.

    Raises:
        DataAlignmentError: If lengths differ or any date is out of step
    """
    lengths = {
        'series': len(series),
        'averages': len(averages),
        'sentiment': len(sentiment)
    }
    if len(set(lengths.values())) > 1:
        raise DataAlignmentError(f"Length mismatch: {lengths}")

    for i, (point, avg, sample) in enumerate(zip(series, averages, sentiment)):
        if not (point.date == avg.date == sample.date):
            raise DataAlignmentError(
                f"Date mismatch at row {i}: series={point.date}, "
                f"averages={avg.date}, sentiment={sample.date}"
            )
