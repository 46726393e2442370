"""
Orchestrated analysis job - price series to AnalysisResult.
Runs span, moving average and sentiment engines and assembles one result.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

import numpy as np

from analysis.calculations.moving_average import compute_averages, validate_window_sizes
from analysis.calculations.span import annotate_spans
from analysis.guardrails import check_alignment, validate_price_series
from analysis.models import (
    AnalysisResult,
    AverageRecord,
    DEFAULT_WINDOW_SIZES,
    PricePoint,
    SentimentSample,
)
from sentiment.synthetic_sentiment import (
    generate_sentiment,
    make_rng,
    sentiment_span_correlation,
)

# Set up logger
logger = logging.getLogger(__name__)


def assemble_result(
    series: Sequence[PricePoint],
    averages: Sequence[AverageRecord],
    sentiment: Sequence[SentimentSample],
    correlation: float,
    window_sizes: Iterable[int] = DEFAULT_WINDOW_SIZES
) -> AnalysisResult:
    """
    Build an AnalysisResult after checking the outputs are aligned.

    Raises:
        DataAlignmentError: If the three sequences do not line up
    """
    check_alignment(series, averages, sentiment)

    return AnalysisResult(
        series=tuple(series),
        averages=tuple(averages),
        sentiment=tuple(sentiment),
        correlation=correlation,
        window_sizes=validate_window_sizes(window_sizes)
    )


def run_pipeline(
    series: Sequence[PricePoint],
    window_sizes: Iterable[int] = DEFAULT_WINDOW_SIZES,
    rng: Optional[np.random.Generator] = None
) -> AnalysisResult:
    """
    Run the complete analysis pipeline over a price series.

    Pipeline stages:
    1. Validate the series
    2. Annotate spans
    3. Moving averages over raw closes
    4. Synthetic sentiment
    5. Sentiment/span correlation
    6. Assemble and check alignment

    Args:
        series: Bars sorted ascending by date
        window_sizes: Moving average windows in trading days
        rng: Randomness source for sentiment (fresh unseeded if omitted)

    Returns:
        AnalysisResult for the whole series

    Raises:
        DataQualityError: If the series is empty or malformed (including
            non-positive closes, which would make returns undefined)
        MovingAverageError: If window sizes are invalid
    """
    start_time = datetime.now()
    window_sizes = validate_window_sizes(window_sizes)

    validate_price_series(series)

    if rng is None:
        rng = make_rng()

    spanned = annotate_spans(series)
    averages = compute_averages(series, window_sizes)
    sentiment = generate_sentiment(series, rng=rng)
    correlation = sentiment_span_correlation(sentiment, spanned)

    result = assemble_result(spanned, averages, sentiment, correlation, window_sizes)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Analyzed {len(series)} bars ({series[0].date} to {series[-1].date}) "
        f"windows={list(window_sizes)} correlation={correlation:.3f} in {duration:.3f}s"
    )
    return result
