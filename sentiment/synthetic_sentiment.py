"""
Synthetic social sentiment and sentiment/span correlation.
Scores follow day-over-day returns plus bounded noise from an injected generator.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from analysis.models import PricePoint, SentimentSample

# Set up logger
logger = logging.getLogger(__name__)

# Noise is (u - 0.5) * NOISE_SCALE, so it stays within +/- 0.2
NOISE_SCALE = 0.4
RETURN_SCALE_PCT = 5.0
CONFIDENCE_RANGE = (0.6, 1.0)
POST_VOLUME_RANGE = (100, 1000)


class SentimentError(Exception):
    """Raised when sentiment generation fails."""
    pass


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create the randomness source used for synthetic sentiment.

    Args:
        seed: Optional seed for reproducible output

    Returns:
        numpy Generator
    """
    return np.random.default_rng(seed)


def _pct_return(previous_close: float, close: float) -> float:
    if previous_close == 0:
        raise SentimentError("Previous close of zero makes the return undefined")
    return (close - previous_close) / previous_close * 100


def generate_sentiment(
    series: Sequence[PricePoint],
    rng: Optional[np.random.Generator] = None
) -> List[SentimentSample]:
    """
    Simulate one sentiment sample per bar.

    score = clamp(tanh(r / 5) + noise, -1, 1) where r is the percentage
    close-to-close return (0 for the first bar) and noise is within +/- 0.2.

    Args:
        series: Bars in chronological order
        rng: Randomness source (fresh unseeded generator if omitted)

    Returns:
        List of SentimentSample, same length and ordering as series

    Raises:
        SentimentError: If a previous close is zero
    """
    if rng is None:
        rng = make_rng()

    samples = []
    low_conf, high_conf = CONFIDENCE_RANGE
    low_vol, high_vol = POST_VOLUME_RANGE

    for i, point in enumerate(series):
        pct_return = _pct_return(series[i - 1].close, point.close) if i > 0 else 0.0

        base = math.tanh(pct_return / RETURN_SCALE_PCT)
        noise = (rng.random() - 0.5) * NOISE_SCALE
        score = max(-1.0, min(1.0, base + noise))

        confidence = low_conf + rng.random() * (high_conf - low_conf)
        volume = int(rng.integers(low_vol, high_vol, endpoint=True))

        samples.append(SentimentSample(
            date=point.date,
            score=score,
            confidence=confidence,
            volume=volume
        ))

    logger.debug(f"Generated {len(samples)} sentiment samples")
    return samples


def correlate(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Calculate the Pearson correlation coefficient of two series.

    Degenerate inputs resolve to 0 instead of raising or returning NaN:
    mismatched lengths, fewer than 2 points, or zero variance in either.

    Args:
        x: First series
        y: Second series, paired with x by position

    Returns:
        Correlation in [-1, 1]
    """
    if len(x) != len(y) or len(x) < 2:
        return 0.0

    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)

    x_dev = x_arr - x_arr.mean()
    y_dev = y_arr - y_arr.mean()

    denominator = math.sqrt(float(np.sum(x_dev * x_dev)) * float(np.sum(y_dev * y_dev)))
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0

    r = float(np.sum(x_dev * y_dev)) / denominator
    # Rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, r))


def sentiment_span_correlation(
    samples: Sequence[SentimentSample],
    series: Sequence[PricePoint]
) -> float:
    """
    Correlate sentiment scores with spans, pairing by position.

    Bars without a span count as 0.
    """
    scores = [s.score for s in samples]
    spans = [p.span or 0 for p in series]
    return correlate(scores, spans)


def summarize_sentiment(samples: Sequence[SentimentSample]) -> Dict[str, Any]:
    """
    Aggregate sentiment samples for display.

    Days scoring above 0.1 count as bullish, below -0.1 as bearish.

    Args:
        samples: Sentiment samples

    Returns:
        Dictionary with mean score, mean confidence and day counts
        (means are None when there are no samples)
    """
    if not samples:
        return {
            'mean_score': None,
            'mean_confidence': None,
            'bullish_days': 0,
            'bearish_days': 0,
            'neutral_days': 0,
            'total_posts': 0
        }

    scores = np.array([s.score for s in samples])

    return {
        'mean_score': float(scores.mean()),
        'mean_confidence': float(np.mean([s.confidence for s in samples])),
        'bullish_days': int(np.sum(scores > 0.1)),
        'bearish_days': int(np.sum(scores < -0.1)),
        'neutral_days': int(np.sum(np.abs(scores) <= 0.1)),
        'total_posts': int(sum(s.volume for s in samples))
    }
