"""
Sample price series generator for demos and tests.
Random-walk daily bars with a slow sine trend and realistic intraday ranges.
"""

import math
from datetime import date, timedelta
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from analysis.models import PricePoint

DAILY_VOLATILITY = 0.02
INTRADAY_VOLATILITY = 0.015
TREND_AMPLITUDE = 0.001
VOLUME_RANGE = (1_000_000, 10_000_000)


class SampleGeneratorError(Exception):
    """Raised when sample generation parameters are invalid."""
    pass


def generate_price_series(
    days: int = 30,
    initial_price: float = 100.0,
    rng: Optional[np.random.Generator] = None,
    end_date: Optional[date] = None
) -> List[PricePoint]:
    """
    Generate consecutive calendar-day bars ending at end_date.

    Args:
        days: Number of bars
        initial_price: Starting price
        rng: Randomness source (fresh unseeded generator if omitted)
        end_date: Date of the last bar (default: today)

    Returns:
        List of PricePoint sorted ascending by date, prices rounded to cents

    Raises:
        SampleGeneratorError: If days or initial_price are not positive
    """
    if days <= 0:
        raise SampleGeneratorError(f"days must be positive, got {days}")
    if initial_price <= 0:
        raise SampleGeneratorError(f"initial_price must be positive, got {initial_price}")

    if rng is None:
        rng = np.random.default_rng()
    if end_date is None:
        end_date = date.today()

    start_date = end_date - timedelta(days=days - 1)
    price = float(initial_price)
    series = []

    for i in range(days):
        trend = math.sin(i / 10) * TREND_AMPLITUDE
        random_walk = (rng.random() - 0.5) * DAILY_VOLATILITY
        price += (trend + random_walk) * price

        intraday = price * INTRADAY_VOLATILITY
        high = price + rng.random() * intraday
        low = price - rng.random() * intraday
        open_price = low + rng.random() * (high - low)

        series.append(PricePoint(
            date=start_date + timedelta(days=i),
            open=round(open_price, 2),
            high=round(high, 2),
            low=round(low, 2),
            close=round(price, 2),
            volume=int(rng.integers(*VOLUME_RANGE))
        ))

    return series


def series_to_frame(series: Sequence[PricePoint]) -> pd.DataFrame:
    """Tabulate bars with the upload column names."""
    return pd.DataFrame({
        'Date': [p.date.isoformat() for p in series],
        'Open': [p.open for p in series],
        'High': [p.high for p in series],
        'Low': [p.low for p in series],
        'Close': [p.close for p in series],
        'Volume': [p.volume for p in series],
    })


def series_to_csv(series: Sequence[PricePoint]) -> str:
    """
    Render bars as CSV text in the upload format.

    Returns:
        CSV with header Date,Open,High,Low,Close,Volume
    """
    return series_to_frame(series).to_csv(index=False)
