"""
Normalizers for transforming parsed rows to canonical PricePoint bars.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

import logging
from datetime import date
from typing import Any, Dict, List

from analysis.models import DEFAULT_VOLUME, PricePoint
from ingestion.transforms.validators import validate_price_point

# Set up logger
logger = logging.getLogger(__name__)


def normalize_prices(
    raw_rows: List[Dict[str, Any]],
    *,
    default_volume: int = DEFAULT_VOLUME
) -> List[PricePoint]:
    """
    Transform parsed price rows to canonical bars.

    Minimal normalization:
    - Date strings to date objects
    - Missing volume to default_volume
    - Invalid bars dropped with a warning
    - Deduplication by date (keep last to handle corrections)
    - Ascending date order

    Args:
        raw_rows: Dictionaries with date, open, high, low, close and optional volume
        default_volume: Volume used when a row has none

    Returns:
        List of PricePoint sorted ascending by date
    """
    if not raw_rows:
        return []

    seen_dates = {}

    for i, raw in enumerate(raw_rows):
        volume = raw.get('volume')
        if volume is None:
            volume = default_volume

        try:
            row_date = raw.get('date')
            if isinstance(row_date, str):
                row_date = date.fromisoformat(row_date)

            point = PricePoint(
                date=row_date,
                open=float(raw['open']),
                high=float(raw['high']),
                low=float(raw['low']),
                close=float(raw['close']),
                volume=int(volume)
            )
            validate_price_point(point)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid row {i}: {e}")
            continue

        if row_date in seen_dates:
            logger.info(f"Duplicate bar for {row_date}, keeping the later row")
        seen_dates[row_date] = point

    return sorted(seen_dates.values(), key=lambda p: p.date)
