"""
Core validators for canonical price bars.
Pure functions - no IO, network, or side effects.
"""

import math
from datetime import date

from analysis.models import PricePoint


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


def validate_price_point(point: PricePoint) -> None:
    """
    Validate a canonical price bar.

    Args:
        point: Bar to check

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(point.date, date):
        raise ValidationError(f"date must be date, got {type(point.date)}")

    # Numeric validations for prices
    for field in ['open', 'high', 'low', 'close']:
        value = getattr(point, field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{field} must be numeric, got {type(value)}")

        if not math.isfinite(value):
            raise ValidationError(f"{field} must be finite, got {value}")

        if value <= 0:
            raise ValidationError(f"{field} must be positive, got {value}")

    # Volume validation
    volume = point.volume
    if isinstance(volume, bool) or not isinstance(volume, int):
        raise ValidationError(f"volume must be integer, got {type(volume)}")

    if volume < 0:
        raise ValidationError(f"volume must be non-negative, got {volume}")

    if point.span is not None and point.span < 1:
        raise ValidationError(f"span must be >= 1, got {point.span}")
