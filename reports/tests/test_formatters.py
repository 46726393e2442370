"""
Tests for display formatters.
Two-decimal currency, one-decimal percentages and day counts.
"""

import pytest
from datetime import date, datetime

from reports.formatters import (
    format_date,
    format_days,
    format_percentage,
    format_price,
    format_signed_price,
    FormatterError,
)


class TestPriceFormatting:

    def test_format_price(self):
        assert format_price(123.45) == "$123.45"
        assert format_price(1234.5) == "$1,234.50"
        assert format_price(0) == "$0.00"
        assert format_price(-3.1) == "-$3.10"
        assert format_price(None) == "N/A"

    def test_format_signed_price(self):
        assert format_signed_price(1.25) == "+$1.25"
        assert format_signed_price(-0.4) == "-$0.40"
        assert format_signed_price(0.0) == "+$0.00"

    def test_rejects_non_numeric(self):
        with pytest.raises(FormatterError, match="must be numeric"):
            format_price("12")


class TestPercentageFormatting:

    def test_default_one_decimal(self):
        assert format_percentage(0.9009) == "0.9%"
        assert format_percentage(-2.36) == "-2.4%"

    def test_signed(self):
        assert format_percentage(1.5, signed=True) == "+1.5%"
        assert format_percentage(-1.5, signed=True) == "-1.5%"

    def test_zero_decimals(self):
        assert format_percentage(80.0, decimal_places=0) == "80%"

    def test_none(self):
        assert format_percentage(None) == "N/A"


class TestDayAndDateFormatting:

    def test_format_days(self):
        assert format_days(1) == "1 day"
        assert format_days(9) == "9 days"
        assert format_days(4.0) == "4 days"
        assert format_days(4.6) == "4.6 days"

    def test_format_date(self):
        assert format_date(date(2024, 1, 19)) == "2024-01-19"
        assert format_date(datetime(2024, 1, 19, 15, 30)) == "2024-01-19"
        assert format_date("2024-01-19") == "2024-01-19"

    def test_format_date_invalid(self):
        with pytest.raises(FormatterError, match="Invalid date string"):
            format_date("19/01/2024")
