"""
Tests for stock span calculation.
Known sequences where spans can be counted by hand.
"""

import pytest
from datetime import date, timedelta

from analysis.calculations.span import compute_spans, annotate_spans, SpanError
from analysis.models import PricePoint


def make_series(closes):
    start = date(2024, 1, 1)
    return [
        PricePoint(date=start + timedelta(days=i), open=c, high=c, low=c, close=c)
        for i, c in enumerate(closes)
    ]


class TestComputeSpans:
    """Tests for compute_spans."""

    def test_strictly_increasing(self):
        """Every span equals its 1-based position."""
        assert compute_spans([10, 11, 12, 13]) == [1, 2, 3, 4]

    def test_strictly_decreasing(self):
        """Every span is 1."""
        assert compute_spans([13, 12, 11, 10]) == [1, 1, 1, 1]

    def test_constant_prices(self):
        """Equal closes count toward the span."""
        assert compute_spans([5, 5, 5]) == [1, 2, 3]

    def test_classic_sequence(self):
        """Textbook example with mixed moves."""
        closes = [100, 80, 60, 70, 60, 75, 85]
        assert compute_spans(closes) == [1, 1, 1, 2, 1, 4, 6]

    def test_empty_input(self):
        assert compute_spans([]) == []

    def test_single_price(self):
        assert compute_spans([42.0]) == [1]

    def test_bounds_hold_for_mixed_series(self):
        """Output length matches and 1 <= span[i] <= i + 1."""
        closes = [3.2, 1.5, 4.8, 4.8, 2.0, 9.1, 0.5, 7.7, 7.7, 8.0, 1.1, 12.0]

        spans = compute_spans(closes)

        assert len(spans) == len(closes)
        for i, span in enumerate(spans):
            assert 1 <= span <= i + 1

    def test_no_state_between_calls(self):
        """A second call is unaffected by the first."""
        compute_spans([1, 2, 3, 4, 5])
        assert compute_spans([5, 4]) == [1, 1]

    def test_non_numeric_close(self):
        with pytest.raises(SpanError, match="must be numeric"):
            compute_spans([1.0, "2.0", 3.0])

    def test_nan_close(self):
        with pytest.raises(SpanError, match="must be finite"):
            compute_spans([1.0, float('nan')])


class TestAnnotateSpans:
    """Tests for annotate_spans."""

    def test_annotates_copies(self):
        """Spans are set on new bars; inputs stay untouched."""
        series = make_series([10, 12, 11, 13])

        annotated = annotate_spans(series)

        assert [p.span for p in annotated] == [1, 2, 1, 4]
        assert all(p.span is None for p in series)
        assert [p.date for p in annotated] == [p.date for p in series]

    def test_empty_series(self):
        assert annotate_spans([]) == []
