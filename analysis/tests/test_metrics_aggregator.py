"""
Tests for the result summary and insights.
Builds AnalysisResult values by hand so every figure is known.
"""

import pytest
from datetime import date, timedelta

from analysis.metrics_aggregator import build_insights, summarize_result, MetricsAggregatorError
from analysis.models import AnalysisResult, AverageRecord, PricePoint, SentimentSample


def make_result(closes, spans, ma10, correlation=0.0):
    start = date(2024, 3, 1)
    dates = [start + timedelta(days=i) for i in range(len(closes))]
    series = tuple(
        PricePoint(date=d, open=c, high=c, low=c, close=c, span=s)
        for d, c, s in zip(dates, closes, spans)
    )
    averages = tuple(AverageRecord(date=d, averages={5: ma10, 10: ma10}) for d in dates)
    sentiment = tuple(SentimentSample(date=d, score=0.3, confidence=0.9, volume=400) for d in dates)
    return AnalysisResult(series=series, averages=averages, sentiment=sentiment, correlation=correlation)


class TestSummarizeResult:
    """Tests for summarize_result."""

    def test_headline_figures(self):
        result = make_result([100.0, 110.0], spans=[1, 2], ma10=105.0)

        summary = summarize_result(result)

        assert summary['data_period'] == {
            'start_date': '2024-03-01',
            'end_date': '2024-03-02',
            'trading_days': 2
        }
        assert summary['price']['latest_close'] == 110.0
        assert summary['price']['day_change_pct'] == pytest.approx(10.0)
        assert summary['price']['position'] == 'above'
        assert summary['span'] == {'latest': 2, 'average': 1.5, 'max': 2, 'momentum_vs_average': 'above'}
        assert summary['moving_averages'] == {5: 105.0, 10: 105.0}
        assert summary['sentiment']['latest_score'] == 0.3
        assert summary['sentiment']['bullish_days'] == 2
        assert summary['correlation'] == {'value': 0.0, 'strength': 'negligible'}

    def test_single_bar_has_no_change(self):
        result = make_result([50.0], spans=[1], ma10=50.0)
        assert summarize_result(result)['price']['day_change_pct'] is None

    def test_position_below_with_momentum_above(self):
        result = make_result([100.0, 95.0, 96.0], spans=[1, 1, 2], ma10=97.0)

        summary = summarize_result(result)

        assert summary['price']['position'] == 'below'
        # Latest span 2 is above the 4/3 average
        assert summary['span']['momentum_vs_average'] == 'above'

    def test_span_equal_to_average_is_below(self):
        result = make_result([100.0, 100.0], spans=[1, 1], ma10=100.0)

        summary = summarize_result(result)

        assert summary['price']['position'] == 'below'
        assert summary['span']['momentum_vs_average'] == 'below'

    def test_position_without_ten_day_window(self):
        result = make_result([100.0, 110.0], spans=[1, 2], ma10=105.0)
        averages = tuple(AverageRecord(date=r.date, averages={5: 105.0}) for r in result.averages)
        result = AnalysisResult(series=result.series, averages=averages, sentiment=result.sentiment, correlation=0.0)

        assert summarize_result(result)['price']['position'] is None

    def test_empty_result(self):
        empty = AnalysisResult(series=(), averages=(), sentiment=(), correlation=0.0)
        with pytest.raises(MetricsAggregatorError, match="empty analysis"):
            summarize_result(empty)


class TestBuildInsights:
    """Tests for build_insights rules."""

    def test_bullish_trend(self):
        result = make_result([100.0, 104.0], spans=[1, 4], ma10=102.0)

        titles = [i['title'] for i in build_insights(result)]

        assert titles == ['Bullish Trend Detected']

    def test_bearish_pressure(self):
        result = make_result([100.0, 98.0], spans=[1, 1], ma10=99.0)

        titles = [i['title'] for i in build_insights(result)]

        assert titles == ['Bearish Pressure']

    def test_strong_momentum_period(self):
        closes = [float(c) for c in range(1, 13)] + [5.0]
        spans = list(range(1, 13)) + [4]
        result = make_result(closes, spans=spans, ma10=6.0)

        titles = [i['title'] for i in build_insights(result)]

        assert 'Strong Momentum Period' in titles

    def test_strong_negative_correlation(self):
        result = make_result([100.0, 100.0], spans=[1, 2], ma10=100.0, correlation=-0.8)

        insights = build_insights(result)

        assert insights[-1]['type'] == 'bearish'
        assert insights[-1]['message'] == "80% negative correlation between sentiment and span."
