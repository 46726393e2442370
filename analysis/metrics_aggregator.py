"""
Metrics aggregator - summarizes an AnalysisResult for display.
Pure function that combines span, moving average and sentiment figures with insights.
"""

from typing import Any, Dict, List, Optional

from analysis.models import AnalysisResult
from reports.formatters import format_percentage
from reports.labelers import classify_correlation_strength
from sentiment.synthetic_sentiment import summarize_sentiment


class MetricsAggregatorError(Exception):
    """Raised when summary composition fails."""
    pass


def summarize_result(result: AnalysisResult) -> Dict[str, Any]:
    """
    Compose headline metrics and insights from an analysis.

    Args:
        result: Completed analysis

    Returns:
        Dictionary with data period, price, span, moving average,
        sentiment and correlation figures plus an insights list

    Raises:
        MetricsAggregatorError: If the result holds no data
    """
    if result.is_empty:
        raise MetricsAggregatorError("Cannot summarize an empty analysis")

    series = result.series
    latest = result.latest_point
    previous = result.previous_point
    spans = [p.span or 0 for p in series]

    day_change_pct = None
    if previous is not None and previous.close:
        day_change_pct = (latest.close - previous.close) / previous.close * 100

    average_span = sum(spans) / len(spans)
    ma10 = result.latest_average.get(10) if result.latest_average else None
    latest_sentiment = result.latest_sentiment

    return {
        'data_period': {
            'start_date': series[0].date.isoformat(),
            'end_date': latest.date.isoformat(),
            'trading_days': len(series)
        },
        'price': {
            'latest_close': latest.close,
            'day_change_pct': day_change_pct,
            'position': _relative_to(latest.close, ma10)
        },
        'span': {
            'latest': latest.span,
            'average': average_span,
            'max': max(spans),
            'momentum_vs_average': _relative_to(latest.span or 0, average_span)
        },
        'moving_averages': dict(result.latest_average.averages) if result.latest_average else {},
        'sentiment': {
            'latest_score': latest_sentiment.score if latest_sentiment else None,
            **summarize_sentiment(result.sentiment)
        },
        'correlation': {
            'value': result.correlation,
            'strength': classify_correlation_strength(result.correlation)
        },
        'insights': build_insights(result)
    }


def _relative_to(value: float, reference: Optional[float]) -> Optional[str]:
    """'above' only when strictly greater; None without a reference."""
    if reference is None:
        return None
    return 'above' if value > reference else 'below'


def build_insights(result: AnalysisResult) -> List[Dict[str, str]]:
    """
    Derive narrative insights from the latest bar and whole-series figures.

    Rules:
    - Close above MA10 with span > 3: bullish trend
    - Close below MA10 with span <= 2: bearish pressure
    - Max span > 10: strong momentum period
    - |correlation| > 0.5: notable sentiment correlation
    """
    insights = []
    if result.is_empty:
        return insights

    latest = result.latest_point
    span = latest.span or 0
    ma10 = result.latest_average.get(10) if result.latest_average else None

    if ma10 is not None and latest.close > ma10 and span > 3:
        insights.append({
            'type': 'bullish',
            'title': 'Bullish Trend Detected',
            'message': f"Price is above 10-day MA with span of {span} days, indicating upward momentum."
        })
    elif ma10 is not None and latest.close < ma10 and span <= 2:
        insights.append({
            'type': 'bearish',
            'title': 'Bearish Pressure',
            'message': "Price below 10-day MA with low span suggests downward pressure."
        })

    max_span = max(p.span or 0 for p in result.series)
    if max_span > 10:
        insights.append({
            'type': 'info',
            'title': 'Strong Momentum Period',
            'message': f"Maximum span of {max_span} days indicates a period of exceptional momentum."
        })

    if classify_correlation_strength(result.correlation) == 'strong':
        direction = 'positive' if result.correlation > 0 else 'negative'
        insights.append({
            'type': 'bullish' if result.correlation > 0 else 'bearish',
            'title': 'Sentiment-Span Correlation',
            'message': (
                f"{format_percentage(abs(result.correlation) * 100, decimal_places=0)} "
                f"{direction} correlation between sentiment and span."
            )
        })

    return insights
