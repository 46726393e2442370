"""
Canonical data shapes for the span analytics pipeline.
Frozen dataclasses shared by the engines, the query router and the session.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple


DEFAULT_VOLUME = 1_000_000
DEFAULT_WINDOW_SIZES = (5, 10, 20)


@dataclass(frozen=True)
class PricePoint:
    """One daily OHLCV bar, optionally annotated with its span."""
    date: date
    open: float
    high: float
    low: float
    close: float
    volume: int = DEFAULT_VOLUME
    span: Optional[int] = None

    def with_span(self, span: int) -> 'PricePoint':
        """Return a copy of this bar carrying the given span."""
        return replace(self, span=span)


@dataclass(frozen=True)
class AverageRecord:
    """Moving averages for one date, keyed by window size."""
    date: date
    averages: Dict[int, float] = field(default_factory=dict)

    def get(self, window: int) -> Optional[float]:
        return self.averages.get(window)


@dataclass(frozen=True)
class SentimentSample:
    """Synthetic social sentiment for one date."""
    date: date
    score: float
    confidence: float
    volume: int


@dataclass(frozen=True)
class AnalysisResult:
    """
    Aggregate output of one pipeline run.

    series, averages and sentiment are aligned: same length and same
    date ordering. Build through analysis.analysis_job.assemble_result so
    the alignment is checked.
    """
    series: Tuple[PricePoint, ...]
    averages: Tuple[AverageRecord, ...]
    sentiment: Tuple[SentimentSample, ...]
    correlation: float
    window_sizes: Tuple[int, ...] = DEFAULT_WINDOW_SIZES

    @property
    def is_empty(self) -> bool:
        return len(self.series) == 0

    @property
    def latest_point(self) -> Optional[PricePoint]:
        return self.series[-1] if self.series else None

    @property
    def previous_point(self) -> Optional[PricePoint]:
        return self.series[-2] if len(self.series) > 1 else None

    @property
    def latest_average(self) -> Optional[AverageRecord]:
        return self.averages[-1] if self.averages else None

    @property
    def latest_sentiment(self) -> Optional[SentimentSample]:
        return self.sentiment[-1] if self.sentiment else None


class Intent(str, Enum):
    """Classified purpose of a free-text query."""
    MOVING_AVERAGE = 'moving_average'
    SPAN = 'span'
    PRICE = 'price'
    TREND = 'trend'
    RECOMMENDATION = 'recommendation'
    HIGH = 'high'
    LOW = 'low'
    UNRECOGNIZED = 'unrecognized'


class Speaker(str, Enum):
    """Who produced a chat turn."""
    USER = 'user'
    SYSTEM = 'system'


@dataclass(frozen=True)
class ChatTurn:
    speaker: Speaker
    text: str
    timestamp: datetime
