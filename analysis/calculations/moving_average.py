"""
Moving average calculation utilities.
Sliding-window simple moving averages with exact partial-window means.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Sequence, Tuple

from analysis.models import AverageRecord, DEFAULT_WINDOW_SIZES, PricePoint


class MovingAverageError(Exception):
    """Raised when moving average configuration or input is invalid."""
    pass


def validate_window_sizes(window_sizes: Iterable[int]) -> Tuple[int, ...]:
    """
    Validate and normalize window sizes.

    Args:
        window_sizes: Window sizes in trading days

    Returns:
        Sorted tuple of distinct window sizes

    Raises:
        MovingAverageError: If empty or any size is not a positive integer
    """
    sizes = list(window_sizes)
    if not sizes:
        raise MovingAverageError("At least one window size is required")

    for size in sizes:
        if isinstance(size, bool) or not isinstance(size, int):
            raise MovingAverageError(f"Window size must be integer, got {type(size)}")
        if size <= 0:
            raise MovingAverageError(f"Window size must be positive, got {size}")

    return tuple(sorted(set(sizes)))


@dataclass
class WindowState:
    """FIFO buffer and running sum for one window size."""
    window: int
    buffer: Deque[float] = field(default_factory=deque)
    running_sum: float = 0.0

    def push(self, close: float) -> float:
        """Add a close, evict past the window, return the current mean."""
        self.buffer.append(close)
        self.running_sum += close

        if len(self.buffer) > self.window:
            self.running_sum -= self.buffer.popleft()

        # Partial windows average what has been seen so far
        return self.running_sum / len(self.buffer)

    def reset(self) -> None:
        self.buffer.clear()
        self.running_sum = 0.0

    @property
    def is_full(self) -> bool:
        return len(self.buffer) == self.window


class MovingAverageEngine:
    """
    Independent sliding windows over one stream of closes.

    Each window size owns its own WindowState. compute() resets every
    window before running, so an engine never leaks state across series.
    """

    def __init__(self, window_sizes: Iterable[int] = DEFAULT_WINDOW_SIZES):
        self.window_sizes = validate_window_sizes(window_sizes)
        self._states = {w: WindowState(window=w) for w in self.window_sizes}

    def reset(self) -> None:
        for state in self._states.values():
            state.reset()

    def update(self, close: float) -> Dict[int, float]:
        """Feed one close to every window and return the current means."""
        if isinstance(close, bool) or not isinstance(close, (int, float)):
            raise MovingAverageError(f"Close must be numeric, got {type(close)}")
        if not math.isfinite(close):
            raise MovingAverageError(f"Close must be finite, got {close}")

        return {w: state.push(close) for w, state in self._states.items()}

    def compute(self, series: Sequence[PricePoint]) -> List[AverageRecord]:
        self.reset()
        return [
            AverageRecord(date=point.date, averages=self.update(point.close))
            for point in series
        ]


def compute_averages(
    series: Sequence[PricePoint],
    window_sizes: Iterable[int] = DEFAULT_WINDOW_SIZES
) -> List[AverageRecord]:
    """
    Calculate moving averages for every bar over several windows.

    Args:
        series: Bars in chronological order
        window_sizes: Window sizes in trading days

    Returns:
        One AverageRecord per bar, same ordering as series

    Raises:
        MovingAverageError: If window sizes or closes are invalid
    """
    # Fresh engine per run
    engine = MovingAverageEngine(window_sizes)
    return engine.compute(series)


def moving_average_series(closes: Sequence[float], window: int) -> List[float]:
    """
    Calculate the moving average series for a single window.

    Args:
        closes: Closing prices in chronological order
        window: Window size in trading days

    Returns:
        List of averages, same length as closes

    Example:
        [1, 2, 3, 4, 5] with window 3 -> [1.0, 1.5, 2.0, 3.0, 4.0]
    """
    engine = MovingAverageEngine([window])
    return [engine.update(close)[window] for close in closes]
