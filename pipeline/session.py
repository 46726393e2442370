"""
Analysis session - holds the latest AnalysisResult and the chat log.
Loads replace the result reference in one assignment; queries answer from a snapshot.
"""

import logging
import threading
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Sequence

import numpy as np

from analysis.analysis_job import run_pipeline
from analysis.models import AnalysisResult, ChatTurn, PricePoint, Speaker
from pipeline.config import AnalysisConfig
from reports.query_router import QueryRouter
from sentiment.synthetic_sentiment import make_rng

# Set up logger
logger = logging.getLogger(__name__)


class AnalysisSession:
    """
    Orchestrates pipeline runs and question answering for one user session.

    The current result is only ever replaced wholesale. A query reads the
    reference once and works from that snapshot, so it sees either the old
    or the new result, never a mix.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        router: Optional[QueryRouter] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.config = config or AnalysisConfig()
        self.rng = rng if rng is not None else make_rng(self.config.sentiment_seed)
        # Separate generator so queries never touch the pipeline's generator
        self.router = router or QueryRouter(rng=make_rng(self.config.sentiment_seed))
        self._result: Optional[AnalysisResult] = None
        self._history: Deque[ChatTurn] = deque(maxlen=self.config.history_limit)
        # Serializes writers only; readers take the reference without locking
        self._load_lock = threading.Lock()
        self._history_lock = threading.Lock()

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._result

    @property
    def history(self) -> List[ChatTurn]:
        with self._history_lock:
            return list(self._history)

    def load(self, series: Sequence[PricePoint]) -> AnalysisResult:
        """
        Run the pipeline on a new series and make it the current result.

        Args:
            series: Bars sorted ascending by date

        Returns:
            The new AnalysisResult

        Raises:
            DataQualityError: If the series cannot be analyzed (the
                previous result stays current)
        """
        with self._load_lock:
            result = run_pipeline(series, window_sizes=self.config.window_sizes, rng=self.rng)
            self._result = result

        logger.info(f"Session result replaced ({len(result.series)} bars)")
        return result

    def replace_result(self, result: Optional[AnalysisResult]) -> None:
        """Swap in an already computed result (or None to unload)."""
        with self._load_lock:
            self._result = result

    def ask(self, text: str) -> str:
        """
        Answer a question against the current result and log both turns.

        Args:
            text: User question

        Returns:
            Non-empty answer text
        """
        snapshot = self._result
        reply = self.router.answer(text, snapshot)

        with self._history_lock:
            self._history.append(ChatTurn(Speaker.USER, text, datetime.now()))
            self._history.append(ChatTurn(Speaker.SYSTEM, reply, datetime.now()))

        return reply

    def clear_history(self) -> None:
        with self._history_lock:
            self._history.clear()
