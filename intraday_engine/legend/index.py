"""
Legend Index

Lookup from candle bucket start to legend summary.
Rebuilt from scratch whenever the candle series changes.
"""

from typing import Dict, Optional, Sequence
import logging

from intraday_schemas.legend_data import LegendSummary
from intraday_schemas.market_data import Candle

logger = logging.getLogger(__name__)


class LegendIndex:
    """
    Exact-match index of legend summaries keyed by bucket start.

    The index does no nearest-neighbour search: lookup() only answers for
    a time that is exactly a bucket start. Callers that need a fallback use
    default(), which is the last candle of the series.

    Example usage:
        index = LegendIndex.from_candles(candles)
        summary = index.lookup(pointer_time) or index.default()
    """

    def __init__(self, summaries: Dict[int, LegendSummary], last_time: Optional[int] = None):
        self._summaries = summaries
        self._last_time = last_time

    @classmethod
    def from_candles(cls, candles: Sequence[Candle]) -> "LegendIndex":
        """Build the index from an ordered candle series"""
        summaries = {c.bucket_start: LegendSummary.from_candle(c) for c in candles}
        last_time = candles[-1].bucket_start if candles else None
        return cls(summaries, last_time)

    @classmethod
    def empty(cls) -> "LegendIndex":
        return cls({})

    def lookup(self, time: Optional[int]) -> Optional[LegendSummary]:
        """Summary for an exact bucket start, or None"""
        if time is None:
            return None
        return self._summaries.get(time)

    def default(self) -> Optional[LegendSummary]:
        """Summary of the last candle, or None for an empty series"""
        if self._last_time is None:
            return None
        return self._summaries[self._last_time]

    @property
    def last_time(self) -> Optional[int]:
        return self._last_time

    def __len__(self) -> int:
        return len(self._summaries)
