"""
Timeframe Controller

Owns the raw tick set and the selected timeframe, and keeps the derived
candle series, legend index and pointer selection consistent with them.
"""

from typing import Optional, Sequence, Tuple
import logging

from intraday_dataflow.candle_aggregation import DEFAULT_TIMEFRAME, Timeframe, aggregate_candles
from intraday_schemas.legend_data import LegendSummary
from intraday_schemas.market_data import Candle, Tick

from ..legend.index import LegendIndex

logger = logging.getLogger(__name__)


class TimeframeController:
    """
    Derives candles and legend lookups from (ticks, timeframe).

    Ticks and timeframe are the only authoritative state. Whenever either
    changes the candle series and legend index are recomputed in full and
    the pointer selection is cleared, so the legend falls back to the last
    candle. Nothing here performs I/O.

    Example usage:
        controller = TimeframeController()
        controller.load_ticks(ticks)
        controller.set_timeframe("1m")
        summary = controller.select(pointer_time)
    """

    def __init__(self, timeframe: "Timeframe | str" = DEFAULT_TIMEFRAME):
        self._timeframe = Timeframe.parse(timeframe)
        self._ticks: Tuple[Tick, ...] = ()
        self._candles: Tuple[Candle, ...] = ()
        self._legend = LegendIndex.empty()
        self._selected_time: Optional[int] = None

    @property
    def timeframe(self) -> Timeframe:
        return self._timeframe

    @property
    def ticks(self) -> Tuple[Tick, ...]:
        return self._ticks

    @property
    def candles(self) -> Tuple[Candle, ...]:
        return self._candles

    @property
    def legend(self) -> LegendIndex:
        return self._legend

    @property
    def selected_time(self) -> Optional[int]:
        """Bucket start of the active pointer selection, if any"""
        return self._selected_time

    def load_ticks(self, ticks: Sequence[Tick]) -> None:
        """Replace the tick set wholesale and rebuild"""
        self._ticks = tuple(ticks)
        self._rebuild()

    def set_timeframe(self, timeframe: "Timeframe | str") -> bool:
        """
        Switch granularity and re-aggregate the held ticks.

        Args:
            timeframe: New timeframe ('1m', '5m', ...)

        Returns:
            True if the timeframe changed

        Raises:
            ValueError: If timeframe is not a supported value
        """
        timeframe = Timeframe.parse(timeframe)
        if timeframe == self._timeframe:
            return False

        logger.info(f"Timeframe changed: {self._timeframe.value} -> {timeframe.value}")
        self._timeframe = timeframe
        self._rebuild()
        return True

    def select(self, time: Optional[int]) -> Optional[LegendSummary]:
        """
        Point the legend at a bucket start.

        A time with no exact bucket match clears the selection, which makes
        the legend show the last candle.

        Returns:
            The now-active legend summary (None for an empty series)
        """
        summary = self._legend.lookup(time)
        if summary is None:
            self._selected_time = None
            return self._legend.default()

        self._selected_time = time
        return summary

    @property
    def active_summary(self) -> Optional[LegendSummary]:
        """Selected summary, or the last candle's when nothing is selected"""
        if self._selected_time is not None:
            summary = self._legend.lookup(self._selected_time)
            if summary is not None:
                return summary
        return self._legend.default()

    def _rebuild(self) -> None:
        self._candles = ()
        self._legend = LegendIndex.empty()
        self._selected_time = None

        self._candles = tuple(aggregate_candles(self._ticks, self._timeframe))
        self._legend = LegendIndex.from_candles(self._candles)

        logger.debug(
            f"Rebuilt {len(self._candles)} {self._timeframe.value} candles "
            f"from {len(self._ticks)} ticks"
        )
