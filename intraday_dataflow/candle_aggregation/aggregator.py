"""
Candle Aggregator

Buckets time-sorted ticks into OHLCV candles for a single timeframe.
The whole series is rebuilt on every call; nothing is cached between runs.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from intraday_schemas.market_data import Tick, Candle

logger = logging.getLogger(__name__)

TIMEFRAMES = {
    "1m": 60,
    "3m": 180,
    "5m": 300,
    "10m": 600,
    "30m": 1800,
    "1h": 3600,
}


class Timeframe(str, Enum):
    """Selectable candle granularity"""
    M1 = "1m"
    M3 = "3m"
    M5 = "5m"
    M10 = "10m"
    M30 = "30m"
    H1 = "1h"

    @property
    def seconds(self) -> int:
        """Bucket length in seconds"""
        return TIMEFRAMES[self.value]

    @classmethod
    def parse(cls, value: "str | Timeframe") -> "Timeframe":
        """Parse a timeframe label such as '5m'"""
        if isinstance(value, Timeframe):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Invalid timeframe '{value}'. Must be one of: {list(TIMEFRAMES.keys())}"
            )


DEFAULT_TIMEFRAME = Timeframe.M5


def get_bucket_start(timestamp: int, bucket_seconds: int) -> int:
    """Start of the bucket containing this timestamp"""
    return (timestamp // bucket_seconds) * bucket_seconds


class CandleBuilder:
    """Builds a candle from incoming ticks"""

    def __init__(self, timeframe: Timeframe, start_time: int):
        self.timeframe = timeframe
        self.start_time = start_time
        self.open: Optional[float] = None
        self.high: Optional[float] = None
        self.low: Optional[float] = None
        self.close: Optional[float] = None
        self.volume: float = 0.0
        self.tick_count: int = 0

    def add_tick(self, tick: Tick) -> None:
        """Add a tick to this candle"""
        price = tick.price

        if self.open is None:
            self.open = price
            self.high = price
            self.low = price

        self.high = max(self.high, price)
        self.low = min(self.low, price)
        # Ticks arrive in time order, so the last one absorbed is the close
        self.close = price
        self.volume += tick.volume
        self.tick_count += 1

    def is_empty(self) -> bool:
        """Check if candle has any data"""
        return self.open is None

    def build(self) -> Candle:
        """Build the final Candle object"""
        if self.is_empty():
            raise ValueError("Cannot build empty candle")

        return Candle(
            bucket_start=self.start_time,
            timeframe=self.timeframe.value,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
            tick_count=self.tick_count,
        )


def aggregate_candles(ticks: Sequence[Tick], timeframe: "Timeframe | str") -> List[Candle]:
    """
    Aggregate time-sorted ticks into candles.

    Single linear pass with one open builder: a tick in the same bucket
    updates it, a tick in a new bucket emits it and seeds a fresh one.

    Args:
        ticks: Normalized ticks, ascending by timestamp
        timeframe: Candle timeframe ('1m', '5m', ...)

    Returns:
        Candles strictly increasing by bucket_start (empty for empty input)
    """
    timeframe = Timeframe.parse(timeframe)
    bucket_seconds = timeframe.seconds

    candles: List[Candle] = []
    builder: Optional[CandleBuilder] = None

    for tick in ticks:
        bucket = get_bucket_start(tick.timestamp, bucket_seconds)

        if builder is None or builder.start_time != bucket:
            if builder is not None:
                candles.append(builder.build())
            builder = CandleBuilder(timeframe, bucket)

        builder.add_tick(tick)

    if builder is not None:
        candles.append(builder.build())

    logger.debug(f"Aggregated {len(ticks)} ticks into {len(candles)} {timeframe.value} candles")
    return candles
