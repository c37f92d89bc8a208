"""
Candle Aggregation

Aggregates normalized ticks into OHLCV candles.
Supports timeframes: 1m, 3m, 5m, 10m, 30m, 1h.
"""

from intraday_dataflow.candle_aggregation.aggregator import (
    DEFAULT_TIMEFRAME,
    TIMEFRAMES,
    CandleBuilder,
    Timeframe,
    aggregate_candles,
    get_bucket_start,
)

__all__ = [
    "DEFAULT_TIMEFRAME",
    "TIMEFRAMES",
    "CandleBuilder",
    "Timeframe",
    "aggregate_candles",
    "get_bucket_start",
]
