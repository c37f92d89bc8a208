"""
Intraday Chart - Typed Message Catalog

Core data types for ticks, candles, raw tool payloads and legend summaries.
"""

from .market_data import Tick, Candle, IntradayItem, IntradayPayload
from .legend_data import LegendSummary

__all__ = [
    "Tick",
    "Candle",
    "IntradayItem",
    "IntradayPayload",
    "LegendSummary",
]
