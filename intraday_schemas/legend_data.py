"""
Legend Data Schemas

Dataclasses for the per-candle summary shown in the chart legend.
"""

from dataclasses import dataclass
from typing import Optional

from .market_data import Candle


@dataclass(frozen=True)
class LegendSummary:
    """
    Legend values for one candle.

    change_percent is the candle's own open-to-close move in percent,
    or None when the open price is zero.
    """
    open: float
    high: float
    low: float
    close: float
    change_percent: Optional[float]
    volume: float

    @classmethod
    def from_candle(cls, candle: Candle) -> "LegendSummary":
        """Summarize a candle."""
        change = None
        if candle.open != 0:
            change = (candle.close - candle.open) / candle.open * 100
        return cls(
            open=candle.open,
            high=candle.high,
            low=candle.low,
            close=candle.close,
            change_percent=change,
            volume=candle.volume,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "change_percent": self.change_percent,
            "volume": self.volume,
        }
