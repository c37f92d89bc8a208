"""
Market Data Types

Core market data types used by the intraday chart engine.
Ticks and candles are plain dataclasses; the raw payload delivered by the
host tool call is validated with pydantic models.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Tick:
    """Normalized trade tick (timestamp in unix seconds)"""
    timestamp: int
    price: float
    volume: float = 0.0


@dataclass(frozen=True)
class Candle:
    """OHLCV candle for one time bucket"""
    bucket_start: int  # unix seconds, aligned to the bucket length
    timeframe: str  # '1m', '5m', '1h', etc.
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    tick_count: int = 0  # Number of ticks that formed this candle

    @property
    def is_up(self) -> bool:
        """True when the candle closed at or above its open"""
        return self.close >= self.open

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "bucket_start": self.bucket_start,
            "timeframe": self.timeframe,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
            "tick_count": self.tick_count,
        }


# Raw payload models (Pydantic)
class IntradayItem(BaseModel):
    """One raw intraday record as returned by the data tool"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: Optional[str] = None
    last_sale_time: Optional[str] = Field(default=None, alias="lastSaleTime")
    security_id: Optional[Union[int, str]] = Field(default=None, alias="securityId")
    price: Optional[float] = Field(default=None, alias="securityLastPrice")
    percentage_change: Optional[float] = Field(default=None, alias="securityPercentageChange")
    volume: Optional[float] = Field(default=None, alias="lastSellVolume")
    daily_agg_volume: Optional[float] = Field(default=None, alias="securityDailyAggVolume")
    daily_agg_value: Optional[float] = Field(default=None, alias="securityDailyAggValue")
    daily_num_trades: Optional[int] = Field(default=None, alias="securityDailyNumTrades")


class IntradayPayload(BaseModel):
    """
    Intraday tick payload for a single security.

    items are kept raw: each record is validated on its own during
    normalization so one bad record cannot reject the whole payload.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: Optional[str] = None
    identifier: Optional[Union[int, str]] = Field(default=None, alias="securityId")
    count: Optional[int] = None
    items: List[Any]

    @property
    def tick_count(self) -> int:
        """Reported record count, or the number of records when absent"""
        return self.count if self.count is not None else len(self.items)
