"""
Timeframe Module

Timeframe selection and derived candle/legend state.
"""

from .controller import TimeframeController

__all__ = [
    "TimeframeController",
]
