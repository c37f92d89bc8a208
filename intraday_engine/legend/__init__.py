"""
Legend Module

Point lookup of candle summaries and legend text formatting.
"""

from .index import LegendIndex
from .formatting import format_change, format_legend, format_price, format_subtitle, format_volume

__all__ = [
    "LegendIndex",
    "format_change",
    "format_legend",
    "format_price",
    "format_subtitle",
    "format_volume",
]
