"""
Legend Formatting

Text helpers for the chart legend and header.
"""

from typing import Optional, Union

from intraday_schemas.legend_data import LegendSummary


def format_price(price: float) -> str:
    return f"{price:.2f}"


def format_volume(volume: float) -> str:
    """Compact volume: 1.2B, 3.4M, 56K or the plain number"""
    if volume >= 1_000_000_000:
        return f"{volume / 1_000_000_000:.1f}B"
    if volume >= 1_000_000:
        return f"{volume / 1_000_000:.1f}M"
    if volume >= 1_000:
        return f"{volume / 1_000:.0f}K"
    if float(volume).is_integer():
        return str(int(volume))
    return str(volume)


def format_change(change_percent: float) -> str:
    sign = "+" if change_percent >= 0 else ""
    return f"{sign}{change_percent:.2f}%"


def format_legend(summary: LegendSummary, symbol: Optional[str] = None) -> str:
    """
    Render a legend line.

    Example: "TEVA O: 100.00 H: 101.00 L: 100.00 C: 101.00 +1.00% Vol: 15"
    """
    parts = []
    if symbol:
        parts.append(symbol)
    parts.extend([
        f"O: {format_price(summary.open)}",
        f"H: {format_price(summary.high)}",
        f"L: {format_price(summary.low)}",
        f"C: {format_price(summary.close)}",
    ])
    if summary.change_percent is not None:
        parts.append(format_change(summary.change_percent))
    if summary.volume > 0:
        parts.append(f"Vol: {format_volume(summary.volume)}")
    return " ".join(parts)


def format_subtitle(
    symbol: Optional[str],
    identifier: Optional[Union[int, str]],
    count: int,
    timeframe: str,
) -> str:
    """Header line: "TEVA (ID: 629014) · 1234 ticks · 5m" """
    header = symbol or "Unknown"
    if identifier is not None:
        header += f" (ID: {identifier})"
    return f"{header} · {count} ticks · {timeframe}"
