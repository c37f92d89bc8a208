"""
Tick Normalization

Turns raw intraday records into validated, time-ordered ticks.
"""

from intraday_dataflow.normalization.normalizer import normalize_ticks, parse_tick_time

__all__ = ["normalize_ticks", "parse_tick_time"]
