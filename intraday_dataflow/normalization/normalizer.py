"""
Tick Normalizer

Converts raw intraday records into time-sorted Tick objects.
Records without a usable timestamp or price are dropped.
"""

import logging
import math
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from intraday_schemas.market_data import IntradayItem, Tick

logger = logging.getLogger(__name__)


def parse_tick_time(item: IntradayItem, tz: tzinfo = timezone.utc) -> Optional[int]:
    """
    Combine an item's date and time-of-day into unix seconds.

    Args:
        item: Raw intraday record. date is "2026-03-01" or a full ISO
              datetime (only the date part is used), last_sale_time is
              "14:35:22".
        tz: Timezone the exchange reports times in

    Returns:
        Unix timestamp in whole seconds, or None if either field is
        missing or the combination does not parse
    """
    if not item.last_sale_time or not item.date:
        return None

    date_str = item.date.split("T")[0]
    try:
        dt = datetime.fromisoformat(f"{date_str}T{item.last_sale_time}")
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return math.floor(dt.timestamp())


def _coerce_item(raw: Any) -> Optional[IntradayItem]:
    """Validate one raw record; None if it is not a usable record"""
    if isinstance(raw, IntradayItem):
        return raw
    if not isinstance(raw, Mapping):
        return None
    try:
        return IntradayItem.model_validate(raw)
    except ValidationError as e:
        logger.debug(f"Skipping malformed intraday record: {e.error_count()} errors")
        return None


def normalize_ticks(items: Iterable[Any], tz: tzinfo = timezone.utc) -> List[Tick]:
    """
    Validate and sort raw records.

    Invalid records are dropped without raising: non-mappings, records
    failing validation, and records without a usable time or a finite
    price. A missing, negative or non-finite volume counts as 0. Records
    sharing a timestamp keep their input order.

    Args:
        items: Raw records (mappings or IntradayItem), possibly unordered
               and possibly containing None
        tz: Timezone used for naive date/time combinations

    Returns:
        Ticks sorted ascending by timestamp
    """
    ticks = []
    dropped = 0

    for raw in items:
        item = _coerce_item(raw)
        if item is None:
            dropped += 1
            continue

        ts = parse_tick_time(item, tz)
        if ts is None or item.price is None or not math.isfinite(item.price):
            dropped += 1
            continue

        volume = item.volume if item.volume is not None and math.isfinite(item.volume) else 0.0
        ticks.append(Tick(timestamp=ts, price=item.price, volume=max(volume, 0.0)))

    if dropped:
        logger.debug(f"Dropped {dropped} invalid intraday records")

    # list.sort is stable
    ticks.sort(key=lambda t: t.timestamp)
    return ticks
