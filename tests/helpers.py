# tests/helpers.py
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from intraday_schemas.market_data import IntradayItem

TRADE_DATE = "2026-03-01"


def ts(hhmmss: str, date: str = TRADE_DATE) -> int:
    """Unix seconds for a UTC wall-clock time on the trade date"""
    dt = datetime.fromisoformat(f"{date}T{hhmmss}").replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def raw_item(
    time: Optional[str],
    price: Optional[float],
    volume: Optional[float] = None,
    date: Optional[str] = TRADE_DATE,
    security_id: int = 629014,
) -> Dict[str, Any]:
    """Raw intraday record as it appears on the wire"""
    return {
        "date": date,
        "lastSaleTime": time,
        "securityId": security_id,
        "securityLastPrice": price,
        "securityPercentageChange": None,
        "lastSellVolume": volume,
    }


def make_item(*args, **kwargs) -> IntradayItem:
    return IntradayItem.model_validate(raw_item(*args, **kwargs))


def make_payload(items: List[Dict[str, Any]], symbol: Optional[str] = "TEVA", security_id=629014) -> Dict[str, Any]:
    payload = {"symbol": symbol, "count": len(items), "items": items}
    if security_id is not None:
        payload["securityId"] = security_id
    return payload


def tool_result(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a payload the way the host delivers structured tool output"""
    return {"structuredContent": payload, "content": []}


SCENARIO_ITEMS = [
    raw_item("09:30:00", 100.0, 10),
    raw_item("09:31:30", 101.0, 5),
    raw_item("09:35:00", 99.0, 7),
]


class FakeRequester:
    """
    Scripted data requester.

    Each call pops the next response: a mapping is returned, an exception
    is raised. When `gate` is set, calls block until it is released.
    """

    def __init__(self, responses: Optional[list] = None):
        self.responses = list(responses or [])
        self.calls: List[Optional[Dict[str, Any]]] = []
        self.gate: Optional[asyncio.Event] = None

    async def request_data(self, args=None):
        self.calls.append(args)
        if self.gate is not None:
            await self.gate.wait()
        if not self.responses:
            raise RuntimeError("no scripted response")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response
