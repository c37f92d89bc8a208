"""
Data Requester

The "request data" capability used by the refresh lifecycle, and its
NATS request/reply implementation.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from intraday_dataflow.adapters.nats_client import NatsClient, Topics

logger = logging.getLogger(__name__)


class DataRequester(Protocol):
    """
    Protocol for anything that can fetch an intraday tool result.

    Implementations raise on transport or host failure and return the raw
    tool result mapping otherwise. Decoding the payload is the caller's job.
    """

    async def request_data(self, args: Optional[Dict[str, Any]] = None) -> Mapping[str, Any]:
        ...


class NatsDataRequester:
    """
    Calls the host's data tool over NATS request/reply.

    Request body: {"name": <tool name>, "arguments": {...}}
    Reply body:   the tool result mapping (JSON)

    Example usage:
        requester = NatsDataRequester(nats_client, "get-symbol-intraday-candlestick-data")
        result = await requester.request_data({"securityIdOrSymbol": "TEVA"})
    """

    def __init__(
        self,
        nats_client: NatsClient,
        tool_name: str,
        subject: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.nats = nats_client
        self.tool_name = tool_name
        self.subject = subject or Topics.tool_calls()
        self.timeout = timeout

    async def request_data(self, args: Optional[Dict[str, Any]] = None) -> Mapping[str, Any]:
        """
        Invoke the data tool.

        Args:
            args: Tool arguments (empty means "current security")

        Returns:
            Decoded tool result

        Raises:
            RuntimeError: If the host reports a tool error or the reply is
                          not a JSON object
        """
        body = json.dumps({"name": self.tool_name, "arguments": args or {}})
        logger.debug(f"Calling {self.tool_name} on {self.subject} with {args or {}}")

        msg = await self.nats.request(self.subject, body.encode("utf-8"), timeout=self.timeout)

        try:
            result = json.loads(msg.data.decode())
        except ValueError as e:
            raise RuntimeError(f"Invalid tool reply from {self.tool_name}: {e}")

        if not isinstance(result, dict):
            raise RuntimeError(f"Invalid tool reply from {self.tool_name}: expected an object")

        if result.get("isError"):
            raise RuntimeError(f"Tool {self.tool_name} failed: {result.get('content')}")

        return result
