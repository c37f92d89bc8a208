"""
NATS Client Adapter

Async NATS connection shared by the chart widget:
tool calls go out as request/reply, tool results and widget snapshots
travel as plain pub/sub messages.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional

import nats
from nats.aio.client import Client as NatsConnection
from nats.aio.msg import Msg
from nats.errors import NoRespondersError, TimeoutError as NatsTimeoutError

logger = logging.getLogger(__name__)


@dataclass
class NatsConfig:
    """NATS connection configuration"""
    servers: list[str] = field(default_factory=lambda: ["nats://localhost:4222"])
    name: str = "intraday-chart"
    reconnect_time_wait: float = 2.0
    max_reconnect_attempts: int = -1  # Infinite reconnects

    @classmethod
    def from_env(cls, prefix: str = "NATS") -> "NatsConfig":
        """Create config from NATS_SERVERS, NATS_CLIENT_NAME and NATS_RECONNECT_WAIT"""
        servers = os.getenv(f"{prefix}_SERVERS", "nats://localhost:4222")
        return cls(
            servers=[s.strip() for s in servers.split(",") if s.strip()],
            name=os.getenv(f"{prefix}_CLIENT_NAME", "intraday-chart"),
            reconnect_time_wait=float(os.getenv(f"{prefix}_RECONNECT_WAIT", "2.0")),
        )


class NatsClient:
    """
    Connection wrapper used by the coordinator and the data requester.

    Topic Patterns:
    - tools.call                    - Tool-call requests to the host (request/reply)
    - widgets.{widget}.tool_result  - Tool results delivered by the host
    - widgets.{widget}.state        - Widget view snapshots
    """

    def __init__(self, config: Optional[NatsConfig] = None):
        self.config = config or NatsConfig()
        self._nc: Optional[NatsConnection] = None
        self._subscriptions: dict[str, Any] = {}
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected and self._nc is not None and self._nc.is_connected

    async def connect(self) -> None:
        """Connect and keep reconnecting in the background"""
        if self._connected:
            return

        try:
            self._nc = await nats.connect(
                servers=self.config.servers,
                name=self.config.name,
                reconnect_time_wait=self.config.reconnect_time_wait,
                max_reconnect_attempts=self.config.max_reconnect_attempts,
                error_cb=self._on_error,
                closed_cb=self._on_closed,
                reconnected_cb=self._on_reconnected,
                disconnected_cb=self._on_disconnected,
            )
        except Exception as e:
            logger.error(f"Failed to connect to NATS {self.config.servers}: {e}")
            raise

        self._connected = True
        logger.info(f"Connected to NATS as {self.config.name}: {self.config.servers}")

    async def close(self) -> None:
        """Drop subscriptions and close the connection"""
        if self._nc is None:
            return
        self._subscriptions.clear()
        await self._nc.drain()
        self._connected = False
        logger.info("NATS connection closed")

    async def publish(self, subject: str, data: bytes) -> None:
        if not self.is_connected:
            raise RuntimeError("NATS client not connected")
        await self._nc.publish(subject, data)
        logger.debug(f"Published to {subject}: {len(data)} bytes")

    async def publish_json(self, subject: str, data: Mapping[str, Any]) -> None:
        """
        Serialize a mapping and publish it.

        Args:
            subject: NATS subject (e.g., "widgets.intraday-candlestick.state")
            data: JSON-serializable mapping
        """
        await self.publish(subject, json.dumps(data).encode("utf-8"))

    async def subscribe(self, subject: str, callback: Callable[[Msg], Awaitable[None]]) -> None:
        """
        Subscribe to a NATS subject.

        A second subscription to the same subject replaces the first.
        """
        if not self.is_connected:
            raise RuntimeError("NATS client not connected")

        previous = self._subscriptions.pop(subject, None)
        if previous is not None:
            await previous.unsubscribe()

        self._subscriptions[subject] = await self._nc.subscribe(subject, cb=callback)
        logger.info(f"Subscribed to {subject}")

    async def request(self, subject: str, data: bytes, timeout: float = 5.0) -> Msg:
        """
        Send a request and wait for the reply.

        Args:
            subject: NATS subject
            data: Request payload
            timeout: Seconds to wait for a reply

        Returns:
            Reply message

        Raises:
            RuntimeError: If not connected
            TimeoutError: If nobody answers within the timeout
        """
        if not self.is_connected:
            raise RuntimeError("NATS client not connected")
        try:
            return await self._nc.request(subject, data, timeout=timeout)
        except NoRespondersError:
            raise TimeoutError(f"No responders on {subject}")
        except NatsTimeoutError:
            raise TimeoutError(f"Request on {subject} timed out after {timeout}s")

    async def _on_error(self, e: Exception) -> None:
        logger.error(f"NATS error: {e}")

    async def _on_closed(self) -> None:
        logger.warning("NATS connection closed")
        self._connected = False

    async def _on_reconnected(self) -> None:
        logger.info("NATS reconnected")
        self._connected = True

    async def _on_disconnected(self) -> None:
        logger.warning("NATS disconnected")
        self._connected = False


# Topic helpers
class Topics:
    """NATS topic name builders"""

    @staticmethod
    def _sanitize(name: str) -> str:
        """
        Sanitize a name for use in NATS topics.

        NATS topic segments can only contain alphanumeric characters,
        hyphens, and underscores. Spaces and other characters are
        replaced with underscores.
        """
        sanitized = name.replace(" ", "_")
        sanitized = "".join(c if c.isalnum() or c in "-_" else "_" for c in sanitized)
        return sanitized

    @staticmethod
    def tool_calls() -> str:
        """Default request/reply subject for host tool calls"""
        return "tools.call"

    @staticmethod
    def tool_results(widget: str) -> str:
        """Tool results the host delivers to a widget"""
        return f"widgets.{Topics._sanitize(widget)}.tool_result"

    @staticmethod
    def widget_state(widget: str) -> str:
        """View snapshots published by a widget"""
        return f"widgets.{Topics._sanitize(widget)}.state"
