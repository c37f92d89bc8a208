"""
Chart Coordinator

Coordinates one intraday chart widget.
Handles NATS subscriptions, lifecycle events and snapshot publishing.
"""

import json
import logging
from typing import Dict, Any, Optional

from intraday_dataflow.adapters.data_requester import NatsDataRequester
from intraday_dataflow.adapters.nats_client import NatsClient, Topics
from intraday_schemas.legend_data import LegendSummary

from ..config.loader import ChartConfig
from ..legend.formatting import format_legend, format_subtitle
from ..lifecycle.refresher import RefreshLifecycle
from ..timeframe.controller import TimeframeController

logger = logging.getLogger(__name__)


class ChartCoordinator:
    """
    Coordinates data flow for a single chart widget.

    The coordinator:
    1. Builds the timeframe controller, requester and refresh lifecycle
    2. Subscribes to the widget's tool-result topic
    3. Hands each delivered result to the lifecycle
    4. Publishes a view snapshot after every lifecycle update

    Example usage:
        nats_client = NatsClient(nats_config)
        await nats_client.connect()

        async with ChartCoordinator(nats_client, ChartConfig()) as coordinator:
            await coordinator.lifecycle.refresh("TEVA")
    """

    def __init__(self, nats_client: NatsClient, config: Optional[ChartConfig] = None):
        """
        Initialize coordinator for a widget.

        Args:
            nats_client: Connected NATS client
            config: Chart configuration
        """
        self.nats = nats_client
        self.config = config or ChartConfig()

        self.controller = TimeframeController(self.config.timeframe)
        self.requester = NatsDataRequester(
            nats_client,
            tool_name=self.config.tool_name,
            subject=self.config.tool_subject,
            timeout=self.config.request_timeout,
        )
        self.lifecycle = RefreshLifecycle(
            self.controller,
            self.requester,
            self.config,
            on_update=self.publish_snapshot,
        )

        logger.info(
            f"Coordinator initialized for {self.config.widget}: "
            f"timeframe={self.config.timeframe.value}, tool={self.config.tool_name}"
        )

    async def start(self) -> None:
        """
        Start the coordinator.

        Subscribes to:
        - widgets.{widget}.tool_result (host-delivered tool results)
        """
        logger.info(f"Starting coordinator for {self.config.widget}...")

        topic = Topics.tool_results(self.config.widget)
        await self.nats.subscribe(topic, self._handle_tool_result)

        logger.info(f"Coordinator started for {self.config.widget}")

    async def stop(self) -> None:
        """Stop the coordinator"""
        logger.info(f"Stopping coordinator for {self.config.widget}")
        await self.lifecycle.close()

    async def __aenter__(self) -> "ChartCoordinator":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _handle_tool_result(self, msg) -> None:
        """
        Handle a tool result delivered by the host over NATS.

        Args:
            msg: NATS message with the tool result JSON
        """
        try:
            result = json.loads(msg.data.decode())
        except Exception as e:
            logger.error(f"Failed to decode tool result: {e}")
            result = None

        try:
            await self.lifecycle.handle_tool_result(result)
        except Exception as e:
            logger.error(f"Failed to handle tool result: {e}", exc_info=True)

    async def set_timeframe(self, timeframe: str) -> bool:
        """Switch timeframe and publish the rebuilt view"""
        changed = self.controller.set_timeframe(timeframe)
        if changed:
            await self.publish_snapshot()
        return changed

    @property
    def subtitle(self) -> Optional[str]:
        payload = self.lifecycle.payload
        if payload is None:
            return None
        return format_subtitle(
            payload.symbol, payload.identifier, payload.tick_count, self.controller.timeframe.value
        )

    def legend_line(self, summary: Optional[LegendSummary]) -> Optional[str]:
        if summary is None:
            return None
        payload = self.lifecycle.payload
        return format_legend(summary, payload.symbol if payload else None)

    def snapshot(self) -> Dict[str, Any]:
        """
        Current view state.

        Returns:
            Dictionary with load state, header, candles and active legend
        """
        summary = self.controller.active_summary
        return {
            "widget": self.config.widget,
            "state": self.lifecycle.state.to_dict(),
            "subtitle": self.subtitle,
            "timeframe": self.controller.timeframe.value,
            "candles": [c.to_dict() for c in self.controller.candles],
            "legend": summary.to_dict() if summary else None,
            "legend_line": self.legend_line(summary),
        }

    async def publish_snapshot(self) -> None:
        """Publish the current view state to widgets.{widget}.state"""
        if not self.nats.is_connected:
            logger.debug("NATS not connected - snapshot not published")
            return

        topic = Topics.widget_state(self.config.widget)
        try:
            await self.nats.publish_json(topic, self.snapshot())
            logger.debug(f"Published snapshot to {topic}")
        except Exception as e:
            logger.error(f"Failed to publish snapshot: {e}")

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get coordinator metrics.

        Returns:
            Dictionary with coordinator statistics
        """
        payload = self.lifecycle.payload
        return {
            "widget": self.config.widget,
            "state": self.lifecycle.state.status.value,
            "symbol": payload.symbol if payload else None,
            "ticks": len(self.controller.ticks),
            "candles": len(self.controller.candles),
            "timeframe": self.controller.timeframe.value,
        }
