"""
Refresh Lifecycle

Decides when intraday data is (re)requested and applies the results:
initial host result, one-shot fallback fetch, manual refresh and the
periodic auto-refresh timer.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from intraday_dataflow.adapters.data_requester import DataRequester
from intraday_dataflow.ingestion.host import extract_intraday_payload
from intraday_dataflow.normalization import normalize_ticks
from intraday_schemas.market_data import IntradayPayload

from ..config.loader import ChartConfig
from ..timeframe.controller import TimeframeController
from .state import LifecycleEvent, LoadState, LoadStatus, next_state
from .timer import PeriodicTimer

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data found"
FETCH_FAILED_MESSAGE = "Failed to fetch data"


class RefreshLifecycle:
    """
    Load-state machine for one chart widget.

    At most one data request is outstanding at any time. Manual refreshes
    that arrive while a request is in flight are rejected, periodic ticks
    are skipped. A resolved request replaces the ticks and rebuilds the
    candles before anything else runs.

    Example usage:
        lifecycle = RefreshLifecycle(controller, requester, config)
        await lifecycle.handle_tool_result(initial_result)
        accepted = await lifecycle.refresh("TEVA")
        await lifecycle.close()
    """

    def __init__(
        self,
        controller: TimeframeController,
        requester: Optional[DataRequester],
        config: Optional[ChartConfig] = None,
        on_update: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        """
        Args:
            controller: Holds ticks/timeframe and the derived candles
            requester: Data-request capability (None disables fetching)
            config: Chart configuration
            on_update: Awaited after every state or data change
        """
        self.controller = controller
        self.requester = requester
        self.config = config or ChartConfig()
        self.on_update = on_update

        # Free-text symbol field; synced to the loaded symbol while empty
        self.symbol_input = ""

        self._state = LoadState.waiting()
        self._payload: Optional[IntradayPayload] = None
        self._in_flight = False
        self._fallback_armed = True
        self._timer: Optional[PeriodicTimer] = None
        self._timer_identifier: Optional[Union[int, str]] = None
        self._closed = False

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def payload(self) -> Optional[IntradayPayload]:
        """Last successfully loaded payload"""
        return self._payload

    @property
    def is_fetching(self) -> bool:
        return self._in_flight

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def timer(self) -> Optional[PeriodicTimer]:
        return self._timer

    async def handle_tool_result(self, result: Optional[Mapping[str, Any]]) -> None:
        """
        Apply a tool result delivered by the host.

        An undecodable result triggers the fallback fetch, once per
        lifecycle. The fallback only counts as used once its request is
        actually sent; if another request is in flight it stays armed.
        """
        if self._closed:
            return

        payload = extract_intraday_payload(result)
        if payload is not None:
            self._apply_payload(payload)
            self._transition(LifecycleEvent.DATA_DELIVERED)
            await self._notify()
            return

        if not self._fallback_armed:
            logger.info("Tool result has no intraday data; fallback fetch already used")
            return

        await self._auto_fetch()

    async def refresh(self, symbol: Optional[str] = None) -> bool:
        """
        Manual refresh.

        Args:
            symbol: Symbol or security id to fetch; defaults to the symbol
                    field. Blank means "current security".

        Returns:
            False if rejected: a request is already in flight or the
            lifecycle is closed (see is_closed)
        """
        if self._closed:
            logger.warning("Refresh requested after close, ignoring")
            return False

        if self._in_flight:
            logger.warning("Refresh already in progress, rejecting request")
            return False

        identifier = (symbol if symbol is not None else self.symbol_input).strip()
        args = {self.config.identifier_argument: identifier} if identifier else None

        self._in_flight = True
        self._transition(LifecycleEvent.REFRESH_STARTED)
        await self._run_fetch(args)
        return True

    async def close(self) -> None:
        """Tear down: cancel the auto-refresh timer"""
        self._closed = True
        timer, self._timer = self._timer, None
        self._timer_identifier = None
        if timer is not None:
            await timer.stop()
        logger.info("Refresh lifecycle closed")

    async def __aenter__(self) -> "RefreshLifecycle":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _auto_fetch(self) -> None:
        """Best-effort fetch of the current security; failures stay silent"""
        if self.requester is None:
            logger.info("No data requester available, skipping auto-fetch")
            return

        if self._in_flight:
            logger.info("Request already in flight, skipping auto-fetch")
            return

        logger.info("Initial tool result unusable, auto-fetching current data")
        self._fallback_armed = False
        self._in_flight = True
        try:
            payload = await self._request(None)
        except Exception as e:
            logger.error(f"Auto-fetch failed: {e}")
            payload = None
        finally:
            self._in_flight = False

        if payload is None:
            self._transition(LifecycleEvent.FALLBACK_FAILED)
            return

        self._apply_payload(payload)
        self._transition(LifecycleEvent.DATA_DELIVERED)
        await self._notify()

    async def _periodic_refresh(self) -> None:
        if self._closed or self._timer_identifier is None:
            return

        if self._in_flight:
            logger.info("Request already in flight, skipping auto-refresh")
            return

        logger.info(f"Auto-refreshing security {self._timer_identifier}")
        self._in_flight = True
        await self._run_fetch({self.config.identifier_argument: self._timer_identifier})

    async def _run_fetch(self, args: Optional[Dict[str, Any]]) -> None:
        """Issue a request for manual/periodic refresh; caller set _in_flight"""
        try:
            if self._state.status is LoadStatus.REFRESHING:
                await self._notify()
            if self.requester is None:
                raise RuntimeError("No data requester available")
            payload = await self._request(args)
        except Exception as e:
            logger.error(f"Failed to refresh: {e}", exc_info=True)
            self._transition(LifecycleEvent.REFRESH_FAILED, FETCH_FAILED_MESSAGE)
        else:
            if payload is None:
                self._transition(LifecycleEvent.REFRESH_FAILED, NO_DATA_MESSAGE)
            else:
                self._apply_payload(payload)
                self._transition(LifecycleEvent.REFRESH_SUCCEEDED)
        finally:
            self._in_flight = False

        await self._notify()

    async def _request(self, args: Optional[Dict[str, Any]]) -> Optional[IntradayPayload]:
        result = await self.requester.request_data(args)
        return extract_intraday_payload(result)

    def _apply_payload(self, payload: IntradayPayload) -> None:
        """Replace ticks wholesale and rebuild derived state synchronously"""
        ticks = normalize_ticks(payload.items, self.config.tzinfo)
        self._payload = payload
        self.controller.load_ticks(ticks)

        if not self.symbol_input and payload.symbol:
            self.symbol_input = payload.symbol

        logger.info(
            f"Loaded {len(ticks)} ticks for {payload.symbol} "
            f"(ID: {payload.identifier}), {len(self.controller.candles)} candles"
        )
        self._rescope_timer(payload.identifier)

    def _rescope_timer(self, identifier: Optional[Union[int, str]]) -> None:
        """Keep exactly one auto-refresh timer, scoped to the loaded security"""
        if self._closed:
            return
        if identifier == self._timer_identifier and self._timer is not None and self._timer.is_running:
            return

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._timer_identifier = identifier

        if identifier is None:
            return

        self._timer = PeriodicTimer(
            self.config.auto_refresh_interval,
            self._periodic_refresh,
            name=f"auto-refresh-{identifier}",
        )
        self._timer.start()
        logger.info(f"Auto-refresh every {self.config.auto_refresh_interval}s for security {identifier}")

    def _transition(self, event: LifecycleEvent, message: Optional[str] = None) -> None:
        previous = self._state
        self._state = next_state(previous, event, message)
        if self._state != previous:
            logger.info(
                f"Load state {previous.status.value} -> {self._state.status.value}"
                + (f" ({self._state.message})" if self._state.status is LoadStatus.ERROR else "")
            )

    async def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            await self.on_update()
        except Exception as e:
            logger.error(f"Update listener failed: {e}", exc_info=True)
