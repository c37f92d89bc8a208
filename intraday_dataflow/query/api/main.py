"""
Query API

FastAPI service exposing the intraday chart state to a viewer.

HTTP Endpoints:
- GET  /                       - Health check
- GET  /health                 - Detailed health status
- GET  /state                  - Load state, header and symbol field
- GET  /candles                - Current candle series
- GET  /legend?time=           - Point the legend at a bucket start
- POST /timeframe/{timeframe}  - Switch candle timeframe
- POST /refresh?symbol=        - Manual refresh
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel
import uvicorn

from intraday_dataflow.adapters.nats_client import NatsClient, NatsConfig
from intraday_engine.config.loader import ChartConfig
from intraday_engine.runtime.coordinator import ChartCoordinator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Response models (Pydantic)
class CandleResponse(BaseModel):
    """Single candle response"""
    time: int  # bucket start, unix seconds
    open: float
    high: float
    low: float
    close: float
    volume: float
    tick_count: int
    up: bool


class CandlesResponse(BaseModel):
    """Response containing the candle series"""
    symbol: Optional[str]
    timeframe: str
    count: int
    candles: list[CandleResponse]


class LegendResponse(BaseModel):
    """Active legend values"""
    time: Optional[int]  # selected bucket start, None when showing the last candle
    open: float
    high: float
    low: float
    close: float
    change_percent: Optional[float]
    volume: float
    line: str


class StateResponse(BaseModel):
    """Widget load state"""
    status: str
    message: Optional[str]
    subtitle: Optional[str]
    timeframe: str
    symbol_input: str
    fetching: bool


# Global coordinator
coordinator: Optional[ChartCoordinator] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for NATS connection and coordinator"""
    global coordinator

    # Startup
    logger.info("Starting Query API...")

    nats_client = NatsClient(NatsConfig.from_env())

    try:
        await nats_client.connect()
        coordinator = ChartCoordinator(nats_client, ChartConfig.from_env())
        await coordinator.start()
        logger.info("Chart coordinator started")
    except Exception as e:
        logger.error(f"Failed to start chart coordinator: {e}")
        coordinator = None

    yield

    # Shutdown
    if coordinator:
        await coordinator.stop()
        coordinator = None
    if nats_client.is_connected:
        await nats_client.close()
    logger.info("Query API shutdown complete")


app = FastAPI(
    title="Intraday Chart - Query API",
    description="Intraday candles, legend and refresh control for one security",
    version="1.0.0",
    lifespan=lifespan,
)


def _require_coordinator() -> ChartCoordinator:
    if coordinator is None:
        raise HTTPException(
            status_code=503,
            detail="Chart coordinator unavailable"
        )
    return coordinator


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "running",
        "service": "query-api",
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/health")
async def health():
    """Detailed health status"""
    return {
        "status": "healthy",
        "service": "query-api",
        "coordinator_running": coordinator is not None,
        "nats_connected": coordinator.nats.is_connected if coordinator else False,
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/state")
async def get_state() -> StateResponse:
    """Current load state of the widget"""
    coord = _require_coordinator()
    state = coord.lifecycle.state

    return StateResponse(
        status=state.status.value,
        message=state.message,
        subtitle=coord.subtitle,
        timeframe=coord.controller.timeframe.value,
        symbol_input=coord.lifecycle.symbol_input,
        fetching=coord.lifecycle.is_fetching,
    )


@app.get("/candles")
async def get_candles() -> CandlesResponse:
    """
    Current candle series, oldest first.

    Returns:
        CandlesResponse (empty list while waiting for data)
    """
    coord = _require_coordinator()
    payload = coord.lifecycle.payload

    candles = [
        CandleResponse(
            time=c.bucket_start,
            open=c.open,
            high=c.high,
            low=c.low,
            close=c.close,
            volume=c.volume,
            tick_count=c.tick_count,
            up=c.is_up,
        )
        for c in coord.controller.candles
    ]

    return CandlesResponse(
        symbol=payload.symbol if payload else None,
        timeframe=coord.controller.timeframe.value,
        count=len(candles),
        candles=candles,
    )


@app.get("/legend")
async def get_legend(
    time: Optional[int] = Query(default=None, description="Bucket start under the crosshair")
) -> LegendResponse:
    """
    Point the legend at a bucket start.

    A time without an exact candle (or no time) shows the last candle.

    Raises:
        404: No candles loaded
        503: Coordinator unavailable
    """
    coord = _require_coordinator()
    summary = coord.controller.select(time)

    if summary is None:
        raise HTTPException(
            status_code=404,
            detail="No candles available"
        )

    return LegendResponse(
        time=coord.controller.selected_time,
        open=summary.open,
        high=summary.high,
        low=summary.low,
        close=summary.close,
        change_percent=summary.change_percent,
        volume=summary.volume,
        line=coord.legend_line(summary),
    )


@app.post("/timeframe/{timeframe}")
async def set_timeframe(timeframe: str):
    """
    Switch candle timeframe. Never fetches data.

    Raises:
        400: Invalid timeframe
    """
    coord = _require_coordinator()

    try:
        changed = await coord.set_timeframe(timeframe)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "timeframe": coord.controller.timeframe.value,
        "changed": changed,
        "candles": len(coord.controller.candles),
    }


@app.post("/refresh")
async def refresh(
    symbol: Optional[str] = Query(default=None, description="Symbol or security id to load")
):
    """
    Manual refresh. Waits for the request to resolve.

    Raises:
        409: A request is already in flight
        503: Coordinator unavailable or already stopped
    """
    coord = _require_coordinator()

    if coord.lifecycle.is_closed:
        raise HTTPException(
            status_code=503,
            detail="Chart coordinator stopped"
        )

    accepted = await coord.lifecycle.refresh(symbol)
    if not accepted:
        raise HTTPException(
            status_code=409,
            detail="Refresh already in progress"
        )

    state = coord.lifecycle.state
    logger.info(f"Manual refresh finished: {state.status.value}")

    return {
        "status": state.status.value,
        "message": state.message,
        "subtitle": coord.subtitle,
    }


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting Query API on {host}:{port}")
    logger.info(f"NATS servers: {os.getenv('NATS_SERVERS', 'nats://localhost:4222')}")

    uvicorn.run(app, host=host, port=port)
