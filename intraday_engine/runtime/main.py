"""
Chart Coordinator - Main Entry Point

Runs a headless chart coordinator: receives host tool results over NATS,
keeps candles up to date and publishes view snapshots.
"""

import asyncio
import logging
import os
from pathlib import Path

from intraday_dataflow.adapters.nats_client import NatsClient, NatsConfig
from intraday_engine.config.loader import ChartConfig, ConfigLoader
from intraday_engine.runtime.coordinator import ChartCoordinator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def load_config() -> ChartConfig:
    """
    Load chart config from CONFIG_DIR when it holds intraday.yaml,
    otherwise from INTRADAY_* environment variables.
    """
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir and (Path(config_dir) / ConfigLoader.DEFAULT_FILE).exists():
        return ConfigLoader(Path(config_dir)).load()
    return ChartConfig.from_env()


async def main():
    """
    Main entry point for the chart coordinator.

    Environment Variables:
        CONFIG_DIR: Directory with intraday.yaml (optional)
        INTRADAY_*: Chart settings when no YAML is used
        NATS_SERVERS: NATS server URLs (default: "nats://localhost:4222")
        NATS_CLIENT_NAME: NATS client name (default: "intraday-chart")
    """
    config = load_config()

    logger.info("=" * 60)
    logger.info("Intraday Chart Coordinator Starting")
    logger.info("=" * 60)
    logger.info(f"Widget: {config.widget}")
    logger.info(f"Timeframe: {config.timeframe.value}")

    logger.info("Connecting to NATS...")
    nats_client = NatsClient(NatsConfig.from_env())
    await nats_client.connect()

    try:
        async with ChartCoordinator(nats_client, config) as coordinator:
            logger.info("=" * 60)
            logger.info(f"Coordinator running for {config.widget}")
            logger.info("Press Ctrl+C to stop")
            logger.info("=" * 60)

            while True:
                await asyncio.sleep(60)

                metrics = coordinator.get_metrics()
                logger.info(
                    f"Metrics [{metrics['widget']}]: state={metrics['state']}, "
                    f"{metrics['ticks']} ticks, {metrics['candles']} {metrics['timeframe']} candles"
                )

    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise
    finally:
        await nats_client.close()
        logger.info("Coordinator stopped")


if __name__ == "__main__":
    asyncio.run(main())
