"""
Config Loader

Loads the chart widget configuration from YAML files and environment
variables and validates it with pydantic.
"""

import os
import yaml
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import BaseModel, Field, ValidationError, field_validator
import logging

from intraday_dataflow.candle_aggregation import Timeframe

logger = logging.getLogger(__name__)


class ChartConfig(BaseModel):
    """Configuration for one intraday chart widget"""
    widget: str = "intraday-candlestick"
    timeframe: Timeframe = Timeframe.M5
    timezone: str = "UTC"
    auto_refresh_interval: float = Field(default=1800.0, gt=0)  # seconds
    tool_name: str = "get-symbol-intraday-candlestick-data"
    identifier_argument: str = "securityIdOrSymbol"
    tool_subject: str = "tools.call"
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls, prefix: str = "INTRADAY") -> "ChartConfig":
        """
        Create config from environment variables.

        Reads {prefix}_WIDGET, {prefix}_TIMEFRAME, {prefix}_TIMEZONE,
        {prefix}_AUTO_REFRESH_INTERVAL, {prefix}_TOOL_NAME,
        {prefix}_IDENTIFIER_ARGUMENT, {prefix}_TOOL_SUBJECT and
        {prefix}_REQUEST_TIMEOUT. Unset variables keep their defaults.
        """
        raw = {}
        for name in cls.model_fields:
            value = os.getenv(f"{prefix}_{name.upper()}")
            if value is not None:
                raw[name] = value
        try:
            return cls(**raw)
        except ValidationError as e:
            raise ValueError(f"Invalid {prefix}_* environment configuration: {e}")


class ConfigLoader:
    """
    Loads a chart config from YAML.

    Example usage:
        loader = ConfigLoader(Path("config"))
        config = loader.load()              # config/intraday.yaml
        config = loader.load("staging.yaml")
    """

    DEFAULT_FILE = "intraday.yaml"

    def __init__(self, config_dir: Path):
        """
        Initialize loader with config directory.

        Args:
            config_dir: Directory holding the YAML files
        """
        self.config_dir = config_dir
        logger.info(f"Initialized ConfigLoader with config_dir: {config_dir}")

    def load(self, filename: Optional[str] = None) -> ChartConfig:
        """
        Load and validate a YAML config file.

        Args:
            filename: File name inside config_dir (default: intraday.yaml)

        Returns:
            Validated ChartConfig

        Raises:
            ValueError: If the file is missing, malformed or fails validation
        """
        path = self.config_dir / (filename or self.DEFAULT_FILE)

        if not path.exists():
            raise ValueError(f"No chart config found. Expected: {path}")

        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
            config = ChartConfig(**raw)
        except Exception as e:
            logger.error(f"Failed to load {path}: {e}")
            raise ValueError(f"Failed to load {path}: {e}")

        logger.info(
            f"Loaded chart config from {path.name}: widget={config.widget}, "
            f"timeframe={config.timeframe.value}, refresh={config.auto_refresh_interval}s"
        )
        return config
