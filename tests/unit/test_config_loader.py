# tests/unit/test_config_loader.py
import pytest

from intraday_dataflow.candle_aggregation import Timeframe
from intraday_engine.config import ChartConfig, ConfigLoader


def test_defaults():
    config = ChartConfig()

    assert config.timeframe is Timeframe.M5
    assert config.auto_refresh_interval == 1800
    assert config.identifier_argument == "securityIdOrSymbol"
    assert config.tzinfo.key == "UTC"


def test_load_yaml(tmp_path):
    (tmp_path / "intraday.yaml").write_text(
        "widget: teva-chart\n"
        "timeframe: 1m\n"
        "timezone: Asia/Jerusalem\n"
        "auto_refresh_interval: 600\n"
    )

    config = ConfigLoader(tmp_path).load()

    assert config.widget == "teva-chart"
    assert config.timeframe is Timeframe.M1
    assert config.tzinfo.key == "Asia/Jerusalem"
    assert config.auto_refresh_interval == 600


def test_empty_yaml_gives_defaults(tmp_path):
    (tmp_path / "empty.yaml").write_text("")

    assert ConfigLoader(tmp_path).load("empty.yaml") == ChartConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ValueError, match="No chart config found"):
        ConfigLoader(tmp_path).load()


@pytest.mark.parametrize("body", [
    "timeframe: 2h\n",
    "timezone: Mars/Olympus\n",
    "auto_refresh_interval: 0\n",
    "timeframe: [unclosed\n",
])
def test_invalid_yaml(tmp_path, body):
    (tmp_path / "intraday.yaml").write_text(body)

    with pytest.raises(ValueError):
        ConfigLoader(tmp_path).load()


def test_from_env(monkeypatch):
    monkeypatch.setenv("INTRADAY_TIMEFRAME", "30m")
    monkeypatch.setenv("INTRADAY_AUTO_REFRESH_INTERVAL", "120")
    monkeypatch.setenv("INTRADAY_WIDGET", "nice-chart")

    config = ChartConfig.from_env()

    assert config.timeframe is Timeframe.M30
    assert config.auto_refresh_interval == 120
    assert config.widget == "nice-chart"
    assert config.timezone == "UTC"


def test_from_env_invalid(monkeypatch):
    monkeypatch.setenv("INTRADAY_REQUEST_TIMEOUT", "-1")

    with pytest.raises(ValueError):
        ChartConfig.from_env()
