# tests/unit/test_timeframe_controller.py
import pytest

from intraday_dataflow.candle_aggregation import Timeframe
from intraday_dataflow.normalization import normalize_ticks
from intraday_engine.timeframe import TimeframeController

from tests.helpers import ts


@pytest.fixture
def controller(scenario_items):
    controller = TimeframeController()
    controller.load_ticks(normalize_ticks(scenario_items))
    return controller


def test_defaults_to_five_minutes():
    controller = TimeframeController()
    assert controller.timeframe is Timeframe.M5
    assert controller.candles == ()
    assert controller.active_summary is None


def test_load_builds_candles_and_legend(controller):
    assert len(controller.candles) == 2
    assert len(controller.legend) == 2
    assert controller.active_summary.close == 99.0


def test_select_exact_bucket(controller):
    summary = controller.select(ts("09:30:00"))

    assert summary.open == 100.0
    assert controller.selected_time == ts("09:30:00")
    assert controller.active_summary == summary


def test_select_without_match_falls_back_to_last(controller):
    controller.select(ts("09:30:00"))

    summary = controller.select(ts("09:32:17"))

    assert summary.close == 99.0
    assert controller.selected_time is None


def test_switch_timeframe_rebuilds_and_clears_selection(controller):
    ticks_before = controller.ticks
    controller.select(ts("09:30:00"))

    changed = controller.set_timeframe("1m")

    assert changed
    assert controller.ticks is ticks_before
    assert [c.bucket_start for c in controller.candles] == [ts("09:30:00"), ts("09:31:00"), ts("09:35:00")]
    assert controller.selected_time is None
    assert controller.active_summary.close == 99.0
    assert controller.legend.lookup(ts("09:31:00")).close == 101.0


def test_switch_back_recomputes_same_series(controller):
    original = controller.candles

    controller.set_timeframe("1m")
    controller.set_timeframe("5m")

    assert controller.candles == original


def test_same_timeframe_is_noop(controller):
    controller.select(ts("09:30:00"))
    assert controller.set_timeframe(Timeframe.M5) is False
    assert controller.selected_time == ts("09:30:00")


def test_invalid_timeframe_keeps_state(controller):
    with pytest.raises(ValueError):
        controller.set_timeframe("2h")
    assert controller.timeframe is Timeframe.M5
    assert len(controller.candles) == 2


def test_load_replaces_ticks_and_clears_selection(controller):
    controller.select(ts("09:30:00"))

    controller.load_ticks([])

    assert controller.candles == ()
    assert len(controller.legend) == 0
    assert controller.selected_time is None
    assert controller.select(ts("09:30:00")) is None
