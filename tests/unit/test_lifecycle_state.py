# tests/unit/test_lifecycle_state.py
import pytest

from intraday_engine.lifecycle import LifecycleEvent, LoadState, LoadStatus, next_state


def test_initial_state_is_waiting():
    state = LoadState.waiting()
    assert state.status is LoadStatus.WAITING_FOR_DATA
    assert state.message is None


def test_manual_refresh_path():
    state = next_state(LoadState.waiting(), LifecycleEvent.REFRESH_STARTED)
    assert state.status is LoadStatus.REFRESHING

    failed = next_state(state, LifecycleEvent.REFRESH_FAILED, "Failed to fetch data")
    assert failed == LoadState(LoadStatus.ERROR, "Failed to fetch data")

    retry = next_state(failed, LifecycleEvent.REFRESH_STARTED)
    loaded = next_state(retry, LifecycleEvent.REFRESH_SUCCEEDED)
    assert loaded == LoadState(LoadStatus.LOADED)


def test_fallback_failure_stays_waiting():
    state = next_state(LoadState.waiting(), LifecycleEvent.FALLBACK_FAILED)
    assert state.status is LoadStatus.WAITING_FOR_DATA
    assert state.message is None


def test_periodic_refresh_does_not_need_refreshing_state():
    loaded = LoadState(LoadStatus.LOADED)
    assert next_state(loaded, LifecycleEvent.REFRESH_SUCCEEDED).status is LoadStatus.LOADED
    assert next_state(loaded, LifecycleEvent.REFRESH_FAILED, "boom").message == "boom"


def test_data_delivery_clears_error():
    state = next_state(LoadState(LoadStatus.ERROR, "x"), LifecycleEvent.DATA_DELIVERED)
    assert state == LoadState(LoadStatus.LOADED)


def test_undefined_transition_raises():
    with pytest.raises(RuntimeError):
        next_state(LoadState(LoadStatus.REFRESHING), LifecycleEvent.REFRESH_STARTED)
    with pytest.raises(RuntimeError):
        next_state(LoadState.waiting(), LifecycleEvent.REFRESH_SUCCEEDED)


def test_state_to_dict():
    assert LoadState(LoadStatus.ERROR, "No data found").to_dict() == {
        "status": "error",
        "message": "No data found",
    }
