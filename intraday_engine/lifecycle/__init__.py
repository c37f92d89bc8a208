"""
Lifecycle Module

Load-state machine, refresh orchestration and the auto-refresh timer.
"""

from .state import LifecycleEvent, LoadState, LoadStatus, TRANSITIONS, next_state
from .timer import PeriodicTimer
from .refresher import FETCH_FAILED_MESSAGE, NO_DATA_MESSAGE, RefreshLifecycle

__all__ = [
    "LifecycleEvent",
    "LoadState",
    "LoadStatus",
    "TRANSITIONS",
    "next_state",
    "PeriodicTimer",
    "RefreshLifecycle",
    "FETCH_FAILED_MESSAGE",
    "NO_DATA_MESSAGE",
]
