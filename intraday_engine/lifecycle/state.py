"""
Load State Machine

Enumerated load states, lifecycle events and the transition table that
connects them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class LoadStatus(Enum):
    """Where the widget is in its data lifecycle"""
    WAITING_FOR_DATA = "waiting_for_data"
    LOADED = "loaded"
    REFRESHING = "refreshing"
    ERROR = "error"


class LifecycleEvent(Enum):
    """Things that move the load state"""
    DATA_DELIVERED = "data_delivered"  # host result or fallback fetch parsed
    FALLBACK_FAILED = "fallback_failed"
    REFRESH_STARTED = "refresh_started"  # manual refresh only
    REFRESH_SUCCEEDED = "refresh_succeeded"
    REFRESH_FAILED = "refresh_failed"


@dataclass(frozen=True)
class LoadState:
    """Current status plus the error message when status is ERROR"""
    status: LoadStatus
    message: Optional[str] = None

    @classmethod
    def waiting(cls) -> "LoadState":
        return cls(LoadStatus.WAITING_FOR_DATA)

    def to_dict(self) -> dict:
        return {"status": self.status.value, "message": self.message}


W = LoadStatus.WAITING_FOR_DATA
L = LoadStatus.LOADED
R = LoadStatus.REFRESHING
E = LoadStatus.ERROR

# (current status, event) -> next status. Pairs not listed are invalid.
# Periodic refreshes never enter REFRESHING, so REFRESH_SUCCEEDED and
# REFRESH_FAILED are also valid from LOADED and ERROR.
TRANSITIONS: Dict[Tuple[LoadStatus, LifecycleEvent], LoadStatus] = {
    (W, LifecycleEvent.DATA_DELIVERED): L,
    (L, LifecycleEvent.DATA_DELIVERED): L,
    (E, LifecycleEvent.DATA_DELIVERED): L,
    (R, LifecycleEvent.DATA_DELIVERED): R,
    (W, LifecycleEvent.FALLBACK_FAILED): W,
    (L, LifecycleEvent.FALLBACK_FAILED): L,
    (E, LifecycleEvent.FALLBACK_FAILED): E,
    (W, LifecycleEvent.REFRESH_STARTED): R,
    (L, LifecycleEvent.REFRESH_STARTED): R,
    (E, LifecycleEvent.REFRESH_STARTED): R,
    (R, LifecycleEvent.REFRESH_SUCCEEDED): L,
    (L, LifecycleEvent.REFRESH_SUCCEEDED): L,
    (E, LifecycleEvent.REFRESH_SUCCEEDED): L,
    (R, LifecycleEvent.REFRESH_FAILED): E,
    (L, LifecycleEvent.REFRESH_FAILED): E,
    (E, LifecycleEvent.REFRESH_FAILED): E,
}


def next_state(
    current: LoadState, event: LifecycleEvent, message: Optional[str] = None
) -> LoadState:
    """
    Apply an event to a load state.

    Args:
        current: Current load state
        event: Lifecycle event
        message: Error message, kept only when the result is ERROR

    Returns:
        The new LoadState

    Raises:
        RuntimeError: If the transition is not defined
    """
    status = TRANSITIONS.get((current.status, event))
    if status is None:
        raise RuntimeError(
            f"Invalid transition: {event.value} while {current.status.value}"
        )

    if status is LoadStatus.ERROR:
        return LoadState(status, message or current.message)
    return LoadState(status)
