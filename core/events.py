"""Timer event names, listener registry and the shared clock helpers."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Literal, get_args

import ulid
from pydantic import BaseModel, Field


TimerEvent = Literal["start", "stop", "pause", "resume", "lap", "reset"]
TIMER_EVENTS = get_args(TimerEvent)

Callback = Callable[[], None]


def now_ts_ms() -> int:
    """Return the current timestamp in milliseconds."""

    return int(time.time() * 1000)


def new_event_id() -> str:
    """Generate a ULID based identifier for events and timers."""

    return str(ulid.new())


class TimerNotice(BaseModel):
    """A timer event as pushed to remote observers (websocket clients)."""

    id: str = Field(default_factory=new_event_id)
    ts_ms: int = Field(default_factory=now_ts_ms)
    kind: Literal["start", "stop", "pause", "resume", "lap", "reset", "snapshot"]
    timer: str
    data: Dict[str, Any] = Field(default_factory=dict)


class ListenerMap:
    """Ordered callbacks keyed by event name.

    The same callback may be registered more than once; ``off`` removes the
    first registration only.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Callback]] = {}

    def on(self, event: str, cb: Callback) -> None:
        if event not in TIMER_EVENTS:
            raise ValueError(f"unknown timer event {event!r}, expected one of {TIMER_EVENTS}")
        self._listeners.setdefault(event, []).append(cb)

    def off(self, event: str, cb: Callback) -> None:
        cbs = self._listeners.get(event)
        if not cbs:
            return
        for i, registered in enumerate(cbs):
            if registered is cb:
                del cbs[i]
                return

    def emit(self, event: str) -> None:
        # copy so callbacks may unregister themselves while we iterate
        for cb in list(self._listeners.get(event, ())):
            cb()

    def count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))


__all__ = [
    "Callback",
    "ListenerMap",
    "TIMER_EVENTS",
    "TimerEvent",
    "TimerNotice",
    "new_event_id",
    "now_ts_ms",
]
