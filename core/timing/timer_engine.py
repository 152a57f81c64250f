"""Stopwatch state machine.

``TimerEngine`` owns one :class:`~core.state.TimerState`. Operations whose
precondition does not hold are silent no-ops, so callers (buttons, CLI
commands, HTTP routes) never need to inspect the state first::

    stopped --start--> ongoing --pause--> paused --resume--> ongoing
       ^                  |                  |
       +------stop--------+-------stop-------+

``reset`` returns to ``stopped`` from anywhere. While a section is open an
:class:`~core.timing.ticker.IntervalTicker` recomputes the live duration and
republishes the snapshot.

Every successful operation publishes a fresh snapshot to store subscribers,
persists the state when persistence is configured, then calls the listeners
registered for that operation. Snapshots are deep copies and never alias the
engine's own sections or laps.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Union

from core.events import Callback, ListenerMap, now_ts_ms
from core.persistence import Storage, TimerPersistence
from core.state import Lap, TimerState, TimerStatus, copy_state, create_initial_state, create_section
from core.store import Writable
from core.timing.ticker import IntervalTicker
from sdk.config import TimerOptions

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
TickerFactory = Callable[[int, Callable[[], None]], Any]


class TimerEngine:
    def __init__(
        self,
        options: Optional[TimerOptions] = None,
        *,
        clock: Clock = now_ts_ms,
        storage: Optional[Storage] = None,
        ticker_factory: TickerFactory = IntervalTicker,
        **overrides: Any,
    ) -> None:
        if options is None:
            options = TimerOptions(**overrides)
        elif overrides:
            options = TimerOptions.model_validate({**options.model_dump(), **overrides})
        self.options = options

        self._clock = clock
        self._lock = threading.RLock()
        self._listeners = ListenerMap()
        self._ticker = ticker_factory(options.update_interval, self._on_tick)

        self._persistence: Optional[TimerPersistence] = None
        loaded: Optional[TimerState] = None
        if options.persist is not None:
            self._persistence = TimerPersistence(options.persist, storage)
            loaded = self._persistence.load()

        if loaded is not None:
            logger.info("restored timer %s (%s, %d sections)", self.id, loaded.status, len(loaded.sections))
            self._state = loaded
            self._state.recompute(self._now(), options.show_ms)
        else:
            self._state = create_initial_state(self._now(), options.show_ms)
        self._store: Writable[TimerState] = Writable(copy_state(self._state))

        if self._state.open_section is not None:
            self._start_tick()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def id(self) -> Optional[str]:
        return self.options.persist.id if self.options.persist else None

    @property
    def status(self) -> TimerStatus:
        return self._state.status

    @property
    def is_running(self) -> bool:
        return self._state.open_section is not None

    @property
    def tick_active(self) -> bool:
        return bool(self._ticker.running)

    def snapshot(self) -> TimerState:
        """Return a deep copy of the current state."""

        with self._lock:
            return copy_state(self._state)

    @property
    def state(self) -> TimerState:
        return self.snapshot()

    def subscribe(self, cb: Callable[[TimerState], None]) -> Callable[[], None]:
        """Receive the current snapshot now and every published one after."""

        return self._store.subscribe(cb)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start(self, label: Optional[str] = None) -> bool:
        """Discard any previous run and open a first section."""

        with self._lock:
            applied = self._start(label)
        return self._emit_if("start", applied)

    def stop(self) -> bool:
        """Close the open section, if any, and record the end time."""

        with self._lock:
            self._cancel_tick()
            now = self._now()
            section = self._state.open_section
            if section is not None:
                section.close(now)
            self._state.status = "stopped"
            self._state.end_time = now
            self._commit(now)
        self._listeners.emit("stop")
        return True

    def pause(self) -> bool:
        with self._lock:
            applied = self._pause()
        return self._emit_if("pause", applied)

    def resume(self, label: Optional[str] = None) -> bool:
        with self._lock:
            applied = self._resume(label)
        return self._emit_if("resume", applied)

    def reset(self) -> bool:
        """Replace the state with a fresh, stopped one."""

        with self._lock:
            self._cancel_tick()
            now = self._now()
            self._state = create_initial_state(now, self.options.show_ms)
            self._commit(now)
        self._listeners.emit("reset")
        return True

    def lap(self) -> bool:
        with self._lock:
            section = self._state.open_section
            if self._state.status != "ongoing" or section is None:
                return self._ignored("lap")
            now = self._now()
            last = self._state.last_lap
            self._state.laps.append(
                Lap(
                    timestamp=now,
                    duration_since_start=now - self._state.start_time,
                    duration_since_last_lap=now - (last.timestamp if last else section.from_),
                )
            )
            self._commit(now)
        self._listeners.emit("lap")
        return True

    def toggle(self, label: Optional[str] = None) -> bool:
        """Start when stopped, pause when ongoing, resume when paused."""

        with self._lock:
            status = self._state.status
            if status == "stopped":
                event, applied = "start", self._start(label)
            elif status == "ongoing":
                event, applied = "pause", self._pause()
            else:
                event, applied = "resume", self._resume(label)
        return self._emit_if(event, applied)

    def tick(self) -> bool:
        """Recompute the live duration now; ``False`` when nothing is open."""

        with self._lock:
            if self._state.open_section is None:
                return False
            self._publish(self._now())
        return True

    # ------------------------------------------------------------------
    # External state transfer
    # ------------------------------------------------------------------

    def load(self, data: Union[TimerState, Dict[str, Any]]) -> None:
        """Replace the state wholesale, e.g. with the result of :meth:`save`.

        Data breaking the section rules raises ``ValidationError`` and leaves
        the current state untouched.
        """

        if isinstance(data, TimerState):
            data = data.model_dump()
        state = TimerState.model_validate(data)
        with self._lock:
            self._cancel_tick()
            self._state = state
            if state.open_section is not None:
                self._start_tick()
            self._commit(self._now())

    def save(self) -> TimerState:
        return self.snapshot()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on(self, event: str, cb: Callback) -> None:
        self._listeners.on(event, cb)

    def off(self, event: str, cb: Callback) -> None:
        self._listeners.off(event, cb)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._cancel_tick()

    def __enter__(self) -> "TimerEngine":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    # transitions below run with self._lock held and emit nothing

    def _start(self, label: Optional[str]) -> bool:
        if self._state.status != "stopped" or self._state.open_section is not None:
            return self._ignored("start")
        now = self._now()
        state = create_initial_state(now, self.options.show_ms)
        state.sections.append(create_section(state.start_time, label))
        state.status = "ongoing"
        self._state = state
        self._start_tick()
        self._commit(now)
        return True

    def _pause(self) -> bool:
        section = self._state.open_section
        if self._state.status != "ongoing" or section is None:
            return self._ignored("pause")
        self._cancel_tick()
        now = self._now()
        section.close(now)
        self._state.status = "paused"
        self._commit(now)
        return True

    def _resume(self, label: Optional[str]) -> bool:
        if self._state.status != "paused" or self._state.open_section is not None:
            return self._ignored("resume")
        now = self._now()
        self._state.sections.append(create_section(now, label))
        self._state.status = "ongoing"
        self._start_tick()
        self._commit(now)
        return True

    def _emit_if(self, event: str, applied: bool) -> bool:
        if applied:
            self._listeners.emit(event)
        return applied

    def _now(self) -> int:
        return int(self._clock())

    def _ignored(self, op: str) -> bool:
        logger.debug("%s ignored while %s", op, self._state.status)
        return False

    def _start_tick(self) -> None:
        self._ticker.start()

    def _cancel_tick(self) -> None:
        self._ticker.cancel()

    def _on_tick(self) -> None:
        with self._lock:
            if self._state.open_section is None:
                self._cancel_tick()
                return
            self._publish(self._now())

    def _publish(self, now: int) -> None:
        self._state.recompute(now, self.options.show_ms)
        self._store.set(copy_state(self._state))

    def _commit(self, now: int) -> None:
        # in-memory first: a failing storage write leaves a consistent live state
        self._publish(now)
        if self._persistence is not None:
            self._persistence.save(self._state)


__all__ = ["Clock", "TickerFactory", "TimerEngine"]
