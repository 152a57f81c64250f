"""Timer state models.

``TimerState`` is the aggregate the engine owns. It serializes to the
camelCase JSON blob written by the persistence adapter; python code uses the
snake_case field names and both forms are accepted on input.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from core.duration import ZERO, Duration, format_ms, to_parts

TimerStatus = Literal["stopped", "ongoing", "paused"]
SectionStatus = Literal["ongoing", "stopped"]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Section(_Model):
    """One contiguous interval during which the timer was running."""

    from_: int = Field(alias="from")
    to: Optional[int] = None
    label: Optional[str] = None
    duration: int = 0
    duration_parts: Duration = ZERO
    status: SectionStatus = "ongoing"

    @model_validator(mode="after")
    def _ends_after_start(self) -> "Section":
        if self.to is not None and self.to < self.from_:
            raise ValueError(f"section ends at {self.to} before it starts at {self.from_}")
        return self

    @property
    def is_open(self) -> bool:
        return self.to is None

    def close(self, now: int) -> None:
        """Freeze the section at ``now``. Only valid on an open section."""

        if self.to is not None:
            raise RuntimeError("section already closed")
        # clocks can step backwards; a section never ends before it starts
        self.to = max(now, self.from_)
        self.duration = self.to - self.from_
        self.duration_parts = to_parts(self.duration)
        self.status = "stopped"

    def refresh(self, now: int) -> None:
        self.duration = max(0, now - self.from_)
        self.duration_parts = to_parts(self.duration)


class Lap(_Model):
    model_config = ConfigDict(frozen=True)

    timestamp: int
    duration_since_start: int
    duration_since_last_lap: int


class TimerState(_Model):
    status: TimerStatus = "stopped"
    start_time: int
    end_time: Optional[int] = None
    duration: int = 0
    duration_parts: Duration = ZERO
    duration_string: str = "00:00"
    sections: List[Section] = Field(default_factory=list)
    laps: List[Lap] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_open_section_last(self) -> "TimerState":
        if any(section.is_open for section in self.sections[:-1]):
            raise ValueError("only the last section may be open")
        running = self.open_section is not None
        if running != (self.status == "ongoing"):
            raise ValueError(f"status {self.status!r} does not match the open section")
        return self

    @property
    def last_section(self) -> Optional[Section]:
        return self.sections[-1] if self.sections else None

    @property
    def open_section(self) -> Optional[Section]:
        section = self.last_section
        return section if section is not None and section.is_open else None

    @property
    def last_lap(self) -> Optional[Lap]:
        return self.laps[-1] if self.laps else None

    def total_duration(self, now: int) -> int:
        """Closed sections at their fixed length plus the open one up to ``now``."""

        total = 0
        for section in self.sections:
            if section.to is not None:
                total += section.to - section.from_
            else:
                total += max(0, now - section.from_)
        return total

    def recompute(self, now: int, show_ms: bool = False) -> None:
        """Refresh the open section and the total duration fields for ``now``."""

        section = self.open_section
        if section is not None:
            section.refresh(now)
        self.duration = self.total_duration(now)
        self.duration_parts = to_parts(self.duration)
        self.duration_string = format_ms(self.duration, show_ms)


def create_section(from_ts: int, label: Optional[str] = None) -> Section:
    return Section(from_=from_ts, label=label)


def create_initial_state(now: int, show_ms: bool = False) -> TimerState:
    return TimerState(start_time=now, duration_string=format_ms(0, show_ms))


def copy_state(state: TimerState) -> TimerState:
    """Deep copy; the result shares no lists or sections with ``state``."""

    return state.model_copy(deep=True)


def state_dump(state: TimerState) -> dict:
    """Return the JSON-ready camelCase representation of ``state``."""

    return state.model_dump(mode="json", by_alias=True)


__all__ = [
    "Lap",
    "Section",
    "SectionStatus",
    "TimerState",
    "TimerStatus",
    "copy_state",
    "create_initial_state",
    "create_section",
    "state_dump",
]
