"""Millisecond counts to ``{h, m, s, ms}`` breakdowns and display strings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


class Duration(BaseModel):
    """Elapsed time split into its display components.

    Hours are unbounded; minutes and seconds stay below 60 and milliseconds
    below 1000.
    """

    model_config = ConfigDict(frozen=True)

    h: int = Field(0, ge=0)
    m: int = Field(0, ge=0, lt=60)
    s: int = Field(0, ge=0, lt=60)
    ms: int = Field(0, ge=0, lt=1000)


def to_parts(ms: int) -> Duration:
    """Split ``ms`` into hours, minutes, seconds and milliseconds."""

    ms = int(ms)
    if ms < 0:
        raise ValueError(f"duration cannot be negative: {ms}")
    return Duration(
        h=ms // MS_PER_HOUR,
        m=ms // MS_PER_MINUTE % 60,
        s=ms // MS_PER_SECOND % 60,
        ms=ms % MS_PER_SECOND,
    )


def to_string(d: Duration, show_ms: bool = False) -> str:
    """Render ``d`` as ``MM:SS`` (or ``HMM:SS``), optionally with ``.mmm``.

    The hour number is prefixed as-is when non-zero, without a separator or
    padding, so one hour renders as ``"100:00"``.
    """

    out = str(d.h) if d.h > 0 else ""
    out += f"{d.m:02d}:{d.s:02d}"
    if show_ms:
        out += f".{d.ms:03d}"
    return out


def format_ms(ms: int, show_ms: bool = False) -> str:
    return to_string(to_parts(ms), show_ms)


ZERO = Duration()

__all__ = ["Duration", "ZERO", "format_ms", "to_parts", "to_string"]
