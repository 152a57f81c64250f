from __future__ import annotations

import json
import signal
import threading
from typing import Optional

import typer

from core.duration import format_ms
from core.state import TimerState, state_dump
from core.timing.timer_engine import TimerEngine
from sdk.config import SDK_CONFIG
from sdk.logs import configure_logging
from sdk.registry import UnknownStorageError


app = typer.Typer(add_completion=False, no_args_is_help=True, help="Persistent stopwatch with sections and laps.")

IdOpt = typer.Option("default", "--id", "-i", help="Timer id; state is kept under this key")
StorageOpt = typer.Option(None, "--storage", "-s", help="Storage medium: local, memory, session or s3")
ShowMsOpt = typer.Option(None, "--show-ms/--no-show-ms", help="Include milliseconds in durations")
LabelOpt = typer.Option(None, "--label", "-l", help="Name for the new section")


def _engine(timer_id: str, storage: Optional[str], show_ms: Optional[bool]) -> TimerEngine:
    configure_logging()
    options = SDK_CONFIG.timer_options(persist_id=timer_id, storage=storage, show_ms=show_ms)
    try:
        return TimerEngine(options)
    except UnknownStorageError as exc:
        typer.echo(f"[lapwatch] {exc.args[0]}", err=True)
        raise typer.Exit(code=2)


def _summary(state: TimerState) -> str:
    line = f"{state.duration_string}  [{state.status}]"
    if state.sections:
        line += f"  sections={len(state.sections)}"
    if state.laps:
        line += f"  laps={len(state.laps)}"
    return line


def _run(op: str, timer_id: str, storage: Optional[str], show_ms: Optional[bool], *args) -> None:
    with _engine(timer_id, storage, show_ms) as engine:
        applied = getattr(engine, op)(*args)
        state = engine.snapshot()
    if not applied:
        typer.echo(f"[lapwatch] {op} ignored: timer '{timer_id}' is {state.status}", err=True)
    typer.echo(_summary(state))


@app.command()
def start(timer_id: str = IdOpt, label: Optional[str] = LabelOpt,
          storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    """Start a new run (only when stopped)."""
    _run("start", timer_id, storage, show_ms, label)


@app.command()
def stop(timer_id: str = IdOpt, storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    """Stop the timer; it can only be started again from scratch."""
    _run("stop", timer_id, storage, show_ms)


@app.command()
def pause(timer_id: str = IdOpt, storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    _run("pause", timer_id, storage, show_ms)


@app.command()
def resume(timer_id: str = IdOpt, label: Optional[str] = LabelOpt,
           storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    _run("resume", timer_id, storage, show_ms, label)


@app.command()
def toggle(timer_id: str = IdOpt, label: Optional[str] = LabelOpt,
           storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    """Start, pause or resume depending on the current status."""
    _run("toggle", timer_id, storage, show_ms, label)


@app.command()
def lap(timer_id: str = IdOpt, storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    _run("lap", timer_id, storage, show_ms)


@app.command()
def reset(timer_id: str = IdOpt, storage: Optional[str] = StorageOpt, show_ms: Optional[bool] = ShowMsOpt) -> None:
    _run("reset", timer_id, storage, show_ms)


@app.command()
def show(
    timer_id: str = IdOpt,
    storage: Optional[str] = StorageOpt,
    show_ms: Optional[bool] = ShowMsOpt,
    as_json: bool = typer.Option(False, "--json", help="Print the full state as JSON"),
) -> None:
    """Print the current duration, sections and laps."""
    with _engine(timer_id, storage, show_ms) as engine:
        state = engine.snapshot()

    if as_json:
        typer.echo(json.dumps(state_dump(state), indent=2))
        return

    typer.echo(_summary(state))
    ms_on = engine.options.show_ms
    for i, section in enumerate(state.sections, start=1):
        name = section.label or f"section {i}"
        typer.echo(f"  {name:<20} {format_ms(section.duration, ms_on):>12}  {section.status}")
    for i, mark in enumerate(state.laps, start=1):
        typer.echo(f"  lap {i:<16} {format_ms(mark.duration_since_last_lap, ms_on):>12}  total {format_ms(mark.duration_since_start, ms_on)}")


@app.command()
def watch(
    timer_id: str = IdOpt,
    storage: Optional[str] = StorageOpt,
    show_ms: Optional[bool] = ShowMsOpt,
    refresh: float = typer.Option(0.1, help="Redraw period in seconds"),
) -> None:
    """Redraw the live duration until Ctrl+C."""

    engine = _engine(timer_id, storage, show_ms)

    # Graceful shutdown
    stop_event = threading.Event()

    def _stop(*_object: object) -> None:
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    typer.echo(f"[lapwatch] Watching timer '{timer_id}'. Press Ctrl+C to stop.")
    try:
        while not stop_event.is_set():
            typer.echo("\r" + _summary(engine.snapshot()).ljust(60), nl=False)
            stop_event.wait(refresh)
    finally:
        engine.close()
        typer.echo("")


if __name__ == "__main__":
    app()
