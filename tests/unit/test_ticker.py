import threading
import time

import pytest

from core.timing.ticker import IntervalTicker
from core.timing.timer_engine import TimerEngine


def test_ticker_calls_back_until_cancelled():
    hits = threading.Event()
    count = []

    def cb():
        count.append(1)
        if len(count) >= 3:
            hits.set()

    t = IntervalTicker(5, cb)
    t.start()
    assert hits.wait(2.0)
    t.cancel()
    assert not t.running
    settled = len(count)
    time.sleep(0.05)
    assert len(count) <= settled + 1


def test_start_and_cancel_are_idempotent():
    t = IntervalTicker(1000, lambda: None)
    t.cancel()
    t.start()
    first = t._thread
    t.start()
    assert t._thread is first
    t.cancel()
    t.cancel()
    assert not t.running


def test_callback_may_cancel_its_own_ticker():
    done = threading.Event()
    holder = {}

    def cb():
        holder["t"].cancel()
        done.set()

    holder["t"] = IntervalTicker(5, cb)
    holder["t"].start()
    assert done.wait(2.0)
    assert not holder["t"].running


def test_failing_callback_stops_the_loop(caplog):
    calls = []

    def cb():
        calls.append(1)
        raise RuntimeError("boom")

    t = IntervalTicker(5, cb)
    t.start()
    time.sleep(0.1)
    assert len(calls) == 1
    assert any("tick callback failed" in r.message for r in caplog.records)
    t.cancel()


@pytest.mark.parametrize("interval", [0, -5])
def test_interval_must_be_positive(interval):
    with pytest.raises(ValueError):
        IntervalTicker(interval, lambda: None)


def test_engine_with_real_ticker_advances_duration():
    with TimerEngine(update_interval=5) as engine:
        engine.start()
        deadline = time.monotonic() + 2.0
        while engine.snapshot().duration < 30 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert engine.snapshot().duration >= 30
        engine.pause()
        frozen = engine.snapshot().duration
        time.sleep(0.05)
        assert engine.snapshot().duration == frozen
        assert not engine.tick_active
