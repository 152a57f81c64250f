import pytest

from core.timing.timer_engine import TimerEngine
from plugins.storage.memory.impl import MemoryStorage


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class ManualTicker:
    """Stands in for IntervalTicker; ticks only when ``fire`` is called."""

    def __init__(self, interval_ms, callback):
        self.interval_ms = interval_ms
        self.callback = callback
        self.running = False
        self.starts = 0
        self.cancels = 0

    def start(self):
        if not self.running:
            self.starts += 1
        self.running = True

    def cancel(self):
        self.cancels += 1
        self.running = False

    def fire(self):
        if self.running:
            self.callback()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tickers():
    return []


@pytest.fixture
def ticker_factory(tickers):
    def factory(interval_ms, callback):
        t = ManualTicker(interval_ms, callback)
        tickers.append(t)
        return t
    return factory


@pytest.fixture
def make_engine(clock, ticker_factory):
    def make(options=None, **kwargs):
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("ticker_factory", ticker_factory)
        return TimerEngine(options, **kwargs)
    return make


@pytest.fixture
def timer(make_engine):
    engine = make_engine()
    yield engine
    engine.close()


@pytest.fixture
def blobs():
    return {}


@pytest.fixture
def memory_storage(blobs):
    return MemoryStorage(blobs)
