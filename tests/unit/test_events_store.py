import pytest

from core.events import TIMER_EVENTS, ListenerMap, TimerNotice, new_event_id, now_ts_ms
from core.store import Writable


def test_timer_event_names():
    assert set(TIMER_EVENTS) == {"start", "stop", "pause", "resume", "lap", "reset"}


def test_listener_map_removes_first_identical_callback():
    calls = []
    lm = ListenerMap()
    a = lambda: calls.append("a")  # noqa: E731
    b = lambda: calls.append("b")  # noqa: E731
    lm.on("stop", a)
    lm.on("stop", b)
    lm.on("stop", a)
    lm.off("stop", a)
    assert lm.count("stop") == 2
    lm.emit("stop")
    assert calls == ["b", "a"]


def test_listener_may_unregister_itself_during_emit():
    lm = ListenerMap()
    calls = []

    def once():
        calls.append(1)
        lm.off("reset", once)

    lm.on("reset", once)
    lm.emit("reset")
    lm.emit("reset")
    assert calls == [1]


def test_listener_map_rejects_unknown_event():
    with pytest.raises(ValueError):
        ListenerMap().on("tick", lambda: None)


def test_clock_and_ids():
    assert abs(now_ts_ms() - now_ts_ms()) < 1000
    a, b = new_event_id(), new_event_id()
    assert a != b and len(a) == 26


def test_notice_defaults():
    n = TimerNotice(kind="lap", timer="t")
    assert n.data == {}
    assert len(n.id) == 26


def test_writable_subscribe_set_unsubscribe():
    store = Writable(1)
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.set(2)
    store.update(lambda v: v + 10)
    unsubscribe()
    unsubscribe()
    store.set(99)
    assert seen == [1, 2, 12]
    assert store.get() == 99
    assert store.subscriber_count == 0
