from __future__ import annotations

import threading
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]


class Writable(Generic[T]):
    """Observable value container.

    ``subscribe`` delivers the current value immediately and every value
    passed to ``set`` afterwards, in subscription order. The returned callable
    removes the subscription.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        with self._lock:
            subscribers = list(self._subscribers)
        for cb in subscribers:
            cb(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, cb: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(cb)
        cb(self._value)

        def unsubscribe() -> None:
            with self._lock:
                if cb in self._subscribers:
                    self._subscribers.remove(cb)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
