"""Bounded-concurrency pacing for provider requests."""

import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator


class RequestPacer:
    """
    Limits simultaneous provider requests and spaces them out.

    Each request holds one of `capacity` slots for its own duration plus a
    fixed pause, so with capacity 1 requests run strictly one after another
    with at least `pause_ms` between them.
    """

    def __init__(self, capacity: int = 1, pause_ms: float = 50,
                 sleep: Callable[[float], Any] = time.sleep):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self.capacity = capacity
        self.pause_ms = pause_ms
        self._sleep = sleep
        self._slots = threading.BoundedSemaphore(capacity)
        self._lock = threading.Lock()
        self._request_count = 0

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold a request slot; the pause runs before the slot is released."""
        self._slots.acquire()
        try:
            with self._lock:
                self._request_count += 1
            yield
        finally:
            try:
                if self.pause_ms > 0:
                    self._sleep(self.pause_ms / 1000.0)
            finally:
                self._slots.release()

    def run(self, fn: Callable[[], Any]) -> Any:
        """Run fn inside a request slot."""
        with self.slot():
            return fn()

    @property
    def request_count(self) -> int:
        """Number of requests started through this pacer."""
        return self._request_count
