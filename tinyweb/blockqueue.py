"""A bounded, thread-safe double-ended queue for producer/consumer hand-off."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

T = TypeVar("T")


class QueueClosed(Exception):
    """Raised by :meth:`BlockDeque.pop` once the deque has been closed."""


class BlockDeque(Generic[T]):
    """A bounded deque whose producers block while it is full and whose
    consumers block while it is empty."""

    def __init__(self, max_capacity: int = 1000) -> None:
        if max_capacity <= 0:
            raise ValueError("max_capacity must be positive")
        self._deq: Deque[T] = deque()
        self._capacity = max_capacity
        self._closed = False
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    def clear(self) -> None:
        """Drop every queued item."""
        with self._lock:
            self._deq.clear()
            self._not_full.notify_all()

    def empty(self) -> bool:
        with self._lock:
            return not self._deq

    def full(self) -> bool:
        with self._lock:
            return len(self._deq) >= self._capacity

    def close(self) -> None:
        """Drop queued items and wake every waiting producer and consumer."""
        with self._lock:
            self._deq.clear()
            self._closed = True
            self._not_full.notify_all()
            self._not_empty.notify_all()

    def __len__(self) -> int:
        with self._lock:
            return len(self._deq)

    def capacity(self) -> int:
        return self._capacity

    def front(self) -> T:
        """Return the first item without removing it; IndexError if empty."""
        with self._lock:
            if not self._deq:
                raise IndexError("front of an empty deque")
            return self._deq[0]

    def back(self) -> T:
        """Return the last item without removing it; IndexError if empty."""
        with self._lock:
            if not self._deq:
                raise IndexError("back of an empty deque")
            return self._deq[-1]

    def push_back(self, item: T) -> None:
        """Append an item, blocking while the deque is full."""
        with self._lock:
            while len(self._deq) >= self._capacity:
                self._not_full.wait()
            self._deq.append(item)
            self._not_empty.notify()

    def push_front(self, item: T) -> None:
        """Prepend an item, blocking while the deque is full."""
        with self._lock:
            while len(self._deq) >= self._capacity:
                self._not_full.wait()
            self._deq.appendleft(item)
            self._not_empty.notify()

    def pop(self, timeout: Optional[float] = None) -> T:
        """Remove and return the first item.

        Blocks while the deque is empty. Raises QueueClosed if the deque is
        closed while empty, and TimeoutError if ``timeout`` seconds pass
        without an item arriving.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            while not self._deq:
                if self._closed:
                    raise QueueClosed("deque is closed")
                if deadline is None:
                    self._not_empty.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise TimeoutError("no item arrived in time")
                    self._not_empty.wait(remaining)
            item = self._deq.popleft()
            self._not_full.notify()
            return item

    def flush(self) -> None:
        """Wake one waiting consumer."""
        with self._lock:
            self._not_empty.notify()