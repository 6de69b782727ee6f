"""Timer heap keyed by connection id, used to expire idle connections."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List

TimeoutCallback = Callable[[], None]


def _now() -> float:
    return time.monotonic()


@dataclass(order=True)
class TimerNode:
    """One scheduled callback; nodes order by expiry time."""

    expires: float
    id: int = field(compare=False)
    callback: TimeoutCallback = field(compare=False)


class HeapTimer:
    """Min-heap of timers with O(log n) adjustment by id.

    Timeouts are given in milliseconds.
    """

    def __init__(self) -> None:
        self._heap: List[TimerNode] = []
        self._index: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, id: object) -> bool:
        return id in self._index

    def add(self, id: int, timeout: int, callback: TimeoutCallback) -> None:
        """Schedule ``callback`` after ``timeout`` ms, replacing any timer for ``id``."""
        if id < 0:
            raise ValueError("timer id must not be negative")
        expires = _now() + timeout / 1000
        if id in self._index:
            position = self._index[id]
            node = self._heap[position]
            node.expires = expires
            node.callback = callback
            self._fix(position)
        else:
            self._heap.append(TimerNode(expires=expires, id=id, callback=callback))
            position = len(self._heap) - 1
            self._index[id] = position
            self._sift_up(position)

    def adjust(self, id: int, timeout: int) -> None:
        """Move the timer for ``id`` to expire ``timeout`` ms from now."""
        if id not in self._index:
            raise KeyError(id)
        position = self._index[id]
        self._heap[position].expires = _now() + timeout / 1000
        self._fix(position)

    def do_work(self, id: int) -> None:
        """Remove the timer for ``id`` and run its callback; no-op if absent."""
        position = self._index.get(id)
        if position is None:
            return
        node = self._heap[position]
        self._remove(position)
        node.callback()

    def clear(self) -> None:
        self._index.clear()
        self._heap.clear()

    def tick(self) -> None:
        """Run and remove every timer that has expired."""
        while self._heap:
            node = self._heap[0]
            if _millis(node.expires - _now()) > 0:
                break
            self._remove(0)
            node.callback()

    def pop(self) -> None:
        """Remove the earliest timer without running it."""
        if not self._heap:
            raise IndexError("pop from an empty timer")
        self._remove(0)

    def get_next_tick(self) -> int:
        """Run expired timers; return ms until the next one, or -1 if none."""
        self.tick()
        if not self._heap:
            return -1
        return max(0, _millis(self._heap[0].expires - _now()))

    def _remove(self, position: int) -> None:
        last = len(self._heap) - 1
        if position < last:
            self._swap(position, last)
        node = self._heap.pop()
        del self._index[node.id]
        if position < len(self._heap):
            self._fix(position)

    def _fix(self, position: int) -> None:
        if not self._sift_down(position, len(self._heap)):
            self._sift_up(position)

    def _sift_up(self, position: int) -> None:
        while position > 0:
            parent = (position - 1) // 2
            if self._heap[parent] < self._heap[position]:
                break
            self._swap(position, parent)
            position = parent

    def _sift_down(self, start: int, size: int) -> bool:
        position = start
        child = position * 2 + 1
        while child < size:
            if child + 1 < size and self._heap[child + 1] < self._heap[child]:
                child += 1
            if self._heap[position] < self._heap[child]:
                break
            self._swap(position, child)
            position = child
            child = position * 2 + 1
        return start < position

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._index[heap[i].id] = i
        self._index[heap[j].id] = j


def _millis(seconds: float) -> int:
    return int(seconds * 1000)