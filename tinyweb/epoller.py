"""A small wrapper around the epoll readiness interface."""

from __future__ import annotations

import select
from typing import List, Tuple, Union

FileLike = Union[int, "object"]


def _fileno(fd: FileLike) -> int:
    number = fd if isinstance(fd, int) else fd.fileno()  # type: ignore[attr-defined]
    if number < 0:
        raise ValueError("file descriptor must not be negative")
    return number


class Epoller:
    """Registers descriptors for epoll events and waits for them."""

    def __init__(self, max_events: int = 1024) -> None:
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        self._max_events = max_events
        self._epoll = select.epoll()

    def add_fd(self, fd: FileLike, events: int) -> None:
        """Register ``fd`` for ``events``; OSError if it is already registered."""
        self._epoll.register(_fileno(fd), events)

    def mod_fd(self, fd: FileLike, events: int) -> None:
        """Change the events ``fd`` is registered for."""
        self._epoll.modify(_fileno(fd), events)

    def del_fd(self, fd: FileLike) -> None:
        """Stop watching ``fd``."""
        self._epoll.unregister(_fileno(fd))

    def wait(self, timeout_ms: int = -1) -> List[Tuple[int, int]]:
        """Wait for events; a negative timeout blocks indefinitely.

        Returns a list of ``(fd, events)`` pairs, at most ``max_events`` long.
        """
        timeout = -1 if timeout_ms < 0 else timeout_ms / 1000
        return self._epoll.poll(timeout, self._max_events)

    def close(self) -> None:
        self._epoll.close()