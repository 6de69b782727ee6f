"""A fixed-size pool of worker threads draining a shared task queue."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, List

_log = logging.getLogger(__name__)

Task = Callable[[], object]


class ThreadPool:
    """Runs submitted callables on a fixed number of daemon threads."""

    def __init__(self, thread_count: int = 8) -> None:
        if thread_count <= 0:
            raise ValueError("thread_count must be positive")
        self._tasks: Deque[Task] = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._workers: List[threading.Thread] = [
            threading.Thread(target=self._work, name=f"tinyweb-worker-{n}", daemon=True)
            for n in range(thread_count)
        ]
        for worker in self._workers:
            worker.start()

    def add_task(self, task: Task) -> None:
        """Queue ``task`` to run on a worker thread."""
        with self._cond:
            if self._closed:
                raise RuntimeError("thread pool is closed")
            self._tasks.append(task)
            self._cond.notify()

    def close(self) -> None:
        """Stop accepting tasks, let queued ones finish and join the workers."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _work(self) -> None:
        while True:
            with self._cond:
                while not self._tasks and not self._closed:
                    self._cond.wait()
                if not self._tasks:
                    return
                task = self._tasks.popleft()
            try:
                task()
            except Exception:
                _log.exception("task raised an exception")