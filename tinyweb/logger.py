"""Line-oriented log files with daily and size-based rotation.

Records can be written straight to the file or handed to a background
writer thread through a bounded queue.
"""

from __future__ import annotations

import atexit
import os
import threading
import time
from datetime import datetime
from enum import IntEnum
from typing import IO, Optional, Union

from tinyweb.blockqueue import BlockDeque, QueueClosed

MAX_LINES = 50000


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


_TITLES = {
    LogLevel.DEBUG: "[debug]: ",
    LogLevel.INFO: "[info] : ",
    LogLevel.WARN: "[warn] : ",
    LogLevel.ERROR: "[error]: ",
}


def _title(level: int) -> str:
    try:
        return _TITLES[LogLevel(level)]
    except ValueError:
        return _TITLES[LogLevel.INFO]


class Logger:
    """Writes timestamped lines to ``<path>/<YYYY_MM_DD><suffix>``.

    A new file is started when the day changes and after every
    ``max_lines`` lines within a day.
    """

    def __init__(self) -> None:
        self.max_lines = MAX_LINES
        self._line_count = 0
        self._today = 0
        self._open = False
        self._level = int(LogLevel.INFO)
        self._async = False
        self._path = "./log"
        self._suffix = ".log"
        self._fp: Optional[IO[str]] = None
        self._deque: Optional[BlockDeque[str]] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def init(
        self,
        level: int = LogLevel.INFO,
        path: Union[str, os.PathLike] = "./log",
        suffix: str = ".log",
        max_queue_capacity: int = 1024,
    ) -> None:
        """Open today's log file; a positive queue capacity enables async writing."""
        self._open = True
        self._level = int(level)
        if max_queue_capacity > 0:
            self._async = True
            if self._deque is None:
                self._deque = BlockDeque(max_queue_capacity)
                self._thread = threading.Thread(
                    target=self._async_write, name="tinyweb-logger", daemon=True
                )
                self._thread.start()
        else:
            self._async = False

        self._line_count = 0
        now = datetime.now()
        self._path = os.fspath(path)
        self._suffix = suffix
        self._today = now.day
        filename = os.path.join(self._path, f"{now:%Y_%m_%d}{suffix}")

        with self._lock:
            if self._fp is not None:
                self._fp.flush()
                self._fp.close()
            self._fp = self._open_file(filename)

    def write(self, level: int, message: str) -> None:
        """Write one record, rotating the file first if needed."""
        now = datetime.now()
        with self._lock:
            if self._fp is None:
                raise RuntimeError("logger is not initialised")
            if self._today != now.day or (
                self._line_count and self._line_count % self.max_lines == 0
            ):
                tail = f"{now:%Y_%m_%d}"
                if self._today != now.day:
                    name = f"{tail}{self._suffix}"
                    self._today = now.day
                    self._line_count = 0
                else:
                    part = self._line_count // self.max_lines
                    name = f"{tail}-{part}{self._suffix}"
                self._fp.flush()
                self._fp.close()
                self._fp = self._open_file(os.path.join(self._path, name))

            self._line_count += 1
            line = (
                f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond:06d} "
                f"{_title(level)}{message}\n"
            )
            queue = self._deque if self._async else None
            if queue is None or queue.full():
                self._fp.write(line)
                return
        queue.push_back(line)

    def flush(self) -> None:
        """Wake the writer thread and flush the file."""
        if self._async and self._deque is not None:
            self._deque.flush()
        with self._lock:
            if self._fp is not None:
                self._fp.flush()

    def close(self) -> None:
        """Drain pending records, stop the writer thread and close the file."""
        if self._thread is not None and self._deque is not None:
            while not self._deque.empty():
                self._deque.flush()
                time.sleep(0.001)
            self._deque.close()
            self._thread.join()
            self._thread = None
            self._deque = None
        with self._lock:
            if self._fp is not None:
                self._fp.flush()
                self._fp.close()
                self._fp = None
        self._open = False
        self._async = False

    def is_open(self) -> bool:
        return self._open

    def get_level(self) -> int:
        with self._lock:
            return self._level

    def set_level(self, level: int) -> None:
        with self._lock:
            self._level = int(level)

    def _open_file(self, filename: str) -> IO[str]:
        try:
            return open(filename, "a", encoding="utf-8")
        except FileNotFoundError:
            os.makedirs(self._path, exist_ok=True)
            return open(filename, "a", encoding="utf-8")

    def _async_write(self) -> None:
        deque = self._deque
        if deque is None:
            return
        while True:
            try:
                line = deque.pop()
            except QueueClosed:
                return
            with self._lock:
                if self._fp is not None:
                    self._fp.write(line)


_instance = Logger()
atexit.register(_instance.close)


def get_logger() -> Logger:
    """Return the process-wide logger."""
    return _instance


def _log(level: LogLevel, fmt: str, args: tuple) -> None:
    logger = get_logger()
    if logger.is_open() and logger.get_level() <= level:
        logger.write(level, fmt % args if args else fmt)
        logger.flush()


def log_debug(fmt: str, *args: object) -> None:
    _log(LogLevel.DEBUG, fmt, args)


def log_info(fmt: str, *args: object) -> None:
    _log(LogLevel.INFO, fmt, args)


def log_warn(fmt: str, *args: object) -> None:
    _log(LogLevel.WARN, fmt, args)


def log_error(fmt: str, *args: object) -> None:
    _log(LogLevel.ERROR, fmt, args)