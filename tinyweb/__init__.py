"""Building blocks for a small static HTTP server: buffer, blocking deque, timer heap, thread pool, logger, epoll wrapper, request parser and response builder."""

__version__ = "1.0.1"