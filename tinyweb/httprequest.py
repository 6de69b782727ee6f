"""Incremental parsing of HTTP requests out of a :class:`Buffer`."""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict
from urllib.parse import unquote_plus

from tinyweb.buffer import Buffer
from tinyweb.logger import log_debug, log_error

_CRLF = b"\r\n"
_REQUEST_LINE = re.compile(r"([^ ]*) ([^ ]*) HTTP/([^ ]*)")
_HEADER_LINE = re.compile(r"([^:]*): ?([^\r\n]*)")

DEFAULT_HTML = frozenset(
    {"/index", "/register", "/login", "/welcome", "/video", "/picture"}
)
DEFAULT_HTML_TAG = {"/register.html": 0, "/login.html": 1}


class ParseState(Enum):
    REQUEST_LINE = 0
    HEADERS = 1
    BODY = 2
    FINISH = 3


class HttpRequest:
    """State of one HTTP request being parsed.

    ``method``, ``path``, ``version`` and ``body`` are plain strings;
    ``header`` and ``post`` map names to values.
    """

    def __init__(self) -> None:
        self.init()

    def init(self) -> None:
        """Forget everything parsed so far."""
        self.method = ""
        self.path = ""
        self.version = ""
        self.body = ""
        self.state = ParseState.REQUEST_LINE
        self.header: Dict[str, str] = {}
        self.post: Dict[str, str] = {}

    def parse(self, buff: Buffer) -> bool:
        """Consume request lines from ``buff``.

        Returns False if the buffer is empty or the request line is
        malformed, True otherwise.
        """
        if buff.readable_bytes() <= 0:
            return False
        while buff.readable_bytes() and self.state is not ParseState.FINISH:
            data = buff.peek()
            end = data.find(_CRLF)
            raw = data if end < 0 else data[:end]
            line = raw.decode("utf-8", errors="surrogateescape")

            if self.state is ParseState.REQUEST_LINE:
                if not self._parse_request_line(line):
                    return False
                self._parse_path()
            elif self.state is ParseState.HEADERS:
                self._parse_header(line)
                if buff.readable_bytes() <= 2:
                    self.state = ParseState.FINISH
            elif self.state is ParseState.BODY:
                self._parse_body(line)

            if end < 0:
                break
            buff.has_read(end + 2)
        log_debug("[%s], [%s], [%s]", self.method, self.path, self.version)
        return True

    def get_post(self, key: str) -> str:
        """Return the form value for ``key``, or an empty string."""
        if not key:
            raise ValueError("key must not be empty")
        return self.post.get(key, "")

    def is_keep_alive(self) -> bool:
        return self.header.get("Connection") == "keep-alive" and self.version == "1.1"

    def _parse_request_line(self, line: str) -> bool:
        match = _REQUEST_LINE.fullmatch(line)
        if match is None:
            log_error("RequestLine Error")
            return False
        self.method, self.path, self.version = match.groups()
        self.state = ParseState.HEADERS
        return True

    def _parse_path(self) -> None:
        if self.path == "/":
            self.path = "/index.html"
        elif self.path in DEFAULT_HTML:
            self.path += ".html"

    def _parse_header(self, line: str) -> None:
        match = _HEADER_LINE.fullmatch(line)
        if match is None:
            self.state = ParseState.BODY
        else:
            self.header[match.group(1)] = match.group(2)

    def _parse_body(self, line: str) -> None:
        self.body = line
        self._parse_post()
        self.state = ParseState.FINISH
        log_debug("Body:%s, len:%d", line, len(line))

    def _parse_post(self) -> None:
        if (
            self.method == "POST"
            and self.header.get("Content-Type") == "application/x-www-form-urlencoded"
        ):
            self._parse_form_urlencoded()
            tag = DEFAULT_HTML_TAG.get(self.path)
            if tag is not None:
                log_debug("Tag:%d", tag)
                # No credential store is configured, so every login or
                # registration is accepted.
                self.path = "/welcome.html"

    def _parse_form_urlencoded(self) -> None:
        if not self.body:
            return
        key = ""
        pieces = self.body.split("&")
        for piece in pieces[:-1]:
            parts = piece.split("=")
            if len(parts) > 1:
                key = unquote_plus(parts[-2])
            value = unquote_plus(parts[-1])
            self.post[key] = value
            log_debug("%s = %s", key, value)
        parts = pieces[-1].split("=")
        if len(parts) > 1:
            key = unquote_plus(parts[-2])
        if key not in self.post and parts[-1]:
            self.post[key] = unquote_plus(parts[-1])