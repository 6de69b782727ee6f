"""Building HTTP responses for static files under a resource directory."""

from __future__ import annotations

import mmap
import os
import stat
from typing import Optional, Union

from tinyweb.buffer import Buffer
from tinyweb.logger import log_debug

SUFFIX_TYPE = {
    ".html": "text/html",
    ".xml": "text/xml",
    ".xhtml": "application/xhtml+xml",
    ".txt": "text/plain",
    ".rtf": "application/rtf",
    ".pdf": "application/pdf",
    ".word": "application/nsword",
    ".png": "image/png",
    ".gif": "image/gif",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".au": "audio/basic",
    ".mpeg": "video/mpeg",
    ".mpg": "video/mpeg",
    ".avi": "video/x-msvideo",
    ".gz": "application/x-gzip",
    ".tar": "application/x-tar",
    ".css": "text/css ",
    ".js": "text/javascript ",
}

CODE_STATUS = {
    200: "OK",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
}

CODE_PATH = {
    400: "/400.html",
    403: "/403.html",
    404: "/404.html",
}


class HttpResponse:
    """Response for one request: status line, headers and a memory-mapped file.

    ``code``, ``is_keep_alive``, ``path`` and ``src_dir`` describe the
    response being built; the file body is reached through :meth:`file`.
    """

    def __init__(self) -> None:
        self.code = -1
        self.is_keep_alive = False
        self.path = ""
        self.src_dir = ""
        self._file: Optional[mmap.mmap] = None
        self._file_size = 0

    def init(
        self,
        src_dir: Union[str, os.PathLike],
        path: str,
        is_keep_alive: bool = False,
        code: int = -1,
    ) -> None:
        """Prepare to answer a request for ``path`` under ``src_dir``."""
        src = os.fspath(src_dir)
        if not src:
            raise ValueError("src_dir must not be empty")
        self.unmap_file()
        self.code = code
        self.is_keep_alive = is_keep_alive
        self.path = path
        self.src_dir = src
        self._file_size = 0

    def make_response(self, buff: Buffer) -> None:
        """Append the status line and headers to ``buff`` and map the file."""
        info = self._stat()
        if info is None or stat.S_ISDIR(info.st_mode):
            self.code = 404
        elif not info.st_mode & stat.S_IROTH:
            self.code = 403
        elif self.code == -1:
            self.code = 200
        self._error_html()
        self._add_state_line(buff)
        self._add_header(buff)
        self._add_content(buff)

    def unmap_file(self) -> None:
        """Release the mapped file, if any."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def file(self) -> Optional[mmap.mmap]:
        """The mapped file body, or None if nothing is mapped."""
        return self._file

    def file_len(self) -> int:
        """Size of the resource file as last seen by stat."""
        return self._file_size

    def _full_path(self) -> str:
        return self.src_dir + self.path

    def _stat(self) -> Optional[os.stat_result]:
        try:
            info = os.stat(self._full_path())
        except OSError:
            return None
        self._file_size = info.st_size
        return info

    def _error_html(self) -> None:
        error_path = CODE_PATH.get(self.code)
        if error_path is not None:
            self.path = error_path
            self._stat()

    def _add_state_line(self, buff: Buffer) -> None:
        status = CODE_STATUS.get(self.code)
        if status is None:
            self.code = 400
            status = CODE_STATUS[400]
        buff.append(f"HTTP/1.1 {self.code} {status}\r\n")

    def _add_header(self, buff: Buffer) -> None:
        buff.append("Connection: ")
        if self.is_keep_alive:
            buff.append("keep-alive\r\n")
            buff.append("keep-alive: max=6, timeout=120\r\n")
        else:
            buff.append("close\r\n")
        buff.append(f"Content-type: {self._file_type()}\r\n")

    def _add_content(self, buff: Buffer) -> None:
        full_path = self._full_path()
        try:
            with open(full_path, "rb") as fh:
                if self._file_size > 0:
                    self._file = mmap.mmap(
                        fh.fileno(), self._file_size, access=mmap.ACCESS_READ
                    )
        except (OSError, ValueError):
            self._error_content(buff, "File NotFound!")
            return
        log_debug("file path %s", full_path)
        buff.append(f"Content-length: {self._file_size}\r\n\r\n")

    def _file_type(self) -> str:
        dot = self.path.rfind(".")
        if dot < 0:
            return "text/plain"
        return SUFFIX_TYPE.get(self.path[dot:], "text/plain")

    def _error_content(self, buff: Buffer, message: str) -> None:
        status = CODE_STATUS.get(self.code, "Bad Request")
        body = (
            "<html><title>Error</title>"
            '<body bgcolor="ffffff">'
            f"{self.code} : {status}\n"
            f"<p>{message}</p>"
            "<hr><em>TinyWebServer</em></body></html>"
        ).encode("utf-8")
        buff.append(f"Content-length: {len(body)}\r\n\r\n")
        buff.append(body)