import os

import pytest

from tinyweb.buffer import Buffer
from tinyweb.httpresponse import HttpResponse


def _respond(src, path, keep_alive=False, code=-1):
    response = HttpResponse()
    response.init(str(src), path, keep_alive, code)
    buff = Buffer()
    response.make_response(buff)
    return response, buff.peek()


def _write(path, content, mode=0o644):
    path.write_bytes(content)
    os.chmod(path, mode)


def test_existing_file_is_served_with_ok_status(tmp_path):
    content = b"<html>hello</html>"
    _write(tmp_path / "index.html", content)
    response, data = _respond(tmp_path, "/index.html")
    assert data.startswith(b"HTTP/1.1 200 OK\r\n")
    assert b"Connection: close\r\n" in data
    assert b"Content-type: text/html\r\n" in data
    assert data.endswith(f"Content-length: {len(content)}\r\n\r\n".encode())
    assert response.code == 200
    assert response.file_len() == len(content)
    assert bytes(response.file()) == content
    response.unmap_file()


def test_explicit_code_is_kept_for_readable_file(tmp_path):
    _write(tmp_path / "a.txt", b"abc")
    response, data = _respond(tmp_path, "/a.txt", code=200)
    assert response.code == 200
    assert b"Content-type: text/plain\r\n" in data
    response.unmap_file()


def test_keep_alive_headers(tmp_path):
    _write(tmp_path / "index.html", b"x")
    response, data = _respond(tmp_path, "/index.html", keep_alive=True)
    assert b"Connection: keep-alive\r\n" in data
    assert b"keep-alive: max=6, timeout=120\r\n" in data
    response.unmap_file()


def test_missing_file_without_error_page_gives_error_body(tmp_path):
    response, data = _respond(tmp_path, "/nothing.html")
    head, sep, body = data.partition(b"\r\n\r\n")
    assert sep
    assert head.startswith(b"HTTP/1.1 404 Not Found\r\n")
    length = int(head.rsplit(b"Content-length: ", 1)[1])
    assert length == len(body)
    assert b"404 : Not Found\n" in body
    assert b"<p>File NotFound!</p>" in body
    assert response.file() is None


def test_missing_file_serves_404_page(tmp_path):
    page = b"<html>missing</html>"
    _write(tmp_path / "404.html", page)
    response, data = _respond(tmp_path, "/gone.html", code=200)
    assert data.startswith(b"HTTP/1.1 404 Not Found\r\n")
    assert response.path == "/404.html"
    assert bytes(response.file()) == page
    response.unmap_file()


def test_directory_is_not_found(tmp_path):
    (tmp_path / "sub").mkdir()
    response, data = _respond(tmp_path, "/sub")
    assert response.code == 404
    assert data.startswith(b"HTTP/1.1 404 Not Found\r\n")


def test_unreadable_file_is_forbidden(tmp_path):
    _write(tmp_path / "secret.html", b"hidden", mode=0o600)
    _write(tmp_path / "403.html", b"forbidden page")
    response, data = _respond(tmp_path, "/secret.html")
    assert response.code == 403
    assert data.startswith(b"HTTP/1.1 403 Forbidden\r\n")
    assert bytes(response.file()) == b"forbidden page"
    response.unmap_file()


def test_unknown_code_becomes_bad_request(tmp_path):
    _write(tmp_path / "index.html", b"x")
    response, data = _respond(tmp_path, "/index.html", code=500)
    assert response.code == 400
    assert data.startswith(b"HTTP/1.1 400 Bad Request\r\n")
    response.unmap_file()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("style.css", b"Content-type: text/css \r\n"),
        ("app.js", b"Content-type: text/javascript \r\n"),
        ("photo.jpg", b"Content-type: image/jpeg\r\n"),
        ("noext", b"Content-type: text/plain\r\n"),
        ("data.bin", b"Content-type: text/plain\r\n"),
    ],
)
def test_content_type_from_suffix(tmp_path, name, expected):
    _write(tmp_path / name, b"payload")
    response, data = _respond(tmp_path, "/" + name)
    assert expected in data
    response.unmap_file()


def test_empty_file_has_zero_length_and_no_mapping(tmp_path):
    _write(tmp_path / "empty.txt", b"")
    response, data = _respond(tmp_path, "/empty.txt")
    assert data.endswith(b"Content-length: 0\r\n\r\n")
    assert response.file() is None
    assert response.file_len() == 0


def test_unmap_releases_file(tmp_path):
    _write(tmp_path / "index.html", b"body")
    response, _ = _respond(tmp_path, "/index.html")
    response.unmap_file()
    assert response.file() is None


def test_init_resets_previous_mapping(tmp_path):
    _write(tmp_path / "index.html", b"body")
    response, _ = _respond(tmp_path, "/index.html")
    response.init(str(tmp_path), "/other.html", False, -1)
    assert response.file() is None
    assert response.file_len() == 0
    assert response.path == "/other.html"


def test_empty_src_dir_is_rejected():
    with pytest.raises(ValueError):
        HttpResponse().init("", "/index.html")