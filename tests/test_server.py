import socket
import threading
import time

import pytest

from tinyhttpdb.db import Database
from tinyhttpdb.http import HttpError, HttpRequest, HttpResponse, build_http_response
from tinyhttpdb.server import handle_file_request, handle_request, send_response, serve


@pytest.fixture
def db():
    database = Database(":memory:")
    database.create_user_table()
    yield database
    database.close()


def _read_all(sock):
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def _free_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def test_handle_request_none(db):
    res = handle_request(None, db)
    assert (res.status_code, res.status_text) == (500, "req null")


def test_handle_request_requires_leading_slash(db):
    res = handle_request(HttpRequest(path="index.html"), db)
    assert res.status_code == 500


def test_handle_request_unknown_api_method(db):
    res = handle_request(HttpRequest(method="PATCH", path="/api/entries"), db)
    assert (res.status_code, res.status_text) == (500, "Unknown Method")


def test_handle_request_dispatches_api(db):
    res = handle_request(HttpRequest(method="GET", path="/api/entries"), db)
    assert res.status_code == 200
    assert res.body == b"[]"


def test_handle_request_serves_from_root(db, tmp_path):
    (tmp_path / "index.html").write_text("<p>hello</p>")
    res = handle_request(HttpRequest(path="/index.html"), db, str(tmp_path))
    assert res.status_code == 200
    assert res.body == b"<p>hello</p>"
    assert res.body_mime == "text/html"


def test_handle_file_request_missing(tmp_path):
    res = handle_file_request(str(tmp_path / "nope.html"))
    assert (res.status_code, res.status_text) == (404, "File not found")


def test_handle_file_request_binary(tmp_path):
    data = b"\x89PNG\x00\x01\x02"
    target = tmp_path / "pic.png"
    target.write_bytes(data)
    res = handle_file_request(str(target))
    assert res.body == data
    assert res.body_mime == "image/png"


def test_send_response_text():
    res = HttpResponse(body=b"hello", body_mime="text/html")
    left, right = socket.socketpair()
    with left, right:
        sent = send_response(res, left)
        left.shutdown(socket.SHUT_WR)
        received = _read_all(right)
    assert received == sent == build_http_response(res, True)


def test_send_response_image_keeps_nul_bytes():
    body = b"ab\x00cd"
    res = HttpResponse(body=body, body_mime="image/png")
    left, right = socket.socketpair()
    with left, right:
        send_response(res, left)
        left.shutdown(socket.SHUT_WR)
        received = _read_all(right)
    assert received == build_http_response(res, False) + body
    assert received.endswith(body)


def test_send_response_none_raises():
    left, right = socket.socketpair()
    with left, right:
        with pytest.raises(HttpError):
            send_response(None, left)


def test_serve_answers_file_request(db, tmp_path):
    page = tmp_path / "index.html"
    page.write_text("<b>ok</b>")
    port = _free_port()
    thread = threading.Thread(
        target=serve, args=(db, "127.0.0.1", port, str(tmp_path)), daemon=True
    )
    thread.start()

    reply = b""
    for _ in range(100):
        try:
            with socket.create_connection(("127.0.0.1", port), timeout=2) as client:
                client.sendall(b"GET /index.html HTTP/1.1\r\nHost: localhost\r\n\r\n")
                reply = _read_all(client)
            break
        except ConnectionRefusedError:
            time.sleep(0.05)

    expected = build_http_response(handle_file_request(str(page)), True)
    assert reply == expected
    assert reply.startswith(b"HTTP/1.1 200 OK\r\n")
    assert reply.endswith(b"\r\n\r\n<b>ok</b>")