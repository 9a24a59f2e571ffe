import socket
import threading

from tinyhttpdb.client import main, make_client_request, run_client
from tinyhttpdb.http import build_http_request, parse_http_request


def test_client_request_wire_format():
    wire = build_http_request(make_client_request())
    assert wire == (
        "POST /database.json HTTP/1.1\r\n"
        "Host: localhost\r\n"
        "Content-Type: text/plain\r\n"
        "Content-Length: 5\r\n"
        "\r\n"
        "xxxxx"
    )


def test_client_request_round_trips_through_parser():
    req = make_client_request()
    parsed = parse_http_request(build_http_request(req))
    assert parsed.method == req.method
    assert parsed.path == req.path
    assert parsed.body == req.body
    assert parsed.headers == req.headers


def test_run_client_exchanges_with_server():
    reply = b"HTTP/1.1 200 OK\r\n\r\n"
    received = []
    listener = socket.socket()
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    port = listener.getsockname()[1]

    def answer():
        conn, _ = listener.accept()
        with conn:
            data = b""
            while not data.endswith(b"xxxxx"):
                chunk = conn.recv(1024)
                if not chunk:
                    break
                data += chunk
            received.append(data)
            conn.sendall(reply)

    thread = threading.Thread(target=answer, daemon=True)
    thread.start()
    try:
        result = run_client("127.0.0.1", port)
    finally:
        thread.join(timeout=5)
        listener.close()

    assert result == reply.decode()
    assert received == [build_http_request(make_client_request()).encode()]


def test_main_fails_without_server():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
    assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1