"""A minimal client that posts a small text request to the server."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Optional

from .http import HttpError, HttpRequest, build_http_request

PORT = 8080
DEFAULT_HOST = "127.0.0.1"
RESPONSE_BUFFER = 1024


def make_client_request() -> HttpRequest:
    """Build the sample POST request the client sends."""
    req = HttpRequest(method="POST", path="/database.json", version="HTTP/1.1", body="xxxxx")
    req.add_header("Host", "localhost")
    req.add_header("Content-Type", "text/plain")
    req.add_header("Content-Length", str(req.body_size))
    return req


def run_client(host: str = DEFAULT_HOST, port: int = PORT) -> str:
    """Send the sample request and return the first chunk of the reply."""
    with socket.create_connection((host, port)) as sock:
        print("Connected to server.")
        wire = build_http_request(make_client_request())
        sock.sendall(wire.encode("utf-8"))
        print(f"\nRequest: \n{wire}")
        reply = sock.recv(RESPONSE_BUFFER).decode("utf-8", errors="replace")
        print(f"\nResponse:\n{reply}")
    return reply


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Send a sample request to the server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    try:
        run_client(args.host, args.port)
    except (OSError, HttpError) as exc:
        print(f"Failed to run client: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())