"""A single-threaded HTTP server for static files and the users API."""

from __future__ import annotations

import argparse
import os
import socket
import sys
from typing import Optional

from .api import handle_delete, handle_get, handle_post, handle_put
from .db import Database, DatabaseError
from .http import (
    MAX_HTTP_REQUEST_SIZE,
    HttpError,
    HttpRequest,
    HttpResponse,
    build_http_response,
    get_mime_type,
    make_error_response,
    parse_http_request,
)

PORT = 8080
ROOT = "z_server_files"
MAX_PATH_SIZE = 256
BACKLOG = 3

_API_HANDLERS = {
    "GET": handle_get,
    "POST": handle_post,
    "PUT": handle_put,
    "DELETE": handle_delete,
}


def handle_request(req: Optional[HttpRequest], db: Database, root: str = ROOT) -> HttpResponse:
    """Dispatch /api/ paths to the API and everything else to files under *root*."""
    if req is None:
        return make_error_response(500, "req null", "")
    if not req.path.startswith("/"):
        return make_error_response(500, "path must start with leading '/'", "")

    if req.path.startswith("/api/"):
        handler = _API_HANDLERS.get(req.method)
        if handler is None:
            return make_error_response(500, "Unknown Method", "")
        return handler(req, db)

    file_path = f"{root}{req.path}"[: MAX_PATH_SIZE - 1]
    return handle_file_request(file_path)


def handle_file_request(file_path: str) -> HttpResponse:
    """Serve the file at *file_path* with a MIME type taken from its extension."""
    if not os.path.isfile(file_path):
        return make_error_response(404, "File not found", "")
    try:
        with open(file_path, "rb") as fh:
            content = fh.read()
    except OSError:
        return make_error_response(500, "Could not open file for reading", "")
    return HttpResponse(
        status_code=200,
        status_text="OK",
        body=content,
        body_mime=get_mime_type(file_path),
    )


def send_response(res: Optional[HttpResponse], sock: socket.socket) -> bytes:
    """Write *res* to *sock* and return the bytes sent.

    Image and application bodies are sent raw after the head; other bodies
    go through the text serialisation.
    """
    if res is None:
        raise HttpError("no response to send")
    if res.body_mime.startswith(("image/", "application/")):
        data = build_http_response(res, False) + res.body
    else:
        data = build_http_response(res, True)
    sock.sendall(data)
    return data


def _answer(conn: socket.socket, db: Database, root: str) -> None:
    raw = conn.recv(MAX_HTTP_REQUEST_SIZE - 1)
    print(raw.decode("utf-8", errors="replace"), end="\n\n")
    try:
        req = parse_http_request(raw)
    except HttpError:
        res = make_error_response(400, "Bad Request", "")
    else:
        res = handle_request(req, db, root)
    sent = send_response(res, conn)
    print(f"Response print:\n{sent.decode('utf-8', errors='replace')}")
    print("Response sent.\n")


def serve(db: Database, host: str = "", port: int = PORT, root: str = ROOT) -> None:
    """Accept connections forever, answering one request per connection."""
    print("Starting HTTP server...")
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        print("Socket created.")
        server.bind((host, port))
        print(f"Socket bound to port {port}.")
        server.listen(BACKLOG)
        print("Listening for incoming connections...\n")
        while True:
            conn, _ = server.accept()
            with conn:
                _answer(conn, db, root)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve static files and the users API.")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--root", default=ROOT)
    parser.add_argument("--db", default=None, help="database file (default: <root>/database.db)")
    args = parser.parse_args(argv)

    db_path = args.db or os.path.join(args.root, "database.db")
    try:
        db = Database(db_path)
    except DatabaseError as exc:
        print(f"cannot open db: {exc}", file=sys.stderr)
        return 1

    with db:
        try:
            db.create_user_table()
        except DatabaseError as exc:
            print(exc, file=sys.stderr)
        try:
            serve(db, args.host, args.port, args.root)
        except KeyboardInterrupt:
            print("\nCaught SIGINT, shutting down server.")
        except OSError as exc:
            print(f"Failed to start server: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())