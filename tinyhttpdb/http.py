"""HTTP/1.1 request and response messages: building, parsing and MIME lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Union

MAX_HEADERS = 32
MAX_HTTP_REQUEST_SIZE = 4096
MAX_STATUS_TEXT = 63
CRLF = "\r\n"
DEFAULT_MIME = "application/octet-stream"

_MIME_TYPES = {
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".txt": "text/plain",
    ".js": "application/javascript",
    ".json": "application/json",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".ico": "image/x-icon",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
}


class HttpError(ValueError):
    """Raised for malformed, oversized or otherwise invalid HTTP messages."""


class Header(NamedTuple):
    name: str
    value: str


def _append_header(headers: list[Header], name: str | None, value: str | None) -> None:
    if len(headers) >= MAX_HEADERS:
        raise HttpError("header limit reached")
    if name is None or value is None:
        raise HttpError("invalid header")
    headers.append(Header(str(name), str(value)))


def _header_lines(headers: list[Header]) -> str:
    return "".join(f"{h.name}: {h.value}{CRLF}" for h in headers)


@dataclass
class HttpRequest:
    """An HTTP request with a text body."""

    method: str = "GET"
    path: str = "/"
    version: str = "HTTP/1.1"
    headers: list[Header] = field(default_factory=list)
    body: str = ""

    @property
    def body_size(self) -> int:
        return len(self.body.encode("utf-8"))

    def add_header(self, name: str, value: str) -> None:
        """Append a header; raises HttpError past the header limit."""
        _append_header(self.headers, name, value)

    def describe(self) -> str:
        """Return a human-readable dump of the request."""
        lines = [
            "Request print",
            "",
            f"method: {self.method}",
            f"path: {self.path}",
            f"version: {self.version}",
            "",
            f"({len(self.headers)}) Headers:",
            "",
            *(f"{h.name}: {h.value}" for h in self.headers),
            "",
            f"body: {self.body}",
        ]
        return "\n".join(lines) + "\n"


@dataclass
class HttpResponse:
    """An HTTP response; the body is kept as bytes."""

    version: str = "HTTP/1.1"
    status_code: int = 200
    status_text: str = "OK"
    headers: list[Header] = field(default_factory=list)
    body: Union[bytes, str] = b""
    body_mime: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def body_size(self) -> int:
        return len(self.body)

    def add_header(self, name: str, value: str) -> None:
        """Append a header; raises HttpError past the header limit."""
        _append_header(self.headers, name, value)

    def describe(self) -> str:
        """Return a human-readable dump of the response."""
        lines = [
            "Response print",
            "",
            f"version: {self.version}",
            f"status code: {self.status_code}",
            f"status text: {self.status_text}",
            "",
            f"({len(self.headers)}) Headers:",
            "",
            *(f"{h.name}: {h.value}" for h in self.headers),
            f"body: {self.body.decode('utf-8', errors='replace')}",
            "",
            f"body_size: {self.body_size}",
            "",
            f"body_mime: {self.body_mime}",
        ]
        return "\n".join(lines) + "\n"


def get_mime_type(path: str) -> str:
    """Return the MIME type for the extension after the last dot in *path*."""
    dot = path.rfind(".")
    if dot < 0:
        return DEFAULT_MIME
    return _MIME_TYPES.get(path[dot:], DEFAULT_MIME)


def build_http_request(req: HttpRequest) -> str:
    """Serialise a request; raises HttpError if it exceeds the size limit."""
    head = f"{req.method} {req.path} {req.version}{CRLF}{_header_lines(req.headers)}{CRLF}"
    body = req.body or ""
    size = len(head.encode("utf-8")) + len(body.encode("utf-8")) + 1
    if size > MAX_HTTP_REQUEST_SIZE:
        raise HttpError("request too large")
    return head + body


def parse_http_request(request_str: Union[str, bytes]) -> HttpRequest:
    """Parse raw request text; a body is kept only for POST and PUT."""
    if isinstance(request_str, bytes):
        request_str = request_str.decode("utf-8", errors="replace")

    line_end = request_str.find(CRLF)
    if line_end < 0:
        raise HttpError("request line not terminated")
    parts = request_str[:line_end].split()
    if len(parts) < 3:
        raise HttpError("malformed request line")
    method, path, version = parts[:3]

    headers: list[Header] = []
    pos = line_end + 2
    while not request_str.startswith(CRLF, pos):
        end = request_str.find(CRLF, pos)
        if end < 0:
            raise HttpError("headers not terminated by a blank line")
        line = request_str[pos:end]
        if len(headers) < MAX_HEADERS:
            name, sep, value = line.partition(":")
            if not sep or not name:
                raise HttpError(f"malformed header line: {line!r}")
            headers.append(Header(name, value.lstrip()))
        pos = end + 2
    pos += 2

    body = request_str[pos:] if method in ("POST", "PUT") else ""
    return HttpRequest(method=method, path=path, version=version, headers=headers, body=body)


def build_http_response(res: HttpResponse, include_body: bool) -> bytes:
    """Serialise a response; non-image bodies stop at the first NUL byte."""
    head = (
        f"{res.version} {res.status_code} {res.status_text}{CRLF}"
        f"{_header_lines(res.headers)}{CRLF}"
    )
    out = head.encode("utf-8")
    if include_body and res.body:
        if res.body_mime.startswith("image/"):
            out += res.body
        else:
            out += res.body.split(b"\0", 1)[0]
    return out


def make_error_response(status_code: int, status_text: str, body_message: str) -> HttpResponse:
    """Build an error response; the status text is capped at 63 characters."""
    return HttpResponse(
        status_code=status_code,
        status_text=status_text[:MAX_STATUS_TEXT],
        body=body_message,
    )