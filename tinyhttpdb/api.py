"""Handlers for the /api/ endpoints backed by the users table."""

from __future__ import annotations

import re

from .db import Database, DatabaseError
from .http import HttpRequest, HttpResponse, make_error_response

ENTRIES_PATH = "/api/entries"
ADD_ENTRY_PATH = "/api/add_entry"
REDIRECT_LOCATION = "http://localhost:8080/index.html"

_DB_ERROR_TEXT = "Could not write to db"
_ENTRY_ID = re.compile(r"/api/entries/(\d{1,8})")
_FORM_NAME = re.compile(r"name=([^&]{1,99})")
_FORM_AGE = re.compile(r"&age=\s*(\S{1,9})")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _db_error() -> HttpResponse:
    return make_error_response(500, _DB_ERROR_TEXT, "")


def _leading_int(text: str) -> int:
    """Integer at the start of *text*, or 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _sql_text(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def handle_get(req: HttpRequest, db: Database) -> HttpResponse:
    """Return every user as a JSON array for paths under /api/entries."""
    if not req.path.startswith(ENTRIES_PATH):
        return _db_error()
    try:
        payload = db.query_json("SELECT * FROM users;")
    except DatabaseError:
        return _db_error()
    if not payload:
        return _db_error()

    res = HttpResponse(status_code=200, status_text="OK", body=payload, body_mime="application/json")
    res.add_header("Content-Length", str(res.body_size))
    res.add_header("Content-Type", "application/json")
    res.add_header("Location", "index.html")
    return res


def handle_delete(req: HttpRequest, db: Database) -> HttpResponse:
    """Delete the user whose id follows /api/entries/ in the path."""
    if not req.path.startswith(ENTRIES_PATH):
        return _db_error()
    match = _ENTRY_ID.match(req.path)
    entry_id = int(match.group(1)) if match else 0
    try:
        db.execute(f"DELETE FROM users WHERE id={entry_id};")
    except DatabaseError:
        return _db_error()
    return HttpResponse(status_code=200, status_text="OK")


def handle_put(req: HttpRequest, db: Database) -> HttpResponse:
    """Accept a PUT without changing anything."""
    return HttpResponse(status_code=200, status_text="OK")


def handle_post(req: HttpRequest, db: Database) -> HttpResponse:
    """Insert a user from a 'name=...&age=...' form body and redirect to the index."""
    if not req.path.startswith(ADD_ENTRY_PATH):
        return _db_error()

    name_match = _FORM_NAME.match(req.body or "")
    if name_match is None:
        return _db_error()
    name = name_match.group(1)
    age_match = _FORM_AGE.match(req.body, name_match.end())
    age = _leading_int(age_match.group(1)) if age_match else 0

    try:
        db.execute(f"INSERT INTO users (name, age) VALUES ({_sql_text(name)}, {age});")
    except DatabaseError:
        return _db_error()

    res = HttpResponse(status_code=303, status_text="See Other", body="")
    res.add_header("Location", REDIRECT_LOCATION)
    res.add_header("Content-Length", "0")
    return res