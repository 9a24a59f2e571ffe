# tinyhttpdb

A small HTTP/1.1 server written with the Python standard library alone. It
serves static files from a directory and exposes a tiny API over a SQLite
table of users (`id`, `name`, `age`). A matching client sends a sample
request to the server and prints what comes back.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running the server

```
tinyhttpdb-server
```

The same entry point is available as `python -m tinyhttpdb.server`.

Options:

| Option          | Default                 | Meaning                              |
|-----------------|-------------------------|--------------------------------------|
| `--host HOST`   | all interfaces          | address to bind                      |
| `--port PORT`   | `8080`                  | port to listen on                    |
| `--root DIR`    | `z_server_files`        | directory static files are served from |
| `--db FILE`     | `<root>/database.db`    | SQLite database file                 |

The `users` table is created on start-up if it does not exist. Stop the
server with Ctrl+C.

The server is single-threaded and answers one request per connection: it
reads a single chunk of at most 4095 bytes, answers, and closes the
connection. A request that cannot be parsed gets `400 Bad Request`.

### Routes

A path that does not begin with `/` is rejected with a `500`.

Any path that does not start with `/api/` is looked up as a file under the
served directory. The content type is chosen from the file extension
(`.html`, `.htm`, `.css`, `.txt`, `.js`, `.json`, `.pdf`, `.png`, `.jpg`,
`.jpeg`, `.gif`, `.svg`, `.webp`, `.ico`, `.mp3`, `.wav`, `.mp4`; anything
else is `application/octet-stream`). A missing file yields
`404 File not found`.

Paths under `/api/`:

| Method | Path                  | Effect                                                                   |
|--------|-----------------------|--------------------------------------------------------------------------|
| GET    | `/api/entries...`     | All users as a JSON-style array of objects, every value as a string      |
| POST   | `/api/add_entry...`   | Body `name=<name>&age=<age>` inserts a user and answers `303 See Other` with `Location: http://localhost:8080/index.html` |
| DELETE | `/api/entries/<id>`   | Deletes the user with that id (id `0` if none is given)                  |
| PUT    | any                   | Answers `200 OK` and changes nothing                                     |

Other methods under `/api/` answer `500 Unknown Method`. Other paths for
GET, POST and DELETE, a POST body without a `name=` field, and database
failures all answer `500 Could not write to db`. A missing or non-numeric
age is stored as `0`.

## Running the client

With the server running:

```
tinyhttpdb-client [--host HOST] [--port PORT]
```

By default the client connects to `127.0.0.1:8080`, sends a
`POST /database.json` request with the text body `xxxxx`, and prints the
request and the first 1024 bytes of the server's response. The server
treats that path as a file request.

## Using the library

`tinyhttpdb.http` holds the message types and helpers:

- `HttpRequest` and `HttpResponse` dataclasses, each with `add_header()`
  (at most 32 headers) and `describe()` for a readable dump.
- `parse_http_request()` parses raw text or bytes; a body is kept only for
  `POST` and `PUT`.
- `build_http_request()` serialises a request; more than 4096 bytes is an
  error.
- `build_http_response(res, include_body)` returns bytes; non-image bodies
  stop at the first NUL byte.
- `make_error_response()` and `get_mime_type()`.

```python
from tinyhttpdb.http import (
    build_http_response,
    get_mime_type,
    make_error_response,
    parse_http_request,
)

req = parse_http_request("GET /index.html HTTP/1.1\r\nHost: localhost\r\n\r\n")
print(req.method, req.path)

print(get_mime_type("index.html"))  # text/html

res = make_error_response(404, "File not found", "")
print(build_http_response(res, True))
```

`tinyhttpdb.db.Database` wraps a SQLite connection in autocommit mode and
works as a context manager. `execute()` runs SQL, `query()` calls a
callback with the column names and the row values as text, `query_json()`
returns the rows as a JSON-style string, and `print_all_users()` prints the
users table with `format_row()`.

```python
from tinyhttpdb.db import Database

with Database("users.db") as db:
    db.create_user_table()
    db.execute("INSERT INTO users (name, age) VALUES ('Ada', 36);")
    print(db.query_json("SELECT * FROM users;"))
```

The API handlers (`handle_get`, `handle_post`, `handle_put`,
`handle_delete` in `tinyhttpdb.api`) and the dispatcher
`tinyhttpdb.server.handle_request()` take an `HttpRequest` and a `Database`
and return an `HttpResponse`, so they can be called without a socket.

Errors from parsing or building messages raise `HttpError`; failed SQL
raises `DatabaseError`.

## What it does not do

- `query_json()` does not escape values, so a name holding a double quote
  produces text that is not valid JSON.
- File responses carry no headers (no `Content-Type` or `Content-Length`);
  the connection is closed after each response.
- There is no keep-alive, no concurrency, no TLS, and requests larger than
  one 4095-byte read are cut short.