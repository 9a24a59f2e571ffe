"""SQLite storage for the users table, with plain-text and JSON-like row output."""

from __future__ import annotations

import sqlite3
from typing import Callable, Optional, Sequence

DEFAULT_DB_PATH = "./z_server_files/database.db"

Row = Sequence[Optional[str]]
RowCallback = Callable[[Sequence[str], Row], object]

_CREATE_USERS = (
    "CREATE TABLE IF NOT EXISTS users ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "name TEXT NOT NULL, "
    "age INTEGER NOT NULL"
    ");"
)


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a statement fails."""


def _as_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def format_row(columns: Sequence[str], values: Row) -> str:
    """Render one row as 'column = value' lines followed by a blank line."""
    lines = "".join(
        f"{col} = {'NULL' if val is None else val}\n" for col, val in zip(columns, values)
    )
    return lines + "\n"


class Database:
    """A SQLite connection in autocommit mode."""

    def __init__(self, path: str = DEFAULT_DB_PATH) -> None:
        try:
            self._conn = sqlite3.connect(path, isolation_level=None)
        except sqlite3.Error as exc:
            raise DatabaseError(f"cannot open database: {exc}") from exc

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def execute(self, sql: str) -> None:
        """Run one or more SQL statements."""
        try:
            self._conn.executescript(sql)
        except (sqlite3.Error, sqlite3.Warning) as exc:
            raise DatabaseError(f"SQL error: {exc}") from exc

    def query(self, sql: str, callback: RowCallback) -> None:
        """Call *callback(columns, values)* for each row, values as text or None.

        A truthy return from the callback aborts the query with DatabaseError.
        """
        try:
            cursor = self._conn.execute(sql)
            columns = [d[0] for d in cursor.description or ()]
            for row in cursor:
                if callback(columns, [_as_text(v) for v in row]):
                    raise DatabaseError("SQL error: query aborted")
        except (sqlite3.Error, sqlite3.Warning) as exc:
            raise DatabaseError(f"SQL error: {exc}") from exc

    def query_json(self, sql: str) -> str:
        """Return the rows as a JSON-style array of objects with text values."""
        objects: list[str] = []

        def collect(columns: Sequence[str], values: Row) -> None:
            fields = ", ".join(
                f'"{col}": "{"NULL" if val is None else val}"'
                for col, val in zip(columns, values)
            )
            objects.append("{" + fields + "}")

        self.query(sql, collect)
        return "[" + ", ".join(objects) + "]"

    def create_user_table(self) -> None:
        self.execute(_CREATE_USERS)

    def print_all_users(self) -> None:
        """Print every row of the users table."""
        self.query("SELECT * FROM users;", lambda cols, vals: print(format_row(cols, vals), end=""))