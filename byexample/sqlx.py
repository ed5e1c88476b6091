"""A thin wrapper around an SQLite database with schema migration."""

from __future__ import annotations

import base64
import binascii
import sqlite3
import threading
from collections.abc import Sequence
from typing import Any

SCHEMA = """
CREATE TABLE IF NOT EXISTS links (
    short_key TEXT PRIMARY KEY,
    uri       TEXT NOT NULL
);
"""

# Extended result code reported by SQLite for primary-key violations.
_SQLITE_CONSTRAINT_PRIMARYKEY = 1555


def encode_base64(value: str) -> str:
    """Encode a string to standard base64 for storage."""
    raw = value.encode("utf-8", errors="surrogateescape")
    return base64.b64encode(raw).decode("ascii")


def decode_base64(src: Any) -> str:
    """Decode a stored base64 string.

    Raises TypeError if src is not a string and ValueError if it is not
    valid base64.
    """
    if not isinstance(src, str):
        raise TypeError(f"{src!r} is {type(src).__name__}, not str")
    try:
        raw = base64.b64decode(src, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"decoding {src!r}: {exc}") from exc
    return raw.decode("utf-8", errors="surrogateescape")


class DB:
    """An SQLite connection that can be shared between threads."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._lock = threading.RLock()

    def execute(self, query: str, params: Sequence[Any] = ()) -> int:
        """Run a statement and return the number of rows it changed."""
        with self._lock:
            cursor = self._connection.execute(query, tuple(params))
            return cursor.rowcount

    def query_one(self, query: str, params: Sequence[Any] = ()) -> tuple | None:
        """Run a query and return its first row, or None if it has none."""
        with self._lock:
            cursor = self._connection.execute(query, tuple(params))
            return cursor.fetchone()

    def close(self) -> None:
        """Close the connection; later operations fail."""
        with self._lock:
            self._connection.close()

    def __enter__(self) -> DB:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def dial(dsn: str) -> DB:
    """Open the database at dsn, check it answers and migrate the schema."""
    connection = sqlite3.connect(
        dsn,
        uri=dsn.startswith("file:"),
        isolation_level=None,
        check_same_thread=False,
    )
    try:
        connection.execute("SELECT 1").fetchone()
        connection.executescript(SCHEMA)
    except sqlite3.Error:
        connection.close()
        raise
    return DB(connection)


def memory_db(name: str) -> DB:
    """Open an in-memory database shared by every connection with this name."""
    return dial(f"file:{name}?mode=memory&cache=shared")


def is_primary_key_violation(err: BaseException | None) -> bool:
    """Tell whether err reports a primary key constraint violation."""
    if not isinstance(err, sqlite3.IntegrityError):
        return False
    code = getattr(err, "sqlite_errorcode", None)
    if code is not None:
        return code == _SQLITE_CONSTRAINT_PRIMARYKEY
    # Older interpreters do not expose the result code.
    return "UNIQUE constraint failed" in str(err)