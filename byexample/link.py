"""Links and their persistent store."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from urllib.parse import urlsplit

from byexample.errors import ExistsError, InvalidRequestError, NotExistError
from byexample.sqlx import DB, decode_base64, encode_base64, is_primary_key_violation

MAX_KEY_LEN = 16
"""The maximum length of a key, in bytes."""


class LinkExistsError(ExistsError):
    """A link with the same key already exists."""

    default_message = "link already exists"


class LinkNotExistError(NotExistError):
    """No link has the requested key."""

    default_message = "link does not exist"


@dataclass(frozen=True)
class Link:
    """A short key and the URL it stands for."""

    key: str
    url: str


def validate_link_key(key: str) -> None:
    """Raise ValueError if key is blank or too long."""
    if not key.strip():
        raise ValueError("empty key")
    if len(key.encode("utf-8")) > MAX_KEY_LEN:
        raise ValueError(f"key too long (max {MAX_KEY_LEN})")


def _parse_request_uri(raw: str):
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in raw):
        raise ValueError(f"parse {raw!r}: invalid control character in URL")
    parts = urlsplit(raw)
    if not parts.scheme and not raw.startswith("/"):
        raise ValueError(f"parse {raw!r}: invalid URI for request")
    return parts


def validate_new_link(link: Link) -> None:
    """Raise ValueError if the link's key or URL is not acceptable."""
    validate_link_key(link.key)
    parts = _parse_request_uri(link.url)
    host = parts.netloc.rpartition("@")[2]
    if not host:
        raise ValueError("empty host")
    if parts.scheme not in ("http", "https"):
        raise ValueError("scheme must be http or https")


class Store:
    """Persists and retrieves links."""

    def __init__(self, db: DB) -> None:
        self.db = db

    def create(self, link: Link) -> None:
        """Persist link.

        Raises InvalidRequestError for an invalid link and LinkExistsError
        if the key is taken; database failures propagate.
        """
        try:
            validate_new_link(link)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc

        query = "INSERT INTO links (short_key, uri) VALUES (?, ?)"
        try:
            self.db.execute(query, (link.key, encode_base64(link.url)))
        except sqlite3.IntegrityError as exc:
            if is_primary_key_violation(exc):
                raise LinkExistsError() from exc
            raise

    def retrieve(self, key: str) -> Link:
        """Return the link stored under key.

        Raises InvalidRequestError for an invalid key and LinkNotExistError
        if there is no such link; database failures propagate.
        """
        try:
            validate_link_key(key)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc

        row = self.db.query_one("SELECT uri FROM links WHERE short_key = ?", (key,))
        if row is None:
            raise LinkNotExistError()
        return Link(key=key, url=decode_base64(row[0]))